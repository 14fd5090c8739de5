"""
Database engine and session factory.

Only used when the SQL portfolio store is selected (STORE_BACKEND=sql).
"""

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from stocktrade.core.config import settings

Base = declarative_base()

engine: Optional[Engine] = None


def make_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine; in-memory SQLite shares one connection across threads."""
    if database_url.startswith("sqlite") and ":memory:" in database_url:
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if database_url.startswith("sqlite"):
        return create_engine(database_url, echo=echo, connect_args={"check_same_thread": False})
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


def get_engine() -> Engine:
    """Get the process-wide engine, creating it on first use."""
    global engine
    if engine is None:
        engine = make_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)
    return engine


def make_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(bind=bind, expire_on_commit=False)


def init_db(bind: Engine) -> None:
    """Create all tables registered on Base."""
    import stocktrade.models  # noqa: F401  (registers the tables)

    Base.metadata.create_all(bind)


def close_db() -> None:
    """Dispose of the process-wide engine."""
    global engine
    if engine is not None:
        engine.dispose()
        engine = None
