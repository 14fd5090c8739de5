"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables and .env files.
"""

from decimal import Decimal
from typing import Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "StockTrade"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: Literal["local", "development", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    # Ledger
    STARTING_BALANCE: Decimal = Decimal("10000")
    OWNER_LOCK_TIMEOUT_SECONDS: Optional[float] = None  # None = wait for the lock

    # Storage
    STORE_BACKEND: Literal["memory", "sql"] = "memory"
    DATABASE_URL: str = "sqlite:///./stocktrade.db"
    DB_ECHO: bool = False

    # Market Data Provider
    QUOTE_PROVIDER: Literal["simulated", "yfinance"] = "simulated"
    MARKET_SEED: Optional[int] = None
    SIMULATED_STOCK_COUNT: int = 10
    MARKET_TICK_PCT: float = 0.01

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://localhost:8080"]


# Global settings instance
settings = Settings()
