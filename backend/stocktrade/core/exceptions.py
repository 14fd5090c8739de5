"""
Ledger error taxonomy.

Every error is a caller input or state error. None of them is retried and none
is fatal to the process; the HTTP layer maps ``status_code`` onto the response.
"""


class LedgerError(Exception):
    """Base class for all ledger failures."""

    code = "LedgerError"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidAmount(LedgerError):
    code = "InvalidAmount"


class InsufficientFunds(LedgerError):
    code = "InsufficientFunds"


class NoSuchHolding(LedgerError):
    code = "NoSuchHolding"


class InsufficientShares(LedgerError):
    code = "InsufficientShares"


class UnknownInstrument(LedgerError):
    code = "UnknownInstrument"
    status_code = 404


class OwnerBusy(LedgerError):
    """Per-owner lock could not be acquired within the configured timeout."""

    code = "OwnerBusy"
    status_code = 503
