"""Domain models package."""

from .accounts import Account
from .ledger import AccountDrift, LedgerSummary, ReconciliationResult
from .transactions import Transaction, TransactionCandidate
from .validation import (
    ValidationResult,
    ValidationViolation,
    get_error_message,
)

__all__ = [
    "Account",
    "AccountDrift",
    "LedgerSummary",
    "ReconciliationResult",
    "Transaction",
    "TransactionCandidate",
    "ValidationResult",
    "ValidationViolation",
    "get_error_message",
]
