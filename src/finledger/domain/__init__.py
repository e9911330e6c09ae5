"""Domain package for ledger rules and core models."""

from .constants import EXPENSE, INCOME, TRANSACTION_TYPES, TRANSFER
from .errors import (
    AccountInUseError,
    AccountNotFoundError,
    ConcurrentModificationError,
    InsufficientBalanceError,
    LedgerError,
    NotFoundError,
    StoreFailureError,
    TransactionNotFoundError,
    ValidationFailedError,
)
from .models import (
    Account,
    AccountDrift,
    LedgerSummary,
    ReconciliationResult,
    Transaction,
    TransactionCandidate,
    ValidationResult,
    ValidationViolation,
)
from .services import validate_transaction

__all__ = [
    "EXPENSE",
    "INCOME",
    "TRANSACTION_TYPES",
    "TRANSFER",
    "AccountInUseError",
    "AccountNotFoundError",
    "ConcurrentModificationError",
    "InsufficientBalanceError",
    "LedgerError",
    "NotFoundError",
    "StoreFailureError",
    "TransactionNotFoundError",
    "ValidationFailedError",
    "Account",
    "AccountDrift",
    "LedgerSummary",
    "ReconciliationResult",
    "Transaction",
    "TransactionCandidate",
    "ValidationResult",
    "ValidationViolation",
    "validate_transaction",
]
