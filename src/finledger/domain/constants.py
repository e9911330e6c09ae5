"""Domain constants for the ledger."""

from decimal import Decimal

INCOME = "income"
EXPENSE = "expense"
TRANSFER = "transfer"

TRANSACTION_TYPES = (INCOME, EXPENSE, TRANSFER)

# Types that debit the source account.
DEBIT_TYPES = (EXPENSE, TRANSFER)

MAX_AMOUNT = Decimal("999999999.99")
MONEY_QUANTUM = Decimal("0.01")
MAX_SOURCE_LENGTH = 200
MAX_ACCOUNT_NAME_LENGTH = 100

DEFAULT_ACCOUNT_TYPE = "checking"
DEFAULT_CURRENCY = "USD"

# Fields a caller may change through an update.
UPDATABLE_TRANSACTION_FIELDS = (
    "transaction_type",
    "amount",
    "account_id",
    "to_account_id",
    "source",
    "date",
)
UPDATABLE_ACCOUNT_FIELDS = ("name", "account_type", "currency")


__all__ = [
    "INCOME",
    "EXPENSE",
    "TRANSFER",
    "TRANSACTION_TYPES",
    "DEBIT_TYPES",
    "MAX_AMOUNT",
    "MONEY_QUANTUM",
    "MAX_SOURCE_LENGTH",
    "MAX_ACCOUNT_NAME_LENGTH",
    "DEFAULT_ACCOUNT_TYPE",
    "DEFAULT_CURRENCY",
    "UPDATABLE_TRANSACTION_FIELDS",
    "UPDATABLE_ACCOUNT_FIELDS",
]
