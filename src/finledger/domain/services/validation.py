"""Transaction validation rules.

Every check is an independent function returning the violations it found,
so callers can compose them or run them all through
``validate_transaction``. None of them touch a store: the owner's accounts
are passed in and "today" can be pinned for deterministic checks.
"""

from collections.abc import Iterable, Mapping
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from finledger.domain.constants import (
    DEBIT_TYPES,
    MAX_AMOUNT,
    MAX_SOURCE_LENGTH,
    MONEY_QUANTUM,
    TRANSACTION_TYPES,
    TRANSFER,
)
from finledger.domain.models.accounts import Account
from finledger.domain.models.transactions import TransactionCandidate
from finledger.domain.models.validation import (
    ValidationResult,
    ValidationViolation,
    get_error_message,
)


def parse_amount(value: Any) -> Decimal | None:
    """Convert a raw amount into a finite Decimal.

    Args:
        value: Raw amount (Decimal, int, float or numeric string).

    Returns:
        Decimal | None: Parsed amount, or None when not a finite number.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    return amount


def parse_date(value: Any) -> date | None:
    """Convert a raw date into a calendar date.

    Args:
        value: ``date``/``datetime`` instance or ISO ``YYYY-MM-DD`` string.

    Returns:
        date | None: Parsed date, or None when unparseable.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def validate_amount(amount: Any) -> list[ValidationViolation]:
    """Check that the amount is a positive, bounded money value."""
    if amount is None or (isinstance(amount, str) and not amount.strip()):
        return [ValidationViolation("amount", "Amount is required", "required")]
    parsed = parse_amount(amount)
    if parsed is None:
        return [
            ValidationViolation(
                "amount", "Amount must be a valid number", "invalid"
            )
        ]
    if parsed <= 0:
        return [
            ValidationViolation(
                "amount", "Amount must be greater than zero", "invalid"
            )
        ]
    if parsed > MAX_AMOUNT:
        return [ValidationViolation("amount", "Amount is too large", "too_large")]
    if parsed.quantize(MONEY_QUANTUM) != parsed:
        return [
            ValidationViolation(
                "amount",
                "Amount cannot have more than two decimal places",
                "invalid",
            )
        ]
    return []


def validate_account(
    account_id: str | None,
    accounts: Mapping[str, Account],
) -> list[ValidationViolation]:
    """Check that the source account is given and owned by the caller."""
    if not account_id:
        return [
            ValidationViolation("account_id", "Account is required", "required")
        ]
    if not isinstance(account_id, str):
        return [
            ValidationViolation("account_id", "Invalid account", "invalid")
        ]
    if account_id not in accounts:
        return [
            ValidationViolation(
                "account_id", "Selected account does not exist", "not_found"
            )
        ]
    return []


def validate_transaction_type(
    transaction_type: str | None,
) -> list[ValidationViolation]:
    """Check that the type is one of income, expense or transfer."""
    if not transaction_type:
        return [
            ValidationViolation(
                "transaction_type", "Transaction type is required", "required"
            )
        ]
    if transaction_type not in TRANSACTION_TYPES:
        return [
            ValidationViolation(
                "transaction_type", "Invalid transaction type", "invalid"
            )
        ]
    return []


def validate_source(
    source: str | None,
    transaction_type: str | None,
) -> list[ValidationViolation]:
    """Check the description: required except for transfers, always bounded."""
    if source is not None and not isinstance(source, str):
        return [
            ValidationViolation(
                "source", "Transaction description must be text", "invalid"
            )
        ]
    text = source or ""
    if not text.strip():
        if transaction_type == TRANSFER:
            return []
        return [
            ValidationViolation(
                "source", "Transaction description is required", "required"
            )
        ]
    if len(text) > MAX_SOURCE_LENGTH:
        return [
            ValidationViolation(
                "source",
                f"Description is too long (max {MAX_SOURCE_LENGTH} characters)",
                "too_long",
            )
        ]
    return []


def validate_date(
    value: Any,
    today: date | None = None,
) -> list[ValidationViolation]:
    """Check that the date is present, parseable and not in the future."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return [ValidationViolation("date", "Date is required", "required")]
    parsed = parse_date(value)
    if parsed is None:
        return [ValidationViolation("date", "Invalid date format", "invalid")]
    if parsed > (today or date.today()):
        return [
            ValidationViolation(
                "date", "Transaction date cannot be in the future", "future"
            )
        ]
    return []


def validate_balance(
    amount: Decimal,
    transaction_type: str,
    source_account: Account,
) -> list[ValidationViolation]:
    """Check that a debit does not exceed the source account balance."""
    if transaction_type not in DEBIT_TYPES:
        return []
    if source_account.balance < amount:
        return [
            ValidationViolation(
                "amount",
                f"Insufficient balance. Available: {source_account.balance:.2f}",
                "insufficient_balance",
            )
        ]
    return []


def validate_transfer(
    account_id: str | None,
    to_account_id: str | None,
    accounts: Mapping[str, Account],
) -> list[ValidationViolation]:
    """Check the destination account of a transfer."""
    if not to_account_id:
        return [
            ValidationViolation(
                "to_account_id",
                "Destination account is required for transfers",
                "required",
            )
        ]
    if not isinstance(to_account_id, str):
        return [
            ValidationViolation(
                "to_account_id", "Invalid destination account", "invalid"
            )
        ]
    violations = []
    if to_account_id == account_id:
        violations.append(
            ValidationViolation(
                "to_account_id",
                "Source and destination accounts cannot be the same",
                "same_account",
            )
        )
    if to_account_id not in accounts:
        violations.append(
            ValidationViolation(
                "to_account_id",
                "Destination account does not exist",
                "not_found",
            )
        )
    return violations


def validate_transaction(
    candidate: TransactionCandidate,
    accounts: Iterable[Account] | Mapping[str, Account],
    today: date | None = None,
) -> ValidationResult:
    """Run every rule against a candidate and collect all violations.

    Args:
        candidate: Unvalidated transaction input.
        accounts: The owner's accounts, with the balances to check against.
        today: Reference date for the future-date rule; defaults to today.

    Returns:
        ValidationResult: Every violation found, in rule order.
    """
    by_id = _index_accounts(accounts)
    violations: list[ValidationViolation] = []
    violations.extend(validate_amount(candidate.amount))
    violations.extend(validate_account(candidate.account_id, by_id))
    violations.extend(validate_transaction_type(candidate.transaction_type))
    violations.extend(
        validate_source(candidate.source, candidate.transaction_type)
    )
    violations.extend(validate_date(candidate.date, today=today))

    source_account = (
        by_id.get(candidate.account_id)
        if isinstance(candidate.account_id, str)
        else None
    )
    amount = parse_amount(candidate.amount)
    if (
        source_account is not None
        and amount is not None
        and amount > 0
        and candidate.transaction_type in TRANSACTION_TYPES
    ):
        violations.extend(
            validate_balance(amount, candidate.transaction_type, source_account)
        )

    if candidate.transaction_type == TRANSFER:
        violations.extend(
            validate_transfer(
                candidate.account_id,
                candidate.to_account_id,
                by_id,
            )
        )

    return ValidationResult(violations=violations)


def _index_accounts(
    accounts: Iterable[Account] | Mapping[str, Account],
) -> dict[str, Account]:
    if isinstance(accounts, Mapping):
        return dict(accounts)
    return {account.id: account for account in accounts}


__all__ = [
    "parse_amount",
    "parse_date",
    "validate_amount",
    "validate_account",
    "validate_transaction_type",
    "validate_source",
    "validate_date",
    "validate_balance",
    "validate_transfer",
    "validate_transaction",
    "get_error_message",
]
