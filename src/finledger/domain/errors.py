"""Exceptions raised by the ledger."""

from decimal import Decimal

from finledger.domain.models.validation import (
    ValidationViolation,
    get_error_message,
)


class LedgerError(Exception):
    """Base class for every ledger failure."""


class ValidationFailedError(LedgerError):
    """One or more validator rules rejected a candidate.

    Attributes:
        violations: Every violation found, in report order.
    """

    def __init__(self, violations: list[ValidationViolation]) -> None:
        self.violations = list(violations)
        super().__init__(get_error_message(self.violations))

    def messages(self) -> list[str]:
        """Return the violation messages in report order."""
        return [violation.message for violation in self.violations]


class InsufficientBalanceError(ValidationFailedError):
    """A debit would drive an account balance below zero.

    Attributes:
        account_id: Account that would be overdrawn.
        available: Balance available on that account before the debit.
    """

    def __init__(
        self,
        account_id: str,
        available: Decimal,
        violations: list[ValidationViolation] | None = None,
    ) -> None:
        self.account_id = account_id
        self.available = available
        if not violations:
            violations = [
                ValidationViolation(
                    field="amount",
                    message=f"Insufficient balance. Available: {available:.2f}",
                    code="insufficient_balance",
                )
            ]
        super().__init__(violations)


class NotFoundError(LedgerError):
    """A referenced record does not exist or belongs to another owner."""


class AccountNotFoundError(NotFoundError, ValidationFailedError):
    """A referenced account does not exist for the caller."""

    def __init__(
        self,
        account_id: str | None,
        violations: list[ValidationViolation] | None = None,
    ) -> None:
        self.account_id = account_id
        if not violations:
            violations = [
                ValidationViolation(
                    field="account_id",
                    message=f"Account not found: {account_id}",
                    code="not_found",
                )
            ]
        ValidationFailedError.__init__(self, violations)


class TransactionNotFoundError(NotFoundError):
    """A referenced transaction does not exist for the caller."""

    def __init__(self, transaction_id: str) -> None:
        self.transaction_id = transaction_id
        super().__init__(f"Transaction not found: {transaction_id}")


class AccountInUseError(LedgerError):
    """An account still has transactions and may not be deleted."""

    def __init__(self, account_id: str, reference_count: int) -> None:
        self.account_id = account_id
        self.reference_count = reference_count
        super().__init__(
            f"Account {account_id} is referenced by "
            f"{reference_count} transaction(s)"
        )


class ConcurrentModificationError(LedgerError):
    """An account changed between its read and its balance write."""

    def __init__(self, account_id: str, expected_version: int) -> None:
        self.account_id = account_id
        self.expected_version = expected_version
        super().__init__(
            f"Account {account_id} was modified concurrently "
            f"(expected version {expected_version})"
        )


class StoreFailureError(LedgerError):
    """The backing store failed while reading or persisting ledger data."""


__all__ = [
    "LedgerError",
    "ValidationFailedError",
    "InsufficientBalanceError",
    "NotFoundError",
    "AccountNotFoundError",
    "TransactionNotFoundError",
    "AccountInUseError",
    "ConcurrentModificationError",
    "StoreFailureError",
]
