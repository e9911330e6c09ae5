"""Domain models for ledger-wide reports."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class AccountDrift:
    """Difference between a cached balance and the replayed log."""

    account_id: str
    cached_balance: Decimal
    expected_balance: Decimal

    @property
    def delta(self) -> Decimal:
        """Return expected minus cached balance."""
        return self.expected_balance - self.cached_balance


@dataclass(frozen=True)
class ReconciliationResult:
    """Outcome of a reconciliation run for one owner.

    Attributes:
        owner_id: Owner whose accounts were checked.
        checked_accounts: Number of accounts replayed.
        drifts: Accounts whose cached balance differs from the log.
        applied: True when drifting balances were rewritten.
    """

    owner_id: str
    checked_accounts: int
    drifts: list[AccountDrift]
    applied: bool

    @property
    def is_consistent(self) -> bool:
        """Return True when every cached balance matched the log."""
        return not self.drifts


@dataclass(frozen=True)
class LedgerSummary:
    """Aggregated figures for an owner's ledger."""

    total_income: Decimal
    total_expense: Decimal
    total_balance: Decimal
    account_count: int
    transaction_count: int

    @property
    def net_cashflow(self) -> Decimal:
        """Return total_income minus total_expense."""
        return self.total_income - self.total_expense


__all__ = ["AccountDrift", "ReconciliationResult", "LedgerSummary"]
