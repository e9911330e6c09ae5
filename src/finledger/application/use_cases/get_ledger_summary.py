"""Use case aggregating an owner's ledger for dashboards."""

from decimal import Decimal

from finledger.application.ports.ledger_store import LedgerUnitOfWorkPort
from finledger.domain.constants import EXPENSE, INCOME
from finledger.domain.models.ledger import LedgerSummary


class GetLedgerSummaryUseCase:
    """Compute income, expense and balance totals.

    Transfers move money between the owner's own accounts, so they count
    toward neither income nor expense.
    """

    def __init__(self, unit_of_work: LedgerUnitOfWorkPort) -> None:
        """Initialize the use case with its required dependencies."""
        self._unit_of_work = unit_of_work

    def execute(self, owner_id: str) -> LedgerSummary:
        """Return the summary for ``owner_id``."""
        with self._unit_of_work.begin() as session:
            accounts = session.accounts.list_by_owner(owner_id)
            transactions = session.transactions.list_by_owner(owner_id)

        total_income = sum(
            (t.amount for t in transactions if t.transaction_type == INCOME),
            Decimal("0.00"),
        )
        total_expense = sum(
            (t.amount for t in transactions if t.transaction_type == EXPENSE),
            Decimal("0.00"),
        )
        total_balance = sum(
            (account.balance for account in accounts),
            Decimal("0.00"),
        )
        return LedgerSummary(
            total_income=total_income,
            total_expense=total_expense,
            total_balance=total_balance,
            account_count=len(accounts),
            transaction_count=len(transactions),
        )


__all__ = ["GetLedgerSummaryUseCase"]
