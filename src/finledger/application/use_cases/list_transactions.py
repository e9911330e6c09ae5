"""Use case to read an owner's transaction log."""

from finledger.application.ports.ledger_store import LedgerUnitOfWorkPort
from finledger.domain.models.transactions import Transaction


class ListTransactionsUseCase:
    """Fetch an owner's transactions, newest date first."""

    def __init__(self, unit_of_work: LedgerUnitOfWorkPort) -> None:
        """Initialize the use case with its required dependencies."""
        self._unit_of_work = unit_of_work

    def execute(self, owner_id: str) -> list[Transaction]:
        """Return every transaction of ``owner_id``."""
        with self._unit_of_work.begin() as session:
            transactions = session.transactions.list_by_owner(owner_id)
        return sorted(
            transactions,
            key=lambda transaction: (transaction.date, transaction.created_at),
            reverse=True,
        )


__all__ = ["ListTransactionsUseCase"]
