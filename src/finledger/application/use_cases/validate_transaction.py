"""Use case checking a candidate without committing it."""

from collections.abc import Callable
from datetime import date

from finledger.application.ports.ledger_store import LedgerUnitOfWorkPort
from finledger.domain.models.transactions import TransactionCandidate
from finledger.domain.models.validation import ValidationResult
from finledger.domain.services.validation import validate_transaction


class ValidateTransactionUseCase:
    """Run the validator against the owner's current balances."""

    def __init__(
        self,
        unit_of_work: LedgerUnitOfWorkPort,
        today: Callable[[], date] = date.today,
    ) -> None:
        """Initialize the use case.

        Args:
            unit_of_work: Port opening units over both stores.
            today: Source of the reference date for the future-date rule.
        """
        self._unit_of_work = unit_of_work
        self._today = today

    def execute(
        self,
        owner_id: str,
        candidate: TransactionCandidate,
    ) -> ValidationResult:
        """Return every violation ``candidate`` would raise if committed."""
        with self._unit_of_work.begin() as session:
            accounts = session.accounts.list_by_owner(owner_id)
        return validate_transaction(candidate, accounts, today=self._today())


__all__ = ["ValidateTransactionUseCase"]
