"""Use case removing a transaction and undoing its balance effect."""

from finledger.application.ports.ledger_store import (
    LedgerSession,
    LedgerUnitOfWorkPort,
)
from finledger.application.use_cases.ledger_helpers import (
    DEFAULT_MAX_ATTEMPTS,
    lock_accounts,
    run_atomic,
    write_balances,
)
from finledger.domain.errors import TransactionNotFoundError
from finledger.domain.models.transactions import Transaction
from finledger.domain.services.balances import (
    apply_effects,
    find_overdrafts,
    reverse_effects,
    transaction_effects,
)
from finledger.infrastructure.logging.logger import get_app_logger


class DeleteTransactionUseCase:
    """Delete a transaction and write the reversed balances atomically."""

    def __init__(
        self,
        unit_of_work: LedgerUnitOfWorkPort,
        logger=None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        """Initialize the use case.

        Args:
            unit_of_work: Port opening atomic units over both stores.
            logger: Optional logger compatible with logging.Logger-like API.
            max_attempts: Attempts allowed on concurrency conflicts.
        """
        self._unit_of_work = unit_of_work
        self._logger = logger or get_app_logger()
        self._max_attempts = max_attempts

    def execute(self, transaction_id: str, owner_id: str) -> Transaction:
        """Delete a transaction of ``owner_id``.

        Deleting never fails for balance reasons: removing an income that
        was already spent can leave the account negative, which is logged.

        Returns:
            Transaction: The record as it was before deletion.

        Raises:
            TransactionNotFoundError: If the transaction is not the owner's.
        """
        return run_atomic(
            self._unit_of_work,
            lambda session: self._delete(session, transaction_id, owner_id),
            max_attempts=self._max_attempts,
            logger=self._logger,
        )

    def _delete(
        self,
        session: LedgerSession,
        transaction_id: str,
        owner_id: str,
    ) -> Transaction:
        existing = session.transactions.get(transaction_id)
        if existing is None or existing.owner_id != owner_id:
            raise TransactionNotFoundError(transaction_id)

        reversal = reverse_effects(transaction_effects(existing))
        accounts = lock_accounts(session, owner_id, reversal)
        present = {
            account_id: delta
            for account_id, delta in reversal.items()
            if account_id in accounts
        }
        before = {account_id: accounts[account_id].balance for account_id in present}
        after = apply_effects(before, present)

        session.transactions.delete(transaction_id)
        write_balances(session, accounts, after)

        for account_id in find_overdrafts(before, after):
            self._logger.warning(
                f"Deleting transaction {transaction_id} left account "
                f"{account_id} at {after[account_id]}"
            )
        self._logger.info(
            f"Deleted {existing.transaction_type} {transaction_id} "
            f"of {existing.amount}"
        )
        return existing


__all__ = ["DeleteTransactionUseCase"]
