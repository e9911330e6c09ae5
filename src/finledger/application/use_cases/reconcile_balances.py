"""Use case rebuilding cached balances from the transaction log.

Balances are a cache of the log. This replays an owner's live
transactions from each account's opening balance, reports every account
whose cached balance drifted and can rewrite those balances.
"""

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
from finledger.domain.models.ledger import AccountDrift, ReconciliationResult
from finledger.domain.services.balances import replay_balances
from finledger.infrastructure.logging.logger import get_app_logger


class ReconcileBalancesUseCase:
    """Compare cached balances against a replay of the log."""

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

    def execute(self, owner_id: str, apply: bool = False) -> ReconciliationResult:
        """Replay the owner's log and optionally repair drifting balances.

        Args:
            owner_id: Owner whose accounts are checked.
            apply: Rewrite drifting balances when True.

        Returns:
            ReconciliationResult: Drifts found and whether they were fixed.
        """
        return run_atomic(
            self._unit_of_work,
            lambda session: self._reconcile(session, owner_id, apply),
            max_attempts=self._max_attempts,
            logger=self._logger,
        )

    def _reconcile(
        self,
        session: LedgerSession,
        owner_id: str,
        apply: bool,
    ) -> ReconciliationResult:
        owned = session.accounts.list_by_owner(owner_id)
        accounts = lock_accounts(session, owner_id, [a.id for a in owned])
        transactions = session.transactions.list_by_owner(owner_id)
        expected = replay_balances(accounts.values(), transactions)

        drifts = [
            AccountDrift(
                account_id=account_id,
                cached_balance=accounts[account_id].balance,
                expected_balance=expected[account_id],
            )
            for account_id in sorted(accounts)
            if accounts[account_id].balance != expected[account_id]
        ]
        for drift in drifts:
            self._logger.warning(
                f"Balance drift on account {drift.account_id}: cached "
                f"{drift.cached_balance}, expected {drift.expected_balance}"
            )
        if apply and drifts:
            write_balances(
                session,
                accounts,
                {drift.account_id: drift.expected_balance for drift in drifts},
            )
            self._logger.info(
                f"Rewrote {len(drifts)} drifting balance(s) for owner {owner_id}"
            )
        return ReconciliationResult(
            owner_id=owner_id,
            checked_accounts=len(accounts),
            drifts=drifts,
            applied=apply and bool(drifts),
        )


__all__ = ["ReconcileBalancesUseCase"]
