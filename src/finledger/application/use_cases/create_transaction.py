"""Use case recording a new transaction and its balance effect.

The transaction record and the balance write(s) share one unit of work, so
a failure of either leaves neither behind.
"""

from collections.abc import Callable
from datetime import date, datetime, timezone
from uuid import uuid4

from finledger.application.ports.ledger_store import (
    LedgerSession,
    LedgerUnitOfWorkPort,
)
from finledger.application.use_cases.ledger_helpers import (
    DEFAULT_MAX_ATTEMPTS,
    load_owner_accounts,
    lock_accounts,
    normalized_fields,
    raise_for_violations,
    run_atomic,
    write_balances,
)
from finledger.domain.constants import TRANSFER
from finledger.domain.errors import InsufficientBalanceError
from finledger.domain.models.transactions import (
    Transaction,
    TransactionCandidate,
)
from finledger.domain.services.balances import (
    apply_effects,
    compute_effects,
    find_overdrafts,
)
from finledger.domain.services.validation import validate_transaction
from finledger.infrastructure.logging.logger import get_app_logger


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid4())


class CreateTransactionUseCase:
    """Validate a candidate and commit it with its balance effect."""

    def __init__(
        self,
        unit_of_work: LedgerUnitOfWorkPort,
        logger=None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        clock: Callable[[], datetime] = _utc_now,
        today: Callable[[], date] = date.today,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        """Initialize the use case.

        Args:
            unit_of_work: Port opening atomic units over both stores.
            logger: Optional logger compatible with logging.Logger-like API.
            max_attempts: Attempts allowed on concurrency conflicts.
            clock: Source of commit timestamps.
            today: Source of the reference date for the future-date rule.
            id_factory: Source of new transaction ids.
        """
        self._unit_of_work = unit_of_work
        self._logger = logger or get_app_logger()
        self._max_attempts = max_attempts
        self._clock = clock
        self._today = today
        self._id_factory = id_factory

    def execute(
        self,
        owner_id: str,
        candidate: TransactionCandidate,
    ) -> Transaction:
        """Commit ``candidate`` for ``owner_id``.

        Args:
            owner_id: Identifier of the owning user.
            candidate: Unvalidated transaction input.

        Returns:
            Transaction: The persisted transaction.

        Raises:
            ValidationFailedError: If the candidate breaks a rule.
            InsufficientBalanceError: If the debit exceeds the balance.
            AccountNotFoundError: If a referenced account is unknown.
        """
        return run_atomic(
            self._unit_of_work,
            lambda session: self._create(session, owner_id, candidate),
            max_attempts=self._max_attempts,
            logger=self._logger,
        )

    def _create(
        self,
        session: LedgerSession,
        owner_id: str,
        candidate: TransactionCandidate,
    ) -> Transaction:
        referenced = [candidate.account_id]
        if candidate.transaction_type == TRANSFER:
            referenced.append(candidate.to_account_id)
        locked = lock_accounts(session, owner_id, referenced)
        accounts = load_owner_accounts(session, owner_id, locked)

        result = validate_transaction(candidate, accounts, today=self._today())
        raise_for_violations(result.violations, candidate, accounts)

        fields = normalized_fields(candidate)
        effects = compute_effects(
            fields["transaction_type"],
            fields["amount"],
            fields["account_id"],
            fields["to_account_id"],
        )
        before = {account_id: accounts[account_id].balance for account_id in effects}
        after = apply_effects(before, effects)
        overdrafts = find_overdrafts(before, after)
        if overdrafts:
            raise InsufficientBalanceError(overdrafts[0], before[overdrafts[0]])

        now = self._clock()
        transaction = session.transactions.insert(
            Transaction(
                id=self._id_factory(),
                owner_id=owner_id,
                created_at=now,
                updated_at=now,
                **fields,
            )
        )
        write_balances(session, accounts, after)
        self._logger.info(
            f"Created {transaction.transaction_type} {transaction.id} "
            f"of {transaction.amount} on {transaction.account_id}"
        )
        return transaction


__all__ = ["CreateTransactionUseCase"]
