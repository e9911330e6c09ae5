"""Use case editing a committed transaction.

The original effect is reversed on every account it touched (both sides
of a transfer), the edited transaction is validated against the reversed
balances, and the new effect is applied on top. Any field may change,
including the type, the amount and the accounts.
"""

from collections.abc import Callable, Mapping
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Any

from finledger.application.ports.ledger_store import (
    LedgerSession,
    LedgerUnitOfWorkPort,
)
from finledger.application.use_cases.ledger_helpers import (
    DEFAULT_MAX_ATTEMPTS,
    load_owner_accounts,
    lock_accounts,
    merge_candidate,
    normalized_fields,
    raise_for_violations,
    run_atomic,
    write_balances,
)
from finledger.domain.errors import (
    InsufficientBalanceError,
    TransactionNotFoundError,
)
from finledger.domain.models.transactions import Transaction
from finledger.domain.services.balances import (
    apply_effects,
    compute_effects,
    find_overdrafts,
    reverse_effects,
    transaction_effects,
)
from finledger.domain.services.validation import validate_transaction
from finledger.infrastructure.logging.logger import get_app_logger


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UpdateTransactionUseCase:
    """Reverse a transaction's effect and re-apply its edited version."""

    def __init__(
        self,
        unit_of_work: LedgerUnitOfWorkPort,
        logger=None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        clock: Callable[[], datetime] = _utc_now,
        today: Callable[[], date] = date.today,
    ) -> None:
        """Initialize the use case.

        Args:
            unit_of_work: Port opening atomic units over both stores.
            logger: Optional logger compatible with logging.Logger-like API.
            max_attempts: Attempts allowed on concurrency conflicts.
            clock: Source of modification timestamps.
            today: Source of the reference date for the future-date rule.
        """
        self._unit_of_work = unit_of_work
        self._logger = logger or get_app_logger()
        self._max_attempts = max_attempts
        self._clock = clock
        self._today = today

    def execute(
        self,
        transaction_id: str,
        owner_id: str,
        updates: Mapping[str, Any],
    ) -> Transaction:
        """Apply ``updates`` to a transaction of ``owner_id``.

        Args:
            transaction_id: Transaction to edit.
            owner_id: Identifier of the owning user.
            updates: Field name to new value.

        Returns:
            Transaction: The updated transaction.

        Raises:
            TransactionNotFoundError: If the transaction is not the owner's.
            ValidationFailedError: If the edited transaction breaks a rule.
            InsufficientBalanceError: If an account would be overdrawn.
        """
        return run_atomic(
            self._unit_of_work,
            lambda session: self._update(
                session, transaction_id, owner_id, updates
            ),
            max_attempts=self._max_attempts,
            logger=self._logger,
        )

    def _update(
        self,
        session: LedgerSession,
        transaction_id: str,
        owner_id: str,
        updates: Mapping[str, Any],
    ) -> Transaction:
        existing = session.transactions.get(transaction_id)
        if existing is None or existing.owner_id != owner_id:
            raise TransactionNotFoundError(transaction_id)

        candidate = merge_candidate(existing, updates)
        old_effects = transaction_effects(existing)
        locked = lock_accounts(
            session,
            owner_id,
            [*old_effects, candidate.account_id, candidate.to_account_id],
        )
        accounts = load_owner_accounts(session, owner_id, locked)

        reversal = {
            account_id: delta
            for account_id, delta in reverse_effects(old_effects).items()
            if account_id in accounts
        }
        start = {account_id: accounts[account_id].balance for account_id in accounts}
        reversed_balances = apply_effects(start, reversal)
        reversed_accounts = {
            account_id: replace(account, balance=reversed_balances[account_id])
            for account_id, account in accounts.items()
        }

        result = validate_transaction(
            candidate, reversed_accounts, today=self._today()
        )
        raise_for_violations(result.violations, candidate, reversed_accounts)

        fields = normalized_fields(candidate)
        new_effects = compute_effects(
            fields["transaction_type"],
            fields["amount"],
            fields["account_id"],
            fields["to_account_id"],
        )
        after = apply_effects(reversed_balances, new_effects)
        touched = set(reversal) | set(new_effects)
        overdrafts = find_overdrafts(
            {account_id: start[account_id] for account_id in touched},
            {account_id: after[account_id] for account_id in touched},
        )
        if overdrafts:
            raise InsufficientBalanceError(
                overdrafts[0], reversed_balances[overdrafts[0]]
            )

        updated = session.transactions.update(
            transaction_id,
            {**fields, "updated_at": self._clock()},
        )
        write_balances(
            session,
            accounts,
            {account_id: after[account_id] for account_id in touched},
        )
        self._logger.info(
            f"Updated transaction {transaction_id}: "
            f"{existing.transaction_type} {existing.amount} -> "
            f"{updated.transaction_type} {updated.amount}"
        )
        return updated


__all__ = ["UpdateTransactionUseCase"]
