"""Ledger API consumed by the presentation layer.

``LedgerService`` is the single entry point that mutates balances. It wires
the individual use cases to one unit-of-work port and writes an audit line
for every committed mutation.
"""

from collections.abc import Callable, Mapping
from datetime import date
from typing import Any

from finledger.application.ports.ledger_store import LedgerUnitOfWorkPort
from finledger.application.use_cases.create_transaction import (
    CreateTransactionUseCase,
)
from finledger.application.use_cases.delete_transaction import (
    DeleteTransactionUseCase,
)
from finledger.application.use_cases.get_ledger_summary import (
    GetLedgerSummaryUseCase,
)
from finledger.application.use_cases.ledger_helpers import DEFAULT_MAX_ATTEMPTS
from finledger.application.use_cases.list_transactions import (
    ListTransactionsUseCase,
)
from finledger.application.use_cases.manage_accounts import (
    RESTRICT,
    CreateAccountUseCase,
    DeleteAccountUseCase,
    ListAccountsUseCase,
    UpdateAccountUseCase,
)
from finledger.application.use_cases.reconcile_balances import (
    ReconcileBalancesUseCase,
)
from finledger.application.use_cases.update_transaction import (
    UpdateTransactionUseCase,
)
from finledger.application.use_cases.validate_transaction import (
    ValidateTransactionUseCase,
)
from finledger.domain.constants import DEFAULT_ACCOUNT_TYPE, DEFAULT_CURRENCY
from finledger.domain.models.accounts import Account
from finledger.domain.models.ledger import LedgerSummary, ReconciliationResult
from finledger.domain.models.transactions import (
    Transaction,
    TransactionCandidate,
)
from finledger.domain.models.validation import ValidationResult
from finledger.infrastructure.logging.logger import (
    get_app_logger,
    get_audit_logger,
)


class LedgerService:
    """Facade over the ledger use cases."""

    def __init__(
        self,
        unit_of_work: LedgerUnitOfWorkPort,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        deletion_policy: str = RESTRICT,
        logger=None,
        audit_logger=None,
        today: Callable[[], date] = date.today,
    ) -> None:
        """Initialize the service.

        Args:
            unit_of_work: Port opening atomic units over both stores.
            max_attempts: Attempts allowed on concurrency conflicts.
            deletion_policy: restrict or cascade, for account deletion.
            logger: Optional logger compatible with logging.Logger-like API.
            audit_logger: Optional logger receiving one line per mutation.
            today: Source of the reference date for the future-date rule.
        """
        resolved_logger = logger or get_app_logger()
        self._audit = audit_logger or get_audit_logger()
        self._create_transaction = CreateTransactionUseCase(
            unit_of_work,
            logger=resolved_logger,
            max_attempts=max_attempts,
            today=today,
        )
        self._update_transaction = UpdateTransactionUseCase(
            unit_of_work,
            logger=resolved_logger,
            max_attempts=max_attempts,
            today=today,
        )
        self._delete_transaction = DeleteTransactionUseCase(
            unit_of_work,
            logger=resolved_logger,
            max_attempts=max_attempts,
        )
        self._list_transactions = ListTransactionsUseCase(unit_of_work)
        self._validate_transaction = ValidateTransactionUseCase(
            unit_of_work,
            today=today,
        )
        self._create_account = CreateAccountUseCase(
            unit_of_work,
            logger=resolved_logger,
        )
        self._update_account = UpdateAccountUseCase(
            unit_of_work,
            logger=resolved_logger,
        )
        self._delete_account = DeleteAccountUseCase(
            unit_of_work,
            policy=deletion_policy,
            logger=resolved_logger,
            max_attempts=max_attempts,
        )
        self._list_accounts = ListAccountsUseCase(unit_of_work)
        self._reconcile = ReconcileBalancesUseCase(
            unit_of_work,
            logger=resolved_logger,
            max_attempts=max_attempts,
        )
        self._summary = GetLedgerSummaryUseCase(unit_of_work)

    def create_transaction(
        self,
        owner_id: str,
        candidate: TransactionCandidate,
    ) -> Transaction:
        """Commit a new transaction and its balance effect."""
        transaction = self._create_transaction.execute(owner_id, candidate)
        self._audit.info(
            f"create owner={owner_id} transaction={transaction.id} "
            f"type={transaction.transaction_type} amount={transaction.amount} "
            f"account={transaction.account_id} to={transaction.to_account_id}"
        )
        return transaction

    def update_transaction(
        self,
        transaction_id: str,
        owner_id: str,
        updates: Mapping[str, Any],
    ) -> Transaction:
        """Edit a transaction, moving balances by the difference."""
        transaction = self._update_transaction.execute(
            transaction_id, owner_id, updates
        )
        self._audit.info(
            f"update owner={owner_id} transaction={transaction.id} "
            f"type={transaction.transaction_type} amount={transaction.amount} "
            f"account={transaction.account_id} to={transaction.to_account_id}"
        )
        return transaction

    def delete_transaction(self, transaction_id: str, owner_id: str) -> None:
        """Delete a transaction and undo its balance effect."""
        deleted = self._delete_transaction.execute(transaction_id, owner_id)
        self._audit.info(
            f"delete owner={owner_id} transaction={deleted.id} "
            f"type={deleted.transaction_type} amount={deleted.amount}"
        )

    def list_transactions(self, owner_id: str) -> list[Transaction]:
        """Return the owner's transactions, newest date first."""
        return self._list_transactions.execute(owner_id)

    def validate_transaction(
        self,
        owner_id: str,
        candidate: TransactionCandidate,
    ) -> ValidationResult:
        """Check a candidate without committing it."""
        return self._validate_transaction.execute(owner_id, candidate)

    def create_account(
        self,
        owner_id: str,
        name: str,
        opening_balance: Any = 0,
        account_type: str = DEFAULT_ACCOUNT_TYPE,
        currency: str = DEFAULT_CURRENCY,
    ) -> Account:
        """Open an account at ``opening_balance``."""
        account = self._create_account.execute(
            owner_id,
            name,
            opening_balance=opening_balance,
            account_type=account_type,
            currency=currency,
        )
        self._audit.info(
            f"open owner={owner_id} account={account.id} "
            f"opening_balance={account.opening_balance}"
        )
        return account

    def update_account(
        self,
        account_id: str,
        owner_id: str,
        updates: Mapping[str, Any],
    ) -> Account:
        """Change an account's name, type or currency."""
        return self._update_account.execute(account_id, owner_id, updates)

    def delete_account(self, account_id: str, owner_id: str) -> int:
        """Delete an account under the configured policy."""
        removed = self._delete_account.execute(account_id, owner_id)
        self._audit.info(
            f"close owner={owner_id} account={account_id} "
            f"cascaded_transactions={removed}"
        )
        return removed

    def list_accounts(self, owner_id: str) -> list[Account]:
        """Return the owner's accounts."""
        return self._list_accounts.execute(owner_id)

    def reconcile_balances(
        self,
        owner_id: str,
        apply: bool = False,
    ) -> ReconciliationResult:
        """Compare cached balances with the log, optionally repairing them."""
        result = self._reconcile.execute(owner_id, apply=apply)
        if result.applied:
            self._audit.info(
                f"reconcile owner={owner_id} repaired={len(result.drifts)}"
            )
        return result

    def get_summary(self, owner_id: str) -> LedgerSummary:
        """Return income, expense and balance totals."""
        return self._summary.execute(owner_id)


__all__ = ["LedgerService"]
