"""In-process ledger stores.

Used by tests and local runs without a database. A unit of work holds one
process-wide lock for its whole duration and restores a snapshot of both
stores when it raises, which gives the same all-or-nothing guarantee as the
SQL backend.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
import threading
from typing import Any

from finledger.application.ports.ledger_store import (
    AccountStorePort,
    LedgerUnitOfWorkPort,
    TransactionLogStorePort,
)
from finledger.domain.errors import (
    AccountNotFoundError,
    ConcurrentModificationError,
    TransactionNotFoundError,
)
from finledger.domain.models.accounts import Account
from finledger.domain.models.transactions import Transaction
from finledger.utils.decimal_utils import quantize_money


@dataclass
class InMemoryLedgerState:
    """Records shared by every session of one in-memory ledger."""

    accounts: dict[str, Account] = field(default_factory=dict)
    transactions: dict[str, Transaction] = field(default_factory=dict)

    def snapshot(self) -> "InMemoryLedgerState":
        """Return a shallow copy of both record maps."""
        return InMemoryLedgerState(dict(self.accounts), dict(self.transactions))

    def restore(self, snapshot: "InMemoryLedgerState") -> None:
        """Replace both record maps with those of ``snapshot``."""
        self.accounts = snapshot.accounts
        self.transactions = snapshot.transactions


class InMemoryAccountStore(AccountStorePort):
    """Account store over an in-memory ledger state."""

    def __init__(self, state: InMemoryLedgerState) -> None:
        self._state = state

    def get(self, account_id: str) -> Account | None:
        """Return the account or None."""
        return self._state.accounts.get(account_id)

    def get_for_update(self, account_id: str) -> Account | None:
        """Return the account for a balance write."""
        # The unit of work already holds the ledger lock.
        return self._state.accounts.get(account_id)

    def list_by_owner(self, owner_id: str) -> list[Account]:
        """Return the owner's accounts, oldest first."""
        owned = [
            account
            for account in self._state.accounts.values()
            if account.owner_id == owner_id
        ]
        return sorted(owned, key=lambda account: (account.created_at, account.id))

    def set_balance(
        self,
        account_id: str,
        new_balance: Decimal,
        expected_version: int,
    ) -> Account:
        """Store a new balance if the version still matches."""
        current = self._state.accounts.get(account_id)
        if current is None:
            raise AccountNotFoundError(account_id)
        if current.version != expected_version:
            raise ConcurrentModificationError(account_id, expected_version)
        updated = replace(
            current,
            balance=quantize_money(new_balance),
            version=current.version + 1,
            updated_at=datetime.now(timezone.utc),
        )
        self._state.accounts[account_id] = updated
        return updated

    def insert(self, account: Account) -> Account:
        """Add a new account."""
        if account.id in self._state.accounts:
            raise ValueError(f"Account already exists: {account.id}")
        self._state.accounts[account.id] = account
        return account

    def update_details(self, account_id: str, fields: dict[str, Any]) -> Account:
        """Replace descriptive account fields."""
        current = self._state.accounts.get(account_id)
        if current is None:
            raise AccountNotFoundError(account_id)
        updated = replace(current, **fields)
        self._state.accounts[account_id] = updated
        return updated

    def delete(self, account_id: str) -> None:
        """Remove the account."""
        if self._state.accounts.pop(account_id, None) is None:
            raise AccountNotFoundError(account_id)


class InMemoryTransactionLogStore(TransactionLogStorePort):
    """Transaction log over an in-memory ledger state."""

    def __init__(self, state: InMemoryLedgerState) -> None:
        self._state = state

    def insert(self, transaction: Transaction) -> Transaction:
        """Add a new transaction record."""
        if transaction.id in self._state.transactions:
            raise ValueError(f"Transaction already exists: {transaction.id}")
        self._state.transactions[transaction.id] = transaction
        return transaction

    def get(self, transaction_id: str) -> Transaction | None:
        """Return the transaction or None."""
        return self._state.transactions.get(transaction_id)

    def update(self, transaction_id: str, fields: dict[str, Any]) -> Transaction:
        """Replace fields of a stored transaction."""
        current = self._state.transactions.get(transaction_id)
        if current is None:
            raise TransactionNotFoundError(transaction_id)
        updated = replace(current, **fields)
        self._state.transactions[transaction_id] = updated
        return updated

    def delete(self, transaction_id: str) -> None:
        """Remove the transaction record."""
        if self._state.transactions.pop(transaction_id, None) is None:
            raise TransactionNotFoundError(transaction_id)

    def list_by_owner(self, owner_id: str) -> list[Transaction]:
        """Return the owner's transactions, newest date first."""
        owned = [
            transaction
            for transaction in self._state.transactions.values()
            if transaction.owner_id == owner_id
        ]
        return sorted(
            owned,
            key=lambda transaction: (transaction.date, transaction.created_at),
            reverse=True,
        )

    def list_by_account(self, account_id: str) -> list[Transaction]:
        """Return transactions touching the account, oldest first."""
        referencing = [
            transaction
            for transaction in self._state.transactions.values()
            if account_id in (transaction.account_id, transaction.to_account_id)
        ]
        return sorted(
            referencing,
            key=lambda transaction: (transaction.created_at, transaction.id),
        )


class InMemoryLedgerSession:
    """Both in-memory stores over one shared state."""

    def __init__(self, state: InMemoryLedgerState) -> None:
        self.accounts = InMemoryAccountStore(state)
        self.transactions = InMemoryTransactionLogStore(state)


class InMemoryLedgerUnitOfWork(LedgerUnitOfWorkPort):
    """Serialized units of work over an in-memory ledger."""

    def __init__(self, state: InMemoryLedgerState | None = None) -> None:
        self.state = state or InMemoryLedgerState()
        self._lock = threading.RLock()

    @contextmanager
    def begin(self) -> Iterator[InMemoryLedgerSession]:
        """Hold the ledger lock and roll back on any error."""
        with self._lock:
            snapshot = self.state.snapshot()
            try:
                yield InMemoryLedgerSession(self.state)
            except BaseException:
                self.state.restore(snapshot)
                raise


__all__ = [
    "InMemoryLedgerState",
    "InMemoryAccountStore",
    "InMemoryTransactionLogStore",
    "InMemoryLedgerSession",
    "InMemoryLedgerUnitOfWork",
]
