"""Ports for the account and transaction stores.

Both stores are only reachable through a ``LedgerSession`` opened by a
``LedgerUnitOfWorkPort``: every read and write made through one session
belongs to the same atomic unit, which commits when the ``begin()`` block
exits normally and rolls back when it raises.
"""

from contextlib import AbstractContextManager
from decimal import Decimal
from typing import Any, Protocol

from finledger.domain.models.accounts import Account
from finledger.domain.models.transactions import Transaction


class AccountStorePort(Protocol):
    """Port exposing account records and their cached balances."""

    def get(self, account_id: str) -> Account | None:
        """Return the account, or None when it does not exist."""

    def get_for_update(self, account_id: str) -> Account | None:
        """Return the account and hold it until the unit ends."""

    def list_by_owner(self, owner_id: str) -> list[Account]:
        """Return the owner's accounts ordered by creation."""

    def set_balance(
        self,
        account_id: str,
        new_balance: Decimal,
        expected_version: int,
    ) -> Account:
        """Write a balance if the account is still at ``expected_version``.

        Raises:
            ConcurrentModificationError: If the version moved on.
        """

    def insert(self, account: Account) -> Account:
        """Persist a new account."""

    def update_details(self, account_id: str, fields: dict[str, Any]) -> Account:
        """Update descriptive fields (name, type, currency)."""

    def delete(self, account_id: str) -> None:
        """Remove an account."""


class TransactionLogStorePort(Protocol):
    """Port exposing the transaction log."""

    def insert(self, transaction: Transaction) -> Transaction:
        """Append a transaction record."""

    def get(self, transaction_id: str) -> Transaction | None:
        """Return the transaction, or None when it does not exist."""

    def update(self, transaction_id: str, fields: dict[str, Any]) -> Transaction:
        """Update fields of an existing record."""

    def delete(self, transaction_id: str) -> None:
        """Remove a record."""

    def list_by_owner(self, owner_id: str) -> list[Transaction]:
        """Return the owner's records, newest date first."""

    def list_by_account(self, account_id: str) -> list[Transaction]:
        """Return records referencing the account as source or destination."""


class LedgerSession(Protocol):
    """Stores bound to one atomic unit of work."""

    accounts: AccountStorePort
    transactions: TransactionLogStorePort


class LedgerUnitOfWorkPort(Protocol):
    """Port opening atomic units spanning both stores."""

    def begin(self) -> AbstractContextManager[LedgerSession]:
        """Open a unit of work.

        Raises:
            StoreFailureError: If the backing store fails.
        """


__all__ = [
    "AccountStorePort",
    "TransactionLogStorePort",
    "LedgerSession",
    "LedgerUnitOfWorkPort",
]
