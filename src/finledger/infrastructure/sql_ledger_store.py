"""SQLAlchemy-backed account and transaction stores.

Both stores of a session share one connection opened with
``engine.begin()``, so the transaction record and the balances it moves
commit or roll back together. Account rows are locked with
``SELECT ... FOR UPDATE`` where the dialect supports it, and every balance
write is a compare-and-swap on the account version.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from finledger.application.ports.database import DatabaseEnginePort
from finledger.application.ports.ledger_store import (
    AccountStorePort,
    LedgerUnitOfWorkPort,
    TransactionLogStorePort,
)
from finledger.domain.constants import (
    UPDATABLE_ACCOUNT_FIELDS,
    UPDATABLE_TRANSACTION_FIELDS,
)
from finledger.domain.errors import (
    AccountNotFoundError,
    ConcurrentModificationError,
    StoreFailureError,
    TransactionNotFoundError,
)
from finledger.domain.models.accounts import Account
from finledger.domain.models.transactions import Transaction
from finledger.utils.decimal_utils import quantize_money

ACCOUNT_COLUMNS = (
    "id, owner_id, name, account_type, currency, balance, "
    "opening_balance, version, created_at, updated_at"
)
TRANSACTION_COLUMNS = (
    "id, owner_id, transaction_type, amount, account_id, to_account_id, "
    "source, date, created_at, updated_at"
)

SELECT_ACCOUNT_SQL = text(
    f"SELECT {ACCOUNT_COLUMNS} FROM ledger_accounts WHERE id = :id"
)

SELECT_OWNER_ACCOUNTS_SQL = text(
    f"""
    SELECT {ACCOUNT_COLUMNS}
    FROM ledger_accounts
    WHERE owner_id = :owner_id
    ORDER BY created_at, id
    """
)

INSERT_ACCOUNT_SQL = text(
    """
    INSERT INTO ledger_accounts (
        id, owner_id, name, account_type, currency, balance,
        opening_balance, version, created_at, updated_at
    )
    VALUES (
        :id, :owner_id, :name, :account_type, :currency, :balance,
        :opening_balance, :version, :created_at, :updated_at
    )
    """
)

UPDATE_BALANCE_SQL = text(
    """
    UPDATE ledger_accounts
    SET balance = :balance, version = version + 1, updated_at = :updated_at
    WHERE id = :id AND version = :expected_version
    """
)

DELETE_ACCOUNT_SQL = text("DELETE FROM ledger_accounts WHERE id = :id")

SELECT_TRANSACTION_SQL = text(
    f"SELECT {TRANSACTION_COLUMNS} FROM ledger_transactions WHERE id = :id"
)

SELECT_OWNER_TRANSACTIONS_SQL = text(
    f"""
    SELECT {TRANSACTION_COLUMNS}
    FROM ledger_transactions
    WHERE owner_id = :owner_id
    ORDER BY date DESC, created_at DESC
    """
)

SELECT_ACCOUNT_TRANSACTIONS_SQL = text(
    f"""
    SELECT {TRANSACTION_COLUMNS}
    FROM ledger_transactions
    WHERE account_id = :account_id OR to_account_id = :account_id
    ORDER BY created_at, id
    """
)

INSERT_TRANSACTION_SQL = text(
    """
    INSERT INTO ledger_transactions (
        id, owner_id, transaction_type, amount, account_id, to_account_id,
        source, date, created_at, updated_at
    )
    VALUES (
        :id, :owner_id, :transaction_type, :amount, :account_id,
        :to_account_id, :source, :date, :created_at, :updated_at
    )
    """
)

DELETE_TRANSACTION_SQL = text("DELETE FROM ledger_transactions WHERE id = :id")


def _to_param(value: Any) -> Any:
    """Convert Python values into driver-neutral bind parameters."""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def _coerce_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _coerce_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _row_to_account(row) -> Account:
    return Account(
        id=row.id,
        owner_id=row.owner_id,
        name=row.name,
        account_type=row.account_type,
        currency=row.currency,
        balance=quantize_money(row.balance),
        opening_balance=quantize_money(row.opening_balance),
        version=int(row.version),
        created_at=_coerce_datetime(row.created_at),
        updated_at=_coerce_datetime(row.updated_at),
    )


def _row_to_transaction(row) -> Transaction:
    return Transaction(
        id=row.id,
        owner_id=row.owner_id,
        transaction_type=row.transaction_type,
        amount=quantize_money(row.amount),
        account_id=row.account_id,
        to_account_id=row.to_account_id,
        source=row.source or "",
        date=_coerce_date(row.date),
        created_at=_coerce_datetime(row.created_at),
        updated_at=_coerce_datetime(row.updated_at),
    )


def _build_update(table: str, fields: dict[str, Any], allowed: tuple) -> Any:
    """Build an UPDATE statement restricted to whitelisted columns."""
    unknown = [key for key in fields if key not in allowed]
    if unknown:
        raise ValueError(f"Cannot update columns: {', '.join(sorted(unknown))}")
    assignments = ", ".join(f"{key} = :{key}" for key in fields)
    return text(f"UPDATE {table} SET {assignments} WHERE id = :id")


class SqlAlchemyAccountStore(AccountStorePort):
    """Account store bound to an open connection."""

    def __init__(self, conn: Connection) -> None:
        """Initialize the store.

        Args:
            conn: Connection inside an active database transaction.
        """
        self._conn = conn

    def get(self, account_id: str) -> Account | None:
        row = self._conn.execute(SELECT_ACCOUNT_SQL, {"id": account_id}).first()
        return _row_to_account(row) if row else None

    def get_for_update(self, account_id: str) -> Account | None:
        query = SELECT_ACCOUNT_SQL
        # SQLite has no row locks; its database lock serializes writers.
        if self._conn.dialect.name != "sqlite":
            query = text(query.text + " FOR UPDATE")
        row = self._conn.execute(query, {"id": account_id}).first()
        return _row_to_account(row) if row else None

    def list_by_owner(self, owner_id: str) -> list[Account]:
        rows = self._conn.execute(
            SELECT_OWNER_ACCOUNTS_SQL, {"owner_id": owner_id}
        ).all()
        return [_row_to_account(row) for row in rows]

    def set_balance(
        self,
        account_id: str,
        new_balance: Decimal,
        expected_version: int,
    ) -> Account:
        result = self._conn.execute(
            UPDATE_BALANCE_SQL,
            {
                "id": account_id,
                "balance": _to_param(quantize_money(new_balance)),
                "updated_at": _to_param(datetime.now(timezone.utc)),
                "expected_version": expected_version,
            },
        )
        if result.rowcount == 0:
            if self.get(account_id) is None:
                raise AccountNotFoundError(account_id)
            raise ConcurrentModificationError(account_id, expected_version)
        return self.get(account_id)

    def insert(self, account: Account) -> Account:
        self._conn.execute(
            INSERT_ACCOUNT_SQL,
            {
                "id": account.id,
                "owner_id": account.owner_id,
                "name": account.name,
                "account_type": account.account_type,
                "currency": account.currency,
                "balance": _to_param(account.balance),
                "opening_balance": _to_param(account.opening_balance),
                "version": account.version,
                "created_at": _to_param(account.created_at),
                "updated_at": _to_param(account.updated_at),
            },
        )
        return account

    def update_details(self, account_id: str, fields: dict[str, Any]) -> Account:
        statement = _build_update(
            "ledger_accounts",
            fields,
            UPDATABLE_ACCOUNT_FIELDS + ("updated_at",),
        )
        params = {key: _to_param(value) for key, value in fields.items()}
        params["id"] = account_id
        result = self._conn.execute(statement, params)
        if result.rowcount == 0:
            raise AccountNotFoundError(account_id)
        return self.get(account_id)

    def delete(self, account_id: str) -> None:
        result = self._conn.execute(DELETE_ACCOUNT_SQL, {"id": account_id})
        if result.rowcount == 0:
            raise AccountNotFoundError(account_id)


class SqlAlchemyTransactionLogStore(TransactionLogStorePort):
    """Transaction log bound to an open connection."""

    def __init__(self, conn: Connection) -> None:
        """Initialize the store.

        Args:
            conn: Connection inside an active database transaction.
        """
        self._conn = conn

    def insert(self, transaction: Transaction) -> Transaction:
        self._conn.execute(
            INSERT_TRANSACTION_SQL,
            {
                "id": transaction.id,
                "owner_id": transaction.owner_id,
                "transaction_type": transaction.transaction_type,
                "amount": _to_param(transaction.amount),
                "account_id": transaction.account_id,
                "to_account_id": transaction.to_account_id,
                "source": transaction.source,
                "date": _to_param(transaction.date),
                "created_at": _to_param(transaction.created_at),
                "updated_at": _to_param(transaction.updated_at),
            },
        )
        return transaction

    def get(self, transaction_id: str) -> Transaction | None:
        row = self._conn.execute(
            SELECT_TRANSACTION_SQL, {"id": transaction_id}
        ).first()
        return _row_to_transaction(row) if row else None

    def update(self, transaction_id: str, fields: dict[str, Any]) -> Transaction:
        statement = _build_update(
            "ledger_transactions",
            fields,
            UPDATABLE_TRANSACTION_FIELDS + ("updated_at",),
        )
        params = {key: _to_param(value) for key, value in fields.items()}
        params["id"] = transaction_id
        result = self._conn.execute(statement, params)
        if result.rowcount == 0:
            raise TransactionNotFoundError(transaction_id)
        return self.get(transaction_id)

    def delete(self, transaction_id: str) -> None:
        result = self._conn.execute(DELETE_TRANSACTION_SQL, {"id": transaction_id})
        if result.rowcount == 0:
            raise TransactionNotFoundError(transaction_id)

    def list_by_owner(self, owner_id: str) -> list[Transaction]:
        rows = self._conn.execute(
            SELECT_OWNER_TRANSACTIONS_SQL, {"owner_id": owner_id}
        ).all()
        return [_row_to_transaction(row) for row in rows]

    def list_by_account(self, account_id: str) -> list[Transaction]:
        rows = self._conn.execute(
            SELECT_ACCOUNT_TRANSACTIONS_SQL, {"account_id": account_id}
        ).all()
        return [_row_to_transaction(row) for row in rows]


class SqlAlchemyLedgerSession:
    """Both stores bound to the same connection."""

    def __init__(self, conn: Connection) -> None:
        self.accounts = SqlAlchemyAccountStore(conn)
        self.transactions = SqlAlchemyTransactionLogStore(conn)


class SqlAlchemyLedgerUnitOfWork(LedgerUnitOfWorkPort):
    """Unit of work mapping to one database transaction."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the unit of work.

        Args:
            db_port: Port providing access to the ledger engine.
        """
        self._db_port = db_port

    @contextmanager
    def begin(self) -> Iterator[SqlAlchemyLedgerSession]:
        """Open a database transaction shared by both stores.

        Raises:
            StoreFailureError: If SQLAlchemy fails; the transaction is
                rolled back first.
        """
        engine = self._db_port.get_ledger_engine()
        try:
            with engine.begin() as conn:
                yield SqlAlchemyLedgerSession(conn)
        except SQLAlchemyError as exc:
            raise StoreFailureError(f"Ledger store failure: {exc}") from exc


__all__ = [
    "SqlAlchemyAccountStore",
    "SqlAlchemyTransactionLogStore",
    "SqlAlchemyLedgerSession",
    "SqlAlchemyLedgerUnitOfWork",
]
