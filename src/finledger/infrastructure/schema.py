"""DDL for the ledger tables."""

from finledger.application.ports.database import DatabaseEnginePort
from finledger.infrastructure.logging.logger import get_app_logger

CREATE_ACCOUNTS_SQL = """
CREATE TABLE IF NOT EXISTS ledger_accounts (
    id TEXT PRIMARY KEY,
    owner_id TEXT NOT NULL,
    name TEXT NOT NULL,
    account_type TEXT NOT NULL,
    currency TEXT NOT NULL,
    balance NUMERIC(14, 2) NOT NULL,
    opening_balance NUMERIC(14, 2) NOT NULL,
    version INTEGER NOT NULL DEFAULT 0,
    created_at TIMESTAMP NOT NULL,
    updated_at TIMESTAMP NOT NULL
)
"""

CREATE_TRANSACTIONS_SQL = """
CREATE TABLE IF NOT EXISTS ledger_transactions (
    id TEXT PRIMARY KEY,
    owner_id TEXT NOT NULL,
    transaction_type TEXT NOT NULL,
    amount NUMERIC(14, 2) NOT NULL,
    account_id TEXT NOT NULL REFERENCES ledger_accounts (id),
    to_account_id TEXT REFERENCES ledger_accounts (id),
    source TEXT NOT NULL DEFAULT '',
    date DATE NOT NULL,
    created_at TIMESTAMP NOT NULL,
    updated_at TIMESTAMP NOT NULL,
    CHECK (amount > 0),
    CHECK (transaction_type IN ('income', 'expense', 'transfer'))
)
"""

CREATE_INDEXES_SQL = (
    "CREATE INDEX IF NOT EXISTS ix_ledger_accounts_owner "
    "ON ledger_accounts (owner_id)",
    "CREATE INDEX IF NOT EXISTS ix_ledger_transactions_owner "
    "ON ledger_transactions (owner_id)",
    "CREATE INDEX IF NOT EXISTS ix_ledger_transactions_account "
    "ON ledger_transactions (account_id)",
    "CREATE INDEX IF NOT EXISTS ix_ledger_transactions_to_account "
    "ON ledger_transactions (to_account_id)",
)


def ensure_ledger_schema(db_port: DatabaseEnginePort, logger=None) -> None:
    """Create the ledger tables and indexes when missing.

    Args:
        db_port: Port providing access to the ledger engine.
        logger: Optional logger compatible with logging.Logger-like API.
    """
    resolved_logger = logger or get_app_logger()
    engine = db_port.get_ledger_engine()
    with engine.begin() as conn:
        conn.exec_driver_sql(CREATE_ACCOUNTS_SQL)
        conn.exec_driver_sql(CREATE_TRANSACTIONS_SQL)
        for statement in CREATE_INDEXES_SQL:
            conn.exec_driver_sql(statement)
    resolved_logger.info("Ledger schema is ready")


__all__ = [
    "CREATE_ACCOUNTS_SQL",
    "CREATE_TRANSACTIONS_SQL",
    "CREATE_INDEXES_SQL",
    "ensure_ledger_schema",
]
