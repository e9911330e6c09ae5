"""Factory helpers to select the ledger store backend."""

import os

from finledger.application.ports.database import DatabaseEnginePort
from finledger.application.ports.ledger_store import LedgerUnitOfWorkPort
from finledger.infrastructure.logging.logger import get_app_logger
from finledger.infrastructure.memory_ledger_store import InMemoryLedgerUnitOfWork
from finledger.infrastructure.sql_ledger_store import SqlAlchemyLedgerUnitOfWork

SQLALCHEMY_BACKEND = "sqlalchemy"
MEMORY_BACKEND = "memory"


def create_ledger_unit_of_work(
    db_port: DatabaseEnginePort | None,
    logger=None,
    backend: str | None = None,
) -> LedgerUnitOfWorkPort:
    """Return a ledger unit of work based on configuration.

    Args:
        db_port: Port providing access to the ledger engine (SQL backend).
        logger: Optional logger compatible with logging.Logger-like API.
        backend: Optional backend override (sqlalchemy or memory).

    Returns:
        LedgerUnitOfWorkPort: Concrete unit of work implementation.

    Raises:
        ValueError: If the backend is unknown.
        RuntimeError: If the SQL backend is selected without a database port.
    """
    resolved_logger = logger or get_app_logger()
    selected_backend = (
        backend or os.getenv("LEDGER_BACKEND", SQLALCHEMY_BACKEND)
    ).strip().lower()

    if selected_backend == SQLALCHEMY_BACKEND:
        if db_port is None:
            raise RuntimeError("SQLAlchemy backend requires a database port.")
        return SqlAlchemyLedgerUnitOfWork(db_port)

    if selected_backend == MEMORY_BACKEND:
        resolved_logger.warning(
            "Using the in-memory ledger backend; data is lost on exit"
        )
        return InMemoryLedgerUnitOfWork()

    raise ValueError(
        "Unsupported ledger backend: "
        f"{selected_backend}. Expected sqlalchemy or memory."
    )


__all__ = [
    "SQLALCHEMY_BACKEND",
    "MEMORY_BACKEND",
    "create_ledger_unit_of_work",
]
