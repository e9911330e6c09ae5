"""Composition root for wiring infrastructure adapters."""

from finledger.application.ledger_service import LedgerService
from finledger.application.ports.database import DatabaseEnginePort
from finledger.application.ports.ledger_store import LedgerUnitOfWorkPort
from finledger.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from finledger.infrastructure.ledger_store_factory import (
    create_ledger_unit_of_work,
)
from finledger.infrastructure.logging.logger import get_app_logger
from finledger.infrastructure.settings import LedgerSettings


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_unit_of_work(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> LedgerUnitOfWorkPort:
    """Return the configured ledger unit of work."""
    resolved_settings = settings or LedgerSettings.from_env()
    resolved_db = db_port or build_database_adapter()
    return create_ledger_unit_of_work(
        resolved_db,
        logger=get_app_logger(),
        backend=resolved_settings.backend,
    )


def build_ledger_service(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
    unit_of_work: LedgerUnitOfWorkPort | None = None,
) -> LedgerService:
    """Return a ledger service wired to the configured backend."""
    resolved_settings = settings or LedgerSettings.from_env()
    resolved_uow = unit_of_work or build_unit_of_work(
        db_port,
        settings=resolved_settings,
    )
    return LedgerService(
        resolved_uow,
        max_attempts=resolved_settings.max_conflict_retries,
        deletion_policy=resolved_settings.account_deletion_policy,
        logger=get_app_logger(),
    )


__all__ = [
    "build_database_adapter",
    "build_unit_of_work",
    "build_ledger_service",
]
