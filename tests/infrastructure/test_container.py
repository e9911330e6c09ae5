"""Tests for the composition root."""

from unittest.mock import MagicMock

from finledger.application import ledger_service as ledger_service_module
from finledger.application.ledger_service import LedgerService
from finledger.infrastructure import container
from finledger.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from finledger.infrastructure.memory_ledger_store import InMemoryLedgerUnitOfWork
from finledger.infrastructure.settings import LedgerSettings
from finledger.infrastructure.sql_ledger_store import SqlAlchemyLedgerUnitOfWork


def test_build_database_adapter_returns_sqlalchemy_adapter():
    assert isinstance(
        container.build_database_adapter(), SqlAlchemyDatabaseEngineAdapter
    )


def test_build_unit_of_work_follows_settings(monkeypatch):
    monkeypatch.setattr(container, "get_app_logger", MagicMock)

    sql = container.build_unit_of_work(
        MagicMock(), settings=LedgerSettings(backend="sqlalchemy")
    )
    memory = container.build_unit_of_work(
        MagicMock(), settings=LedgerSettings(backend="memory")
    )

    assert isinstance(sql, SqlAlchemyLedgerUnitOfWork)
    assert isinstance(memory, InMemoryLedgerUnitOfWork)


def test_build_ledger_service_uses_settings(monkeypatch):
    monkeypatch.setattr(container, "get_app_logger", MagicMock)
    monkeypatch.setattr(ledger_service_module, "get_audit_logger", MagicMock)
    unit_of_work = InMemoryLedgerUnitOfWork()

    service = container.build_ledger_service(
        settings=LedgerSettings(
            backend="memory",
            max_conflict_retries=7,
            account_deletion_policy="cascade",
        ),
        unit_of_work=unit_of_work,
    )

    assert isinstance(service, LedgerService)
    assert service._delete_account._policy == "cascade"
    assert service._create_transaction._max_attempts == 7
