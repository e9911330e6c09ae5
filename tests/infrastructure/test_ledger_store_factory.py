"""Tests for the ledger store factory."""

from unittest.mock import MagicMock

import pytest

from finledger.infrastructure.ledger_store_factory import (
    create_ledger_unit_of_work,
)
from finledger.infrastructure.memory_ledger_store import InMemoryLedgerUnitOfWork
from finledger.infrastructure.sql_ledger_store import SqlAlchemyLedgerUnitOfWork


def test_factory_selects_sqlalchemy_backend():
    unit_of_work = create_ledger_unit_of_work(
        MagicMock(), logger=MagicMock(), backend="sqlalchemy"
    )

    assert isinstance(unit_of_work, SqlAlchemyLedgerUnitOfWork)


def test_factory_reads_backend_from_environment(monkeypatch):
    logger = MagicMock()
    monkeypatch.setenv("LEDGER_BACKEND", "memory")

    unit_of_work = create_ledger_unit_of_work(None, logger=logger)

    assert isinstance(unit_of_work, InMemoryLedgerUnitOfWork)
    logger.warning.assert_called_once()


def test_factory_requires_database_for_sql_backend():
    with pytest.raises(RuntimeError):
        create_ledger_unit_of_work(None, logger=MagicMock(), backend="sqlalchemy")


def test_factory_rejects_unknown_backend():
    with pytest.raises(ValueError):
        create_ledger_unit_of_work(MagicMock(), logger=MagicMock(), backend="redis")
