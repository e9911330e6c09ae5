"""Tests for the in-memory ledger stores."""

from decimal import Decimal

import pytest

from conftest import OWNER, build_account
from finledger.domain.errors import (
    AccountNotFoundError,
    ConcurrentModificationError,
    TransactionNotFoundError,
)
from finledger.infrastructure.memory_ledger_store import InMemoryLedgerUnitOfWork


def test_set_balance_is_a_version_compare_and_swap():
    unit_of_work = InMemoryLedgerUnitOfWork()
    with unit_of_work.begin() as session:
        session.accounts.insert(build_account("acct-a", "10.00"))

    with unit_of_work.begin() as session:
        updated = session.accounts.set_balance("acct-a", Decimal("7.5"), 0)
        assert updated.balance == Decimal("7.50")
        assert updated.version == 1
        with pytest.raises(ConcurrentModificationError):
            session.accounts.set_balance("acct-a", Decimal("1"), 0)


def test_failed_unit_restores_previous_state():
    unit_of_work = InMemoryLedgerUnitOfWork()
    with unit_of_work.begin() as session:
        session.accounts.insert(build_account("acct-a", "10.00"))

    with pytest.raises(RuntimeError):
        with unit_of_work.begin() as session:
            session.accounts.set_balance("acct-a", Decimal("0"), 0)
            session.accounts.delete("acct-a")
            raise RuntimeError("abort")

    with unit_of_work.begin() as session:
        assert session.accounts.get("acct-a").balance == Decimal("10.00")


def test_missing_records_raise_not_found():
    unit_of_work = InMemoryLedgerUnitOfWork()
    with unit_of_work.begin() as session:
        with pytest.raises(AccountNotFoundError):
            session.accounts.set_balance("ghost", Decimal("1"), 0)
        with pytest.raises(AccountNotFoundError):
            session.accounts.delete("ghost")
        with pytest.raises(TransactionNotFoundError):
            session.transactions.delete("ghost")
        assert session.accounts.list_by_owner(OWNER) == []
