"""Shared fixtures for the ledger tests."""

from datetime import date, datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from finledger.application.ledger_service import LedgerService
from finledger.domain.models.accounts import Account
from finledger.infrastructure.memory_ledger_store import InMemoryLedgerUnitOfWork

OWNER = "owner-1"
TODAY = date(2024, 6, 30)
CREATED_AT = datetime(2024, 6, 1, 9, 0, tzinfo=timezone.utc)


def build_account(
    account_id: str,
    balance: str = "0.00",
    owner_id: str = OWNER,
    version: int = 0,
) -> Account:
    """Return an account whose opening balance equals its balance."""
    amount = Decimal(balance)
    return Account(
        id=account_id,
        owner_id=owner_id,
        name=account_id.title(),
        account_type="checking",
        currency="USD",
        balance=amount,
        opening_balance=amount,
        version=version,
        created_at=CREATED_AT,
        updated_at=CREATED_AT,
    )


@pytest.fixture
def fake_logger() -> MagicMock:
    return MagicMock()


@pytest.fixture
def unit_of_work() -> InMemoryLedgerUnitOfWork:
    return InMemoryLedgerUnitOfWork()


@pytest.fixture
def add_account(unit_of_work):
    """Insert accounts straight into the in-memory state."""

    def _add(account_id: str, balance: str = "0.00", owner_id: str = OWNER):
        account = build_account(account_id, balance, owner_id=owner_id)
        unit_of_work.state.accounts[account.id] = account
        return account

    return _add


@pytest.fixture
def balance_of(unit_of_work):
    def _balance(account_id: str) -> Decimal:
        return unit_of_work.state.accounts[account_id].balance

    return _balance


@pytest.fixture
def service(unit_of_work, fake_logger) -> LedgerService:
    return LedgerService(
        unit_of_work,
        logger=fake_logger,
        audit_logger=MagicMock(),
        today=lambda: TODAY,
    )
