"""Tests for the ReconcileBalancesUseCase."""

from dataclasses import replace
from decimal import Decimal

import pytest

from conftest import OWNER, TODAY
from finledger.application.use_cases.create_transaction import (
    CreateTransactionUseCase,
)
from finledger.application.use_cases.reconcile_balances import (
    ReconcileBalancesUseCase,
)
from finledger.domain.models.transactions import TransactionCandidate


@pytest.fixture
def seeded(unit_of_work, add_account, fake_logger):
    add_account("acct-a", "100.00")
    add_account("acct-b", "0.00")
    CreateTransactionUseCase(
        unit_of_work, logger=fake_logger, today=lambda: TODAY
    ).execute(
        OWNER,
        TransactionCandidate(
            transaction_type="transfer",
            amount="40",
            account_id="acct-a",
            to_account_id="acct-b",
            date="2024-06-10",
        ),
    )
    return unit_of_work


def _corrupt(unit_of_work, account_id, balance):
    account = unit_of_work.state.accounts[account_id]
    unit_of_work.state.accounts[account_id] = replace(
        account, balance=Decimal(balance)
    )


def test_consistent_ledger_reports_no_drift(seeded, fake_logger):
    result = ReconcileBalancesUseCase(seeded, logger=fake_logger).execute(OWNER)

    assert result.is_consistent
    assert result.checked_accounts == 2
    assert result.applied is False


def test_drift_is_reported_without_writing(seeded, fake_logger, balance_of):
    _corrupt(seeded, "acct-b", "55.00")

    result = ReconcileBalancesUseCase(seeded, logger=fake_logger).execute(OWNER)

    assert [d.account_id for d in result.drifts] == ["acct-b"]
    assert result.drifts[0].expected_balance == Decimal("40.00")
    assert result.drifts[0].delta == Decimal("-15.00")
    assert balance_of("acct-b") == Decimal("55.00")
    fake_logger.warning.assert_called_once()


def test_apply_rewrites_drifting_balances(seeded, fake_logger, balance_of):
    _corrupt(seeded, "acct-a", "0.00")

    result = ReconcileBalancesUseCase(seeded, logger=fake_logger).execute(
        OWNER, apply=True
    )

    assert result.applied is True
    assert balance_of("acct-a") == Decimal("60.00")
    follow_up = ReconcileBalancesUseCase(seeded, logger=fake_logger).execute(OWNER)
    assert follow_up.is_consistent
