"""Tests for the CreateTransactionUseCase."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from conftest import OWNER, TODAY
from finledger.application.use_cases.create_transaction import (
    CreateTransactionUseCase,
)
from finledger.domain.errors import (
    AccountNotFoundError,
    InsufficientBalanceError,
    ValidationFailedError,
)
from finledger.domain.models.transactions import TransactionCandidate
from finledger.infrastructure.memory_ledger_store import InMemoryAccountStore

NOW = datetime(2024, 6, 30, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def use_case(unit_of_work, fake_logger):
    return CreateTransactionUseCase(
        unit_of_work,
        logger=fake_logger,
        clock=lambda: NOW,
        today=lambda: TODAY,
        id_factory=lambda: "tx-1",
    )


def test_execute_persists_normalized_transaction(use_case, add_account, balance_of):
    """Stored fields are quantized, stripped and parsed."""
    add_account("acct-a", "10.00")

    transaction = use_case.execute(
        OWNER,
        TransactionCandidate(
            transaction_type="income",
            amount="12.5",
            account_id="acct-a",
            to_account_id="acct-b",
            source="  Salary  ",
            date="2024-06-15",
        ),
    )

    assert transaction.id == "tx-1"
    assert transaction.amount == Decimal("12.50")
    assert transaction.source == "Salary"
    assert transaction.to_account_id is None
    assert transaction.date.isoformat() == "2024-06-15"
    assert transaction.created_at == NOW
    assert balance_of("acct-a") == Decimal("22.50")


def test_execute_bumps_account_version(use_case, add_account, unit_of_work):
    add_account("acct-a", "10.00")

    use_case.execute(
        OWNER,
        TransactionCandidate(
            transaction_type="expense",
            amount="1",
            account_id="acct-a",
            source="Coffee",
            date="2024-06-15",
        ),
    )

    assert unit_of_work.state.accounts["acct-a"].version == 1


def test_execute_reports_all_violations(use_case, add_account):
    add_account("acct-a", "10.00")

    with pytest.raises(ValidationFailedError) as exc_info:
        use_case.execute(
            OWNER,
            TransactionCandidate(
                transaction_type="expense",
                amount="-1",
                account_id="acct-a",
                date="2099-01-01",
            ),
        )

    assert exc_info.value.messages() == [
        "Amount must be greater than zero",
        "Transaction description is required",
        "Transaction date cannot be in the future",
    ]


def test_unknown_account_wins_over_other_errors(use_case, add_account):
    add_account("acct-a", "10.00")

    with pytest.raises(AccountNotFoundError) as exc_info:
        use_case.execute(
            OWNER,
            TransactionCandidate(
                transaction_type="transfer",
                amount="500",
                account_id="acct-a",
                to_account_id="ghost",
                date="2024-06-15",
            ),
        )

    assert exc_info.value.account_id == "ghost"
    assert {v.code for v in exc_info.value.violations} == {
        "insufficient_balance",
        "not_found",
    }


def test_transfer_over_balance_is_rejected(use_case, add_account, balance_of):
    add_account("acct-a", "10.00")
    add_account("acct-b", "0.00")

    with pytest.raises(InsufficientBalanceError):
        use_case.execute(
            OWNER,
            TransactionCandidate(
                transaction_type="transfer",
                amount="10.01",
                account_id="acct-a",
                to_account_id="acct-b",
                date="2024-06-15",
            ),
        )

    assert balance_of("acct-a") == Decimal("10.00")
    assert balance_of("acct-b") == Decimal("0.00")


def test_conflicting_write_is_retried(
    use_case, add_account, balance_of, fake_logger, monkeypatch
):
    """A version conflict re-runs the whole operation in a fresh unit."""
    add_account("acct-a", "100.00")
    original = InMemoryAccountStore.get_for_update
    raced = []

    def _racing_get_for_update(self, account_id):
        account = original(self, account_id)
        if not raced:
            raced.append(account_id)
            # Another writer bumps the version after our read.
            self.set_balance(account_id, account.balance, account.version)
        return account

    monkeypatch.setattr(
        InMemoryAccountStore, "get_for_update", _racing_get_for_update
    )

    use_case.execute(
        OWNER,
        TransactionCandidate(
            transaction_type="expense",
            amount="40",
            account_id="acct-a",
            source="Groceries",
            date="2024-06-15",
        ),
    )

    assert raced == ["acct-a"]
    assert balance_of("acct-a") == Decimal("60.00")
    fake_logger.warning.assert_called_once()
