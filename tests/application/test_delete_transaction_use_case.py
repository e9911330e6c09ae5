"""Tests for the DeleteTransactionUseCase."""

from decimal import Decimal

import pytest

from conftest import OWNER, TODAY
from finledger.application.use_cases.create_transaction import (
    CreateTransactionUseCase,
)
from finledger.application.use_cases.delete_transaction import (
    DeleteTransactionUseCase,
)
from finledger.domain.errors import TransactionNotFoundError
from finledger.domain.models.transactions import TransactionCandidate


@pytest.fixture
def create(unit_of_work, fake_logger):
    use_case = CreateTransactionUseCase(
        unit_of_work, logger=fake_logger, today=lambda: TODAY
    )
    return lambda candidate: use_case.execute(OWNER, candidate)


@pytest.fixture
def use_case(unit_of_work, fake_logger):
    return DeleteTransactionUseCase(unit_of_work, logger=fake_logger)


def test_deleting_transfer_restores_both_accounts(
    create, use_case, add_account, balance_of
):
    add_account("acct-a", "100.00")
    add_account("acct-b", "5.00")
    transfer = create(
        TransactionCandidate(
            transaction_type="transfer",
            amount="25",
            account_id="acct-a",
            to_account_id="acct-b",
            date="2024-06-10",
        )
    )

    deleted = use_case.execute(transfer.id, OWNER)

    assert deleted.id == transfer.id
    assert balance_of("acct-a") == Decimal("100.00")
    assert balance_of("acct-b") == Decimal("5.00")


def test_deleting_spent_income_is_allowed_and_logged(
    create, use_case, add_account, balance_of, fake_logger
):
    """Removing an income that was already spent leaves a negative balance."""
    add_account("acct-a", "0.00")
    income = create(
        TransactionCandidate(
            transaction_type="income",
            amount="50",
            account_id="acct-a",
            source="Salary",
            date="2024-06-10",
        )
    )
    create(
        TransactionCandidate(
            transaction_type="expense",
            amount="30",
            account_id="acct-a",
            source="Rent",
            date="2024-06-11",
        )
    )

    use_case.execute(income.id, OWNER)

    assert balance_of("acct-a") == Decimal("-30.00")
    fake_logger.warning.assert_called_once()
    assert "acct-a" in fake_logger.warning.call_args.args[0]


def test_delete_twice_raises_not_found(create, use_case, add_account):
    add_account("acct-a", "10.00")
    income = create(
        TransactionCandidate(
            transaction_type="income",
            amount="1",
            account_id="acct-a",
            source="Tip",
            date="2024-06-10",
        )
    )
    use_case.execute(income.id, OWNER)

    with pytest.raises(TransactionNotFoundError):
        use_case.execute(income.id, OWNER)
