"""Tests for the account management use cases."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from conftest import OWNER, TODAY
from finledger.application.use_cases.create_transaction import (
    CreateTransactionUseCase,
)
from finledger.application.use_cases.manage_accounts import (
    CASCADE,
    CreateAccountUseCase,
    DeleteAccountUseCase,
    ListAccountsUseCase,
    UpdateAccountUseCase,
    validate_currency,
    validate_opening_balance,
)
from finledger.domain.errors import (
    AccountInUseError,
    AccountNotFoundError,
    ValidationFailedError,
)
from finledger.domain.models.transactions import TransactionCandidate

NOW = datetime(2024, 6, 30, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def create_account(unit_of_work, fake_logger):
    ids = iter(["acct-1", "acct-2", "acct-3"])
    return CreateAccountUseCase(
        unit_of_work,
        logger=fake_logger,
        clock=lambda: NOW,
        id_factory=lambda: next(ids),
    )


@pytest.fixture
def transfer(unit_of_work, fake_logger):
    use_case = CreateTransactionUseCase(
        unit_of_work, logger=fake_logger, today=lambda: TODAY
    )

    def _transfer(source, destination, amount):
        return use_case.execute(
            OWNER,
            TransactionCandidate(
                transaction_type="transfer",
                amount=amount,
                account_id=source,
                to_account_id=destination,
                date="2024-06-10",
            ),
        )

    return _transfer


def test_create_account_starts_at_opening_balance(create_account):
    account = create_account.execute(
        OWNER, "  Main  ", opening_balance="250.5", currency="eur"
    )

    assert account.id == "acct-1"
    assert account.name == "Main"
    assert account.balance == Decimal("250.50")
    assert account.opening_balance == Decimal("250.50")
    assert account.currency == "EUR"
    assert account.account_type == "checking"
    assert account.version == 0


def test_create_account_validates_fields(create_account):
    with pytest.raises(ValidationFailedError) as exc_info:
        create_account.execute(
            OWNER, "", opening_balance="-1", account_type=" ", currency="dollars"
        )

    assert [v.field for v in exc_info.value.violations] == [
        "name",
        "opening_balance",
        "currency",
        "account_type",
    ]


def test_opening_balance_and_currency_rules():
    assert validate_opening_balance("0") == []
    assert validate_opening_balance("abc")[0].message == (
        "Opening balance must be a valid number"
    )
    assert validate_opening_balance("1.001")[0].message == (
        "Opening balance is out of range"
    )
    assert validate_currency("usd") == []
    assert validate_currency("US1") != []


def test_update_account_changes_details_only(create_account, unit_of_work, fake_logger):
    account = create_account.execute(OWNER, "Main", opening_balance="10")
    use_case = UpdateAccountUseCase(unit_of_work, logger=fake_logger, clock=lambda: NOW)

    updated = use_case.execute(account.id, OWNER, {"name": "Daily", "currency": "gbp"})

    assert updated.name == "Daily"
    assert updated.currency == "GBP"
    assert updated.balance == Decimal("10.00")

    with pytest.raises(ValidationFailedError) as exc_info:
        use_case.execute(account.id, OWNER, {"balance": "1000"})
    assert exc_info.value.violations[0].code == "read_only"

    with pytest.raises(AccountNotFoundError):
        use_case.execute(account.id, "intruder", {"name": "Mine"})


def test_restrict_policy_refuses_accounts_with_history(
    create_account, transfer, unit_of_work, fake_logger
):
    source = create_account.execute(OWNER, "Main", opening_balance="100")
    destination = create_account.execute(OWNER, "Savings")
    transfer(source.id, destination.id, "30")
    use_case = DeleteAccountUseCase(unit_of_work, logger=fake_logger)

    with pytest.raises(AccountInUseError) as exc_info:
        use_case.execute(destination.id, OWNER)

    assert exc_info.value.reference_count == 1
    assert destination.id in unit_of_work.state.accounts


def test_restrict_policy_deletes_unused_account(create_account, unit_of_work, fake_logger):
    account = create_account.execute(OWNER, "Spare")
    use_case = DeleteAccountUseCase(unit_of_work, logger=fake_logger)

    assert use_case.execute(account.id, OWNER) == 0
    assert unit_of_work.state.accounts == {}


def test_cascade_policy_reverses_counterpart_balances(
    create_account, transfer, unit_of_work, fake_logger, balance_of
):
    """Cascading removes history and undoes it on the surviving accounts."""
    main = create_account.execute(OWNER, "Main", opening_balance="100")
    savings = create_account.execute(OWNER, "Savings")
    transfer(main.id, savings.id, "30")
    use_case = DeleteAccountUseCase(unit_of_work, policy=CASCADE, logger=fake_logger)

    removed = use_case.execute(savings.id, OWNER)

    assert removed == 1
    assert savings.id not in unit_of_work.state.accounts
    assert unit_of_work.state.transactions == {}
    assert balance_of(main.id) == Decimal("100.00")


def test_unknown_policy_is_rejected(unit_of_work):
    with pytest.raises(ValueError):
        DeleteAccountUseCase(unit_of_work, policy="archive")


def test_list_accounts_is_owner_scoped(create_account, unit_of_work):
    create_account.execute(OWNER, "Main")
    create_account.execute("someone-else", "Theirs")

    accounts = ListAccountsUseCase(unit_of_work).execute(OWNER)

    assert [account.name for account in accounts] == ["Main"]


def test_create_account_rejects_non_text_account_type(create_account, unit_of_work):
    with pytest.raises(ValidationFailedError) as exc_info:
        create_account.execute(OWNER, "Main", account_type=5)

    assert [v.field for v in exc_info.value.violations] == ["account_type"]
    assert unit_of_work.state.accounts == {}
