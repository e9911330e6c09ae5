"""Tests for balance effect arithmetic."""

from dataclasses import replace
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from conftest import OWNER, build_account
from finledger.domain.models.transactions import Transaction
from finledger.domain.services.balances import (
    apply_effects,
    compute_effects,
    find_overdrafts,
    replay_balances,
    reverse_effects,
)

BASE_TIME = datetime(2024, 6, 2, tzinfo=timezone.utc)


def _transaction(tx_id, tx_type, amount, account_id, to_account_id=None, offset=0):
    created = BASE_TIME + timedelta(minutes=offset)
    return Transaction(
        id=tx_id,
        owner_id=OWNER,
        transaction_type=tx_type,
        amount=Decimal(amount),
        account_id=account_id,
        to_account_id=to_account_id,
        source="",
        date=date(2024, 6, 2),
        created_at=created,
        updated_at=created,
    )


def test_compute_effects_by_type():
    amount = Decimal("25.00")

    assert compute_effects("income", amount, "a") == {"a": amount}
    assert compute_effects("expense", amount, "a") == {"a": -amount}
    assert compute_effects("transfer", amount, "a", "b") == {
        "a": -amount,
        "b": amount,
    }


@pytest.mark.parametrize(
    ("tx_type", "to_account_id"),
    [("refund", None), ("transfer", None)],
)
def test_compute_effects_rejects_incomplete_input(tx_type, to_account_id):
    with pytest.raises(ValueError):
        compute_effects(tx_type, Decimal("1"), "a", to_account_id)


def test_reverse_then_apply_restores_balances():
    balances = {"a": Decimal("100.00"), "b": Decimal("5.00")}
    effects = compute_effects("transfer", Decimal("30"), "a", "b")

    moved = apply_effects(balances, effects)
    restored = apply_effects(moved, reverse_effects(effects))

    assert moved == {"a": Decimal("70.00"), "b": Decimal("35.00")}
    assert restored == balances
    assert balances == {"a": Decimal("100.00"), "b": Decimal("5.00")}


def test_apply_effects_requires_known_accounts():
    with pytest.raises(KeyError):
        apply_effects({}, {"ghost": Decimal("1")})


def test_find_overdrafts_flags_only_worsening_negatives():
    before = {"a": Decimal("10"), "b": Decimal("-5"), "c": Decimal("-5")}
    after = {"a": Decimal("-1"), "b": Decimal("-2"), "c": Decimal("-6")}

    assert find_overdrafts(before, after) == ["a", "c"]


def test_replay_balances_uses_commit_order_and_opening_balances():
    """Replaying the log from opening balances rebuilds every balance."""
    accounts = [
        replace(build_account("a", "50.00"), balance=Decimal("999.00")),
        build_account("b", "0.00"),
    ]
    transactions = [
        _transaction("t3", "transfer", "20", "a", "b", offset=3),
        _transaction("t1", "income", "10", "a", offset=1),
        _transaction("t2", "expense", "15.50", "b", offset=2),
        _transaction("t4", "income", "7", "ghost", offset=4),
    ]

    balances = replay_balances(accounts, transactions)

    assert balances == {"a": Decimal("40.00"), "b": Decimal("4.50")}
