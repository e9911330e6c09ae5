"""Balance effect arithmetic.

A transaction's effect is a mapping of account id to signed delta. Create
applies it, delete applies its reversal, update applies the reversal of the
old effect and then the new effect.
"""

from collections.abc import Iterable, Mapping
from decimal import Decimal

from finledger.domain.constants import EXPENSE, INCOME, TRANSFER
from finledger.domain.models.accounts import Account
from finledger.domain.models.transactions import Transaction
from finledger.utils.decimal_utils import quantize_money

Effects = dict[str, Decimal]


def compute_effects(
    transaction_type: str,
    amount: Decimal,
    account_id: str,
    to_account_id: str | None = None,
) -> Effects:
    """Return the signed per-account deltas of a movement.

    Args:
        transaction_type: income, expense or transfer.
        amount: Positive amount.
        account_id: Source (or only) account.
        to_account_id: Destination account for transfers.

    Returns:
        Effects: Account id to signed delta.

    Raises:
        ValueError: If the type is unknown or a transfer lacks a destination.
    """
    if transaction_type == INCOME:
        return {account_id: amount}
    if transaction_type == EXPENSE:
        return {account_id: -amount}
    if transaction_type == TRANSFER:
        if not to_account_id:
            raise ValueError("Transfer effects require a destination account")
        return {account_id: -amount, to_account_id: amount}
    raise ValueError(f"Unsupported transaction type: {transaction_type}")


def transaction_effects(transaction: Transaction) -> Effects:
    """Return the effects a committed transaction applied."""
    return compute_effects(
        transaction.transaction_type,
        transaction.amount,
        transaction.account_id,
        transaction.to_account_id,
    )


def reverse_effects(effects: Mapping[str, Decimal]) -> Effects:
    """Return the inverse of a set of effects."""
    return {account_id: -delta for account_id, delta in effects.items()}


def apply_effects(
    balances: Mapping[str, Decimal],
    effects: Mapping[str, Decimal],
) -> dict[str, Decimal]:
    """Return a copy of ``balances`` with ``effects`` added.

    Raises:
        KeyError: If an effect targets an account missing from ``balances``.
    """
    updated = dict(balances)
    for account_id, delta in effects.items():
        updated[account_id] = quantize_money(updated[account_id] + delta)
    return updated


def find_overdrafts(
    before: Mapping[str, Decimal],
    after: Mapping[str, Decimal],
) -> list[str]:
    """Return accounts that end below zero after losing money.

    An account already negative before the operation is only flagged when
    the operation makes it worse.
    """
    return sorted(
        account_id
        for account_id, balance in after.items()
        if balance < 0 and balance < before[account_id]
    )


def replay_balances(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
) -> dict[str, Decimal]:
    """Rebuild balances from opening balances and the transaction log.

    Transactions are applied in commit order. Effects on accounts missing
    from ``accounts`` are ignored.
    """
    balances = {
        account.id: quantize_money(account.opening_balance)
        for account in accounts
    }
    ordered = sorted(
        transactions,
        key=lambda transaction: (transaction.created_at, transaction.id),
    )
    for transaction in ordered:
        for account_id, delta in transaction_effects(transaction).items():
            if account_id in balances:
                balances[account_id] = quantize_money(
                    balances[account_id] + delta
                )
    return balances


__all__ = [
    "Effects",
    "compute_effects",
    "transaction_effects",
    "reverse_effects",
    "apply_effects",
    "find_overdrafts",
    "replay_balances",
]
