"""Domain models for ledger transactions."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class Transaction:
    """Committed financial movement reflected in one or two balances.

    Attributes:
        id: Opaque transaction identifier.
        owner_id: Identifier of the owning user.
        transaction_type: One of income, expense or transfer.
        amount: Positive amount with two decimal places.
        account_id: Source (or only) account.
        to_account_id: Destination account for transfers, otherwise None.
        source: Free-text description.
        date: Calendar date of the movement.
        created_at: Commit timestamp.
        updated_at: Last modification timestamp.
    """

    id: str
    owner_id: str
    transaction_type: str
    amount: Decimal
    account_id: str
    to_account_id: str | None
    source: str
    date: date
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class TransactionCandidate:
    """Unvalidated transaction input as received from a caller.

    Raw values are accepted on purpose: amounts may arrive as strings or
    numbers and dates as ISO strings. The validator reports what is wrong
    with them instead of failing on conversion.
    """

    transaction_type: str | None = None
    amount: Any = None
    account_id: str | None = None
    to_account_id: str | None = None
    source: str | None = None
    date: Any = None

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "TransactionCandidate":
        """Build a candidate carrying the fields of a committed transaction."""
        return cls(
            transaction_type=transaction.transaction_type,
            amount=transaction.amount,
            account_id=transaction.account_id,
            to_account_id=transaction.to_account_id,
            source=transaction.source,
            date=transaction.date,
        )


__all__ = ["Transaction", "TransactionCandidate"]
