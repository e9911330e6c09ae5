"""Domain models for ledger accounts."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class Account:
    """Owner-scoped monetary bucket with a cached balance.

    Attributes:
        id: Opaque account identifier.
        owner_id: Identifier of the owning user.
        name: Display name.
        account_type: Free-form account kind (checking, savings, ...).
        currency: ISO currency code.
        balance: Cached balance maintained by the ledger use cases.
        opening_balance: Balance the account was created with.
        version: Optimistic concurrency counter bumped on every balance write.
        created_at: Creation timestamp.
        updated_at: Last modification timestamp.
    """

    id: str
    owner_id: str
    name: str
    account_type: str
    currency: str
    balance: Decimal
    opening_balance: Decimal
    version: int
    created_at: datetime
    updated_at: datetime


__all__ = ["Account"]
