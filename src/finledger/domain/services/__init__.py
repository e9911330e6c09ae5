"""Domain services package."""

from .balances import (
    apply_effects,
    compute_effects,
    find_overdrafts,
    replay_balances,
    reverse_effects,
    transaction_effects,
)
from .validation import (
    get_error_message,
    parse_amount,
    parse_date,
    validate_transaction,
)

__all__ = [
    "apply_effects",
    "compute_effects",
    "find_overdrafts",
    "replay_balances",
    "reverse_effects",
    "transaction_effects",
    "get_error_message",
    "parse_amount",
    "parse_date",
    "validate_transaction",
]
