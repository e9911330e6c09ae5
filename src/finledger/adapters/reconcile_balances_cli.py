"""CLI adapter checking cached balances against the transaction log.

Reads ``RECONCILE_OWNER_ID`` for the owner to check. When
``RECONCILE_APPLY`` is truthy the drifted balances are rewritten,
otherwise the run only reports them.
"""

import os

from finledger.infrastructure.container import build_ledger_service
from finledger.infrastructure.logging.logger import get_app_logger

_TRUTHY = {"1", "true", "yes", "on"}


def _parse_flag(value: str | None) -> bool:
    return (value or "").strip().lower() in _TRUTHY


def main() -> None:
    """Run the reconciliation for one owner."""
    logger = get_app_logger()
    owner_id = (os.getenv("RECONCILE_OWNER_ID") or "").strip()
    if not owner_id:
        logger.warning("RECONCILE_OWNER_ID is required to reconcile balances.")
        return
    apply = _parse_flag(os.getenv("RECONCILE_APPLY"))

    service = build_ledger_service()
    result = service.reconcile_balances(owner_id, apply=apply)

    if result.is_consistent:
        print(
            f"All {result.checked_accounts} accounts of {owner_id} "
            f"match their transaction history."
        )
        return

    for drift in result.drifts:
        print(
            f"{drift.account_id}: cached {drift.cached_balance} "
            f"expected {drift.expected_balance} (delta {drift.delta})"
        )
    action = "Repaired" if result.applied else "Found"
    print(f"{action} {len(result.drifts)} drifted account(s).")


if __name__ == "__main__":  # pragma: no cover
    main()
