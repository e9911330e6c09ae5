"""CLI adapter creating the ledger tables in the configured database."""

from finledger.infrastructure.container import build_database_adapter
from finledger.infrastructure.logging.logger import get_app_logger
from finledger.infrastructure.schema import ensure_ledger_schema


def main() -> None:
    """Create ledger tables and indexes when they are missing."""
    logger = get_app_logger()
    ensure_ledger_schema(build_database_adapter(), logger=logger)
    print("Ledger schema is ready.")


if __name__ == "__main__":  # pragma: no cover
    main()
