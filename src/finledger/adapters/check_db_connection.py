"""Simple CLI to validate the ledger database connection.

This adapter is meant for local operations: it instantiates the concrete
database adapter from the infrastructure layer and runs a basic health
check against the ledger database.
"""

from finledger.infrastructure.container import build_database_adapter
from finledger.infrastructure.logging.logger import get_app_logger


def main() -> None:
    """Run a basic connectivity check against the ledger database."""
    adapter = build_database_adapter()
    logger = get_app_logger()

    engine = adapter.get_ledger_engine()
    logger.info(f"Ledger DB: {engine.url.render_as_string(hide_password=True)}")

    with engine.connect() as conn:
        conn.exec_driver_sql("SELECT 1")

    logger.info("Ledger connection is working.")


if __name__ == "__main__":  # pragma: no cover
    main()
