"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
import os

import dotenv

from finledger.application.use_cases.ledger_helpers import DEFAULT_MAX_ATTEMPTS
from finledger.application.use_cases.manage_accounts import (
    DELETION_POLICIES,
    RESTRICT,
)
from finledger.infrastructure.ledger_store_factory import SQLALCHEMY_BACKEND
from finledger.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class LedgerSettings:
    """Settings for the ledger service.

    Attributes:
        backend: Store backend identifier (sqlalchemy or memory).
        max_conflict_retries: Attempts allowed on concurrency conflicts.
        account_deletion_policy: restrict or cascade.
    """

    backend: str = SQLALCHEMY_BACKEND
    max_conflict_retries: int = DEFAULT_MAX_ATTEMPTS
    account_deletion_policy: str = RESTRICT

    @classmethod
    def from_env(cls) -> "LedgerSettings":
        """Build settings from environment variables and ``.env``.

        Returns:
            LedgerSettings: Settings sourced from environment variables.
        """
        dotenv.load_dotenv()
        logger = get_app_logger()
        backend = os.getenv("LEDGER_BACKEND", SQLALCHEMY_BACKEND).strip().lower()
        retries = cls._parse_retries(
            os.getenv("LEDGER_MAX_CONFLICT_RETRIES"), logger=logger
        )
        policy = cls._parse_policy(
            os.getenv("LEDGER_ACCOUNT_DELETION_POLICY"), logger=logger
        )
        return cls(
            backend=backend,
            max_conflict_retries=retries,
            account_deletion_policy=policy,
        )

    @staticmethod
    def _parse_retries(raw: str | None, logger) -> int:
        """Parse the retry budget, falling back to the default.

        Args:
            raw: Raw environment value.
            logger: Logger used for warnings.

        Returns:
            int: A positive number of attempts.
        """
        if not raw:
            return DEFAULT_MAX_ATTEMPTS
        try:
            value = int(raw)
        except ValueError:
            logger.warning(
                f"Invalid LEDGER_MAX_CONFLICT_RETRIES={raw!r}; "
                f"using {DEFAULT_MAX_ATTEMPTS}"
            )
            return DEFAULT_MAX_ATTEMPTS
        if value < 1:
            logger.warning(
                f"LEDGER_MAX_CONFLICT_RETRIES must be at least 1; "
                f"using {DEFAULT_MAX_ATTEMPTS}"
            )
            return DEFAULT_MAX_ATTEMPTS
        return value

    @staticmethod
    def _parse_policy(raw: str | None, logger) -> str:
        if not raw:
            return RESTRICT
        policy = raw.strip().lower()
        if policy not in DELETION_POLICIES:
            logger.warning(
                f"Unknown LEDGER_ACCOUNT_DELETION_POLICY={raw!r}; using {RESTRICT}"
            )
            return RESTRICT
        return policy


__all__ = ["LedgerSettings"]
