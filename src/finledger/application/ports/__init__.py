"""Application ports package."""

from .database import DatabaseEnginePort
from .ledger_store import (
    AccountStorePort,
    LedgerSession,
    LedgerUnitOfWorkPort,
    TransactionLogStorePort,
)

__all__ = [
    "AccountStorePort",
    "DatabaseEnginePort",
    "LedgerSession",
    "LedgerUnitOfWorkPort",
    "TransactionLogStorePort",
]
