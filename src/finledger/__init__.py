"""Ledger and balance-consistency engine for personal-finance accounts."""

__version__ = "0.1.0"

__all__ = ["__version__"]
