"""Command-line adapters for operating the ledger."""
