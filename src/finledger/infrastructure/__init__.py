"""Infrastructure adapters for the ledger."""
