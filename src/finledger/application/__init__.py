"""Application layer: ports and ledger use cases."""
