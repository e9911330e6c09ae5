"""Application use cases package."""

from .create_transaction import CreateTransactionUseCase
from .delete_transaction import DeleteTransactionUseCase
from .get_ledger_summary import GetLedgerSummaryUseCase
from .list_transactions import ListTransactionsUseCase
from .manage_accounts import (
    CreateAccountUseCase,
    DeleteAccountUseCase,
    ListAccountsUseCase,
    UpdateAccountUseCase,
)
from .reconcile_balances import ReconcileBalancesUseCase
from .update_transaction import UpdateTransactionUseCase
from .validate_transaction import ValidateTransactionUseCase

__all__ = [
    "CreateTransactionUseCase",
    "DeleteTransactionUseCase",
    "GetLedgerSummaryUseCase",
    "ListTransactionsUseCase",
    "CreateAccountUseCase",
    "DeleteAccountUseCase",
    "ListAccountsUseCase",
    "UpdateAccountUseCase",
    "ReconcileBalancesUseCase",
    "UpdateTransactionUseCase",
    "ValidateTransactionUseCase",
]
