"""Use cases managing ledger accounts.

Balances are never edited here: an account starts at its opening balance
and only the transaction use cases move it afterwards.
"""

from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from finledger.application.ports.ledger_store import (
    LedgerSession,
    LedgerUnitOfWorkPort,
)
from finledger.application.use_cases.ledger_helpers import (
    DEFAULT_MAX_ATTEMPTS,
    lock_accounts,
    run_atomic,
    write_balances,
)
from finledger.domain.constants import (
    DEFAULT_ACCOUNT_TYPE,
    DEFAULT_CURRENCY,
    MAX_ACCOUNT_NAME_LENGTH,
    MAX_AMOUNT,
    MONEY_QUANTUM,
    UPDATABLE_ACCOUNT_FIELDS,
)
from finledger.domain.errors import (
    AccountInUseError,
    AccountNotFoundError,
    ValidationFailedError,
)
from finledger.domain.models.accounts import Account
from finledger.domain.models.validation import ValidationViolation
from finledger.domain.services.balances import (
    apply_effects,
    reverse_effects,
    transaction_effects,
)
from finledger.domain.services.validation import parse_amount
from finledger.infrastructure.logging.logger import get_app_logger
from finledger.utils.decimal_utils import quantize_money

RESTRICT = "restrict"
CASCADE = "cascade"
DELETION_POLICIES = (RESTRICT, CASCADE)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid4())


def validate_account_name(name: Any) -> list[ValidationViolation]:
    """Check that an account name is present and bounded."""
    text = name if isinstance(name, str) else ""
    if not text.strip():
        return [ValidationViolation("name", "Account name is required", "required")]
    if len(text.strip()) > MAX_ACCOUNT_NAME_LENGTH:
        return [
            ValidationViolation(
                "name",
                f"Account name is too long (max {MAX_ACCOUNT_NAME_LENGTH} characters)",
                "too_long",
            )
        ]
    return []


def validate_currency(currency: Any) -> list[ValidationViolation]:
    """Check that a currency is a three-letter code."""
    text = currency.strip() if isinstance(currency, str) else ""
    if len(text) != 3 or not text.isalpha():
        return [
            ValidationViolation(
                "currency", "Currency must be a three-letter code", "invalid"
            )
        ]
    return []


def validate_opening_balance(value: Any) -> list[ValidationViolation]:
    """Check that an opening balance is a non-negative money value."""
    amount = parse_amount(value)
    if amount is None:
        return [
            ValidationViolation(
                "opening_balance",
                "Opening balance must be a valid number",
                "invalid",
            )
        ]
    if amount < 0:
        return [
            ValidationViolation(
                "opening_balance",
                "Opening balance cannot be negative",
                "invalid",
            )
        ]
    if amount > MAX_AMOUNT or amount.quantize(MONEY_QUANTUM) != amount:
        return [
            ValidationViolation(
                "opening_balance",
                "Opening balance is out of range",
                "invalid",
            )
        ]
    return []


class CreateAccountUseCase:
    """Open a new account for an owner."""

    def __init__(
        self,
        unit_of_work: LedgerUnitOfWorkPort,
        logger=None,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._unit_of_work = unit_of_work
        self._logger = logger or get_app_logger()
        self._clock = clock
        self._id_factory = id_factory

    def execute(
        self,
        owner_id: str,
        name: str,
        opening_balance: Any = 0,
        account_type: str = DEFAULT_ACCOUNT_TYPE,
        currency: str = DEFAULT_CURRENCY,
    ) -> Account:
        """Create the account with ``opening_balance`` as its balance.

        Raises:
            ValidationFailedError: If a field is invalid.
        """
        violations = [
            *validate_account_name(name),
            *validate_opening_balance(opening_balance),
            *validate_currency(currency),
        ]
        type_text = account_type.strip() if isinstance(account_type, str) else ""
        if not type_text:
            violations.append(
                ValidationViolation(
                    "account_type", "Account type is required", "required"
                )
            )
        if violations:
            raise ValidationFailedError(violations)

        balance = quantize_money(parse_amount(opening_balance))
        now = self._clock()
        account = Account(
            id=self._id_factory(),
            owner_id=owner_id,
            name=name.strip(),
            account_type=type_text,
            currency=currency.strip().upper(),
            balance=balance,
            opening_balance=balance,
            version=0,
            created_at=now,
            updated_at=now,
        )
        with self._unit_of_work.begin() as session:
            created = session.accounts.insert(account)
        self._logger.info(f"Created account {created.id} for owner {owner_id}")
        return created


class UpdateAccountUseCase:
    """Change the descriptive fields of an account."""

    def __init__(
        self,
        unit_of_work: LedgerUnitOfWorkPort,
        logger=None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._unit_of_work = unit_of_work
        self._logger = logger or get_app_logger()
        self._clock = clock

    def execute(
        self,
        account_id: str,
        owner_id: str,
        updates: Mapping[str, Any],
    ) -> Account:
        """Apply ``updates`` (name, account_type, currency).

        Raises:
            AccountNotFoundError: If the account is not the owner's.
            ValidationFailedError: If a field is read-only or invalid.
        """
        violations = [
            ValidationViolation(key, f"Field cannot be updated: {key}", "read_only")
            for key in updates
            if key not in UPDATABLE_ACCOUNT_FIELDS
        ]
        if "name" in updates:
            violations.extend(validate_account_name(updates["name"]))
        if "currency" in updates:
            violations.extend(validate_currency(updates["currency"]))
        if "account_type" in updates and not str(updates["account_type"] or "").strip():
            violations.append(
                ValidationViolation(
                    "account_type", "Account type is required", "required"
                )
            )
        if violations:
            raise ValidationFailedError(violations)

        fields: dict[str, Any] = {
            key: str(value).strip() for key, value in updates.items()
        }
        if "currency" in fields:
            fields["currency"] = fields["currency"].upper()
        fields["updated_at"] = self._clock()

        with self._unit_of_work.begin() as session:
            account = session.accounts.get(account_id)
            if account is None or account.owner_id != owner_id:
                raise AccountNotFoundError(account_id)
            return session.accounts.update_details(account_id, fields)


class DeleteAccountUseCase:
    """Delete an account under an explicit policy for its history.

    ``restrict`` refuses while any transaction references the account.
    ``cascade`` deletes those transactions first, reversing their effect on
    the other side of transfers, then the account, in one unit.
    """

    def __init__(
        self,
        unit_of_work: LedgerUnitOfWorkPort,
        policy: str = RESTRICT,
        logger=None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        if policy not in DELETION_POLICIES:
            raise ValueError(
                f"Unsupported account deletion policy: {policy}. "
                f"Expected one of {', '.join(DELETION_POLICIES)}."
            )
        self._unit_of_work = unit_of_work
        self._policy = policy
        self._logger = logger or get_app_logger()
        self._max_attempts = max_attempts

    def execute(self, account_id: str, owner_id: str) -> int:
        """Delete the account.

        Returns:
            int: Number of transactions deleted along with the account.

        Raises:
            AccountNotFoundError: If the account is not the owner's.
            AccountInUseError: If the policy is restrict and history exists.
        """
        return run_atomic(
            self._unit_of_work,
            lambda session: self._delete(session, account_id, owner_id),
            max_attempts=self._max_attempts,
            logger=self._logger,
        )

    def _delete(
        self,
        session: LedgerSession,
        account_id: str,
        owner_id: str,
    ) -> int:
        account = session.accounts.get(account_id)
        if account is None or account.owner_id != owner_id:
            raise AccountNotFoundError(account_id)

        references = session.transactions.list_by_account(account_id)
        if references and self._policy == RESTRICT:
            raise AccountInUseError(account_id, len(references))

        counterparts: set[str] = {account_id}
        for transaction in references:
            counterparts.update(transaction_effects(transaction))
        accounts = lock_accounts(session, owner_id, counterparts)

        balances = {
            other_id: other.balance
            for other_id, other in accounts.items()
            if other_id != account_id
        }
        for transaction in references:
            reversal = {
                other_id: delta
                for other_id, delta in reverse_effects(
                    transaction_effects(transaction)
                ).items()
                if other_id in balances
            }
            balances = apply_effects(balances, reversal)
            session.transactions.delete(transaction.id)
        write_balances(session, accounts, balances)
        session.accounts.delete(account_id)

        self._logger.info(
            f"Deleted account {account_id} with {len(references)} transaction(s)"
        )
        return len(references)


class ListAccountsUseCase:
    """Fetch an owner's accounts."""

    def __init__(self, unit_of_work: LedgerUnitOfWorkPort) -> None:
        self._unit_of_work = unit_of_work

    def execute(self, owner_id: str) -> list[Account]:
        """Return every account of ``owner_id``."""
        with self._unit_of_work.begin() as session:
            return session.accounts.list_by_owner(owner_id)


__all__ = [
    "RESTRICT",
    "CASCADE",
    "DELETION_POLICIES",
    "validate_account_name",
    "validate_currency",
    "validate_opening_balance",
    "CreateAccountUseCase",
    "UpdateAccountUseCase",
    "DeleteAccountUseCase",
    "ListAccountsUseCase",
]
