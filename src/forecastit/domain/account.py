"""Account domain service."""

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional

from forecastit.database.base import Database
from forecastit.domain.entities import Account, AccountType
from forecastit.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    account_delete_blocked,
    account_not_found,
)

logger = logging.getLogger(__name__)

DEFAULT_WARNING_THRESHOLD = Decimal("300.00")


class AccountService:
    """Service for managing accounts and their balance snapshots."""

    def __init__(self, db: Database, today: Optional[Callable[[], date]] = None):
        """Initialize account service.

        Args:
            db: Database instance
            today: Callable returning the current date, for tests
        """
        self.db = db
        self._today = today or date.today

    def create_account(
        self,
        name: str,
        account_type: AccountType | str = AccountType.CHECKING,
        current_balance: Decimal = Decimal("0"),
        balance_date: Optional[date] = None,
        warning_threshold: Decimal = DEFAULT_WARNING_THRESHOLD,
    ) -> int:
        """Create a new account.

        Args:
            name: Account name
            account_type: checking or savings
            current_balance: Balance as of ``balance_date``
            balance_date: Date the balance was observed (defaults to today)
            warning_threshold: Lowest balance that is still comfortable

        Returns:
            Account ID

        Raises:
            ValidationError: If any field is invalid
            ConflictError: If account name already exists
        """
        name = self._validate_name(name)
        if self.db.get_account_by_name(name) is not None:
            raise ConflictError(f"Account with name '{name}' already exists")

        balance_date = balance_date or self._today()
        self._validate_balance_date(balance_date)

        return self.db.create_account(
            name=name,
            account_type=self._validate_account_type(account_type),
            current_balance=self._to_decimal(current_balance, "Balance"),
            balance_date=balance_date,
            warning_threshold=self._validate_threshold(warning_threshold),
        )

    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def get_account_by_name(self, name: str) -> Optional[Account]:
        return self.db.get_account_by_name(name)

    def require_account(self, account_id: int) -> Account:
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self) -> list[Account]:
        """List all accounts.

        Returns:
            List of account entities
        """
        return self.db.list_accounts()

    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        account_type: Optional[AccountType | str] = None,
        warning_threshold: Optional[Decimal] = None,
    ) -> Account:
        """Update an account's descriptive fields.

        The balance snapshot is changed through ``reconcile`` only.

        Raises:
            NotFoundError: If account not found
            ConflictError: If the new name belongs to another account
            ValidationError: If any field is invalid
        """
        account = self.require_account(account_id)
        changes: dict[str, Any] = {}

        if name is not None:
            name = self._validate_name(name)
            existing = self.db.get_account_by_name(name)
            if existing is not None and existing.id != account_id:
                raise ConflictError(f"Account with name '{name}' already exists")
            if name != account.name:
                changes["name"] = name
        if account_type is not None:
            changes["account_type"] = self._validate_account_type(account_type)
        if warning_threshold is not None:
            changes["warning_threshold"] = self._validate_threshold(warning_threshold)

        if changes:
            self.db.update_account(account_id, changes)
        return self.db.get_account(account_id)

    def delete_account(self, account_id: int) -> None:
        """Delete an account with its rules and entries.

        Args:
            account_id: Account ID to delete

        Raises:
            NotFoundError: If account not found
            DependencyError: If a transfer rule still moves money in or out of it
        """
        self.require_account(account_id)

        transfer_rule_count = self.db.count_transfer_rules_for_account(account_id)
        if transfer_rule_count > 0:
            raise DependencyError(account_delete_blocked(account_id, transfer_rule_count))

        self.db.delete_account(account_id)

    def reconcile(
        self,
        account_id: int,
        current_balance: Decimal,
        balance_date: Optional[date] = None,
        include_today: bool = False,
    ) -> int:
        """Record a fresh balance and drop entries it already accounts for.

        Entries dated before ``balance_date`` are deleted, and those dated on
        it too when ``include_today`` is set. A transfer leg living in another
        account survives with its link cleared.

        Args:
            account_id: Account ID
            current_balance: Balance observed at the bank
            balance_date: Date of the observation (defaults to today)
            include_today: Also delete entries dated on ``balance_date``

        Returns:
            Number of deleted entries

        Raises:
            NotFoundError: If account not found
            ValidationError: If the balance or date is invalid
        """
        self.require_account(account_id)
        balance_date = balance_date or self._today()
        self._validate_balance_date(balance_date)
        balance = self._to_decimal(current_balance, "Balance")

        with self.db.atomic():
            self.db.update_account(
                account_id, {"current_balance": balance, "balance_date": balance_date}
            )
            deleted = self.db.delete_account_entries_before(
                account_id, balance_date, inclusive=include_today
            )

        logger.info(
            "Reconciled account %s to %s on %s, removed %d entr(ies)",
            account_id,
            balance,
            balance_date,
            deleted,
        )
        return deleted

    def _validate_balance_date(self, balance_date: date) -> None:
        if balance_date > self._today():
            raise ValidationError("Balance date cannot be in the future")

    @staticmethod
    def _validate_name(name: Optional[str]) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Account name is required")
        return name

    @staticmethod
    def _validate_account_type(account_type: AccountType | str) -> AccountType:
        try:
            return AccountType(account_type)
        except ValueError:
            raise ValidationError(
                f"Account type must be one of: {', '.join(t.value for t in AccountType)}"
            )

    @classmethod
    def _validate_threshold(cls, warning_threshold: Any) -> Decimal:
        threshold = cls._to_decimal(warning_threshold, "Warning threshold")
        if threshold < 0:
            raise ValidationError("Warning threshold must be greater than or equal to 0")
        return threshold

    @staticmethod
    def _to_decimal(value: Any, label: str) -> Decimal:
        try:
            result = Decimal(str(value))
        except InvalidOperation:
            raise ValidationError(f"{label} must be a number, got '{value}'")
        if not result.is_finite():
            raise ValidationError(f"{label} must be a number, got '{value}'")
        return result
