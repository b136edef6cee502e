"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional, Any
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from forecastit.domain.entities import (
    Account,
    Category,
    CategoryGroup,
    EntryStatus,
    LedgerEntry,
    RecurringRule,
)


class Database(ABC):
    """Abstract database interface for forecastit.

    Every write is committed on its own unless it runs inside ``atomic()``,
    in which case all writes of the block are committed together or not at
    all.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Group writes into one all-or-nothing unit.

        Nested blocks join the outermost one.
        """
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        name: str,
        account_type: str,
        current_balance: Decimal,
        balance_date: date,
        warning_threshold: Decimal,
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_name(self, name: str) -> Optional[Account]:
        """Get account by name."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts."""
        pass

    @abstractmethod
    def update_account(self, account_id: int, changes: dict[str, Any]) -> None:
        """Update account columns given as a name -> value mapping."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account with its rules and entries."""
        pass

    @abstractmethod
    def count_transfer_rules_for_account(self, account_id: int) -> int:
        """Count transfer rules using the account as source or destination."""
        pass

    # Category operations
    @abstractmethod
    def create_category_group(self, name: str, color: str, display_order: int = 0) -> int:
        """Create a category group. Returns group ID."""
        pass

    @abstractmethod
    def get_category_group(self, group_id: int) -> Optional[CategoryGroup]:
        """Get category group by ID."""
        pass

    @abstractmethod
    def get_category_group_by_name(self, name: str) -> Optional[CategoryGroup]:
        """Get category group by name, ignoring case."""
        pass

    @abstractmethod
    def list_category_groups(self) -> list[CategoryGroup]:
        """List category groups ordered by display order, then name."""
        pass

    @abstractmethod
    def create_category(self, name: str, group_id: int, display_order: int = 0) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def get_category_by_name(self, group_id: int, name: str) -> Optional[Category]:
        """Get category by name within a group, ignoring case."""
        pass

    @abstractmethod
    def list_categories(self, group_id: Optional[int] = None) -> list[Category]:
        """List categories, optionally filtered by group."""
        pass

    # Recurring rule operations
    @abstractmethod
    def create_rule(
        self,
        description: str,
        rule_type: str,
        frequency: str,
        amount: Decimal,
        anchor_date: date,
        account_id: int,
        destination_account_id: Optional[int] = None,
        category_id: Optional[int] = None,
        day_of_month: Optional[int] = None,
        day_of_week: Optional[int] = None,
        active: bool = True,
        is_estimated: bool = True,
    ) -> int:
        """Create a recurring rule. Returns rule ID."""
        pass

    @abstractmethod
    def get_rule(self, rule_id: int) -> Optional[RecurringRule]:
        """Get recurring rule by ID."""
        pass

    @abstractmethod
    def list_rules(
        self, active_only: bool = False, account_id: Optional[int] = None
    ) -> list[RecurringRule]:
        """List recurring rules.

        Args:
            active_only: If True, only return active rules
            account_id: Optional account filter, matching either the source
                or the destination account
        """
        pass

    @abstractmethod
    def update_rule(self, rule_id: int, changes: dict[str, Any]) -> None:
        """Update rule columns given as a name -> value mapping."""
        pass

    @abstractmethod
    def delete_rule(self, rule_id: int) -> None:
        """Delete a rule and all of its entries."""
        pass

    # Ledger entry operations
    @abstractmethod
    def create_entry(
        self,
        account_id: int,
        date: date,
        description: str,
        amount: Decimal,
        status: EntryStatus,
        recurring_rule_id: Optional[int] = None,
        linked_entry_id: Optional[int] = None,
        category_id: Optional[int] = None,
        user_modified: bool = False,
        original_date: Optional[date] = None,
    ) -> int:
        """Create a ledger entry. Returns entry ID.

        Raises:
            DuplicateEntryError: If the rule already has an entry for this
                account and date
        """
        pass

    @abstractmethod
    def get_entry(self, entry_id: int) -> Optional[LedgerEntry]:
        """Get ledger entry by ID."""
        pass

    @abstractmethod
    def update_entry(self, entry_id: int, changes: dict[str, Any]) -> None:
        """Update entry columns given as a name -> value mapping."""
        pass

    @abstractmethod
    def delete_entry(self, entry_id: int) -> None:
        """Delete an entry, clearing the link on its transfer twin."""
        pass

    @abstractmethod
    def list_entries(
        self,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        recurring_rule_id: Optional[int] = None,
        status: Optional[EntryStatus] = None,
    ) -> list[LedgerEntry]:
        """List entries ordered by date, then ID, with optional filters.

        Date bounds are inclusive.
        """
        pass

    @abstractmethod
    def latest_entry_date(self, rule_id: int) -> Optional[date]:
        """Latest entry date for a rule, or None if it has no entries."""
        pass

    @abstractmethod
    def user_modified_dates(self, rule_id: int) -> set[date]:
        """Dates of the rule's entries a user has edited."""
        pass

    @abstractmethod
    def original_dates(self, rule_id: int) -> set[date]:
        """Dates the rule's entries were moved away from."""
        pass

    @abstractmethod
    def delete_future_entries(self, rule_id: int, from_date: date) -> int:
        """Delete the rule's entries on or after ``from_date`` that no user edited.

        Returns the number of deleted entries.
        """
        pass

    @abstractmethod
    def update_future_entries_category(
        self, rule_id: int, from_date: date, category_id: Optional[int]
    ) -> int:
        """Set the category of the rule's entries on or after ``from_date``.

        Returns the number of updated entries.
        """
        pass

    @abstractmethod
    def delete_account_entries_before(
        self, account_id: int, cutoff: date, inclusive: bool = False
    ) -> int:
        """Delete an account's entries dated before (or on) ``cutoff``.

        Returns the number of deleted entries.
        """
        pass
