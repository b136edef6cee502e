"""Ledger entry (transaction) domain service."""

import logging
from datetime import date, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from forecastit.database.base import Database
from forecastit.domain.entities import EntryStatus, LedgerEntry
from forecastit.domain.errors import (
    DuplicateEntryError,
    NotFoundError,
    TransferSyncError,
    ValidationError,
    account_not_found,
    category_not_found,
    entry_not_found,
    same_transfer_accounts,
    transfer_sync_failed,
)

logger = logging.getLogger(__name__)

ATTENTION_WINDOW_DAYS = 30


class TransactionService:
    """Service for managing ledger entries, including transfer pairs."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_entry(
        self,
        account_id: int,
        date: date,
        description: str,
        amount: Decimal,
        status: EntryStatus | str = EntryStatus.ACTUAL,
        category_id: Optional[int] = None,
        destination_account_id: Optional[int] = None,
    ) -> int:
        """Create a one-time entry.

        When ``destination_account_id`` is given, the entry becomes one leg of
        a transfer and its mirror is created in the destination account with
        the opposite amount. Both are stored or neither is.

        Args:
            account_id: Account ID
            date: Entry date
            description: Entry description
            amount: Signed amount
            status: estimated or actual
            category_id: Optional category ID
            destination_account_id: Optional account receiving the mirror entry

        Returns:
            Entry ID

        Raises:
            ValidationError: If fields are invalid
            NotFoundError: If account or category doesn't exist
            TransferSyncError: If the mirror entry cannot be saved
        """
        description = self._validate_description(description)
        status = self._validate_status(status)
        self._require_account(account_id)
        self._validate_category(category_id)
        if destination_account_id is not None and destination_account_id == account_id:
            raise ValidationError(same_transfer_accounts())

        with self.db.atomic():
            entry_id = self.db.create_entry(
                account_id=account_id,
                date=date,
                description=description,
                amount=self._to_decimal(amount),
                status=status,
                category_id=category_id,
            )
            if destination_account_id is not None:
                self._sync_twin(self.db.get_entry(entry_id), destination_account_id)
        return entry_id

    def get_entry(self, entry_id: int) -> Optional[LedgerEntry]:
        return self.db.get_entry(entry_id)

    def require_entry(self, entry_id: int) -> LedgerEntry:
        entry = self.db.get_entry(entry_id)
        if entry is None:
            raise NotFoundError(entry_not_found(entry_id))
        return entry

    def update_entry(
        self,
        entry_id: int,
        account_id: Optional[int] = None,
        date: Optional[date] = None,
        description: Optional[str] = None,
        amount: Optional[Decimal] = None,
        status: Optional[EntryStatus | str] = None,
        category_id: Optional[int] = None,
        clear_category: bool = False,
        destination_account_id: Optional[int] = None,
        clear_destination: bool = False,
    ) -> LedgerEntry:
        """Update entry fields as a user edit.

        Editing an entry generated by a rule marks it ``user_modified`` so
        regeneration leaves it alone. Moving it to another date records the
        generated date in ``original_date``; moving it back clears it.

        Transfer legs are kept in sync: the linked entry gets the same date,
        description, status and category and the opposite amount. Setting
        ``destination_account_id`` turns the entry into a transfer (or moves
        its mirror to another account); ``clear_destination`` removes the
        mirror. The whole edit is atomic.

        Returns:
            The updated entry

        Raises:
            NotFoundError: If entry, account or category doesn't exist
            ValidationError: If fields are invalid
            TransferSyncError: If the mirror entry cannot be saved
        """
        entry = self.require_entry(entry_id)
        if clear_category and category_id is not None:
            raise ValidationError("Cannot set both category_id and clear_category")
        if clear_destination and destination_account_id is not None:
            raise ValidationError("Cannot set both destination_account_id and clear_destination")

        changes: dict[str, Any] = {}
        if account_id is not None and account_id != entry.account_id:
            self._require_account(account_id)
            changes["account_id"] = account_id
        if date is not None and date != entry.date:
            changes["date"] = date
        if description is not None:
            description = self._validate_description(description)
            if description != entry.description:
                changes["description"] = description
        if amount is not None and self._to_decimal(amount) != entry.amount:
            changes["amount"] = self._to_decimal(amount)
        if status is not None:
            status = self._validate_status(status)
            if status != entry.status:
                changes["status"] = status
        if clear_category:
            if entry.category_id is not None:
                changes["category_id"] = None
        elif category_id is not None and category_id != entry.category_id:
            self._validate_category(category_id)
            changes["category_id"] = category_id

        twin_account_id = self._twin_account_id(entry)
        if clear_destination:
            destination = None
        elif destination_account_id is not None:
            destination = destination_account_id
        else:
            destination = twin_account_id
        if destination is not None and destination == changes.get("account_id", entry.account_id):
            raise ValidationError(same_transfer_accounts())

        if not changes and destination == twin_account_id:
            return entry

        if entry.recurring_rule_id is not None:
            changes["user_modified"] = True
            if "date" in changes:
                generated_date = entry.original_date or entry.date
                changes["original_date"] = None if changes["date"] == generated_date else generated_date

        with self.db.atomic():
            self._save_entry(entry.id, changes, destination)
        return self.db.get_entry(entry_id)

    def _save_entry(
        self, entry_id: int, changes: dict[str, Any], destination: Optional[int], sync_twin: bool = True
    ) -> None:
        """Write an entry and, unless ``sync_twin`` is False, its transfer mirror.

        Mirror writes pass ``sync_twin=False`` so synchronization never
        bounces back to the entry that started it.
        """
        if changes:
            self.db.update_entry(entry_id, changes)
        if sync_twin:
            self._sync_twin(self.db.get_entry(entry_id), destination)

    def _sync_twin(self, entry: LedgerEntry, destination_account_id: Optional[int]) -> None:
        """Create, update or remove the mirror leg of a transfer."""
        twin = self.db.get_entry(entry.linked_entry_id) if entry.linked_entry_id else None

        if destination_account_id is None:
            if twin is not None:
                self.db.delete_entry(twin.id)
            return

        if self.db.get_account(destination_account_id) is None:
            raise TransferSyncError(transfer_sync_failed(account_not_found(destination_account_id)))

        mirrored = {
            "account_id": destination_account_id,
            "date": entry.date,
            "description": entry.description,
            "amount": -entry.amount,
            "status": entry.status,
            "category_id": entry.category_id,
            "user_modified": entry.user_modified,
            "original_date": entry.original_date,
        }
        try:
            if twin is None:
                twin_id = self.db.create_entry(
                    recurring_rule_id=entry.recurring_rule_id, linked_entry_id=entry.id, **mirrored
                )
                self.db.update_entry(entry.id, {"linked_entry_id": twin_id})
            else:
                self._save_entry(twin.id, mirrored, destination=None, sync_twin=False)
        except DuplicateEntryError as exc:
            raise TransferSyncError(transfer_sync_failed(str(exc))) from exc

    def mark_actual(self, entry_id: int, amount: Decimal) -> LedgerEntry:
        """Confirm an entry with the real amount.

        ``amount`` is a magnitude; the entry keeps its sign. A transfer's
        mirror gets the opposite amount and is confirmed too.

        A confirmed entry generated by a rule is marked ``user_modified``, so
        later rule changes keep the confirmed amount instead of replacing it.

        Raises:
            NotFoundError: If the entry doesn't exist
            ValidationError: If amount is not a number
        """
        entry = self.require_entry(entry_id)
        magnitude = abs(self._to_decimal(amount))
        sign = -1 if entry.amount < 0 else 1
        new_amount = magnitude * sign

        changes: dict[str, Any] = {"status": EntryStatus.ACTUAL, "amount": new_amount}
        if entry.recurring_rule_id is not None:
            changes["user_modified"] = True

        with self.db.atomic():
            self.db.update_entry(entry.id, changes)
            if entry.linked_entry_id is not None:
                changes["amount"] = -new_amount
                self.db.update_entry(entry.linked_entry_id, changes)
        return self.db.get_entry(entry_id)

    def delete_entry(self, entry_id: int) -> None:
        """Delete an entry together with its transfer mirror."""
        entry = self.require_entry(entry_id)
        with self.db.atomic():
            if entry.linked_entry_id is not None and self.db.get_entry(entry.linked_entry_id) is not None:
                self.db.delete_entry(entry.linked_entry_id)
            self.db.delete_entry(entry.id)

    def list_entries(
        self,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        recurring_rule_id: Optional[int] = None,
    ) -> list[LedgerEntry]:
        """List entries ordered by date."""
        return self.db.list_entries(
            account_id=account_id,
            start_date=start_date,
            end_date=end_date,
            recurring_rule_id=recurring_rule_id,
        )

    def list_upcoming(
        self, account_id: Optional[int] = None, days: int = ATTENTION_WINDOW_DAYS, today: Optional[date] = None
    ) -> list[LedgerEntry]:
        """Estimated entries due between today and ``days`` from now."""
        today = today or date.today()
        return self.db.list_entries(
            account_id=account_id,
            start_date=today,
            end_date=today + timedelta(days=days),
            status=EntryStatus.ESTIMATED,
        )

    def _twin_account_id(self, entry: LedgerEntry) -> Optional[int]:
        if entry.linked_entry_id is None:
            return None
        twin = self.db.get_entry(entry.linked_entry_id)
        return twin.account_id if twin is not None else None

    def _require_account(self, account_id: int) -> None:
        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))

    def _validate_category(self, category_id: Optional[int]) -> None:
        if category_id is not None and self.db.get_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))

    @staticmethod
    def _validate_description(description: Optional[str]) -> str:
        description = (description or "").strip()
        if not description:
            raise ValidationError("Description is required")
        return description

    @staticmethod
    def _validate_status(status: EntryStatus | str) -> EntryStatus:
        try:
            return EntryStatus(status)
        except ValueError:
            raise ValidationError(
                f"Status must be one of: {', '.join(s.value for s in EntryStatus)}"
            )

    @staticmethod
    def _to_decimal(amount: Any) -> Decimal:
        try:
            value = Decimal(str(amount))
        except InvalidOperation:
            raise ValidationError(f"Amount must be a number, got '{amount}'")
        if not value.is_finite():
            raise ValidationError(f"Amount must be a number, got '{amount}'")
        return value
