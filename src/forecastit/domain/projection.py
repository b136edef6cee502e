"""Projection engine: turns recurring rules into ledger entries.

Entries are created one date at a time. Each date is its own atomic unit so a
transfer never ends up with only one leg stored; inside a larger transaction
that unit is a savepoint. Creating an entry that already exists (same rule,
account and date) is not an error: extension is expected to be called
repeatedly, possibly by racing callers, and the unique index on the ledger is
what keeps it idempotent.
"""

import logging
from datetime import date, timedelta
from typing import Callable, Iterable, Optional

from forecastit.config import ProjectionConfig
from forecastit.database.base import Database
from forecastit.domain.entities import RecurringRule, signed_amount
from forecastit.domain.errors import DuplicateEntryError, InvalidTransferRuleError
from forecastit.domain.recurrence import RecurrenceCalculator

logger = logging.getLogger(__name__)


class ProjectionService:
    """Service for generating and maintaining projected entries."""

    def __init__(
        self,
        db: Database,
        config: Optional[ProjectionConfig] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        """Initialize projection service.

        Args:
            db: Database instance
            config: Projection settings (default horizon)
            today: Callable returning the current date, for tests
        """
        self.db = db
        self.config = config or ProjectionConfig()
        self._today = today or date.today

    def today(self) -> date:
        return self._today()

    def default_end_date(self) -> date:
        return self.config.horizon_end(self.today())

    def generate_through(self, rule: RecurringRule, end_date: Optional[date] = None) -> int:
        """Create entries for the rule from max(anchor, today) through ``end_date``.

        Used right after a rule is created and after a full regeneration.

        Returns:
            Number of dates for which entries were created
        """
        if not rule.active:
            return 0
        end_date = end_date or self.default_end_date()
        dates = RecurrenceCalculator(rule).dates_until(end_date, today=self.today())
        return self._create_entries(rule, dates)

    def extend_through(self, rule: RecurringRule, end_date: date) -> int:
        """Create the entries still missing between the rule's last entry and ``end_date``.

        Calling this again with the same end date creates nothing.

        Returns:
            Number of dates for which entries were created
        """
        if not rule.active:
            return 0

        latest_existing = self.db.latest_entry_date(rule.id)
        if latest_existing is not None and latest_existing >= end_date:
            return 0

        if latest_existing is not None:
            start_from = latest_existing + timedelta(days=1)
        else:
            start_from = max(rule.anchor_date, self.today())

        dates = RecurrenceCalculator(rule).dates_between(start_from, end_date)
        return self._create_entries(rule, dates)

    def extend_all_through(self, end_date: date, account_id: Optional[int] = None) -> int:
        """Extend every active rule, or every active rule touching ``account_id``.

        A rule touches an account when the account is its source or, for
        transfers, its destination.
        """
        created = 0
        for rule in self.db.list_rules(active_only=True, account_id=account_id):
            created += self.extend_through(rule, end_date)
        return created

    def regenerate(self, rule: RecurringRule) -> int:
        """Replace the rule's future unedited entries after a schedule change.

        Entries a user edited and everything dated before today stay as they
        are. Inactive rules are only pruned. Pruning and generating share one
        transaction.

        Returns:
            Number of dates for which entries were created
        """
        with self.db.atomic():
            self.prune(rule)
            return self.generate_through(rule)

    def prune(self, rule: RecurringRule) -> int:
        """Delete the rule's future entries no user has edited."""
        deleted = self.db.delete_future_entries(rule.id, self.today())
        logger.info("Removed %d future entr(ies) for rule %s", deleted, rule.id)
        return deleted

    def patch_category(self, rule: RecurringRule) -> int:
        """Copy the rule's category onto its future entries in place."""
        return self.db.update_future_entries_category(rule.id, self.today(), rule.category_id)

    def set_active(self, rule: RecurringRule, active: bool) -> int:
        """Apply an activation change.

        Deactivating prunes future unedited entries; reactivating regenerates.
        ``rule`` must already carry the new ``active`` value.
        """
        if active:
            return self.regenerate(rule)
        self.prune(rule)
        return 0

    def dates_to_skip(self, rule: RecurringRule) -> set[date]:
        """Dates the engine must never fill for this rule.

        Dates of entries a user edited are theirs, and dates a user moved an
        entry away from must stay empty.
        """
        return self.db.user_modified_dates(rule.id) | self.db.original_dates(rule.id)

    def _create_entries(self, rule: RecurringRule, dates: Iterable[date]) -> int:
        skip_dates = self.dates_to_skip(rule)
        created = 0
        for entry_date in dates:
            if entry_date in skip_dates:
                continue
            try:
                if self._create_entry_for_date(rule, entry_date):
                    created += 1
            except InvalidTransferRuleError as exc:
                logger.warning("Skipping invalid transfer rule %s on %s: %s", rule.id, entry_date, exc)
        return created

    def _create_entry_for_date(self, rule: RecurringRule, entry_date: date) -> bool:
        """Create the entry (and the transfer twin) for one date.

        Returns:
            False when the entry already existed
        """
        if rule.is_transfer and (
            rule.destination_account_id is None or rule.destination_account_id == rule.account_id
        ):
            raise InvalidTransferRuleError("source and destination accounts are the same")

        try:
            with self.db.atomic():
                entry_id = self.db.create_entry(
                    account_id=rule.account_id,
                    date=entry_date,
                    description=rule.description,
                    amount=signed_amount(rule.rule_type, rule.amount),
                    status=rule.entry_status,
                    recurring_rule_id=rule.id,
                    category_id=rule.category_id,
                )
                if rule.is_transfer:
                    twin_id = self.db.create_entry(
                        account_id=rule.destination_account_id,
                        date=entry_date,
                        description=rule.description,
                        amount=signed_amount(rule.rule_type, rule.amount, destination_leg=True),
                        status=rule.entry_status,
                        recurring_rule_id=rule.id,
                        linked_entry_id=entry_id,
                        category_id=rule.category_id,
                    )
                    self.db.update_entry(entry_id, {"linked_entry_id": twin_id})
        except DuplicateEntryError:
            logger.debug("Entry for rule %s on %s already exists", rule.id, entry_date)
            return False
        return True
