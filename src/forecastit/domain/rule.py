"""Recurring rule domain service."""

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from forecastit.config import ProjectionConfig
from forecastit.database.base import Database
from forecastit.domain.entities import Frequency, RecurringRule, RuleType
from forecastit.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    category_not_found,
    rule_not_found,
    same_transfer_accounts,
)
from forecastit.domain.projection import ProjectionService

logger = logging.getLogger(__name__)

# Changing any of these replaces the rule's future unedited entries.
SCHEDULE_FIELDS = (
    "frequency",
    "anchor_date",
    "day_of_month",
    "day_of_week",
    "amount",
    "rule_type",
    "account_id",
    "destination_account_id",
    "is_estimated",
)

EDITABLE_FIELDS = frozenset(SCHEDULE_FIELDS) | {"description", "category_id", "active"}


class RecurringRuleService:
    """Service for managing recurring rules and their projections."""

    def __init__(
        self,
        db: Database,
        config: Optional[ProjectionConfig] = None,
        projection: Optional[ProjectionService] = None,
    ):
        """Initialize recurring rule service.

        Args:
            db: Database instance
            config: Projection settings, used when no projection service is given
            projection: Projection service to generate entries with
        """
        self.db = db
        self.projection = projection or ProjectionService(db, config)

    def create_rule(
        self,
        description: str,
        rule_type: RuleType | str,
        frequency: Frequency | str,
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
        """Create a rule and generate its entries through the default horizon.

        Args:
            description: Text copied onto every generated entry
            rule_type: income, expense or transfer
            frequency: How often the rule fires
            amount: Positive magnitude
            anchor_date: Date the recurrence is phased from
            account_id: Source account
            destination_account_id: Destination account, transfers only
            category_id: Optional category
            day_of_month: Optional day (1-31) for monthly and semimonthly rules
            day_of_week: Optional weekday (0=Sunday .. 6=Saturday) for weekly rules
            active: Inactive rules generate nothing
            is_estimated: Generated entries are estimated if True, actual otherwise

        Returns:
            Rule ID

        Raises:
            ValidationError: If the rule is malformed
            NotFoundError: If a referenced account or category doesn't exist
        """
        fields = self.validate_rule(
            {
                "description": description,
                "rule_type": rule_type,
                "frequency": frequency,
                "amount": amount,
                "anchor_date": anchor_date,
                "account_id": account_id,
                "destination_account_id": destination_account_id,
                "category_id": category_id,
                "day_of_month": day_of_month,
                "day_of_week": day_of_week,
                "active": active,
                "is_estimated": is_estimated,
            }
        )

        with self.db.atomic():
            rule_id = self.db.create_rule(**fields)
            rule = self.db.get_rule(rule_id)
            created = self.projection.generate_through(rule)
        logger.info("Created rule %s with %d projected date(s)", rule_id, created)
        return rule_id

    def get_rule(self, rule_id: int) -> Optional[RecurringRule]:
        return self.db.get_rule(rule_id)

    def require_rule(self, rule_id: int) -> RecurringRule:
        rule = self.db.get_rule(rule_id)
        if rule is None:
            raise NotFoundError(rule_not_found(rule_id))
        return rule

    def list_rules(self, active_only: bool = False, account_id: Optional[int] = None) -> list[RecurringRule]:
        return self.db.list_rules(active_only=active_only, account_id=account_id)

    def update_rule(self, rule_id: int, **changes: Any) -> RecurringRule:
        """Update a rule and bring its future entries in line.

        A change to any schedule field regenerates future unedited entries.
        A change to the category alone is copied onto future entries in place.
        Deactivating prunes future unedited entries; reactivating regenerates.
        The rule row and its entries change together or not at all.

        Returns:
            The updated rule

        Raises:
            NotFoundError: If the rule doesn't exist
            ValidationError: If the resulting rule is malformed
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

        current = self.require_rule(rule_id)
        merged = {name: getattr(current, name) for name in EDITABLE_FIELDS}
        merged.update(changes)
        fields = self.validate_rule(merged)

        changed = {name for name, value in fields.items() if value != getattr(current, name)}
        if not changed:
            return current

        with self.db.atomic():
            self.db.update_rule(rule_id, {name: fields[name] for name in changed})
            rule = self.db.get_rule(rule_id)

            if "active" in changed:
                self.projection.set_active(rule, rule.active)
            elif changed.intersection(SCHEDULE_FIELDS):
                self.projection.regenerate(rule)
            elif "category_id" in changed:
                self.projection.patch_category(rule)
        return rule

    def set_active(self, rule_id: int, active: bool) -> RecurringRule:
        """Activate or deactivate a rule."""
        return self.update_rule(rule_id, active=active)

    def delete_rule(self, rule_id: int) -> None:
        """Delete a rule together with all of its entries."""
        self.require_rule(rule_id)
        self.db.delete_rule(rule_id)

    def validate_rule(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Check a full set of rule fields and normalize their types.

        Returns:
            The fields with enums, Decimal amount and integer days coerced

        Raises:
            ValidationError: If any field is invalid
            NotFoundError: If a referenced account or category doesn't exist
        """
        errors = []
        normalized = dict(fields)

        description = (fields.get("description") or "").strip()
        if not description:
            errors.append("description is required")
        normalized["description"] = description

        try:
            normalized["rule_type"] = RuleType(fields.get("rule_type"))
        except ValueError:
            errors.append(f"rule type must be one of: {', '.join(t.value for t in RuleType)}")

        try:
            normalized["frequency"] = Frequency(fields.get("frequency"))
        except ValueError:
            errors.append(f"frequency must be one of: {', '.join(f.value for f in Frequency)}")

        try:
            amount = Decimal(str(fields.get("amount")))
            if not amount.is_finite() or amount <= 0:
                errors.append("amount must be greater than 0")
            normalized["amount"] = amount
        except InvalidOperation:
            errors.append("amount must be a number")

        if fields.get("anchor_date") is None:
            errors.append("anchor date is required")

        for name, low, high in (("day_of_month", 1, 31), ("day_of_week", 0, 6)):
            value = fields.get(name)
            if value is None:
                continue
            try:
                normalized[name] = int(value)
            except (TypeError, ValueError):
                normalized[name] = None
            if normalized[name] is None or not low <= normalized[name] <= high:
                errors.append(f"{name.replace('_', ' ')} must be between {low} and {high}")

        account_id = fields.get("account_id")
        destination_account_id = fields.get("destination_account_id")
        if normalized.get("rule_type") == RuleType.TRANSFER:
            if destination_account_id is None:
                errors.append("destination account is required for transfers")
            elif destination_account_id == account_id:
                errors.append(same_transfer_accounts().lower())
        elif destination_account_id is not None:
            errors.append("only transfers can have a destination account")

        if errors:
            raise ValidationError("Invalid recurring rule: " + "; ".join(errors))

        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))
        if destination_account_id is not None and self.db.get_account(destination_account_id) is None:
            raise NotFoundError(account_not_found(destination_account_id))
        category_id = fields.get("category_id")
        if category_id is not None and self.db.get_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))

        normalized["active"] = bool(fields.get("active", True))
        normalized["is_estimated"] = bool(fields.get("is_estimated", True))
        return normalized
