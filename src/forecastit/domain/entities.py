"""Domain model entities for forecastit.

These are pure data classes representing business concepts, independent of
database schema. Services receive and return these; the database layer maps its
ORM rows onto them.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class AccountType(str, Enum):
    """Kind of bank account."""

    CHECKING = "checking"
    SAVINGS = "savings"


class RuleType(str, Enum):
    """Direction of money for a recurring rule."""

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class Frequency(str, Enum):
    """How often a recurring rule fires."""

    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    SEMIMONTHLY = "semimonthly"
    MONTHLY = "monthly"
    MONTHLY_LAST = "monthly_last"
    QUARTERLY = "quarterly"
    BIYEARLY = "biyearly"
    YEARLY = "yearly"


# More frequent than monthly; these collapse into groups in the ledger view.
HIGH_FREQUENCIES = frozenset(
    {Frequency.DAILY, Frequency.WEEKLY, Frequency.BIWEEKLY, Frequency.SEMIMONTHLY}
)


class EntryStatus(str, Enum):
    """Whether a ledger entry is a projection or a confirmed amount."""

    ESTIMATED = "estimated"
    ACTUAL = "actual"


class ProjectionStatus(str, Enum):
    """Health of an account's forward-looking balance."""

    NORMAL = "normal"
    WARNING = "warning"
    DANGER = "danger"


COLORS = ("teal", "purple", "rose", "orange", "sky", "lime", "fuchsia", "slate")


@dataclass(frozen=True)
class Account:
    """Bank account domain entity.

    ``current_balance`` is valid as of ``balance_date``; entries dated after
    ``balance_date`` are added on top of it to reconstruct later balances.
    """

    id: int
    name: str
    account_type: AccountType
    current_balance: Decimal
    balance_date: date
    warning_threshold: Decimal
    created_at: datetime


@dataclass(frozen=True)
class CategoryGroup:
    """Top level of the two-level category taxonomy."""

    id: int
    name: str
    color: str
    display_order: int
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Category domain entity, always inside a group."""

    id: int
    name: str
    group_id: int
    display_order: int
    created_at: datetime


@dataclass(frozen=True)
class RecurringRule:
    """Recurring income, expense or transfer definition.

    ``amount`` is always a positive magnitude; the sign of generated entries is
    derived from ``rule_type``.
    """

    id: int
    description: str
    rule_type: RuleType
    frequency: Frequency
    amount: Decimal
    anchor_date: date
    account_id: int
    destination_account_id: Optional[int]
    category_id: Optional[int]
    day_of_month: Optional[int]
    day_of_week: Optional[int]
    active: bool
    is_estimated: bool
    created_at: datetime

    @property
    def is_transfer(self) -> bool:
        return self.rule_type == RuleType.TRANSFER

    @property
    def entry_status(self) -> EntryStatus:
        """Status given to entries generated from this rule."""
        return EntryStatus.ESTIMATED if self.is_estimated else EntryStatus.ACTUAL


@dataclass(frozen=True)
class LedgerEntry:
    """Ledger entry (transaction) domain entity.

    Entries with a ``recurring_rule_id`` were generated by the projection
    engine; entries without one were added by hand. A transfer is a pair of
    entries pointing at each other through ``linked_entry_id``.
    """

    id: int
    account_id: int
    date: date
    description: str
    amount: Decimal
    status: EntryStatus
    recurring_rule_id: Optional[int]
    linked_entry_id: Optional[int]
    category_id: Optional[int]
    user_modified: bool
    original_date: Optional[date]
    created_at: datetime

    @property
    def is_transfer(self) -> bool:
        return self.linked_entry_id is not None

    @property
    def is_one_time(self) -> bool:
        return self.recurring_rule_id is None

    @property
    def is_income(self) -> bool:
        return self.amount >= 0


def signed_amount(rule_type: RuleType, amount: Decimal, destination_leg: bool = False) -> Decimal:
    """Return the ledger amount for a rule amount.

    Income is positive, expenses and the source leg of a transfer are negative,
    the destination leg of a transfer is positive.
    """
    if rule_type == RuleType.INCOME:
        return amount
    if rule_type == RuleType.EXPENSE:
        return -amount
    if rule_type == RuleType.TRANSFER:
        return amount if destination_leg else -amount
    raise ValueError(f"Unknown rule type: {rule_type!r}")
