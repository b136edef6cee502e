"""Collapse runs of high-frequency recurring entries for display.

A run is a stretch of consecutive entries (in ledger order) from the same
recurring rule with the same status. Runs of three or more become one group;
shorter runs stay as single items. Today always ends a run, so past and
future entries never share a group.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Mapping, Optional, Sequence, Union

from forecastit.domain.balance import BalancedEntry
from forecastit.domain.entities import (
    EntryStatus,
    HIGH_FREQUENCIES,
    LedgerEntry,
    RecurringRule,
)

MIN_GROUP_SIZE = 3


@dataclass(frozen=True)
class SingleEntry:
    """One entry shown on its own."""

    entry: LedgerEntry
    running_balance: Decimal

    @property
    def is_group(self) -> bool:
        return False


@dataclass(frozen=True)
class EntryGroup:
    """Consecutive entries from one rule shown as a single line."""

    recurring_rule_id: int
    recurring_rule: Optional[RecurringRule]
    entries: tuple[BalancedEntry, ...]
    first_date: date
    last_date: date
    total_amount: Decimal
    ending_balance: Decimal
    status: EntryStatus
    count: int
    category_id: Optional[int]

    @property
    def is_group(self) -> bool:
        return True


LedgerItem = Union[SingleEntry, EntryGroup]


def can_group(entry: LedgerEntry, rules: Mapping[int, RecurringRule]) -> bool:
    """Only entries from rules firing more often than monthly are grouped.

    An entry whose rule isn't in ``rules`` is treated as groupable.
    """
    if entry.recurring_rule_id is None:
        return False
    rule = rules.get(entry.recurring_rule_id)
    if rule is None:
        return True
    return rule.frequency in HIGH_FREQUENCIES


def crosses_today(run: Sequence[BalancedEntry], entry: LedgerEntry, today: date) -> bool:
    return run[0].entry.date < today <= entry.date


def continues_run(run: Sequence[BalancedEntry], entry: LedgerEntry, today: date) -> bool:
    if not run or crosses_today(run, entry, today):
        return False
    first = run[0].entry
    return first.recurring_rule_id == entry.recurring_rule_id and first.status == entry.status


def build_group(run: Sequence[BalancedEntry], rules: Mapping[int, RecurringRule]) -> EntryGroup:
    first = run[0].entry
    return EntryGroup(
        recurring_rule_id=first.recurring_rule_id,
        recurring_rule=rules.get(first.recurring_rule_id),
        entries=tuple(run),
        first_date=first.date,
        last_date=run[-1].entry.date,
        total_amount=sum((item.entry.amount for item in run), Decimal("0")),
        ending_balance=run[-1].running_balance,
        status=first.status,
        count=len(run),
        category_id=first.category_id,
    )


def _flush(run: list[BalancedEntry], result: list[LedgerItem], rules: Mapping[int, RecurringRule]) -> None:
    if len(run) >= MIN_GROUP_SIZE:
        result.append(build_group(run, rules))
    else:
        result.extend(SingleEntry(entry=item.entry, running_balance=item.running_balance) for item in run)


def group_entries(
    entries_with_balances: Sequence[BalancedEntry],
    rules: Optional[Mapping[int, RecurringRule]] = None,
    today: Optional[date] = None,
) -> list[LedgerItem]:
    """Group consecutive entries of the same high-frequency rule.

    Args:
        entries_with_balances: Entries in ledger order with running balances
        rules: Recurring rules by ID, used to look up frequencies
        today: Date that splits past from future runs

    Returns:
        Mixed list of SingleEntry and EntryGroup items, in input order
    """
    rules = rules or {}
    today = today or date.today()
    result: list[LedgerItem] = []
    run: list[BalancedEntry] = []

    for item in entries_with_balances:
        entry = item.entry
        groupable = can_group(entry, rules)

        if groupable and continues_run(run, entry, today):
            run.append(item)
            continue

        _flush(run, result, rules)
        if groupable:
            run = [item]
        else:
            run = []
            result.append(SingleEntry(entry=entry, running_balance=item.running_balance))

    _flush(run, result, rules)
    return result
