"""Tests for domain entities."""

import pytest
from dataclasses import FrozenInstanceError
from datetime import datetime, date, UTC
from decimal import Decimal

from forecastit.domain.entities import (
    HIGH_FREQUENCIES,
    EntryStatus,
    Frequency,
    LedgerEntry,
    RuleType,
    signed_amount,
)


def make_entry(**overrides):
    values = dict(
        id=1,
        account_id=1,
        date=date(2024, 3, 18),
        description="Coffee",
        amount=Decimal("-4.50"),
        status=EntryStatus.ESTIMATED,
        recurring_rule_id=None,
        linked_entry_id=None,
        category_id=None,
        user_modified=False,
        original_date=None,
        created_at=datetime.now(UTC),
    )
    values.update(overrides)
    return LedgerEntry(**values)


def test_entry_immutability():
    """Test that LedgerEntry entities are immutable."""
    entry = make_entry()
    with pytest.raises(FrozenInstanceError):
        entry.amount = Decimal("0")


def test_entry_flags():
    assert make_entry().is_one_time
    assert not make_entry().is_income
    assert make_entry(amount=Decimal("0")).is_income
    assert make_entry(linked_entry_id=2).is_transfer
    assert not make_entry(recurring_rule_id=7).is_one_time


@pytest.mark.parametrize(
    "rule_type, destination_leg, expected",
    [
        (RuleType.INCOME, False, Decimal("25")),
        (RuleType.EXPENSE, False, Decimal("-25")),
        (RuleType.TRANSFER, False, Decimal("-25")),
        (RuleType.TRANSFER, True, Decimal("25")),
    ],
)
def test_signed_amount(rule_type, destination_leg, expected):
    assert signed_amount(rule_type, Decimal("25"), destination_leg) == expected


def test_high_frequencies():
    assert Frequency.SEMIMONTHLY in HIGH_FREQUENCIES
    assert Frequency.MONTHLY not in HIGH_FREQUENCIES
    assert Frequency.MONTHLY_LAST not in HIGH_FREQUENCIES
