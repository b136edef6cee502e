"""Tests for balance projection."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from forecastit.domain.balance import (
    BalanceProjector,
    classify_balance,
    lowest_projected_balance,
    projected_balance,
    projection_status,
    running_balances_for,
)
from forecastit.domain.entities import Account, AccountType, EntryStatus, LedgerEntry, ProjectionStatus

TODAY = date(2024, 3, 15)


def make_account(balance="1000.00", balance_date=date(2024, 3, 1), threshold="300.00"):
    return Account(
        id=1,
        name="Checking",
        account_type=AccountType.CHECKING,
        current_balance=Decimal(balance),
        balance_date=balance_date,
        warning_threshold=Decimal(threshold),
        created_at=datetime(2024, 1, 1),
    )


def make_entry(entry_id, on, amount, status=EntryStatus.ESTIMATED):
    return LedgerEntry(
        id=entry_id,
        account_id=1,
        date=on,
        description=f"Entry {entry_id}",
        amount=Decimal(amount),
        status=status,
        recurring_rule_id=None,
        linked_entry_id=None,
        category_id=None,
        user_modified=False,
        original_date=None,
        created_at=datetime(2024, 1, 1),
    )


class TestLowestProjectedBalance:
    def test_dip_in_the_future(self):
        entries = [make_entry(1, date(2024, 3, 20), "-800"), make_entry(2, date(2024, 3, 25), "500")]
        assert lowest_projected_balance(make_account(), entries, date(2024, 6, 15), today=TODAY) == Decimal("200.00")

    def test_past_dip_is_ignored_without_future_entries(self):
        entries = [
            make_entry(1, date(2024, 3, 5), "-800", EntryStatus.ACTUAL),
            make_entry(2, date(2024, 3, 10), "500", EntryStatus.ACTUAL),
        ]
        assert lowest_projected_balance(make_account(), entries, date(2024, 6, 15), today=TODAY) == Decimal("700.00")

    def test_past_entries_move_the_starting_point(self):
        entries = [
            make_entry(1, date(2024, 3, 5), "-800", EntryStatus.ACTUAL),
            make_entry(2, date(2024, 3, 20), "100"),
            make_entry(3, date(2024, 3, 22), "-50"),
        ]
        assert lowest_projected_balance(make_account(), entries, date(2024, 6, 15), today=TODAY) == Decimal("250.00")

    def test_entries_on_today_are_not_future(self):
        entries = [make_entry(1, TODAY, "-900"), make_entry(2, date(2024, 3, 16), "900")]
        assert lowest_projected_balance(make_account(), entries, date(2024, 6, 15), today=TODAY) == Decimal("1000.00")

    def test_entries_outside_window_are_ignored(self):
        entries = [
            make_entry(1, date(2024, 2, 20), "-5000"),
            make_entry(2, date(2024, 7, 1), "-5000"),
            make_entry(3, date(2024, 4, 1), "-100"),
        ]
        assert lowest_projected_balance(make_account(), entries, date(2024, 6, 15), today=TODAY) == Decimal("900.00")

    def test_unsorted_input(self):
        entries = [make_entry(2, date(2024, 3, 25), "500"), make_entry(1, date(2024, 3, 20), "-800")]
        assert lowest_projected_balance(make_account(), entries, date(2024, 6, 15), today=TODAY) == Decimal("200.00")


def test_projected_balance_includes_balance_date_through_as_of():
    account = make_account()
    entries = [
        make_entry(1, date(2024, 3, 1), "-10"),
        make_entry(2, date(2024, 4, 1), "-20"),
        make_entry(3, date(2024, 4, 2), "-40"),
    ]
    assert projected_balance(account, entries, date(2024, 4, 1)) == Decimal("970.00")


@pytest.mark.parametrize(
    "lowest, expected",
    [
        ("300.00", ProjectionStatus.NORMAL),
        ("299.99", ProjectionStatus.WARNING),
        ("0", ProjectionStatus.WARNING),
        ("-0.01", ProjectionStatus.DANGER),
    ],
)
def test_classify_balance_thresholds(lowest, expected):
    assert classify_balance(Decimal(lowest), Decimal("300.00")) == expected


def test_projection_status_uses_account_threshold():
    account = make_account(threshold="250.00")
    entries = [make_entry(1, date(2024, 3, 20), "-750")]
    assert projection_status(account, entries, date(2024, 6, 15), today=TODAY) == ProjectionStatus.NORMAL
    assert projection_status(make_account(), entries, date(2024, 6, 15), today=TODAY) == ProjectionStatus.WARNING


def test_running_balances_follow_input_order():
    entries = [make_entry(1, date(2024, 3, 20), "-100"), make_entry(2, date(2024, 3, 21), "40.50")]

    balanced = running_balances_for(make_account(), entries)

    assert [b.entry.id for b in balanced] == [1, 2]
    assert [b.running_balance for b in balanced] == [Decimal("900.00"), Decimal("940.50")]


class TestBalanceProjector:
    def test_reads_stored_entries(self, temp_db, transaction_service, checking, today):
        transaction_service.create_entry(
            account_id=checking.id, date=date(2024, 3, 20), description="Car", amount=Decimal("-900"),
            status="estimated",
        )
        transaction_service.create_entry(
            account_id=checking.id, date=date(2024, 3, 28), description="Pay", amount=Decimal("2000"),
            status="estimated",
        )
        projector = BalanceProjector(temp_db, today=lambda: today)

        assert projector.lowest_projected_balance(checking.id) == Decimal("100.00")
        assert projector.projected_balance(checking.id) == Decimal("2100.00")
        assert projector.projection_status(checking.id) == ProjectionStatus.WARNING

    def test_unknown_account(self, temp_db):
        from forecastit.domain.errors import NotFoundError

        with pytest.raises(NotFoundError):
            BalanceProjector(temp_db).projected_balance(42)
