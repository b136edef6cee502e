"""Tests for Database interface returning domain models."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from forecastit.database.factories import (
    create_memory_database,
    create_sqlite_database,
    default_database_path,
)
from forecastit.domain import entities
from forecastit.domain.entities import EntryStatus
from forecastit.domain.errors import ConflictError, DuplicateEntryError, NotFoundError


@pytest.fixture
def account_id(temp_db):
    return temp_db.create_account(
        name="Checking",
        account_type="checking",
        current_balance=Decimal("100.00"),
        balance_date=date(2024, 3, 15),
        warning_threshold=Decimal("300.00"),
    )


@pytest.fixture
def rule_id(temp_db, account_id):
    return temp_db.create_rule(
        description="Rent",
        rule_type="expense",
        frequency="monthly",
        amount=Decimal("1200.00"),
        anchor_date=date(2024, 4, 1),
        account_id=account_id,
        day_of_month=1,
    )


def add_entry(temp_db, account_id, on, rule_id=None, **kwargs):
    return temp_db.create_entry(
        account_id=account_id,
        date=on,
        description=kwargs.pop("description", "Rent"),
        amount=kwargs.pop("amount", Decimal("-1200.00")),
        status=kwargs.pop("status", EntryStatus.ESTIMATED),
        recurring_rule_id=rule_id,
        **kwargs,
    )


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_account_returns_domain_model(self, temp_db, account_id):
        account = temp_db.get_account(account_id)

        assert isinstance(account, entities.Account)
        assert account.account_type == entities.AccountType.CHECKING
        assert account.current_balance == Decimal("100.00")
        assert account.balance_date == date(2024, 3, 15)
        assert isinstance(account.created_at, datetime)

    def test_duplicate_account_name(self, temp_db, account_id):
        with pytest.raises(ConflictError):
            temp_db.create_account(
                name="Checking",
                account_type="savings",
                current_balance=Decimal("0"),
                balance_date=date(2024, 3, 15),
                warning_threshold=Decimal("0"),
            )
        # the failed insert must not poison the session
        assert len(temp_db.list_accounts()) == 1

    def test_get_rule_returns_domain_model(self, temp_db, rule_id, account_id):
        rule = temp_db.get_rule(rule_id)

        assert isinstance(rule, entities.RecurringRule)
        assert rule.frequency == entities.Frequency.MONTHLY
        assert rule.rule_type == entities.RuleType.EXPENSE
        assert rule.account_id == account_id
        assert rule.active is True
        assert rule.is_estimated is True

    def test_list_rules_matches_destination(self, temp_db, account_id):
        savings_id = temp_db.create_account(
            name="Savings",
            account_type="savings",
            current_balance=Decimal("0"),
            balance_date=date(2024, 3, 15),
            warning_threshold=Decimal("0"),
        )
        temp_db.create_rule(
            description="Save",
            rule_type="transfer",
            frequency="monthly",
            amount=Decimal("50"),
            anchor_date=date(2024, 4, 1),
            account_id=account_id,
            destination_account_id=savings_id,
        )

        assert [r.description for r in temp_db.list_rules(account_id=savings_id)] == ["Save"]
        assert temp_db.count_transfer_rules_for_account(savings_id) == 1

    def test_get_entry_returns_domain_model(self, temp_db, account_id, rule_id):
        entry_id = add_entry(temp_db, account_id, date(2024, 4, 1), rule_id)

        entry = temp_db.get_entry(entry_id)

        assert isinstance(entry, entities.LedgerEntry)
        assert entry.status == EntryStatus.ESTIMATED
        assert entry.amount == Decimal("-1200.00")
        assert entry.user_modified is False
        assert entry.original_date is None
        assert not entry.is_one_time

    def test_list_entries_ordered_and_bounded(self, temp_db, account_id):
        later = add_entry(temp_db, account_id, date(2024, 5, 1))
        first = add_entry(temp_db, account_id, date(2024, 4, 1))
        second = add_entry(temp_db, account_id, date(2024, 4, 1))
        add_entry(temp_db, account_id, date(2024, 6, 1))

        entries = temp_db.list_entries(
            account_id=account_id, start_date=date(2024, 4, 1), end_date=date(2024, 5, 1)
        )

        assert [e.id for e in entries] == [first, second, later]


class TestGeneratedEntries:
    def test_one_entry_per_rule_account_and_date(self, temp_db, account_id, rule_id):
        add_entry(temp_db, account_id, date(2024, 4, 1), rule_id)

        with pytest.raises(DuplicateEntryError):
            add_entry(temp_db, account_id, date(2024, 4, 1), rule_id)

        assert len(temp_db.list_entries(recurring_rule_id=rule_id)) == 1

    def test_manual_entries_may_share_a_date(self, temp_db, account_id):
        add_entry(temp_db, account_id, date(2024, 4, 1))
        add_entry(temp_db, account_id, date(2024, 4, 1))

        assert len(temp_db.list_entries(account_id=account_id)) == 2

    def test_latest_entry_date(self, temp_db, account_id, rule_id):
        assert temp_db.latest_entry_date(rule_id) is None

        add_entry(temp_db, account_id, date(2024, 4, 1), rule_id)
        add_entry(temp_db, account_id, date(2024, 6, 1), rule_id)

        assert temp_db.latest_entry_date(rule_id) == date(2024, 6, 1)

    def test_skip_dates(self, temp_db, account_id, rule_id):
        add_entry(temp_db, account_id, date(2024, 4, 1), rule_id)
        add_entry(
            temp_db, account_id, date(2024, 5, 3), rule_id,
            user_modified=True, original_date=date(2024, 5, 1),
        )

        assert temp_db.user_modified_dates(rule_id) == {date(2024, 5, 3)}
        assert temp_db.original_dates(rule_id) == {date(2024, 5, 1)}

    def test_delete_future_entries_keeps_edits(self, temp_db, account_id, rule_id):
        add_entry(temp_db, account_id, date(2024, 3, 1), rule_id)
        add_entry(temp_db, account_id, date(2024, 4, 1), rule_id)
        edited = add_entry(temp_db, account_id, date(2024, 5, 1), rule_id, user_modified=True)

        assert temp_db.delete_future_entries(rule_id, date(2024, 3, 15)) == 1

        remaining = temp_db.list_entries(recurring_rule_id=rule_id)
        assert [e.date for e in remaining] == [date(2024, 3, 1), date(2024, 5, 1)]
        assert remaining[1].id == edited

    def test_update_future_entries_category(self, temp_db, account_id, rule_id):
        group_id = temp_db.create_category_group("Housing", "teal")
        category_id = temp_db.create_category("Rent", group_id)
        add_entry(temp_db, account_id, date(2024, 3, 1), rule_id)
        add_entry(temp_db, account_id, date(2024, 4, 1), rule_id)

        assert temp_db.update_future_entries_category(rule_id, date(2024, 3, 15), category_id) == 1

        entries = temp_db.list_entries(recurring_rule_id=rule_id)
        assert [e.category_id for e in entries] == [None, category_id]

    def test_delete_rule_removes_its_entries(self, temp_db, account_id, rule_id):
        add_entry(temp_db, account_id, date(2024, 4, 1), rule_id)
        manual = add_entry(temp_db, account_id, date(2024, 4, 2))

        temp_db.delete_rule(rule_id)

        assert temp_db.get_rule(rule_id) is None
        assert [e.id for e in temp_db.list_entries(account_id=account_id)] == [manual]


class TestLinksAndAtomicity:
    def test_delete_entry_clears_twin_link(self, temp_db, account_id):
        out_id = add_entry(temp_db, account_id, date(2024, 4, 1))
        in_id = add_entry(temp_db, account_id, date(2024, 4, 1), amount=Decimal("1200.00"), linked_entry_id=out_id)
        temp_db.update_entry(out_id, {"linked_entry_id": in_id})

        temp_db.delete_entry(out_id)

        assert temp_db.get_entry(out_id) is None
        assert temp_db.get_entry(in_id).linked_entry_id is None

    def test_delete_missing_entry(self, temp_db):
        with pytest.raises(NotFoundError):
            temp_db.delete_entry(99)

    def test_atomic_rolls_back_every_write(self, temp_db, account_id):
        with pytest.raises(RuntimeError):
            with temp_db.atomic():
                add_entry(temp_db, account_id, date(2024, 4, 1))
                temp_db.update_account(account_id, {"current_balance": Decimal("5.00")})
                raise RuntimeError("boom")

        assert temp_db.list_entries(account_id=account_id) == []
        assert temp_db.get_account(account_id).current_balance == Decimal("100.00")

    def test_nested_atomic_commits_once(self, temp_db, account_id):
        with temp_db.atomic():
            add_entry(temp_db, account_id, date(2024, 4, 1))
            with temp_db.atomic():
                add_entry(temp_db, account_id, date(2024, 4, 2))

        temp_db.disconnect()
        assert len(temp_db.list_entries(account_id=account_id)) == 2

    def test_failed_nested_block_keeps_outer_writes(self, temp_db, account_id, rule_id):
        with temp_db.atomic():
            add_entry(temp_db, account_id, date(2024, 4, 1), rule_id)
            with pytest.raises(DuplicateEntryError):
                with temp_db.atomic():
                    add_entry(temp_db, account_id, date(2024, 4, 2))
                    add_entry(temp_db, account_id, date(2024, 4, 1), rule_id)
            add_entry(temp_db, account_id, date(2024, 4, 3))

        temp_db.disconnect()
        entries = temp_db.list_entries(account_id=account_id)
        assert [e.date for e in entries] == [date(2024, 4, 1), date(2024, 4, 3)]

    def test_delete_account_entries_before(self, temp_db, account_id):
        add_entry(temp_db, account_id, date(2024, 3, 14))
        add_entry(temp_db, account_id, date(2024, 3, 15))
        add_entry(temp_db, account_id, date(2024, 3, 16))

        assert temp_db.delete_account_entries_before(account_id, date(2024, 3, 15)) == 1
        assert temp_db.delete_account_entries_before(account_id, date(2024, 3, 15), inclusive=True) == 1
        assert [e.date for e in temp_db.list_entries(account_id=account_id)] == [date(2024, 3, 16)]


class TestFactories:
    def test_default_path_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("FORECASTIT_DB_PATH", str(tmp_path / "nested" / "ledger.db"))

        assert default_database_path() == tmp_path / "nested" / "ledger.db"

    def test_sqlite_database_creates_parent_directories(self, tmp_path):
        db = create_sqlite_database(str(tmp_path / "a" / "b" / "ledger.db"))

        assert db.list_accounts() == []
        assert (tmp_path / "a" / "b" / "ledger.db").exists()
        db.disconnect()

    def test_memory_database_keeps_data_across_sessions(self):
        db = create_memory_database()
        db.create_account(
            name="Cash",
            account_type="checking",
            current_balance=Decimal("20"),
            balance_date=date(2024, 3, 15),
            warning_threshold=Decimal("0"),
        )
        db.disconnect()

        assert [a.name for a in db.list_accounts()] == ["Cash"]
