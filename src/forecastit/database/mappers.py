"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, making it easy to change when
the database schema changes. Enum columns are stored as their string values.
"""

from forecastit.domain import entities as domain
from forecastit.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    CategoryGroup as ORMCategoryGroup,
    LedgerEntry as ORMLedgerEntry,
    RecurringRule as ORMRecurringRule,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        account_type=domain.AccountType(orm_account.account_type),
        current_balance=orm_account.current_balance,
        balance_date=orm_account.balance_date,
        warning_threshold=orm_account.warning_threshold,
        created_at=orm_account.created_at,
    )


def category_group_to_domain(orm_group: ORMCategoryGroup) -> domain.CategoryGroup:
    """Convert SQLAlchemy CategoryGroup model to domain CategoryGroup entity."""
    return domain.CategoryGroup(
        id=orm_group.id,
        name=orm_group.name,
        color=orm_group.color,
        display_order=orm_group.display_order,
        created_at=orm_group.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        group_id=orm_category.group_id,
        display_order=orm_category.display_order,
        created_at=orm_category.created_at,
    )


def rule_to_domain(orm_rule: ORMRecurringRule) -> domain.RecurringRule:
    """Convert SQLAlchemy RecurringRule model to domain RecurringRule entity."""
    return domain.RecurringRule(
        id=orm_rule.id,
        description=orm_rule.description,
        rule_type=domain.RuleType(orm_rule.rule_type),
        frequency=domain.Frequency(orm_rule.frequency),
        amount=orm_rule.amount,
        anchor_date=orm_rule.anchor_date,
        account_id=orm_rule.account_id,
        destination_account_id=orm_rule.destination_account_id,
        category_id=orm_rule.category_id,
        day_of_month=orm_rule.day_of_month,
        day_of_week=orm_rule.day_of_week,
        active=orm_rule.active,
        is_estimated=orm_rule.is_estimated,
        created_at=orm_rule.created_at,
    )


def entry_to_domain(orm_entry: ORMLedgerEntry) -> domain.LedgerEntry:
    """Convert SQLAlchemy LedgerEntry model to domain LedgerEntry entity."""
    return domain.LedgerEntry(
        id=orm_entry.id,
        account_id=orm_entry.account_id,
        date=orm_entry.date,
        description=orm_entry.description,
        amount=orm_entry.amount,
        status=domain.EntryStatus(orm_entry.status),
        recurring_rule_id=orm_entry.recurring_rule_id,
        linked_entry_id=orm_entry.linked_entry_id,
        category_id=orm_entry.category_id,
        user_modified=orm_entry.user_modified,
        original_date=orm_entry.original_date,
        created_at=orm_entry.created_at,
    )
