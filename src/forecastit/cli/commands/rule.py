"""Recurring rule commands."""

from datetime import date

import click
from forecastit.cli.error_handling import (
    handle_domain_error,
    parse_amount_or_exit,
    parse_date_or_exit,
    parse_weekday_or_exit,
    resolve_account_or_exit,
    resolve_category_or_exit,
)
from forecastit.domain.account import AccountService
from forecastit.domain.category import CategoryService
from forecastit.domain.entities import Frequency, RuleType
from forecastit.domain.rule import RecurringRuleService
from forecastit.utils.amount_parser import format_amount

RULE_TYPES = [t.value for t in RuleType]
FREQUENCIES = [f.value for f in Frequency]
WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def _rule_service(ctx) -> RecurringRuleService:
    return RecurringRuleService(ctx.obj["db"], ctx.obj.get("config"))


@click.group()
def rule_group():
    """Manage recurring income, expenses and transfers."""
    pass


@rule_group.command("create")
@click.argument("description")
@click.option("--type", "rule_type", type=click.Choice(RULE_TYPES), required=True, help="income, expense or transfer")
@click.option("--frequency", type=click.Choice(FREQUENCIES), required=True, help="How often it repeats")
@click.option("--amount", required=True, help="Amount per occurrence (positive)")
@click.option("--account", required=True, help="Account name or ID (the source for transfers)")
@click.option("--to", "destination", help="Destination account name or ID (transfers only)")
@click.option("--anchor", help="First occurrence, used to phase the schedule (default: today)")
@click.option("--day-of-month", type=int, help="Day of month (1-31) for monthly and semimonthly rules")
@click.option("--day-of-week", help="Weekday for weekly rules (e.g. 'friday' or 0-6 with 0=Sunday)")
@click.option("--category", help="Category path (e.g., 'Housing > Rent')")
@click.option("--actual", is_flag=True, help="Generated transactions are exact rather than estimated")
@click.pass_context
def create_rule(
    ctx,
    description: str,
    rule_type: str,
    frequency: str,
    amount: str,
    account: str,
    destination: str | None,
    anchor: str | None,
    day_of_month: int | None,
    day_of_week: str | None,
    category: str | None,
    actual: bool,
):
    """Create a recurring rule and project its transactions.

    Examples:
        forecastit rule create "Paycheck" --type income --frequency biweekly --amount 2100 --account Checking --anchor 2024-01-05
        forecastit rule create "Rent" --type expense --frequency monthly --amount 1500 --account Checking --day-of-month 1
        forecastit rule create "Save" --type transfer --frequency monthly --amount 200 --account Checking --to Savings
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)

    account_id = resolve_account_or_exit(ctx, account_service, account)
    destination_id = resolve_account_or_exit(ctx, account_service, destination) if destination else None
    category_id = resolve_category_or_exit(ctx, CategoryService(db), category)
    rule_amount = parse_amount_or_exit(ctx, amount)
    anchor_date = parse_date_or_exit(ctx, anchor, "anchor date") or date.today()

    try:
        service = _rule_service(ctx)
        rule_id = service.create_rule(
            description=description,
            rule_type=rule_type,
            frequency=frequency,
            amount=rule_amount,
            anchor_date=anchor_date,
            account_id=account_id,
            destination_account_id=destination_id,
            category_id=category_id,
            day_of_month=day_of_month,
            day_of_week=parse_weekday_or_exit(ctx, day_of_week),
            is_estimated=not actual,
        )
        click.echo(f"Created rule '{description.strip()}' (ID: {rule_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@rule_group.command("list")
@click.option("--account", help="Only rules touching this account (name or ID)")
@click.option("--active-only", is_flag=True, help="Hide inactive rules")
@click.pass_context
def list_rules(ctx, account: str | None, active_only: bool):
    """List recurring rules."""
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), account) if account else None

    rules = _rule_service(ctx).list_rules(active_only=active_only, account_id=account_id)
    if not rules:
        click.echo("No rules found.")
        return

    click.echo("\nRules:")
    click.echo("-" * 90)
    for r in rules:
        state = "" if r.active else " (inactive)"
        click.echo(
            f"ID: {r.id:3d} | {r.description:25s} | {r.rule_type.value:8s} | "
            f"{r.frequency.value:12s} | {format_amount(r.amount):>11s}{state}"
        )


@rule_group.command("show")
@click.argument("rule_id", type=int)
@click.pass_context
def show_rule(ctx, rule_id: int):
    """Show one rule in detail."""
    db = ctx.obj["db"]
    try:
        r = _rule_service(ctx).require_rule(rule_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    accounts = {acc.id: acc.name for acc in AccountService(db).list_accounts()}

    click.echo(f"\nRule ID: {r.id}")
    click.echo(f"  Description: {r.description}")
    click.echo(f"  Type: {r.rule_type.value}")
    click.echo(f"  Frequency: {r.frequency.value}")
    click.echo(f"  Amount: {format_amount(r.amount)}")
    click.echo(f"  Anchor date: {r.anchor_date}")
    click.echo(f"  Account: {accounts.get(r.account_id, 'Unknown')} (ID: {r.account_id})")
    if r.destination_account_id is not None:
        click.echo(
            f"  Destination: {accounts.get(r.destination_account_id, 'Unknown')} (ID: {r.destination_account_id})"
        )
    if r.day_of_month is not None:
        click.echo(f"  Day of month: {r.day_of_month}")
    if r.day_of_week is not None:
        click.echo(f"  Day of week: {WEEKDAY_NAMES[r.day_of_week]}")
    if r.category_id is not None:
        click.echo(f"  Category: {CategoryService(db).format_category_path(r.category_id)}")
    click.echo(f"  Estimated: {'yes' if r.is_estimated else 'no'}")
    click.echo(f"  Active: {'yes' if r.active else 'no'}")


@rule_group.command("update")
@click.argument("rule_id", type=int)
@click.option("--description", help="New description")
@click.option("--type", "rule_type", type=click.Choice(RULE_TYPES), help="New rule type")
@click.option("--frequency", type=click.Choice(FREQUENCIES), help="New frequency")
@click.option("--amount", help="New amount per occurrence")
@click.option("--account", help="New source account name or ID")
@click.option("--to", "destination", help="New destination account, or empty string to clear")
@click.option("--anchor", help="New anchor date")
@click.option("--day-of-month", type=int, help="New day of month (1-31)")
@click.option("--day-of-week", help="New weekday for weekly rules")
@click.option("--category", help="Category path, or empty string to clear")
@click.option("--estimated/--actual", "is_estimated", default=None, help="Whether generated transactions are estimates")
@click.pass_context
def update_rule(
    ctx,
    rule_id: int,
    description: str | None,
    rule_type: str | None,
    frequency: str | None,
    amount: str | None,
    account: str | None,
    destination: str | None,
    anchor: str | None,
    day_of_month: int | None,
    day_of_week: str | None,
    category: str | None,
    is_estimated: bool | None,
):
    """Update a rule.

    Changing the schedule, amount or accounts replaces future transactions you
    have not edited. Changing only the category updates them in place.

    Examples:
        forecastit rule update 3 --amount 1550
        forecastit rule update 3 --category ""  # Clear category
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    changes = {}

    if description is not None:
        changes["description"] = description
    if rule_type is not None:
        changes["rule_type"] = rule_type
    if frequency is not None:
        changes["frequency"] = frequency
    if amount is not None:
        changes["amount"] = parse_amount_or_exit(ctx, amount)
    if account is not None:
        changes["account_id"] = resolve_account_or_exit(ctx, account_service, account)
    if destination is not None:
        changes["destination_account_id"] = (
            resolve_account_or_exit(ctx, account_service, destination) if destination else None
        )
    if anchor is not None:
        changes["anchor_date"] = parse_date_or_exit(ctx, anchor, "anchor date")
    if day_of_month is not None:
        changes["day_of_month"] = day_of_month
    if day_of_week is not None:
        changes["day_of_week"] = parse_weekday_or_exit(ctx, day_of_week)
    if category is not None:
        changes["category_id"] = resolve_category_or_exit(ctx, CategoryService(db), category)
    if is_estimated is not None:
        changes["is_estimated"] = is_estimated

    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        updated = _rule_service(ctx).update_rule(rule_id, **changes)
        click.echo(f"Updated rule '{updated.description}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


def _set_active(ctx, rule_id: int, active: bool) -> None:
    try:
        updated = _rule_service(ctx).set_active(rule_id, active)
        click.echo(f"{'Activated' if active else 'Deactivated'} rule '{updated.description}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


@rule_group.command("activate")
@click.argument("rule_id", type=int)
@click.pass_context
def activate_rule(ctx, rule_id: int):
    """Resume a rule and project its future transactions."""
    _set_active(ctx, rule_id, True)


@rule_group.command("deactivate")
@click.argument("rule_id", type=int)
@click.pass_context
def deactivate_rule(ctx, rule_id: int):
    """Pause a rule and remove its future transactions you have not edited."""
    _set_active(ctx, rule_id, False)


@rule_group.command("delete")
@click.argument("rule_id", type=int)
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def delete_rule(ctx, rule_id: int, yes: bool):
    """Delete a rule and all of its transactions."""
    service = _rule_service(ctx)
    try:
        r = service.require_rule(rule_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(f"Delete rule '{r.description}' and all of its transactions?"):
        click.echo("Deletion cancelled.")
        return

    service.delete_rule(rule_id)
    click.echo(f"Deleted rule '{r.description}'")


def register_commands(cli):
    """Register rule commands with main CLI."""
    cli.add_command(rule_group, name="rule")
