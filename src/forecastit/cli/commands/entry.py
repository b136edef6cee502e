"""Transaction (ledger entry) commands."""

from datetime import date

import click
from forecastit.cli.error_handling import (
    handle_domain_error,
    parse_amount_or_exit,
    parse_date_or_exit,
    resolve_account_or_exit,
    resolve_category_or_exit,
)
from forecastit.domain.account import AccountService
from forecastit.domain.category import CategoryService
from forecastit.domain.entities import EntryStatus
from forecastit.domain.transaction import ATTENTION_WINDOW_DAYS, TransactionService
from forecastit.utils.amount_parser import format_amount


@click.group()
def entry_group():
    """Manage individual transactions."""
    pass


@entry_group.command("add")
@click.option("--account", required=True, help="Account name or ID")
@click.option("--date", "entry_date", help="Transaction date (default: today)")
@click.option("--amount", required=True, help="Signed amount (e.g., -45.00 for an expense)")
@click.option("--description", required=True, help="Transaction description")
@click.option("--category", help="Category path (e.g., 'Food > Groceries')")
@click.option("--to", "destination", help="Mirror the transaction into this account as a transfer")
@click.option("--estimated", is_flag=True, help="Mark as an estimate instead of an actual amount")
@click.pass_context
def add_entry(
    ctx,
    account: str,
    entry_date: str | None,
    amount: str,
    description: str,
    category: str | None,
    destination: str | None,
    estimated: bool,
):
    """Add a one-time transaction.

    Examples:
        forecastit entry add --account Checking --amount -120 --description "Car repair"
        forecastit entry add --account Checking --amount -500 --description "Extra savings" --to Savings
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)

    account_id = resolve_account_or_exit(ctx, account_service, account)
    destination_id = resolve_account_or_exit(ctx, account_service, destination) if destination else None
    category_id = resolve_category_or_exit(ctx, CategoryService(db), category)
    entry_amount = parse_amount_or_exit(ctx, amount)
    on = parse_date_or_exit(ctx, entry_date) or date.today()

    try:
        entry_id = TransactionService(db).create_entry(
            account_id=account_id,
            date=on,
            description=description,
            amount=entry_amount,
            status=EntryStatus.ESTIMATED if estimated else EntryStatus.ACTUAL,
            category_id=category_id,
            destination_account_id=destination_id,
        )
        click.echo(f"Added transaction {entry_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@entry_group.command("update")
@click.argument("entry_id", type=int)
@click.option("--account", help="Account name or ID")
@click.option("--date", "entry_date", help="Transaction date")
@click.option("--amount", help="Signed amount")
@click.option("--description", help="Transaction description")
@click.option("--category", help="Category path, or empty string to clear")
@click.option("--to", "destination", help="Transfer counterpart account, or empty string to make it one-sided")
@click.option("--status", type=click.Choice([s.value for s in EntryStatus]), help="estimated or actual")
@click.pass_context
def update_entry(
    ctx,
    entry_id: int,
    account: str | None,
    entry_date: str | None,
    amount: str | None,
    description: str | None,
    category: str | None,
    destination: str | None,
    status: str | None,
):
    """Update a transaction.

    Updates only the fields that are provided. A projected transaction you edit
    is kept as-is when its rule changes. Transfers update both sides.

    Examples:
        forecastit entry update 12 --amount -82.10
        forecastit entry update 12 --date 2024-03-04
        forecastit entry update 12 --category ""  # Clear category
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)

    account_id = resolve_account_or_exit(ctx, account_service, account) if account else None
    destination_id = resolve_account_or_exit(ctx, account_service, destination) if destination else None

    try:
        TransactionService(db).update_entry(
            entry_id,
            account_id=account_id,
            date=parse_date_or_exit(ctx, entry_date),
            description=description,
            amount=parse_amount_or_exit(ctx, amount),
            status=status,
            category_id=resolve_category_or_exit(ctx, CategoryService(db), category),
            clear_category=category == "",
            destination_account_id=destination_id,
            clear_destination=destination == "",
        )
        click.echo(f"Updated transaction {entry_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@entry_group.command("mark-actual")
@click.argument("entry_id", type=int)
@click.argument("amount")
@click.pass_context
def mark_actual(ctx, entry_id: int, amount: str):
    """Confirm a projected transaction with the amount that actually cleared.

    AMOUNT is a magnitude; the transaction keeps its direction.

    Examples:
        forecastit entry mark-actual 12 87.43
    """
    try:
        updated = TransactionService(ctx.obj["db"]).mark_actual(entry_id, parse_amount_or_exit(ctx, amount))
        click.echo(f"Marked transaction {entry_id} as actual ({format_amount(updated.amount)})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@entry_group.command("delete")
@click.argument("entry_id", type=int)
@click.pass_context
def delete_entry(ctx, entry_id: int):
    """Delete a transaction (and its transfer counterpart)."""
    try:
        TransactionService(ctx.obj["db"]).delete_entry(entry_id)
        click.echo(f"Deleted transaction {entry_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@entry_group.command("list")
@click.option("--account", help="Account name or ID")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'today', 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'next month', 'in 2 weeks')")
@click.option("--upcoming", is_flag=True, help="Only estimated transactions due soon")
@click.option("--days", type=int, default=ATTENTION_WINDOW_DAYS, help="Window for --upcoming (default: 30)")
@click.pass_context
def list_entries(ctx, account: str | None, start_date: str | None, end_date: str | None, upcoming: bool, days: int):
    """List transactions with optional filters.

    Account can be specified by name or ID.
    """
    db = ctx.obj["db"]
    service = TransactionService(db)
    account_service = AccountService(db)
    category_service = CategoryService(db)

    account_id = resolve_account_or_exit(ctx, account_service, account) if account else None

    if upcoming:
        entries = service.list_upcoming(account_id=account_id, days=days)
    else:
        entries = service.list_entries(
            account_id=account_id,
            start_date=parse_date_or_exit(ctx, start_date, "start date"),
            end_date=parse_date_or_exit(ctx, end_date, "end date"),
        )

    if not entries:
        click.echo("No transactions found.")
        return

    accounts = {acc.id: acc.name for acc in account_service.list_accounts()}

    click.echo(f"\nFound {len(entries)} transaction(s):")
    click.echo("-" * 110)
    click.echo(f"{'ID':>5s}  {'Date':10s}  {'Account':15s}  {'Description':28s}  {'Amount':>12s}  {'Status':9s}  Category")
    click.echo("-" * 110)
    for e in entries:
        category_name = category_service.format_category_path(e.category_id) if e.category_id else ""
        flags = ""
        if e.is_transfer:
            flags += " <->"
        if e.user_modified:
            flags += " *"
        click.echo(
            f"{e.id:5d}  {e.date!s:10s}  {accounts.get(e.account_id, 'Unknown')[:15]:15s}  "
            f"{e.description[:28]:28s}  {format_amount(e.amount):>12s}  {e.status.value:9s}  "
            f"{category_name}{flags}"
        )


def register_commands(cli):
    """Register entry commands with main CLI."""
    cli.add_command(entry_group, name="entry")
