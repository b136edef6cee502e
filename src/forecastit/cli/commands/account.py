"""Account management commands."""

import click
from forecastit.cli.error_handling import (
    handle_domain_error,
    parse_amount_or_exit,
    parse_date_or_exit,
    resolve_account_or_exit,
)
from forecastit.domain.account import DEFAULT_WARNING_THRESHOLD, AccountService
from forecastit.domain.entities import AccountType
from forecastit.domain.ledger import LedgerService
from forecastit.utils.amount_parser import format_amount

ACCOUNT_TYPES = [t.value for t in AccountType]


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES), default="checking", help="Account type (default: checking)")
@click.option("--balance", default="0", help="Current balance (default: 0)")
@click.option("--balance-date", help="Date of the balance (default: today)")
@click.option("--threshold", default=str(DEFAULT_WARNING_THRESHOLD), help="Warn when the projected balance drops below this (default: 300)")
@click.pass_context
def create_account(ctx, name: str, account_type: str, balance: str, balance_date: str | None, threshold: str):
    """Create a new account.

    Examples:
        forecastit account create "Checking" --balance 2500
        forecastit account create "Savings" --type savings --balance 10000 --threshold 1000
    """
    service = AccountService(ctx.obj["db"])

    current_balance = parse_amount_or_exit(ctx, balance)
    warning_threshold = parse_amount_or_exit(ctx, threshold)
    as_of = parse_date_or_exit(ctx, balance_date, "balance date")

    try:
        account_id = service.create_account(
            name=name,
            account_type=account_type,
            current_balance=current_balance,
            balance_date=as_of,
            warning_threshold=warning_threshold,
        )
        click.echo(f"Created account '{name.strip()}' (ID: {account_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts."""
    service = AccountService(ctx.obj["db"])

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in accounts:
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | {acc.account_type.value:8s} | "
            f"{format_amount(acc.current_balance):>12s} as of {acc.balance_date}"
        )


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES), help="New account type")
@click.option("--threshold", help="New warning threshold")
@click.pass_context
def update_account(ctx, account: str, name: str | None, account_type: str | None, threshold: str | None) -> None:
    """Update an account's name, type or warning threshold.

    ACCOUNT can be an account name or ID. Use 'account reconcile' to change the balance.

    Examples:
        forecastit account update "Checking" --name "Main Checking"
        forecastit account update 1 --threshold 500
    """
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        updated = service.update_account(
            account_id,
            name=name,
            account_type=account_type,
            warning_threshold=parse_amount_or_exit(ctx, threshold),
        )
        click.echo(f"Updated account '{updated.name}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account with its rules and transactions.

    ACCOUNT can be an account name or ID.

    The account cannot be deleted while a transfer rule moves money in or out
    of it. Delete or change those rules first.

    Examples:
        forecastit account delete "Old Savings"
        forecastit account delete 3 --yes
    """
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, account)
    account_obj = service.get_account(account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account '{account_obj.name}' (ID: {account_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(account_id)
        click.echo(f"Deleted account '{account_obj.name}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


@account_group.command("reconcile")
@click.argument("account", metavar="ACCOUNT")
@click.argument("balance")
@click.option("--date", "balance_date", help="Date of the balance (default: today)")
@click.option("--include-today", is_flag=True, help="Also remove transactions dated on the balance date")
@click.pass_context
def reconcile_account(ctx, account: str, balance: str, balance_date: str | None, include_today: bool) -> None:
    """Set the account balance from your bank and drop transactions it covers.

    Transactions dated before the balance date are removed, since the new
    balance already includes them.

    Examples:
        forecastit account reconcile "Checking" 1843.27
        forecastit account reconcile 1 1843.27 --include-today
    """
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, account)
    current_balance = parse_amount_or_exit(ctx, balance)
    as_of = parse_date_or_exit(ctx, balance_date, "balance date")

    try:
        deleted = service.reconcile(account_id, current_balance, as_of, include_today=include_today)
        click.echo(f"Balance set to {format_amount(current_balance)}; removed {deleted} transaction(s)")
    except ValueError as e:
        handle_domain_error(ctx, e)


@account_group.command("status")
@click.argument("account", metavar="ACCOUNT")
@click.option("--months", type=click.Choice(["1", "3", "6"]), help="Projection horizon in months")
@click.pass_context
def account_status(ctx, account: str, months: str | None) -> None:
    """Show the projected and lowest balance for an account.

    Examples:
        forecastit account status "Checking"
        forecastit account status 1 --months 6
    """
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)

    try:
        view = LedgerService(db, ctx.obj.get("config")).build_ledger(
            account_id, months=int(months) if months else None, grouped=False
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\n{view.account.name} through {view.end_date}")
    click.echo("-" * 40)
    click.echo(f"Current balance:   {format_amount(view.account.current_balance):>14s} ({view.account.balance_date})")
    click.echo(f"Projected balance: {format_amount(view.projected_balance):>14s}")
    click.echo(f"Lowest balance:    {format_amount(view.lowest_balance):>14s}")
    click.echo(f"Status:            {view.status.value.upper()}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
