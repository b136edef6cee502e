"""Forecast ledger command."""

import click
from forecastit.cli.error_handling import handle_domain_error, resolve_account_or_exit
from forecastit.domain.account import AccountService
from forecastit.domain.entities import ProjectionStatus
from forecastit.domain.grouping import EntryGroup
from forecastit.domain.ledger import LedgerService, LedgerView
from forecastit.utils.amount_parser import format_amount

STATUS_COLORS = {
    ProjectionStatus.NORMAL: "green",
    ProjectionStatus.WARNING: "yellow",
    ProjectionStatus.DANGER: "red",
}


def print_ledger(view: LedgerView) -> None:
    """Print a ledger view as a table."""
    account = view.account
    click.echo(f"\n{account.name} ({account.account_type.value}) through {view.end_date}")
    click.echo("=" * 92)
    click.echo(f"{'Date':23s}  {'Description':32s}  {'Amount':>12s}  {'Balance':>12s}  Status")
    click.echo("-" * 92)
    click.echo(
        f"{account.balance_date!s:23s}  {'Starting balance':32s}  {'':>12s}  "
        f"{format_amount(account.current_balance):>12s}"
    )

    for item in view.items:
        if isinstance(item, EntryGroup):
            label = item.recurring_rule.description if item.recurring_rule else item.entries[0].entry.description
            click.echo(
                f"{item.first_date!s} - {item.last_date!s}  {f'{label} (x{item.count})'[:32]:32s}  "
                f"{format_amount(item.total_amount):>12s}  {format_amount(item.ending_balance):>12s}  "
                f"{item.status.value}"
            )
        else:
            entry = item.entry
            marker = "*" if entry.user_modified else ""
            click.echo(
                f"{entry.date!s:23s}  {entry.description[:32]:32s}  {format_amount(entry.amount):>12s}  "
                f"{format_amount(item.running_balance):>12s}  {entry.status.value}{marker}"
            )

    click.echo("-" * 92)
    status = click.style(view.status.value.upper(), fg=STATUS_COLORS[view.status])
    click.echo(
        f"Projected: {format_amount(view.projected_balance)}  "
        f"Lowest: {format_amount(view.lowest_balance)}  Status: {status}"
    )


@click.command("ledger")
@click.option("--account", help="Account name or ID (default: all accounts)")
@click.option("--months", type=click.Choice(["1", "3", "6"]), help="Projection horizon in months")
@click.option("--no-group", is_flag=True, help="Show every projected transaction on its own line")
@click.pass_context
def ledger(ctx, account: str | None, months: str | None, no_group: bool):
    """Show the projected ledger with running balances.

    Frequent transactions from the same rule (daily, weekly, biweekly,
    semimonthly) are collapsed into one line unless --no-group is given.

    Examples:
        forecastit ledger --account Checking
        forecastit ledger --months 6 --no-group
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)

    if account:
        account_ids = [resolve_account_or_exit(ctx, account_service, account)]
    else:
        account_ids = [acc.id for acc in account_service.list_accounts()]

    if not account_ids:
        click.echo("No accounts found.")
        return

    service = LedgerService(db, ctx.obj.get("config"))
    for account_id in account_ids:
        try:
            view = service.build_ledger(account_id, months=int(months) if months else None, grouped=not no_group)
        except ValueError as e:
            handle_domain_error(ctx, e)
        print_ledger(view)


def register_commands(cli):
    """Register ledger command with main CLI."""
    cli.add_command(ledger)
