"""Main CLI entry point."""

import logging

import click
from forecastit.config import load_config
from forecastit.database.factories import create_sqlite_database
from forecastit.cli.error_handling import handle_domain_error

# Import and register all commands at module level
from forecastit.cli.commands import (
    account,
    category,
    entry,
    ledger,
    rule,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FORECASTIT_DB_PATH environment variable)",
    envvar="FORECASTIT_DB_PATH",
)
@click.option(
    "--horizon-months",
    type=click.Choice(["1", "3", "6"]),
    help="How far ahead to project, in months (overrides FORECASTIT_HORIZON_MONTHS, default 3)",
    envvar="FORECASTIT_HORIZON_MONTHS",
)
@click.option("--verbose", "-v", is_flag=True, help="Log projection activity to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, horizon_months: str | None, verbose: bool):
    """Forecastit - Personal cash flow forecasting.

    Describe recurring income, expenses and transfers once, and see each
    account's projected balance months ahead.
    """
    ctx.ensure_object(dict)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            ctx.obj["config"] = load_config(int(horizon_months) if horizon_months else None)
        except ValueError as e:
            handle_domain_error(ctx, e)
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
rule.register_commands(cli)
entry.register_commands(cli)
ledger.register_commands(cli)
category.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
