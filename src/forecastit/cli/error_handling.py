"""CLI error handling helpers.

Commands turn raw option strings into domain values through these helpers so
that every bad input is reported the same way: ``Error: ...`` on stderr and
exit status 1.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

import click

from forecastit.domain.account import AccountService
from forecastit.domain.category import CategoryService
from forecastit.domain.errors import DomainError
from forecastit.utils.account_resolver import resolve_account
from forecastit.utils.amount_parser import parse_amount
from forecastit.utils.date_parser import parse_date, parse_weekday


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def resolve_account_or_exit(ctx: click.Context, account_service: AccountService, account: str | int) -> int:
    """Resolve account name or ID, or exit with a CLI error."""
    try:
        return resolve_account(account_service, account)
    except ValueError as exc:
        handle_domain_error(ctx, exc)


def parse_date_or_exit(ctx: click.Context, value: Optional[str], label: str = "date") -> Optional[date]:
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as exc:
        click.echo(f"Error: Invalid {label}: {exc}", err=True)
        ctx.exit(1)


def parse_amount_or_exit(ctx: click.Context, value: Optional[str]) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as exc:
        click.echo(f"Error: Invalid amount format: {exc}", err=True)
        ctx.exit(1)


def parse_weekday_or_exit(ctx: click.Context, value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return parse_weekday(value)
    except ValueError as exc:
        handle_domain_error(ctx, exc)


def resolve_category_or_exit(
    ctx: click.Context, category_service: CategoryService, path: Optional[str]
) -> Optional[int]:
    """Resolve a "Group > Category" path to a category ID.

    Returns None when no path is given.
    """
    if not path:
        return None
    try:
        return category_service.require_category_by_path(path).id
    except ValueError as exc:
        handle_domain_error(ctx, exc)
