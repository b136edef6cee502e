"""Utility functions for forecastit."""

from forecastit.utils.date_parser import parse_date
from forecastit.utils.amount_parser import parse_amount
from forecastit.utils.account_resolver import resolve_account

__all__ = ["parse_date", "parse_amount", "resolve_account"]
