"""Balance projection arithmetic.

The pure functions take an account snapshot and its entries; BalanceProjector
wraps them with database lookups for callers that only have an account ID.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, Optional, Sequence

from forecastit.config import ProjectionConfig
from forecastit.database.base import Database
from forecastit.domain.entities import Account, LedgerEntry, ProjectionStatus
from forecastit.domain.errors import NotFoundError, account_not_found


@dataclass(frozen=True)
class BalancedEntry:
    """An entry paired with the account balance right after it."""

    entry: LedgerEntry
    running_balance: Decimal


def _in_projection(account: Account, entries: Iterable[LedgerEntry], end_date: date) -> list[LedgerEntry]:
    """Entries dated from the balance date through ``end_date``, oldest first."""
    selected = [e for e in entries if account.balance_date <= e.date <= end_date]
    return sorted(selected, key=lambda e: (e.date, e.id))


def projected_balance(account: Account, entries: Iterable[LedgerEntry], as_of_date: date) -> Decimal:
    """Balance on ``as_of_date``: current balance plus every entry since the balance date."""
    total = sum((e.amount for e in _in_projection(account, entries, as_of_date)), Decimal("0"))
    return account.current_balance + total


def lowest_projected_balance(
    account: Account,
    entries: Iterable[LedgerEntry],
    end_date: date,
    today: Optional[date] = None,
) -> Decimal:
    """Lowest running balance reached after today, through ``end_date``.

    Past entries still move the running balance, but a dip that already
    happened is not reported. Without any future entry the fully accumulated
    balance is returned.
    """
    today = today or date.today()
    running = account.current_balance
    lowest: Optional[Decimal] = None

    for entry in _in_projection(account, entries, end_date):
        running += entry.amount
        if entry.date > today and (lowest is None or running < lowest):
            lowest = running

    return running if lowest is None else lowest


def classify_balance(lowest: Decimal, warning_threshold: Decimal) -> ProjectionStatus:
    """Danger below zero, warning below the threshold, normal otherwise."""
    if lowest < 0:
        return ProjectionStatus.DANGER
    if lowest < warning_threshold:
        return ProjectionStatus.WARNING
    return ProjectionStatus.NORMAL


def projection_status(
    account: Account,
    entries: Iterable[LedgerEntry],
    end_date: date,
    today: Optional[date] = None,
) -> ProjectionStatus:
    lowest = lowest_projected_balance(account, entries, end_date, today=today)
    return classify_balance(lowest, account.warning_threshold)


def running_balances_for(account: Account, entries: Sequence[LedgerEntry]) -> list[BalancedEntry]:
    """Pair each entry, in the given order, with the balance after applying it."""
    running = account.current_balance
    result = []
    for entry in entries:
        running += entry.amount
        result.append(BalancedEntry(entry=entry, running_balance=running))
    return result


class BalanceProjector:
    """Balance projections for stored accounts."""

    def __init__(
        self,
        db: Database,
        config: Optional[ProjectionConfig] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        """Initialize balance projector.

        Args:
            db: Database instance
            config: Projection settings, for the default end date
            today: Callable returning the current date, for tests
        """
        self.db = db
        self.config = config or ProjectionConfig()
        self._today = today or date.today

    def _load(self, account_id: int, end_date: Optional[date]) -> tuple[Account, list[LedgerEntry], date]:
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        end_date = end_date or self.config.horizon_end(self._today())
        entries = self.db.list_entries(
            account_id=account_id, start_date=account.balance_date, end_date=end_date
        )
        return account, entries, end_date

    def projected_balance(self, account_id: int, as_of_date: Optional[date] = None) -> Decimal:
        account, entries, as_of_date = self._load(account_id, as_of_date)
        return projected_balance(account, entries, as_of_date)

    def lowest_projected_balance(self, account_id: int, end_date: Optional[date] = None) -> Decimal:
        account, entries, end_date = self._load(account_id, end_date)
        return lowest_projected_balance(account, entries, end_date, today=self._today())

    def projection_status(self, account_id: int, end_date: Optional[date] = None) -> ProjectionStatus:
        account, entries, end_date = self._load(account_id, end_date)
        return projection_status(account, entries, end_date, today=self._today())
