"""Ledger view: an account's entries with running balances, ready to display."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Optional

from forecastit.config import ProjectionConfig
from forecastit.database.base import Database
from forecastit.domain import balance
from forecastit.domain.entities import Account, ProjectionStatus
from forecastit.domain.errors import NotFoundError, account_not_found
from forecastit.domain.grouping import LedgerItem, SingleEntry, group_entries
from forecastit.domain.projection import ProjectionService


@dataclass(frozen=True)
class LedgerView:
    """Everything needed to show one account's forecast."""

    account: Account
    end_date: date
    status: ProjectionStatus
    lowest_balance: Decimal
    projected_balance: Decimal
    items: list[LedgerItem]


class LedgerService:
    """Builds ledger views, extending projections on the way."""

    def __init__(
        self,
        db: Database,
        config: Optional[ProjectionConfig] = None,
        today: Optional[Callable[[], date]] = None,
        projection: Optional[ProjectionService] = None,
    ):
        """Initialize ledger service.

        Args:
            db: Database instance
            config: Projection settings (default horizon)
            today: Callable returning the current date, for tests
            projection: Projection service used to extend rules before reading
        """
        self.db = db
        self.projection = projection or ProjectionService(db, config, today=today)
        self.config = self.projection.config

    def build_ledger(self, account_id: int, months: Optional[int] = None, grouped: bool = True) -> LedgerView:
        """Build the ledger for an account through ``months`` from today.

        Every active rule touching the account is extended first, so the view
        never shows a horizon shorter than requested.

        Args:
            account_id: Account ID
            months: Horizon in months (defaults to the configured horizon)
            grouped: Collapse runs of high-frequency entries

        Returns:
            LedgerView for the account

        Raises:
            NotFoundError: If account not found
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))

        config = ProjectionConfig(horizon_months=months) if months is not None else self.config
        today = self.projection.today()
        end_date = config.horizon_end(today)

        self.projection.extend_all_through(end_date, account_id=account_id)

        entries = self.db.list_entries(
            account_id=account_id, start_date=account.balance_date, end_date=end_date
        )
        with_balances = balance.running_balances_for(account, entries)

        if grouped:
            rules = {rule.id: rule for rule in self.db.list_rules(account_id=account_id)}
            items = group_entries(with_balances, rules, today=today)
        else:
            items = [SingleEntry(entry=b.entry, running_balance=b.running_balance) for b in with_balances]

        lowest = balance.lowest_projected_balance(account, entries, end_date, today=today)
        return LedgerView(
            account=account,
            end_date=end_date,
            status=balance.classify_balance(lowest, account.warning_threshold),
            lowest_balance=lowest,
            projected_balance=balance.projected_balance(account, entries, end_date),
            items=items,
        )
