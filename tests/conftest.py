"""Shared pytest fixtures for forecastit tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from forecastit.config import ProjectionConfig
from forecastit.database.factories import create_sqlite_database
from forecastit.domain.account import AccountService
from forecastit.domain.category import CategoryService
from forecastit.domain.ledger import LedgerService
from forecastit.domain.projection import ProjectionService
from forecastit.domain.rule import RecurringRuleService
from forecastit.domain.transaction import TransactionService

# A Friday, chosen so that month ends and weekdays in tests are easy to reason about.
TODAY = date(2024, 3, 15)


@pytest.fixture
def today():
    """The date every service in the tests treats as today."""
    return TODAY


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def config():
    return ProjectionConfig(horizon_months=3)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db, today=lambda: TODAY)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def projection_service(temp_db, config):
    """Create a ProjectionService pinned to TODAY."""
    return ProjectionService(temp_db, config, today=lambda: TODAY)


@pytest.fixture
def rule_service(temp_db, projection_service):
    """Create a RecurringRuleService sharing the pinned projection service."""
    return RecurringRuleService(temp_db, projection=projection_service)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def ledger_service(temp_db, projection_service):
    """Create a LedgerService sharing the pinned projection service."""
    return LedgerService(temp_db, projection=projection_service)


@pytest.fixture
def checking(account_service):
    """Checking account holding 1000.00 as of TODAY."""
    account_id = account_service.create_account(
        name="Checking", current_balance=Decimal("1000.00"), balance_date=TODAY
    )
    return account_service.get_account(account_id)


@pytest.fixture
def savings(account_service):
    """Savings account holding 5000.00 as of TODAY."""
    account_id = account_service.create_account(
        name="Savings",
        account_type="savings",
        current_balance=Decimal("5000.00"),
        balance_date=TODAY,
        warning_threshold=Decimal("1000.00"),
    )
    return account_service.get_account(account_id)


@pytest.fixture
def groceries(category_service):
    """A "Food > Groceries" category."""
    category_service.create_group("Food", color="orange")
    category_id = category_service.create_category("Groceries", "Food")
    return category_service.get_category(category_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
