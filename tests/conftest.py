"""Shared pytest fixtures for claritybank tests."""

import tempfile
import os
from datetime import datetime
from decimal import Decimal
from itertools import count

import pytest
from dateutil import tz

from claritybank.database.factories import create_sqlite_database
from claritybank.domain.account import AccountService
from claritybank.domain.badge_service import BadgeService
from claritybank.domain.entities import (
    BankAccount,
    Transaction,
    TransactionDirection,
    User,
)

UTC = tz.UTC
NOW = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def badge_service(temp_db):
    """Create a BadgeService with a temporary database, legacy badges included."""
    return BadgeService(temp_db, include_legacy=True)


@pytest.fixture
def sample_user(account_service):
    """Create a sample user for testing."""
    user_id = account_service.create_user(email="asha@example.com", first_name="Asha", last_name="Rao")
    return account_service.get_user(user_id)


@pytest.fixture
def sample_account(account_service, sample_user):
    """Create a sample account with the default opening balance."""
    account_id = account_service.create_account(
        user_id=sample_user.id, account_number="123456789", bank_name="Test Bank"
    )
    return account_service.get_account(account_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def make_account():
    """Build in-memory account snapshots."""

    def _make(balance="1000.00", account_id=1, user_id=1):
        return BankAccount(
            id=account_id,
            user_id=user_id,
            account_number="000111",
            bank_name="Test Bank",
            balance=Decimal(balance),
            created_at=NOW,
            updated_at=NOW,
        )

    return _make


@pytest.fixture
def make_user():
    """Build in-memory user profiles."""

    def _make(created_at=NOW, user_id=1):
        return User(
            id=user_id,
            email="user@example.com",
            first_name="Test",
            last_name="User",
            created_at=created_at,
        )

    return _make


@pytest.fixture
def make_txn():
    """Build in-memory transactions with sequential IDs."""
    ids = count(1)

    def _make(occurred_at, amount="100.00", direction=TransactionDirection.DEPOSIT,
              category="Other", description="test"):
        return Transaction(
            id=next(ids),
            account_id=1,
            direction=direction,
            amount=Decimal(amount) if isinstance(amount, str) else amount,
            category=category,
            description=description,
            occurred_at=occurred_at,
        )

    return _make
