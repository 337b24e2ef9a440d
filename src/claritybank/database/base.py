"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Optional

from claritybank.domain.entities import (
    BankAccount,
    EarnedBadge,
    Transaction,
    TransactionDirection,
    User,
)


class Database(ABC):
    """Abstract database interface for claritybank."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # User operations
    @abstractmethod
    def create_user(self, email: str, first_name: str = "", last_name: str = "") -> int:
        """Create a user profile. Returns user ID."""
        pass

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by email address."""
        pass

    @abstractmethod
    def list_users(self) -> list[User]:
        """List all users."""
        pass

    # Bank account operations
    @abstractmethod
    def create_account(
        self, user_id: int, account_number: str, bank_name: str, balance: Decimal
    ) -> int:
        """Create a bank account with an opening balance. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[BankAccount]:
        """Get account snapshot by ID."""
        pass

    @abstractmethod
    def get_account_by_number(self, account_number: str) -> Optional[BankAccount]:
        """Get account snapshot by account number."""
        pass

    @abstractmethod
    def list_accounts(self, user_id: Optional[int] = None) -> list[BankAccount]:
        """List accounts, optionally filtered by owner."""
        pass

    # Transaction operations
    @abstractmethod
    def apply_transaction(
        self,
        account_id: int,
        direction: TransactionDirection,
        amount: Decimal,
        category: str,
        description: str,
        occurred_at: datetime,
    ) -> int:
        """Record a transaction and adjust the account balance atomically.

        Returns transaction ID.
        """
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        account_id: Optional[int] = None,
        limit: Optional[int] = None,
        newest_first: bool = False,
    ) -> list[Transaction]:
        """List transactions with optional filters.

        Args:
            account_id: Optional account ID filter
            limit: Optional maximum number of transactions
            newest_first: If True, order by most recent first
        """
        pass

    # Badge award operations
    @abstractmethod
    def list_earned_badges(self, user_id: int) -> list[EarnedBadge]:
        """List persisted badge awards for a user."""
        pass

    @abstractmethod
    def list_earned_badge_ids(self, user_id: int) -> set[str]:
        """Return the ids of badges already persisted for a user."""
        pass

    @abstractmethod
    def save_earned_badge(
        self, user_id: int, badge_id: str, display_name: str, description: str
    ) -> Optional[EarnedBadge]:
        """Persist a badge award if it is not already stored.

        Returns the stored award, or None if the user already had it.
        Existing awards are never modified.
        """
        pass
