"""Account and transaction domain service."""

import logging
from datetime import datetime, UTC
from decimal import Decimal
from typing import Optional

from claritybank.database.base import Database
from claritybank.domain.categories import parse_category
from claritybank.domain.entities import (
    BankAccount,
    Transaction,
    TransactionCategory,
    TransactionDirection,
    User,
)
from claritybank.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    deposit_limit_exceeded,
    duplicate_user_email,
    insufficient_funds,
    invalid_amount,
    user_not_found,
)

logger = logging.getLogger(__name__)

OPENING_BALANCE = Decimal("1000.00")
MAX_DEPOSIT = Decimal("1000000")
MAX_DESCRIPTION_LENGTH = 50


class AccountService:
    """Service for managing users, bank accounts and their transactions."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_user(self, email: str, first_name: str = "", last_name: str = "") -> int:
        """Create a user profile.

        Args:
            email: Unique email address
            first_name: Optional first name
            last_name: Optional last name

        Returns:
            User ID

        Raises:
            ValidationError: If the email is blank
            ConflictError: If a user with this email exists
        """
        email = email.strip()
        if not email:
            raise ValidationError("Email is required.")
        if self.db.get_user_by_email(email) is not None:
            raise ConflictError(duplicate_user_email(email))

        user_id = self.db.create_user(email=email, first_name=first_name, last_name=last_name)
        logger.info("Created user %s", user_id)
        return user_id

    def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        return self.db.get_user(user_id)

    def list_users(self) -> list[User]:
        """List all users."""
        return self.db.list_users()

    def create_account(
        self,
        user_id: int,
        account_number: str,
        bank_name: str,
        initial_balance: Decimal = OPENING_BALANCE,
    ) -> int:
        """Open a bank account for a user.

        Args:
            user_id: Owner's user ID
            account_number: Account number as shown by the bank
            bank_name: Bank name
            initial_balance: Opening balance

        Returns:
            Account ID

        Raises:
            NotFoundError: If the user does not exist
            ValidationError: If a field is blank or the balance is negative
        """
        if self.db.get_user(user_id) is None:
            raise NotFoundError(user_not_found(user_id))
        if not account_number.strip():
            raise ValidationError("Account number is required.")
        if not bank_name.strip():
            raise ValidationError("Bank name is required.")
        if initial_balance < 0:
            raise ValidationError("Opening balance cannot be negative.")

        account_id = self.db.create_account(
            user_id=user_id,
            account_number=account_number.strip(),
            bank_name=bank_name.strip(),
            balance=initial_balance,
        )
        logger.info("Opened account %s for user %s", account_id, user_id)
        return account_id

    def get_account(self, account_id: int) -> Optional[BankAccount]:
        """Get account snapshot by ID."""
        return self.db.get_account(account_id)

    def require_account(self, account_id: int) -> BankAccount:
        """Get account snapshot by ID, raising if it does not exist."""
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self, user_id: Optional[int] = None) -> list[BankAccount]:
        """List accounts, optionally only those of one user."""
        return self.db.list_accounts(user_id=user_id)

    def deposit(
        self,
        account_id: int,
        amount: Decimal,
        description: str,
        category: TransactionCategory | str | None = None,
        occurred_at: Optional[datetime] = None,
    ) -> int:
        """Deposit money into an account.

        Returns:
            Transaction ID

        Raises:
            NotFoundError: If the account does not exist
            ValidationError: If amount, description or category are invalid
        """
        self.require_account(account_id)
        self._validate(amount, description)
        if amount > MAX_DEPOSIT:
            raise ValidationError(deposit_limit_exceeded(MAX_DEPOSIT))

        return self._record(
            account_id, TransactionDirection.DEPOSIT, amount, description, category, occurred_at
        )

    def withdraw(
        self,
        account_id: int,
        amount: Decimal,
        description: str,
        category: TransactionCategory | str | None = None,
        occurred_at: Optional[datetime] = None,
    ) -> int:
        """Withdraw money from an account.

        Returns:
            Transaction ID

        Raises:
            NotFoundError: If the account does not exist
            ValidationError: If the input is invalid or funds are insufficient
        """
        account = self.require_account(account_id)
        self._validate(amount, description)
        if amount > account.balance:
            raise ValidationError(insufficient_funds())

        return self._record(
            account_id, TransactionDirection.WITHDRAWAL, amount, description, category, occurred_at
        )

    def list_transactions(self, account_id: int, limit: Optional[int] = None) -> list[Transaction]:
        """List an account's transactions, most recent first.

        Raises:
            NotFoundError: If the account does not exist
        """
        self.require_account(account_id)
        return self.db.list_transactions(account_id=account_id, limit=limit, newest_first=True)

    def _validate(self, amount: Decimal, description: str) -> None:
        if amount <= 0:
            raise ValidationError(invalid_amount(amount))
        if not description or not description.strip():
            raise ValidationError("Description is required.")
        if len(description.strip()) > MAX_DESCRIPTION_LENGTH:
            raise ValidationError("Description is too long.")

    def _record(
        self,
        account_id: int,
        direction: TransactionDirection,
        amount: Decimal,
        description: str,
        category: TransactionCategory | str | None,
        occurred_at: Optional[datetime],
    ) -> int:
        if isinstance(category, TransactionCategory):
            resolved = category
        else:
            try:
                resolved = parse_category(category)
            except ValueError as e:
                raise ValidationError(str(e))

        transaction_id = self.db.apply_transaction(
            account_id=account_id,
            direction=direction,
            amount=amount,
            category=resolved.value,
            description=description.strip(),
            occurred_at=occurred_at if occurred_at is not None else datetime.now(UTC),
        )
        logger.info(
            "Recorded %s of %s on account %s (transaction %s)",
            direction.value,
            amount,
            account_id,
            transaction_id,
        )
        return transaction_id
