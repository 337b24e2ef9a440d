"""Mapper functions to convert SQLAlchemy models into domain entities.

This layer isolates the conversion logic so the badge engine and services
never see ORM objects.
"""

from decimal import Decimal

from claritybank.domain import entities as domain
from claritybank.utils.timestamps import from_storage
from claritybank.database.models import (
    User as ORMUser,
    BankAccount as ORMBankAccount,
    Transaction as ORMTransaction,
    EarnedBadge as ORMEarnedBadge,
)


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=orm_user.id,
        email=orm_user.email,
        first_name=orm_user.first_name,
        last_name=orm_user.last_name,
        created_at=from_storage(orm_user.created_at),
    )


def bank_account_to_domain(orm_account: ORMBankAccount) -> domain.BankAccount:
    """Convert SQLAlchemy BankAccount model to domain BankAccount entity."""
    return domain.BankAccount(
        id=orm_account.id,
        user_id=orm_account.user_id,
        account_number=orm_account.account_number,
        bank_name=orm_account.bank_name,
        balance=Decimal(orm_account.balance),
        created_at=from_storage(orm_account.created_at),
        updated_at=from_storage(orm_account.updated_at),
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        account_id=orm_transaction.account_id,
        direction=domain.TransactionDirection(orm_transaction.direction),
        amount=Decimal(orm_transaction.amount),
        category=orm_transaction.category,
        description=orm_transaction.description,
        occurred_at=from_storage(orm_transaction.occurred_at),
    )


def earned_badge_to_domain(orm_badge: ORMEarnedBadge) -> domain.EarnedBadge:
    """Convert SQLAlchemy EarnedBadge model to domain EarnedBadge entity."""
    return domain.EarnedBadge(
        badge_id=domain.BadgeId(orm_badge.badge_id),
        display_name=orm_badge.display_name,
        description=orm_badge.description,
        earned_at=from_storage(orm_badge.earned_at),
    )
