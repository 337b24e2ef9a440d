"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class CatalogError(DomainError):
    """The badge catalog itself is inconsistent. Always a programming error."""


def user_not_found(user_id: int) -> str:
    """Return message for missing user."""
    return f"User {user_id} not found"


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def duplicate_user_email(email: str) -> str:
    """Return message for duplicate user email."""
    return f"User with email '{email}' already exists"


def duplicate_account_number(account_number: str) -> str:
    """Return message for duplicate account number."""
    return f"Account number '{account_number}' is already registered"


def invalid_amount(amount: Decimal) -> str:
    """Return message for non-positive amounts."""
    return f"Amount must be greater than zero (got {amount})"


def deposit_limit_exceeded(limit: Decimal) -> str:
    """Return message for deposits above the per-transaction ceiling."""
    return f"Deposit cannot exceed {limit:,.2f}"


def insufficient_funds() -> str:
    """Return message for withdrawals larger than the balance."""
    return "Insufficient funds."


def duplicate_badge_ids(badge_ids: list[str]) -> str:
    """Return message for a catalog that reuses badge ids."""
    return f"Badge catalog contains duplicate ids: {', '.join(sorted(badge_ids))}"
