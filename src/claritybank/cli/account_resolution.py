"""CLI helpers for resolving accounts and users given by ID or name."""

from __future__ import annotations

import click

from claritybank.domain.account import AccountService
from claritybank.cli.error_handling import handle_domain_error


def resolve_account(account_service: AccountService, account: str | int) -> int:
    """Resolve an account ID or account number to an account ID.

    Raises:
        ValueError: If account is not found
    """
    try:
        account_id = int(account)
    except (ValueError, TypeError):
        account_id = None

    if account_id is not None and account_service.get_account(account_id) is not None:
        return account_id

    for acc in account_service.list_accounts():
        if acc.account_number == str(account):
            return acc.id

    raise ValueError(f"Account '{account}' not found")


def resolve_user(account_service: AccountService, user: str | int) -> int:
    """Resolve a user ID or email address to a user ID.

    Raises:
        ValueError: If user is not found
    """
    try:
        user_id = int(user)
    except (ValueError, TypeError):
        user_id = None

    if user_id is not None and account_service.get_user(user_id) is not None:
        return user_id

    for existing in account_service.list_users():
        if existing.email == str(user):
            return existing.id

    raise ValueError(f"User '{user}' not found")


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str | int
) -> int:
    """Resolve account ID or number, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(account_service, account)
    except ValueError as exc:
        handle_domain_error(ctx, exc)


def resolve_user_or_exit(
    ctx: click.Context, account_service: AccountService, user: str | int
) -> int:
    """Resolve user ID or email, or exit with a CLI error."""
    try:
        return resolve_user(account_service, user)
    except ValueError as exc:
        handle_domain_error(ctx, exc)
