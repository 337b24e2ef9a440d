"""Bank account commands."""

import click
from claritybank.domain.account import AccountService, OPENING_BALANCE
from claritybank.cli.account_resolution import resolve_account_or_exit, resolve_user_or_exit
from claritybank.cli.error_handling import handle_domain_error
from claritybank.utils.amount_parser import parse_amount


@click.group("account")
def account_group():
    """Manage bank accounts."""
    pass


@account_group.command("create")
@click.argument("account_number", metavar="ACCOUNT_NUMBER")
@click.option("--user", "user_ref", required=True, help="Owner's user ID or email")
@click.option("--bank", required=True, help="Bank name")
@click.option(
    "--opening-balance",
    default=None,
    help=f"Opening balance (defaults to {OPENING_BALANCE})",
)
@click.pass_context
def create_account(ctx, account_number: str, user_ref: str, bank: str, opening_balance: str | None):
    """Open a bank account for a user.

    Examples:
        claritybank account create 123456789 --user asha@example.com --bank "State Bank of India"
        claritybank account create 987654321 --user 1 --bank HDFC --opening-balance 2500
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    user_id = resolve_user_or_exit(ctx, service, user_ref)

    balance = OPENING_BALANCE
    if opening_balance is not None:
        try:
            balance = parse_amount(opening_balance)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    try:
        account_id = service.create_account(
            user_id=user_id,
            account_number=account_number,
            bank_name=bank,
            initial_balance=balance,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{account_number}' at {bank} (ID: {account_id})")
    click.echo(f"Opening balance: ₹{balance:,.2f}")


@account_group.command("list")
@click.option("--user", "user_ref", help="Only show accounts of this user (ID or email)")
@click.pass_context
def list_accounts(ctx, user_ref: str | None):
    """List bank accounts."""
    db = ctx.obj["db"]
    service = AccountService(db)

    user_id = None
    if user_ref is not None:
        user_id = resolve_user_or_exit(ctx, service, user_ref)

    accounts = service.list_accounts(user_id=user_id)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 70)
    for acc in accounts:
        click.echo(
            f"ID: {acc.id:3d} | {acc.account_number:15s} | {acc.bank_name:20s} | ₹{acc.balance:>12,.2f}"
        )


@account_group.command("show")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def show_account(ctx, account: str):
    """Show an account's balance.

    ACCOUNT can be an account ID or account number.
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)
    acc = service.require_account(account_id)

    click.echo(f"Account: {acc.account_number} ({acc.bank_name})")
    click.echo(f"Balance: ₹{acc.balance:,.2f}")
    click.echo(f"Last updated: {acc.updated_at:%Y-%m-%d %H:%M}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group)
