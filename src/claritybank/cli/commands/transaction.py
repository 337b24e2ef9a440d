"""Deposit, withdrawal and history commands."""

import click
from claritybank.domain.account import AccountService
from claritybank.domain.categories import CATEGORY_GROUPS
from claritybank.domain.entities import TransactionDirection
from claritybank.cli.account_resolution import resolve_account_or_exit
from claritybank.cli.error_handling import handle_domain_error
from claritybank.utils.amount_parser import parse_amount
from claritybank.utils.timestamps import local_timestamp, parse_timestamp, resolve_timezone


def _transaction_options(func):
    func = click.option(
        "--at",
        "occurred_at",
        help="When it happened (e.g. '2024-01-15 08:30', 'yesterday'); defaults to now",
    )(func)
    func = click.option("--category", default=None, help="Category (defaults to 'Other')")(func)
    func = click.option("--description", "-d", required=True, help="Short description")(func)
    return func


def _record(ctx, direction: TransactionDirection, account: str, amount: str, description: str,
            category: str | None, occurred_at: str | None) -> None:
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        txn_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    when = None
    if occurred_at is not None:
        try:
            when = parse_timestamp(occurred_at)
        except ValueError as e:
            click.echo(f"Error: Invalid timestamp: {e}", err=True)
            ctx.exit(1)

    operation = service.deposit if direction == TransactionDirection.DEPOSIT else service.withdraw
    try:
        transaction_id = operation(
            account_id=account_id,
            amount=txn_amount,
            description=description,
            category=category,
            occurred_at=when,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    acc = service.require_account(account_id)
    verb = "Deposited" if direction == TransactionDirection.DEPOSIT else "Withdrew"
    click.echo(f"{verb} ₹{txn_amount:,.2f} (transaction {transaction_id})")
    click.echo(f"New balance: ₹{acc.balance:,.2f}")


@click.command("deposit")
@click.argument("account", metavar="ACCOUNT")
@click.argument("amount", metavar="AMOUNT")
@_transaction_options
@click.pass_context
def deposit(ctx, account: str, amount: str, description: str, category: str | None,
            occurred_at: str | None):
    """Deposit money into an account.

    Examples:
        claritybank deposit 1 2500 -d "Paycheck" --category "Salary / Income"
        claritybank deposit 123456789 500 -d "Gift" --at yesterday
    """
    _record(ctx, TransactionDirection.DEPOSIT, account, amount, description, category, occurred_at)


@click.command("withdraw")
@click.argument("account", metavar="ACCOUNT")
@click.argument("amount", metavar="AMOUNT")
@_transaction_options
@click.pass_context
def withdraw(ctx, account: str, amount: str, description: str, category: str | None,
             occurred_at: str | None):
    """Withdraw money from an account.

    Examples:
        claritybank withdraw 1 120 -d "Electricity" --category Bills
    """
    _record(ctx, TransactionDirection.WITHDRAWAL, account, amount, description, category, occurred_at)


@click.command("history")
@click.argument("account", metavar="ACCOUNT")
@click.option("--limit", type=int, default=20, show_default=True, help="Number of transactions")
@click.option("--tz", "tz_name", help="Timezone for displayed times (defaults to local)")
@click.pass_context
def history(ctx, account: str, limit: int, tz_name: str | None):
    """Show an account's recent transactions, newest first."""
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        tz = resolve_timezone(tz_name)
    except ValueError as e:
        handle_domain_error(ctx, e)

    transactions = service.list_transactions(account_id, limit=limit)
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\n{'ID':>5}  {'Date':16}  {'Type':10}  {'Amount':>12}  {'Category':22}  Description")
    click.echo("-" * 90)
    for txn in transactions:
        when = local_timestamp(txn.occurred_at, tz)
        when_text = f"{when:%Y-%m-%d %H:%M}" if when is not None else "?"
        sign = "+" if txn.is_deposit else "-"
        click.echo(
            f"{txn.id:>5}  {when_text:16}  {txn.direction.value:10}  "
            f"{sign}₹{txn.amount:>10,.2f}  {txn.category:22}  {txn.description}"
        )


@click.command("categories")
def categories():
    """List the available transaction categories."""
    for label, members in CATEGORY_GROUPS:
        click.echo(f"{label}:")
        for category in members:
            click.echo(f"  {category.value}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(deposit)
    cli.add_command(withdraw)
    cli.add_command(history)
    cli.add_command(categories)
