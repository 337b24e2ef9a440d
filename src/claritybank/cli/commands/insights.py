"""Activity insights command."""

import json

import click
from claritybank.domain.account import AccountService
from claritybank.domain.insights import NO_TRANSACTIONS_SUMMARY, project_for_summary
from claritybank.cli.account_resolution import resolve_account_or_exit
from claritybank.cli.error_handling import handle_domain_error
from claritybank.utils.timestamps import resolve_timezone


@click.command("insights")
@click.argument("account", metavar="ACCOUNT")
@click.option("--limit", type=int, default=50, show_default=True, help="Number of recent transactions")
@click.option("--tz", "tz_name", help="Timezone for transaction dates (defaults to local)")
@click.pass_context
def insights(ctx, account: str, limit: int, tz_name: str | None):
    """Print the activity data handed to the summary generator, as JSON.

    Examples:
        claritybank insights 1 --limit 20
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        tz = resolve_timezone(tz_name)
    except ValueError as e:
        handle_domain_error(ctx, e)

    transactions = service.list_transactions(account_id, limit=limit)
    projected = project_for_summary(transactions, tz=tz)
    if not projected:
        click.echo(NO_TRANSACTIONS_SUMMARY)
        return
    click.echo(json.dumps(projected, indent=2))


def register_commands(cli):
    """Register insights command with main CLI."""
    cli.add_command(insights)
