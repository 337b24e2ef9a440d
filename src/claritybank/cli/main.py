"""Main CLI entry point."""

import logging

import click
from claritybank.database.factories import create_sqlite_database

# Import and register all commands at module level
from claritybank.cli.commands import (
    user,
    account,
    transaction,
    badges,
    insights,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides CLARITYBANK_DB_PATH environment variable)",
    envvar="CLARITYBANK_DB_PATH",
)
@click.option("-v", "--verbose", is_flag=True, help="Log service activity to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """ClarityBank - Personal banking with achievements.

    Open accounts, record deposits and withdrawals, review your history and
    unlock badges for healthy money habits.
    """
    ctx.ensure_object(dict)

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
user.register_commands(cli)
account.register_commands(cli)
transaction.register_commands(cli)
badges.register_commands(cli)
insights.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
