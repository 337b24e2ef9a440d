"""User management commands."""

import click
from claritybank.domain.account import AccountService
from claritybank.cli.error_handling import handle_domain_error


@click.group("user")
def user_group():
    """Manage users."""
    pass


@user_group.command("create")
@click.argument("email")
@click.option("--first-name", default="", help="First name")
@click.option("--last-name", default="", help="Last name")
@click.pass_context
def create_user(ctx, email: str, first_name: str, last_name: str):
    """Create a new user.

    Examples:
        claritybank user create asha@example.com --first-name Asha
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    try:
        user_id = service.create_user(email=email, first_name=first_name, last_name=last_name)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created user '{email}' (ID: {user_id})")


@user_group.command("list")
@click.pass_context
def list_users(ctx):
    """List all users."""
    db = ctx.obj["db"]
    service = AccountService(db)

    users = service.list_users()
    if not users:
        click.echo("No users found.")
        return

    click.echo("\nUsers:")
    click.echo("-" * 60)
    for u in users:
        name = f"{u.first_name} {u.last_name}".strip() or "-"
        click.echo(f"ID: {u.id:3d} | {u.email:30s} | {name}")


def register_commands(cli):
    """Register user commands with main CLI."""
    cli.add_command(user_group)
