"""Achievement badge commands."""

import click
from claritybank.domain.account import AccountService
from claritybank.domain.badge_service import BadgeService
from claritybank.domain.entities import AuxiliaryFlags
from claritybank.cli.account_resolution import resolve_account_or_exit, resolve_user_or_exit
from claritybank.cli.error_handling import handle_domain_error
from claritybank.utils.timestamps import resolve_timezone


def _evaluation_options(func):
    func = click.option(
        "--include-legacy/--current-only",
        "include_legacy",
        default=None,
        help="Evaluate legacy badge ids too (defaults to CLARITYBANK_INCLUDE_LEGACY_BADGES, on)",
    )(func)
    func = click.option("--tz", "tz_name", help="Timezone for day and hour rules (defaults to local)")(func)
    func = click.option(
        "--receipt-downloaded",
        is_flag=True,
        help="The user has downloaded a transaction receipt",
    )(func)
    return func


@click.group("badges")
def badges_group():
    """Check and award achievement badges."""
    pass


@badges_group.command("list")
@click.option("--include-legacy/--current-only", "include_legacy", default=None)
@click.pass_context
def list_badges(ctx, include_legacy: bool | None):
    """List every badge that can be earned."""
    service = BadgeService(ctx.obj["db"])
    for badge in service.badges(include_legacy):
        marker = " (legacy)" if badge.legacy else ""
        click.echo(f"{badge.id.value:20s} {badge.display_name}{marker}")
        click.echo(f"{'':20s} {badge.description}")


@badges_group.command("check")
@click.argument("account", metavar="ACCOUNT")
@_evaluation_options
@click.pass_context
def check_badges(ctx, account: str, receipt_downloaded: bool, tz_name: str | None,
                 include_legacy: bool | None):
    """Show which badges an account currently qualifies for.

    Nothing is saved; use 'badges award' to keep them.

    Examples:
        claritybank badges check 1
        claritybank badges check 1 --receipt-downloaded --tz Asia/Kolkata
    """
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    service = BadgeService(db)

    try:
        tz = resolve_timezone(tz_name)
        earned = service.evaluate_for_account(
            account_id,
            AuxiliaryFlags(has_downloaded_receipt=receipt_downloaded),
            tz=tz,
            include_legacy=include_legacy,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    total = len(service.badges(include_legacy))
    click.echo(f"Earned {len(earned)} of {total} badges")
    for badge in earned:
        click.echo(f"  {badge.display_name} - {badge.description}")


@badges_group.command("award")
@click.argument("account", metavar="ACCOUNT")
@_evaluation_options
@click.pass_context
def award_badges(ctx, account: str, receipt_downloaded: bool, tz_name: str | None,
                 include_legacy: bool | None):
    """Save any badges the account owner has newly earned.

    Badges already awarded are kept even if the account no longer qualifies.
    """
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    service = BadgeService(db)

    try:
        tz = resolve_timezone(tz_name)
        awarded = service.award_badges_for_account(
            account_id,
            AuxiliaryFlags(has_downloaded_receipt=receipt_downloaded),
            tz=tz,
            include_legacy=include_legacy,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not awarded:
        click.echo("No new badges.")
        return

    click.echo(f"Unlocked {len(awarded)} new badge{'s' if len(awarded) != 1 else ''}:")
    for badge in awarded:
        click.echo(f"  {badge.display_name} - {badge.description}")


@badges_group.command("earned")
@click.argument("user_ref", metavar="USER")
@click.pass_context
def earned_badges(ctx, user_ref: str):
    """List the badges a user has been awarded.

    USER can be a user ID or email.
    """
    db = ctx.obj["db"]
    user_id = resolve_user_or_exit(ctx, AccountService(db), user_ref)

    awarded = BadgeService(db).list_awarded_badges(user_id)
    if not awarded:
        click.echo("No badges awarded yet.")
        return

    for badge in awarded:
        click.echo(f"{badge.earned_at:%Y-%m-%d}  {badge.display_name} ({badge.badge_id.value})")


def register_commands(cli):
    """Register badge commands with main CLI."""
    cli.add_command(badges_group)
