"""Badge catalog: achievement rules evaluated against account activity.

Every predicate is a pure function of a ``BadgeContext``. The context already
holds only well-formed transactions sorted by local time, a single ``now``
instant for the whole pass, and the timezone used for calendar arithmetic.
No predicate may read the clock, touch the database, or look at another
badge's result.
"""

from collections import Counter
from datetime import timedelta
from decimal import Decimal
from typing import Iterable, Optional

from claritybank.domain.entities import (
    BadgeContext,
    BadgeDefinition,
    BadgeId,
    TransactionCategory,
)
from claritybank.domain.errors import CatalogError, duplicate_badge_ids
from claritybank.utils.timestamps import local_timestamp

GOLD_SAVER_BALANCE = Decimal("10000")
MILESTONE_TRANSACTIONS = 100
ACTIVE_USER_TRANSACTIONS = 10
ZERO_DEBT_WINDOW = timedelta(days=30)
CONSISTENCY_STREAK_DAYS = 5
SMART_SPENDER_CATEGORIES = frozenset({TransactionCategory.BILLS.value, TransactionCategory.GROCERIES.value})
SMART_SPENDER_WITHDRAWALS = 10
EARLY_BIRD_WINDOW = timedelta(hours=24)
NIGHT_OWL_END_HOUR = 5
SAVINGS_STREAK_MONTHS = 3


def balance_at_least_10k(context: BadgeContext) -> bool:
    return context.account.balance >= GOLD_SAVER_BALANCE


def hundred_transactions(context: BadgeContext) -> bool:
    return len(context.transactions) >= MILESTONE_TRANSACTIONS


def ten_transactions(context: BadgeContext) -> bool:
    return len(context.transactions) >= ACTIVE_USER_TRANSACTIONS


def no_recent_withdrawals(context: BadgeContext) -> bool:
    """No withdrawal in the 30 days before ``now``."""
    cutoff = context.now - ZERO_DEBT_WINDOW
    return not any(w.occurred_at > cutoff for w in context.withdrawals)


def consecutive_deposit_days(context: BadgeContext) -> bool:
    """Deposits on five consecutive calendar days.

    Several deposits on one day count once. Any gap longer than a day
    restarts the run.
    """
    days = sorted({d.occurred_at.date() for d in context.deposits})
    run = 0
    previous = None
    for day in days:
        if previous is not None and day - previous == timedelta(days=1):
            run += 1
        else:
            run = 1
        if run >= CONSISTENCY_STREAK_DAYS:
            return True
        previous = day
    return False


def essential_spending(context: BadgeContext) -> bool:
    count = sum(
        1
        for w in context.withdrawals
        if _category_value(w.transaction.category) in SMART_SPENDER_CATEGORIES
    )
    return count >= SMART_SPENDER_WITHDRAWALS


def first_deposit_after_signup(context: BadgeContext) -> bool:
    """First deposit lands within 24 hours of the user signing up."""
    if context.user is None or not context.deposits:
        return False

    signup = local_timestamp(context.user.created_at, context.tz)
    if signup is None:
        return False

    first_deposit = context.deposits[0].occurred_at
    return signup <= first_deposit < signup + EARLY_BIRD_WINDOW


def late_night_activity(context: BadgeContext) -> bool:
    return any(t.occurred_at.hour < NIGHT_OWL_END_HOUR for t in context.transactions)


def saving_across_months(context: BadgeContext) -> bool:
    """Deposits in three distinct months, and more saved than spent overall."""
    months = {(d.occurred_at.year, d.occurred_at.month) for d in context.deposits}
    if len(months) < SAVINGS_STREAK_MONTHS:
        return False

    saved = sum((d.amount for d in context.deposits), Decimal("0"))
    spent = sum((w.amount for w in context.withdrawals), Decimal("0"))
    return saved > spent


def downloaded_receipt(context: BadgeContext) -> bool:
    return context.flags.has_downloaded_receipt


def _category_value(category) -> str:
    return getattr(category, "value", category)


BADGES: tuple[BadgeDefinition, ...] = (
    BadgeDefinition(
        id=BadgeId.GOLD_SAVER,
        display_name="Gold Saver",
        description="Reach an account balance of ₹10,000.",
        predicate=balance_at_least_10k,
    ),
    BadgeDefinition(
        id=BadgeId.MILESTONE_100,
        display_name="Century Club",
        description="Record 100 transactions.",
        predicate=hundred_transactions,
    ),
    BadgeDefinition(
        id=BadgeId.ZERO_DEBT,
        display_name="Zero Debt",
        description="Go 30 days without a single withdrawal.",
        predicate=no_recent_withdrawals,
    ),
    BadgeDefinition(
        id=BadgeId.CONSISTENCY_CHAMP,
        display_name="Consistency Champ",
        description="Make deposits on 5 consecutive days.",
        predicate=consecutive_deposit_days,
    ),
    BadgeDefinition(
        id=BadgeId.SMART_SPENDER,
        display_name="Smart Spender",
        description="Pay for bills or groceries 10 times.",
        predicate=essential_spending,
    ),
    BadgeDefinition(
        id=BadgeId.EARLY_BIRD,
        display_name="Early Bird",
        description="Make your first deposit within 24 hours of signing up.",
        predicate=first_deposit_after_signup,
    ),
    BadgeDefinition(
        id=BadgeId.NIGHT_OWL,
        display_name="Night Owl",
        description="Make a transaction between midnight and 5 AM.",
        predicate=late_night_activity,
    ),
    BadgeDefinition(
        id=BadgeId.ACTIVE_USER,
        display_name="Active User",
        description="Make your first 10 transactions.",
        predicate=ten_transactions,
    ),
    BadgeDefinition(
        id=BadgeId.SAVINGS_STREAK,
        display_name="Savings Streak",
        description="Deposit in 3 different months while saving more than you spend.",
        predicate=saving_across_months,
    ),
    BadgeDefinition(
        id=BadgeId.FINANCIAL_EXPLORER,
        display_name="Financial Explorer",
        description="Download a transaction receipt.",
        predicate=downloaded_receipt,
    ),
    # Legacy entries: earlier names for zero-debt, active-user,
    # consistency-champ and gold-saver.
    BadgeDefinition(
        id=BadgeId.SMART_SAVER,
        display_name="Smart Saver",
        description="Awarded for having no withdrawals in the last 30 days.",
        predicate=no_recent_withdrawals,
        legacy=True,
    ),
    BadgeDefinition(
        id=BadgeId.ACTIVE_USER_10,
        display_name="Active User",
        description="Awarded for making your first 10 transactions.",
        predicate=ten_transactions,
        legacy=True,
    ),
    BadgeDefinition(
        id=BadgeId.CONSISTENCY_KING_5,
        display_name="Consistency King",
        description="Awarded for 5 consecutive days of deposits.",
        predicate=consecutive_deposit_days,
        legacy=True,
    ),
    BadgeDefinition(
        id=BadgeId.BIG_SAVER_10K,
        display_name="Big Saver",
        description="Awarded for reaching a balance of ₹10,000.",
        predicate=balance_at_least_10k,
        legacy=True,
    ),
)


def validate_catalog(catalog: Iterable[BadgeDefinition]) -> None:
    """Check that every badge id appears exactly once.

    Raises:
        CatalogError: If any id is repeated
    """
    counts = Counter(badge.id.value for badge in catalog)
    duplicates = [badge_id for badge_id, count in counts.items() if count > 1]
    if duplicates:
        raise CatalogError(duplicate_badge_ids(duplicates))


def current_badges(catalog: Iterable[BadgeDefinition] = BADGES) -> tuple[BadgeDefinition, ...]:
    """Return the catalog without legacy entries, in display order."""
    return tuple(badge for badge in catalog if not badge.legacy)


def get_badge(badge_id: str, catalog: Iterable[BadgeDefinition] = BADGES) -> Optional[BadgeDefinition]:
    """Look up a catalog entry by id, or None if the id is unknown."""
    for badge in catalog:
        if badge.id.value == badge_id:
            return badge
    return None


validate_catalog(BADGES)
