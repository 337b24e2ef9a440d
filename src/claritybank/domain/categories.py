"""Transaction category catalog grouped for display."""

from typing import Optional

from claritybank.domain.entities import TransactionCategory as C

CATEGORY_GROUPS: tuple[tuple[str, tuple[C, ...]], ...] = (
    ("Daily Expenses", (C.FOOD, C.GROCERIES, C.TRANSPORT, C.BILLS, C.RENT, C.UTILITIES)),
    (
        "Lifestyle",
        (
            C.SHOPPING,
            C.ENTERTAINMENT,
            C.DINING_OUT,
            C.PERSONAL_CARE,
            C.GIFTS,
            C.HEALTH,
            C.SUBSCRIPTIONS,
            C.TRAVEL,
            C.FUEL,
        ),
    ),
    (
        "Finance",
        (C.INCOME, C.INVESTMENTS, C.LOAN_PAYMENTS, C.INSURANCE, C.BUSINESS, C.DONATIONS, C.TAXES),
    ),
    ("Savings", (C.SAVINGS, C.EMERGENCY_FUND, C.CREDIT_CARD, C.INSTALLMENTS)),
    (
        "Miscellaneous",
        (C.FAMILY, C.ONLINE_SERVICES, C.MAINTENANCE, C.PETS, C.OTHER, C.MISCELLANEOUS),
    ),
)

DEFAULT_CATEGORY = C.OTHER


def group_for(category: str) -> Optional[str]:
    """Return the display group a category belongs to, or None if unknown."""
    for label, members in CATEGORY_GROUPS:
        if category in {m.value for m in members}:
            return label
    return None


def parse_category(value: Optional[str]) -> C:
    """Resolve a category by its value, case-insensitively.

    Args:
        value: Category value such as "Groceries", or None for the default

    Returns:
        TransactionCategory

    Raises:
        ValueError: If the value is not a known category
    """
    if value is None:
        return DEFAULT_CATEGORY

    wanted = value.strip().lower()
    for category in C:
        if category.value.lower() == wanted:
            return category
    raise ValueError(f"Unknown category '{value}'")
