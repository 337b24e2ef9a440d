"""Domain model entities for claritybank.

These are pure data classes representing business concepts, independent of
database schema. The badge engine only ever sees these types, so the
persistence layer can change without touching the rule catalog.
"""

from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Optional


class TransactionDirection(str, Enum):
    """Whether money moved into or out of an account."""

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


class TransactionCategory(str, Enum):
    """Spending and income categories offered to the user."""

    # Daily Expenses
    FOOD = "Food"
    GROCERIES = "Groceries"
    TRANSPORT = "Transport"
    BILLS = "Bills"
    RENT = "Rent"
    UTILITIES = "Utilities"
    # Lifestyle
    SHOPPING = "Shopping"
    ENTERTAINMENT = "Entertainment"
    DINING_OUT = "Dining Out"
    PERSONAL_CARE = "Personal Care"
    GIFTS = "Gifts & Celebrations"
    HEALTH = "Health & Fitness"
    SUBSCRIPTIONS = "Subscriptions"
    TRAVEL = "Travel"
    FUEL = "Fuel"
    # Finance
    INCOME = "Salary / Income"
    INVESTMENTS = "Investments"
    LOAN_PAYMENTS = "Loan Payments"
    INSURANCE = "Insurance"
    BUSINESS = "Business Expenses"
    DONATIONS = "Donations / Charity"
    TAXES = "Taxes"
    # Savings
    SAVINGS = "Savings"
    EMERGENCY_FUND = "Emergency Fund"
    CREDIT_CARD = "Credit Card Payment"
    INSTALLMENTS = "EMI / Installments"
    # Miscellaneous
    FAMILY = "Kids / Family Expenses"
    ONLINE_SERVICES = "Online Services"
    MAINTENANCE = "Maintenance / Repairs"
    PETS = "Pets"
    OTHER = "Other"
    MISCELLANEOUS = "Miscellaneous"


class BadgeId(str, Enum):
    """Stable badge keys. Persisted awards are keyed by these values."""

    GOLD_SAVER = "gold-saver"
    MILESTONE_100 = "milestone-100"
    ZERO_DEBT = "zero-debt"
    CONSISTENCY_CHAMP = "consistency-champ"
    SMART_SPENDER = "smart-spender"
    EARLY_BIRD = "early-bird"
    NIGHT_OWL = "night-owl"
    ACTIVE_USER = "active-user"
    SAVINGS_STREAK = "savings-streak"
    FINANCIAL_EXPLORER = "financial-explorer"
    # Legacy ids, kept so older awards stay displayable
    SMART_SAVER = "smart-saver"
    ACTIVE_USER_10 = "active-user-10"
    CONSISTENCY_KING_5 = "consistency-king-5"
    BIG_SAVER_10K = "big-saver-10k"


@dataclass(frozen=True)
class User:
    """User profile domain entity."""

    id: int
    email: str
    first_name: str
    last_name: str
    created_at: datetime


@dataclass(frozen=True)
class BankAccount:
    """Bank account snapshot domain entity."""

    id: int
    user_id: int
    account_number: str
    bank_name: str
    balance: Decimal
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    ``occurred_at`` is left loosely typed because records supplied by external
    readers are not guaranteed to carry a usable timestamp. Use
    ``claritybank.utils.timestamps.parse_timestamp`` to normalise it.
    """

    id: int
    account_id: int
    direction: TransactionDirection
    amount: Decimal
    category: str
    description: str
    occurred_at: Any

    @property
    def is_deposit(self) -> bool:
        return self.direction == TransactionDirection.DEPOSIT

    @property
    def is_withdrawal(self) -> bool:
        return self.direction == TransactionDirection.WITHDRAWAL


@dataclass(frozen=True)
class AuxiliaryFlags:
    """Facts about the user that cannot be derived from stored data.

    They originate from UI session state. Every flag defaults to False.
    """

    has_downloaded_receipt: bool = False


@dataclass(frozen=True)
class TimedTransaction:
    """A well-formed transaction paired with its local occurrence time."""

    transaction: Transaction
    occurred_at: datetime

    @property
    def amount(self) -> Decimal:
        return self.transaction.amount

    @property
    def is_deposit(self) -> bool:
        return self.transaction.is_deposit

    @property
    def is_withdrawal(self) -> bool:
        return self.transaction.is_withdrawal


@dataclass(frozen=True)
class BadgeContext:
    """Everything a badge predicate may look at during one evaluation pass.

    ``transactions`` holds only well-formed records, sorted by local time.
    ``now`` is sampled once per pass and shared by every predicate.
    """

    transactions: tuple[TimedTransaction, ...]
    account: BankAccount
    user: Optional[User]
    flags: AuxiliaryFlags
    now: datetime
    tz: tzinfo

    @property
    def deposits(self) -> tuple[TimedTransaction, ...]:
        return tuple(t for t in self.transactions if t.is_deposit)

    @property
    def withdrawals(self) -> tuple[TimedTransaction, ...]:
        return tuple(t for t in self.transactions if t.is_withdrawal)


BadgePredicate = Callable[[BadgeContext], bool]


@dataclass(frozen=True)
class BadgeDefinition:
    """Catalog entry: display metadata plus a pure predicate."""

    id: BadgeId
    display_name: str
    description: str
    predicate: BadgePredicate = field(compare=False)
    legacy: bool = False

    def is_earned(self, context: BadgeContext) -> bool:
        """Evaluate the predicate. No badge is earned without transactions."""
        if not context.transactions:
            return False
        return bool(self.predicate(context))


@dataclass(frozen=True)
class EarnedBadge:
    """A badge whose predicate held, optionally persisted as an award."""

    badge_id: BadgeId
    display_name: str
    description: str
    earned_at: datetime
