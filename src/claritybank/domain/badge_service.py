"""Badge evaluation and award domain service."""

import logging
import os
from datetime import datetime, tzinfo
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional, Sequence

from claritybank.database.base import Database
from claritybank.domain.badges import BADGES, validate_catalog
from claritybank.domain.entities import (
    AuxiliaryFlags,
    BadgeContext,
    BadgeDefinition,
    BankAccount,
    EarnedBadge,
    TimedTransaction,
    Transaction,
    User,
)
from claritybank.domain.errors import NotFoundError, account_not_found
from claritybank.utils.timestamps import local_timestamp, resolve_timezone, to_local

logger = logging.getLogger(__name__)

INCLUDE_LEGACY_ENV = "CLARITYBANK_INCLUDE_LEGACY_BADGES"


def include_legacy_default() -> bool:
    """Read the legacy-badge switch from the environment (on unless disabled)."""
    value = os.environ.get(INCLUDE_LEGACY_ENV)
    if value is None:
        return True
    return value.strip().lower() not in ("0", "false", "no", "off")


def well_formed(txn: Transaction, tz: tzinfo) -> Optional[TimedTransaction]:
    """Localise a transaction, or return None if the record is unusable.

    A record is unusable when its timestamp cannot be parsed, its direction
    is unknown, or its amount is missing, non-numeric or negative.
    """
    occurred_at = local_timestamp(txn.occurred_at, tz)
    if occurred_at is None:
        logger.debug("Skipping transaction %s: unusable timestamp %r", txn.id, txn.occurred_at)
        return None
    if not (txn.is_deposit or txn.is_withdrawal):
        logger.debug("Skipping transaction %s: unknown direction %r", txn.id, txn.direction)
        return None
    try:
        amount = Decimal(str(txn.amount))
    except InvalidOperation:
        amount = None
    if amount is None or not amount.is_finite() or amount < 0:
        logger.debug("Skipping transaction %s: unusable amount %r", txn.id, txn.amount)
        return None
    if amount != txn.amount:
        txn = _with_amount(txn, amount)
    return TimedTransaction(transaction=txn, occurred_at=occurred_at)


def build_context(
    transactions: Iterable[Transaction],
    account: BankAccount,
    user: Optional[User],
    flags: Optional[AuxiliaryFlags],
    now: datetime,
    tz: tzinfo,
) -> BadgeContext:
    """Prepare the shared input for one evaluation pass.

    Unusable records are left out (see ``well_formed``). The rest are
    sorted by local time.
    """
    timed = [t for t in (well_formed(txn, tz) for txn in transactions) if t is not None]
    timed.sort(key=lambda t: t.occurred_at)
    return BadgeContext(
        transactions=tuple(timed),
        account=account,
        user=user,
        flags=flags if flags is not None else AuxiliaryFlags(),
        now=now,
        tz=tz,
    )


def _with_amount(txn: Transaction, amount: Decimal) -> Transaction:
    return Transaction(
        id=txn.id,
        account_id=txn.account_id,
        direction=txn.direction,
        amount=amount,
        category=txn.category,
        description=txn.description,
        occurred_at=txn.occurred_at,
    )


class BadgeService:
    """Service for evaluating and awarding achievement badges."""

    def __init__(
        self,
        db: Optional[Database] = None,
        catalog: Sequence[BadgeDefinition] = BADGES,
        include_legacy: Optional[bool] = None,
    ):
        """Initialize badge service.

        Args:
            db: Database instance, needed only for awarding and lookups
            catalog: Badge definitions in display order
            include_legacy: Whether legacy badge ids are evaluated. Defaults to
                the CLARITYBANK_INCLUDE_LEGACY_BADGES environment variable.

        Raises:
            CatalogError: If the catalog reuses a badge id
        """
        validate_catalog(catalog)
        self.db = db
        self.catalog = tuple(catalog)
        self.include_legacy = include_legacy_default() if include_legacy is None else include_legacy

    def badges(self, include_legacy: Optional[bool] = None) -> tuple[BadgeDefinition, ...]:
        """Return the catalog entries that take part in evaluation."""
        if include_legacy is None:
            include_legacy = self.include_legacy
        return tuple(b for b in self.catalog if include_legacy or not b.legacy)

    def evaluate(
        self,
        transactions: Iterable[Transaction],
        account: Optional[BankAccount],
        user: Optional[User] = None,
        flags: Optional[AuxiliaryFlags] = None,
        *,
        now: Optional[datetime] = None,
        tz: Optional[tzinfo] = None,
        include_legacy: Optional[bool] = None,
    ) -> list[EarnedBadge]:
        """Determine which badges the given activity currently satisfies.

        Nothing is persisted, so this is safe to call on every refresh.

        Args:
            transactions: Account transactions in any order
            account: Account snapshot; None means no badges
            user: Optional user profile, used for signup-relative badges
            flags: Optional auxiliary flags; missing flags are False
            now: Evaluation instant (defaults to the current time, sampled once)
            tz: Timezone for calendar and time-of-day rules (defaults to local)
            include_legacy: Override the service's legacy-badge setting

        Returns:
            Earned badges in catalog order
        """
        if account is None:
            return []

        tz, now = self._pass_clock(now, tz)
        context = build_context(transactions, account, user, flags, now, tz)
        earned = [
            EarnedBadge(
                badge_id=badge.id,
                display_name=badge.display_name,
                description=badge.description,
                earned_at=now,
            )
            for badge in self.badges(include_legacy)
            if badge.is_earned(context)
        ]
        logger.debug(
            "Evaluated %d badges for account %s: %d earned",
            len(self.badges(include_legacy)),
            account.id,
            len(earned),
        )
        return earned

    def evaluate_for_account(
        self,
        account_id: int,
        flags: Optional[AuxiliaryFlags] = None,
        *,
        now: Optional[datetime] = None,
        tz: Optional[tzinfo] = None,
        include_legacy: Optional[bool] = None,
    ) -> list[EarnedBadge]:
        """Load an account's data and evaluate it without persisting anything.

        Raises:
            NotFoundError: If the account does not exist
        """
        account, user, transactions = self._load_account(account_id)
        return self.evaluate(
            transactions, account, user, flags, now=now, tz=tz, include_legacy=include_legacy
        )

    def award_badges(
        self,
        user_id: int,
        transactions: Iterable[Transaction],
        account: Optional[BankAccount],
        user: Optional[User] = None,
        flags: Optional[AuxiliaryFlags] = None,
        *,
        now: Optional[datetime] = None,
        tz: Optional[tzinfo] = None,
        include_legacy: Optional[bool] = None,
    ) -> list[EarnedBadge]:
        """Persist every newly satisfied badge and return only those.

        Badges the user already holds are skipped without evaluation and are
        never removed or rewritten, even if their rule no longer holds.
        Calling this again with the same inputs writes nothing.

        Args:
            user_id: Owner of the awards
            transactions: Account transactions in any order
            account: Account snapshot; None means nothing is awarded
            user: Optional user profile
            flags: Optional auxiliary flags
            now: Evaluation instant
            tz: Timezone for calendar and time-of-day rules
            include_legacy: Override the service's legacy-badge setting

        Returns:
            Newly persisted awards with their stored timestamps, in catalog order
        """
        db = self._require_db()
        if account is None:
            return []

        already_awarded = db.list_earned_badge_ids(user_id)
        pending = [b for b in self.badges(include_legacy) if b.id.value not in already_awarded]
        if not pending:
            return []

        tz, now = self._pass_clock(now, tz)
        context = build_context(transactions, account, user, flags, now, tz)

        awarded = []
        for badge in pending:
            if not badge.is_earned(context):
                continue
            record = db.save_earned_badge(
                user_id=user_id,
                badge_id=badge.id.value,
                display_name=badge.display_name,
                description=badge.description,
            )
            if record is None:
                logger.info("Badge %s for user %s was stored concurrently", badge.id.value, user_id)
                continue
            logger.info("Awarded badge %s to user %s", badge.id.value, user_id)
            awarded.append(record)
        return awarded

    def award_badges_for_account(
        self,
        account_id: int,
        flags: Optional[AuxiliaryFlags] = None,
        *,
        now: Optional[datetime] = None,
        tz: Optional[tzinfo] = None,
        include_legacy: Optional[bool] = None,
    ) -> list[EarnedBadge]:
        """Load an account's data and award its owner any new badges.

        Raises:
            NotFoundError: If the account does not exist
        """
        account, user, transactions = self._load_account(account_id)
        return self.award_badges(
            account.user_id,
            transactions,
            account,
            user,
            flags,
            now=now,
            tz=tz,
            include_legacy=include_legacy,
        )

    def list_awarded_badges(self, user_id: int) -> list[EarnedBadge]:
        """Return a user's persisted awards, legacy ids included, in catalog order."""
        db = self._require_db()
        order = {badge.id: index for index, badge in enumerate(self.catalog)}
        return sorted(db.list_earned_badges(user_id), key=lambda b: order.get(b.badge_id, len(order)))

    def _load_account(
        self, account_id: int
    ) -> tuple[BankAccount, Optional[User], list[Transaction]]:
        db = self._require_db()
        account = db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        user = db.get_user(account.user_id)
        transactions = db.list_transactions(account_id=account_id)
        return account, user, transactions

    def _require_db(self) -> Database:
        if self.db is None:
            raise RuntimeError("BadgeService needs a database for this operation")
        return self.db

    @staticmethod
    def _pass_clock(now: Optional[datetime], tz: Optional[tzinfo]) -> tuple[tzinfo, datetime]:
        """Fix the timezone and the single instant used for a whole pass."""
        if tz is None:
            tz = resolve_timezone()
        if now is None:
            now = datetime.now(tz)
        return tz, to_local(now, tz)
