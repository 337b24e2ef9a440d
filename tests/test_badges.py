"""Tests for the badge catalog rules and the evaluation pass."""

from datetime import datetime, timedelta

import pytest
from dateutil import tz

from claritybank.domain.badge_service import BadgeService
from claritybank.domain.badges import BADGES, current_badges, get_badge, validate_catalog
from claritybank.domain.entities import (
    AuxiliaryFlags,
    BadgeDefinition,
    BadgeId,
    TransactionDirection,
)
from claritybank.domain.errors import CatalogError

UTC = tz.UTC
NOW = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)
DEPOSIT = TransactionDirection.DEPOSIT
WITHDRAWAL = TransactionDirection.WITHDRAWAL


@pytest.fixture
def service():
    return BadgeService(include_legacy=False)


def earned_ids(service, transactions, account, user=None, flags=None, tz_info=UTC, **kwargs):
    earned = service.evaluate(transactions, account, user, flags, now=NOW, tz=tz_info, **kwargs)
    return [badge.badge_id.value for badge in earned]


def day(n, hour=12):
    return datetime(2024, 1, n, hour, tzinfo=UTC)


class TestEvaluationPass:
    """Driver-level behaviour shared by every badge."""

    def test_empty_transactions_earn_nothing(self, service, make_account):
        account = make_account("25000.00")
        flags = AuxiliaryFlags(has_downloaded_receipt=True)
        assert service.evaluate([], account, None, flags, now=NOW, tz=UTC) == []

    def test_missing_account_earns_nothing(self, service, make_txn):
        transactions = [make_txn(day(d)) for d in range(1, 20)]
        assert service.evaluate(transactions, None, now=NOW, tz=UTC) == []

    def test_results_follow_catalog_order(self, service, make_account, make_txn):
        transactions = [make_txn(day(d)) for d in range(1, 12)]
        flags = AuxiliaryFlags(has_downloaded_receipt=True)
        ids = earned_ids(service, transactions, make_account("15000"), flags=flags)

        catalog_order = [b.id.value for b in BADGES]
        assert ids == sorted(ids, key=catalog_order.index)
        assert ids[0] == "gold-saver"
        assert ids[-1] == "financial-explorer"

    def test_earned_at_is_the_pass_instant(self, service, make_account, make_txn):
        earned = service.evaluate([make_txn(day(1))], make_account("10000"), now=NOW, tz=UTC)
        assert earned
        assert all(badge.earned_at == NOW for badge in earned)

    def test_unsorted_input_is_not_mutated(self, service, make_account, make_txn):
        transactions = [make_txn(day(d)) for d in (5, 3, 1, 4, 2)]
        snapshot = list(transactions)
        ids = earned_ids(service, transactions, make_account())
        assert "consistency-champ" in ids
        assert transactions == snapshot

    def test_relative_words_do_not_read_the_wall_clock(self, service, make_account, make_txn):
        later = datetime(2030, 1, 1, 12, 0, tzinfo=UTC)
        transactions = [
            make_txn(later - timedelta(days=40), direction=DEPOSIT),
            make_txn("yesterday", direction=WITHDRAWAL),
        ]

        earned = service.evaluate(transactions, make_account(), now=later, tz=UTC)
        ids = [badge.badge_id.value for badge in earned]

        assert "zero-debt" in ids
        assert "night-owl" not in ids

    def test_malformed_records_are_skipped_not_fatal(self, service, make_account, make_txn):
        transactions = [make_txn(day(d)) for d in range(1, 10)]
        transactions.append(make_txn("not a timestamp"))
        transactions.append(make_txn(None))
        transactions.append(make_txn(day(20), amount="-50.00"))

        ids = earned_ids(service, transactions, make_account())
        # Nine usable records, so the ten-transaction badge is not reached
        assert "active-user" not in ids
        assert "consistency-champ" in ids

    def test_string_and_epoch_timestamps_are_accepted(self, service, make_account, make_txn):
        class StoreTimestamp:
            def __init__(self, seconds):
                self.seconds = seconds

        transactions = [
            make_txn("2024-01-01T12:00:00+00:00"),
            make_txn(day(2).timestamp()),
            make_txn(StoreTimestamp(int(day(3).timestamp()))),
            make_txn("2024-01-04 12:00:00Z"),
            make_txn(day(5)),
        ]
        assert "consistency-champ" in earned_ids(service, transactions, make_account())

    def test_legacy_ids_follow_configuration(self, make_account, make_txn):
        transactions = [make_txn(day(d)) for d in range(1, 11)]
        account = make_account("10000")

        with_legacy = earned_ids(BadgeService(include_legacy=True), transactions, account)
        current = earned_ids(BadgeService(include_legacy=False), transactions, account)

        assert {"smart-saver", "active-user-10", "consistency-king-5", "big-saver-10k"} <= set(with_legacy)
        assert not {"smart-saver", "active-user-10", "consistency-king-5", "big-saver-10k"} & set(current)
        assert {"zero-debt", "active-user", "consistency-champ", "gold-saver"} <= set(current)

    def test_call_override_beats_service_setting(self, service, make_account, make_txn):
        ids = earned_ids(service, [make_txn(day(1))], make_account("10000"), include_legacy=True)
        assert "big-saver-10k" in ids

    def test_legacy_setting_from_environment(self, monkeypatch):
        monkeypatch.setenv("CLARITYBANK_INCLUDE_LEGACY_BADGES", "0")
        assert all(not b.legacy for b in BadgeService().badges())

        monkeypatch.setenv("CLARITYBANK_INCLUDE_LEGACY_BADGES", "1")
        assert any(b.legacy for b in BadgeService().badges())

        monkeypatch.delenv("CLARITYBANK_INCLUDE_LEGACY_BADGES")
        assert len(BadgeService().badges()) == len(BADGES)


class TestCatalog:
    """Tests for the static catalog itself."""

    def test_ids_are_unique(self):
        validate_catalog(BADGES)
        assert len({b.id for b in BADGES}) == len(BADGES)

    def test_current_catalog_has_ten_badges(self):
        assert [b.id.value for b in current_badges()] == [
            "gold-saver",
            "milestone-100",
            "zero-debt",
            "consistency-champ",
            "smart-spender",
            "early-bird",
            "night-owl",
            "active-user",
            "savings-streak",
            "financial-explorer",
        ]

    def test_duplicate_ids_rejected(self):
        badge = get_badge("gold-saver")
        duplicate = BadgeDefinition(
            id=BadgeId.GOLD_SAVER,
            display_name="Copy",
            description="Copy",
            predicate=lambda context: True,
        )
        with pytest.raises(CatalogError, match="gold-saver"):
            validate_catalog([badge, duplicate])
        with pytest.raises(CatalogError):
            BadgeService(catalog=[badge, duplicate])

    def test_get_badge_unknown(self):
        assert get_badge("no-such-badge") is None


class TestGoldSaver:
    @pytest.mark.parametrize(
        "balance, expected",
        [("9999.99", False), ("10000.00", True), ("10000.01", True)],
    )
    def test_threshold(self, service, make_account, make_txn, balance, expected):
        ids = earned_ids(service, [make_txn(day(1))], make_account(balance))
        assert ("gold-saver" in ids) is expected


class TestTransactionCounts:
    def test_milestone_100(self, service, make_account, make_txn):
        start = datetime(2023, 1, 1, 12, tzinfo=UTC)
        transactions = [make_txn(start + timedelta(days=i)) for i in range(99)]
        assert "milestone-100" not in earned_ids(service, transactions, make_account())

        transactions.append(make_txn(start + timedelta(days=99)))
        assert "milestone-100" in earned_ids(service, transactions, make_account())

    def test_active_user(self, service, make_account, make_txn):
        transactions = [make_txn(day(1)) for _ in range(9)]
        assert "active-user" not in earned_ids(service, transactions, make_account())

        transactions.append(make_txn(day(2), direction=WITHDRAWAL))
        assert "active-user" in earned_ids(service, transactions, make_account())


class TestZeroDebt:
    def test_withdrawal_31_days_ago(self, service, make_account, make_txn):
        transactions = [make_txn(NOW - timedelta(days=31), direction=WITHDRAWAL)]
        assert "zero-debt" in earned_ids(service, transactions, make_account())

    def test_withdrawal_29_days_ago(self, service, make_account, make_txn):
        transactions = [
            make_txn(NOW - timedelta(days=40), direction=WITHDRAWAL),
            make_txn(NOW - timedelta(days=29), direction=WITHDRAWAL),
        ]
        assert "zero-debt" not in earned_ids(service, transactions, make_account())

    def test_recent_deposits_do_not_count(self, service, make_account, make_txn):
        transactions = [make_txn(NOW - timedelta(days=1))]
        assert "zero-debt" in earned_ids(service, transactions, make_account())

    def test_no_transactions(self, service, make_account):
        assert "zero-debt" not in earned_ids(service, [], make_account())


class TestConsistencyChamp:
    def test_five_consecutive_days(self, service, make_account, make_txn):
        transactions = [make_txn(day(d)) for d in (1, 2, 3, 4, 5)]
        assert "consistency-champ" in earned_ids(service, transactions, make_account())

    def test_gap_resets_run_until_filled(self, service, make_account, make_txn):
        transactions = [make_txn(day(d)) for d in (1, 2, 3, 5, 6)]
        assert "consistency-champ" not in earned_ids(service, transactions, make_account())

        transactions.append(make_txn(day(4)))
        assert "consistency-champ" in earned_ids(service, transactions, make_account())

    def test_same_day_deposits_count_once(self, service, make_account, make_txn):
        transactions = [make_txn(day(d, hour)) for d, hour in ((1, 9), (1, 18), (2, 12), (3, 12), (4, 12))]
        assert "consistency-champ" not in earned_ids(service, transactions, make_account())

    def test_withdrawals_do_not_extend_run(self, service, make_account, make_txn):
        transactions = [make_txn(day(d)) for d in (1, 2, 3, 4)]
        transactions.append(make_txn(day(5), direction=WITHDRAWAL))
        assert "consistency-champ" not in earned_ids(service, transactions, make_account())

    def test_days_follow_evaluation_timezone(self, service, make_account, make_txn):
        # 20:00 UTC is already the next calendar day in Kolkata
        kolkata = tz.gettz("Asia/Kolkata")
        transactions = [make_txn(day(d, 12)) for d in (1, 2, 3, 4)]
        transactions.append(make_txn(day(4, 20)))
        assert "consistency-champ" not in earned_ids(service, transactions, make_account())
        assert "consistency-champ" in earned_ids(service, transactions, make_account(), tz_info=kolkata)


class TestSmartSpender:
    def test_ten_bills_and_groceries(self, service, make_account, make_txn):
        transactions = [
            make_txn(day(d), direction=WITHDRAWAL, category="Bills" if d % 2 else "Groceries")
            for d in range(1, 11)
        ]
        assert "smart-spender" in earned_ids(service, transactions, make_account())

    def test_other_categories_and_deposits_ignored(self, service, make_account, make_txn):
        transactions = [make_txn(day(d), direction=WITHDRAWAL, category="Bills") for d in range(1, 10)]
        transactions.append(make_txn(day(10), direction=WITHDRAWAL, category="Food"))
        transactions.append(make_txn(day(11), category="Groceries"))
        assert "smart-spender" not in earned_ids(service, transactions, make_account())


class TestEarlyBird:
    SIGNUP = datetime(2024, 3, 1, 9, 0, tzinfo=UTC)

    def test_first_deposit_within_a_day(self, service, make_account, make_user, make_txn):
        transactions = [make_txn(self.SIGNUP + timedelta(hours=23, minutes=59))]
        ids = earned_ids(service, transactions, make_account(), make_user(self.SIGNUP))
        assert "early-bird" in ids

    def test_first_deposit_at_signup(self, service, make_account, make_user, make_txn):
        transactions = [make_txn(self.SIGNUP)]
        assert "early-bird" in earned_ids(service, transactions, make_account(), make_user(self.SIGNUP))

    def test_first_deposit_after_24_hours(self, service, make_account, make_user, make_txn):
        transactions = [make_txn(self.SIGNUP + timedelta(hours=24))]
        assert "early-bird" not in earned_ids(service, transactions, make_account(), make_user(self.SIGNUP))

    def test_only_the_first_deposit_matters(self, service, make_account, make_user, make_txn):
        transactions = [
            make_txn(self.SIGNUP + timedelta(hours=2)),
            make_txn(self.SIGNUP + timedelta(days=3)),
        ]
        # Caller order is irrelevant; the earliest deposit is the first one
        transactions.reverse()
        assert "early-bird" in earned_ids(service, transactions, make_account(), make_user(self.SIGNUP))

    def test_withdrawal_first_is_not_a_deposit(self, service, make_account, make_user, make_txn):
        transactions = [
            make_txn(self.SIGNUP + timedelta(hours=1), direction=WITHDRAWAL),
            make_txn(self.SIGNUP + timedelta(days=2)),
        ]
        assert "early-bird" not in earned_ids(service, transactions, make_account(), make_user(self.SIGNUP))

    def test_without_user_profile(self, service, make_account, make_txn):
        transactions = [make_txn(self.SIGNUP + timedelta(hours=1))]
        assert "early-bird" not in earned_ids(service, transactions, make_account(), None)


class TestNightOwl:
    def test_just_before_five(self, service, make_account, make_txn):
        transactions = [make_txn(datetime(2024, 1, 1, 4, 59, 59, tzinfo=UTC))]
        assert "night-owl" in earned_ids(service, transactions, make_account())

    def test_at_five(self, service, make_account, make_txn):
        transactions = [make_txn(datetime(2024, 1, 1, 5, 0, 0, tzinfo=UTC))]
        assert "night-owl" not in earned_ids(service, transactions, make_account())

    def test_midnight(self, service, make_account, make_txn):
        transactions = [make_txn(datetime(2024, 1, 1, 0, 0, 0, tzinfo=UTC), direction=WITHDRAWAL)]
        assert "night-owl" in earned_ids(service, transactions, make_account())

    def test_hour_is_local(self, service, make_account, make_txn):
        kolkata = tz.gettz("Asia/Kolkata")
        # 22:00 UTC is 03:30 in Kolkata; 23:30 UTC is 05:00
        late = [make_txn(datetime(2024, 1, 1, 22, 0, tzinfo=UTC))]
        boundary = [make_txn(datetime(2024, 1, 1, 23, 30, tzinfo=UTC))]
        assert "night-owl" in earned_ids(service, late, make_account(), tz_info=kolkata)
        assert "night-owl" not in earned_ids(service, boundary, make_account(), tz_info=kolkata)

    def test_naive_times_are_wall_clock(self, service, make_account, make_txn):
        kolkata = tz.gettz("Asia/Kolkata")
        transactions = [make_txn(datetime(2024, 1, 1, 3, 15))]
        assert "night-owl" in earned_ids(service, transactions, make_account(), tz_info=kolkata)


class TestSavingsStreak:
    def _history(self, make_txn, withdrawn):
        return [
            make_txn(datetime(2024, 1, 10, 12, tzinfo=UTC), amount="1000.00"),
            make_txn(datetime(2024, 2, 10, 12, tzinfo=UTC), amount="1000.00"),
            make_txn(datetime(2024, 3, 10, 12, tzinfo=UTC), amount="1000.00"),
            make_txn(datetime(2024, 3, 20, 12, tzinfo=UTC), amount=withdrawn, direction=WITHDRAWAL),
        ]

    def test_spending_exceeds_saving(self, service, make_account, make_txn):
        transactions = self._history(make_txn, "3500.00")
        assert "savings-streak" not in earned_ids(service, transactions, make_account())

    def test_saving_exceeds_spending(self, service, make_account, make_txn):
        transactions = self._history(make_txn, "2000.00")
        assert "savings-streak" in earned_ids(service, transactions, make_account())

    def test_equal_totals_do_not_qualify(self, service, make_account, make_txn):
        transactions = self._history(make_txn, "3000.00")
        assert "savings-streak" not in earned_ids(service, transactions, make_account())

    def test_two_months_are_not_enough(self, service, make_account, make_txn):
        transactions = [
            make_txn(datetime(2024, 1, 10, 12, tzinfo=UTC)),
            make_txn(datetime(2024, 1, 25, 12, tzinfo=UTC)),
            make_txn(datetime(2024, 2, 10, 12, tzinfo=UTC)),
        ]
        assert "savings-streak" not in earned_ids(service, transactions, make_account())

    def test_same_month_different_years(self, service, make_account, make_txn):
        transactions = [
            make_txn(datetime(2022, 5, 1, 12, tzinfo=UTC)),
            make_txn(datetime(2023, 5, 1, 12, tzinfo=UTC)),
            make_txn(datetime(2024, 5, 1, 12, tzinfo=UTC)),
        ]
        assert "savings-streak" in earned_ids(service, transactions, make_account())


class TestFinancialExplorer:
    def test_receipt_flag(self, service, make_account, make_txn):
        flags = AuxiliaryFlags(has_downloaded_receipt=True)
        assert "financial-explorer" in earned_ids(service, [make_txn(day(1))], make_account(), flags=flags)

    def test_flags_default_to_false(self, service, make_account, make_txn):
        assert "financial-explorer" not in earned_ids(service, [make_txn(day(1))], make_account())
        assert AuxiliaryFlags().has_downloaded_receipt is False
