"""Activity insights: the boundary to the external summary generator.

The summary text itself comes from a language model outside this package.
Here we only shape the transactions handed to it and guard the call.
"""

import logging
from typing import Any, Callable, Iterable, Optional

from claritybank.domain.badge_service import well_formed
from claritybank.domain.entities import Transaction
from claritybank.utils.timestamps import resolve_timezone

logger = logging.getLogger(__name__)

NO_TRANSACTIONS_SUMMARY = "There are no transactions available to analyze."
SUMMARY_UNAVAILABLE = "Could not generate insights at this time."

Summarizer = Callable[[list[dict[str, Any]]], str]


def project_for_summary(transactions: Iterable[Transaction], tz=None) -> list[dict[str, Any]]:
    """Reduce transactions to the fields the summarizer is given.

    Each entry has ``type``, ``amount``, ``category`` and ``date``
    (YYYY-MM-DD). Unusable records are dropped the same way badge
    evaluation drops them.
    """
    tz = tz if tz is not None else resolve_timezone()
    projected = []
    for txn in transactions:
        timed = well_formed(txn, tz)
        if timed is None:
            continue
        record = timed.transaction
        projected.append(
            {
                "type": getattr(record.direction, "value", record.direction),
                "amount": float(record.amount),
                "category": getattr(record.category, "value", record.category),
                "date": timed.occurred_at.strftime("%Y-%m-%d"),
            }
        )
    return projected


class InsightsService:
    """Service producing a short natural-language summary of recent activity."""

    def __init__(self, summarizer: Summarizer):
        """Initialize insights service.

        Args:
            summarizer: Callable that receives the projected transactions and
                returns the summary text
        """
        self.summarizer = summarizer

    def summarize(self, transactions: Iterable[Transaction], tz=None) -> str:
        """Summarize transactions, falling back to a fixed message on failure."""
        projected = project_for_summary(transactions, tz=tz)
        if not projected:
            return NO_TRANSACTIONS_SUMMARY

        try:
            summary: Optional[str] = self.summarizer(projected)
        except Exception:
            logger.exception("Summary generation failed")
            return SUMMARY_UNAVAILABLE

        if not summary or not summary.strip():
            logger.warning("Summary generator returned no text")
            return SUMMARY_UNAVAILABLE
        return summary.strip()
