"""Recurrence detection.

Two independent detectors:

- :func:`detect_recurrence` works on a single transaction using subscription
  and utility keywords.
- :func:`detect_recurrence_with_history` looks for a regular series among
  earlier transactions to the same merchant with a similar amount.
"""

from __future__ import annotations

import statistics
from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from .logging_setup import get_logger
from .models import RecurrencePeriod, RecurrenceResult, TransactionLike
from .rules import SUBSCRIPTION_KEYWORDS, UTILITY_KEYWORDS

# Relative amount tolerance for "similar" history entries
AMOUNT_TOLERANCE = Decimal("0.1")
MIN_SIMILAR = 2
# Gap standard deviation must stay below this fraction of the mean gap
REGULARITY_RATIO = 0.2

# (low, high, period, confidence); bounds inclusive, checked in order
_PERIOD_BANDS: tuple[tuple[float, float, RecurrencePeriod, float], ...] = (
    (25.0, 35.0, "monthly", 0.9),
    (6.0, 8.0, "weekly", 0.8),
    (360.0, 370.0, "yearly", 0.8),
    (0.8, 1.2, "daily", 0.7),
)

_NOT_RECURRING = RecurrenceResult(is_recurring=False, confidence=0.0)

_logger = get_logger("bank_sms_parser.recurrence")


def _mentions_any(keywords: Iterable[str], *texts: str) -> bool:
    lowered = [t.lower() for t in texts]
    return any(k in t for k in keywords for t in lowered)


def detect_recurrence(merchant: str, amount: Decimal, description: str) -> RecurrenceResult:
    """Keyword heuristic for a single transaction.

    ``amount`` is part of the signature for future refinement and is not
    consulted yet.
    """

    if _mentions_any(SUBSCRIPTION_KEYWORDS, merchant, description):
        return RecurrenceResult(is_recurring=True, period="monthly", confidence=0.8)
    if _mentions_any(UTILITY_KEYWORDS, merchant, description):
        return RecurrenceResult(is_recurring=True, period="monthly", confidence=0.7)
    return RecurrenceResult(is_recurring=False)


def _is_similar(candidate: TransactionLike, current: TransactionLike) -> bool:
    if candidate.merchant != current.merchant:
        return False
    return abs(candidate.amount - current.amount) <= current.amount * AMOUNT_TOLERANCE


def _parse_iso(value: str) -> date | None:
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        return None


def detect_recurrence_with_history(
    current: TransactionLike, history: Iterable[TransactionLike]
) -> RecurrenceResult:
    """Classify ``current`` as part of a periodic series using ``history``.

    Similar entries share the merchant string exactly and are within 10% of
    the current amount. At least two are needed; their sorted dates give the
    day gaps whose mean selects the period, provided the population standard
    deviation stays under 20% of the mean. Entries whose date is not an ISO
    calendar date are ignored.
    """

    similar = [tx for tx in history if _is_similar(tx, current)]
    if len(similar) < MIN_SIMILAR:
        return _NOT_RECURRING

    dates = sorted(d for d in (_parse_iso(tx.date) for tx in similar) if d is not None)
    if len(dates) < MIN_SIMILAR:
        _logger.debug(
            "only %d of %d similar transactions carry ISO dates", len(dates), len(similar)
        )
        return _NOT_RECURRING

    gaps = [float((later - earlier).days) for earlier, later in zip(dates, dates[1:])]
    mean_gap = statistics.fmean(gaps)
    spread = statistics.pstdev(gaps)
    if not spread < REGULARITY_RATIO * mean_gap:
        _logger.debug("irregular series: mean=%.2f stddev=%.2f", mean_gap, spread)
        return _NOT_RECURRING

    for low, high, period, confidence in _PERIOD_BANDS:
        if low <= mean_gap <= high:
            return RecurrenceResult(is_recurring=True, period=period, confidence=confidence)
    return _NOT_RECURRING


__all__ = [
    "AMOUNT_TOLERANCE",
    "detect_recurrence",
    "detect_recurrence_with_history",
]
