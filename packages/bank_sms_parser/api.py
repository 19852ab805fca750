"""Public operations of the ``bank_sms_parser`` package.

Every function accepts an optional ``registry=`` handle; when omitted the
process-wide :func:`~bank_sms_parser.registry.default_registry` is used.

Pipeline for :func:`parse_transaction`::

    raw text -> matcher -> raw field map -> normalizers
             -> category classifier -> recurrence detector -> ParsedTransaction

Parsing never raises for malformed text; missing fields degrade to defaults
(amount 0, currency SAR, "Unknown Merchant", "N/A", today's date, "Other").
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from . import normalizers
from .classify import classify
from .logging_setup import get_logger
from .matcher import match
from .models import (
    BankPatternSet,
    ParsedTransaction,
    RecurrenceResult,
    RegistrationResult,
    TransactionLike,
)
from .recurrence import detect_recurrence as _detect_recurrence
from .recurrence import detect_recurrence_with_history as _detect_with_history
from .registry import DEFAULT_PRIORITY, PatternLike, Registry, default_registry

# Callers are expected to enforce this before handing a batch over.
MAX_BATCH_SIZE: int = 50

_logger = get_logger("bank_sms_parser.api")


class BatchTooLargeError(ValueError):
    """Raised when a batch exceeds :data:`MAX_BATCH_SIZE` items."""


def _resolve(registry: Registry | None) -> Registry:
    return registry if registry is not None else default_registry()


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _first_line(text: str) -> str:
    lines = text.strip().split("\n")
    return lines[0].strip() if lines else ""


def parse_transaction(
    raw_text: str,
    *,
    registry: Registry | None = None,
    history: Iterable[TransactionLike] | None = None,
    today: date | None = None,
) -> ParsedTransaction:
    """Extract a structured transaction from one notification text.

    Parameters
    ----------
    raw_text:
        The notification as received. ``None`` is treated as empty text and
        other non-string values are converted with ``str()``.
    registry:
        Rule tables to use (defaults to the process-wide registry).
    history:
        Optional earlier transactions. When the statistical detector finds a
        regular series in them, its result replaces the keyword heuristic.
    today:
        Date used when the text carries no date (defaults to today).
    """

    reg = _resolve(registry)
    if raw_text is None:
        text = ""
    elif isinstance(raw_text, str):
        text = raw_text
    else:
        text = str(raw_text)

    fields, confidence, format_id = match(text, reg)

    description = fields.get("description") or _first_line(text)
    amount = normalizers.parse_amount(fields.get("amount"))
    currency = normalizers.normalize_currency(fields.get("currency"))
    merchant_rules = reg.merchant_rules()
    raw_merchant = fields.get("merchant")
    if not raw_merchant:
        raw_merchant = normalizers.extract_merchant_fallback(text)
        _logger.debug("no merchant field from %s; fallback gave %r", format_id, raw_merchant)
    merchant = normalizers.normalize_merchant(raw_merchant, merchant_rules)
    account_masked = normalizers.format_account_masked(fields.get("card"), fields.get("account"))
    tx_date = normalizers.normalize_date(fields.get("date"), today=today)

    category = classify(
        description,
        merchant,
        category_rules=reg.category_rules(),
        merchant_rules=merchant_rules,
    )

    recurrence = _detect_recurrence(merchant, amount, description)

    parsed = ParsedTransaction(
        description=description,
        amount=amount,
        currency=currency,
        merchant=merchant,
        account_masked=account_masked,
        date=tx_date,
        category=category,
        recurrence=recurrence,
        raw_text=text,
        bank_format=format_id,
    )

    if history is not None:
        from_history = _detect_with_history(parsed, history)
        if from_history.is_recurring:
            parsed = dataclasses.replace(parsed, recurrence=from_history)

    _logger.debug(
        "parsed %s transaction (confidence %.3f): %s %s at %s",
        format_id,
        confidence,
        amount,
        currency,
        merchant,
    )
    return parsed


# ---------------------------------------------------------------------------
# Batch parsing
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class BatchItemResult:
    success: bool
    original: Any
    data: ParsedTransaction | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"success": self.success, "original": self.original}
        if self.data is not None:
            out["data"] = self.data.to_dict()
        if self.error is not None:
            out["error"] = self.error
        return out


@dataclass(frozen=True, slots=True)
class BatchResult:
    results: tuple[BatchItemResult, ...]

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def successful(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return self.total - self.successful

    def to_dict(self) -> dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "summary": {
                "total": self.total,
                "successful": self.successful,
                "failed": self.failed,
            },
        }


def parse_batch(
    items: Sequence[Any],
    *,
    registry: Registry | None = None,
    today: date | None = None,
) -> BatchResult:
    """Parse up to :data:`MAX_BATCH_SIZE` notifications independently.

    The size check happens before any parsing. Each item succeeds or fails on
    its own: non-string items and unexpected internal errors are reported in
    that item's result without affecting its siblings.
    """

    if len(items) > MAX_BATCH_SIZE:
        raise BatchTooLargeError(
            f"batch of {len(items)} transactions exceeds the maximum of {MAX_BATCH_SIZE}"
        )

    reg = _resolve(registry)
    results: list[BatchItemResult] = []
    for pos, item in enumerate(items):
        if not isinstance(item, str):
            results.append(
                BatchItemResult(
                    success=False,
                    original=item,
                    error=f"transaction must be a string, got {type(item).__name__}",
                )
            )
            continue
        try:
            parsed = parse_transaction(item, registry=reg, today=today)
        except Exception as e:  # noqa: BLE001
            _logger.error(
                "parse_batch:item_failed index=%d error=%s", pos, e.__class__.__name__
            )
            results.append(BatchItemResult(success=False, original=item, error=str(e)))
            continue
        results.append(BatchItemResult(success=True, original=item, data=parsed))

    batch = BatchResult(tuple(results))
    _logger.info(
        "parse_batch:done total=%d successful=%d failed=%d",
        batch.total,
        batch.successful,
        batch.failed,
    )
    return batch


# ---------------------------------------------------------------------------
# Classification and recurrence (advanced use)
# ---------------------------------------------------------------------------


def classify_category(description: str, merchant: str, *, registry: Registry | None = None) -> str:
    reg = _resolve(registry)
    return classify(
        description,
        merchant,
        category_rules=reg.category_rules(),
        merchant_rules=reg.merchant_rules(),
    )


def detect_recurrence(merchant: str, amount: Decimal, description: str) -> RecurrenceResult:
    """Keyword heuristic; see :func:`bank_sms_parser.recurrence.detect_recurrence`."""

    return _detect_recurrence(merchant, amount, description)


def detect_recurrence_with_history(
    current: TransactionLike, history: Iterable[TransactionLike]
) -> RecurrenceResult:
    """Statistical detector; see :mod:`bank_sms_parser.recurrence`."""

    return _detect_with_history(current, history)


# ---------------------------------------------------------------------------
# Runtime registration and introspection
# ---------------------------------------------------------------------------


def add_category_rule(
    keywords: Iterable[str],
    category: str,
    priority: int = DEFAULT_PRIORITY,
    *,
    registry: Registry | None = None,
) -> RegistrationResult:
    return _resolve(registry).add_category_rule(keywords, category, priority)


def add_merchant_pattern(
    pattern: PatternLike,
    normalized_name: str,
    category: str | None = None,
    *,
    registry: Registry | None = None,
) -> RegistrationResult:
    return _resolve(registry).add_merchant_pattern(pattern, normalized_name, category)


def add_bank_pattern(
    name: str,
    patterns: BankPatternSet | Mapping[str, PatternLike],
    *,
    registry: Registry | None = None,
) -> RegistrationResult:
    return _resolve(registry).add_bank_pattern(name, patterns)


def list_categories(*, registry: Registry | None = None) -> list[str]:
    return _resolve(registry).list_categories()


def list_merchant_patterns(*, registry: Registry | None = None) -> list[dict[str, Any]]:
    return _resolve(registry).merchant_pattern_summaries()


__all__ = [
    "MAX_BATCH_SIZE",
    "BatchItemResult",
    "BatchResult",
    "BatchTooLargeError",
    "add_bank_pattern",
    "add_category_rule",
    "add_merchant_pattern",
    "classify_category",
    "detect_recurrence",
    "detect_recurrence_with_history",
    "list_categories",
    "list_merchant_patterns",
    "parse_batch",
    "parse_transaction",
]
