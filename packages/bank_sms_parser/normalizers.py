"""Field normalizers: raw matched substrings -> canonical values.

All helpers are pure and never raise on malformed input; anything that cannot
be normalized degrades to a documented default.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import date
from decimal import Decimal, InvalidOperation

from .models import DEFAULT_CURRENCY, NO_ACCOUNT, UNKNOWN_MERCHANT, MerchantRule

# Transaction/reference codes embedded in merchant strings
_CODE_RUN_RE = re.compile(r"[A-Z0-9]{8,}")
_UPPER_RE = re.compile(r"[A-Z]")
_CURRENCY_RE = re.compile(r"[A-Z]{3}")
_DD_MM_YY_RE = re.compile(r"([0-9]{2})-([0-9]{2})-([0-9]{2})")
_DD_MM_YYYY_RE = re.compile(r"([0-9]{2})/([0-9]{2})/([0-9]{4})")

# Tokens that typically precede the counterparty: from, to, at, with
_ARABIC_INDICATORS: tuple[str, ...] = ("من", "إلى", "لدى", "عند")
_ENGLISH_INDICATORS: tuple[str, ...] = ("from", "to", "at", "with")
_INDICATOR_RES: tuple[re.Pattern[str], ...] = tuple(
    [re.compile(re.escape(t) + r"\s+([^\n]+)") for t in _ARABIC_INDICATORS]
    + [re.compile(r"\b" + t + r"\s+([^\n]+)", re.IGNORECASE) for t in _ENGLISH_INDICATORS]
)


# ---------------------------------------------------------------------------
# Merchant
# ---------------------------------------------------------------------------


def clean_merchant(raw: str) -> str:
    """Drop long uppercase/digit codes and collapse whitespace."""

    return " ".join(_CODE_RUN_RE.sub("", raw).split())


def normalize_merchant(raw: str | None, merchant_rules: Sequence[MerchantRule]) -> str:
    """Return the canonical merchant name for a raw merchant string.

    The first merchant rule matching the cleaned string wins. Without a rule
    match the cleaned string is returned, or the raw string when cleaning
    removed everything.
    """

    if not raw or not raw.strip():
        return UNKNOWN_MERCHANT
    cleaned = clean_merchant(raw)
    for rule in merchant_rules:
        if rule.pattern.search(cleaned):
            return rule.normalized_name
    return cleaned or raw.strip()


def extract_merchant_fallback(text: str) -> str | None:
    """Guess the merchant when no format extracted one.

    Tries indicator tokens ("from"/"to"/"at"/"with", Arabic first) followed by
    the rest of the line; otherwise joins the words containing an uppercase
    letter that are longer than two characters.
    """

    for regex in _INDICATOR_RES:
        m = regex.search(text)
        if m:
            found = m.group(1).strip()
            if found:
                return found

    words = [w for w in text.split() if len(w) > 2 and _UPPER_RE.search(w)]
    return " ".join(words) or None


# ---------------------------------------------------------------------------
# Account, date, amount, currency
# ---------------------------------------------------------------------------


def format_account_masked(card: str | None, account: str | None) -> str:
    parts = [p for p in (card, account) if p]
    return " / ".join(parts) or NO_ACCOUNT


def normalize_date(raw: str | None, *, today: date | None = None) -> str:
    """Normalize ``DD-MM-YY`` and ``DD/MM/YYYY`` to ``YYYY-MM-DD``.

    Two-digit years expand to ``20YY``. Any other shape is returned unchanged.
    A missing date yields ``today`` (defaults to the current local date).
    """

    if not raw:
        return (today or date.today()).isoformat()

    s = raw.strip()
    m = _DD_MM_YY_RE.fullmatch(s)
    if m:
        day, month, year = m.groups()
        return f"20{year}-{month}-{day}"
    m = _DD_MM_YYYY_RE.fullmatch(s)
    if m:
        day, month, year = m.groups()
        return f"{year}-{month}-{day}"
    return raw


def parse_amount(raw: str | None) -> Decimal:
    """Parse an amount with thousands separators; unparsable -> ``0``.

    Amounts are reported as magnitudes, so a signed capture yields its
    absolute value.
    """

    if raw is None:
        return Decimal(0)
    # A sentence-ending period can trail the number ("21.99.")
    s = raw.replace(",", "").strip().rstrip(".")
    if not s:
        return Decimal(0)
    try:
        d = Decimal(s)
    except InvalidOperation:
        return Decimal(0)
    if not d.is_finite():
        return Decimal(0)
    return abs(d)


def normalize_currency(raw: str | None) -> str:
    s = (raw or "").strip().upper()
    return s if _CURRENCY_RE.fullmatch(s) else DEFAULT_CURRENCY


__all__ = [
    "clean_merchant",
    "extract_merchant_fallback",
    "format_account_masked",
    "normalize_currency",
    "normalize_date",
    "normalize_merchant",
    "parse_amount",
]
