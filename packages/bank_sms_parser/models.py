"""Data models for ``bank_sms_parser``.

Rule-table entries (:class:`BankPatternSet`, :class:`MerchantRule`,
:class:`CategoryRule`) are immutable once built; the tables holding them live
in :class:`bank_sms_parser.registry.Registry`. Parse output
(:class:`ParsedTransaction`) is constructed fresh per call and never mutated.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from enum import StrEnum
from typing import Any, Literal, NamedTuple, Protocol

type RecurrencePeriod = Literal["daily", "weekly", "monthly", "yearly"]

DEFAULT_CURRENCY = "SAR"
UNKNOWN_MERCHANT = "Unknown Merchant"
NO_ACCOUNT = "N/A"
DEFAULT_CATEGORY = "Other"
GENERIC_FORMAT = "generic"

# Field order used when scoring a pattern set. Extras follow in their own
# registration order.
CORE_FIELDS: tuple[str, ...] = ("description", "amount", "merchant", "card", "account", "date")


# ---------------------------------------------------------------------------
# Bank formats
# ---------------------------------------------------------------------------


class BankId(StrEnum):
    """Stable identifiers for the bank/wallet formats shipped with the package.

    Formats registered at runtime under any other name are tagged ``CUSTOM``.
    """

    GENERIC = "generic"
    ALRAJHI = "alrajhi"
    NCB = "ncb"
    RIYAD = "riyad"
    SAMBA = "samba"
    SNB = "snb"
    SAIB = "saib"
    BSF = "bsf"
    ANB = "anb"
    SABB = "sabb"
    ALJAZIRA = "aljazira"
    ALBILAD = "albilad"
    FAB = "fab"
    STCPAY = "stcpay"
    MOBILYPAY = "mobilypay"
    ZAINPAY = "zainpay"
    ALINMA = "alinma"
    RAJHIISLAMIC = "rajhiislamic"
    APPLEPAY = "applepay"
    SAMSUNGPAY = "samsungpay"
    MADA = "mada"
    VISA = "visa"
    MASTERCARD = "mastercard"
    TAMARA = "tamara"
    TABBY = "tabby"
    CUSTOM = "custom"


@dataclass(frozen=True, slots=True)
class BankPatternSet:
    """Named set of field-extraction patterns for one bank's phrasing.

    Every pattern has exactly one capturing group, except ``amount`` which has
    two (value, currency code). ``extras`` holds bank-specific fields such as
    ``reference`` or ``terminal``; they score like the core fields.
    """

    name: str
    description: re.Pattern[str] | None = None
    amount: re.Pattern[str] | None = None
    merchant: re.Pattern[str] | None = None
    card: re.Pattern[str] | None = None
    account: re.Pattern[str] | None = None
    date: re.Pattern[str] | None = None
    extras: Mapping[str, re.Pattern[str]] = field(default_factory=dict)

    @property
    def bank_id(self) -> BankId:
        try:
            return BankId(self.name)
        except ValueError:
            return BankId.CUSTOM

    def fields(self) -> Iterator[tuple[str, re.Pattern[str]]]:
        """Yield ``(field_name, pattern)`` for every defined field."""

        for name in CORE_FIELDS:
            pattern = getattr(self, name)
            if pattern is not None:
                yield name, pattern
        yield from self.extras.items()

    @property
    def field_count(self) -> int:
        return sum(1 for _ in self.fields())


class MatchResult(NamedTuple):
    """Outcome of the multi-format matcher."""

    fields: dict[str, str]
    confidence: float
    format_id: str


# ---------------------------------------------------------------------------
# Rule tables
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class MerchantRule:
    pattern: re.Pattern[str]
    normalized_name: str
    category: str | None = None


@dataclass(frozen=True, slots=True)
class CategoryRule:
    """Prioritized keyword set. Keywords are stored lowercase."""

    keywords: frozenset[str]
    category: str
    priority: int = 50


@dataclass(frozen=True, slots=True)
class RegistrationResult:
    """Outcome of a runtime rule registration.

    ``ok`` is False when the rule was rejected; ``reason`` says why.
    """

    ok: bool
    reason: str | None = None

    @classmethod
    def accepted(cls) -> RegistrationResult:
        return cls(True, None)

    @classmethod
    def rejected(cls, reason: str) -> RegistrationResult:
        return cls(False, reason)


# ---------------------------------------------------------------------------
# Parse output
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RecurrenceResult:
    """Recurrence determination.

    ``period`` is set only when ``is_recurring``; ``confidence`` is set only
    when a determination was made (the heuristic path leaves it unset for
    non-recurring results).
    """

    is_recurring: bool
    period: RecurrencePeriod | None = None
    confidence: float | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"isRecurring": self.is_recurring}
        if self.period is not None:
            out["period"] = self.period
        if self.confidence is not None:
            out["confidence"] = self.confidence
        return out


@dataclass(frozen=True, slots=True)
class ParsedTransaction:
    """A structured record extracted from one notification text."""

    description: str
    amount: Decimal
    currency: str
    merchant: str
    account_masked: str
    date: str
    category: str
    recurrence: RecurrenceResult
    raw_text: str
    bank_format: str = GENERIC_FORMAT

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-friendly wire shape (camelCase keys)."""

        return {
            "description": self.description,
            "amount": float(self.amount),
            "currency": self.currency,
            "merchant": self.merchant,
            "accountMasked": self.account_masked,
            "date": self.date,
            "category": self.category,
            "recurrence": self.recurrence.to_dict(),
            "rawText": self.raw_text,
            "bankFormat": self.bank_format,
        }


class TransactionLike(Protocol):
    """The fields the statistical recurrence detector reads from history."""

    @property
    def merchant(self) -> str: ...

    @property
    def amount(self) -> Decimal: ...

    @property
    def date(self) -> str: ...


__all__ = [
    "CORE_FIELDS",
    "DEFAULT_CATEGORY",
    "DEFAULT_CURRENCY",
    "GENERIC_FORMAT",
    "NO_ACCOUNT",
    "UNKNOWN_MERCHANT",
    "BankId",
    "BankPatternSet",
    "CategoryRule",
    "MatchResult",
    "MerchantRule",
    "ParsedTransaction",
    "RecurrencePeriod",
    "RecurrenceResult",
    "RegistrationResult",
    "TransactionLike",
]
