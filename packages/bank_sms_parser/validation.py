"""Validation of untrusted payloads before they reach the parsing core.

Rule registrations, history records and batch requests arriving from a CLI
file or a service request body are shaped and checked with Pydantic here.
The core itself assumes well-formed inputs.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable, Mapping
from decimal import Decimal
from os import PathLike
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import RegistrationResult
from .registry import DEFAULT_PRIORITY, Registry

# ---------------------------------------------------------------------------
# Rule registrations
# ---------------------------------------------------------------------------


class CategoryRuleIn(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    keywords: list[str] = Field(min_length=1)
    category: str = Field(min_length=1)
    priority: int = Field(default=DEFAULT_PRIORITY, ge=0)

    @field_validator("keywords")
    @classmethod
    def _keywords_non_blank(cls, v: list[str]) -> list[str]:
        cleaned = [k.strip() for k in v if k.strip()]
        if not cleaned:
            raise ValueError("keywords must contain at least one non-empty string")
        return cleaned


class MerchantPatternIn(BaseModel):
    """Merchant rule payload; ``pattern`` is compiled case-insensitively."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True, populate_by_name=True)

    pattern: str = Field(min_length=1)
    normalized_name: str = Field(min_length=1, alias="normalizedName")
    category: str | None = None

    @field_validator("pattern")
    @classmethod
    def _pattern_compiles(cls, v: str) -> str:
        try:
            re.compile(v, re.IGNORECASE)
        except re.error as exc:
            raise ValueError(f"invalid regular expression: {exc}") from exc
        return v

    @field_validator("category")
    @classmethod
    def _blank_category_is_none(cls, v: str | None) -> str | None:
        return v or None


class RulesFile(BaseModel):
    """Extra rules applied on top of the built-in tables."""

    model_config = ConfigDict(extra="forbid")

    categories: list[CategoryRuleIn] = Field(default_factory=list)
    merchants: list[MerchantPatternIn] = Field(default_factory=list)
    banks: dict[str, dict[str, str]] = Field(default_factory=dict)


def load_rules_file(path: str | PathLike[str]) -> RulesFile:
    """Read and validate a JSON rules file.

    Raises ``OSError`` on read failures, ``ValueError`` on malformed JSON and
    ``pydantic.ValidationError`` on shape problems.
    """

    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"rules file is not valid JSON: {exc}") from exc
    return RulesFile.model_validate(data)


def apply_rules(rules: RulesFile, registry: Registry) -> list[tuple[str, RegistrationResult]]:
    """Register every entry of ``rules``; returns ``(label, result)`` pairs."""

    outcomes: list[tuple[str, RegistrationResult]] = []
    for cat in rules.categories:
        res = registry.add_category_rule(cat.keywords, cat.category, cat.priority)
        outcomes.append((f"category:{cat.category}", res))
    for mer in rules.merchants:
        res = registry.add_merchant_pattern(mer.pattern, mer.normalized_name, mer.category)
        outcomes.append((f"merchant:{mer.normalized_name}", res))
    for name, patterns in rules.banks.items():
        res = registry.add_bank_pattern(name, patterns)
        outcomes.append((f"bank:{name}", res))
    return outcomes


# ---------------------------------------------------------------------------
# History records and batch requests
# ---------------------------------------------------------------------------


class HistoryRecord(BaseModel):
    """A previously parsed transaction as seen by the recurrence detector.

    Accepts full parsed-transaction dicts; unrelated keys are ignored.
    """

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True, frozen=True)

    merchant: str
    amount: Decimal = Field(ge=0)
    date: str


def load_history(data: Any) -> list[HistoryRecord]:
    """Validate a JSON array of history records."""

    if not isinstance(data, list):
        raise ValueError("history must be a JSON array of transactions")
    return [HistoryRecord.model_validate(item) for item in data]


class BatchRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    transactions: list[Any]


def batch_from_json(data: Any) -> list[Any]:
    """Accept either a bare JSON array or ``{"transactions": [...]}``."""

    if isinstance(data, list):
        return data
    if isinstance(data, Mapping):
        return BatchRequest.model_validate(data).transactions
    raise ValueError("batch input must be a JSON array or an object with 'transactions'")


def summarize_outcomes(outcomes: Iterable[tuple[str, RegistrationResult]]) -> list[str]:
    """Human-readable lines for rejected registrations."""

    return [f"{label}: {res.reason}" for label, res in outcomes if not res.ok]


__all__ = [
    "BatchRequest",
    "CategoryRuleIn",
    "HistoryRecord",
    "MerchantPatternIn",
    "RulesFile",
    "apply_rules",
    "batch_from_json",
    "load_history",
    "load_rules_file",
    "summarize_outcomes",
]
