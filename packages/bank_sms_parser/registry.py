"""Rule-table registry shared by the parsing operations.

A :class:`Registry` owns the three tables the parser consults:

- bank formats (name -> :class:`~bank_sms_parser.models.BankPatternSet`),
- merchant rules (ordered, first match wins),
- category rules (evaluated by descending priority, stable on ties).

Each table has its own readers-writer lock. Parses read immutable snapshots;
``add_*`` calls take the write lock for the one table they append to.
Registration never raises on bad input: it returns a
:class:`~bank_sms_parser.models.RegistrationResult` naming the problem.
"""

from __future__ import annotations

import re
import threading
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from .bank_formats import BANK_FORMATS
from .logging_setup import get_logger
from .models import (
    CORE_FIELDS,
    BankPatternSet,
    CategoryRule,
    MerchantRule,
    RegistrationResult,
)
from .rules import CATEGORY_RULES, MERCHANT_RULES
from .rwlock import RWLock

DEFAULT_PRIORITY = 50

# Output keys the matcher derives from another field
RESERVED_FIELDS = frozenset({"currency"})

type PatternLike = str | re.Pattern[str]

_logger = get_logger("bank_sms_parser.registry")


# ---------------------------------------------------------------------------
# Pattern compilation/validation
# ---------------------------------------------------------------------------


def _compile(source: PatternLike, *, flags: int = 0) -> re.Pattern[str]:
    if isinstance(source, re.Pattern):
        return source
    if not isinstance(source, str):
        raise ValueError(f"expected a regular expression string, got {type(source).__name__}")
    if not source.strip():
        raise ValueError("pattern is empty")
    try:
        return re.compile(source, flags)
    except re.error as exc:
        raise ValueError(f"invalid regular expression {source!r}: {exc}") from exc


def _check_groups(field_name: str, pattern: re.Pattern[str]) -> None:
    expected = 2 if field_name == "amount" else 1
    if pattern.groups != expected:
        raise ValueError(
            f"field {field_name!r} must have exactly {expected} capturing group"
            f"{'s' if expected > 1 else ''}, got {pattern.groups}"
        )


def build_pattern_set(name: str, patterns: Mapping[str, PatternLike]) -> BankPatternSet:
    """Compile and validate a field->pattern mapping into a ``BankPatternSet``.

    Raises ``ValueError`` describing the first problem found.
    """

    if not isinstance(name, str) or not name.strip():
        raise ValueError("bank format name is empty")
    if not patterns:
        raise ValueError(f"bank format {name!r} defines no fields")

    core: dict[str, re.Pattern[str]] = {}
    extras: dict[str, re.Pattern[str]] = {}
    for field_name, source in patterns.items():
        if not isinstance(field_name, str) or not field_name.strip():
            raise ValueError(f"bank format {name!r} has an empty field name")
        if field_name in RESERVED_FIELDS:
            raise ValueError(
                f"field {field_name!r} is filled from the amount pattern and cannot be defined"
            )
        compiled = _compile(source)
        _check_groups(field_name, compiled)
        if field_name in CORE_FIELDS:
            core[field_name] = compiled
        else:
            extras[field_name] = compiled

    return BankPatternSet(name=name.strip(), extras=MappingProxyType(extras), **core)


def _fields_of(pattern_set: BankPatternSet) -> dict[str, Any]:
    """Copy the field map out of a caller-built set."""

    try:
        return dict(pattern_set.fields())
    except (AttributeError, TypeError) as exc:
        raise ValueError(f"malformed bank pattern set: {exc}") from exc


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class Registry:
    """Holds bank formats, merchant rules and category rules."""

    def __init__(self) -> None:
        self._banks: dict[str, BankPatternSet] = {}
        self._merchants: list[MerchantRule] = []
        self._categories: list[CategoryRule] = []
        self._banks_lock = RWLock()
        self._merchants_lock = RWLock()
        self._categories_lock = RWLock()
        # Priority-sorted snapshot, rebuilt lazily after a write
        self._sorted_categories: tuple[CategoryRule, ...] | None = None

    @classmethod
    def with_defaults(cls) -> Registry:
        """Return a registry preloaded with the built-in tables."""

        reg = cls()
        for name, patterns in BANK_FORMATS.items():
            reg._banks[name] = build_pattern_set(name, patterns)
        for pattern, normalized_name, category in MERCHANT_RULES:
            reg._merchants.append(
                MerchantRule(re.compile(pattern, re.IGNORECASE), normalized_name, category)
            )
        for keywords, category, priority in CATEGORY_RULES:
            reg._categories.append(
                CategoryRule(frozenset(k.lower() for k in keywords), category, priority)
            )
        return reg

    # ---- Snapshots (read side) ---------------------------------------------

    def bank_pattern_sets(self) -> tuple[BankPatternSet, ...]:
        """Registered formats in registration order."""

        with self._banks_lock.read_locked():
            return tuple(self._banks.values())

    def bank_format_names(self) -> list[str]:
        with self._banks_lock.read_locked():
            return list(self._banks)

    def merchant_rules(self) -> tuple[MerchantRule, ...]:
        with self._merchants_lock.read_locked():
            return tuple(self._merchants)

    def category_rules(self) -> tuple[CategoryRule, ...]:
        """Category rules in evaluation order (descending priority, stable)."""

        with self._categories_lock.read_locked():
            cached = self._sorted_categories
            if cached is not None:
                return cached
            # sorted() is stable, so equal priorities keep registration order.
            ordered = tuple(sorted(self._categories, key=lambda r: r.priority, reverse=True))
            # Concurrent readers may each build the same tuple; no writer can
            # interleave while the read lock is held.
            self._sorted_categories = ordered
            return ordered

    def list_categories(self) -> list[str]:
        """Sorted unique category labels reachable through the rule tables."""

        labels = {r.category for r in self.category_rules()}
        labels.update(r.category for r in self.merchant_rules() if r.category)
        return sorted(labels)

    def category_rule_summaries(self) -> list[dict[str, Any]]:
        return [
            {"category": r.category, "priority": r.priority, "keywordCount": len(r.keywords)}
            for r in self.category_rules()
        ]

    def merchant_pattern_summaries(self) -> list[dict[str, Any]]:
        return [
            {
                "normalizedName": r.normalized_name,
                "category": r.category,
                "pattern": r.pattern.pattern,
            }
            for r in self.merchant_rules()
        ]

    # ---- Registration (write side) -----------------------------------------

    def add_bank_pattern(
        self, name: str, patterns: BankPatternSet | Mapping[str, PatternLike]
    ) -> RegistrationResult:
        """Register (or replace) a bank format.

        ``patterns`` is either a ready ``BankPatternSet`` or a mapping of field
        name to pattern; string patterns are compiled here, so an invalid
        expression is rejected now rather than at parse time.
        """

        try:
            if isinstance(patterns, BankPatternSet):
                # Rebuilt so the registered set shares nothing with the caller's
                pattern_set = build_pattern_set(name, _fields_of(patterns))
            elif isinstance(patterns, Mapping):
                pattern_set = build_pattern_set(name, patterns)
            else:
                raise ValueError("patterns must be a BankPatternSet or a mapping")
        except ValueError as exc:
            _logger.warning("Rejected bank format %r: %s", name, exc)
            return RegistrationResult.rejected(str(exc))

        with self._banks_lock.write_locked():
            replaced = pattern_set.name in self._banks
            self._banks[pattern_set.name] = pattern_set
        _logger.info(
            "%s bank format %r (%d fields)",
            "Replaced" if replaced else "Registered",
            pattern_set.name,
            pattern_set.field_count,
        )
        return RegistrationResult.accepted()

    def add_merchant_pattern(
        self,
        pattern: PatternLike,
        normalized_name: str,
        category: str | None = None,
    ) -> RegistrationResult:
        """Append a merchant rule. String patterns compile case-insensitively."""

        try:
            if not isinstance(normalized_name, str) or not normalized_name.strip():
                raise ValueError("normalized merchant name is empty")
            if category is not None and (not isinstance(category, str) or not category.strip()):
                raise ValueError("category must be a non-empty string when given")
            compiled = _compile(pattern, flags=re.IGNORECASE)
        except ValueError as exc:
            _logger.warning("Rejected merchant pattern %r: %s", pattern, exc)
            return RegistrationResult.rejected(str(exc))

        rule = MerchantRule(
            compiled, normalized_name.strip(), category.strip() if category else None
        )
        with self._merchants_lock.write_locked():
            self._merchants.append(rule)
        _logger.info("Registered merchant pattern %r -> %s", compiled.pattern, rule.normalized_name)
        return RegistrationResult.accepted()

    def add_category_rule(
        self,
        keywords: Iterable[str],
        category: str,
        priority: int = DEFAULT_PRIORITY,
    ) -> RegistrationResult:
        """Append a category rule; keywords are trimmed and lowercased."""

        try:
            if isinstance(keywords, str):
                raise ValueError("keywords must be a collection of strings, not a string")
            cleaned = frozenset(
                k.strip().lower() for k in keywords if isinstance(k, str) and k.strip()
            )
            if not cleaned:
                raise ValueError("at least one non-empty keyword is required")
            if not isinstance(category, str) or not category.strip():
                raise ValueError("category is empty")
            if isinstance(priority, bool) or not isinstance(priority, int) or priority < 0:
                raise ValueError("priority must be a non-negative integer")
        except (TypeError, ValueError) as exc:
            _logger.warning("Rejected category rule for %r: %s", category, exc)
            return RegistrationResult.rejected(str(exc))

        rule = CategoryRule(cleaned, category.strip(), priority)
        with self._categories_lock.write_locked():
            self._categories.append(rule)
            self._sorted_categories = None
        _logger.info(
            "Registered category rule %s (priority %d, %d keywords)",
            rule.category,
            rule.priority,
            len(rule.keywords),
        )
        return RegistrationResult.accepted()


# ---------------------------------------------------------------------------
# Process-wide default
# ---------------------------------------------------------------------------

_DEFAULT: Registry | None = None
_DEFAULT_GUARD = threading.Lock()


def default_registry() -> Registry:
    """Return the lazily created process-wide registry (built-in tables)."""

    global _DEFAULT
    if _DEFAULT is None:
        with _DEFAULT_GUARD:
            if _DEFAULT is None:
                _DEFAULT = Registry.with_defaults()
    return _DEFAULT


def reset_default_registry() -> None:
    """Drop the process-wide registry so the next call rebuilds it."""

    global _DEFAULT
    with _DEFAULT_GUARD:
        _DEFAULT = None


__all__ = [
    "DEFAULT_PRIORITY",
    "PatternLike",
    "Registry",
    "build_pattern_set",
    "default_registry",
    "reset_default_registry",
]
