"""Multi-format matcher.

Every registered format is tried against the whole text. Each field pattern
searches the full text on its own, so field order in a notification does not
matter. A format's confidence is ``matched fields / defined fields``, where a
matching ``amount`` pattern counts twice (value and currency).

The best format is the first one seen with the highest confidence: a later
format must score strictly higher to replace the incumbent. When nothing
scores above zero the result is an empty field map under ``"generic"``.
"""

from __future__ import annotations

from .logging_setup import get_logger
from .models import GENERIC_FORMAT, BankPatternSet, MatchResult
from .registry import Registry

_logger = get_logger("bank_sms_parser.matcher")


def score_pattern_set(text: str, pattern_set: BankPatternSet) -> tuple[dict[str, str], float]:
    """Apply one format to ``text`` and return ``(fields, confidence)``."""

    fields: dict[str, str] = {}
    matched = 0
    total = 0
    for name, pattern in pattern_set.fields():
        total += 1
        m = pattern.search(text)
        if m is None:
            continue
        if name == "amount":
            fields["amount"] = (m.group(1) or "").strip()
            fields["currency"] = (m.group(2) or "").strip()
            matched += 2
        else:
            fields[name] = (m.group(1) or "").strip()
            matched += 1

    if total == 0:
        return {}, 0.0
    return fields, matched / total


def match(text: str, registry: Registry) -> MatchResult:
    """Select the best-scoring registered format for ``text``."""

    best_fields: dict[str, str] = {}
    best_confidence = 0.0
    best_format = GENERIC_FORMAT

    for pattern_set in registry.bank_pattern_sets():
        fields, confidence = score_pattern_set(text, pattern_set)
        _logger.debug("format %s scored %.3f", pattern_set.name, confidence)
        if confidence > best_confidence:
            best_fields = fields
            best_confidence = confidence
            best_format = pattern_set.name

    _logger.debug("selected format %s (confidence %.3f)", best_format, best_confidence)
    return MatchResult(best_fields, best_confidence, best_format)


__all__ = ["match", "score_pattern_set"]
