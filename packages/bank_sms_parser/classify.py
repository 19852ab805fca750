"""Priority-ordered category classification."""

from __future__ import annotations

from collections.abc import Sequence

from .models import DEFAULT_CATEGORY, CategoryRule, MerchantRule


def classify(
    description: str,
    merchant: str,
    *,
    category_rules: Sequence[CategoryRule],
    merchant_rules: Sequence[MerchantRule],
) -> str:
    """Return the category for a description/merchant pair.

    ``category_rules`` must already be in evaluation order (descending
    priority, registration order on ties). The first rule with a keyword
    contained in the lowercase ``"<description> <merchant>"`` haystack wins.
    Otherwise the first categorized merchant rule matching the haystack
    decides, and failing that the result is ``"Other"``.
    """

    haystack = f"{description} {merchant}".lower()

    for rule in category_rules:
        if any(keyword in haystack for keyword in rule.keywords):
            return rule.category

    for merchant_rule in merchant_rules:
        if merchant_rule.category and merchant_rule.pattern.search(haystack):
            return merchant_rule.category

    return DEFAULT_CATEGORY


__all__ = ["classify"]
