"""Built-in merchant, category and recurrence keyword tables.

Merchant rules are applied in list order (first match wins). Category rules
are evaluated by descending priority; equal priorities keep list order.
Both tables can be extended at runtime through the registry.
"""

from __future__ import annotations

# (pattern, normalized name, category); patterns compile case-insensitively
MERCHANT_RULES: tuple[tuple[str, str, str | None], ...] = (
    (r"spotify\s*ab", "Spotify", "Subscriptions"),
    (r"netflix", "Netflix", "Subscriptions"),
    (r"amazon.*prime", "Amazon Prime", "Subscriptions"),
    (r"starbucks", "Starbucks", "Food & Dining"),
    (r"carrefour|كارفور", "Carrefour", "Groceries"),
    (r"uber", "Uber", "Transportation"),
    (r"careem|كريم", "Careem", "Transportation"),
)

# (keywords, category, priority)
CATEGORY_RULES: tuple[tuple[tuple[str, ...], str, int], ...] = (
    (
        (
            "spotify", "netflix", "amazon prime", "youtube", "apple music",
            "shahid", "stc tv", "موسيقى", "اشتراك",
        ),
        "Subscriptions",
        90,
    ),
    (
        (
            "مطعم", "كافيه", "مقهى", "بيتزا", "برجر", "كنتاكي", "ماكدونالدز",
            "pizza", "burger", "restaurant", "cafe", "kfc", "mcdonalds",
            "starbucks", "dunkin",
        ),
        "Food & Dining",
        85,
    ),
    (
        (
            "كارفور", "هايبر", "سوبر ماركت", "بقالة", "تموينات", "carrefour",
            "lulu", "panda", "danube", "extra",
        ),
        "Groceries",
        85,
    ),
    (
        (
            "بنزين", "وقود", "تاكسي", "أوبر", "كريم", "مواقف", "رسوم طريق",
            "uber", "careem", "taxi", "fuel", "gas", "petrol", "aramco",
        ),
        "Transportation",
        80,
    ),
    (
        (
            "تسوق", "متجر", "مول", "ملابس", "أزياء", "shopping", "mall",
            "store", "fashion", "zara", "h&m", "adidas", "nike",
        ),
        "Shopping",
        75,
    ),
    (
        (
            "صيدلية", "مستشفى", "عيادة", "طبيب", "دواء", "pharmacy",
            "hospital", "clinic", "medical", "nahdi", "aldawaa",
        ),
        "Healthcare",
        80,
    ),
    (
        (
            "كهرباء", "مياه", "إنترنت", "جوال", "اتصالات", "موبايلي", "زين",
            "electricity", "water", "internet", "mobile", "stc", "mobily", "zain",
        ),
        "Utilities",
        85,
    ),
    (
        (
            "سينما", "ألعاب", "ملاهي", "ترفيه", "cinema", "games",
            "entertainment", "vox", "muvi",
        ),
        "Entertainment",
        70,
    ),
    (
        ("صراف", "سحب نقدي", "atm", "cash withdrawal", "رسوم مصرفية", "bank fee"),
        "Banking & ATM",
        95,
    ),
)

# Heuristic recurrence keywords (matched as lowercase substrings)
SUBSCRIPTION_KEYWORDS: tuple[str, ...] = ("spotify", "netflix", "prime", "subscription", "اشتراك")
UTILITY_KEYWORDS: tuple[str, ...] = (
    "كهرباء",
    "مياه",
    "إنترنت",
    "جوال",
    "electricity",
    "water",
    "internet",
    "mobile",
)


__all__ = [
    "CATEGORY_RULES",
    "MERCHANT_RULES",
    "SUBSCRIPTION_KEYWORDS",
    "UTILITY_KEYWORDS",
]
