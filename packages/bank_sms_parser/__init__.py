"""Public interface for the ``bank_sms_parser`` package.

Extracts structured transactions from Arabic/English bank and wallet
notification texts. This module only re-exports the stable import surface.
"""

from .api import (
    MAX_BATCH_SIZE,
    BatchItemResult,
    BatchResult,
    BatchTooLargeError,
    add_bank_pattern,
    add_category_rule,
    add_merchant_pattern,
    classify_category,
    detect_recurrence,
    detect_recurrence_with_history,
    list_categories,
    list_merchant_patterns,
    parse_batch,
    parse_transaction,
)
from .models import (
    BankId,
    BankPatternSet,
    CategoryRule,
    MatchResult,
    MerchantRule,
    ParsedTransaction,
    RecurrenceResult,
    RegistrationResult,
)
from .registry import Registry, default_registry

__all__ = [
    # API
    "parse_transaction",
    "parse_batch",
    "classify_category",
    "detect_recurrence",
    "detect_recurrence_with_history",
    "add_category_rule",
    "add_merchant_pattern",
    "add_bank_pattern",
    "list_categories",
    "list_merchant_patterns",
    "MAX_BATCH_SIZE",
    "BatchItemResult",
    "BatchResult",
    "BatchTooLargeError",
    # Registry
    "Registry",
    "default_registry",
    # Models / types
    "BankId",
    "BankPatternSet",
    "CategoryRule",
    "MatchResult",
    "MerchantRule",
    "ParsedTransaction",
    "RecurrenceResult",
    "RegistrationResult",
]
