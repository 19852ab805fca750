from datetime import date
from decimal import Decimal

import pytest

import bank_sms_parser.api as api
from bank_sms_parser import MAX_BATCH_SIZE, BatchTooLargeError, parse_batch, parse_transaction
from bank_sms_parser.registry import Registry
from bank_sms_parser.validation import HistoryRecord

TODAY = date(2025, 6, 15)

SPOTIFY_SMS = "شراء إنترنت\nبـ 21.99 SAR\nمن Spotify AB P3781C3C72\nمدى 3180*\nحساب 0165*\nفي08-06-25"
NETFLIX_SMS = "اشتراك شهري\nبـ 45.00 SAR\nمن NETFLIX.COM\nفي01-05-25"


def _history(merchant: str, amount: str, *dates: str) -> list[HistoryRecord]:
    return [
        HistoryRecord.model_validate({"merchant": merchant, "amount": amount, "date": d})
        for d in dates
    ]


# ---- Single transaction --------------------------------------------------------


def test_parse_sample_notification_end_to_end(registry):
    tx = parse_transaction(SPOTIFY_SMS, registry=registry, today=TODAY)

    assert tx.description == "شراء إنترنت"
    assert tx.amount == Decimal("21.99")
    assert tx.currency == "SAR"
    assert tx.merchant == "Spotify"
    assert tx.category == "Subscriptions"
    assert tx.account_masked == "3180* / 0165*"
    assert tx.date == "2025-06-08"
    assert tx.recurrence.to_dict() == {"isRecurring": True, "period": "monthly", "confidence": 0.8}
    assert tx.raw_text == SPOTIFY_SMS
    assert tx.bank_format == "generic"


def test_to_dict_wire_shape(registry):
    out = parse_transaction(SPOTIFY_SMS, registry=registry, today=TODAY).to_dict()
    assert out == {
        "description": "شراء إنترنت",
        "amount": 21.99,
        "currency": "SAR",
        "merchant": "Spotify",
        "accountMasked": "3180* / 0165*",
        "date": "2025-06-08",
        "category": "Subscriptions",
        "recurrence": {"isRecurring": True, "period": "monthly", "confidence": 0.8},
        "rawText": SPOTIFY_SMS,
        "bankFormat": "generic",
    }


def test_parse_is_deterministic(registry):
    first = parse_transaction(SPOTIFY_SMS, registry=registry, today=TODAY)
    second = parse_transaction(SPOTIFY_SMS, registry=registry, today=TODAY)
    assert first == second


def test_uses_default_registry_when_none_given():
    tx = parse_transaction(SPOTIFY_SMS, today=TODAY)
    assert tx.merchant == "Spotify"


@pytest.mark.parametrize("raw", ["", "   ", "\n\n", None, 12345, "مرحبا", "hello world"])
def test_parse_never_raises_and_fills_defaults(registry, raw):
    tx = parse_transaction(raw, registry=registry, today=TODAY)

    assert tx.amount == Decimal(0)
    assert tx.currency == "SAR"
    assert tx.account_masked == "N/A"
    assert tx.date == "2025-06-15"
    assert tx.category == "Other"
    assert tx.recurrence.is_recurring is False
    assert tx.merchant == "Unknown Merchant"


def test_description_falls_back_to_first_line():
    reg = Registry()
    assert reg.add_bank_pattern("amount-only", {"amount": r"([\d\.]+)\s*(SAR)"}).ok

    tx = parse_transaction("  Card purchase  \n55 SAR at Noon", registry=reg, today=TODAY)

    assert tx.description == "Card purchase"
    assert tx.amount == Decimal("55")
    assert tx.bank_format == "amount-only"
    # No merchant field, so the "at" indicator supplies it
    assert tx.merchant == "Noon"


def test_amount_followed_by_sentence_period(registry):
    text = SPOTIFY_SMS.replace("بـ 21.99 SAR", "بـ 21.99. SAR")
    tx = parse_transaction(text, registry=registry, today=TODAY)

    assert tx.amount == Decimal("21.99")
    assert tx.currency == "SAR"


def test_runtime_merchant_pattern_is_used_by_later_parses(registry):
    text = "شراء\nبـ 10.00 SAR\nمن ACME STORE 123"
    assert parse_transaction(text, registry=registry, today=TODAY).merchant == "ACME STORE 123"

    assert api.add_merchant_pattern(r"acme", "ACME", "Hardware", registry=registry).ok

    tx = parse_transaction(text, registry=registry, today=TODAY)
    assert tx.merchant == "ACME"
    assert tx.category == "Hardware"


def test_runtime_bank_format_is_matched(registry):
    result = api.add_bank_pattern(
        "examplepay",
        {
            "description": r"^([^\n]+)",
            "amount": r"Paid\s+([\d,\.]+)\s+([A-Z]{3})",
            "merchant": r"Merchant:\s*([^\n]+)",
            "account": r"Wallet\s+(\d+\*+)",
            "date": r"Date:\s*(\d{2}/\d{2}/\d{4})",
        },
        registry=registry,
    )
    assert result.ok

    text = "ExamplePay\nPaid 1,250.50 USD\nMerchant: Jarir\nWallet 9911*\nDate: 03/04/2025"
    tx = parse_transaction(text, registry=registry, today=TODAY)

    assert tx.bank_format == "examplepay"
    assert tx.amount == Decimal("1250.50")
    assert tx.currency == "USD"
    assert tx.merchant == "Jarir"
    assert tx.account_masked == "9911*"
    assert tx.date == "2025-04-03"


# ---- History-aware recurrence --------------------------------------------------


def test_history_series_overrides_keyword_heuristic(registry):
    without = parse_transaction(NETFLIX_SMS, registry=registry, today=TODAY)
    assert without.merchant == "Netflix"
    assert without.date == "2025-05-01"
    assert without.recurrence.confidence == 0.8

    history = _history("Netflix", "45.00", "2025-02-01", "2025-03-01", "2025-04-01")
    with_history = parse_transaction(NETFLIX_SMS, registry=registry, history=history, today=TODAY)

    assert with_history.recurrence.to_dict() == {
        "isRecurring": True,
        "period": "monthly",
        "confidence": 0.9,
    }


def test_history_without_series_keeps_keyword_heuristic(registry):
    history = _history("Netflix", "45.00", "2025-04-01")
    tx = parse_transaction(NETFLIX_SMS, registry=registry, history=history, today=TODAY)
    assert tx.recurrence.confidence == 0.8


# ---- Batch ------------------------------------------------------------------------


def test_batch_rejects_oversized_input_before_parsing(registry, monkeypatch):
    calls: list[str] = []
    monkeypatch.setattr(api, "parse_transaction", lambda *a, **kw: calls.append(a[0]))

    with pytest.raises(BatchTooLargeError):
        parse_batch([SPOTIFY_SMS] * (MAX_BATCH_SIZE + 1), registry=registry)
    assert calls == []


def test_batch_at_the_limit_is_accepted(registry):
    result = parse_batch([SPOTIFY_SMS] * MAX_BATCH_SIZE, registry=registry, today=TODAY)
    assert (result.total, result.successful, result.failed) == (50, 50, 0)


def test_batch_reports_non_string_items_individually(registry):
    result = parse_batch([SPOTIFY_SMS, 42, None, NETFLIX_SMS], registry=registry, today=TODAY)

    assert [r.success for r in result.results] == [True, False, False, True]
    assert result.results[1].original == 42
    assert "string" in result.results[1].error
    assert result.results[3].data.merchant == "Netflix"

    out = result.to_dict()
    assert out["summary"] == {"total": 4, "successful": 2, "failed": 2}
    assert "data" not in out["results"][1]
    assert out["results"][0]["data"]["merchant"] == "Spotify"


def test_batch_isolates_unexpected_failures(registry, monkeypatch):
    real_parse = api.parse_transaction

    def _flaky(raw_text, **kwargs):
        if raw_text == "boom":
            raise RuntimeError("internal failure")
        return real_parse(raw_text, **kwargs)

    monkeypatch.setattr(api, "parse_transaction", _flaky)

    result = parse_batch([SPOTIFY_SMS, "boom", NETFLIX_SMS], registry=registry, today=TODAY)

    assert [r.success for r in result.results] == [True, False, True]
    assert result.results[1].error == "internal failure"
    assert result.failed == 1


def test_empty_batch(registry):
    result = parse_batch([], registry=registry)
    assert result.to_dict() == {"results": [], "summary": {"total": 0, "successful": 0, "failed": 0}}
