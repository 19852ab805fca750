import json
import os
from pathlib import Path

import pytest
from typer.testing import CliRunner

from bank_sms_parser.cli import app

SPOTIFY_SMS = "شراء إنترنت\nبـ 21.99 SAR\nمن Spotify AB P3781C3C72\nمدى 3180*\nحساب 0165*\nفي08-06-25"
NETFLIX_SMS = "اشتراك شهري\nبـ 45.00 SAR\nمن NETFLIX.COM\nفي01-05-25"

runner = CliRunner()


@pytest.fixture(autouse=True)
def _run_in_tmp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    # Keep any developer .env in the repo root out of these tests
    monkeypatch.chdir(tmp_path)


def _write_json(path: Path, data) -> Path:
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return path


def test_parse_text_argument():
    result = runner.invoke(app, ["parse", SPOTIFY_SMS])
    assert result.exit_code == 0, result.output
    out = json.loads(result.stdout)
    assert out["merchant"] == "Spotify"
    assert out["category"] == "Subscriptions"
    assert out["amount"] == 21.99
    assert out["date"] == "2025-06-08"


def test_parse_from_stdin_and_file(tmp_path):
    from_stdin = runner.invoke(app, ["parse"], input=SPOTIFY_SMS)
    assert from_stdin.exit_code == 0, from_stdin.output

    sms = tmp_path / "sms.txt"
    sms.write_text(SPOTIFY_SMS, encoding="utf-8")
    from_file = runner.invoke(app, ["parse", "--file", str(sms)])
    assert from_file.exit_code == 0, from_file.output

    assert json.loads(from_stdin.stdout) == json.loads(from_file.stdout)


def test_parse_with_history(tmp_path):
    history = _write_json(
        tmp_path / "history.json",
        [{"merchant": "Netflix", "amount": 45, "date": d} for d in ("2025-02-01", "2025-03-01", "2025-04-01")],
    )
    result = runner.invoke(app, ["parse", NETFLIX_SMS, "--history", str(history)])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["recurrence"] == {
        "isRecurring": True,
        "period": "monthly",
        "confidence": 0.9,
    }


def test_parse_with_rules_file(tmp_path):
    # Built-in rules come first, so target a merchant they do not cover
    text = "شراء\nبـ 10.00 SAR\nمن Anghami Plus"
    rules = _write_json(
        tmp_path / "rules.json",
        {"merchants": [{"pattern": "anghami", "normalizedName": "Anghami", "category": "Music"}]},
    )
    result = runner.invoke(app, ["parse", text, "--rules-file", str(rules)])
    assert result.exit_code == 0, result.output
    out = json.loads(result.stdout)
    assert out["merchant"] == "Anghami"
    assert out["category"] == "Music"


def test_parse_error_paths(tmp_path):
    missing = runner.invoke(app, ["parse", "--file", str(tmp_path / "nope.txt")])
    assert missing.exit_code == 1
    assert "Error:" in missing.output

    bad_history = tmp_path / "history.json"
    bad_history.write_text('{"merchant": "x"}', encoding="utf-8")
    result = runner.invoke(app, ["parse", SPOTIFY_SMS, "--history", str(bad_history)])
    assert result.exit_code == 1
    assert "Invalid history file" in result.output

    bad_rules = tmp_path / "rules.json"
    bad_rules.write_text('{"categories": "nope"}', encoding="utf-8")
    result = runner.invoke(app, ["parse", SPOTIFY_SMS, "--rules-file", str(bad_rules)])
    assert result.exit_code == 1
    assert "Invalid rules file" in result.output


def test_parse_batch(tmp_path):
    batch = _write_json(tmp_path / "batch.json", {"transactions": [SPOTIFY_SMS, 7, NETFLIX_SMS]})
    result = runner.invoke(app, ["parse-batch", "--file", str(batch)])
    assert result.exit_code == 0, result.output
    out = json.loads(result.stdout)
    assert out["summary"] == {"total": 3, "successful": 2, "failed": 1}
    assert out["results"][1]["success"] is False


def test_parse_batch_too_large(tmp_path):
    batch = _write_json(tmp_path / "batch.json", [SPOTIFY_SMS] * 51)
    result = runner.invoke(app, ["parse-batch", "--file", str(batch)])
    assert result.exit_code == 1
    assert "exceeds the maximum of 50" in result.output


def test_recurrence_command(tmp_path):
    sms = tmp_path / "sms.txt"
    sms.write_text(NETFLIX_SMS, encoding="utf-8")
    history = _write_json(
        tmp_path / "history.json",
        [{"merchant": "Netflix", "amount": "45.00", "date": d} for d in ("2025-04-01", "2025-04-08", "2025-04-15")],
    )
    result = runner.invoke(app, ["recurrence", "--file", str(sms), "--history", str(history)])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {
        "merchant": "Netflix",
        "amount": 45.0,
        "isRecurring": True,
        "period": "weekly",
        "confidence": 0.8,
    }


def test_introspection_commands():
    cats = runner.invoke(app, ["categories"])
    assert cats.exit_code == 0, cats.output
    out = json.loads(cats.stdout)
    assert "Subscriptions" in out["categories"]
    assert out["rules"][0]["category"] == "Banking & ATM"

    merchants = runner.invoke(app, ["merchants"])
    assert json.loads(merchants.stdout)[0]["normalizedName"] == "Spotify"

    banks = runner.invoke(app, ["banks"])
    listed = json.loads(banks.stdout)
    assert listed[0] == {
        "name": "generic",
        "bankId": "generic",
        "fields": ["description", "amount", "merchant", "card", "account", "date"],
    }
    assert len(listed) == 25


def test_rules_file_from_environment(tmp_path, monkeypatch):
    rules = _write_json(
        tmp_path / "rules.json",
        {"categories": [{"keywords": ["كتب"], "category": "Books", "priority": 60}]},
    )
    monkeypatch.setenv("BANK_SMS_PARSER_RULES_FILE", str(rules))

    result = runner.invoke(app, ["categories"])
    assert result.exit_code == 0, result.output
    assert "Books" in json.loads(result.stdout)["categories"]


def test_rules_file_from_dotenv(tmp_path):
    rules = _write_json(
        tmp_path / "rules.json",
        {"categories": [{"keywords": ["كتب"], "category": "Books", "priority": 60}]},
    )
    (tmp_path / ".env").write_text(f"BANK_SMS_PARSER_RULES_FILE={rules}\n", encoding="utf-8")

    try:
        result = runner.invoke(app, ["categories"])
    finally:
        # load_dotenv writes straight into os.environ
        os.environ.pop("BANK_SMS_PARSER_RULES_FILE", None)

    assert result.exit_code == 0, result.output
    assert "Books" in json.loads(result.stdout)["categories"]


def test_missing_rules_file_from_environment_fails(tmp_path, monkeypatch):
    monkeypatch.setenv("BANK_SMS_PARSER_RULES_FILE", str(tmp_path / "missing.json"))
    result = runner.invoke(app, ["categories"])
    assert result.exit_code == 1
    assert "Rules file not found" in result.output
