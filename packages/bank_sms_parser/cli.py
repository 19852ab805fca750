"""CLI for the ``bank_sms_parser`` package.

Command handlers (``cmd_*``) return an integer exit status and print JSON to
stdout; errors go to stderr. The Typer app wraps them. Environment variables
are loaded from a local ``.env`` with ``python-dotenv`` before any command
runs, and ``BANK_SMS_PARSER_RULES_FILE`` (when set) extends the default
registry with extra rules.
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Annotated, Any

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from typer.models import ArgumentInfo, OptionInfo

from .api import (
    BatchTooLargeError,
    detect_recurrence_with_history,
    parse_batch,
    parse_transaction,
)
from .logging_setup import configure_logging, get_logger
from .registry import Registry, default_registry
from .validation import (
    apply_rules,
    batch_from_json,
    load_history,
    load_rules_file,
    summarize_outcomes,
)

_RULES_ENV = "BANK_SMS_PARSER_RULES_FILE"

_logger = get_logger("bank_sms_parser.cli")


# ---- Small helpers ------------------------------------------------------------


def _emit(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _error(msg: str) -> int:
    print(f"Error: {msg}", file=sys.stderr)
    return 1


def _read_json(path: Path) -> Any:
    with path.open(encoding="utf-8") as f:
        return json.load(f)


def _read_text(text: str | None, file: Path | None) -> str:
    if file is not None:
        return file.read_text(encoding="utf-8")
    if text is not None:
        return text
    return sys.stdin.read()


def _apply_rules_path(path: Path, registry: Registry) -> int:
    """Load a rules file into ``registry``; returns an exit status."""

    try:
        rules = load_rules_file(path)
    except FileNotFoundError:
        return _error(f"Rules file not found: {path}")
    except (OSError, ValueError, ValidationError) as e:
        return _error(f"Invalid rules file '{path}': {e}")

    rejected = summarize_outcomes(apply_rules(rules, registry))
    for line in rejected:
        print(f"Warning: rejected rule {line}", file=sys.stderr)
    return 0


# ---- Command handlers -------------------------------------------------------


def cmd_parse(
    text: str | None = None,
    *,
    file: Path | None = None,
    history: Path | None = None,
    rules_file: Path | None = None,
    registry: Registry | None = None,
) -> int:
    """Parse one notification and print the JSON record."""

    reg = registry or default_registry()
    if rules_file is not None:
        status = _apply_rules_path(rules_file, reg)
        if status:
            return status

    try:
        raw = _read_text(text, file)
    except FileNotFoundError:
        return _error(f"File not found: {file}")
    except (OSError, UnicodeDecodeError) as e:
        return _error(f"Failed to read input: {e}")

    records = None
    if history is not None:
        try:
            records = load_history(_read_json(history))
        except FileNotFoundError:
            return _error(f"History file not found: {history}")
        except (OSError, ValueError) as e:
            return _error(f"Invalid history file '{history}': {e}")

    parsed = parse_transaction(raw, registry=reg, history=records)
    _emit(parsed.to_dict())
    return 0


def cmd_parse_batch(file: Path, *, registry: Registry | None = None) -> int:
    """Parse a JSON batch and print per-item results with a summary."""

    try:
        items = batch_from_json(_read_json(file))
    except FileNotFoundError:
        return _error(f"File not found: {file}")
    except (OSError, ValueError) as e:
        return _error(f"Invalid batch file '{file}': {e}")

    try:
        result = parse_batch(items, registry=registry)
    except BatchTooLargeError as e:
        return _error(str(e))

    _emit(result.to_dict())
    return 0


def cmd_recurrence(file: Path, history: Path, *, registry: Registry | None = None) -> int:
    """Run only the statistical recurrence detector for one notification."""

    try:
        raw = file.read_text(encoding="utf-8")
        records = load_history(_read_json(history))
    except FileNotFoundError as e:
        return _error(f"File not found: {e.filename}")
    except (OSError, ValueError) as e:
        return _error(str(e))

    current = parse_transaction(raw, registry=registry)
    result = detect_recurrence_with_history(current, records)
    _emit({"merchant": current.merchant, "amount": float(current.amount), **result.to_dict()})
    return 0


def cmd_categories(*, registry: Registry | None = None) -> int:
    reg = registry or default_registry()
    _emit({"categories": reg.list_categories(), "rules": reg.category_rule_summaries()})
    return 0


def cmd_merchants(*, registry: Registry | None = None) -> int:
    reg = registry or default_registry()
    _emit(reg.merchant_pattern_summaries())
    return 0


def cmd_banks(*, registry: Registry | None = None) -> int:
    reg = registry or default_registry()
    _emit(
        [
            {"name": ps.name, "bankId": ps.bank_id.value, "fields": [n for n, _ in ps.fields()]}
            for ps in reg.bank_pattern_sets()
        ]
    )
    return 0


# ---- Typer-based console interface -----------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Extract structured transactions from Saudi bank/wallet notification texts. "
        "Loads BANK_SMS_PARSER_* settings from a local .env before running."
    ),
)

# Module-level option objects to satisfy ruff B008 (no calls in parameter
# defaults).
TEXT_ARGUMENT: ArgumentInfo = typer.Argument(
    None, help="Notification text (read from stdin when omitted)."
)
FILE_OPTION: OptionInfo = typer.Option(
    None, "--file", help="Read the notification text from this file.", dir_okay=False
)
HISTORY_OPTION: OptionInfo = typer.Option(
    None,
    "--history",
    help="JSON array of earlier transactions for statistical recurrence detection.",
    dir_okay=False,
)
RULES_FILE_OPTION: OptionInfo = typer.Option(
    None,
    "--rules-file",
    help="JSON file with extra category/merchant/bank rules.",
    dir_okay=False,
)
REQUIRED_FILE_OPTION: OptionInfo = typer.Option(
    ...,  # required
    "--file",
    help="Input file (notification text, or a JSON array for parse-batch).",
    dir_okay=False,
    exists=False,  # the handler reports missing files
)
REQUIRED_HISTORY_OPTION: OptionInfo = typer.Option(
    ...,  # required
    "--history",
    help="JSON array of earlier transactions.",
    dir_okay=False,
    exists=False,
)


@app.command("parse")
def parse_cmd(
    text: str | None = TEXT_ARGUMENT,
    file: Path | None = FILE_OPTION,
    history: Path | None = HISTORY_OPTION,
    rules_file: Path | None = RULES_FILE_OPTION,
) -> None:
    """Parse a single notification."""

    raise typer.Exit(cmd_parse(text, file=file, history=history, rules_file=rules_file))


@app.command("parse-batch")
def parse_batch_cmd(file: Annotated[Path, REQUIRED_FILE_OPTION]) -> None:
    """Parse up to 50 notifications; each item succeeds or fails on its own."""

    raise typer.Exit(cmd_parse_batch(file))


@app.command("recurrence")
def recurrence_cmd(
    file: Annotated[Path, REQUIRED_FILE_OPTION],
    history: Annotated[Path, REQUIRED_HISTORY_OPTION],
) -> None:
    """Detect a recurring series for a notification from its history."""

    raise typer.Exit(cmd_recurrence(file, history))


@app.command("categories")
def categories_cmd() -> None:
    """List categories and category rules in evaluation order."""

    raise typer.Exit(cmd_categories())


@app.command("merchants")
def merchants_cmd() -> None:
    """List merchant normalization patterns."""

    raise typer.Exit(cmd_merchants())


@app.command("banks")
def banks_cmd() -> None:
    """List registered bank/wallet formats."""

    raise typer.Exit(cmd_banks())


@app.callback()
def _root() -> None:
    """Load ``.env``, configure logging and apply ``BANK_SMS_PARSER_RULES_FILE``."""

    # Keep already-set environment variables
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    configure_logging()

    rules_path = os.getenv(_RULES_ENV)
    if rules_path and rules_path.strip():
        _logger.info("Applying rules from %s", rules_path)
        status = _apply_rules_path(Path(rules_path.strip()), default_registry())
        if status:
            raise typer.Exit(status)


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
