"""Pytest configuration for test isolation.

The parsing operations fall back to a process-wide registry when no
``registry=`` handle is passed, and the CLI always uses it. Tests that register
rules (directly or through ``BANK_SMS_PARSER_RULES_FILE``) would otherwise leak
those rules into later tests, so the shared registry is dropped around every
test. Tests that want their own tables use the ``registry`` fixture, which
returns a fresh registry preloaded with the built-in tables.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make sure the workspace `packages/` dir is on sys.path so `bank_sms_parser` is importable
_ROOT = Path(__file__).resolve().parents[1]
_PKG_DIR = _ROOT / "packages"
sys.path[:0] = [p for p in [str(_PKG_DIR)] if p not in sys.path]

from bank_sms_parser.registry import Registry, reset_default_registry  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_default_registry(monkeypatch: pytest.MonkeyPatch):
    """Rebuild the shared registry per test and keep CLI logging quiet."""

    monkeypatch.setenv("BANK_SMS_PARSER_LOG_LEVEL", "WARNING")
    monkeypatch.delenv("BANK_SMS_PARSER_RULES_FILE", raising=False)
    reset_default_registry()
    yield
    reset_default_registry()


@pytest.fixture
def registry() -> Registry:
    return Registry.with_defaults()
