import io
import logging
import sys

import pytest

from bank_sms_parser.logging_setup import (
    LOGGER_NAME,
    configure_logging,
    get_logger,
    resolve_level,
)


@pytest.fixture
def package_logger():
    """Detach whatever handlers earlier tests installed, restore them after."""

    logger = logging.getLogger(LOGGER_NAME)
    saved = (list(logger.handlers), logger.level, logger.propagate)
    for h in saved[0]:
        logger.removeHandler(h)
    yield logger
    for h in list(logger.handlers):
        logger.removeHandler(h)
    handlers, level, propagate = saved
    for h in handlers:
        logger.addHandler(h)
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.mark.parametrize(
    "level, expected",
    [
        (logging.DEBUG, logging.DEBUG),
        ("debug", logging.DEBUG),
        (" Warning ", logging.WARNING),
        ("15", 15),
        ("LOUD", logging.INFO),
    ],
)
def test_resolve_level(level, expected):
    assert resolve_level(level) == expected


def test_resolve_level_reads_environment(monkeypatch):
    monkeypatch.setenv("BANK_SMS_PARSER_LOG_LEVEL", "error")
    assert resolve_level() == logging.ERROR
    monkeypatch.delenv("BANK_SMS_PARSER_LOG_LEVEL")
    assert resolve_level() == logging.INFO


def test_unconfigured_package_logs_nowhere(package_logger):
    get_logger("bank_sms_parser.registry")
    assert [type(h) for h in package_logger.handlers] == [logging.NullHandler]


def test_configure_logging_once(package_logger):
    get_logger("bank_sms_parser.api")
    out = io.StringIO()

    first = configure_logging("INFO", fmt="%(name)s|%(levelname)s|%(message)s", stream=out)
    second = configure_logging("DEBUG", stream=io.StringIO())

    assert first is second
    assert package_logger.handlers == [first]
    assert package_logger.propagate is False

    log = get_logger("bank_sms_parser.api")
    log.debug("hidden")
    log.info("parse_batch:done total=%d", 2)
    assert out.getvalue() == "bank_sms_parser.api|INFO|parse_batch:done total=2\n"


def test_default_stream_follows_stderr(package_logger, monkeypatch):
    configure_logging("WARNING", fmt="%(message)s")

    redirected = io.StringIO()
    monkeypatch.setattr(sys, "stderr", redirected)
    get_logger("bank_sms_parser.cli").warning("rejected rule")

    assert redirected.getvalue() == "rejected rule\n"
