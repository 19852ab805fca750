"""Logging for ``bank_sms_parser``.

Modules log through ``get_logger("bank_sms_parser.<module>")`` and never add
handlers of their own. Until an entrypoint calls :func:`configure_logging`,
the package logger only carries a ``NullHandler``, so embedding the parser in
another service produces no output unless that service asks for it.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

LOGGER_NAME = "bank_sms_parser"
LEVEL_ENV_VAR = "BANK_SMS_PARSER_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


class _ConsoleHandler(logging.StreamHandler):
    """Stream handler installed by :func:`configure_logging`.

    Without an explicit stream it writes to whatever ``sys.stderr`` is at
    emit time, so redirections made after startup are honored.
    """

    def __init__(self, stream: IO[str] | None = None) -> None:
        self._follow_stderr = stream is None
        super().__init__(stream)

    @property
    def stream(self) -> IO[str]:
        return sys.stderr if self._follow_stderr else self._stream

    @stream.setter
    def stream(self, value: IO[str]) -> None:
        self._stream = value


def resolve_level(level: int | str | None = None) -> int:
    """Turn ``level`` (or ``$BANK_SMS_PARSER_LOG_LEVEL``) into a level number.

    Accepts ints, digit strings and level names in any case. Anything
    unrecognized resolves to ``INFO``.
    """

    if level is None:
        level = os.getenv(LEVEL_ENV_VAR) or logging.INFO
    if isinstance(level, int):
        return level
    text = str(level).strip().upper()
    if text.isdigit():
        return int(text)
    return logging.getLevelNamesMapping().get(text, logging.INFO)


def _console_handler(logger: logging.Logger) -> _ConsoleHandler | None:
    return next((h for h in logger.handlers if isinstance(h, _ConsoleHandler)), None)


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> logging.Handler:
    """Send package logs to ``stream`` (stderr by default).

    Only the first call has an effect; later calls return the handler that is
    already installed. The package logger stops propagating to the root
    logger once configured.
    """

    logger = logging.getLogger(LOGGER_NAME)
    existing = _console_handler(logger)
    if existing is not None:
        return existing

    resolved = resolve_level(level)
    handler = _ConsoleHandler(stream)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))

    for placeholder in [h for h in logger.handlers if isinstance(h, logging.NullHandler)]:
        logger.removeHandler(placeholder)
    logger.addHandler(handler)
    logger.setLevel(resolved)
    logger.propagate = False
    return handler


def get_logger(name: str) -> logging.Logger:
    package_logger = logging.getLogger(LOGGER_NAME)
    if not package_logger.handlers:
        package_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = [
    "DEFAULT_FORMAT",
    "LEVEL_ENV_VAR",
    "LOGGER_NAME",
    "configure_logging",
    "get_logger",
    "resolve_level",
]
