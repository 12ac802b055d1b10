"""Logging utilities.

All diagnostics (errors, rate-limit info, token counts, the spinner) go to
stderr; stdout is reserved for the answer.

The diagnostic mode is decided once at startup and handed to `configure`.
Module loggers are children of the "aeh" logger and carry no handlers of
their own.
"""
from __future__ import annotations

import enum
import logging
import os
from typing import IO, Mapping, Optional

ROOT_LOGGER = "aeh"

_DEFAULT_LEVEL = os.environ.get("AEH_LOG_LEVEL", "INFO").upper()

_YELLOW = "\033[33m"
_RESET = "\033[0m"


class DiagnosticMode(enum.Enum):
    COLORED = "colored"
    PLAIN = "plain"
    SILENT = "silent"


class ColorFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return f"{_YELLOW}{super().format(record)}{_RESET}"


def resolve_mode(environ: Mapping[str, str], is_tty: bool) -> DiagnosticMode:
    v = (environ.get("AEH_ERR") or "").strip().lower()
    if v == "false":
        return DiagnosticMode.SILENT
    if v == "plain":
        return DiagnosticMode.PLAIN
    if v in ("true", "color"):
        return DiagnosticMode.COLORED
    return DiagnosticMode.COLORED if is_tty else DiagnosticMode.PLAIN


def _level(name: str) -> int:
    v = logging.getLevelName(name.strip().upper())
    # unknown names come back as "Level FOO"
    return v if isinstance(v, int) else logging.INFO


def get_logger(name: str) -> logging.Logger:
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def configure(mode: DiagnosticMode, stream: Optional[IO[str]] = None, level: Optional[str] = None) -> logging.Logger:
    """Attach the single diagnostics handler to the "aeh" logger.

    Calling it again replaces the previous handler, so repeated runs in one
    process (tests) do not stack output.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    for h in list(logger.handlers):
        logger.removeHandler(h)

    if mode is DiagnosticMode.SILENT:
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.CRITICAL + 1)
        return logger

    logger.setLevel(_level(level or _DEFAULT_LEVEL))

    h = logging.StreamHandler(stream)
    fmt = "%(message)s"
    if mode is DiagnosticMode.COLORED:
        h.setFormatter(ColorFormatter(fmt))
    else:
        h.setFormatter(logging.Formatter(fmt))
    logger.addHandler(h)

    return logger
