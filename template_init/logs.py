"""
logs.py

Responsibility: console logging for a single interactive run.

Every line is prefixed with a status symbol so a user can tell progress,
completed steps, best-effort warnings and fatal errors apart at a glance.
Call sites choose the symbol with `extra=PENDING` / `extra=DONE`; otherwise
the record level decides.
"""

from __future__ import annotations

import logging
import sys

PENDING = {"symbol": "⏳"}
DONE = {"symbol": "✅"}

_LEVEL_SYMBOLS = {
    logging.DEBUG: "·",
    logging.INFO: "ℹ️ ",
    logging.WARNING: "⚠️ ",
    logging.ERROR: "❌",
    logging.CRITICAL: "❌",
}


class SymbolFormatter(logging.Formatter):
    """Format: SYMBOL message"""

    def format(self, record: logging.LogRecord) -> str:
        symbol = getattr(record, "symbol", None) or _LEVEL_SYMBOLS.get(record.levelno, "")
        line = f"{symbol} {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the package logger to write symbol-prefixed lines to stderr.

    Only the `template_init` logger is touched so embedding callers keep their
    own root configuration.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("template_init")
    logger.setLevel(numeric_level)
    logger.handlers.clear()
    logger.propagate = False

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(SymbolFormatter())
    logger.addHandler(handler)

    logging.getLogger("urllib3").setLevel(logging.WARNING)
