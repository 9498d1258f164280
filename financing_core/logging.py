"""Logging setup for financing-core.

Ledger operations attach context to their records through ``extra``
(``financing_id``, ``installment_number``, ``strategy``). Both formatters
render that context when it is present.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from financing_core.config import FinancingConfig

# Record attributes set by the ledger, in display order
LEDGER_FIELDS = ("financing_id", "installment_number", "strategy")

STANDARD_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

QUIET_LOGGERS = ("psycopg", "faker")


def ledger_context(record: logging.LogRecord) -> dict[str, Any]:
    """Ledger fields carried by ``record``, skipping the ones not set."""
    context = {}
    for field_name in LEDGER_FIELDS:
        value = getattr(record, field_name, None)
        if value is not None:
            context[field_name] = value
    return context


class LedgerFormatter(logging.Formatter):
    """Pipe-separated text format with ledger context appended as key=value."""

    def __init__(self) -> None:
        super().__init__(fmt=STANDARD_FORMAT, datefmt=DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = ledger_context(record)
        if not context:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{line} | {pairs}"


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **ledger_context(record),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra"):
            log_data.update(record.extra)

        return json.dumps(log_data, default=str, ensure_ascii=False)


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
) -> None:
    """Install a single stdout handler on the root logger.

    Parameters
    ----------
    level : str
        Log level name; unknown names fall back to INFO.
    format_type : str
        ``"standard"`` for text lines, ``"json"`` for JSON objects.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    formatter: logging.Formatter = JsonFormatter() if format_type == "json" else LedgerFormatter()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    logging.getLogger("financing_core").setLevel(log_level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def configure_from(config: FinancingConfig) -> None:
    """Apply ``config.log_level`` and ``config.log_format``."""
    setup_logging(config.log_level, config.log_format)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
