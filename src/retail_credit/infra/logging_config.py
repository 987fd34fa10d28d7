"""Structured JSON logging.

Loggers across the package attach business fields through ``extra={...}``;
the JSON formatter renders them as top-level keys.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

from pythonjsonlogger.json import JsonFormatter

SERVICE_NAME = "retail-credit"


class ServiceJsonFormatter(JsonFormatter):
    """JSON formatter with timestamp, level and service metadata."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = SERVICE_NAME


def log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def configure_logging(level: str | None = None) -> None:
    """Route the root logger to stdout as JSON. Safe to call more than once."""
    root = logging.getLogger()
    root.setLevel(level or log_level())

    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ServiceJsonFormatter("%(name)s %(message)s"))
    root.addHandler(handler)
