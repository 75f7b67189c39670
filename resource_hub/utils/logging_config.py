"""
JSON logging for the Resource Hub service.

Every log line is a single JSON object. Context passed through `extra=`
(record_id, field, path, ...) ends up as top-level keys, which is how
normalization diagnostics and store failures are searched for.

Copyright (C) 2025 Maigie

Licensed under the Business Source License 1.1 (BUSL-1.1).
See LICENSE file in the repository root for details.
"""

import logging
import os
import sys
from typing import Any

from pythonjsonlogger import jsonlogger

APPLICATION_NAME = "resource-hub-backend"

# Libraries that log every request or call at INFO
NOISY_LOGGERS = ("uvicorn", "uvicorn.access", "httpx", "httpcore", "google_genai", "prisma")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Adds level, logger and source location to every JSON record."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record.setdefault("timestamp", self.formatTime(record, self.datefmt))
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["source"] = f"{record.module}.{record.funcName}:{record.lineno}"

        if record.exc_info and "exception" not in log_record:
            log_record["exception"] = self.formatException(record.exc_info)


def resolve_log_level(environment: str, requested: str | None = None) -> int:
    """
    Pick the root log level.

    An explicit LOG_LEVEL wins; otherwise development logs at DEBUG and every
    other environment at INFO. Unknown names fall back to INFO.
    """
    name = (requested or "").strip().upper()
    if not name:
        name = "DEBUG" if environment == "development" else "INFO"
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def configure_logging() -> None:
    """
    Install the JSON handler on the root logger.

    Called once from the application lifespan. Reads ENVIRONMENT and
    LOG_LEVEL from the process environment.
    """
    environment = os.getenv("ENVIRONMENT", "development").lower()
    log_level = resolve_log_level(environment, os.getenv("LOG_LEVEL"))

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(
        CustomJsonFormatter(
            fmt="%(timestamp)s %(level)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
            static_fields={"environment": environment, "application": APPLICATION_NAME},
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.info(
        "Structured logging configured",
        extra={"log_level": logging.getLevelName(log_level), "environment": environment},
    )
