# -*- coding: utf-8 -*-
"""
Logging configuration for the provisioning tool.

Progress messages go to stdout and diagnostics (warnings and errors) go to
stderr, so a dev-container build log shows failures on the error stream.
Either a human-readable or a JSON-structured format can be selected.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional

SERVICE_NAME = "gcloud-feature"
TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Attributes every LogRecord carries; anything else was passed via `extra`.
_RESERVED_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", None, None))
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Formats log records as one JSON object per line with the timestamp,
    level, service name, logger, message, source location and any extra
    fields passed to the logging call.
    """

    def __init__(self, service_name: str = SERVICE_NAME):
        super().__init__()
        self.service_name = service_name
        self.hostname = os.environ.get("HOSTNAME", "unknown")

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "hostname": self.hostname,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_RECORD_ATTRS
        }
        if extra_fields:
            log_entry["extra"] = extra_fields

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class MaxLevelFilter(logging.Filter):
    """Passes only records strictly below `max_level`."""

    def __init__(self, max_level: int):
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.max_level


def setup_logging(
    log_level: Optional[str] = None,
    log_format: str = "text",
    service_name: str = SERVICE_NAME,
) -> logging.Logger:
    """
    Set up logging for a provisioning run.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Defaults to $LOG_LEVEL, then INFO. Invalid names fall back to INFO.
        log_format: "text" for human-readable lines, "json" for one JSON
            object per line.
        service_name: Name of the logger returned and of the JSON "service"
            field.

    Returns:
        Configured logger instance.
    """
    if log_level is None:
        log_level = os.environ.get("LOG_LEVEL", "INFO")

    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    if log_format == "json":
        formatter: logging.Formatter = JSONFormatter(service_name)
    else:
        formatter = logging.Formatter(TEXT_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(numeric_level)
    stdout_handler.addFilter(MaxLevelFilter(logging.WARNING))
    stdout_handler.setFormatter(formatter)
    root_logger.addHandler(stdout_handler)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(max(numeric_level, logging.WARNING))
    stderr_handler.setFormatter(formatter)
    root_logger.addHandler(stderr_handler)

    logger = logging.getLogger(service_name)
    logger.debug(
        "Logging initialized",
        extra={"log_level": logging.getLevelName(numeric_level), "log_format": log_format},
    )
    return logger
