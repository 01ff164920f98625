"""
Logging for the order intake workflow.

Handlers live on the package logger only; module loggers obtained through
setup_logging() propagate to it. The console gets the plain LOG_FORMAT
line, LOG_FILE gets one JSON object per record.
"""

import logging
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from order_intake.config import get_config


config = get_config()

PACKAGE_LOGGER = "order_intake"

# Record attributes copied into the JSON line when a call supplied them
_CONTEXT_FIELDS = ("stage", "action", "status", "context")


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, including stage context when present."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in _CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def _configure_package_logger() -> logging.Logger:
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if package_logger.handlers:
        return package_logger

    level = getattr(logging, config.LOG_LEVEL)
    package_logger.setLevel(level)
    package_logger.propagate = False

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(config.LOG_FORMAT))
    package_logger.addHandler(console_handler)

    file_handler = logging.FileHandler(config.LOG_FILE)
    file_handler.setFormatter(StructuredFormatter())
    package_logger.addHandler(file_handler)

    return package_logger


def setup_logging(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """Return a logger under the package logger, configuring it on first use."""
    package_logger = _configure_package_logger()
    if name == PACKAGE_LOGGER:
        return package_logger
    if not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def log_stage_action(
    logger: logging.Logger,
    stage: str,
    action: str,
    details: Optional[dict] = None,
) -> None:
    """INFO line for a workflow step; details go to the JSON log as context."""
    logger.info(
        f"[{stage}] {action}",
        extra={"stage": stage, "action": action, "context": details or None},
    )


def log_request_failure(
    logger: logging.Logger,
    stage: str,
    status: Optional[int],
    message: str,
) -> None:
    """WARNING line for a backend call that failed; status is None for transport errors."""
    logger.warning(
        f"[{stage}] Backend request failed: {message}",
        extra={"stage": stage, "action": "request_failed", "status": status},
    )
