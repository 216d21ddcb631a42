"""
Centralized logging for the Shipping API client.

Provides structured (JSON line) and simple formatters. The structured formatter
redacts bearer tokens, API secrets and authorization headers before they reach
a log sink.
"""

import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from shippingapi.config import settings

_RESERVED_ATTRS = {
    "name", "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "exc_info", "exc_text", "stack_info",
    "lineno", "funcName", "created", "msecs", "relativeCreated",
    "thread", "threadName", "processName", "process", "message",
    "taskName",
}

_SENSITIVE_KEYS = {
    "api_key", "apikey", "api_secret", "secret", "password",
    "token", "access_token", "authorization", "auth",
}

_BEARER_TOKEN = re.compile(r"Bearer \S+")


class StructuredFormatter(logging.Formatter):
    """
    Formatter emitting one JSON object per log record.

    Extra fields passed through ``extra=`` are merged into the entry.
    """

    def __init__(self, sanitize: bool = True):
        """
        Initialize the structured formatter.

        Args:
            sanitize: Whether to redact tokens and secrets from log entries
        """
        super().__init__()
        self.sanitize = sanitize

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_entry[key] = value

        if self.sanitize:
            log_entry = sanitize_log_entry(log_entry)

        return json.dumps(log_entry, ensure_ascii=False, separators=(",", ":"), default=str)


def sanitize_log_entry(obj: Any) -> Any:
    """
    Redact sensitive values from a log entry.

    Values stored under a sensitive key are replaced entirely. Free-text
    strings have each bearer token replaced and keep the surrounding text.
    """
    if isinstance(obj, dict):
        return {
            k: "[REDACTED]" if str(k).lower() in _SENSITIVE_KEYS else sanitize_log_entry(v)
            for k, v in obj.items()
        }
    if isinstance(obj, list):
        return [sanitize_log_entry(item) for item in obj]
    if isinstance(obj, str):
        return _BEARER_TOKEN.sub("Bearer [REDACTED]", obj)
    return obj


class SimpleFormatter(logging.Formatter):
    """Simple, human-readable formatter for development use."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)8s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )


def setup_logger(
    name: Optional[str] = None,
    level: Optional[str] = None,
    log_format: Optional[str] = None
) -> logging.Logger:
    """
    Set up and configure a logger instance.

    Args:
        name: Logger name (defaults to 'shippingapi')
        level: Log level (defaults to settings.log_level)
        log_format: 'structured' or 'simple' (defaults to settings.log_format)

    Returns:
        logging.Logger: Configured logger instance
    """
    logger_name = name or "shippingapi"
    log_level = (level or settings.log_level).upper()
    format_type = log_format or settings.log_format

    logger = logging.getLogger(logger_name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        logger.addHandler(handler)
        logger.propagate = False
    elif level is None and log_format is None:
        return logger

    logger.setLevel(getattr(logging, log_level))
    for handler in logger.handlers:
        handler.setLevel(getattr(logging, log_level))
        if format_type == "structured":
            handler.setFormatter(StructuredFormatter(sanitize=settings.sanitize_logs))
        else:
            handler.setFormatter(SimpleFormatter())

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a configured logger instance.

    Loggers below the ``shippingapi`` namespace propagate to the package
    logger, so reconfiguring it with ``setup_logger`` reaches all of them.

    Args:
        name: Logger name (defaults to 'shippingapi')

    Returns:
        logging.Logger: Configured logger instance
    """
    if name and name.startswith("shippingapi."):
        setup_logger()
        return logging.getLogger(name)
    return setup_logger(name)


# Create the global logger instance
logger = setup_logger()
