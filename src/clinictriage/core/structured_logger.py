"""
Structured logging utilities for the triage service.
"""

import json
import logging
import sys
from typing import Any, Dict, Optional

from .utils.datetime_utils import get_current_timestamp

ROOT_LOGGER_NAME = "clinictriage"


class StructuredLogger:
    """
    Structured logger: a message plus keyword context per entry.

    Context travels on the record as ``extra_data`` so ``JSONFormatter`` can
    merge it into the emitted object. Instances are handed to components
    explicitly; nothing in the package holds a shared logger.
    """

    def __init__(self, name: str, level: Optional[int] = None):
        self.logger = logging.getLogger(name)
        if level is not None:
            self.logger.setLevel(level)

    def log(self, level: str, message: str, **kwargs: Any) -> None:
        """Log with structured data"""
        numeric_level = logging.getLevelName(level.upper())
        if not isinstance(numeric_level, int):
            numeric_level = logging.INFO
        self.logger.log(numeric_level, message, extra={"extra_data": kwargs})

    def info(self, message: str, **kwargs: Any) -> None:
        self.log("info", message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log("warning", message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log("error", message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log("debug", message, **kwargs)

    def critical(self, message: str, **kwargs: Any) -> None:
        self.log("critical", message, **kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log at ERROR with the active exception's traceback attached."""
        self.logger.error(message, exc_info=True, extra={"extra_data": kwargs})


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: Dict[str, Any] = {
            "timestamp": get_current_timestamp().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_data"):
            log_obj.update(record.extra_data)

        return json.dumps(log_obj, default=str)


class TextFormatter(logging.Formatter):
    """Plain text formatter that appends structured context as key=value."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extra = getattr(record, "extra_data", None)
        if extra:
            context = " ".join(f"{key}={value}" for key, value in extra.items())
            return f"{base} | {context}"
        return base


def configure_logging(level: str = "INFO", fmt: str = "json") -> logging.Logger:
    """Install a single stdout handler on the package logger."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level.upper())
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
    logger.addHandler(handler)
    return logger


def get_logger(name: str) -> StructuredLogger:
    """Create a structured logger for ``name``."""
    return StructuredLogger(name)
