"""Structured logging for cnabledger.

Module loggers are plain ``logging.getLogger(__name__)`` loggers below the
``cnabledger`` namespace. ``configure_logging`` attaches one handler to that
namespace; ``LogContext`` carries the correlation id and file id of the run in
progress so every record emitted during that run is tagged with them.
"""

import logging
import sys
from contextvars import ContextVar
from typing import Any, Optional

from pythonjsonlogger.json import JsonFormatter

LOGGER_NAME = "cnabledger"

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

LOG_FORMATS = ("text", "json")


class LogContext:
    """Context-local fields attached to every log record."""

    _correlation_id: ContextVar[Optional[str]] = ContextVar("log_correlation_id", default=None)
    _file_id: ContextVar[Optional[str]] = ContextVar("log_file_id", default=None)

    _FIELD_NAMES = ("correlation_id", "file_id")

    @classmethod
    def get_all(cls) -> dict[str, str]:
        """Return all context fields that are set."""
        ctx: dict[str, str] = {}
        for name in cls._FIELD_NAMES:
            value = getattr(cls, f"_{name}").get()
            if value is not None:
                ctx[name] = value
        return ctx

    @classmethod
    def bind(cls, **fields: Optional[str]) -> "_BoundContext":
        """Context manager that sets fields on entry and restores them on exit."""
        unknown = set(fields) - set(cls._FIELD_NAMES)
        if unknown:
            raise TypeError(f"Unknown log context fields: {', '.join(sorted(unknown))}")
        return _BoundContext(fields)


class _BoundContext:
    def __init__(self, fields: dict[str, Optional[str]]):
        self._fields = fields
        self._tokens: dict[str, Any] = {}

    def __enter__(self) -> type[LogContext]:
        for name, value in self._fields.items():
            if value is not None:
                self._tokens[name] = getattr(LogContext, f"_{name}").set(value)
        return LogContext

    def __exit__(self, *exc: Any) -> None:
        for name, token in self._tokens.items():
            getattr(LogContext, f"_{name}").reset(token)
        self._tokens.clear()


class LogContextFilter(logging.Filter):
    """Copy ``LogContext`` fields onto each record (``-`` when unset)."""

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = LogContext.get_all()
        for name in LogContext._FIELD_NAMES:
            setattr(record, name, ctx.get(name, "-"))
        return True


class CustomJsonFormatter(JsonFormatter):
    """JSON formatter adding timestamp, level, logger and call site fields."""

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        if not log_record.get("timestamp"):
            log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName


def _build_formatter(fmt: str) -> logging.Formatter:
    if fmt == "json":
        return CustomJsonFormatter(
            fmt="%(timestamp)s %(level)s %(logger)s %(module)s %(function)s "
            "%(correlation_id)s %(file_id)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    return logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s [%(correlation_id)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def configure_logging(level: str = "INFO", fmt: str = "text") -> logging.Logger:
    """Configure the ``cnabledger`` logger.

    Replaces any handler installed by a previous call, so it is safe to call
    once per CLI invocation.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (case-insensitive)
        fmt: "text" or "json"

    Returns:
        The configured package logger

    Raises:
        ValueError: If level or fmt is not recognized
    """
    log_level = LOG_LEVELS.get(level.upper())
    if log_level is None:
        raise ValueError(f"Unknown log level '{level}'")
    if fmt not in LOG_FORMATS:
        raise ValueError(f"Unknown log format '{fmt}'. Use one of: {', '.join(LOG_FORMATS)}")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.addFilter(LogContextFilter())
    handler.setFormatter(_build_formatter(fmt))
    logger.addHandler(handler)

    return logger
