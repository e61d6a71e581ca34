from __future__ import annotations

import json
import logging
import sys
from typing import Any, Optional, TextIO

from dbconnect.lib.redaction import redact

JSON_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
SENSITIVE_KEYS = {"password", "pwd", "credential", "secret", "token"}
REDACTED_VALUE = "***REDACTED***"
HANDLER_NAME = "dbconnect.console"
_STANDARD_RECORD_ATTRS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "message",
}


class SensitiveDataFilter(logging.Filter):
    """Redact common sensitive keys from log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        for key in SENSITIVE_KEYS:
            if hasattr(record, key):
                setattr(record, key, REDACTED_VALUE)
        if isinstance(record.args, dict):
            record.args = {
                key: (REDACTED_VALUE if key in SENSITIVE_KEYS else value)
                for key, value in record.args.items()
            }
        return True


class JsonFormatter(logging.Formatter):
    """Emit log records as compact JSON for deterministic parsing."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": redact(record.getMessage()),
        }
        extras = self._extract_extras(record)
        if extras:
            payload["context"] = extras
        if record.exc_info:
            payload["exception"] = redact(self.formatException(record.exc_info))
        if record.stack_info:
            payload["stack"] = self.formatStack(record.stack_info)
        return json.dumps(payload, ensure_ascii=True)

    def _extract_extras(self, record: logging.LogRecord) -> dict[str, Any]:
        extras: dict[str, Any] = {}
        for key, value in record.__dict__.items():
            if key in _STANDARD_RECORD_ATTRS or key.startswith("_"):
                continue
            if key in SENSITIVE_KEYS:
                extras[key] = REDACTED_VALUE
            else:
                extras[key] = self._stringify(value)
        return extras

    @staticmethod
    def _stringify(value: Any) -> Any:
        if isinstance(value, (int, float, bool)) or value is None:
            return value
        return redact(str(value))


def configure_logging(*, level: int = logging.INFO, stream: Optional[TextIO] = None) -> logging.Logger:
    """Configure root logger with one structured, redacting stream handler.

    Calling again re-targets the existing handler instead of adding another.
    """

    root = logging.getLogger()
    root.setLevel(level)

    if not any(isinstance(f, SensitiveDataFilter) for f in root.filters):
        root.addFilter(SensitiveDataFilter())

    target = stream or sys.stderr
    handler = _find_handler(root.handlers)
    if handler is None:
        handler = logging.StreamHandler(target)
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(JsonFormatter(JSON_LOG_FORMAT))
        handler.addFilter(SensitiveDataFilter())
        root.addHandler(handler)
    else:
        handler.setStream(target)

    return root


def _find_handler(handlers: list[logging.Handler]) -> Optional[logging.StreamHandler]:
    for handler in handlers:
        if isinstance(handler, logging.StreamHandler) and handler.get_name() == HANDLER_NAME:
            return handler
    return None


__all__ = ["JsonFormatter", "configure_logging", "SensitiveDataFilter", "REDACTED_VALUE"]
