from __future__ import annotations

import contextvars
import json
import logging
import sys
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import TypedDict

from coagent_ui.config import settings

_CONFIGURED = False

# Silent until the host calls configure_logging().
logging.getLogger("coagent_ui").addHandler(logging.NullHandler())

_CONTEXT_KEYS = (
    "thread_id",
    "run_id",
    "response_id",
    "component",
)

_BASE_RECORD_KEYS = frozenset(logging.makeLogRecord({}).__dict__.keys()) | {
    "message",
    "asctime",
}
_RESERVED_EXTRA_KEYS = frozenset({"service", "environment", "event", "error_code", "fields"})
_REDACT_KEYS_DEFAULT = frozenset(
    {
        "authorization",
        "cookie",
        "password",
        "token",
        "secret",
        "api_key",
        "openai_api_key",
        "anthropic_api_key",
    }
)


class LogContext(TypedDict, total=False):
    thread_id: str
    run_id: str
    response_id: str
    component: str


_LOG_CONTEXT: contextvars.ContextVar[LogContext | None] = contextvars.ContextVar(
    "coagent_ui_log_context",
    default=None,
)


def _normalize_key_name(key: str) -> str:
    return key.strip().lower().replace("-", "_")


def _redact_keys() -> frozenset[str]:
    extra = {
        _normalize_key_name(key)
        for key in settings.LOG_REDACT_KEYS.split(",")
        if key.strip()
    }
    return _REDACT_KEYS_DEFAULT | extra


_REDACT_KEYS = _redact_keys()


def sanitize_for_logging(value: object, *, key: str | None = None) -> object:
    """Replace values stored under sensitive keys, recursing into containers."""
    if key is not None and _normalize_key_name(key) in _REDACT_KEYS:
        return "[REDACTED]"
    if isinstance(value, Mapping):
        return {
            str(raw_key): sanitize_for_logging(raw_value, key=str(raw_key))
            for raw_key, raw_value in value.items()
        }
    if isinstance(value, list | tuple):
        return [sanitize_for_logging(item) for item in value]
    return value


def get_log_context() -> LogContext:
    current = _LOG_CONTEXT.get()
    return LogContext(**current) if current else LogContext()


def _merge_context(base: LogContext, fields: Mapping[str, str | None]) -> LogContext:
    merged = LogContext(**base)
    for key, value in fields.items():
        if value is None:
            continue
        text = value.strip()
        if text:
            merged[key] = text  # type: ignore[literal-required]
    return merged


def bind_log_context(**fields: str | None) -> None:
    _LOG_CONTEXT.set(_merge_context(get_log_context(), fields))


def clear_log_context() -> None:
    _LOG_CONTEXT.set(LogContext())


@contextmanager
def log_context(**fields: str | None) -> Iterator[None]:
    token = _LOG_CONTEXT.set(_merge_context(get_log_context(), fields))
    try:
        yield
    finally:
        _LOG_CONTEXT.reset(token)


def _extract_extra_fields(record: logging.LogRecord) -> dict[str, object]:
    fields: dict[str, object] = {}
    raw_fields = getattr(record, "fields", None)
    if isinstance(raw_fields, Mapping):
        fields.update({str(key): value for key, value in raw_fields.items()})
    elif raw_fields is not None:
        fields["fields"] = raw_fields

    for key, value in record.__dict__.items():
        if key in _BASE_RECORD_KEYS or key in _CONTEXT_KEYS:
            continue
        if key in _RESERVED_EXTRA_KEYS:
            continue
        fields[key] = value
    return fields


def _format_timestamp(created: float) -> str:
    return datetime.fromtimestamp(created, tz=timezone.utc).isoformat()


def _encode(value: object) -> str:
    return json.dumps(
        sanitize_for_logging(value),
        ensure_ascii=True,
        sort_keys=True,
        default=str,
    )


class _JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "timestamp": _format_timestamp(record.created),
            "level": record.levelname,
            "logger": record.name,
            "service": getattr(record, "service", settings.LOG_SERVICE),
            "environment": getattr(record, "environment", settings.APP_ENV),
            "message": record.getMessage(),
        }
        for key in (*_CONTEXT_KEYS, "event", "error_code"):
            value = getattr(record, key, None)
            if isinstance(value, str) and value:
                payload[key] = value

        extra_fields = _extract_extra_fields(record)
        if extra_fields:
            payload["fields"] = extra_fields
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return _encode(payload)


class _TextLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        parts = [
            _format_timestamp(record.created),
            record.levelname,
            record.name,
            record.getMessage(),
        ]
        for key in ("event", "error_code", *_CONTEXT_KEYS):
            value = getattr(record, key, None)
            if isinstance(value, str) and value:
                parts.append(f"{key}={value}")

        extra_fields = _extract_extra_fields(record)
        if extra_fields:
            parts.append(f"fields={_encode(extra_fields)}")
        if record.exc_info:
            parts.append(f"exception={self.formatException(record.exc_info)}")
        return " ".join(parts)


class _LogContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        context = get_log_context()
        for key in _CONTEXT_KEYS:
            setattr(record, key, context.get(key))
        record.service = settings.LOG_SERVICE
        record.environment = settings.APP_ENV
        return True


def _resolve_log_level() -> int:
    resolved = logging.getLevelName(settings.LOG_LEVEL.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _resolve_formatter() -> logging.Formatter:
    if settings.LOG_FORMAT.strip().lower() == "text":
        return _TextLogFormatter()
    return _JsonLogFormatter()


def configure_logging() -> None:
    """Install the structured stdout handler on the root logger.

    Called by the host application; importing the package never touches the
    root logger.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    context_filter = _LogContextFilter()
    root = logging.getLogger()
    root.setLevel(_resolve_log_level())
    if not root.handlers:
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(_resolve_formatter())
        handler.addFilter(context_filter)
        root.addHandler(handler)
    else:
        for existing in root.handlers:
            existing.addFilter(context_filter)
    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_event(
    logger: logging.Logger,
    *,
    event: str,
    message: str,
    level: int = logging.INFO,
    error_code: str | None = None,
    fields: Mapping[str, object] | None = None,
    exc_info: bool = False,
) -> None:
    extra: dict[str, object] = {"event": event}
    if error_code is not None:
        extra["error_code"] = error_code
    if fields is not None:
        extra["fields"] = sanitize_for_logging(fields)
    logger.log(level, message, extra=extra, exc_info=exc_info)
