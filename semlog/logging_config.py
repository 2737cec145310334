from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
import io
import json
import logging
import sys
from typing import Any, TextIO

from semlog.backend import MARKER_RECORD_ATTR
from semlog.encoding import JsonGenerator
from semlog.levels import TRACE, stdlib_level
from semlog.logging_context import get_request_id
from semlog.markers import ContextMarker
from semlog.settings import Settings, settings

DEFAULT_REDACT_FIELDS = frozenset({"authorization", "cookie", "password", "secret", "token"})

# Attributes every LogRecord carries, plus the ones formatters fill in.
_RESERVED_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {
    "message",
    "asctime",
    "taskName",
    MARKER_RECORD_ATTR,
    "request_id",
}

# Records are labelled with semlog's level vocabulary, not stdlib's.
_LEVEL_LABELS = {
    TRACE: "trace",
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warn",
    logging.ERROR: "error",
}
_CONSOLE_LEVELS = {"trace": "TRC", "debug": "DBG", "info": "INF", "warn": "WRN", "error": "ERR"}

_INSTALLED_ATTR = "_semlog_installed"


def parse_redact_fields(raw: str | Iterable[str] | None) -> frozenset[str]:
    """Default sensitive keys plus ``raw``, a comma-separated string or an iterable of keys."""
    if raw is None:
        raw = ()
    elif isinstance(raw, str):
        raw = raw.split(",")
    return DEFAULT_REDACT_FIELDS | {field.strip().lower() for field in raw if field.strip()}


def configure_logging(
    *,
    level: str | int,
    log_format: str,
    redact_fields: Iterable[str],
    stream: TextIO | None = None,
) -> logging.Handler:
    """Install the semlog handler on the root logger and return it.

    A handler installed by an earlier call is replaced; handlers added by
    anything else stay attached. ``level`` accepts semlog names (``trace``,
    ``warn``, ``fatal``), stdlib names or a number; unrecognised names fall
    back to INFO.
    """
    formatter_cls = _FORMATTERS.get(log_format.strip().lower())
    if formatter_cls is None:
        raise ValueError(f"unknown log format {log_format!r}; expected one of {sorted(_FORMATTERS)}")

    levelno = _resolve_level(level)
    root_logger = logging.getLogger()
    for existing in [h for h in root_logger.handlers if getattr(h, _INSTALLED_ATTR, False)]:
        root_logger.removeHandler(existing)
    root_logger.setLevel(levelno)

    handler = logging.StreamHandler(stream=stream or sys.stdout)
    setattr(handler, _INSTALLED_ATTR, True)
    handler.setLevel(levelno)
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(formatter_cls(redact_fields=redact_fields))
    root_logger.addHandler(handler)
    return handler


def configure_from_settings(config: Settings = settings) -> logging.Handler:
    return configure_logging(
        level=config.log_level,
        log_format=config.log_format,
        redact_fields=parse_redact_fields(config.log_redact_fields),
    )


def marker_context(record: logging.LogRecord) -> Mapping[str, Any]:
    marker = getattr(record, MARKER_RECORD_ATTR, None)
    if isinstance(marker, ContextMarker):
        return marker.context
    return {}


class RequestContextFilter(logging.Filter):
    """Copy the active request id onto records.

    Records whose marker already carries a ``request_id`` are left alone so
    the id is not written twice.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) or "request_id" in marker_context(record):
            return True
        request_id = get_request_id()
        if request_id:
            record.request_id = request_id
        return True


class JsonLogFormatter(logging.Formatter):
    """One JSON object per record.

    Context markers are written last (before ``exception``) and merge their
    fields into the top-level object, so a context key equal to one of the
    base fields appears twice and the later value wins for most readers.
    """

    def __init__(self, *, redact_fields: Iterable[str]) -> None:
        super().__init__()
        self._redact_fields = {field.lower() for field in redact_fields}

    def format(self, record: logging.LogRecord) -> str:
        buffer = io.StringIO()
        generator = JsonGenerator(buffer, redact_fields=self._redact_fields)
        generator.start_object()
        generator.write_field("timestamp", _format_timestamp(record.created))
        generator.write_field("level", _level_label(record))
        generator.write_field("logger", record.name)
        generator.write_field("message", record.getMessage())
        request_id = getattr(record, "request_id", None)
        if request_id:
            generator.write_field("request_id", request_id)
        for key, value in _extra_fields(record):
            generator.write_field(key, value)
        marker = getattr(record, MARKER_RECORD_ATTR, None)
        if marker is not None:
            marker.write_to(generator)
        if record.exc_info:
            generator.write_field("exception", self.formatException(record.exc_info))
        generator.end_object()
        return buffer.getvalue()


class ConsoleLogFormatter(logging.Formatter):
    def __init__(self, *, redact_fields: Iterable[str]) -> None:
        super().__init__()
        self._json_formatter = JsonLogFormatter(redact_fields=redact_fields)

    def format(self, record: logging.LogRecord) -> str:
        payload = json.loads(self._json_formatter.format(record))
        label = payload.pop("level", "info")
        parts = [
            payload.pop("timestamp", ""),
            _CONSOLE_LEVELS.get(label, label[:3].upper()),
            payload.pop("logger", "root"),
            payload.pop("message", ""),
        ]
        exception = payload.pop("exception", None)

        request_id = payload.pop("request_id", None)
        if request_id:
            parts.append(f"rid={request_id}")
        parts.extend(f"{key}={payload[key]}" for key in sorted(payload))
        if exception:
            parts.append(f"exception={exception}")

        return " | ".join(str(part) for part in parts if part)


_FORMATTERS: dict[str, type[logging.Formatter]] = {
    "json": JsonLogFormatter,
    "console": ConsoleLogFormatter,
}


def _level_label(record: logging.LogRecord) -> str:
    return _LEVEL_LABELS.get(record.levelno, record.levelname.lower())


def _extra_fields(record: logging.LogRecord) -> Iterable[tuple[str, Any]]:
    return (
        (key, value)
        for key, value in vars(record).items()
        if key not in _RESERVED_RECORD_ATTRS and not key.startswith("_")
    )


def _resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    levelno = stdlib_level(level)
    if levelno is not None:
        return levelno
    named = logging.getLevelNamesMapping().get(level.strip().upper())
    return logging.INFO if named is None else named


def _format_timestamp(created: float) -> str:
    stamp = datetime.fromtimestamp(created, tz=timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")
