from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
import logging
from typing import Any

from semlog.markers import ContextMarker


@dataclass
class EmitCall:
    method: str
    marker: ContextMarker | None
    message: str
    throwable: BaseException | None


@dataclass
class RecordingMarkerLogger:
    name: str
    calls: list[EmitCall] = field(default_factory=list)

    def _record(self, method: str, marker, message, throwable) -> None:
        self.calls.append(EmitCall(method, marker, message, throwable))

    def trace(self, marker, message, throwable=None, *, stacklevel=1) -> None:
        self._record("trace", marker, message, throwable)

    def debug(self, marker, message, throwable=None, *, stacklevel=1) -> None:
        self._record("debug", marker, message, throwable)

    def info(self, marker, message, throwable=None, *, stacklevel=1) -> None:
        self._record("info", marker, message, throwable)

    def warn(self, marker, message, throwable=None, *, stacklevel=1) -> None:
        self._record("warn", marker, message, throwable)

    def error(self, marker, message, throwable=None, *, stacklevel=1) -> None:
        self._record("error", marker, message, throwable)


class RecordingLoggerFactory:
    """In-memory backend: records lookups, enablement checks and emit calls."""

    def __init__(self, enabled_levels: Iterable[str] | None = None) -> None:
        self.enabled_levels = None if enabled_levels is None else set(enabled_levels)
        self.loggers: dict[str, RecordingMarkerLogger] = {}
        self.lookups: list[str] = []
        self.enabled_checks: list[tuple[str, str]] = []

    def get_logger(self, name: str) -> RecordingMarkerLogger:
        self.lookups.append(name)
        return self.loggers.setdefault(name, RecordingMarkerLogger(name))

    def enabled(self, handle: RecordingMarkerLogger, level: str) -> bool:
        self.enabled_checks.append((handle.name, level))
        return self.enabled_levels is None or level in self.enabled_levels

    def calls(self, name: str) -> list[EmitCall]:
        return self.loggers[name].calls if name in self.loggers else []


def make_record(**attrs: Any) -> logging.LogRecord:
    base: dict[str, Any] = {
        "name": "tests.logging",
        "levelno": logging.INFO,
        "levelname": "INFO",
        "msg": "test.event",
        "args": (),
    }
    base.update(attrs)
    return logging.makeLogRecord(base)
