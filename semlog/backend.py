from __future__ import annotations

import logging
from typing import Any, Protocol

from semlog.errors import InvalidLevel
from semlog.levels import TRACE, Level, normalize_level, stdlib_level
from semlog.markers import ContextMarker

MARKER_RECORD_ATTR = "semlog_marker"

_EMIT_METHODS = {
    Level.TRACE: "trace",
    Level.DEBUG: "debug",
    Level.INFO: "info",
    Level.WARN: "warn",
    Level.ERROR: "error",
    Level.FATAL: "error",
}


class MarkerLogger(Protocol):
    """One emit call per level.

    ``stacklevel`` counts frames above the emit call, as in
    :meth:`logging.Logger.log`; backends without source locations ignore it.
    """

    def trace(self, marker: ContextMarker | None, message: str, throwable: BaseException | None = None, *, stacklevel: int = 1) -> None: ...

    def debug(self, marker: ContextMarker | None, message: str, throwable: BaseException | None = None, *, stacklevel: int = 1) -> None: ...

    def info(self, marker: ContextMarker | None, message: str, throwable: BaseException | None = None, *, stacklevel: int = 1) -> None: ...

    def warn(self, marker: ContextMarker | None, message: str, throwable: BaseException | None = None, *, stacklevel: int = 1) -> None: ...

    def error(self, marker: ContextMarker | None, message: str, throwable: BaseException | None = None, *, stacklevel: int = 1) -> None: ...


class LoggerFactory(Protocol):
    def get_logger(self, name: str) -> MarkerLogger: ...

    def enabled(self, handle: MarkerLogger, level: str) -> bool: ...


class StdlibMarkerLogger:
    """Per-level emit calls over a :class:`logging.Logger`.

    The marker rides on the ``LogRecord`` as ``semlog_marker`` and the
    throwable becomes ``exc_info``.
    """

    def __init__(self, logger: logging.Logger) -> None:
        self.logger = logger

    @property
    def name(self) -> str:
        return self.logger.name

    def trace(self, marker: ContextMarker | None, message: str, throwable: BaseException | None = None, *, stacklevel: int = 1) -> None:
        self._emit(TRACE, marker, message, throwable, stacklevel)

    def debug(self, marker: ContextMarker | None, message: str, throwable: BaseException | None = None, *, stacklevel: int = 1) -> None:
        self._emit(logging.DEBUG, marker, message, throwable, stacklevel)

    def info(self, marker: ContextMarker | None, message: str, throwable: BaseException | None = None, *, stacklevel: int = 1) -> None:
        self._emit(logging.INFO, marker, message, throwable, stacklevel)

    def warn(self, marker: ContextMarker | None, message: str, throwable: BaseException | None = None, *, stacklevel: int = 1) -> None:
        self._emit(logging.WARNING, marker, message, throwable, stacklevel)

    def error(self, marker: ContextMarker | None, message: str, throwable: BaseException | None = None, *, stacklevel: int = 1) -> None:
        self._emit(logging.ERROR, marker, message, throwable, stacklevel)

    def _emit(
        self,
        levelno: int,
        marker: ContextMarker | None,
        message: str,
        throwable: BaseException | None,
        stacklevel: int,
    ) -> None:
        extra = {MARKER_RECORD_ATTR: marker} if marker is not None else None
        # No args, so stdlib leaves the rendered message alone. The extra two
        # frames are _emit itself and the per-level method that called it.
        self.logger.log(levelno, message, exc_info=throwable, extra=extra, stacklevel=stacklevel + 2)

    def __repr__(self) -> str:
        return f"StdlibMarkerLogger({self.logger.name!r})"


class StdlibLoggerFactory:
    def get_logger(self, name: str) -> StdlibMarkerLogger:
        return StdlibMarkerLogger(logging.getLogger(name))

    def enabled(self, handle: StdlibMarkerLogger, level: str) -> bool:
        levelno = stdlib_level(level)
        if levelno is None:
            levelno = logging.getLevelNamesMapping().get(normalize_level(level).upper())
        if levelno is None:
            # Unknown everywhere: let the emit path reject it.
            return True
        return handle.logger.isEnabledFor(levelno)


def write_with_marker(
    handle: MarkerLogger,
    level: Any,
    throwable: BaseException | None,
    message: str,
    marker: ContextMarker | None,
    *,
    stacklevel: int = 1,
) -> None:
    method_name = _EMIT_METHODS.get(normalize_level(level))
    if method_name is None:
        raise InvalidLevel(level)
    emit = getattr(handle, method_name)
    emit(marker, str(message), throwable, stacklevel=stacklevel + 1)
