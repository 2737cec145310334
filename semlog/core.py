"""Structured log calls: ``maplog`` and friends.

``maplog`` logs an event with a context map attached to the record as a
:class:`~semlog.markers.ContextMarker`. Braced references like ``{status}``
in the message template are expanded from the map, then the result is
``%``-formatted with any extra positional arguments; arguments beyond those
the directives use are ignored. Expanded values are percent-escaped first,
so their content is never read as a format directive.

The first argument is either a level (``"info"``, ``Level.WARN``) or a
``(logger_id, level)`` pair naming a custom logger::

    log = get_logger(__name__)
    log.maplog("info", {"status": 200}, "Received success status {status}")
    log.maplog(("sync", "warn"), {"remote": remote, "response": response},
               "Failed to pull record from remote {remote}. Response: status {status}")
    log.maplog(("sync", "info"), {"remote": remote},
               "Finished pull from {remote} in %s seconds", sync_time)
    log.maplog_fn("info", {"status": 200}, lambda ctx: f"Received success status {ctx['status']}")

An exception may be passed right after the level. Nothing is rendered, and
no message generator is called, unless the target logger is enabled for the
level.

Like ``logging.Logger.log``, every call takes a keyword-only ``stacklevel`` so
wrappers can report their own caller as the source location.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
import re
import sys
from typing import Any, overload

from semlog.backend import LoggerFactory, MarkerLogger, StdlibLoggerFactory, write_with_marker
from semlog.interpolation import escaped_context, interpolate
from semlog.levels import logger_id, resolve_selector
from semlog.markers import build_marker
from semlog.settings import settings

MessageGenerator = Callable[[Mapping[str, Any]], str]

_DIRECTIVE_RE = re.compile(
    r"%(?:\((?P<key>[^)]*)\))?[#0+\- ]*(?P<width>\*|\d+)?(?:\.(?P<precision>\*|\d+))?[hlL]?(?P<conversion>.)",
    re.DOTALL,
)

_default_factory = StdlibLoggerFactory()


def default_factory() -> LoggerFactory:
    return _default_factory


def resolve_logger(factory: LoggerFactory, name: Any) -> MarkerLogger:
    return factory.get_logger(logger_id(name))


def render_message(
    template: str,
    context: Mapping[str, Any],
    format_args: Sequence[Any] = (),
    *,
    strict: bool = False,
) -> str:
    interpolated = interpolate(template, escaped_context(context), strict=strict)
    return format_positional(interpolated, format_args)


def format_positional(fmt: str, args: Sequence[Any] = ()) -> str:
    """Apply ``%``-formatting, ignoring arguments beyond those the directives use.

    Too few arguments still raise ``TypeError``.
    """
    needed = 0
    for match in _DIRECTIVE_RE.finditer(fmt):
        if match.group("conversion") == "%":
            continue
        needed += 1 + (match.group("width") == "*") + (match.group("precision") == "*")
    return fmt % tuple(args[:needed])


def _split_throwable(args: tuple[Any, ...], min_rest: int) -> tuple[BaseException | None, tuple[Any, ...]]:
    if len(args) > min_rest and isinstance(args[0], BaseException):
        return args[0], args[1:]
    return None, args


class StructuredLogger:
    def __init__(
        self,
        name: str,
        *,
        factory: LoggerFactory | None = None,
        strict_placeholders: bool | None = None,
    ) -> None:
        self.name = logger_id(name)
        self._factory = factory if factory is not None else default_factory()
        self._strict_placeholders = (
            settings.strict_placeholders if strict_placeholders is None else strict_placeholders
        )

    @property
    def factory(self) -> LoggerFactory:
        return self._factory

    @overload
    def maplog(self, level_or_pair: Any, context: Mapping[str, Any], template: str, /, *format_args: Any, stacklevel: int = 1) -> None: ...

    @overload
    def maplog(
        self,
        level_or_pair: Any,
        throwable: BaseException,
        context: Mapping[str, Any],
        template: str,
        /,
        *format_args: Any,
        stacklevel: int = 1,
    ) -> None: ...

    def maplog(self, level_or_pair: Any, /, *args: Any, stacklevel: int = 1) -> None:
        throwable, rest = _split_throwable(args, 2)
        if len(rest) < 2:
            raise TypeError("maplog() takes a context map and a message template")
        context, template, *format_args = rest
        if not isinstance(template, str):
            raise TypeError(
                f"maplog() message must be a str template, got {type(template).__name__}; "
                "use maplog_fn() for message generators"
            )

        selector = resolve_selector(level_or_pair, self.name)
        handle = resolve_logger(self._factory, selector.logger_name)
        if not self._factory.enabled(handle, selector.level):
            return

        message = render_message(template, context, format_args, strict=self._strict_placeholders)
        write_with_marker(handle, selector.level, throwable, message, build_marker(context), stacklevel=stacklevel + 1)

    @overload
    def maplog_fn(self, level_or_pair: Any, context: Mapping[str, Any], generator: MessageGenerator, /, *, stacklevel: int = 1) -> None: ...

    @overload
    def maplog_fn(
        self,
        level_or_pair: Any,
        throwable: BaseException,
        context: Mapping[str, Any],
        generator: MessageGenerator,
        /,
        *,
        stacklevel: int = 1,
    ) -> None: ...

    def maplog_fn(self, level_or_pair: Any, /, *args: Any, stacklevel: int = 1) -> None:
        """Like :meth:`maplog`, but the message is ``generator(context)``."""
        throwable, rest = _split_throwable(args, 2)
        if len(rest) != 2:
            raise TypeError("maplog_fn() takes a context map and a message generator")
        context, generator = rest
        if not callable(generator):
            raise TypeError(f"maplog_fn() generator must be callable, got {type(generator).__name__}")

        selector = resolve_selector(level_or_pair, self.name)
        handle = resolve_logger(self._factory, selector.logger_name)
        if not self._factory.enabled(handle, selector.level):
            return

        message = generator(context)
        write_with_marker(handle, selector.level, throwable, message, build_marker(context), stacklevel=stacklevel + 1)

    def logp(self, level_or_pair: Any, /, *args: Any, stacklevel: int = 1) -> None:
        """Print-style log call: arguments are joined with single spaces."""
        throwable, parts = _split_throwable(args, 1)
        selector = resolve_selector(level_or_pair, self.name)
        handle = resolve_logger(self._factory, selector.logger_name)
        if not self._factory.enabled(handle, selector.level):
            return
        message = " ".join(str(part) for part in parts)
        write_with_marker(handle, selector.level, throwable, message, None, stacklevel=stacklevel + 1)

    def logf(self, level_or_pair: Any, /, *args: Any, stacklevel: int = 1) -> None:
        """``%``-format log call: ``logf(level, [throwable,] fmt, *fmt_args)``."""
        throwable, rest = _split_throwable(args, 1)
        if not rest:
            raise TypeError("logf() takes a format string")
        fmt, *fmt_args = rest
        selector = resolve_selector(level_or_pair, self.name)
        handle = resolve_logger(self._factory, selector.logger_name)
        if not self._factory.enabled(handle, selector.level):
            return
        message = format_positional(str(fmt), fmt_args)
        write_with_marker(handle, selector.level, throwable, message, None, stacklevel=stacklevel + 1)

    def __repr__(self) -> str:
        return f"StructuredLogger({self.name!r})"


def _caller_module(depth: int = 2) -> str:
    return sys._getframe(depth).f_globals.get("__name__", settings.default_logger_name)


def get_logger(name: Any = None, **kwargs: Any) -> StructuredLogger:
    if name is None:
        name = _caller_module()
    return StructuredLogger(name, **kwargs)


# Module-level shortcuts; the calling module's name is the default logger.


def maplog(level_or_pair: Any, /, *args: Any) -> None:
    StructuredLogger(_caller_module()).maplog(level_or_pair, *args, stacklevel=2)


def maplog_fn(level_or_pair: Any, /, *args: Any) -> None:
    StructuredLogger(_caller_module()).maplog_fn(level_or_pair, *args, stacklevel=2)


def logp(level_or_pair: Any, /, *args: Any) -> None:
    StructuredLogger(_caller_module()).logp(level_or_pair, *args, stacklevel=2)


def logf(level_or_pair: Any, /, *args: Any) -> None:
    StructuredLogger(_caller_module()).logf(level_or_pair, *args, stacklevel=2)
