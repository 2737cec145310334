from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, StrEnum
import logging
from typing import Any

TRACE = 5
logging.addLevelName(TRACE, "TRACE")


class Level(StrEnum):
    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"


_STDLIB_LEVELS = {
    Level.TRACE: TRACE,
    Level.DEBUG: logging.DEBUG,
    Level.INFO: logging.INFO,
    Level.WARN: logging.WARNING,
    Level.ERROR: logging.ERROR,
    # No dedicated fatal sink; shares the error call.
    Level.FATAL: logging.ERROR,
}


@dataclass(frozen=True)
class LevelSelector:
    logger_name: str | None
    level: str


def normalize_level(level: Any) -> str:
    if isinstance(level, Enum):
        level = level.value
    return str(level).strip().lower()


def logger_id(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def resolve_selector(level_or_pair: Any, default_name: str | None) -> LevelSelector:
    """Split a level or a ``(logger_id, level)`` pair into a selector.

    The level is normalized but not validated; an unknown level only fails
    once an enabled logger tries to emit it.
    """
    if isinstance(level_or_pair, (tuple, list)):
        if len(level_or_pair) != 2:
            raise ValueError(
                f"logger/level pair must have exactly two items, got {level_or_pair!r}"
            )
        name, level = level_or_pair
        return LevelSelector(logger_name=logger_id(name), level=normalize_level(level))
    return LevelSelector(logger_name=default_name, level=normalize_level(level_or_pair))


def parse_level(level: Any) -> Level | None:
    try:
        return Level(normalize_level(level))
    except ValueError:
        return None


def stdlib_level(level: Any) -> int | None:
    parsed = parse_level(level)
    if parsed is None:
        return None
    return _STDLIB_LEVELS[parsed]
