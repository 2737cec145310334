from __future__ import annotations


class SemlogError(Exception):
    """Base class for errors raised by semlog."""


class InvalidContextKey(SemlogError, ValueError):
    """A context map key is not identifier-shaped."""

    def __init__(self, key: object) -> None:
        super().__init__(f"context key must match [A-Za-z0-9_]+, got {key!r}")
        self.key = key


class InvalidLevel(SemlogError, ValueError):
    """Level is not one of trace, debug, info, warn, error or fatal."""

    def __init__(self, level: object) -> None:
        super().__init__(str(level))
        self.level = level


class MissingPlaceholderKey(SemlogError, KeyError):
    """Template references a key that the context map does not contain."""

    def __init__(self, key: str, template: str) -> None:
        super().__init__(key)
        self.key = key
        self.template = template

    def __str__(self) -> str:
        return f"placeholder {{{self.key}}} has no value in context map"


class EncoderFailure(SemlogError, TypeError):
    """A context value could not be serialized."""

    def __init__(self, field: str, value: object) -> None:
        super().__init__(f"cannot encode field {field!r} of type {type(value).__name__}")
        self.field = field
        self.value = value
