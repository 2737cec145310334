"""Braced ``{key}`` interpolation of log templates from a context map.

Example::

    >>> interpolate("{animal} is eating his good {meal}!", {"animal": "Bunny", "meal": "supper"})
    'Bunny is eating his good supper!'

The rendered string is later run through ``%``-formatting with the call's
positional arguments, so values are escaped with :func:`escaped_context`
before interpolation.
"""

from __future__ import annotations

from collections.abc import Mapping
import re
from typing import Any

from semlog.errors import InvalidContextKey, MissingPlaceholderKey

PLACEHOLDER_RE = re.compile(r"\{([A-Za-z0-9_]+)\}")
CONTEXT_KEY_RE = re.compile(r"^[A-Za-z0-9_]+$")


def validate_context_keys(context: Mapping[Any, Any]) -> None:
    for key in context:
        if not isinstance(key, str) or not CONTEXT_KEY_RE.fullmatch(key):
            raise InvalidContextKey(key)


def stringify(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def escape_for_format(value: Any) -> str:
    return stringify(value).replace("%", "%%")


def escaped_context(context: Mapping[str, Any]) -> dict[str, str]:
    return {key: escape_for_format(value) for key, value in context.items()}


def placeholder_keys(template: str) -> tuple[str, ...]:
    return tuple(PLACEHOLDER_RE.findall(template))


def interpolate(template: str, context: Mapping[str, Any], *, strict: bool = False) -> str:
    """Replace every ``{key}`` in ``template`` with ``context[key]``.

    Keys absent from ``context`` render as the empty string, or raise
    :class:`MissingPlaceholderKey` when ``strict`` is set. Braces that do not
    enclose a bare identifier are kept as literal text.
    """
    validate_context_keys(context)
    if strict:
        for key in placeholder_keys(template):
            if key not in context:
                raise MissingPlaceholderKey(key, template)

    def _substitute(match: re.Match[str]) -> str:
        return stringify(context.get(match.group(1)))

    return PLACEHOLDER_RE.sub(_substitute, template)
