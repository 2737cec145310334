from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from semlog.encoding import JsonGenerator, WrapMode, write

MARKER_NAME = "SEMLOG_MAP"


class ContextMarker:
    """Carries a log call's context map to the structured encoder.

    The map is kept as given and only serialized when a formatter calls
    :meth:`write_to`, which merges its fields into the log object rather than
    nesting them under a key.
    """

    __slots__ = ("_context",)

    name = MARKER_NAME

    def __init__(self, context: Mapping[str, Any]) -> None:
        self._context = context

    @property
    def context(self) -> Mapping[str, Any]:
        return self._context

    def write_to(self, generator: JsonGenerator) -> None:
        write(generator, self._context, WrapMode.NONE)

    def __repr__(self) -> str:
        return f"ContextMarker({self._context!r})"


def build_marker(context: Mapping[str, Any]) -> ContextMarker:
    return ContextMarker(context)
