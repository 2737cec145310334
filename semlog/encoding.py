"""Streaming JSON writer used by the formatters and by context markers.

Members are written straight into the open object, so a marker can
merge its map at the top level of a log line built by someone else.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import StrEnum
import json
from typing import Any, TextIO

from semlog.errors import EncoderFailure

REDACTED = "[REDACTED]"


class WrapMode(StrEnum):
    OBJECT = "object"
    NONE = "none"


class JsonGenerator:
    def __init__(self, stream: TextIO, *, redact_fields: Iterable[str] = ()) -> None:
        self._stream = stream
        self._redact_fields = {field.lower() for field in redact_fields}
        self._in_object = False
        self._has_members = False

    @property
    def in_object(self) -> bool:
        return self._in_object

    def start_object(self) -> None:
        if self._in_object:
            raise RuntimeError("nested objects are written as field values")
        self._stream.write("{")
        self._in_object = True
        self._has_members = False

    def end_object(self) -> None:
        if not self._in_object:
            raise RuntimeError("no open object to close")
        self._stream.write("}")
        self._in_object = False

    def write_field(self, name: Any, value: Any) -> None:
        if not self._in_object:
            raise RuntimeError("write_field called outside of an object")
        key = str(name)
        # Encode before touching the stream so a failure leaves no partial member.
        encoded = self._encode(key, self._redact_value(key, value))
        if self._has_members:
            self._stream.write(",")
        self._stream.write(json.dumps(key, ensure_ascii=True))
        self._stream.write(":")
        self._stream.write(encoded)
        self._has_members = True

    def _encode(self, key: str, value: Any) -> str:
        try:
            return json.dumps(value, ensure_ascii=True)
        except (TypeError, ValueError) as exc:
            raise EncoderFailure(key, value) from exc

    def _redact_value(self, key: str, value: Any) -> Any:
        if key.lower() in self._redact_fields:
            return REDACTED
        if isinstance(value, Mapping):
            return {
                nested_key: self._redact_value(str(nested_key), nested_value)
                for nested_key, nested_value in value.items()
            }
        if isinstance(value, (list, tuple)):
            return [self._redact_value(key, item) for item in value]
        return value


def write(generator: JsonGenerator, mapping: Mapping[Any, Any], wrap: WrapMode = WrapMode.OBJECT) -> None:
    """Write ``mapping`` through ``generator``.

    ``WrapMode.OBJECT`` emits a complete object. ``WrapMode.NONE`` emits only
    the members, merged into the object the generator currently has open.
    """
    if wrap is WrapMode.OBJECT:
        generator.start_object()
    for key, value in mapping.items():
        generator.write_field(key, value)
    if wrap is WrapMode.OBJECT:
        generator.end_object()
