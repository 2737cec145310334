from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token

_request_id_var: ContextVar[str | None] = ContextVar("semlog_request_id", default=None)


def get_request_id() -> str | None:
    return _request_id_var.get()


def set_request_id(value: str | None) -> Token[str | None]:
    return _request_id_var.set(value)


def reset_request_id(token: Token[str | None]) -> None:
    _request_id_var.reset(token)


@contextmanager
def request_context(request_id: str | None) -> Iterator[str | None]:
    """Tag every record emitted inside the block with ``request_id``."""
    token = set_request_id(request_id)
    try:
        yield request_id
    finally:
        reset_request_id(token)
