from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest

from semlog.core import StructuredLogger
from semlog.logging_context import reset_request_id, set_request_id
from tests.helpers import RecordingLoggerFactory


@pytest.fixture
def factory() -> RecordingLoggerFactory:
    return RecordingLoggerFactory()


@pytest.fixture
def factory_with_levels() -> Callable[..., RecordingLoggerFactory]:
    return lambda *levels: RecordingLoggerFactory(enabled_levels=levels)


@pytest.fixture
def structured_logger(factory: RecordingLoggerFactory) -> StructuredLogger:
    return StructuredLogger("tests.app", factory=factory, strict_placeholders=False)


@pytest.fixture
def request_id() -> Iterator[str]:
    token = set_request_id("req-test-1")
    try:
        yield "req-test-1"
    finally:
        reset_request_id(token)
