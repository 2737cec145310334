from __future__ import annotations

from secrets import token_urlsafe
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from semlog.core import StructuredLogger
from semlog.logging_context import request_context
from semlog.settings import Settings, settings

REQUEST_ID_HEADER = "X-Request-ID"

log = StructuredLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app,
        *,
        log_requests: bool = True,
        skip_paths: tuple[str, ...] = (),
        logger: StructuredLogger | None = None,
    ) -> None:
        super().__init__(app)
        self._log_requests = log_requests
        self._skip_paths = tuple(path for path in skip_paths if path)
        self._log = logger if logger is not None else log

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or token_urlsafe(12)
        request.state.request_id = request_id

        with request_context(request_id):
            start = time.perf_counter()
            should_log = self._log_requests and not self._is_skipped_path(request.url.path)
            if should_log:
                self._log.maplog(
                    "debug",
                    {"method": request.method, "path": request.url.path},
                    "{method} {path} started",
                )

            try:
                response = await call_next(request)
            except Exception as exc:
                duration_ms = int((time.perf_counter() - start) * 1000)
                self._log.maplog(
                    "error",
                    exc,
                    {
                        "method": request.method,
                        "path": request.url.path,
                        "duration_ms": duration_ms,
                    },
                    "{method} {path} failed after {duration_ms}ms",
                )
                raise

            duration_ms = int((time.perf_counter() - start) * 1000)
            response.headers[REQUEST_ID_HEADER] = request_id
            if should_log:
                self._log.maplog(
                    "info",
                    {
                        "method": request.method,
                        "path": request.url.path,
                        "status_code": response.status_code,
                        "duration_ms": duration_ms,
                    },
                    "{method} {path} completed with {status_code} in {duration_ms}ms",
                )
            return response

    def _is_skipped_path(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self._skip_paths)


def parse_skip_paths(raw_value: str) -> tuple[str, ...]:
    parts = [part.strip() for part in raw_value.split(",")]
    return tuple(part for part in parts if part)


def add_request_logging(app, config: Settings = settings) -> None:
    app.add_middleware(
        RequestLoggingMiddleware,
        log_requests=config.log_requests,
        skip_paths=parse_skip_paths(config.log_request_skip_paths),
    )
