"""HTTP middleware: origin allow-list enforcement and request correlation."""

import time
from typing import Iterable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from ..modules.common.exceptions import CorsRejectedError
from ..modules.common.utils.error_handler import error_response
from .logging import generate_correlation_id, get_logger, reset_correlation_id, set_correlation_id

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class OriginAllowListMiddleware(BaseHTTPMiddleware):
    """Reject requests whose ``Origin`` header is not on the allow-list.

    ``CORSMiddleware`` only withholds the CORS response headers, so the
    browser hides the response but the handler still runs. This middleware
    refuses the request outright with 403. Requests without an ``Origin``
    (same-origin navigation, curl, server-to-server) are let through, and
    only paths under ``path_prefix`` are checked.
    """

    def __init__(self, app: ASGIApp, allow_origins: Iterable[str], path_prefix: str = "/api") -> None:
        super().__init__(app)
        self.allow_origins = {origin.rstrip("/") for origin in allow_origins}
        self.allow_all = "*" in self.allow_origins
        self.path_prefix = path_prefix.rstrip("/")

    def is_allowed(self, origin: str) -> bool:
        return self.allow_all or origin.rstrip("/") in self.allow_origins

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        origin = request.headers.get("origin")
        path = request.url.path
        in_scope = path == self.path_prefix or path.startswith(self.path_prefix + "/")

        if origin and in_scope and not self.is_allowed(origin):
            logger.warning("Rejected request from disallowed origin", extra={"origin": origin, "path": path})
            return error_response(CorsRejectedError("Not allowed by CORS"))

        return await call_next(request)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind a correlation id to every request and echo it back.

    The id comes from the incoming ``X-Request-ID`` header when present,
    otherwise a new one is generated.
    """

    def __init__(self, app: ASGIApp, log_timing: bool = False) -> None:
        super().__init__(app)
        self.log_timing = log_timing

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_correlation_id()
        token = set_correlation_id(request_id)
        start = time.perf_counter()
        try:
            response = await call_next(request)
            if self.log_timing:
                duration_ms = (time.perf_counter() - start) * 1000
                logger.info(
                    f"{request.method} {request.url.path} -> {response.status_code}",
                    extra={"status_code": response.status_code, "duration_ms": round(duration_ms, 1)},
                )
            response.headers.setdefault(REQUEST_ID_HEADER, request_id)
            return response
        finally:
            reset_correlation_id(token)
