"""
Request middleware: correlation ids, caller identity and access logging.

Order in main.py: CorrelationIDMiddleware is outermost so every log line of a
request, including the access line, carries the same id.
"""

import logging
import time
import uuid
from contextvars import ContextVar

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from focusforge.core.identity import USER_ID_HEADER, Caller

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_ID_HEADER = "X-Correlation-ID"
UNLOGGED_PATHS = frozenset({"/health", "/health/redis"})

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    return correlation_id_var.get()


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's X-Request-ID (or X-Correlation-ID), else mint one; echo it back."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        correlation_id = (
            request.headers.get(REQUEST_ID_HEADER)
            or request.headers.get(CORRELATION_ID_HEADER)
            or uuid.uuid4().hex
        )
        request.state.correlation_id = correlation_id
        token = correlation_id_var.set(correlation_id)
        started = time.perf_counter()

        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = correlation_id
            if request.url.path not in UNLOGGED_PATHS:
                logger.info(
                    "%s %s -> %d (%.1f ms)",
                    request.method,
                    request.url.path,
                    response.status_code,
                    (time.perf_counter() - started) * 1000,
                    extra={
                        "method": request.method,
                        "path": request.url.path,
                        "status_code": response.status_code,
                    },
                )
            return response
        finally:
            correlation_id_var.reset(token)


class CallerIdentityMiddleware(BaseHTTPMiddleware):
    """
    Set request.state.user from the gateway's X-User-Id header.

    The gateway has already authenticated the user. A missing or blank header
    yields an anonymous Caller; routes that need a user depend on
    require_caller, which turns that into a 401.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        user_id = (request.headers.get(USER_ID_HEADER) or "").strip() or None
        request.state.user = Caller(user_id=user_id)
        return await call_next(request)
