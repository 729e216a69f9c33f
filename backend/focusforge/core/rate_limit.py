"""
Rate limiting with slowapi, stored in Redis so all API workers share counters.

Requests arrive through the gateway, so the key is the forwarded caller id,
or the original client address from X-Forwarded-For for anonymous routes.
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded

from focusforge.core.config import get_settings

FORWARDED_FOR_HEADER = "X-Forwarded-For"


def _client_address(request: Request) -> str:
    forwarded = request.headers.get(FORWARDED_FOR_HEADER, "")
    first_hop = forwarded.split(",")[0].strip()
    if first_hop:
        return first_hop
    return request.client.host if request.client else "unknown"


def _get_rate_limit_key(request: Request) -> str:
    """Key as user:{user_id} for identified callers, ip:{address} otherwise."""
    caller = getattr(request.state, "user", None)
    if caller is not None and getattr(caller, "user_id", None):
        return f"user:{caller.user_id}"
    return f"ip:{_client_address(request)}"


limiter = Limiter(
    key_func=_get_rate_limit_key,
    default_limits=[get_settings().rate_limit_default],
    enabled=get_settings().rate_limit_enabled,
    storage_uri=get_settings().redis_url,
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 in the same {detail, code} shape as domain errors."""
    return JSONResponse(
        status_code=429,
        content={
            "detail": "Rate limit exceeded. Please try again later.",
            "code": "RATE_LIMIT_EXCEEDED",
        },
    )
