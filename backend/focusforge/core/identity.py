"""
Caller identity dependencies.

Token validation is done by the gateway in front of this service, which
forwards the user id in the X-User-Id header. CallerIdentityMiddleware reads
it into request.state.user; routes depend on require_caller().
"""

from typing import Optional

from fastapi import HTTPException, Request, status
from pydantic import BaseModel

USER_ID_HEADER = "X-User-Id"


class Caller(BaseModel):
    """Identity of the user making the request."""

    user_id: Optional[str] = None

    @property
    def is_identified(self) -> bool:
        return bool(self.user_id)


async def require_caller(request: Request) -> Caller:
    """
    Require an identified caller from request.state (populated by middleware).

    Raises 401 if the gateway did not forward a user id.

    Usage:
        @router.get("/protected")
        async def protected(caller: Caller = Depends(require_caller)):
            return {"user_id": caller.user_id}
    """
    caller = getattr(request.state, "user", None)

    if caller is None or not caller.is_identified:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing {USER_ID_HEADER} header",
        )

    return caller
