# app/api/deps.py
from fastapi import Header

from app.core.access import Decision, Principal, authorize, roles_for
from app.core.errors import ForbiddenError, UnauthenticatedError


def bearer_token(authorization: str | None = Header(default=None)) -> str | None:
    """
    FastAPI dependency returning the token from `Authorization: Bearer <token>`.

    Returns None when the header is absent or uses another scheme.
    """
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
        return token or None
    return None


def require_operation(operation: str):
    """
    Build a FastAPI dependency guarding the named operation.

    The allowed roles are looked up once, when the route is declared, so an
    unknown operation name fails at import time rather than per request.
    The dependency resolves to the caller's Principal.

    Raises (per request):
        UnauthenticatedError (401): No token, or token failed verification
        ForbiddenError (403): Caller's role is not allowed for `operation`

    Usage:
        @router.delete("/{task_id}")
        async def delete_task(task_id: int, principal: Principal = Depends(require_operation("delete_task"))):
            ...
    """
    required = roles_for(operation)

    async def dependency(authorization: str | None = Header(default=None)) -> Principal:
        result = await authorize(bearer_token(authorization), required)
        if result.decision is Decision.UNAUTHENTICATED:
            raise UnauthenticatedError()
        if result.decision is Decision.FORBIDDEN:
            raise ForbiddenError()
        return result.principal

    dependency.__name__ = f"require_{operation}"
    return dependency
