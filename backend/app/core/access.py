# app/core/access.py
"""
Role-based access control.

Every guarded operation is listed in OPERATION_ROLES with the roles allowed
to call it. `authorize` turns (token, allowed roles) into exactly one of
ALLOW, UNAUTHENTICATED or FORBIDDEN. The reason a token was rejected
(malformed / invalid / expired) is logged here and never returned to callers.

The role is re-read from the user store on every request; tokens carry only
the username. A role change therefore applies to the very next request.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Awaitable, Callable, Iterable, Mapping

from app.core.security import TokenError, extract_subject
from app.models.user import Role
from app.services.user_store import UserStore

logger = logging.getLogger("uvicorn.error")

ANY_USER = frozenset({Role.MEMBER, Role.ADMIN})
ADMIN_ONLY = frozenset({Role.ADMIN})

OPERATION_ROLES: Mapping[str, frozenset[Role]] = MappingProxyType({
    "list_tasks": ANY_USER,
    "get_task": ANY_USER,
    "create_task": ANY_USER,
    "update_task": ANY_USER,
    "delete_task": ADMIN_ONLY,
    "list_users": ADMIN_ONLY,
    "update_user_role": ADMIN_ONLY,
})


class Decision(str, Enum):
    ALLOW = "allow"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class Principal:
    """Identity and role of the caller for the duration of one request."""
    id: int
    username: str
    email: str
    role: Role


@dataclass(frozen=True)
class AccessResult:
    decision: Decision
    principal: Principal | None = None
    reason: str | None = None  # log-only detail, never sent to the client

    @property
    def allowed(self) -> bool:
        return self.decision is Decision.ALLOW


PrincipalResolver = Callable[[str], Awaitable[Principal | None]]


async def load_principal(username: str) -> Principal | None:
    """Build a Principal from the current user record, or None if it is gone."""
    user = await UserStore().find_by_username(username)
    if user is None:
        return None
    return Principal(id=user.id, username=user.username, email=user.email, role=user.effective_role)


def roles_for(operation: str) -> frozenset[Role]:
    """
    Allowed roles for a named operation.

    Raises:
        KeyError: If the operation is not registered in OPERATION_ROLES
    """
    return OPERATION_ROLES[operation]


async def authorize(
    token: str | None,
    required_roles: Iterable[Role],
    resolve_principal: PrincipalResolver = load_principal,
) -> AccessResult:
    """
    Decide whether the bearer of `token` may perform an operation needing `required_roles`.

    Returns:
        AccessResult with decision ALLOW (and the principal), UNAUTHENTICATED
        (no token, bad token, or the subject no longer exists) or FORBIDDEN
        (valid identity, role not in `required_roles`)
    """
    if not token:
        return AccessResult(Decision.UNAUTHENTICATED, reason="missing")

    try:
        username = extract_subject(token)
    except TokenError as exc:
        logger.info("[access] token rejected: kind=%s detail=%s", exc.kind, exc)
        return AccessResult(Decision.UNAUTHENTICATED, reason=exc.kind)

    principal = await resolve_principal(username)
    if principal is None:
        logger.info("[access] token subject no longer exists: username=%s", username)
        return AccessResult(Decision.UNAUTHENTICATED, reason="unknown-subject")

    if principal.role not in frozenset(required_roles):
        return AccessResult(Decision.FORBIDDEN, principal=principal, reason="role")

    return AccessResult(Decision.ALLOW, principal=principal)
