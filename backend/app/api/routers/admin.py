# app/api/routers/admin.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from tortoise.expressions import Q
from tortoise.transactions import in_transaction

from app.api.deps import require_operation
from app.core.access import Principal
from app.models.user import Role, User
from app.schemas.admin import AdminRoleUpdateIn, AdminUserDetailOut, AdminUserListOut

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/admin", tags=["admin"])


def _user_to_dict(u: User) -> dict:
    """
    Convert User model instance to dictionary format for API responses.
    """
    return {
        "id": u.id,
        "username": u.username,
        "email": u.email,
        "role": u.effective_role,
        "created_at": u.created_at.isoformat() if u.created_at else None,
    }


async def _lock_admin_ids() -> list[int]:
    """
    Ids of all admin users, locked for update in the current transaction.

    Note:
        Used to prevent demoting the last admin user.
    """
    return await User.filter(role=Role.ADMIN).select_for_update().values_list("id", flat=True)


@router.get("/users", response_model=AdminUserListOut)
async def list_users(
    q: str | None = Query(default=None, description="Fuzzy search by username/email"),
    offset: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    principal: Principal = Depends(require_operation("list_users")),
):
    """
    Get paginated list of all users (admin only), newest first.
    """
    qs = User.all().order_by("-created_at", "-id")
    if q:
        qs = qs.filter(Q(username__icontains=q) | Q(email__icontains=q))

    total = await qs.count()
    rows = await qs.offset(offset).limit(limit)
    return {"items": [_user_to_dict(u) for u in rows], "offset": offset, "limit": limit, "total": total}


@router.patch("/users/{user_id}/role", response_model=AdminUserDetailOut)
async def update_user_role(
    user_id: int,
    body: AdminRoleUpdateIn,
    principal: Principal = Depends(require_operation("update_user_role")),
):
    """
    Change a user's role (admin only).

    The change applies to the user's next request: roles are re-read on
    every authorization check, so existing tokens pick it up immediately.

    Raises:
        HTTPException (404): If the user does not exist
        HTTPException (400): If this would demote the last admin
    """
    async with in_transaction():
        u = await User.get_or_none(id=user_id)
        if not u:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="USER_NOT_FOUND")

        # Admin rows stay locked until commit, so two concurrent demotions cannot both see a second admin
        admin_ids = await _lock_admin_ids()
        if u.id in admin_ids and body.role is not Role.ADMIN and len(admin_ids) <= 1:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="CANNOT_DEMOTE_LAST_ADMIN")

        u.role = body.role
        await u.save(update_fields=["role"])
    logger.warning("[admin] role changed -> user=%s role=%s by=%s", u.username, u.role.value, principal.username)
    return {"user": _user_to_dict(u)}
