"""
Pydantic schemas for admin user management endpoints.
"""
from pydantic import BaseModel, Field
from typing import List, Optional

from app.models.user import Role


class AdminUserBase(BaseModel):
    """
    User information returned by admin endpoints (never includes the password hash).
    """
    id: int
    username: str
    email: str
    role: Role
    createdAt: Optional[str] = Field(default=None, alias="created_at")

    class Config:
        """Pydantic configuration: allow both field name and alias for population."""
        populate_by_name = True


class AdminUserListOut(BaseModel):
    items: List[AdminUserBase]
    offset: int
    limit: int
    total: int


class AdminUserDetailOut(BaseModel):
    user: AdminUserBase


class AdminRoleUpdateIn(BaseModel):
    role: Role
