# app/models/user.py
"""
Database model for users.
Represents an account that can sign in, with its credentials and role.
"""
from enum import Enum
from tortoise import fields, models


class Role(str, Enum):
    """Coarse permission tiers gating which operations a user may invoke."""
    MEMBER = "MEMBER"
    ADMIN = "ADMIN"


class User(models.Model):
    """
    User database model.

    Security:
    - Password is stored as an Argon2 hash (never plain text, never returned by the API)
    - Username and email are unique; the database constraint is the final word
      when two signups race past the application-level checks
    - A NULL role is treated as MEMBER
    """
    id = fields.IntField(pk=True)  # Auto-increment primary key
    username = fields.CharField(max_length=256, unique=True, index=True)  # Login name, immutable after creation
    email = fields.CharField(max_length=256, unique=True)
    password_hash = fields.CharField(max_length=255)
    role = fields.CharEnumField(Role, max_length=16, null=True, default=Role.MEMBER)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"

    @property
    def effective_role(self) -> Role:
        return self.role or Role.MEMBER
