# app/services/user_store.py
"""
Credential store: the persistence operations the authentication code needs.
Route and service code go through this class instead of querying User directly,
so the authenticator can be exercised against any object with the same methods.
"""
from app.models.user import User


class UserStore:
    """Tortoise-backed lookups and writes for User records."""

    async def find_by_username(self, username: str) -> User | None:
        return await User.get_or_none(username=username)

    async def exists_by_username(self, username: str) -> bool:
        return await User.filter(username=username).exists()

    async def exists_by_email(self, email: str) -> bool:
        return await User.filter(email=email).exists()

    async def save(self, user: User) -> User:
        """
        Insert or update a user.

        Raises:
            tortoise.exceptions.IntegrityError: If username or email collides
                with an existing row
        """
        await user.save()
        return user
