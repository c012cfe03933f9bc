# app/services/authenticator.py
"""
Sign-in and sign-up.

Sign-in verifies a username/password pair and issues an access token.
Sign-up enforces username and email uniqueness and stores a new MEMBER
account; it never issues a token, the caller signs in afterwards.
"""
import logging
from dataclasses import dataclass

from tortoise.exceptions import IntegrityError

from app.core.errors import EmailTakenError, InvalidCredentialsError, UsernameTakenError
from app.core.security import (
    DUMMY_PASSWORD_HASH,
    create_access_token,
    hash_password,
    verify_password,
)
from app.models.user import Role, User
from app.services.user_store import UserStore

logger = logging.getLogger("uvicorn.error")


@dataclass(frozen=True)
class SignInResult:
    access_token: str
    id: int
    username: str
    email: str
    role: Role


class Authenticator:
    def __init__(self, store: UserStore | None = None):
        self.store = store or UserStore()

    async def sign_in(self, username: str, password: str) -> SignInResult:
        """
        Verify credentials and issue an access token.

        Raises:
            InvalidCredentialsError: Unknown username or wrong password (same
                error and message for both)
        """
        user = await self.store.find_by_username(username)
        if user is None:
            # Run the hash anyway so timing does not reveal unknown usernames
            verify_password(password, DUMMY_PASSWORD_HASH)
            logger.info("[auth] sign-in rejected for username=%s", username)
            raise InvalidCredentialsError()
        if not verify_password(password, user.password_hash):
            logger.info("[auth] sign-in rejected for username=%s", username)
            raise InvalidCredentialsError()

        role = user.role or Role.MEMBER
        token = create_access_token(user.username)
        return SignInResult(
            access_token=token,
            id=user.id,
            username=user.username,
            email=user.email,
            role=role,
        )

    async def sign_up(self, username: str, email: str, password: str) -> User:
        """
        Register a new MEMBER account.

        Username is checked before email; the first conflict wins and the
        other field is not looked at.

        Raises:
            UsernameTakenError: Username already registered
            EmailTakenError: Email already registered
        """
        if await self.store.exists_by_username(username):
            raise UsernameTakenError()
        if await self.store.exists_by_email(email):
            raise EmailTakenError()

        user = User(
            username=username,
            email=email,
            password_hash=hash_password(password),
            role=Role.MEMBER,
        )
        try:
            await self.store.save(user)
        except IntegrityError as exc:
            # A concurrent signup won the race; the unique constraint caught it
            if await self.store.exists_by_username(username):
                raise UsernameTakenError() from exc
            raise EmailTakenError() from exc
        logger.info("[auth] registered username=%s id=%s", user.username, user.id)
        return user
