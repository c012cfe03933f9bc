"""
Unit tests for services.authenticator.
Sign-in runs against an in-memory store; sign-up against the test database
through a store that records which lookups were made.
"""
from types import SimpleNamespace

import pytest
from tortoise.exceptions import IntegrityError

from app.core.errors import EmailTakenError, InvalidCredentialsError, UsernameTakenError
from app.core.security import extract_subject, hash_password, verify_password
from app.models.user import Role, User
from app.services.authenticator import Authenticator
from app.services.user_store import UserStore


class MemoryStore:
    def __init__(self, *users):
        self.users = {u.username: u for u in users}

    async def find_by_username(self, username):
        return self.users.get(username)


class RecordingStore(UserStore):
    def __init__(self):
        self.calls = []

    async def exists_by_username(self, username):
        self.calls.append(("exists_by_username", username))
        return await super().exists_by_username(username)

    async def exists_by_email(self, email):
        self.calls.append(("exists_by_email", email))
        return await super().exists_by_email(email)

    async def save(self, user):
        self.calls.append(("save", user.username))
        return await super().save(user)


def _stored_user(username="alice", password="pw", role=Role.MEMBER):
    return SimpleNamespace(
        id=7,
        username=username,
        email=f"{username}@example.com",
        password_hash=hash_password(password),
        role=role,
    )


class TestSignIn:
    @pytest.mark.asyncio
    async def test_success_issues_token_for_username(self):
        auth = Authenticator(MemoryStore(_stored_user()))
        result = await auth.sign_in("alice", "pw")
        assert result.id == 7
        assert result.username == "alice"
        assert result.email == "alice@example.com"
        assert result.role is Role.MEMBER
        assert extract_subject(result.access_token) == "alice"

    @pytest.mark.asyncio
    async def test_admin_role_is_reported(self):
        auth = Authenticator(MemoryStore(_stored_user("root", role=Role.ADMIN)))
        result = await auth.sign_in("root", "pw")
        assert result.role is Role.ADMIN

    @pytest.mark.asyncio
    async def test_missing_role_defaults_to_member(self):
        auth = Authenticator(MemoryStore(_stored_user(role=None)))
        result = await auth.sign_in("alice", "pw")
        assert result.role is Role.MEMBER

    @pytest.mark.asyncio
    async def test_unknown_user_and_wrong_password_are_indistinguishable(self):
        auth = Authenticator(MemoryStore(_stored_user()))
        with pytest.raises(InvalidCredentialsError) as unknown:
            await auth.sign_in("bob", "pw")
        with pytest.raises(InvalidCredentialsError) as wrong:
            await auth.sign_in("alice", "nope")
        assert type(unknown.value) is type(wrong.value)
        assert unknown.value.message == wrong.value.message
        assert unknown.value.status_code == wrong.value.status_code == 401


class TestSignUp:
    @pytest.mark.asyncio
    async def test_creates_member_with_hashed_password(self, db):
        store = RecordingStore()
        user = await Authenticator(store).sign_up("alice", "a@x.com", "pw")
        assert user.id is not None
        saved = await User.get(username="alice")
        assert saved.role is Role.MEMBER
        assert saved.email == "a@x.com"
        assert saved.password_hash != "pw"
        assert verify_password("pw", saved.password_hash)
        assert store.calls == [
            ("exists_by_username", "alice"),
            ("exists_by_email", "a@x.com"),
            ("save", "alice"),
        ]

    @pytest.mark.asyncio
    async def test_taken_username_short_circuits(self, db):
        await Authenticator().sign_up("alice", "a@x.com", "pw")
        store = RecordingStore()
        with pytest.raises(UsernameTakenError) as exc_info:
            await Authenticator(store).sign_up("alice", "other@x.com", "pw2")
        assert exc_info.value.message == "Error: Username is already taken!"
        assert store.calls == [("exists_by_username", "alice")]

    @pytest.mark.asyncio
    async def test_taken_username_wins_over_taken_email(self, db):
        await Authenticator().sign_up("alice", "a@x.com", "pw")
        with pytest.raises(UsernameTakenError):
            await Authenticator().sign_up("alice", "a@x.com", "pw")

    @pytest.mark.asyncio
    async def test_taken_email(self, db):
        await Authenticator().sign_up("alice", "a@x.com", "pw")
        store = RecordingStore()
        with pytest.raises(EmailTakenError) as exc_info:
            await Authenticator(store).sign_up("bob", "a@x.com", "pw")
        assert exc_info.value.message == "Error: Email is already in use!"
        assert ("save", "bob") not in store.calls
        assert await User.filter(username="bob").count() == 0

    @pytest.mark.asyncio
    async def test_race_on_unique_constraint_maps_to_username_taken(self, db):
        """Both signups pass the pre-checks; the database rejects the second."""

        class StaleStore(UserStore):
            checked = False

            async def exists_by_username(self, username):
                # stale on the pre-check, accurate on the re-check after the failed insert
                if not self.checked:
                    self.checked = True
                    return False
                return await super().exists_by_username(username)

            async def exists_by_email(self, email):
                return False

        await Authenticator().sign_up("alice", "a@x.com", "pw")
        with pytest.raises(UsernameTakenError) as exc_info:
            await Authenticator(StaleStore()).sign_up("alice", "b@x.com", "pw")
        assert isinstance(exc_info.value.__cause__, IntegrityError)

    @pytest.mark.asyncio
    async def test_race_on_email_constraint_maps_to_email_taken(self, db):
        class BlindStore(UserStore):
            async def exists_by_email(self, email):
                return False

        await Authenticator().sign_up("alice", "a@x.com", "pw")
        with pytest.raises(EmailTakenError):
            await Authenticator(BlindStore()).sign_up("bob", "a@x.com", "pw")

    @pytest.mark.asyncio
    async def test_signed_up_user_can_sign_in(self, db):
        auth = Authenticator()
        await auth.sign_up("alice", "a@x.com", "pw")
        result = await auth.sign_in("alice", "pw")
        assert result.role is Role.MEMBER
        assert extract_subject(result.access_token) == "alice"
