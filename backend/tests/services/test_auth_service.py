"""Auth Service — registration rules and login behaviour with an in-memory store."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

import pytest

from loantracker.core.errors import (
    ConflictError, InvalidInputError, UnauthenticatedError,
)
from loantracker.core.token_service import TokenService
from loantracker.infrastructure.password_hasher import PasswordHasher
from loantracker.services.auth_service import AuthService


@dataclass
class StoredUser:
    id: int
    username: str
    password_hash: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class InMemoryUsers:
    def __init__(self):
        self.rows: dict[str, StoredUser] = {}

    async def get_by_username(self, username):
        return self.rows.get(username)

    async def create(self, username, password_hash):
        if username in self.rows:
            raise ConflictError("Username already taken")
        user = StoredUser(len(self.rows) + 1, username, password_hash)
        self.rows[username] = user
        return user


class CountingHasher(PasswordHasher):
    def __init__(self):
        super().__init__(rounds=4)
        self.dummy_calls = 0

    def dummy_verify(self):
        self.dummy_calls += 1
        super().dummy_verify()


@pytest.fixture
def users():
    return InMemoryUsers()


@pytest.fixture
def hasher():
    return CountingHasher()


@pytest.fixture
def tokens():
    return TokenService("auth-service-test-secret")


@pytest.fixture
def auth(users, hasher, tokens):
    return AuthService(users, hasher, tokens, password_min_length=6)


async def test_register_stores_hash_not_password(auth, users):
    await auth.register("alice", "secret123")
    stored = users.rows["alice"]
    assert stored.password_hash != "secret123"
    assert stored.password_hash.startswith("$2")


async def test_register_duplicate_conflicts(auth):
    await auth.register("alice", "secret123")
    with pytest.raises(ConflictError):
        await auth.register("alice", "another-one")


async def test_register_minimum_length_boundary(auth):
    with pytest.raises(InvalidInputError):
        await auth.register("alice", "12345")
    user = await auth.register("alice", "123456")
    assert user.username == "alice"


async def test_register_rejects_overlong_username(auth):
    with pytest.raises(InvalidInputError):
        await auth.register("a" * 51, "secret123")


async def test_login_issues_verifiable_token(auth, tokens):
    registered = await auth.register("alice", "secret123")
    token, identity = await auth.login("alice", "secret123")
    assert identity.user_id == registered.id
    assert tokens.verify(token) == identity


async def test_login_wrong_password(auth):
    await auth.register("alice", "secret123")
    with pytest.raises(UnauthenticatedError) as exc_info:
        await auth.login("alice", "wrong-password")
    assert exc_info.value.message == "Invalid username or password"


async def test_login_unknown_user_runs_dummy_verify(auth, hasher):
    with pytest.raises(UnauthenticatedError) as exc_info:
        await auth.login("ghost", "secret123")
    assert exc_info.value.message == "Invalid username or password"
    assert hasher.dummy_calls == 1


def test_hasher_rejects_unrecognized_hash():
    assert PasswordHasher(rounds=4).verify("secret123", "not-a-hash") is False


async def test_register_password_byte_limit_boundary(auth):
    user = await auth.register("alice", "p" * 72)
    assert user.username == "alice"
    with pytest.raises(InvalidInputError) as exc_info:
        await auth.register("bob", "p" * 73)
    assert exc_info.value.context.field == "password"


async def test_register_limit_counts_utf8_bytes(auth):
    with pytest.raises(InvalidInputError):
        await auth.register("alice", "é" * 37)


async def test_login_rejects_password_sharing_first_72_bytes(auth, hasher):
    await auth.register("alice", "p" * 72)
    with pytest.raises(UnauthenticatedError) as exc_info:
        await auth.login("alice", "p" * 72 + "anything")
    assert exc_info.value.message == "Invalid username or password"
    assert hasher.dummy_calls == 1
