"""Auth Service — registration and login on top of the credential store.

Invariants:
    - Passwords shorter than the configured minimum are rejected before hashing
    - Passwords longer than bcrypt's 72-byte input are rejected at registration;
      at login they can never match and fail like any wrong password
    - Unknown username and wrong password produce the SAME UnauthenticatedError
    - An unknown username still costs one hash verification (no timing oracle)
    - Tokens are issued only after a successful password check
"""

import logging

from loantracker.core.domain_types import Identity, UserId
from loantracker.core.errors import InvalidInputError, UnauthenticatedError
from loantracker.core.repository_protocols import UserLike, UserRepository
from loantracker.core.token_service import TokenService
from loantracker.infrastructure.password_hasher import PasswordHasher

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"
USERNAME_MAX_LENGTH = 50
PASSWORD_MAX_BYTES = 72    # bcrypt ignores everything past this


class AuthService:
    def __init__(
        self,
        users: UserRepository,
        hasher: PasswordHasher,
        tokens: TokenService,
        password_min_length: int = 6,
    ):
        self._users = users
        self._hasher = hasher
        self._tokens = tokens
        self._password_min_length = password_min_length

    async def register(self, username: str, password: str) -> UserLike:
        username = _normalize_username(username)
        if len(password) < self._password_min_length:
            raise InvalidInputError(
                f"Password must be at least {self._password_min_length} characters long",
                field="password",
            )
        if _exceeds_hash_input(password):
            raise InvalidInputError(
                f"Password must be at most {PASSWORD_MAX_BYTES} bytes long",
                field="password",
            )
        user = await self._users.create(username, self._hasher.hash(password))
        logger.info("User registered", extra={"user_id": user.id, "username": username})
        return user

    async def login(self, username: str, password: str) -> tuple[str, Identity]:
        """Return (token, identity) or raise UnauthenticatedError."""
        user = await self._users.get_by_username(username.strip())
        if user is None:
            self._hasher.dummy_verify()
            logger.info("Login failed", extra={"reason": "unknown_user"})
            raise UnauthenticatedError(INVALID_CREDENTIALS)
        if _exceeds_hash_input(password):
            self._hasher.dummy_verify()
            logger.info(
                "Login failed",
                extra={"reason": "password_too_long", "user_id": user.id},
            )
            raise UnauthenticatedError(INVALID_CREDENTIALS)
        if not self._hasher.verify(password, user.password_hash):
            logger.info(
                "Login failed",
                extra={"reason": "bad_password", "user_id": user.id},
            )
            raise UnauthenticatedError(INVALID_CREDENTIALS)

        identity = Identity(user_id=UserId(user.id), username=user.username)
        logger.info("Login succeeded", extra={"user_id": user.id})
        return self._tokens.issue(identity), identity


def _exceeds_hash_input(password: str) -> bool:
    return len(password.encode("utf-8")) > PASSWORD_MAX_BYTES


def _normalize_username(username: str) -> str:
    username = username.strip()
    if not username:
        raise InvalidInputError("Username is required", field="username")
    if len(username) > USERNAME_MAX_LENGTH:
        raise InvalidInputError(
            f"Username must be at most {USERNAME_MAX_LENGTH} characters",
            field="username",
        )
    return username
