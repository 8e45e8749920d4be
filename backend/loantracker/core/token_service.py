"""Token Service — issues and verifies signed, time-limited bearer tokens.

Invariants:
    - Tokens are stateless: validity depends only on signature and expiry
    - exp is exactly ttl seconds after iat (default 3600); both keep the
      clock's sub-second precision, so the lifetime is never shortened
    - A token is valid AT its expiry instant; one tick past it is expired
    - Signature is checked before any claim is trusted
    - verify() returns the embedded identity unchanged

Design Decisions:
    - PyJWT with HS256: same stack as the rest of the auth layer
    - Expiry checked here, not by PyJWT: PyJWT rejects tokens at exp (<=), and the clock
      must be injectable for boundary tests
    - No refresh, rotation or revocation list: logout is purely client-side
"""

from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt

from loantracker.core.domain_types import Identity, UserId


class TokenVerificationError(Exception):
    """Base class for every reason a token is rejected."""
    reason = "invalid"


class MalformedTokenError(TokenVerificationError):
    reason = "malformed"


class ExpiredTokenError(TokenVerificationError):
    reason = "expired"


class BadSignatureError(TokenVerificationError):
    reason = "bad_signature"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Signs identity claims into JWTs and checks them on the way back in."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = _utc_now,
    ):
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl_seconds = ttl.total_seconds()
        self._clock = clock

    def issue(self, identity: Identity) -> str:
        """Sign identity claims with an absolute expiry ttl after now."""
        issued_at = self._clock().timestamp()
        claims = {
            "sub": str(identity.user_id),
            "username": identity.username,
            "iat": issued_at,
            "exp": issued_at + self._ttl_seconds,
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Identity:
        """Return the identity inside token or raise a TokenVerificationError."""
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": ["sub", "exp"],
                },
            )
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as e:
            raise BadSignatureError(str(e)) from e
        except jwt.InvalidTokenError as e:
            raise MalformedTokenError(str(e)) from e

        identity = _identity_from_claims(claims)
        expires_at = claims["exp"]
        if not isinstance(expires_at, (int, float)) or isinstance(expires_at, bool):
            raise MalformedTokenError("exp claim must be a number")
        if self._clock().timestamp() > expires_at:
            raise ExpiredTokenError("Token expired")
        return identity


def _identity_from_claims(claims: dict) -> Identity:
    """Rebuild Identity from decoded claims. Raises MalformedTokenError."""
    sub = claims.get("sub")
    username = claims.get("username")
    if not isinstance(sub, str) or not sub.isdigit():
        raise MalformedTokenError("sub claim must be a numeric user id")
    if not isinstance(username, str) or not username:
        raise MalformedTokenError("username claim missing")
    return Identity(user_id=UserId(int(sub)), username=username)
