"""Password Hashing — one-way bcrypt hashing through passlib.

Invariants:
    - Plain passwords never leave this module in any form but a hash
    - dummy_verify() costs the same as a real verify (login timing parity)
"""

from passlib.context import CryptContext


class PasswordHasher:
    """Thin wrapper over a passlib CryptContext with configurable bcrypt cost."""

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return self._context.verify(password, password_hash)
        except ValueError:
            # stored value is not a recognizable hash
            return False

    def dummy_verify(self) -> None:
        self._context.dummy_verify()
