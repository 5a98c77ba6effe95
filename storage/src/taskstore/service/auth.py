"""Password hashing policy.

Passwords are hashed with bcrypt at a fixed cost of 12 (2**12 rounds). The
cost is part of every stored hash, so raising it later only affects new
hashes; ``needs_rehash`` reports hashes made under an older policy.
"""

from loguru import logger
from passlib.context import CryptContext

BCRYPT_ROUNDS = 12


class PasswordHasher:
    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds, bcrypt__min_rounds=rounds,
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        if not password or not password_hash:
            return False
        try:
            return self._context.verify(password, password_hash)
        except (ValueError, TypeError):
            logger.warning("Stored password hash could not be parsed")
            return False

    def dummy_verify(self) -> None:
        """Spend the same time as a real verification for unknown users."""
        self._context.dummy_verify()

    def needs_rehash(self, password_hash: str) -> bool:
        return self._context.needs_update(password_hash)
