"""Password hashing with bcrypt."""

import logging

from passlib.context import CryptContext
from passlib.exc import PasswordValueError

from src.errors import HashingError, InvalidInputError

logger = logging.getLogger(__name__)


class PasswordHasher:
    """Salted, adaptive one-way hashing of user passwords.

    Digests are bcrypt strings, so the salt and cost factor travel with each
    digest and older digests keep verifying after the configured cost changes.
    """

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        """Hash a password. A fresh salt is drawn on every call."""
        try:
            return self._context.hash(password)
        except PasswordValueError as e:
            # Rejected by bcrypt itself, e.g. an embedded NUL
            raise InvalidInputError(
                [{"field": "password", "message": "Password cannot be hashed"}]
            ) from e
        except (ValueError, TypeError, OSError) as e:
            raise HashingError(f"bcrypt backend failed: {type(e).__name__}") from e

    def verify(self, password: str, password_hash: str | None) -> bool:
        """Constant-time check of ``password`` against a stored digest.

        Returns False for a mismatch and for an empty or unreadable digest.
        """
        if not password_hash:
            return False
        try:
            return self._context.verify(password, password_hash)
        except (ValueError, TypeError):
            logger.warning("Stored password hash could not be parsed")
            return False

    def dummy_verify(self) -> None:
        """Spend the time of one verification without a real digest."""
        self._context.dummy_verify()
