"""Persistence operations for user accounts."""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.errors import EmailAlreadyExistsError
from src.models.user import EMAIL_UNIQUE_INDEX, User, normalize_email
from src.services.passwords import PasswordHasher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserDraft:
    """Validated input for a new account. ``password`` is plaintext."""

    email: str
    password: str
    name: str


class UserStore:
    """Reads and writes ``User`` rows.

    Soft-deleted users are invisible to every lookup. Email uniqueness is left
    to the database index, so two concurrent registrations for one address
    cannot both commit.
    """

    def __init__(self, db: Session, hasher: PasswordHasher):
        self.db = db
        self.hasher = hasher

    def _active(self):
        return self.db.query(User).filter(User.deleted_at.is_(None))

    def find_by_email(self, email: str) -> User | None:
        """Get a live user by email (case-insensitive)."""
        return self._active().filter(User.email == normalize_email(email)).first()

    def find_by_id(self, user_id: int) -> User | None:
        """Get a live user by id."""
        return self._active().filter(User.id == user_id).first()

    def create(self, draft: UserDraft) -> User:
        """Insert a new user.

        Raises:
            EmailAlreadyExistsError: a live account already uses the email.
        """
        user = User(email=normalize_email(draft.email), name=draft.name)
        user.set_password(draft.password, self.hasher)
        self.db.add(user)
        self._commit()
        self.db.refresh(user)
        logger.info(f"Created user {user.id}")
        return user

    def save(self, user: User, password: str | None = None) -> User:
        """Persist changes to ``user``, re-hashing first when a password is given."""
        if password:
            user.set_password(password, self.hasher)
        user.email = normalize_email(user.email)
        self._commit()
        self.db.refresh(user)
        return user

    def soft_delete(self, user: User) -> None:
        user.soft_delete()
        self._commit()
        logger.info(f"Soft-deleted user {user.id}")

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if not _is_email_conflict(e):
                raise
            logger.info("Rejected write: email already in use")
            raise EmailAlreadyExistsError() from e


def _is_email_conflict(error: IntegrityError) -> bool:
    """True when ``error`` comes from the live-email unique index."""
    # PostgreSQL names the index; SQLite names the column
    message = str(error.orig)
    return EMAIL_UNIQUE_INDEX in message or "users.email" in message
