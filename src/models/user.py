"""User model."""

from typing import TYPE_CHECKING

from sqlalchemy import Column, Index, Integer, String, text

from src.database import Base
from src.models.mixins import SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:
    from src.services.passwords import PasswordHasher

EMAIL_UNIQUE_INDEX = "uq_users_email_active"


def normalize_email(email: str) -> str:
    """Canonical form used for storage and lookup; addresses compare case-insensitively."""
    return email.strip().lower()


class User(Base, TimestampMixin, SoftDeleteMixin):
    """A registered account."""

    __tablename__ = "users"
    __table_args__ = (
        # One live account per address; soft-deleted rows release it
        Index(
            EMAIL_UNIQUE_INDEX,
            "email",
            unique=True,
            sqlite_where=text("deleted_at IS NULL"),
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)

    def set_password(self, password: str, hasher: "PasswordHasher") -> None:
        """Hash ``password`` and store the digest. The plaintext is never kept."""
        self.password_hash = hasher.hash(password)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
