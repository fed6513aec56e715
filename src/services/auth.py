"""Authentication service: registration, login and profile access."""

import logging
from datetime import timedelta

from pydantic import ValidationError

from src.errors import (
    InvalidCredentialsError,
    InvalidInputError,
    UserNotFoundError,
    field_errors,
)
from src.models.user import User, normalize_email
from src.schemas.auth import UserRegister, UserUpdate
from src.services.passwords import PasswordHasher
from src.services.tokens import TokenIssuer
from src.services.user_store import UserDraft, UserStore

logger = logging.getLogger(__name__)


class AuthService:
    """Service for account and credential operations."""

    def __init__(
        self,
        store: UserStore,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
        token_duration: timedelta = timedelta(hours=24),
    ):
        self.store = store
        self.hasher = hasher
        self.issuer = issuer
        self.token_duration = token_duration

    def register(self, email: str, password: str, name: str) -> User:
        """Create an account.

        Input is validated before storage is touched.

        Raises:
            InvalidInputError: malformed email, short password or blank name.
            EmailAlreadyExistsError: a live account already uses the email.
        """
        try:
            data = UserRegister.model_validate({"email": email, "password": password, "name": name})
        except ValidationError as e:
            raise InvalidInputError(field_errors(e.errors())) from e

        user = self.store.create(UserDraft(email=data.email, password=data.password, name=data.name))
        logger.info(f"Registered user {user.id}")
        return user

    def authenticate(self, email: str, password: str) -> User:
        """Return the user owning these credentials.

        An unknown email and a wrong password raise the same error after
        roughly the same amount of work.
        """
        user = self.store.find_by_email(email)
        if user is None:
            self.hasher.dummy_verify()
            logger.info(f"Failed login for {normalize_email(email)}")
            raise InvalidCredentialsError()
        if not self.hasher.verify(password, user.password_hash):
            logger.info(f"Failed login for {normalize_email(email)}")
            raise InvalidCredentialsError()
        return user

    def login(self, email: str, password: str) -> str:
        """Check credentials and issue a bearer token for the user."""
        user = self.authenticate(email, password)
        token = self.issuer.issue(user.id, self.token_duration)
        logger.info(f"Login: user {user.id}")
        return token

    def get_profile(self, subject_id: int) -> User:
        """Look up the user a verified token refers to."""
        user = self.store.find_by_id(subject_id)
        if user is None:
            raise UserNotFoundError()
        return user

    def update_profile(
        self, subject_id: int, name: str | None = None, password: str | None = None
    ) -> User:
        """Rename the user and/or change their password."""
        try:
            data = UserUpdate.model_validate({"name": name, "password": password})
        except ValidationError as e:
            raise InvalidInputError(field_errors(e.errors())) from e

        user = self.get_profile(subject_id)
        if data.name is not None:
            user.name = data.name
        user = self.store.save(user, password=data.password)
        if data.password:
            logger.info(f"Password changed for user {user.id}")
        return user

    def delete_account(self, subject_id: int) -> None:
        """Soft-delete the user. Outstanding tokens keep verifying but resolve to nothing."""
        user = self.get_profile(subject_id)
        self.store.soft_delete(user)
