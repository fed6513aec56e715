"""Tests for AuthService."""

from datetime import timedelta
from unittest.mock import MagicMock, patch

import pytest

from src.errors import (
    EmailAlreadyExistsError,
    InvalidCredentialsError,
    InvalidInputError,
    UserNotFoundError,
)
from src.services.auth import AuthService
from src.services.tokens import TokenIssuer, TokenVerifier
from src.services.user_store import UserStore

SECRET = "service-secret"  # noqa: S105


@pytest.fixture
def service(store, hasher):
    return AuthService(store, hasher, TokenIssuer(SECRET), token_duration=timedelta(hours=1))


class TestRegister:
    """Tests for registration."""

    def test_register_creates_user(self, service, hasher):
        user = service.register("new@example.com", "secret1", "New")

        assert user.id is not None
        assert user.email == "new@example.com"
        assert user.name == "New"
        assert hasher.verify("secret1", user.password_hash)

    def test_register_strips_name(self, service):
        assert service.register("pad@example.com", "secret1", "  Padded  ").name == "Padded"

    def test_register_twice_conflicts(self, service):
        service.register("dup@example.com", "secret1", "First")

        with pytest.raises(EmailAlreadyExistsError):
            service.register("dup@example.com", "secret2", "Second")

    @pytest.mark.parametrize(
        ("email", "password", "name", "field"),
        [
            ("not-an-email", "secret1", "Bad", "email"),
            ("ok@example.com", "short", "Bad", "password"),
            ("ok@example.com", "secret1", "", "name"),
            ("ok@example.com", "secret1", "   ", "name"),
        ],
    )
    def test_register_validates_before_storage(self, hasher, email, password, name, field):
        store = MagicMock(spec=UserStore)
        service = AuthService(store, hasher, TokenIssuer(SECRET))

        with pytest.raises(InvalidInputError) as exc_info:
            service.register(email, password, name)

        assert [error["field"] for error in exc_info.value.detail] == [field]
        store.create.assert_not_called()


class TestLogin:
    """Tests for login and authenticate."""

    def test_login_returns_verifiable_token(self, service):
        user = service.register("login@example.com", "secret1", "Login")

        token = service.login("login@example.com", "secret1")

        assert TokenVerifier(SECRET).verify(token) == user.id

    def test_login_uses_configured_duration(self, service):
        service.register("dur@example.com", "secret1", "Dur")

        token = service.login("dur@example.com", "secret1")
        claims = TokenVerifier(SECRET).decode(token)

        assert claims.exp - claims.iat == timedelta(hours=1)

    def test_wrong_password_and_unknown_email_match(self, service):
        service.register("known@example.com", "secret1", "Known")

        with pytest.raises(InvalidCredentialsError) as wrong_password:
            service.login("known@example.com", "wrong-password")
        with pytest.raises(InvalidCredentialsError) as unknown_email:
            service.login("unknown@example.com", "wrong-password")

        assert type(wrong_password.value) is type(unknown_email.value)
        assert wrong_password.value.detail == unknown_email.value.detail

    def test_unknown_email_still_spends_hash_time(self, service, hasher):
        with patch.object(hasher, "dummy_verify", wraps=hasher.dummy_verify) as dummy:
            with pytest.raises(InvalidCredentialsError):
                service.login("ghost@example.com", "secret1")

        dummy.assert_called_once()

    def test_login_after_password_change(self, service):
        user = service.register("change@example.com", "secret1", "Change")

        service.update_profile(user.id, password="secret2")

        with pytest.raises(InvalidCredentialsError):
            service.login("change@example.com", "secret1")
        assert service.login("change@example.com", "secret2")


class TestProfile:
    """Tests for profile operations."""

    def test_get_profile(self, service):
        user = service.register("me@example.com", "secret1", "Me")
        assert service.get_profile(user.id).email == "me@example.com"

    def test_get_profile_missing(self, service):
        with pytest.raises(UserNotFoundError):
            service.get_profile(12345)

    def test_update_profile_name_only_keeps_password(self, service):
        user = service.register("rename@example.com", "secret1", "Before")
        original_hash = user.password_hash

        updated = service.update_profile(user.id, name="After")

        assert updated.name == "After"
        assert updated.password_hash == original_hash

    def test_update_profile_rejects_short_password(self, service):
        user = service.register("weak@example.com", "secret1", "Weak")

        with pytest.raises(InvalidInputError):
            service.update_profile(user.id, password="123")

    def test_delete_account(self, service):
        user = service.register("gone@example.com", "secret1", "Gone")
        token = service.login("gone@example.com", "secret1")

        service.delete_account(user.id)

        # The token is still well-formed; only the lookup fails
        assert TokenVerifier(SECRET).verify(token) == user.id
        with pytest.raises(UserNotFoundError):
            service.get_profile(user.id)
        with pytest.raises(InvalidCredentialsError):
            service.login("gone@example.com", "secret1")
