"""FastAPI dependencies for authentication and database."""

from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.config import get_settings
from src.database import get_db
from src.errors import InvalidTokenError
from src.services.auth import AuthService
from src.services.passwords import PasswordHasher
from src.services.tokens import TokenIssuer, TokenVerifier
from src.services.user_store import UserStore

# Missing credentials are rejected by require_subject with the same 401 as bad ones
security = HTTPBearer(auto_error=False)


@lru_cache
def get_password_hasher() -> PasswordHasher:
    """Process-wide password hasher."""
    return PasswordHasher(rounds=get_settings().bcrypt_rounds)


@lru_cache
def get_token_issuer() -> TokenIssuer:
    """Process-wide token issuer."""
    settings = get_settings()
    return TokenIssuer(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        default_duration=timedelta(minutes=settings.token_duration_minutes),
    )


@lru_cache
def get_token_verifier() -> TokenVerifier:
    """Process-wide token verifier."""
    settings = get_settings()
    return TokenVerifier(settings.jwt_secret, algorithm=settings.jwt_algorithm)


def get_user_store(
    db: Annotated[Session, Depends(get_db)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
) -> UserStore:
    """Get user store bound to the request's session."""
    return UserStore(db, hasher)


def get_auth_service(
    store: Annotated[UserStore, Depends(get_user_store)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> AuthService:
    """Get auth service with dependencies."""
    return AuthService(store, hasher, issuer, token_duration=issuer.default_duration)


def require_subject(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
) -> int:
    """Gate a route behind a valid bearer token.

    Expects ``Authorization: Bearer <token>``. A missing header, another
    scheme, or a token failing signature or expiry checks all end the request
    with the same 401. On success the user id is stored on
    ``request.state.subject_id`` and returned.
    """
    if credentials is None or not credentials.credentials:
        raise InvalidTokenError()

    subject_id = verifier.verify(credentials.credentials)
    if subject_id is None:
        raise InvalidTokenError()

    request.state.subject_id = subject_id
    return subject_id
