"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from src.api.dependencies import get_auth_service, require_subject
from src.schemas.auth import (
    RegisterResponse,
    Token,
    UserLogin,
    UserRegister,
    UserResponse,
    UserUpdate,
)
from src.services.auth import AuthService

router = APIRouter(tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Register a new user."""
    service.register(user_data.email, user_data.password, user_data.name)
    return RegisterResponse(message="User registered successfully")


@router.post("/login", response_model=Token)
def login(
    credentials: UserLogin,
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Login with email and password."""
    token = service.login(credentials.email, credentials.password)
    return Token(token=token)


@router.get("/profile", response_model=UserResponse)
def get_profile(
    subject_id: Annotated[int, Depends(require_subject)],
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Get current user information."""
    return service.get_profile(subject_id)


@router.patch("/profile", response_model=UserResponse)
def update_profile(
    changes: UserUpdate,
    subject_id: Annotated[int, Depends(require_subject)],
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Change the current user's name and/or password."""
    return service.update_profile(subject_id, name=changes.name, password=changes.password)


@router.delete("/profile", status_code=status.HTTP_204_NO_CONTENT)
def delete_profile(
    subject_id: Annotated[int, Depends(require_subject)],
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Soft-delete the current user's account."""
    service.delete_account(subject_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
