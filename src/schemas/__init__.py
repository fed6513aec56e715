"""Pydantic schemas for API requests and responses."""

from src.schemas.auth import (
    RegisterResponse,
    Token,
    UserLogin,
    UserRegister,
    UserResponse,
    UserUpdate,
)

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserUpdate",
    "RegisterResponse",
    "Token",
    "UserResponse",
]
