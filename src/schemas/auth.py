"""Authentication schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 128


def _password_has_no_nul(value: str | None) -> str | None:
    # bcrypt cannot hash strings containing NUL
    if value is not None and "\x00" in value:
        raise ValueError("Password must not contain NUL characters")
    return value


class UserRegister(BaseModel):
    """User registration request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)
    name: str = Field(..., min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name must not be blank")
        return value

    @field_validator("password")
    @classmethod
    def password_no_nul(cls, value: str) -> str:
        return _password_has_no_nul(value)


class UserLogin(BaseModel):
    """User login request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LENGTH)

    @field_validator("password")
    @classmethod
    def password_no_nul(cls, value: str) -> str:
        return _password_has_no_nul(value)


class UserUpdate(BaseModel):
    """Profile update request. Omitted fields are left unchanged."""

    name: str | None = Field(None, min_length=1, max_length=255)
    password: str | None = Field(
        None, min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH
    )

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ValueError("Name must not be blank")
        return value.strip() if value is not None else None

    @field_validator("password")
    @classmethod
    def password_no_nul(cls, value: str | None) -> str | None:
        return _password_has_no_nul(value)


class RegisterResponse(BaseModel):
    """Registration acknowledgement."""

    message: str


class Token(BaseModel):
    """JWT token response."""

    token: str
    token_type: str = "bearer"  # noqa: S105


class UserResponse(BaseModel):
    """User information response. Carries no credential material."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    created_at: datetime
    updated_at: datetime
