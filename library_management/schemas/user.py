"""User and password reset schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from library_management.models.enums import Role


class UserCreate(BaseModel):
    """User registration request."""

    email: EmailStr = Field(..., max_length=255)
    name: str = Field(..., min_length=1, max_length=255)
    phone_number: str = Field(..., min_length=1, max_length=32)
    password: str = Field(..., min_length=8, max_length=72)
    role: Role = Role.USER


class UserUpdate(BaseModel):
    """Update a user. Omitted fields keep their current value."""

    email: EmailStr | None = Field(None, max_length=255)
    name: str | None = Field(None, min_length=1, max_length=255)
    phone_number: str | None = Field(None, min_length=1, max_length=32)
    password: str | None = Field(None, min_length=8, max_length=72)
    role: Role | None = None


class UserLogin(BaseModel):
    """User login request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=72)


class UserResponse(BaseModel):
    """User information response. Never carries the password digest."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    role: str
    phone_number: str


class UserInternal(BaseModel):
    """Internal user view including the digest. Not returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    role: str
    phone_number: str
    password_hash: str


class LoginResponse(BaseModel):
    """Session token with the logged in user."""

    access_token: str
    token_type: str = "bearer"  # noqa: S105
    user: UserResponse


class PasswordResetTokenResponse(BaseModel):
    """Issued reset token with the user it belongs to."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    token: str
    expiration: datetime
    user_id: int
    user: UserInternal


class PasswordRecoveryRequest(BaseModel):
    """Ask for a password reset link."""

    email: EmailStr = Field(..., max_length=255)


class PasswordResetRequest(BaseModel):
    """Choose a new password using a reset token."""

    password: str = Field(..., min_length=8, max_length=72)


class MessageResponse(BaseModel):
    """Plain status message."""

    message: str
