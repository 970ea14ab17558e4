"""Pydantic schemas for API requests and responses."""

from library_management.schemas.user import (
    LoginResponse,
    MessageResponse,
    PasswordRecoveryRequest,
    PasswordResetRequest,
    PasswordResetTokenResponse,
    UserCreate,
    UserInternal,
    UserLogin,
    UserResponse,
    UserUpdate,
)

__all__ = [
    "UserCreate",
    "UserUpdate",
    "UserLogin",
    "UserResponse",
    "UserInternal",
    "LoginResponse",
    "PasswordResetTokenResponse",
    "PasswordRecoveryRequest",
    "PasswordResetRequest",
    "MessageResponse",
]
