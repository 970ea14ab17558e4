"""User API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException, status

from library_management.api.dependencies import (
    get_current_user,
    get_optional_user,
    get_user_service,
)
from library_management.models.enums import Role
from library_management.models.user import User
from library_management.schemas.user import (
    LoginResponse,
    MessageResponse,
    PasswordRecoveryRequest,
    PasswordResetRequest,
    UserCreate,
    UserLogin,
    UserResponse,
    UserUpdate,
)
from library_management.services.user_service import UserService

router = APIRouter(prefix="/api/v1/users", tags=["users"])


def is_admin(user: User | None) -> bool:
    """Check if the caller is a logged in admin."""
    return user is not None and Role(user.role).is_admin()


def ensure_self_or_admin(current_user: User, user_id: int) -> None:
    """Only the account owner or an admin may touch an account."""
    if current_user.id != user_id and not is_admin(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You don't have permission to access this user",
        )


@router.get("", response_model=list[UserResponse])
def list_users(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
):
    """List all users (admin only)."""
    if not is_admin(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admins can list users",
        )
    return service.get_all()


@router.get("/me", response_model=UserResponse)
def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get current user information."""
    return current_user


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Get a user by ID."""
    ensure_self_or_admin(current_user, user_id)
    return service.get_by_id(user_id)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: UserCreate,
    current_user: Annotated[User | None, Depends(get_optional_user)],
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Register a new user. Only admins may grant a role other than user."""
    if user_data.role != Role.USER and not is_admin(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admins can assign roles",
        )
    return service.create(user_data)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    changes: UserUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Update a user's profile."""
    ensure_self_or_admin(current_user, user_id)
    if changes.role is not None and not is_admin(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admins can assign roles",
        )
    return service.update(user_id, changes)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Delete a user (the account owner or an admin)."""
    ensure_self_or_admin(current_user, user_id)
    service.remove(user_id)


@router.post("/login", response_model=LoginResponse)
def login(
    credentials: UserLogin,
    service: Annotated[UserService, Depends(get_user_service)],
    user_agent: Annotated[str | None, Header()] = None,
):
    """Login with email and password."""
    return service.login(credentials, user_agent)


@router.post("/recover-password", response_model=MessageResponse)
def recover_password(
    request: PasswordRecoveryRequest,
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Email a password reset link."""
    return service.recover_password(request)


@router.post("/reset-password/{token}", response_model=MessageResponse)
def reset_password(
    token: str,
    request: PasswordResetRequest,
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Choose a new password with a reset token."""
    return service.reset_password(request, token)
