"""User service: account workflows with their side effects."""

import logging

from library_management.errors import ConflictError, NotFoundError
from library_management.repositories.user_repository import UserRepository
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
from library_management.services.auth import TokenGenerator
from library_management.services.email_service import EmailService, Message
from library_management.services.password_service import PasswordService

logger = logging.getLogger(__name__)


class UserService:
    """Orchestrates the user repository, email, and session tokens."""

    def __init__(
        self,
        repository: UserRepository,
        email_service: EmailService,
        token_generator: TokenGenerator,
        password_service: PasswordService,
    ):
        self.repository = repository
        self.email_service = email_service
        self.token_generator = token_generator
        self.password_service = password_service

    def get_all(self) -> list[UserResponse]:
        """List all users."""
        return self.repository.list_all()

    def get_by_id(self, user_id: int) -> UserResponse:
        """Get a single user."""
        user = self.repository.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def create(self, user_data: UserCreate) -> UserResponse:
        """Register a user and send a welcome email."""
        user = self.repository.create(user_data)
        self.email_service.send(
            Message(
                mail_to=user.email,
                subject="Welcome to the library",
                body=f"Hello {user.name},\n\nYour library account has been created.",
            )
        )
        return user

    def login(self, credentials: UserLogin, user_agent: str | None) -> LoginResponse:
        """Authenticate, mint a session token, and notify the user of the login."""
        user = self.repository.login(credentials)
        token = self.token_generator.generate(user)

        self.email_service.send(
            Message(
                mail_to=user.email,
                subject="New login to your library account",
                body=(
                    f"Hello {user.name},\n\n"
                    f"A new login to your account was made from: {user_agent or 'unknown device'}.\n"
                    "If this was not you, reset your password."
                ),
            )
        )
        logger.info(f"User {user.id} logged in")
        return LoginResponse(access_token=token, user=user)

    def update(self, user_id: int, changes: UserUpdate) -> UserResponse:
        """Apply profile changes, keeping email and phone number unique."""
        user = self.repository.get_entity_by_id(user_id)

        if changes.email is not None and self.repository.exists_with_email(changes.email, user_id):
            raise ConflictError("Email already in use")
        if changes.phone_number is not None and self.repository.exists_with_phone(
            changes.phone_number, user_id
        ):
            raise ConflictError("Phone number already in use")

        update_data = changes.model_dump(exclude_unset=True, exclude_none=True)
        password = update_data.pop("password", None)
        if "role" in update_data:
            update_data["role"] = update_data["role"].value
        for field, value in update_data.items():
            setattr(user, field, value)
        if password is not None:
            self.repository.set_password(user, password)

        self.repository.update(user)
        return UserResponse.model_validate(user)

    def recover_password(self, request: PasswordRecoveryRequest) -> MessageResponse:
        """Start password recovery."""
        return self.password_service.process_password_recovery(request)

    def reset_password(self, request: PasswordResetRequest, token: str) -> MessageResponse:
        """Finish password recovery with a reset token."""
        return self.password_service.process_password_reset(request, token)

    def remove(self, user_id: int) -> None:
        """Delete a user."""
        self.repository.remove(user_id)
