"""Password recovery and reset flows."""

import logging

from library_management.config import Settings, get_settings
from library_management.repositories.user_repository import UserRepository
from library_management.schemas.user import (
    MessageResponse,
    PasswordRecoveryRequest,
    PasswordResetRequest,
)
from library_management.services.email_service import EmailService, Message

logger = logging.getLogger(__name__)

RECOVERY_SENT_MESSAGE = "Password recovery instructions sent to your email"
PASSWORD_RESET_MESSAGE = "Password reset successfully"


class PasswordService:
    """Issues reset links and redeems them."""

    def __init__(
        self,
        repository: UserRepository,
        email_service: EmailService,
        settings: Settings | None = None,
    ):
        self.repository = repository
        self.email_service = email_service
        self.settings = settings or get_settings()

    def process_password_recovery(self, request: PasswordRecoveryRequest) -> MessageResponse:
        """Issue a reset token and email the reset link."""
        reset_token = self.repository.create_reset_token(request.email)
        link = f"{self.settings.frontend_url.rstrip('/')}/reset-password/{reset_token.token}"
        hours = self.repository.reset_token_hours

        self.email_service.send(
            Message(
                mail_to=reset_token.user.email,
                subject="Password recovery",
                body=(
                    f"Hello {reset_token.user.name},\n\n"
                    f"Use the link below to choose a new password. "
                    f"It expires in {hours} hours.\n\n{link}\n\n"
                    "If you did not ask for this, you can ignore this email."
                ),
            )
        )
        return MessageResponse(message=RECOVERY_SENT_MESSAGE)

    def process_password_reset(self, request: PasswordResetRequest, token: str) -> MessageResponse:
        """Change the password of the token's user and burn the token."""
        reset_token = self.repository.get_reset_token(token)

        self.repository.redeem_reset_token(reset_token, request.password)

        self.email_service.send(
            Message(
                mail_to=reset_token.user.email,
                subject="Your password was changed",
                body=f"Hello {reset_token.user.name},\n\nYour password has been changed.",
            )
        )
        logger.info(f"Password reset completed for user {reset_token.user_id}")
        return MessageResponse(message=PASSWORD_RESET_MESSAGE)
