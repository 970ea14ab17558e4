"""SQLAlchemy models."""

from library_management.models.loan import Loan
from library_management.models.password_reset_token import PasswordResetToken
from library_management.models.user import User

__all__ = [
    "User",
    "Loan",
    "PasswordResetToken",
]
