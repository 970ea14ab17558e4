"""Password reset token model."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from library_management.database import Base
from library_management.models.mixins import TimestampMixin


class PasswordResetToken(Base, TimestampMixin):
    """Single-use token authorizing a password change for one user."""

    __tablename__ = "password_reset_tokens"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    token = Column(String(128), unique=True, nullable=False, index=True)
    expiration = Column(DateTime(timezone=True), nullable=False)

    # Relationships
    user = relationship("User", back_populates="reset_tokens")
