"""Loan model."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from library_management.database import Base
from library_management.models.mixins import TimestampMixin


class Loan(Base, TimestampMixin):
    """A book lent to a user."""

    __tablename__ = "loans"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    book_title = Column(String(255), nullable=False)
    borrowed_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    due_at = Column(DateTime(timezone=True), nullable=True)
    returned_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    user = relationship("User", back_populates="loans")

    @property
    def is_returned(self) -> bool:
        """Check if the book has been brought back."""
        return self.returned_at is not None
