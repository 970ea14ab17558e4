"""User model."""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from library_management.database import Base
from library_management.models.enums import Role
from library_management.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """Library member or staff account."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    phone_number = Column(String(32), unique=True, nullable=False, index=True)
    role = Column(String(20), nullable=False, default=Role.USER.value)
    password_hash = Column(String(255), nullable=False)

    # Relationships
    loans = relationship("Loan", back_populates="user", cascade="all, delete-orphan")
    reset_tokens = relationship(
        "PasswordResetToken", back_populates="user", cascade="all, delete-orphan"
    )
