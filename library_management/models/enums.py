"""Enums for model fields."""

from enum import Enum


class Role(str, Enum):
    """Roles a library account can hold."""

    USER = "user"
    ADMIN = "admin"

    def is_admin(self) -> bool:
        """Check if this role can manage other accounts."""
        return self == Role.ADMIN
