"""Session tokens (JWT) for logged in users."""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from library_management.config import Settings, get_settings
from library_management.schemas.user import UserResponse


class TokenGenerator:
    """Signs and checks JWT session tokens."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    def generate(self, user: UserResponse) -> str:
        """Create a JWT access token for a user."""
        expire = datetime.now(UTC) + timedelta(minutes=self.settings.jwt_expiration_minutes)
        to_encode = {
            "sub": str(user.id),
            "email": user.email,
            "role": user.role,
            "exp": expire,
        }
        return jwt.encode(
            to_encode, self.settings.jwt_secret, algorithm=self.settings.jwt_algorithm
        )

    def decode(self, token: str) -> dict | None:
        """Decode and validate a JWT token."""
        try:
            return jwt.decode(
                token, self.settings.jwt_secret, algorithms=[self.settings.jwt_algorithm]
            )
        except JWTError:
            return None
