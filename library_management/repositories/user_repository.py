"""User repository: CRUD, credential checks and password reset tokens."""

import logging
import secrets
from datetime import UTC, datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from library_management.config import get_settings
from library_management.errors import ConflictError, InvalidCredentialError, NotFoundError
from library_management.models.password_reset_token import PasswordResetToken
from library_management.models.user import User
from library_management.schemas.user import (
    PasswordResetTokenResponse,
    UserCreate,
    UserInternal,
    UserLogin,
    UserResponse,
)
from library_management.services.hashing import CredentialHasher, VerificationResult

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    """Current time in UTC."""
    return datetime.now(UTC)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo; they are stored as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class UserRepository:
    """Data access for users and their password reset tokens."""

    def __init__(
        self,
        db: Session,
        hasher: CredentialHasher | None = None,
        reset_token_hours: int | None = None,
    ):
        self.db = db
        self.hasher = hasher or CredentialHasher()
        if reset_token_hours is None:
            reset_token_hours = get_settings().reset_token_expiration_hours
        self.reset_token_lifetime = timedelta(hours=reset_token_hours)

    @property
    def reset_token_hours(self) -> int:
        """Lifetime of issued reset tokens, in whole hours."""
        return int(self.reset_token_lifetime.total_seconds() // 3600)

    # Users

    def list_all(self) -> list[UserResponse]:
        """Return every user, loans loaded. An empty store yields an empty list."""
        users = self.db.query(User).options(joinedload(User.loans)).order_by(User.id).all()
        return [UserResponse.model_validate(user) for user in users]

    def get_by_id(self, user_id: int) -> UserResponse:
        """Get a user projection by ID."""
        return UserResponse.model_validate(self.get_entity_by_id(user_id))

    def get_entity_by_id(self, user_id: int) -> User:
        """Get the mapped user with loans, for callers that mutate it."""
        user = (
            self.db.query(User)
            .options(joinedload(User.loans))
            .filter(User.id == user_id)
            .first()
        )
        if not user:
            raise NotFoundError("User not found")
        return user

    def create(self, user_data: UserCreate) -> UserResponse:
        """Create a user after checking email and phone number are free."""
        if self.exists_with_email(user_data.email):
            raise ConflictError("Email already in use")
        if self.exists_with_phone(user_data.phone_number):
            raise ConflictError("Phone number already in use")

        user = User(
            email=user_data.email,
            name=user_data.name,
            phone_number=user_data.phone_number,
            role=user_data.role.value,
            password_hash=self.hasher.hash(user_data.password),
        )
        self.db.add(user)
        self._commit_unique()
        self.db.refresh(user)

        logger.info(f"Created user {user.id}")
        return UserResponse.model_validate(user)

    def update(self, user: User) -> None:
        """Persist every field of an already loaded user."""
        self.db.add(user)
        self._commit_unique()

    def login(self, credentials: UserLogin) -> UserResponse:
        """Check a password against the stored digest."""
        user = self.db.query(User).filter(User.email == credentials.email).first()
        if not user:
            raise NotFoundError("No user registered with this email")

        result = self.hasher.verify(user.password_hash, credentials.password)
        if not result.succeeded:
            raise InvalidCredentialError("Invalid password")

        if result == VerificationResult.REHASH_NEEDED:
            user.password_hash = self.hasher.hash(credentials.password)
            self.db.commit()
            logger.info(f"Upgraded password digest for user {user.id}")

        return UserResponse.model_validate(user)

    def remove(self, user_id: int) -> None:
        """Delete a user."""
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User not found")

        self.db.delete(user)
        self.db.commit()
        logger.info(f"Removed user {user_id}")

    def get_by_email(self, email: str) -> UserInternal:
        """Get the internal view of a user, digest included."""
        return UserInternal.model_validate(self._get_entity_by_email(email))

    def exists_with_email(self, email: str, exclude_user_id: int | None = None) -> bool:
        """Check whether another user already has this email."""
        query = self.db.query(User.id).filter(User.email == email)
        if exclude_user_id is not None:
            query = query.filter(User.id != exclude_user_id)
        return self.db.query(query.exists()).scalar()

    def exists_with_phone(self, phone_number: str, exclude_user_id: int | None = None) -> bool:
        """Check whether another user already has this phone number."""
        query = self.db.query(User.id).filter(User.phone_number == phone_number)
        if exclude_user_id is not None:
            query = query.filter(User.id != exclude_user_id)
        return self.db.query(query.exists()).scalar()

    def set_password(self, user: User, new_password: str) -> None:
        """Hash a new password onto a loaded user. Persisted by the next update."""
        user.password_hash = self.hasher.hash(new_password)

    # Password reset tokens

    def create_reset_token(self, email: str) -> PasswordResetTokenResponse:
        """Issue a single-use reset token for the user with this email."""
        user = self._get_entity_by_email(email)

        reset_token = PasswordResetToken(
            user_id=user.id,
            token=secrets.token_urlsafe(32),
            expiration=utcnow() + self.reset_token_lifetime,
        )
        self.db.add(reset_token)
        self.db.commit()
        self.db.refresh(reset_token)

        logger.info(f"Issued password reset token {reset_token.id} for user {user.id}")
        return self._token_response(reset_token)

    def get_reset_token(self, token: str) -> PasswordResetTokenResponse:
        """Look up an unexpired reset token.

        Missing and expired tokens fail the same way.
        """
        reset_token = (
            self.db.query(PasswordResetToken)
            .options(joinedload(PasswordResetToken.user))
            .filter(
                PasswordResetToken.token == token,
                PasswordResetToken.expiration > utcnow(),
            )
            .first()
        )
        if not reset_token:
            raise NotFoundError("Reset token not found")
        return self._token_response(reset_token)

    def remove_reset_token(self, token_data: PasswordResetTokenResponse) -> None:
        """Delete a reset token so it cannot be replayed."""
        reset_token = (
            self.db.query(PasswordResetToken)
            .filter(PasswordResetToken.id == token_data.id)
            .first()
        )
        if not reset_token:
            raise NotFoundError("Reset token not found")

        self.db.delete(reset_token)
        self.db.commit()

    def update_password(self, email: str, new_password: str) -> None:
        """Replace a user's password digest."""
        user = self._get_entity_by_email(email)
        self.set_password(user, new_password)
        self.db.commit()
        logger.info(f"Password changed for user {user.id}")

    def redeem_reset_token(
        self, token_data: PasswordResetTokenResponse, new_password: str
    ) -> None:
        """Consume a reset token and set the new password in one transaction.

        The token row is deleted first; if another request already consumed it
        nothing is written.
        """
        deleted = (
            self.db.query(PasswordResetToken)
            .filter(PasswordResetToken.id == token_data.id)
            .delete(synchronize_session=False)
        )
        if not deleted:
            self.db.rollback()
            raise NotFoundError("Reset token not found")

        user = self.db.query(User).filter(User.id == token_data.user_id).first()
        if not user:
            self.db.rollback()
            raise NotFoundError("User not found")

        self.set_password(user, new_password)
        self.db.commit()
        logger.info(f"Password reset with token {token_data.id} for user {token_data.user_id}")

    # Helpers

    def _get_entity_by_email(self, email: str) -> User:
        user = self.db.query(User).filter(User.email == email).first()
        if not user:
            raise NotFoundError("User not found")
        return user

    def _commit_unique(self) -> None:
        """Commit, turning a unique constraint violation into a conflict."""
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Unique constraint violated on users: {e.orig}")
            raise ConflictError("Email or phone number already in use") from e

    def _token_response(self, reset_token: PasswordResetToken) -> PasswordResetTokenResponse:
        return PasswordResetTokenResponse(
            id=reset_token.id,
            token=reset_token.token,
            expiration=_as_utc(reset_token.expiration),
            user_id=reset_token.user_id,
            user=UserInternal.model_validate(reset_token.user),
        )
