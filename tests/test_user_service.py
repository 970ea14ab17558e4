"""User service tests with mocked collaborators."""

from unittest.mock import MagicMock

import pytest

from library_management.errors import ConflictError, NotFoundError
from library_management.models.user import User
from library_management.schemas.user import (
    MessageResponse,
    PasswordRecoveryRequest,
    PasswordResetRequest,
    UserCreate,
    UserLogin,
    UserResponse,
    UserUpdate,
)
from library_management.services.user_service import UserService


def user_response(user_id=1, name="Alice", email="alice@mail.com", role="user", phone="123"):
    return UserResponse(id=user_id, name=name, email=email, role=role, phone_number=phone)


@pytest.fixture
def repository():
    return MagicMock()


@pytest.fixture
def email_service():
    return MagicMock()


@pytest.fixture
def token_generator():
    return MagicMock()


@pytest.fixture
def password_service():
    return MagicMock()


@pytest.fixture
def service(repository, email_service, token_generator, password_service):
    return UserService(repository, email_service, token_generator, password_service)


def test_get_all_returns_users(service, repository):
    """All users from the repository are returned in order."""
    repository.list_all.return_value = [
        user_response(1, "Alice"),
        user_response(2, "Bob", "bob@mail.com", "admin", "456"),
    ]

    result = service.get_all()

    assert [(u.id, u.name) for u in result] == [(1, "Alice"), (2, "Bob")]


def test_get_by_id_existing_user(service, repository):
    """An existing user is returned."""
    repository.get_by_id.return_value = user_response()

    result = service.get_by_id(1)

    assert result.id == 1
    assert result.name == "Alice"
    assert result.email == "alice@mail.com"


def test_get_by_id_missing_user(service, repository):
    """No user from the repository means not found."""
    repository.get_by_id.return_value = None

    with pytest.raises(NotFoundError):
        service.get_by_id(99)


def test_get_by_id_propagates_repository_error(service, repository):
    """Repository failures reach the caller unchanged."""
    repository.get_by_id.side_effect = NotFoundError("User not found")

    with pytest.raises(NotFoundError):
        service.get_by_id(99)


def test_create_sends_welcome_email(service, repository, email_service):
    """Creating a user returns it and emails the new address once."""
    user_data = UserCreate(
        name="Alice", email="alice@mail.com", phone_number="123", password="password1"
    )
    created = user_response()
    repository.create.return_value = created

    result = service.create(user_data)

    assert result == created
    repository.create.assert_called_once_with(user_data)
    email_service.send.assert_called_once()
    message = email_service.send.call_args.args[0]
    assert message.mail_to == "alice@mail.com"


def test_create_conflict_sends_no_email(service, repository, email_service):
    """A failed registration does not email anyone."""
    repository.create.side_effect = ConflictError("Email already in use")

    with pytest.raises(ConflictError):
        service.create(
            UserCreate(name="Alice", email="alice@mail.com", phone_number="1", password="password1")
        )

    email_service.send.assert_not_called()


def test_login_returns_token_and_sends_email(service, repository, token_generator, email_service):
    """Login mints a session token and notifies the user."""
    credentials = UserLogin(email="alice@mail.com", password="pass")
    logged_in = user_response()
    repository.login.return_value = logged_in
    token_generator.generate.return_value = "token456"

    result = service.login(credentials, "TestAgent")

    assert result.access_token == "token456"
    assert result.user == logged_in
    token_generator.generate.assert_called_once_with(logged_in)
    email_service.send.assert_called_once()
    message = email_service.send.call_args.args[0]
    assert message.mail_to == "alice@mail.com"
    assert "TestAgent" in message.body


def test_recover_password_returns_response(service, password_service):
    """Recovery is delegated to the password service."""
    request = PasswordRecoveryRequest(email="alice@mail.com")
    password_service.process_password_recovery.return_value = MessageResponse(
        message="Recovery sent"
    )

    result = service.recover_password(request)

    assert result.message == "Recovery sent"
    password_service.process_password_recovery.assert_called_once_with(request)


def test_reset_password_returns_response(service, password_service):
    """Reset is delegated to the password service with the token."""
    request = PasswordResetRequest(password="newpass123")
    password_service.process_password_reset.return_value = MessageResponse(
        message="Password reset"
    )

    result = service.reset_password(request, "token")

    assert result.message == "Password reset"
    password_service.process_password_reset.assert_called_once_with(request, "token")


def test_remove_calls_repository(service, repository):
    """Removal is delegated to the repository."""
    service.remove(1)

    repository.remove.assert_called_once_with(1)


class TestUpdate:
    """Tests for profile updates."""

    @pytest.fixture
    def entity(self, repository):
        user = User(
            id=1,
            email="alice@mail.com",
            name="Alice",
            phone_number="123",
            role="user",
            password_hash="digest",
        )
        repository.get_entity_by_id.return_value = user
        repository.exists_with_email.return_value = False
        repository.exists_with_phone.return_value = False
        return user

    def test_update_applies_changes(self, service, repository, entity):
        """Given fields are written, others are kept."""
        result = service.update(1, UserUpdate(name="Alice L.", role="admin"))

        assert result.name == "Alice L."
        assert result.role == "admin"
        assert result.email == "alice@mail.com"
        repository.update.assert_called_once_with(entity)

    def test_update_email_taken(self, service, repository, entity):
        """An email used by another account is rejected."""
        repository.exists_with_email.return_value = True

        with pytest.raises(ConflictError):
            service.update(1, UserUpdate(email="bob@mail.com"))

        repository.exists_with_email.assert_called_once_with("bob@mail.com", 1)
        repository.update.assert_not_called()

    def test_update_phone_taken(self, service, repository, entity):
        """A phone number used by another account is rejected."""
        repository.exists_with_phone.return_value = True

        with pytest.raises(ConflictError):
            service.update(1, UserUpdate(phone_number="456"))

        repository.update.assert_not_called()

    def test_update_password_goes_through_repository(self, service, repository, entity):
        """A new password is set by the repository before the update is saved."""
        service.update(1, UserUpdate(password="newpass123"))

        repository.set_password.assert_called_once_with(entity, "newpass123")
        repository.update.assert_called_once_with(entity)

    def test_update_missing_user(self, service, repository):
        """Updating an unknown user is not found."""
        repository.get_entity_by_id.side_effect = NotFoundError("User not found")

        with pytest.raises(NotFoundError):
            service.update(99, UserUpdate(name="Ghost"))
