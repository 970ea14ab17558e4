"""Domain errors raised by repositories and services.

Each error carries the HTTP status the API layer answers with, so routes
never have to string-match messages.
"""

from fastapi import status


class LibraryError(Exception):
    """Base class for expected, client-facing failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(LibraryError):
    """Entity or token absent (an expired reset token counts as absent)."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(LibraryError):
    """Email or phone number already belongs to another account."""

    status_code = status.HTTP_409_CONFLICT


class InvalidCredentialError(LibraryError):
    """Password did not match the stored digest."""

    status_code = status.HTTP_401_UNAUTHORIZED
