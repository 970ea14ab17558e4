"""FastAPI dependencies for authentication, database and services."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from library_management.database import get_db
from library_management.models.user import User
from library_management.repositories.user_repository import UserRepository
from library_management.services.auth import TokenGenerator
from library_management.services.email_service import EmailService
from library_management.services.password_service import PasswordService
from library_management.services.user_service import UserService

security = HTTPBearer(auto_error=False)


def get_token_generator() -> TokenGenerator:
    """Get session token generator."""
    return TokenGenerator()


def get_email_service() -> EmailService:
    """Get email service instance."""
    return EmailService()


def get_user_repository(
    db: Annotated[Session, Depends(get_db)],
) -> UserRepository:
    """Get user repository bound to the request session."""
    return UserRepository(db)


def get_user_service(
    repository: Annotated[UserRepository, Depends(get_user_repository)],
    email_service: Annotated[EmailService, Depends(get_email_service)],
    token_generator: Annotated[TokenGenerator, Depends(get_token_generator)],
) -> UserService:
    """Get user service with dependencies."""
    return UserService(
        repository,
        email_service,
        token_generator,
        PasswordService(repository, email_service),
    )


def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    token_generator: Annotated[TokenGenerator, Depends(get_token_generator)],
) -> User | None:
    """Get the authenticated user if a bearer token was sent, else None."""
    if credentials is None:
        return None
    return get_current_user(credentials, db, token_generator)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    token_generator: Annotated[TokenGenerator, Depends(get_token_generator)],
) -> User:
    """Get the current authenticated user from JWT token."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = token_generator.decode(credentials.credentials)

    if payload is None or payload.get("sub") is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = db.query(User).filter(User.id == int(payload["sub"])).first()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user
