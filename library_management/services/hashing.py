"""Password hashing backed by passlib."""

from enum import Enum

from passlib.context import CryptContext
from passlib.exc import UnknownHashError


class VerificationResult(str, Enum):
    """Outcome of checking a candidate password against a digest."""

    MATCH = "match"
    MISMATCH = "mismatch"
    REHASH_NEEDED = "rehash_needed"

    @property
    def succeeded(self) -> bool:
        return self != VerificationResult.MISMATCH


class CredentialHasher:
    """Salted, iterated password hashing (bcrypt)."""

    def __init__(self, context: CryptContext | None = None):
        self.context = context or CryptContext(schemes=["bcrypt"], deprecated="auto")

    def hash(self, secret: str) -> str:
        """Hash a password. The same input never yields the same digest twice."""
        return self.context.hash(secret)

    def verify(self, digest: str, candidate: str) -> VerificationResult:
        """Verify a candidate password against a stored digest.

        A digest the context cannot parse counts as a mismatch.
        """
        try:
            valid, replacement = self.context.verify_and_update(candidate, digest)
        except (UnknownHashError, ValueError):
            return VerificationResult.MISMATCH
        if not valid:
            return VerificationResult.MISMATCH
        if replacement is not None:
            return VerificationResult.REHASH_NEEDED
        return VerificationResult.MATCH
