"""
Authentication Primitives

Passwords are hashed with passlib. The request context replaces
ambient "current user" state: it is built once per request from the
session and handed explicitly to every flow that needs it.
"""

from uuid import UUID

from passlib.context import CryptContext
from pydantic import BaseModel, ConfigDict

from shopledger.models.user import PublicUser


pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """False for a wrong password or an unreadable hash."""
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        return False


class AuthenticationError(Exception):
    """No valid session, or bad credentials."""
    pass


class PermissionDeniedError(Exception):
    """The user tried to act on a record they don't own."""
    pass


class RequestContext(BaseModel):
    """Who is making this request, and which log trail it belongs to."""

    model_config = ConfigDict(frozen=True)

    user: PublicUser
    correlation_id: UUID

    @property
    def user_id(self) -> int:
        return self.user.id
