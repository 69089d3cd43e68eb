"""Authentication package."""

from shopledger.auth.security import (
    AuthenticationError,
    PermissionDeniedError,
    RequestContext,
    hash_password,
    verify_password,
)

__all__ = [
    "AuthenticationError",
    "PermissionDeniedError",
    "RequestContext",
    "hash_password",
    "verify_password",
]
