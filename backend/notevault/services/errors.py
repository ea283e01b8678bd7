"""Domain errors raised by the credential services.

Routers translate these into HTTP responses. Messages on
AuthenticationFailure, StorageError and PasswordHashError are never shown
to clients verbatim.
"""

from __future__ import annotations


class NotevaultError(Exception):
    """Base class for credential-service errors."""


class ValidationError(NotevaultError):
    """A required field is missing. The message is safe to show to clients."""


class AuthenticationFailure(NotevaultError):
    """Wrong key, wrong password, or unknown account during sign-in."""


class UnauthenticatedError(NotevaultError):
    """No valid session accompanies the request."""


class StorageError(NotevaultError):
    """A read or write against the persistence layer failed."""


class PasswordHashError(NotevaultError):
    """The password could not be hashed."""
