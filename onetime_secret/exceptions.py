"""
One-time Secret errors.

Every error carries the HTTP status the transport layer answers with and a
message that is safe to show to a client. Backends signal a missing key with
``KeyNotFound``; any other backend failure is a ``BackendError``.
"""
from typing import Optional


class SecretError(Exception):
    """Base class for all one-time secret errors."""

    status: int = 500
    message: str = "Internal error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidExpiration(SecretError):
    status = 400
    message = "Invalid expiration specified"


class PayloadTooLarge(SecretError):
    status = 400
    message = "Message is too long"


class MalformedRequest(SecretError):
    status = 400
    message = "Unable to parse json"


class NotFound(SecretError):
    """Secret never existed, was already read, or has expired."""
    status = 404
    message = "Secret not found"


class CorruptData(SecretError):
    status = 500
    message = "Unable to decode secret"


class BackendError(SecretError):
    """The key-value backend failed for a reason other than a missing key."""
    status = 500
    message = "Unable to receive secret from database"


class BackendWriteFailed(BackendError):
    message = "Failed to store secret in database"


class KeyNotFound(KeyError):
    """Raised by backends when a key is absent or expired."""
