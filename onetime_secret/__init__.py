"""One-time Secret: Store client-encrypted secrets that can be read exactly once.

Security Note:
    The service never sees plaintext. Ciphertext and nonce are produced and
    consumed by the client; the server only stores and transports them.
"""

from .version import __version__
from .exceptions import (
    SecretError,
    InvalidExpiration,
    PayloadTooLarge,
    MalformedRequest,
    NotFound,
    CorruptData,
    BackendError,
    BackendWriteFailed,
    KeyNotFound,
)
from .envelope import Envelope
from .store import SecretStore
from .conf import SecretConfig, EXPIRATIONS, MAX_ENVELOPE_SIZE

__all__ = [
    "__version__",
    "SecretStore",
    "SecretConfig",
    "Envelope",
    "EXPIRATIONS",
    "MAX_ENVELOPE_SIZE",
    "SecretError",
    "InvalidExpiration",
    "PayloadTooLarge",
    "MalformedRequest",
    "NotFound",
    "CorruptData",
    "BackendError",
    "BackendWriteFailed",
    "KeyNotFound",
]
