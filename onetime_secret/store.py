"""
SecretStore: Create, read-once and probe one-time secrets.

Provides the public API of the service core:
- ``submit(ciphertext, nonce, expiration)``: validate and persist a secret
- ``retrieve(secret_id)``: return a secret and destroy it
- ``exists(secret_id)``: non-destructive presence check

The store keeps no state besides its backend handle: every call is a direct
round trip, and expiry is left to the backend's native TTL.

Security Note:
    Never log ciphertext, nonces or secret identifiers. A failed delete
    after a successful read leaves the secret in the backend until its
    TTL runs out; this is logged, not raised.
"""
import uuid
import logging
from typing import Any

from pydantic import ValidationError

from .conf import EXPIRATIONS, MAX_ENVELOPE_SIZE, SECRET_ID_RE
from .envelope import Envelope
from .exceptions import (
    BackendError,
    BackendWriteFailed,
    CorruptData,
    InvalidExpiration,
    KeyNotFound,
    MalformedRequest,
    NotFound,
    PayloadTooLarge,
)
from .backends.abstract import AbstractBackend

logger = logging.getLogger("onetime.secret")


def valid_expiration(expiration: Any) -> bool:
    """Return True for 3600 (1 hour), 86400 (1 day) or 604800 (1 week)."""
    if isinstance(expiration, bool) or not isinstance(expiration, int):
        return False
    return expiration in EXPIRATIONS


def valid_secret_id(secret_id: Any) -> bool:
    return isinstance(secret_id, str) and SECRET_ID_RE.match(secret_id) is not None


class SecretStore:
    """One-time secret lifecycle on top of a key-value backend.

    If the backend cannot fetch and delete atomically, retrieve() falls back
    to a get followed by an unconditional delete. Two readers racing on the
    same id can then both observe the payload; only backends with
    ``supports_get_and_delete`` close that window.
    """

    def __init__(
        self,
        backend: AbstractBackend,
        max_size: int = MAX_ENVELOPE_SIZE,
    ):
        self._backend = backend
        self._max_size = max_size

    @property
    def backend(self) -> AbstractBackend:
        return self._backend

    @staticmethod
    def new_id() -> str:
        """Random UUID4 drawn from the OS CSPRNG."""
        return str(uuid.uuid4())

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def submit(self, ciphertext: str, nonce: str, expiration: int) -> str:
        """Validate and store a secret.

        Args:
            ciphertext: opaque client-encrypted payload.
            nonce: opaque value returned verbatim with the ciphertext.
            expiration: time-to-live in seconds (3600, 86400 or 604800).

        Returns:
            The new secret identifier, the only way to retrieve it.

        Raises:
            InvalidExpiration: expiration is not a permitted value.
            MalformedRequest: ciphertext or nonce are not strings.
            PayloadTooLarge: the serialized envelope exceeds the size cap.
            BackendWriteFailed: the backend rejected the write.
        """
        if not valid_expiration(expiration):
            raise InvalidExpiration()
        try:
            envelope = Envelope.model_validate(
                {"secret": ciphertext, "nonce": nonce, "expiration": expiration},
            )
        except ValidationError as err:
            raise MalformedRequest() from err
        data = envelope.encode()
        if len(data) > self._max_size:
            raise PayloadTooLarge()

        secret_id = self.new_id()
        try:
            await self._backend.set(secret_id, data, expiration)
        except BackendError as err:
            logger.error("Unable to store secret: %s", err)
            raise BackendWriteFailed() from err

        logger.debug(
            "Secret stored: size=%d expiration=%d", len(data), expiration,
        )
        return secret_id

    async def submit_envelope(self, envelope: Envelope) -> str:
        """Store a parsed request envelope, see :meth:`submit`."""
        return await self.submit(
            envelope.ciphertext, envelope.nonce, envelope.expiration,
        )

    async def retrieve(self, secret_id: str) -> tuple[str, str]:
        """Return a secret and destroy it.

        Args:
            secret_id: identifier returned by submit().

        Returns:
            Tuple of (ciphertext, nonce) exactly as submitted.

        Raises:
            NotFound: malformed id, or secret absent, already read or expired.
            CorruptData: the stored envelope cannot be decoded.
            BackendError: the backend failed to read.
        """
        if not valid_secret_id(secret_id):
            raise NotFound()
        try:
            if self._backend.supports_get_and_delete:
                data = await self._backend.get_and_delete(secret_id)
            else:
                data = await self._backend.get(secret_id)
                await self._discard(secret_id)
        except KeyNotFound:
            raise NotFound() from None

        try:
            envelope = Envelope.decode(data)
        except CorruptData:
            logger.error("Stored secret could not be decoded (%d bytes)", len(data))
            raise
        return envelope.ciphertext, envelope.nonce

    async def exists(self, secret_id: str) -> bool:
        """Check whether a secret is still readable, without consuming it.

        Raises:
            BackendError: the backend failed to answer.
        """
        if not valid_secret_id(secret_id):
            return False
        return await self._backend.exists(secret_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _discard(self, secret_id: str) -> None:
        """Best-effort delete after a non-atomic read."""
        try:
            await self._backend.delete(secret_id)
        except BackendError as err:
            logger.warning(
                "Secret was read but could not be deleted, "
                "it stays until its TTL expires: %s", err,
            )
