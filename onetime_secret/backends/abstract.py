"""
Abstract key-value backend consumed by the secret store.

A backend is a volatile, TTL-capable store addressed by string keys.
Absence is reported with ``KeyNotFound``; every other failure must be
raised as ``BackendError``.
"""
from abc import ABC, abstractmethod

from ..exceptions import KeyNotFound


class AbstractBackend(ABC):
    """Base class for secret storage backends."""

    # True when get_and_delete() fetches and removes a key atomically.
    supports_get_and_delete: bool = False

    @abstractmethod
    async def get(self, key: str) -> bytes:
        """Return the value stored under key.

        Raises:
            KeyNotFound: key is absent or expired.
            BackendError: the backend failed.
        """

    @abstractmethod
    async def set(self, key: str, value: bytes, ttl: int) -> None:
        """Store value under key, expiring after ttl seconds."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove key. Deleting a missing key is not an error."""

    async def exists(self, key: str) -> bool:
        """Non-destructive presence probe."""
        try:
            await self.get(key)
        except KeyNotFound:
            return False
        return True

    async def get_and_delete(self, key: str) -> bytes:
        """Fetch and remove key in a single atomic step."""
        raise NotImplementedError(
            f"{type(self).__name__} has no atomic get-and-delete"
        )

    async def close(self) -> None:
        """Release backend connections."""
