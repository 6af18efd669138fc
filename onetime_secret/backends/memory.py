"""In-process backend for development and tests."""
import time
import logging
from typing import Callable

from ..exceptions import KeyNotFound
from .abstract import AbstractBackend

logger = logging.getLogger("onetime.secret")


class MemoryBackend(AbstractBackend):
    """Dict-backed store with monotonic-clock expiry.

    Entries are checked for expiry on access and swept on every write.
    Nothing awaits between the lookup and the removal in get_and_delete(),
    so it is atomic on a single event loop.
    """

    supports_get_and_delete = True

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, tuple[bytes, float]] = {}

    def __len__(self) -> int:
        now = self._clock()
        return sum(1 for _, expires in self._entries.values() if expires > now)

    def _lookup(self, key: str) -> bytes:
        entry = self._entries.get(key)
        if entry is None:
            raise KeyNotFound(key)
        value, expires = entry
        if self._clock() >= expires:
            del self._entries[key]
            raise KeyNotFound(key)
        return value

    def _evict_expired(self) -> None:
        now = self._clock()
        expired = [k for k, (_, expires) in self._entries.items() if expires <= now]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Memory backend evicted %d expired entries", len(expired))

    async def get(self, key: str) -> bytes:
        return self._lookup(key)

    async def set(self, key: str, value: bytes, ttl: int) -> None:
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")
        self._evict_expired()
        self._entries[key] = (bytes(value), self._clock() + ttl)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def get_and_delete(self, key: str) -> bytes:
        value = self._lookup(key)
        del self._entries[key]
        return value
