"""Key-value backends for the secret store."""

from .abstract import AbstractBackend
from .memory import MemoryBackend
from .redis import RedisBackend

__all__ = [
    "AbstractBackend",
    "MemoryBackend",
    "RedisBackend",
]
