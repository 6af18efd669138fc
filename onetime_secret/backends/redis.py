"""
Redis backend: secrets kept as plain keys with a native TTL.

Reads that destroy the secret run a Lua script doing GET and DEL in one
server-side step, so two racing readers can never both see the value.
"""
import logging
from typing import Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from ..exceptions import BackendError, KeyNotFound
from .abstract import AbstractBackend

logger = logging.getLogger("onetime.secret")

_GET_AND_DELETE = """
local value = redis.call('GET', KEYS[1])
if value then
    redis.call('DEL', KEYS[1])
end
return value
"""


class RedisBackend(AbstractBackend):
    """Secret storage on top of an asyncio Redis client.

    Args:
        url: Redis connection URL, used when no client is given.
        redis: an existing ``redis.asyncio.Redis`` client.
        key_prefix: namespace prepended to every key.
    """

    supports_get_and_delete = True

    def __init__(
        self,
        url: Optional[str] = None,
        redis: Optional[aioredis.Redis] = None,
        key_prefix: str = "secret:",
    ):
        if redis is None:
            if not url:
                raise ValueError("RedisBackend requires a url or a redis client")
            redis = aioredis.from_url(url, decode_responses=False)
        self._redis = redis
        self._prefix = key_prefix
        self._get_and_delete = redis.register_script(_GET_AND_DELETE)

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> bytes:
        try:
            value = await self._redis.get(self._key(key))
        except RedisError as err:
            raise BackendError() from err
        if value is None:
            raise KeyNotFound(key)
        return value

    async def set(self, key: str, value: bytes, ttl: int) -> None:
        try:
            await self._redis.set(self._key(key), value, ex=ttl)
        except RedisError as err:
            raise BackendError("Unable to write secret") from err

    async def delete(self, key: str) -> None:
        try:
            await self._redis.delete(self._key(key))
        except RedisError as err:
            raise BackendError("Unable to delete secret") from err

    async def exists(self, key: str) -> bool:
        try:
            return bool(await self._redis.exists(self._key(key)))
        except RedisError as err:
            raise BackendError("Unable to check secret") from err

    async def get_and_delete(self, key: str) -> bytes:
        try:
            value = await self._get_and_delete(keys=[self._key(key)])
        except RedisError as err:
            raise BackendError() from err
        if value is None:
            raise KeyNotFound(key)
        return value

    async def close(self) -> None:
        await self._redis.aclose()
        logger.debug("Redis backend connection closed")
