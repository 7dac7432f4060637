"""Redis-backed lock store using SET NX and GETSET semantics."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from .errors import ConfigurationError, StoreError
from .locks import LockStore

if TYPE_CHECKING:
    from .settings import LockRunSettings


class RedisLockStore(LockStore):
    def __init__(self, redis: Redis) -> None:
        self._redis = redis

    @classmethod
    def from_settings(cls, settings: "LockRunSettings") -> "RedisLockStore":
        if settings.redis_url:
            try:
                return cls(Redis.from_url(settings.redis_url, decode_responses=True))
            except ValueError as exc:
                raise ConfigurationError(f"Invalid REDIS_URL: {exc}") from exc
        host, port = settings.address()
        return cls(
            Redis(
                host=host,
                port=port,
                db=settings.redis_db,
                password=settings.redis_password or None,
                decode_responses=True,
            )
        )

    async def set_if_absent(self, key: str, value: str) -> bool:
        try:
            return bool(await self._redis.set(key, value, nx=True))
        except RedisError as exc:
            raise StoreError(f"SET NX {key} failed: {exc}") from exc

    async def get_and_set(self, key: str, value: str) -> Optional[str]:
        try:
            return await self._redis.getset(key, value)
        except RedisError as exc:
            raise StoreError(f"GETSET {key} failed: {exc}") from exc

    async def get(self, key: str) -> Optional[str]:
        try:
            return await self._redis.get(key)
        except RedisError as exc:
            raise StoreError(f"GET {key} failed: {exc}") from exc

    async def delete(self, key: str) -> None:
        try:
            await self._redis.delete(key)
        except RedisError as exc:
            raise StoreError(f"DEL {key} failed: {exc}") from exc

    async def close(self) -> None:
        await self._redis.aclose()
