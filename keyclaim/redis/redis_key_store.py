import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import LockError, RedisError

from keyclaim.key_store import KeyStore
from keyclaim.keyclaim_error import KeyclaimError, PersistenceError
from keyclaim.serializers.serializer import Serializer, get_default_serializer
from keyclaim.store_state import StoreState

_LOGGER = logging.getLogger(__name__)


@dataclass
class RedisKeyStore(KeyStore):
    """
    Redis based implementation of KeyStore.

    The whole state is stored as one string value (SET replaces it atomically).
    Transactions are serialized by a Redis lock with an expiry, so every process
    sharing the Redis instance takes turns.
    """

    redis_url: str = field(default="redis://localhost:6379")
    redis_db: int = field(default=0)
    redis_password: str | None = field(default=None)
    redis_prefix: str = field(default="keyclaim")
    serializer: Serializer[StoreState] = field(default_factory=get_default_serializer)

    # Seconds before an abandoned lock expires
    lock_expiration_seconds: float = field(default=60)
    # Seconds to wait for the lock before giving up
    lock_timeout_seconds: float = field(default=30)

    _redis: Optional[redis.Redis] = field(default=None, init=False)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False)

    def _get_redis_key(self, name: str) -> str:
        return f"{self.redis_prefix}:{name}"

    def _check_entered(self) -> redis.Redis:
        if self._redis is None:
            raise KeyclaimError(
                "RedisKeyStore must be entered using async context manager before use"
            )
        return self._redis

    async def __aenter__(self):
        self._redis = redis.from_url(
            self.redis_url,
            db=self.redis_db,
            password=self.redis_password,
            decode_responses=False,
        )
        try:
            await self._redis.ping()
        except RedisError as e:
            await self._redis.aclose()
            self._redis = None
            raise PersistenceError(f"Could not connect to Redis: {e}") from e
        _LOGGER.info(f"Started RedisKeyStore at {self.redis_url}")
        return self

    async def __aexit__(self, exc_type, exc_value, traceback):
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
        _LOGGER.info(f"Stopped RedisKeyStore at {self.redis_url}")

    async def load(self) -> StoreState:
        client = self._check_entered()
        try:
            data = await client.get(self._get_redis_key("state"))
        except RedisError as e:
            raise PersistenceError(f"Could not read store state: {e}") from e
        return self._decode(data)

    async def save(self, state: StoreState) -> None:
        client = self._check_entered()
        new_version, data = self._encode(state)
        try:
            await client.set(self._get_redis_key("state"), data)
        except RedisError as e:
            raise PersistenceError(f"Could not write store state: {e}") from e
        state.version = new_version

    @asynccontextmanager
    async def lock(self):
        client = self._check_entered()
        async with self._lock:
            redis_lock = client.lock(
                self._get_redis_key("lock"),
                timeout=self.lock_expiration_seconds,
                blocking_timeout=self.lock_timeout_seconds,
            )
            try:
                acquired = await redis_lock.acquire()
            except RedisError as e:
                raise PersistenceError(f"Could not acquire store lock: {e}") from e
            if not acquired:
                raise PersistenceError(
                    f"Timed out after {self.lock_timeout_seconds}s waiting for store lock"
                )
            try:
                yield
            finally:
                try:
                    await redis_lock.release()
                except LockError:
                    _LOGGER.warning("store_lock_expired_before_release", exc_info=True)
