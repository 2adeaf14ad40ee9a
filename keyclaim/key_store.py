from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from dataclasses import replace
import logging
import os
from pathlib import Path

from keyclaim.constants import (
    DEFAULT_ROOT_DIR,
    KEYCLAIM_DATABASE_URL,
    KEYCLAIM_KEY_STORE,
    KEYCLAIM_REDIS_PASSWORD,
    KEYCLAIM_REDIS_URL,
    KEYCLAIM_ROOT_DIR,
)
from keyclaim.serializers.serializer import Serializer
from keyclaim.store_state import StoreState
from keyclaim.util import get_impl

_LOGGER = logging.getLogger(__name__)


class KeyStore(ABC):
    """Durable home of the store state.

    The state is always read and written as a whole. A save either fully
    replaces the previous state or leaves it untouched, so a load never sees a
    mixture of the two. Stores do not make a load/save pair atomic on their
    own: callers wrap each read-modify-write in `lock()`, and compare-and-swap
    stores additionally reject saves of stale state with StaleStateError.
    """

    serializer: Serializer[StoreState]

    @abstractmethod
    async def load(self) -> StoreState:
        """Load the current state.

        Returns an empty state when nothing was saved yet or when the saved
        data is corrupt. Raises PersistenceError when the medium itself cannot
        be read.
        """

    @abstractmethod
    async def save(self, state: StoreState) -> None:
        """Replace the persisted state with the state given and bump its version.

        Raises PersistenceError when the medium cannot be written, in which case
        the previously persisted state is unchanged.
        """

    @abstractmethod
    def lock(self) -> AbstractAsyncContextManager[None]:
        """Context manager holding exclusive access to this store for one transaction"""

    async def __aenter__(self):
        """Begin using this key store"""
        return self

    async def __aexit__(self, exc_type, exc_value, traceback):
        """Finish using this key store"""

    def _decode(self, data: bytes | None) -> StoreState:
        if not data or not data.strip():
            return StoreState()
        try:
            return self.serializer.deserialize(data)
        except (ValueError, TypeError):
            _LOGGER.error(
                f"corrupt_store_state:{type(self).__name__} - starting from an empty state",
                exc_info=True,
            )
            return StoreState()

    def _encode(self, state: StoreState) -> tuple[int, bytes]:
        """Serialize state as it will look once saved, returning the new version"""
        new_version = state.version + 1
        data = self.serializer.serialize(replace(state, version=new_version))
        return new_version, data


def create_default_key_store() -> KeyStore:
    """Create the key store configured by the environment.

    KEYCLAIM_KEY_STORE names a KeyStore class explicitly. Otherwise a Redis store
    is used when KEYCLAIM_REDIS_URL is set, a SQL store when KEYCLAIM_DATABASE_URL
    is set, and a file store under KEYCLAIM_ROOT_DIR in all other cases.
    """
    redis_url = os.getenv(KEYCLAIM_REDIS_URL)
    database_url = os.getenv(KEYCLAIM_DATABASE_URL)
    if os.getenv(KEYCLAIM_KEY_STORE):
        store_class = get_impl(KEYCLAIM_KEY_STORE, KeyStore)
        key_store = store_class()
    elif redis_url:
        from keyclaim.redis.redis_key_store import RedisKeyStore

        key_store = RedisKeyStore(
            redis_url=redis_url,
            redis_password=os.getenv(KEYCLAIM_REDIS_PASSWORD),
        )
    elif database_url:
        from keyclaim.sql.sql_key_store import SqlKeyStore

        key_store = SqlKeyStore(database_url=database_url)
    else:
        from keyclaim.fs.file_key_store import FileKeyStore

        root_dir = Path(os.getenv(KEYCLAIM_ROOT_DIR, DEFAULT_ROOT_DIR))
        key_store = FileKeyStore(root_dir=root_dir)

    _LOGGER.info(f"Using Key Store: {type(key_store).__name__}")
    return key_store
