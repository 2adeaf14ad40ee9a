import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
import logging

from keyclaim.key_store import KeyStore
from keyclaim.serializers.serializer import Serializer, get_default_serializer
from keyclaim.store_state import StoreState

_LOGGER = logging.getLogger(__name__)


@dataclass
class MemoryKeyStore(KeyStore):
    """In-memory implementation of KeyStore.

    State is kept serialized so that callers never share mutable records with
    the store: only a save changes what the next load returns. Nothing survives
    the process.
    """

    serializer: Serializer[StoreState] = field(default_factory=get_default_serializer)

    # Internal storage
    _data: bytes | None = field(default=None, init=False)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False)

    async def load(self) -> StoreState:
        return self._decode(self._data)

    async def save(self, state: StoreState) -> None:
        new_version, data = self._encode(state)
        self._data = data
        state.version = new_version

    @asynccontextmanager
    async def lock(self):
        async with self._lock:
            yield
