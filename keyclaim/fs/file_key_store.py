import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
import fcntl
import logging
import os
from pathlib import Path
import tempfile
import time

from keyclaim.key_store import KeyStore
from keyclaim.keyclaim_error import PersistenceError
from keyclaim.serializers.serializer import Serializer, get_default_serializer
from keyclaim.store_state import StoreState

_LOGGER = logging.getLogger(__name__)


@dataclass
class FileKeyStore(KeyStore):
    """
    File based implementation of KeyStore.

    The state lives in a single document, 'store.json', under root_dir:
    - Saves write a temporary file in the same directory, fsync it and rename
      it over the document, so readers see either the old or the new state
    - Transactions are serialized within the process by an asyncio lock and
      across processes by an flock on 'store.lock'
    """

    root_dir: Path
    serializer: Serializer[StoreState] = field(default_factory=get_default_serializer)

    # Seconds to wait for the cross process lock before giving up
    lock_timeout: float = 30
    lock_poll_interval: float = 0.01

    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False)

    def __post_init__(self):
        """Initialize directory structure"""
        self.root_dir = Path(self.root_dir)
        self.root_dir.mkdir(parents=True, exist_ok=True)
        self.store_file = self.root_dir / "store.json"
        self.lock_file = self.root_dir / "store.lock"

    async def load(self) -> StoreState:
        try:
            with open(self.store_file, "rb") as f:
                data = f.read()
        except FileNotFoundError:
            return StoreState()
        except OSError as e:
            raise PersistenceError(f"Could not read {self.store_file}: {e}") from e
        return self._decode(data)

    async def save(self, state: StoreState) -> None:
        new_version, data = self._encode(state)
        temp_name = None
        try:
            fd, temp_name = tempfile.mkstemp(
                dir=self.root_dir, prefix=".store.", suffix=".tmp"
            )
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_name, self.store_file)
        except OSError as e:
            if temp_name:
                Path(temp_name).unlink(missing_ok=True)
            raise PersistenceError(f"Could not write {self.store_file}: {e}") from e
        state.version = new_version
        _LOGGER.debug(f"Saved version {new_version} to {self.store_file}")

    @asynccontextmanager
    async def lock(self):
        async with self._lock:
            try:
                lock_fd = open(self.lock_file, "a")
            except OSError as e:
                raise PersistenceError(f"Could not open {self.lock_file}: {e}") from e
            with lock_fd:
                await self._acquire_file_lock(lock_fd)
                try:
                    yield
                finally:
                    fcntl.flock(lock_fd, fcntl.LOCK_UN)

    async def _acquire_file_lock(self, lock_fd) -> None:
        deadline = time.monotonic() + self.lock_timeout
        while True:
            try:
                fcntl.flock(lock_fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
                return
            except BlockingIOError:
                if time.monotonic() >= deadline:
                    raise PersistenceError(
                        f"Timed out after {self.lock_timeout}s waiting for {self.lock_file}"
                    )
                await asyncio.sleep(self.lock_poll_interval)
