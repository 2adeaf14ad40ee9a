"""SQL based key store implementation."""

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
import logging
from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from keyclaim.key_store import KeyStore
from keyclaim.keyclaim_error import KeyclaimError, PersistenceError, StaleStateError
from keyclaim.serializers.serializer import Serializer, get_default_serializer
from keyclaim.sql.models import Base, SqlStoreState
from keyclaim.store_state import StoreState

_LOGGER = logging.getLogger(__name__)


@dataclass
class SqlKeyStore(KeyStore):
    """
    SQL based implementation of KeyStore using SQLAlchemy.

    The state is one row of the keyclaim_state table. Saves are a compare and
    swap on the row's version: a save only succeeds if nobody else saved since
    the state was loaded, otherwise StaleStateError is raised and the caller
    retries from a fresh load. The lock is local to this process; processes
    sharing the database rely on the version check.
    """

    database_url: str
    state_id: str = "default"
    serializer: Serializer[StoreState] = field(default_factory=get_default_serializer)

    # Database connection
    _engine: Optional[AsyncEngine] = field(default=None, init=False)
    _session_factory: Optional[async_sessionmaker] = field(default=None, init=False)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False)

    def _check_entered(self) -> async_sessionmaker:
        if self._session_factory is None:
            raise KeyclaimError(
                "SqlKeyStore must be entered using async context manager before use"
            )
        return self._session_factory

    async def __aenter__(self):
        """Connect and create tables if they don't exist"""
        self._engine = create_async_engine(self.database_url)
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            await self._engine.dispose()
            self._engine = None
            raise PersistenceError(f"Could not initialize database: {e}") from e
        self._session_factory = async_sessionmaker(bind=self._engine)
        _LOGGER.info(f"Started SqlKeyStore with database: {self._engine.url}")
        return self

    async def __aexit__(self, exc_type, exc_value, traceback):
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        _LOGGER.info("Stopped SqlKeyStore")

    async def load(self) -> StoreState:
        session_factory = self._check_entered()
        try:
            async with session_factory() as session:
                row = await session.get(SqlStoreState, self.state_id)
                if row is None:
                    return StoreState()
                data, version = row.data, row.version
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not read store state: {e}") from e
        state = self._decode(data)
        # Keep the row version even when the data was unreadable so that the
        # next save replaces the row instead of failing the version check.
        state.version = version
        return state

    async def save(self, state: StoreState) -> None:
        session_factory = self._check_entered()
        new_version, data = self._encode(state)
        try:
            async with session_factory() as session:
                if state.version == 0:
                    session.add(
                        SqlStoreState(id=self.state_id, version=new_version, data=data)
                    )
                else:
                    result = await session.execute(
                        update(SqlStoreState)
                        .where(
                            SqlStoreState.id == self.state_id,
                            SqlStoreState.version == state.version,
                        )
                        .values(version=new_version, data=data)
                    )
                    if result.rowcount != 1:
                        raise StaleStateError(
                            f"Store state {self.state_id} changed since version {state.version}"
                        )
                await session.commit()
        except IntegrityError as e:
            # Somebody else inserted the first version
            raise StaleStateError(
                f"Store state {self.state_id} was created concurrently"
            ) from e
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not write store state: {e}") from e
        state.version = new_version

    @asynccontextmanager
    async def lock(self):
        async with self._lock:
            yield
