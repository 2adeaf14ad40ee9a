"""SQL based key store implementation using SQLAlchemy."""

from .models import Base, SqlStoreState
from .sql_key_store import SqlKeyStore

__all__ = [
    "Base",
    "SqlStoreState",
    "SqlKeyStore",
]
