"""In-memory implementation of KeyStore"""

from keyclaim.mem.memory_key_store import MemoryKeyStore

__all__ = ["MemoryKeyStore"]
