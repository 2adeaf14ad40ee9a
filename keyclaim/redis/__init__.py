"""Redis based implementation of KeyStore."""

from keyclaim.redis.redis_key_store import RedisKeyStore

__all__ = ["RedisKeyStore"]
