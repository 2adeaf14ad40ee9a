"""Environment variable constants for keyclaim.

This module centralizes all environment variable keys used throughout keyclaim
to avoid hardcoded strings and provide better maintainability.
"""

# Configuration
KEYCLAIM_CONFIG = "KEYCLAIM_CONFIG"
"""Environment variable to specify the KeyclaimConfig implementation.
Set this to a fully qualified class name to use a custom KeyclaimConfig implementation.
Default: keyclaim.config.default_keyclaim_config.DefaultKeyclaimConfig
"""

# Key store configuration
KEYCLAIM_KEY_STORE = "KEYCLAIM_KEY_STORE"
"""Environment variable to override the default key store implementation.
Set this to a fully qualified class name of a KeyStore constructible without arguments.
"""

# Serializer Configuration
KEYCLAIM_SERIALIZER = "KEYCLAIM_SERIALIZER"
"""Environment variable to override the serializer used for store state.
Default: keyclaim.serializers.pydantic_serializer.StoreStateSerializer
"""

# Filesystem configuration
KEYCLAIM_ROOT_DIR = "KEYCLAIM_ROOT_DIR"
"""Environment variable to specify the root directory for the file based key store"""

DEFAULT_ROOT_DIR = "keyclaim_data"

# Redis configuration
KEYCLAIM_REDIS_URL = "KEYCLAIM_REDIS_URL"
"""When set, the Redis key store is used by default"""

KEYCLAIM_REDIS_PASSWORD = "KEYCLAIM_REDIS_PASSWORD"

# SQL configuration
KEYCLAIM_DATABASE_URL = "KEYCLAIM_DATABASE_URL"
"""When set (and no Redis url is given), the SQL key store is used by default.
Must name an async driver, e.g. sqlite+aiosqlite:///keyclaim.db
"""

# Service configuration
CLAIM_SECRET = "CLAIM_SECRET"
"""Shared secret expected in the x-server-secret header of protected requests"""

DEFAULT_CLAIM_SECRET = "changeme_in_prod"

KEYCLAIM_DEFAULT_REWARD = "KEYCLAIM_DEFAULT_REWARD"
"""JSON object used as the reward for keys issued without an explicit reward"""

PORT = "PORT"

DEFAULT_PORT = 3000

SECRET_HEADER = "x-server-secret"
