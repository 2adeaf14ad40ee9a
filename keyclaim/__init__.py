"""
Keyclaim - one time redemption keys for links.

This package issues short human readable keys for opaque link identifiers and
lets a claimant redeem each key exactly once, on top of pluggable key stores.
"""

# Core interfaces
from keyclaim.claim_coordinator import ClaimCoordinator
from keyclaim.claim_result import ClaimResult, ClaimStatus, CreateResult, IssuedKey
from keyclaim.key_generator import KeyGenerator
from keyclaim.key_store import KeyStore, create_default_key_store
from keyclaim.keyclaim_error import (
    InvalidArgumentError,
    KeyclaimError,
    KeyGenerationError,
    PersistenceError,
    StaleStateError,
    StateConflictError,
)
from keyclaim.link_record import LinkRecord
from keyclaim.store_state import StoreState

# Memory implementation
from keyclaim.mem import MemoryKeyStore

# File implementation
from keyclaim.fs import FileKeyStore

__all__ = [
    # Core interfaces
    'ClaimCoordinator',
    'ClaimResult',
    'ClaimStatus',
    'CreateResult',
    'IssuedKey',
    'KeyGenerator',
    'KeyStore',
    'create_default_key_store',
    'LinkRecord',
    'StoreState',

    # Errors
    'KeyclaimError',
    'InvalidArgumentError',
    'KeyGenerationError',
    'PersistenceError',
    'StaleStateError',
    'StateConflictError',

    # Implementations
    'MemoryKeyStore',
    'FileKeyStore',
]
