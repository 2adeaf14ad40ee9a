class KeyclaimError(Exception):
    pass


class InvalidArgumentError(KeyclaimError):
    """Raised when a required input is missing or empty. Nothing is written."""


class PersistenceError(KeyclaimError):
    """Raised when the backing medium cannot be read or written.

    The operation in flight is abandoned and previously persisted state is left
    as it was.
    """


class StaleStateError(PersistenceError):
    """Raised by compare-and-swap stores when the persisted version moved on
    since the state being saved was loaded. The transaction should be retried
    from a fresh load.
    """


class KeyGenerationError(KeyclaimError):
    """Raised when no unused key could be found within the attempt budget"""


class StateConflictError(KeyclaimError):
    """Raised when a change would break the one key per link, one claim per key rules"""
