import importlib
import os
from typing import TypeVar

T = TypeVar("T")


def import_from(qual_name: str):
    """Import a value from its fully qualified name.

    This function is a utility to dynamically import any Python value (class, function, variable)
    from its fully qualified name. For example, 'keyclaim.mem.memory_key_store.MemoryKeyStore'
    would import the MemoryKeyStore class from the keyclaim.mem.memory_key_store module.

    Args:
        qual_name: A fully qualified name in the format 'module.submodule.name'

    Returns:
        The imported value (class, function, or variable)

    Example:
        >>> MemoryKeyStore = import_from('keyclaim.mem.memory_key_store.MemoryKeyStore')
        >>> store = MemoryKeyStore()
    """
    parts = qual_name.split(".")
    module_name = ".".join(parts[:-1])
    module = importlib.import_module(module_name)
    result = getattr(module, parts[-1])
    return result


def get_impl(key: str, base_type: type[T], default_type: type | None = None) -> type[T]:
    """Get the implementation class named by the environment variable given.

    Falls back to default_type when the variable is unset. Raises ValueError when
    neither is available.
    """
    value = os.getenv(key)
    if not value:
        if default_type is None:
            raise ValueError(f"No implementation configured for {key}")
        assert issubclass(default_type, base_type)
        return default_type
    imported_type = import_from(value)
    assert issubclass(imported_type, base_type)
    return imported_type
