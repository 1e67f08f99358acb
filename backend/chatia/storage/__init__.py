"""Storage module - provides interface and implementations for data persistence."""

from .interface import KeyValueStorage
from .local_storage import LocalStorage
from .memory_storage import InMemoryStorage


def create_storage(storage_type: str = "local", base_dir: str = "./data", key_prefix: str = "") -> KeyValueStorage:
    """
    Create the configured storage backend.

    Args:
        storage_type: "local" or "memory"
        base_dir: Base directory for local storage
        key_prefix: Namespace prefix applied to every key

    Returns:
        KeyValueStorage instance
    """
    if storage_type == "local":
        return LocalStorage(base_dir, key_prefix=key_prefix)
    elif storage_type == "memory":
        return InMemoryStorage(key_prefix=key_prefix)
    else:
        raise ValueError(f"Unsupported storage type: {storage_type}")


__all__ = ['KeyValueStorage', 'LocalStorage', 'InMemoryStorage', 'create_storage']
