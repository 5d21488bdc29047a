"""
Prompt Pages Storage - Persistence collaborators for page configurations.
"""

from promptpages.core.base import Registry
from promptpages.storage.base import BasePageStorage, PageRecord, PageStorageProtocol
from promptpages.storage.memory import InMemoryPageStorage

# Global storage registry
storage_registry: Registry[BasePageStorage] = Registry(name="page_storage")


def register_default_storage() -> None:
    """Register the in-memory backend as the default."""
    storage_registry.register("memory", InMemoryPageStorage(), set_as_default=True)


def get_storage(backend: str = "memory") -> BasePageStorage:
    """
    Get a storage backend by name, registering the default on first use.

    Raises:
        KeyError: If the backend is not registered
    """
    if backend == "memory" and backend not in storage_registry:
        register_default_storage()
    storage = storage_registry.get(backend)
    if storage is None:
        raise KeyError(f"Page storage '{backend}' is not registered")
    return storage


__all__ = [
    "BasePageStorage",
    "PageRecord",
    "PageStorageProtocol",
    "InMemoryPageStorage",
    "storage_registry",
    "register_default_storage",
    "get_storage",
]
