"""Client storage factory.

Selects the storage adapter from settings:
- MemoryStorage for development and tests
- FileStorage for a durable local profile
"""

from storefront.config import Settings, StorageBackend
from storefront.storage.file_adapter import FileStorage
from storefront.storage.memory_adapter import MemoryStorage
from storefront.storage.port import ClientStorage


def build_storage(settings: Settings) -> ClientStorage:
    """Return the storage adapter configured by ``settings``."""
    if settings.storage_backend == StorageBackend.MEMORY:
        return MemoryStorage()
    if settings.storage_backend == StorageBackend.FILE:
        return FileStorage(settings.storage_path)
    raise ValueError(f"Unknown storage backend: {settings.storage_backend}")


__all__ = ["ClientStorage", "FileStorage", "MemoryStorage", "build_storage"]
