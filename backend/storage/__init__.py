"""
Storage backends behind one repository interface
"""

from config import Settings
from enums import StorageBackend
from storage.base import Storage
from storage.errors import DuplicateRecordError, StorageError
from storage.memory import MemStorage


def create_storage(settings: Settings) -> Storage:
    """Select the backend named by settings. The SQL backend needs DATABASE_URL."""
    if settings.storage_backend == StorageBackend.SQL:
        if not settings.database_url:
            raise ValueError("DATABASE_URL is required when STORAGE_BACKEND=sql")
        # Imported lazily so the memory backend runs without a database driver
        from storage.sql import SqlStorage

        return SqlStorage(settings.database_url)
    return MemStorage()


__all__ = ["Storage", "MemStorage", "StorageError", "DuplicateRecordError", "create_storage"]
