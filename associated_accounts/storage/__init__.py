# associated_accounts/storage/__init__.py

from .models import EventRecord
from .provider import StorageProvider
from .providers.memory_provider import InMemoryStorage
from .providers.sqlite_provider import SQLiteStorage
import os


def load_storage_provider(config: dict | None = None) -> StorageProvider:
    """
    Factory resolver for selecting the runtime storage backend.

    For now:
        - memory (default)
        - sqlite
    """
    config = config or {}
    provider = config.get("provider") or os.getenv("AA_STORAGE_PROVIDER", "memory")

    if provider == "memory":
        return InMemoryStorage()

    if provider == "sqlite":
        db_path = config.get("sqlite_path") or os.getenv("AA_DB_PATH", "db/associations.db")
        return SQLiteStorage(db_path)

    raise ValueError(f"Unknown storage provider: {provider}")


__all__ = [
    "EventRecord",
    "StorageProvider",
    "InMemoryStorage",
    "SQLiteStorage",
    "load_storage_provider",
]
