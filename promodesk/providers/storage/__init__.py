"""Key-value storage providers.

Two implementations of IStorageProvider:
    1. SQLiteStorageProvider -- durable single-file store used by the app.
    2. MemoryStorageProvider -- in-process dict with an optional byte quota,
       used in tests to simulate a full store.
"""

from promodesk.providers.storage.memory_storage import MemoryStorageProvider
from promodesk.providers.storage.sqlite_storage import SQLiteStorageProvider

__all__ = ["MemoryStorageProvider", "SQLiteStorageProvider"]
