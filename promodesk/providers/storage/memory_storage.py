"""In-memory key-value storage.

Used by tests and throwaway instances.  An optional byte quota emulates a
full browser store: a write that would push the total size of all values
past the quota raises :class:`StorageWriteError` and leaves the previous
value in place.
"""

from __future__ import annotations

import structlog

from promodesk.interfaces.storage_provider import IStorageProvider
from promodesk.utils.errors import StorageWriteError

logger = structlog.get_logger(logger_name=__name__)


class MemoryStorageProvider(IStorageProvider):
    """Dict-backed storage.

    Parameters
    ----------
    quota_bytes:
        Maximum total size (UTF-8 bytes of all values).  ``None`` means
        unlimited.
    initial:
        Optional pre-populated key/value pairs, e.g. to simulate a store
        written by an earlier session.
    """

    def __init__(self, quota_bytes: int | None = None, initial: dict[str, str] | None = None) -> None:
        self._quota_bytes = quota_bytes
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self._quota_bytes is not None:
            current = self.used_bytes() - len(self._data.get(key, "").encode("utf-8"))
            needed = current + len(value.encode("utf-8"))
            if needed > self._quota_bytes:
                logger.debug("memory_storage_quota_exceeded", key=key, needed=needed)
                raise StorageWriteError(
                    message=f"Quota of {self._quota_bytes} bytes exceeded writing {key!r}",
                    provider_name=self.get_provider_name(),
                )
        self._data[key] = value

    def keys(self) -> list[str]:
        return sorted(self._data)

    def used_bytes(self) -> int:
        """Return the total UTF-8 size of all stored values."""
        return sum(len(v.encode("utf-8")) for v in self._data.values())

    def get_provider_name(self) -> str:
        return "memory"
