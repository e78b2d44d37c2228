"""Abstract base class for durable key-value storage providers.

The domain store keeps one JSON document per key (``radios``, ``artists``,
``sheetsConfig``, ...) and rewrites the whole value after every mutation,
the same per-key layout a browser's local storage offers.  Implementations
may use SQLite, an in-memory dict, or anything else that can hold strings.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class IStorageProvider(ABC):
    """Contract for per-key durable storage.

    Operations are synchronous: every lifecycle operation writes its
    touched collections before it returns.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the raw JSON text stored under *key*, or ``None`` if absent.

        Raises
        ------
        StorageReadError
            If the backend cannot be read.
        """

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store the JSON text *value* under *key*, replacing any previous value.

        Raises
        ------
        StorageWriteError
            If the value could not be durably written (quota exceeded,
            backend unavailable).
        """

    @abstractmethod
    def keys(self) -> list[str]:
        """Return every key currently stored."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
