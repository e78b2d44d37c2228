"""Unit tests for the SQLite and in-memory storage providers."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from promodesk.providers.storage.memory_storage import MemoryStorageProvider
from promodesk.providers.storage.sqlite_storage import SQLiteStorageProvider
from promodesk.store.domain_store import DomainStore
from promodesk.store.kinds import EntityKind
from promodesk.utils.errors import StorageReadError, StorageWriteError
from tests.factories import make_radio


@pytest.fixture
def sqlite_provider(tmp_path: Path) -> SQLiteStorageProvider:
    provider = SQLiteStorageProvider(db_path=tmp_path / "nested" / "promodesk.db")
    provider.initialize()
    return provider


# ======================================================================
# SQLite
# ======================================================================


class TestSQLiteStorage:
    def test_initialize_creates_parent_dirs(self, sqlite_provider: SQLiteStorageProvider, tmp_path: Path) -> None:
        assert (tmp_path / "nested" / "promodesk.db").exists()
        sqlite_provider.initialize()

    def test_get_missing_key(self, sqlite_provider: SQLiteStorageProvider) -> None:
        assert sqlite_provider.get("radios") is None

    def test_set_overwrites(self, sqlite_provider: SQLiteStorageProvider) -> None:
        sqlite_provider.set("theme", '"light"')
        sqlite_provider.set("theme", '"dark"')
        assert sqlite_provider.get("theme") == '"dark"'
        assert sqlite_provider.keys() == ["theme"]

    def test_provider_name(self, sqlite_provider: SQLiteStorageProvider) -> None:
        assert sqlite_provider.get_provider_name() == "sqlite:kv_store"

    def test_uninitialized_table_raises_read_error(self, tmp_path: Path) -> None:
        provider = SQLiteStorageProvider(db_path=tmp_path / "empty.db")
        with pytest.raises(StorageReadError):
            provider.get("radios")

    def test_write_error_is_translated(self, tmp_path: Path) -> None:
        provider = SQLiteStorageProvider(db_path=tmp_path / "other.db", table_name="missing")
        with pytest.raises(StorageWriteError):
            provider.set("radios", "[]")

    def test_store_survives_restart(self, sqlite_provider: SQLiteStorageProvider, tmp_path: Path) -> None:
        store = DomainStore(sqlite_provider)
        store.hydrate()
        saved = store.save(EntityKind.RADIOS, make_radio("Persistida"))

        reopened = SQLiteStorageProvider(db_path=tmp_path / "nested" / "promodesk.db")
        reopened.initialize()
        reloaded = DomainStore(reopened)
        reloaded.hydrate()

        assert reloaded.get(EntityKind.RADIOS, saved.id) == saved

    def test_values_are_plain_json_rows(self, sqlite_provider: SQLiteStorageProvider, tmp_path: Path) -> None:
        sqlite_provider.set("crowleyMarkets", '["Campinas"]')
        conn = sqlite3.connect(tmp_path / "nested" / "promodesk.db")
        try:
            row = conn.execute("SELECT value FROM kv_store WHERE key = 'crowleyMarkets'").fetchone()
        finally:
            conn.close()
        assert row == ('["Campinas"]',)


# ======================================================================
# Memory
# ======================================================================


class TestMemoryStorage:
    def test_round_trip(self) -> None:
        provider = MemoryStorageProvider(initial={"a": "1"})
        provider.set("b", "22")
        assert provider.get("a") == "1"
        assert provider.keys() == ["a", "b"]
        assert provider.used_bytes() == 3

    def test_quota_counts_replaced_value_once(self) -> None:
        provider = MemoryStorageProvider(quota_bytes=4)
        provider.set("k", "1234")
        provider.set("k", "abcd")
        assert provider.get("k") == "abcd"

    def test_quota_exceeded_keeps_old_value(self) -> None:
        provider = MemoryStorageProvider(quota_bytes=4)
        provider.set("k", "1234")
        with pytest.raises(StorageWriteError):
            provider.set("k", "12345")
        assert provider.get("k") == "1234"
