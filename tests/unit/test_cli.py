"""Unit tests for the backup CLI (promodesk.cli.backup)."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from promodesk.cli.backup import main
from promodesk.providers.storage.sqlite_storage import SQLiteStorageProvider
from promodesk.store.domain_store import DomainStore
from promodesk.store.kinds import EntityKind
from tests.factories import make_artist


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    path = tmp_path / "cli.db"
    storage = SQLiteStorageProvider(db_path=path)
    storage.initialize()
    store = DomainStore(storage)
    store.hydrate()
    store.save(EntityKind.ARTISTS, make_artist("Ana"))
    store.add_market("Campinas")
    return str(path)


def _artists(db_path: str) -> list[str]:
    storage = SQLiteStorageProvider(db_path=db_path)
    storage.initialize()
    store = DomainStore(storage)
    store.hydrate()
    return [a.name for a in store.records(EntityKind.ARTISTS)]  # type: ignore[attr-defined]


class TestExportCommand:
    def test_export_to_stdout(self, db_path: str, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--db", db_path, "export"]) == 0
        document = json.loads(capsys.readouterr().out)
        assert document["artists"][0]["name"] == "Ana"
        assert document["crowleyMarkets"] == ["Campinas"]

    def test_export_to_file(self, db_path: str, tmp_path: Path) -> None:
        target = tmp_path / "backup.json"
        assert main(["--db", db_path, "export", "-o", str(target)]) == 0
        assert json.loads(target.read_text(encoding="utf-8"))["artists"][0]["name"] == "Ana"


class TestImportCommand:
    def test_import_replaces_data(self, db_path: str, tmp_path: Path) -> None:
        source = tmp_path / "restore.json"
        source.write_text(json.dumps({"artists": [{"id": "a1", "name": "Restored"}]}), encoding="utf-8")

        assert main(["--db", db_path, "import", str(source)]) == 0
        assert _artists(db_path) == ["Restored"]

    def test_corrupted_file_fails_without_changes(self, db_path: str, tmp_path: Path) -> None:
        source = tmp_path / "broken.json"
        source.write_text("{oops", encoding="utf-8")

        assert main(["--db", db_path, "import", str(source)]) == 1
        assert _artists(db_path) == ["Ana"]

    def test_missing_file(self, db_path: str, tmp_path: Path) -> None:
        assert main(["--db", db_path, "import", str(tmp_path / "nope.json")]) == 1
