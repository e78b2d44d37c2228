"""Backup export and import of the whole promoDesk data set.

Export produces one pretty-printed JSON document holding every entity
collection plus the market tags.  Import is all-or-nothing: the document
is parsed and every record validated before any collection is replaced,
so a corrupted file leaves the store exactly as it was.
"""

from __future__ import annotations

import json
from datetime import date
from typing import Any

import structlog
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from promodesk.models.entities import Record
from promodesk.store.domain_store import MARKETS_KEY, DomainStore
from promodesk.store.kinds import EntityKind
from promodesk.utils.errors import BackupCorruptedError
from promodesk.utils.logging import get_logger

DEFAULT_FILENAME_PREFIX = "promodesk-backup"

_MARKETS_ADAPTER = TypeAdapter(list[str])


class BackupService:
    """Builds and restores backup documents for a :class:`DomainStore`.

    Parameters
    ----------
    store:
        The store to snapshot and to restore into.
    filename_prefix:
        Prefix of suggested export file names.
    """

    def __init__(self, store: DomainStore, filename_prefix: str = DEFAULT_FILENAME_PREFIX) -> None:
        self._store = store
        self._filename_prefix = filename_prefix
        self._logger: structlog.BoundLogger = get_logger(__name__)

    def filename(self, today: date | None = None) -> str:
        """Suggested file name, e.g. ``promodesk-backup-2024-06-10.json``."""
        today = today or date.today()
        return f"{self._filename_prefix}-{today.isoformat()}.json"

    def export_document(self) -> dict[str, Any]:
        return self._store.snapshot()

    def export_json(self) -> str:
        """Serialize the current data set, indented by two spaces."""
        document = self.export_document()
        self._logger.info(
            "backup_exported",
            **{key: len(value) for key, value in document.items()},
        )
        return json.dumps(document, indent=2, ensure_ascii=False)

    def import_json(self, text: str | bytes) -> dict[str, int]:
        """Replace every collection with the contents of a backup document.

        Collections missing from the document become empty; unknown keys
        are ignored.  Returns the number of records restored per key.

        Raises
        ------
        BackupCorruptedError
            If the text is not JSON, not an object, or holds a record that
            does not validate.  Nothing is changed in that case.
        """
        try:
            document = json.loads(text)
        except ValueError as exc:
            raise BackupCorruptedError(message=f"Backup is not valid JSON: {exc}") from exc
        return self.import_document(document)

    def import_document(self, document: Any) -> dict[str, int]:
        if not isinstance(document, dict):
            raise BackupCorruptedError(message="Backup must be a JSON object")

        collections: dict[EntityKind, list[Record]] = {}
        for kind in EntityKind:
            raw = document.get(kind.storage_key) or []
            if not isinstance(raw, list):
                raise BackupCorruptedError(message=f"{kind.storage_key!r} must be a list")
            records: list[Record] = []
            for index, item in enumerate(raw):
                try:
                    records.append(kind.model.model_validate(item))
                except PydanticValidationError as exc:
                    raise BackupCorruptedError(
                        message=f"Invalid record {kind.storage_key}[{index}]: {exc.errors()[0]['msg']}"
                    ) from exc
            collections[kind] = records

        try:
            markets = _MARKETS_ADAPTER.validate_python(document.get(MARKETS_KEY) or [])
        except PydanticValidationError as exc:
            raise BackupCorruptedError(message=f"{MARKETS_KEY!r} must be a list of strings") from exc

        self._store.replace_collections(collections, markets)

        counts = {kind.storage_key: len(records) for kind, records in collections.items()}
        counts[MARKETS_KEY] = len(markets)
        self._logger.info("backup_imported", **counts)
        return counts
