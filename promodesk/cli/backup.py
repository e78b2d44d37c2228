"""Command-line backup export and import against the local SQLite store.

Usage::

    python -m promodesk.cli.backup export                  # JSON to stdout
    python -m promodesk.cli.backup export -o backup.json   # write a file
    python -m promodesk.cli.backup import backup.json      # replace all data

The database path defaults to ``STORAGE_DB_PATH`` from the environment /
``.env`` and can be overridden with ``--db``.  Log lines go to stderr so an
export piped from stdout stays valid JSON.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from promodesk.config.loader import load_config
from promodesk.config.settings import Settings
from promodesk.providers.storage.sqlite_storage import SQLiteStorageProvider
from promodesk.services.backup_service import DEFAULT_FILENAME_PREFIX, BackupService
from promodesk.store.domain_store import DomainStore
from promodesk.utils.errors import PromoDeskError
from promodesk.utils.logging import configure_logging


def _open_store(db_path: str) -> DomainStore:
    storage = SQLiteStorageProvider(db_path=db_path)
    storage.initialize()
    store = DomainStore(storage)
    store.hydrate()
    return store


def _export(service: BackupService, output: str | None) -> int:
    text = service.export_json()
    if output:
        Path(output).write_text(text, encoding="utf-8")
        print(f"Backup written to: {output}", file=sys.stderr)
    else:
        print(text)
    return 0


def _import(store: DomainStore, service: BackupService, path: str) -> int:
    source = Path(path)
    if not source.is_file():
        print(f"Error: file not found: {source}", file=sys.stderr)
        return 1
    counts = service.import_json(source.read_bytes())
    for key, count in counts.items():
        print(f"  {key}: {count}", file=sys.stderr)
    if store.persistence_warning:
        print(f"Warning: {store.persistence_warning}", file=sys.stderr)
        return 1
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m promodesk.cli.backup",
        description="Export or restore the promoDesk data set as a JSON backup.",
    )
    parser.add_argument(
        "--db",
        type=str,
        default=None,
        help="SQLite database path (defaults to STORAGE_DB_PATH).",
    )
    subcommands = parser.add_subparsers(dest="command", required=True)

    export_parser = subcommands.add_parser("export", help="Write a backup document.")
    export_parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Write the backup to a file instead of stdout.",
    )

    import_parser = subcommands.add_parser(
        "import", help="Replace all data with the contents of a backup file."
    )
    import_parser.add_argument("path", type=str, help="Backup JSON file to restore.")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the backup CLI and return the process exit code."""
    args = _build_parser().parse_args(argv)
    settings = Settings()
    configure_logging(log_level="WARNING", stream=sys.stderr)

    store = _open_store(args.db or settings.storage_db_path)
    prefix = load_config(settings=settings).get("backup", {}).get("filename_prefix", DEFAULT_FILENAME_PREFIX)
    service = BackupService(store, filename_prefix=prefix)
    try:
        if args.command == "export":
            return _export(service, args.output)
        return _import(store, service, args.path)
    except PromoDeskError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
