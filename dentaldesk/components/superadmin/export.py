"""
Database export.

Writes every application table into one timestamped JSON document in the
export directory, with a .sha256 file beside it for verification. The
newest export doubles as the console's "last backup".
"""

from __future__ import annotations

import hashlib
import json
import logging
from datetime import UTC, datetime
from pathlib import Path

from .models import ExportResult
from .ports import TableExporterPort, TimePort

logger = logging.getLogger(__name__)

EXPORT_PREFIX = "dentaldesk_export_"
EXPORT_FORMAT_VERSION = 1


def get_file_hash(file_path: Path) -> str:
    """Calculate SHA256 hash of a file."""
    hasher = hashlib.sha256()
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


def find_latest_export(export_dir: Path) -> datetime | None:
    """Modification time of the newest export file, or None if there is none."""
    if not export_dir.is_dir():
        return None
    mtimes = [p.stat().st_mtime for p in export_dir.glob(f"{EXPORT_PREFIX}*.json")]
    if not mtimes:
        return None
    return datetime.fromtimestamp(max(mtimes), tz=UTC)


class DatabaseExporter:
    def __init__(
        self,
        tables: TableExporterPort,
        export_dir: Path,
        table_names: list[str],
        time: TimePort,
    ) -> None:
        self._tables = tables
        self._export_dir = export_dir
        self._table_names = list(table_names)
        self._time = time

    def export(self) -> ExportResult:
        now = self._time.now_utc()
        dump = self._tables.dump_tables(self._table_names)

        self._export_dir.mkdir(parents=True, exist_ok=True)
        filename = f"{EXPORT_PREFIX}{now.strftime('%Y%m%d_%H%M%S_%f')}.json"
        path = self._export_dir / filename

        document = {
            "format_version": EXPORT_FORMAT_VERSION,
            "exported_at": now.isoformat(),
            "tables": dump,
        }
        with open(path, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2, ensure_ascii=False, default=str)

        digest = get_file_hash(path)
        path.with_suffix(".sha256").write_text(f"{digest}  {filename}\n", encoding="utf-8")

        counts = {name: len(rows) for name, rows in dump.items()}
        logger.info("Database exported to %s (%d tables)", path, len(counts))

        return ExportResult(
            path=path,
            filename=filename,
            sha256=digest,
            size_bytes=path.stat().st_size,
            created_at=now,
            row_counts=counts,
        )
