"""Bulk export and import of every stored document.

The backup file is a two-column, semicolon-separated table with a
``Key;Value`` header and one row per stored document. Values are wrapped in
double quotes with embedded quotes doubled, and the file starts with a UTF-8
byte order mark so spreadsheet tools detect the encoding.
"""

import csv
import io
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from famfin.database.base import ALL_KEYS
from famfin.database.repository import LedgerRepository

logger = logging.getLogger(__name__)

BOM = "\ufeff"
HEADER = "Key;Value"


def quote_value(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def default_backup_name(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return f"famfin_backup_{now.strftime('%Y-%m-%d_%H-%M')}.csv"


class BackupService:
    """Service exporting and restoring the raw stored documents."""

    def __init__(self, repo: LedgerRepository):
        """Initialize backup service.

        Args:
            repo: Ledger repository
        """
        self.repo = repo

    def export_csv(self) -> str:
        """Render every stored document as backup text."""
        rows = [HEADER]
        for key in ALL_KEYS:
            value = self.repo.get_raw(key)
            if value:
                rows.append(f"{key};{quote_value(value)}")
        return BOM + "\n".join(rows)

    def export_to_file(self, path: Optional[str] = None) -> Path:
        """Write the backup to a file.

        Args:
            path: Target file or directory; a directory (or None, meaning the
                current directory) gets a timestamped file name

        Returns:
            Path of the written file
        """
        target = Path(path) if path else Path.cwd()
        if target.is_dir():
            target = target / default_backup_name()
        target.write_text(self.export_csv(), encoding="utf-8")
        logger.info("Exported backup to %s", target)
        return target

    def import_csv(self, text: str) -> bool:
        """Restore documents from backup text.

        Rows with unknown keys are skipped. Values are written back verbatim,
        without any validation, replacing what is stored.

        Returns:
            False if the text does not start with the backup header
        """
        reader = csv.reader(io.StringIO(text.lstrip(BOM), newline=""), delimiter=";")
        header = next(reader, None)
        if not header or HEADER not in ";".join(header):
            return False

        imported = 0
        for row in reader:
            if len(row) < 2 or not row[0].strip():
                continue
            key = row[0].strip()
            if key not in ALL_KEYS:
                logger.warning("Skipping unknown backup key %s", key)
                continue
            # Unquoted values may still contain the delimiter
            self.repo.put_raw(key, ";".join(row[1:]))
            imported += 1

        logger.info("Imported %d document(s) from backup", imported)
        return True

    def import_from_file(self, path: str) -> bool:
        """Restore documents from a backup file."""
        return self.import_csv(Path(path).read_text(encoding="utf-8-sig"))
