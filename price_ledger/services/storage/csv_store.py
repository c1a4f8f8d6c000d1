"""
CSV File Storage Implementation

DESIGN DECISION: A single CSV file is the whole database because:
1. Users can open and hand-edit their data in any spreadsheet
2. No database setup required
3. The data set is one person's shopping notes, not a warehouse

TRADEOFFS:
- Every mutation rewrites the whole file (O(total rows))
- No locking. If another process changes the file between our read and
  our rewrite, its change is lost. This is accepted for a single-user tool.
- In-place mode truncates before writing, so a crash mid-write leaves a
  header-only file. `atomic_writes=True` writes a sibling temp file and
  renames it over the store instead; the resulting file is identical.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional, Sequence, Union

import structlog

from price_ledger.audit.logger import AuditLogger
from price_ledger.models.audit import AuditEventBuilder
from price_ledger.models.record import Record
from price_ledger.services.storage.codec import decode, encode
from price_ledger.services.storage.interface import (
    RecordIndexError,
    RecordStorageInterface,
    StoreReadError,
    StoreWriteError,
)


logger = structlog.get_logger(__name__)

# utf-8-sig drops a BOM left behind by spreadsheet tools
READ_ENCODING = "utf-8-sig"
WRITE_ENCODING = "utf-8"


class CsvRecordStore(RecordStorageInterface):
    """
    File-backed record store.

    The file is created lazily (header only) by the first operation.
    After any successful mutation it holds the header plus every current
    record in the canonical 5-column layout, so reading a legacy file and
    writing once upgrades it.
    """

    def __init__(
        self,
        path: Union[str, os.PathLike],
        atomic_writes: bool = False,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._path = Path(path)
        self._atomic_writes = atomic_writes
        self._audit_logger = audit_logger

    @property
    def path(self) -> Path:
        return self._path

    def ensure_exists(self) -> bool:
        """Create the file with only the header line if it is missing."""
        if self._path.exists():
            return False

        self._write_text(encode([]))

        if self._audit_logger:
            self._audit_logger.log(AuditEventBuilder.store_created(str(self._path)))
        return True

    def load_all(self) -> list[Record]:
        """Read and decode the whole file."""
        self.ensure_exists()

        try:
            with open(self._path, "r", encoding=READ_ENCODING, newline="") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StoreReadError(f"Failed to read {self._path}: {e}") from e

        records = decode(text)
        logger.debug("store_loaded", path=str(self._path), row_count=len(records))
        return records

    def append(self, record: Record) -> int:
        """Add a record at the end. Rewrites the whole file."""
        records = self.load_all()
        records.append(record)
        self.replace_all(records)
        return len(records) - 1

    def replace_all(self, records: Sequence[Record]) -> None:
        """Rewrite the file with header + `records`. The only write path."""
        self.ensure_exists()

        text = encode(records)
        if self._atomic_writes:
            self._replace_atomically(text)
        else:
            self._write_text(text)

        if self._audit_logger:
            self._audit_logger.log(
                AuditEventBuilder.store_rewritten(
                    str(self._path), len(records), self._atomic_writes
                )
            )

    def delete_at(self, index: int) -> Record:
        """Remove the record at a zero-based position."""
        records = self.load_all()
        if not 0 <= index < len(records):
            raise RecordIndexError(index, len(records))

        removed = records.pop(index)
        self.replace_all(records)
        return removed

    def _write_text(self, text: str) -> None:
        """Truncate the file and write `text`."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w", encoding=WRITE_ENCODING, newline="") as f:
                f.write(text)
        except OSError as e:
            raise StoreWriteError(f"Failed to write {self._path}: {e}") from e

    def _replace_atomically(self, text: str) -> None:
        """Write `text` to a temp file next to the store and rename it over."""
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding=WRITE_ENCODING,
                newline="",
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(text)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, self._path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StoreWriteError(f"Failed to write {self._path}: {e}") from e
