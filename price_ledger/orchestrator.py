"""
Main Orchestrator for Price Ledger

This module ties the store, the validator and the query engine together
behind the handful of operations the interactive shell needs:

1. Add a price          (validate -> append)
2. List all prices      (load)
3. Cheapest option      (load -> filter -> min)
4. Export a snapshot    (load -> filter -> write elsewhere)
5. Delete by position   (load -> remove -> rewrite)

DESIGN DECISION: The shell never talks to the store directly.
Storage errors propagate to it unchanged; validation errors are raised as
RecordValidationError so it can re-prompt.
"""

from pathlib import Path
from typing import Callable, Optional

from price_ledger.audit import AuditLogger, configure_logging
from price_ledger.config import Settings, get_settings
from price_ledger.models.record import Record, utc_timestamp
from price_ledger.queries import cheapest, distinct_categories, filter_by_category
from price_ledger.services.storage import (
    CsvRecordStore,
    RecordStorageInterface,
    StoreWriteError,
)
from price_ledger.validation import RecordValidationError, RecordValidator


class PriceLedger:
    """
    Core-facing interface used by the interactive shell.

    Every call reads the store from disk; nothing is cached between calls.
    """

    def __init__(
        self,
        store: RecordStorageInterface,
        validator: Optional[RecordValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Optional[Callable[[], str]] = None,
        default_export_path: str = "export.csv",
        atomic_writes: bool = False,
    ):
        self._store = store
        self._validator = validator or RecordValidator()
        self._audit_logger = audit_logger
        self._clock = clock or utc_timestamp
        self._default_export_path = default_export_path
        self._atomic_writes = atomic_writes

    @property
    def store(self) -> RecordStorageInterface:
        return self._store

    @property
    def default_export_path(self) -> str:
        return self._default_export_path

    def _store_name(self) -> str:
        return str(getattr(self._store, "path", type(self._store).__name__))

    def add_record(
        self,
        product: str,
        category: str,
        price_text: str,
        url: str,
    ) -> Record:
        """
        Validate user input, stamp it with the current time and append it.

        Raises:
            RecordValidationError: If the product is empty or the price
                does not parse. The store is not touched.
            StorageError: If the store cannot be read or rewritten
        """
        try:
            record = self._validator.build_record(
                product=product,
                category=category,
                price_text=price_text,
                url=url,
                timestamp=self._clock(),
            )
        except RecordValidationError as e:
            if self._audit_logger:
                self._audit_logger.log_validation_failed(e.to_dicts())
            raise

        position = self._store.append(record)

        if self._audit_logger:
            self._audit_logger.log_record_added(self._store_name(), record, position)

        return record

    def list_all(self) -> list[Record]:
        """Every record in stored order. Empty list for an empty store."""
        return self._store.load_all()

    def list_categories(self) -> list[str]:
        """Distinct non-empty categories, in the order they first appear."""
        return distinct_categories(self._store.load_all())

    def cheapest_in_category(self, category: str = "") -> Optional[Record]:
        """
        Cheapest record in a category (empty string = all categories).

        Returns None when nothing matches; that is an expected outcome.
        """
        matching = filter_by_category(self._store.load_all(), category)
        best = cheapest(matching)

        if self._audit_logger:
            self._audit_logger.log_query_executed(
                query_type="cheapest",
                category=category,
                result_count=0 if best is None else 1,
            )

        return best

    def export_filtered(
        self,
        destination: Optional[str] = None,
        category: str = "",
    ) -> int:
        """
        Write header + matching records to `destination`, replacing any file there.

        The primary store is only read. Returns the number of rows written.

        Raises:
            StoreWriteError: If the destination cannot be created or written
        """
        destination = destination or self._default_export_path
        rows = filter_by_category(self._store.load_all(), category)

        # The export target must never alias the primary store
        store_path = getattr(self._store, "path", None)
        if store_path is not None and _same_file(Path(destination), store_path):
            raise StoreWriteError(f"Export destination is the store itself: {destination}")

        CsvRecordStore(destination, atomic_writes=self._atomic_writes).replace_all(rows)

        if self._audit_logger:
            self._audit_logger.log_records_exported(
                store_path=self._store_name(),
                destination=destination,
                category=category,
                row_count=len(rows),
            )

        return len(rows)

    def delete_at(self, index: int) -> Record:
        """
        Delete the record at a zero-based position and return it.

        Raises:
            RecordIndexError: If the position is out of range (store unchanged)
        """
        removed = self._store.delete_at(index)

        if self._audit_logger:
            self._audit_logger.log_record_deleted(self._store_name(), removed, index)

        return removed

    def report_error(self, error: Exception) -> None:
        """Record a failure the shell caught and showed to the user."""
        if self._audit_logger:
            self._audit_logger.log_error(
                error_type=type(error).__name__,
                error_message=str(error),
                details={"store_path": self._store_name()},
            )


def _same_file(a: Path, b: Path) -> bool:
    return a.resolve() == Path(b).resolve()


def format_record(record: Record) -> str:
    """One-line rendering used by the shell."""
    return (
        f"{record.product} | {record.category} | {record.display_price} | "
        f"{record.url} | {record.timestamp}"
    )


def create_app_components(settings: Optional[Settings] = None) -> PriceLedger:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use; defaults to the cached environment settings.

    Returns:
        A PriceLedger wired to the configured CSV store
    """
    settings = settings or get_settings()
    app_settings = settings.app
    store_settings = settings.store

    configure_logging(
        level=app_settings.effective_log_level,
        json_logs=app_settings.log_json,
    )

    audit_logger = AuditLogger()
    store = CsvRecordStore(
        store_settings.store_path,
        atomic_writes=store_settings.atomic_writes,
        audit_logger=audit_logger,
    )
    store.ensure_exists()

    return PriceLedger(
        store=store,
        audit_logger=audit_logger,
        default_export_path=store_settings.export_path,
        atomic_writes=store_settings.atomic_writes,
    )
