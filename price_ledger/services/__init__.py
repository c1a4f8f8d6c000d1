"""Services package."""

from price_ledger.services.storage import (
    CsvRecordStore,
    RecordIndexError,
    RecordStorageInterface,
    StorageError,
    StoreDecodeError,
    StoreReadError,
    StoreWriteError,
)

__all__ = [
    "CsvRecordStore",
    "RecordIndexError",
    "RecordStorageInterface",
    "StorageError",
    "StoreDecodeError",
    "StoreReadError",
    "StoreWriteError",
]
