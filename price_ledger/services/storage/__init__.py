"""
Storage Services Package

Provides the abstract store interface and the CSV file implementation.
"""

from price_ledger.services.storage.interface import (
    RecordIndexError,
    RecordStorageInterface,
    StorageError,
    StoreDecodeError,
    StoreReadError,
    StoreWriteError,
)
from price_ledger.services.storage.codec import (
    HEADER,
    RowLayout,
    decode,
    decode_row,
    detect_layout,
    encode,
    parse_stored_price,
)
from price_ledger.services.storage.csv_store import CsvRecordStore

__all__ = [
    # Interfaces
    "RecordStorageInterface",
    # Exceptions
    "RecordIndexError",
    "StorageError",
    "StoreDecodeError",
    "StoreReadError",
    "StoreWriteError",
    # Codec
    "HEADER",
    "RowLayout",
    "decode",
    "decode_row",
    "detect_layout",
    "encode",
    "parse_stored_price",
    # CSV implementation
    "CsvRecordStore",
]
