"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the query and validation code independent of the file format
2. Swap the CSV file for another backend later
3. Point a second store at an export destination with the same code

The interface is intentionally small. Every mutation is expressed as
load-then-replace_all, so replace_all is the only primitive that writes.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from price_ledger.models.record import Record


class RecordStorageInterface(ABC):
    """
    Abstract interface for record storage operations.

    Records are ordered: insertion order = storage order = display order.
    """

    @abstractmethod
    def ensure_exists(self) -> bool:
        """
        Create an empty store (header only) if there is none yet.

        Returns:
            True if the store was created by this call

        Raises:
            StoreWriteError: If the store cannot be created
        """
        pass

    @abstractmethod
    def load_all(self) -> list[Record]:
        """
        Read every record, in stored order.

        Raises:
            StoreReadError: If the store cannot be opened or tokenized
        """
        pass

    @abstractmethod
    def append(self, record: Record) -> int:
        """
        Add a record after all existing ones.

        Returns:
            Position of the new record

        Raises:
            StoreReadError: If the existing records cannot be read
            StoreWriteError: If the rewrite fails
        """
        pass

    @abstractmethod
    def replace_all(self, records: Sequence[Record]) -> None:
        """
        Replace the whole store with `records`.

        Raises:
            StoreWriteError: If the store cannot be written
        """
        pass

    @abstractmethod
    def delete_at(self, index: int) -> Record:
        """
        Remove the record at `index`.

        Returns:
            The removed record

        Raises:
            RecordIndexError: If index is outside [0, len); store unchanged
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StoreReadError(StorageError):
    """Store exists but could not be opened or read."""
    pass


class StoreDecodeError(StoreReadError):
    """A stored line could not be split into columns."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        super().__init__(message)
        self.line_number = line_number


class StoreWriteError(StorageError):
    """Store or export destination could not be created or written."""
    pass


class RecordIndexError(StorageError, IndexError):
    """Positional operation given an out-of-range position."""

    def __init__(self, index: int, length: int):
        super().__init__(f"Position {index} out of range for {length} records")
        self.index = index
        self.length = length
