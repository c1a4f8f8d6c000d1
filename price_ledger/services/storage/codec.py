"""
CSV Codec for the price store

Translates between the on-disk text and the in-memory Record sequence.

Two row shapes exist in the wild:

    canonical (5+ columns):  product,category,price,url,timestamp
    legacy    (<5 columns):  product,price,url,timestamp

The legacy shape predates the category column. Files containing it are read
as-is, with no migration step; the next write emits the canonical shape for
every row.

DESIGN DECISION: The reader is tolerant. A price cell that does not parse
becomes 0.00 and a missing column becomes "". Only a line that cannot be
tokenized at all (broken quoting) is an error.
"""

import csv
import io
import sys
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Iterable

from price_ledger.models.record import (
    ZERO_PRICE,
    Record,
    is_plain_number,
    quantize_price,
)
from price_ledger.services.storage.interface import StoreDecodeError


HEADER = ("product", "category", "price", "url", "timestamp")

LINE_TERMINATOR = "\n"

# The csv writer only quotes cells containing characters of its own line
# terminator. Rows are rendered against "\r\n" so a bare "\r" is quoted too,
# then re-terminated with LINE_TERMINATOR.
_QUOTING_TERMINATOR = "\r\n"


def _raise_field_size_limit() -> None:
    """Lift the csv reader's per-field cap; stored cells have no size bound."""
    limit = sys.maxsize
    while True:
        try:
            csv.field_size_limit(limit)
            return
        except OverflowError:
            # C long is 32 bits on some platforms
            limit //= 10


_raise_field_size_limit()


class RowLayout(str, Enum):
    """Which column-assignment rule a stored row follows."""
    CANONICAL = "canonical"
    LEGACY = "legacy"


def detect_layout(row: list[str]) -> RowLayout:
    """Rows with at least five cells are canonical; anything shorter is legacy."""
    if len(row) >= len(HEADER):
        return RowLayout.CANONICAL
    return RowLayout.LEGACY


def parse_stored_price(cell: str) -> Decimal:
    """
    Lenient price parse for stored cells.

    Anything that is not a finite, non-negative number in plain ASCII
    notation becomes 0.00.
    """
    if not is_plain_number(cell):
        return ZERO_PRICE
    try:
        value = Decimal(cell)
    except (InvalidOperation, ValueError):
        return ZERO_PRICE
    if not value.is_finite() or value < 0:
        return ZERO_PRICE
    try:
        return quantize_price(value)
    except InvalidOperation:
        return ZERO_PRICE


def decode_row(row: list[str]) -> Record:
    """Map one tokenized row onto a Record."""
    # Handle missing columns gracefully
    def safe_get(index: int, default: str = "") -> str:
        try:
            return row[index]
        except IndexError:
            return default

    if detect_layout(row) is RowLayout.CANONICAL:
        return Record(
            product=safe_get(0),
            category=safe_get(1),
            price=parse_stored_price(safe_get(2)),
            url=safe_get(3),
            timestamp=safe_get(4),
        )

    return Record(
        product=safe_get(0),
        category="",
        price=parse_stored_price(safe_get(1)),
        url=safe_get(2),
        timestamp=safe_get(3),
    )


def decode(text: str) -> list[Record]:
    """
    Parse a whole store file.

    The first non-blank row is the header; it is skipped without checking
    its contents. Blank lines are ignored.

    Raises:
        StoreDecodeError: If a line cannot be split into columns
    """
    reader = csv.reader(io.StringIO(text, newline=""), strict=True)
    records = []
    header_seen = False

    try:
        for row in reader:
            if not row:
                continue
            if not header_seen:
                header_seen = True
                continue
            records.append(decode_row(row))
    except csv.Error as e:
        raise StoreDecodeError(
            f"Malformed line {reader.line_num}: {e}",
            line_number=reader.line_num,
        ) from e

    return records


def encode(records: Iterable[Record]) -> str:
    """
    Render records as store text: header plus one canonical row per record.

    Cells containing the delimiter, quotes or line breaks are quoted.
    """
    buffer = io.StringIO(newline="")
    writer = csv.writer(
        buffer,
        quoting=csv.QUOTE_MINIMAL,
        lineterminator=_QUOTING_TERMINATOR,
    )

    lines = []
    for row in [list(HEADER)] + [record.to_row() for record in records]:
        writer.writerow(row)
        line = buffer.getvalue()
        lines.append(line[: -len(_QUOTING_TERMINATOR)] + LINE_TERMINATOR)
        buffer.seek(0)
        buffer.truncate()

    return "".join(lines)
