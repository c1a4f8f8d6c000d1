"""
Core Data Model for Price Ledger

A Record is one price observation: what was seen, where, for how much, and when.

DESIGN DECISION: Records carry no identity field. Their position in the
stored sequence is their only identity, which is what delete-by-position
relies on. Duplicates are legal and never merged.

The model is deliberately lenient about strings (an empty product can be
read back from a hand-edited file) and strict about price: it is always a
finite, non-negative Decimal with exactly two fraction digits.
"""

import re
import string
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

from pydantic import BaseModel, Field, field_validator


TWO_PLACES = Decimal("0.01")
ZERO_PRICE = Decimal("0.00")

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)

# Plain ASCII decimal notation: optional sign, digits with an optional
# fraction, optional exponent. No underscores, no non-ASCII digits.
PRICE_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def quantize_price(value: Decimal) -> Decimal:
    """Round a price to exactly two fraction digits (half up)."""
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def is_plain_number(text: str) -> bool:
    """True if `text` is a number written in plain ASCII decimal notation."""
    return PRICE_PATTERN.fullmatch(text) is not None


def ascii_casefold(value: str) -> str:
    """Lowercase ASCII letters only; other characters compare as-is."""
    return value.translate(_ASCII_LOWER)


def utc_timestamp() -> str:
    """Current instant as an RFC-3339 string, e.g. 2024-05-01T12:00:00+00:00."""
    return datetime.now(timezone.utc).isoformat()


class Record(BaseModel):
    """
    One price observation.

    Field order matches the canonical on-disk column order.
    """

    product: str = Field(
        default="",
        description="Display name of the product"
    )
    category: str = Field(
        default="",
        description="Free-text category; empty means uncategorized"
    )
    price: Decimal = Field(
        default=ZERO_PRICE,
        ge=0,
        description="Price with exactly two fraction digits"
    )
    url: str = Field(
        default="",
        description="Where the price was seen (not validated)"
    )
    timestamp: str = Field(
        default_factory=utc_timestamp,
        description="RFC-3339 creation instant, treated as opaque text"
    )

    @field_validator('price')
    @classmethod
    def normalize_price(cls, v: Decimal) -> Decimal:
        """Prices are always stored with two fraction digits (and never as -0.00)."""
        try:
            return quantize_price(v.copy_abs())
        except InvalidOperation:
            raise ValueError(f"Price out of range: {v}")

    @property
    def display_price(self) -> str:
        """Price as written to disk: two decimals, '.' separator."""
        return f"{self.price:.2f}"

    def matches_category(self, category: str) -> bool:
        """Case-insensitive (ASCII) category comparison."""
        return ascii_casefold(self.category) == ascii_casefold(category)

    def to_row(self) -> list[str]:
        """Cells in canonical column order."""
        return [
            self.product,
            self.category,
            self.display_price,
            self.url,
            self.timestamp,
        ]


class ValidationIssue(BaseModel):
    """A single problem found in user-entered data."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'negative')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )
