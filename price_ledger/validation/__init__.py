"""Input validation package."""

from price_ledger.validation.validator import (
    RecordValidationError,
    RecordValidator,
    check_price_text,
    parse_price_text,
)

__all__ = [
    "RecordValidationError",
    "RecordValidator",
    "check_price_text",
    "parse_price_text",
]
