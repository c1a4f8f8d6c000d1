"""
Data Models Package

All data flowing through Price Ledger conforms to these schemas.
"""

from price_ledger.models.record import (
    TWO_PLACES,
    ZERO_PRICE,
    Record,
    ValidationIssue,
    ascii_casefold,
    is_plain_number,
    quantize_price,
    utc_timestamp,
)
from price_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Record models
    "TWO_PLACES",
    "ZERO_PRICE",
    "Record",
    "ValidationIssue",
    "ascii_casefold",
    "is_plain_number",
    "quantize_price",
    "utc_timestamp",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
