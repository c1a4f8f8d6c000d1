"""
Audit Models for Price Ledger

Every mutation of the store, and every rejected input, produces an audit
event that is written to the structured local log.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Store lifecycle
    STORE_CREATED = "store_created"
    STORE_REWRITTEN = "store_rewritten"

    # Record operations
    RECORD_ADDED = "record_added"
    RECORD_DELETED = "record_deleted"
    RECORDS_EXPORTED = "records_exported"

    # Queries
    QUERY_EXECUTED = "query_executed"

    # Input
    VALIDATION_FAILED = "validation_failed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """A single audit event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Records have no id, so events point at a store path and a position
    store_path: Optional[str] = Field(
        default=None,
        description="File the event relates to"
    )
    position: Optional[int] = Field(
        default=None,
        ge=0,
        description="Zero-based row position, for positional operations"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "event_timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "store_path": self.store_path,
            "position": self.position,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.record_added("prices.csv", record, 3)
        event = AuditEventBuilder.record_deleted("prices.csv", record, 0)
    """

    @staticmethod
    def store_created(store_path: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_CREATED,
            store_path=store_path,
            description=f"Created empty store at {store_path}",
        )

    @staticmethod
    def store_rewritten(store_path: str, row_count: int, atomic: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_REWRITTEN,
            severity=AuditSeverity.DEBUG,
            store_path=store_path,
            description=f"Rewrote {store_path} with {row_count} rows",
            details={
                "row_count": row_count,
                "atomic": atomic,
            },
        )

    @staticmethod
    def record_added(
        store_path: str,
        product: str,
        price: str,
        position: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_ADDED,
            store_path=store_path,
            position=position,
            description=f"Record added: {product} - {price}",
            details={
                "product": product,
                "price": price,
            },
            is_user_action=True,
        )

    @staticmethod
    def record_deleted(
        store_path: str,
        product: str,
        position: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_DELETED,
            store_path=store_path,
            position=position,
            description=f"Record deleted: {product}",
            details={
                "product": product,
            },
            is_user_action=True,
        )

    @staticmethod
    def records_exported(
        store_path: str,
        destination: str,
        category: str,
        row_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORDS_EXPORTED,
            store_path=store_path,
            description=f"Exported {row_count} rows to {destination}",
            details={
                "destination": destination,
                "category": category,
                "row_count": row_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def query_executed(
        query_type: str,
        category: str,
        result_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.QUERY_EXECUTED,
            severity=AuditSeverity.DEBUG,
            description=f"Query executed: {query_type} returned {result_count} results",
            details={
                "query_type": query_type,
                "category": category,
                "result_count": result_count,
            },
        )

    @staticmethod
    def validation_failed(issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            description=f"Input rejected with {len(issues)} issues",
            details={
                "issues": issues,
            },
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )
