"""
Audit Logger

DESIGN DECISION: Every mutation of the store is logged.
This provides:
1. A trail of what was added, deleted and exported, and from where
2. Debugging capability when a hand-edited file misbehaves

The audit logger:
- Writes structured events through structlog on top of stdlib logging
- Gracefully handles failures (never crashes the caller if logging fails)
"""

import logging
import sys
from typing import Optional

import structlog

from price_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditSeverity,
)
from price_ledger.models.record import Record


_configured = False


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure stdlib logging and structlog once per process.

    Later calls are ignored so that Streamlit reruns do not stack handlers.
    """
    global _configured
    if _configured:
        return

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Avoid duplicate handlers
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configured = True


class AuditLogger:
    """
    Central audit logging service.

    Logs every event to the structured local log at the event's severity.
    """

    def __init__(self, name: str = "price_ledger.audit"):
        self._logger = structlog.get_logger(name)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was written.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Logging must not break the main flow
            print(f"WARNING: Failed to write audit event: {e}", file=sys.stderr)
            return False

        return True

    def log_record_added(self, store_path: str, record: Record, position: int) -> None:
        """Log a record being appended."""
        self.log(
            AuditEventBuilder.record_added(
                store_path=store_path,
                product=record.product,
                price=record.display_price,
                position=position,
            )
        )

    def log_record_deleted(self, store_path: str, record: Record, position: int) -> None:
        """Log a record being removed."""
        self.log(
            AuditEventBuilder.record_deleted(
                store_path=store_path,
                product=record.product,
                position=position,
            )
        )

    def log_records_exported(
        self,
        store_path: str,
        destination: str,
        category: str,
        row_count: int,
    ) -> None:
        """Log an export snapshot."""
        self.log(
            AuditEventBuilder.records_exported(
                store_path=store_path,
                destination=destination,
                category=category,
                row_count=row_count,
            )
        )

    def log_query_executed(self, query_type: str, category: str, result_count: int) -> None:
        self.log(
            AuditEventBuilder.query_executed(
                query_type=query_type,
                category=category,
                result_count=result_count,
            )
        )

    def log_validation_failed(self, issues: list[dict]) -> None:
        self.log(AuditEventBuilder.validation_failed(issues))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        self.log(
            AuditEventBuilder.system_error(
                error_type=error_type,
                error_message=error_message,
                details=details,
            )
        )
