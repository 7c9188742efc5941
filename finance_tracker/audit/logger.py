"""
Audit Logger

DESIGN DECISION: Every load and save of the finance record is logged.
This provides:
1. Traceability of each sync with storage
2. Debugging capability when the remote record is malformed
3. A visible trail of failed saves the user may need to retry
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from finance_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
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
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Renders AuditEvents through structlog at a level matching their severity.
    """

    def __init__(self, logger_name: str = "finance_tracker.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event."""
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log_record_loaded(self, user_identifier: str, correlation_id: UUID) -> None:
        self.log(AuditEventBuilder.record_loaded(user_identifier, correlation_id))

    def log_record_created(self, user_identifier: str, correlation_id: UUID) -> None:
        self.log(AuditEventBuilder.record_created(user_identifier, correlation_id))

    def log_record_defaulted(
        self,
        user_identifier: str,
        fields: list[str],
        correlation_id: UUID,
    ) -> None:
        """Log which fields had to fall back to defaults on load."""
        self.log(AuditEventBuilder.record_defaulted(user_identifier, fields, correlation_id))

    def log_load_failed(
        self,
        user_identifier: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.load_failed(user_identifier, error_message, correlation_id))

    def log_record_saved(
        self,
        user_identifier: str,
        updated_at: str,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.record_saved(user_identifier, updated_at, correlation_id))

    def log_save_failed(
        self,
        user_identifier: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.save_failed(user_identifier, error_message, correlation_id))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self.log(
            AuditEventBuilder.system_error(
                error_type=error_type,
                error_message=error_message,
                details=details,
                correlation_id=correlation_id,
            )
        )


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (e.g., pressing Save).
    """
    return uuid4()
