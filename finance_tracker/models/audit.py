"""
Audit Models for Finance Tracker

Each read and write of the finance record produces one AuditEvent,
so a broken sheet row or a lost save can be traced after the fact.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


RECORD_ENTITY = "finance_record"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """What happened to the finance record."""
    # Load path
    RECORD_LOADED = "record_loaded"
    RECORD_CREATED = "record_created"
    RECORD_DEFAULTED = "record_defaulted"
    LOAD_FAILED = "load_failed"

    # Save path
    RECORD_SAVED = "record_saved"
    SAVE_FAILED = "save_failed"

    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """One entry in the audit trail."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="UTC time the event was built"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Which record, and which load/save it belongs to
    entity_type: Optional[str] = None
    entity_id: Optional[str] = Field(
        default=None,
        description="User identifier keying the record"
    )
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Shared by all events of one load or one save"
    )

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None
    is_user_action: bool = Field(
        default=False,
        description="True for saves, which only happen on a click"
    )

    def to_log_dict(self) -> dict:
        """Flatten to JSON-friendly values for structlog."""
        return self.model_dump(mode="json")


class AuditEventBuilder:
    """
    Factory methods for the events FinanceSync emits.

    Usage:
        event = AuditEventBuilder.record_loaded("default_user", correlation_id)
        event = AuditEventBuilder.save_failed("default_user", "timeout", correlation_id)
    """

    @staticmethod
    def _for_record(
        event_type: AuditEventType,
        user_identifier: str,
        correlation_id: UUID,
        description: str,
        **extra: Any,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=event_type,
            entity_type=RECORD_ENTITY,
            entity_id=user_identifier,
            correlation_id=correlation_id,
            description=description,
            **extra,
        )

    @staticmethod
    def record_loaded(user_identifier: str, correlation_id: UUID) -> AuditEvent:
        return AuditEventBuilder._for_record(
            AuditEventType.RECORD_LOADED, user_identifier, correlation_id,
            "Finance record loaded",
        )

    @staticmethod
    def record_created(user_identifier: str, correlation_id: UUID) -> AuditEvent:
        return AuditEventBuilder._for_record(
            AuditEventType.RECORD_CREATED, user_identifier, correlation_id,
            "No finance record found; created a default one",
        )

    @staticmethod
    def record_defaulted(
        user_identifier: str,
        fields: list[str],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEventBuilder._for_record(
            AuditEventType.RECORD_DEFAULTED, user_identifier, correlation_id,
            f"Defaulted {len(fields)} missing or malformed fields",
            severity=AuditSeverity.DEBUG,
            details={"fields": fields},
        )

    @staticmethod
    def load_failed(user_identifier: str, error_message: str, correlation_id: UUID) -> AuditEvent:
        return AuditEventBuilder._for_record(
            AuditEventType.LOAD_FAILED, user_identifier, correlation_id,
            "Could not load finance record; keeping current state",
            severity=AuditSeverity.WARNING,
            error_message=error_message,
        )

    @staticmethod
    def record_saved(user_identifier: str, updated_at: str, correlation_id: UUID) -> AuditEvent:
        return AuditEventBuilder._for_record(
            AuditEventType.RECORD_SAVED, user_identifier, correlation_id,
            "Finance record saved",
            details={"updated_at": updated_at},
            is_user_action=True,
        )

    @staticmethod
    def save_failed(user_identifier: str, error_message: str, correlation_id: UUID) -> AuditEvent:
        return AuditEventBuilder._for_record(
            AuditEventType.SAVE_FAILED, user_identifier, correlation_id,
            "Could not save finance record",
            severity=AuditSeverity.ERROR,
            error_message=error_message,
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
