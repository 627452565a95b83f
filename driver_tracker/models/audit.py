"""
Audit Models for Driver Tracker

Every write to the tracker document, and every recovery from bad data,
produces an audit event. Events go to the structured log only; they are
not stored in the tracker document.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Caller-supplied text quoted in a description is cut to this length
QUOTE_LIMIT = 80


def _quote(text: str) -> str:
    text = str(text)
    if len(text) <= QUOTE_LIMIT:
        return text
    return text[:QUOTE_LIMIT - 3] + "..."


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Writes
    DAY_UPDATED = "day_updated"
    WEEK_UPDATED = "week_updated"
    MONTHLY_EXPENSES_UPDATED = "monthly_expenses_updated"

    # Repairs
    MONTH_REPAIRED = "month_repaired"
    PATCH_KEY_IGNORED = "patch_key_ignored"

    # Persistence
    STORE_LOAD_FAILED = "store_load_failed"
    STORE_SAVE_FAILED = "store_save_failed"


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
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Which part of the document this is about
    year: Optional[int] = None
    month: Optional[int] = Field(default=None, ge=0, le=11)

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "year": self.year,
            "month": self.month,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.day_updated(2024, 4, 17, ["revenue"])
        event = AuditEventBuilder.store_save_failed("disk full")
    """

    @staticmethod
    def day_updated(
        year: int,
        month: int,
        day: int,
        fields: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DAY_UPDATED,
            year=year,
            month=month,
            description=f"Day {day} updated",
            details={"day": day, "fields": fields},
        )

    @staticmethod
    def week_updated(
        year: int,
        month: int,
        week: int,
        fields: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WEEK_UPDATED,
            year=year,
            month=month,
            description=f"Legacy week slot {week} updated",
            details={"week": week, "fields": fields},
        )

    @staticmethod
    def monthly_expenses_updated(
        year: int,
        month: int,
        fields: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MONTHLY_EXPENSES_UPDATED,
            year=year,
            month=month,
            description="Monthly expenses updated",
            details={"fields": fields},
        )

    @staticmethod
    def month_repaired(
        year: int,
        month: int,
        filled: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MONTH_REPAIRED,
            severity=AuditSeverity.DEBUG,
            year=year,
            month=month,
            description="Missing month structure back-filled",
            details={"filled": filled},
        )

    @staticmethod
    def patch_key_ignored(
        record_type: str,
        key: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PATCH_KEY_IGNORED,
            severity=AuditSeverity.WARNING,
            description=f"Unknown field '{_quote(key)}' ignored for {record_type}",
            details={"record_type": record_type, "key": key},
        )

    @staticmethod
    def store_load_failed(
        reason: str,
        error_message: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_LOAD_FAILED,
            severity=AuditSeverity.WARNING,
            description=f"Stored document not fully usable ({reason})",
            details={"reason": reason},
            error_message=error_message,
        )

    @staticmethod
    def store_save_failed(
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            description="Tracker document could not be saved",
            error_message=error_message,
        )
