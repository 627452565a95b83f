"""
Audit Logger

Every write to the tracker document, and every time the engine recovers
from bad or missing data, is logged as a structured event.

The audit logger:
- Never raises (a logging failure must not break a save)
- Logs through structlog, rendered as JSON lines by default
- Is optional everywhere; components fall back to a local-only logger
"""

import logging
from typing import Callable, Optional

import structlog
from pydantic import ValidationError

from driver_tracker.config import LoggingSettings
from driver_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


def _processors(renderer: str) -> list:
    final = (
        structlog.dev.ConsoleRenderer()
        if renderer == "console"
        else structlog.processors.JSONRenderer()
    )
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        final,
    ]


# Configure structlog for local logging
structlog.configure(
    processors=_processors("json"),
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """
    Apply logging settings.

    Sets the standard library level (structlog filters on it) and swaps
    the final renderer.
    """
    settings = settings or LoggingSettings()
    logging.basicConfig(format="%(message)s", level=settings.level)
    logging.getLogger("driver_tracker").setLevel(settings.level)
    structlog.configure(processors=_processors(settings.renderer))


class AuditLogger:
    """
    Central audit logging service.

    Writes AuditEvents to the structured log at the level matching
    their severity.
    """

    def __init__(self, logger_name: str = "driver_tracker.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the log call itself failed.
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
        except Exception:
            # A broken handler must not turn into a failed write.
            return False
        return True

    def _emit(self, build: Callable[..., AuditEvent], *args) -> bool:
        """Build an event with one of the AuditEventBuilder methods and log it."""
        try:
            event = build(*args)
        except ValidationError as e:
            # Event data out of range, e.g. month 12 or an oversized text
            try:
                self._logger.warning(
                    "audit_event_invalid",
                    builder=build.__name__,
                    errors=e.error_count(),
                )
            except Exception:
                pass
            return False
        return self.log(event)

    def log_day_updated(
        self,
        year: int,
        month: int,
        day: int,
        fields: list[str],
    ) -> None:
        """Log a day record write."""
        self._emit(AuditEventBuilder.day_updated, year, month, day, fields)

    def log_week_updated(
        self,
        year: int,
        month: int,
        week: int,
        fields: list[str],
    ) -> None:
        """Log a legacy week slot write."""
        self._emit(AuditEventBuilder.week_updated, year, month, week, fields)

    def log_monthly_expenses_updated(
        self,
        year: int,
        month: int,
        fields: list[str],
    ) -> None:
        self._emit(AuditEventBuilder.monthly_expenses_updated, year, month, fields)

    def log_month_repaired(
        self,
        year: int,
        month: int,
        filled: list[str],
    ) -> None:
        self._emit(AuditEventBuilder.month_repaired, year, month, filled)

    def log_patch_key_ignored(self, record_type: str, key: str) -> None:
        self._emit(AuditEventBuilder.patch_key_ignored, record_type, key)

    def log_store_load_failed(
        self,
        reason: str,
        error_message: Optional[str] = None,
    ) -> None:
        """Log that the stored document, or part of it, could not be used."""
        self._emit(AuditEventBuilder.store_load_failed, reason, error_message)

    def log_store_save_failed(self, error_message: str) -> None:
        self._emit(AuditEventBuilder.store_save_failed, error_message)
