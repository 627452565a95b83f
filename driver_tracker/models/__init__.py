"""
Data Models Package

This package contains all Pydantic models used by the driver tracker.
Everything stored in, or computed from, the tracker document conforms to
these schemas.
"""

from driver_tracker.models.records import (
    LEGACY_SUMMARY_SLOTS,
    WEEK_SLOTS,
    DailyExpenses,
    DailyPerformance,
    DataStore,
    DayData,
    MonthData,
    MonthlyExpenses,
    TrackerRecord,
    WeekData,
    WeeklyPerformance,
    as_index,
    coerce_amount,
)
from driver_tracker.models.summary import (
    MonthSummary,
    MonthSummaryRow,
    MonthTotals,
    WeekRange,
    YearSummary,
)
from driver_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Record models
    "LEGACY_SUMMARY_SLOTS",
    "WEEK_SLOTS",
    "DailyExpenses",
    "DailyPerformance",
    "DataStore",
    "DayData",
    "MonthData",
    "MonthlyExpenses",
    "TrackerRecord",
    "WeekData",
    "WeeklyPerformance",
    "as_index",
    "coerce_amount",
    # Derived models
    "MonthSummary",
    "MonthSummaryRow",
    "MonthTotals",
    "WeekRange",
    "YearSummary",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
