"""
Aggregator

Rolls day records up into week and month totals.

Source of truth:
- If a month has any day entry at all, days are summed and legacy week
  slots are ignored (except for the weekly comment).
- Otherwise the legacy week slots 1..5 are summed, so documents written
  before per-day entry still produce totals.

Nothing here writes to storage. When a snapshot store is passed in, it is
copied before anything is back-filled, so the caller's object never
changes.
"""

from typing import Iterable, Optional, Union

from driver_tracker.models.records import (
    LEGACY_SUMMARY_SLOTS,
    DailyExpenses,
    DailyPerformance,
    DataStore,
    DayData,
    WeekData,
    WeeklyPerformance,
)
from driver_tracker.models.summary import MonthTotals
from driver_tracker.periods import get_days_in_month, get_week_day_range
from driver_tracker.services.storage import DocumentStore


def sum_records(records: Iterable[Union[DayData, WeekData]]) -> tuple[DailyPerformance, DailyExpenses]:
    """Field-wise sum of the performance and expense groups of `records`."""
    performance = {name: 0.0 for name in DailyPerformance.model_fields}
    expenses = {name: 0.0 for name in DailyExpenses.model_fields}

    for record in records:
        for name in performance:
            performance[name] += getattr(record.performance, name)
        for name in expenses:
            expenses[name] += getattr(record.expenses, name)

    return DailyPerformance(**performance), DailyExpenses(**expenses)


class Aggregator:
    """Computes week and month totals from the tracker document."""

    def __init__(self, document_store: DocumentStore):
        self._documents = document_store

    def compute_week_from_days(
        self,
        year: int,
        month: int,
        week: int,
        store: Optional[DataStore] = None,
    ) -> WeekData:
        """
        Sum the days of one week into a week record.

        Days without an entry count as zero. The comment is taken from the
        legacy week slot, since that is the only place comments are kept.
        """
        working = self._documents.load(store)
        month_data = self._documents.month(working, year, month)
        start, end = get_week_day_range(year, month, week)

        days = [
            month_data.days[day]
            for day in range(start, end + 1)
            if day in month_data.days
        ]
        performance, expenses = sum_records(days)

        slot = month_data.weeks.get(week)
        comment = slot.performance.comment if slot else ""

        return WeekData(
            performance=WeeklyPerformance(
                **performance.model_dump(), comment=comment
            ),
            expenses=expenses,
        )

    def compute_month_totals(
        self,
        year: int,
        month: int,
        store: Optional[DataStore] = None,
    ) -> MonthTotals:
        """
        Sum a whole month, from days if there are any, else from legacy weeks.
        """
        working = self._documents.load(store)
        month_data = self._documents.month(working, year, month)

        if month_data.has_days:
            days_in_month = get_days_in_month(year, month)
            records = [
                month_data.days[day]
                for day in range(1, days_in_month + 1)
                if day in month_data.days
            ]
        else:
            records = [
                month_data.weeks[slot]
                for slot in LEGACY_SUMMARY_SLOTS
                if slot in month_data.weeks
            ]

        performance, expenses = sum_records(records)

        return MonthTotals(
            total_hours=performance.hours_worked,
            total_orders=performance.orders_delivered,
            revenue=performance.revenue,
            tips=performance.tips,
            weekly_expenses_total=expenses.total,
            monthly_expenses=month_data.monthly_expenses,
            from_days=month_data.has_days,
        )
