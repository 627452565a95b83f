"""
Record Mutators

Targeted writes into the tracker document. Every call is one complete
read-modify-write of the document:

    load -> ensure month -> merge patch -> save

The merged record is returned even if the save failed; in that case the
change is simply not durable (the failure is in the audit log).
"""

from typing import Optional

from driver_tracker.audit import AuditLogger
from driver_tracker.models.records import (
    DayData,
    MonthlyExpenses,
    WeekData,
)
from driver_tracker.mutations.merge import (
    Patch,
    merge_day,
    merge_monthly_expenses,
    merge_week,
    patched_field_names,
)
from driver_tracker.periods import normalize_year_month
from driver_tracker.services.storage import DocumentStore


class RecordMutator:
    """Applies partial updates to days, legacy weeks and monthly expenses."""

    def __init__(
        self,
        document_store: DocumentStore,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._documents = document_store
        self._audit = audit_logger or document_store.audit_logger

    def set_day_data(
        self,
        year: int,
        month: int,
        day: int,
        partial: Patch,
    ) -> DayData:
        """
        Merge a partial `{performance, expenses}` patch into one day.

        The day is created zero-filled if it does not exist yet.
        """
        year, month = normalize_year_month(year, month)
        store = self._documents.get_store()
        month_data = self._documents.month(store, year, month)

        current = month_data.days.get(day) or DayData()
        updated = merge_day(current, partial, self._audit.log_patch_key_ignored)
        month_data.days[day] = updated

        self._documents.save_store(store)
        self._audit.log_day_updated(year, month, day, patched_field_names(partial))
        return updated

    def set_week_data(
        self,
        year: int,
        month: int,
        week: int,
        partial: Patch,
    ) -> WeekData:
        """
        Merge a patch into a legacy week slot.

        Kept for the weekly comment and for documents written before
        per-day entry existed.
        """
        year, month = normalize_year_month(year, month)
        store = self._documents.get_store()
        month_data = self._documents.month(store, year, month)

        current = month_data.weeks.get(week) or WeekData()
        updated = merge_week(current, partial, self._audit.log_patch_key_ignored)
        month_data.weeks[week] = updated

        self._documents.save_store(store)
        self._audit.log_week_updated(year, month, week, patched_field_names(partial))
        return updated

    def set_monthly_expenses(
        self,
        year: int,
        month: int,
        partial: Patch,
    ) -> MonthlyExpenses:
        """Merge a patch into the month's fixed expenses (rent, phone, svs, others)."""
        year, month = normalize_year_month(year, month)
        store = self._documents.get_store()
        month_data = self._documents.month(store, year, month)

        updated = merge_monthly_expenses(
            month_data.monthly_expenses, partial, self._audit.log_patch_key_ignored
        )
        month_data.monthly_expenses = updated

        self._documents.save_store(store)
        self._audit.log_monthly_expenses_updated(
            year, month, patched_field_names(partial)
        )
        return updated
