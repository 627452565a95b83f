"""
Driver Tracker Engine

Ties the components together behind one object:

    Calendar partitioner -> Aggregator <- Document store
    Aggregator -> Summary deriver -> Yearly report

DESIGN DECISION: The store handle is explicit. A DriverTracker owns one
DocumentStore over one injected key-value back end; there is no ambient
global document. Tests build one over in-memory storage, production uses
`create_tracker()`.

No method here raises for bad data, bad input or a failing back end.
"""

from datetime import date
from typing import Any, Mapping, Optional

from driver_tracker.aggregation import Aggregator
from driver_tracker.audit import AuditLogger, configure_logging
from driver_tracker.config import Settings, get_settings
from driver_tracker.models.records import (
    DataStore,
    DayData,
    MonthData,
    MonthlyExpenses,
    WeekData,
)
from driver_tracker.models.summary import (
    MonthSummary,
    MonthSummaryRow,
    WeekRange,
    YearSummary,
)
from driver_tracker.mutations import RecordMutator
from driver_tracker.mutations.merge import Patch
from driver_tracker import periods
from driver_tracker.services.storage import (
    DocumentStore,
    InMemoryKeyValueStorage,
    JsonFileKeyValueStorage,
    KeyValueStorageInterface,
)
from driver_tracker.summary import derive_month_summary, summarize_year


class DriverTracker:
    """
    The tracker engine API.

    Months are 0-based (0 = January) throughout, as in the stored document.
    """

    def __init__(
        self,
        document_store: DocumentStore,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._documents = document_store
        self._audit = audit_logger or document_store.audit_logger
        self._mutator = RecordMutator(document_store, self._audit)
        self._aggregator = Aggregator(document_store)

    @property
    def document_store(self) -> DocumentStore:
        return self._documents

    # -------------------------------------------------------------------------
    # Document
    # -------------------------------------------------------------------------

    def get_store(self) -> DataStore:
        return self._documents.get_store()

    def save_store(self, store: Mapping[Any, Any]) -> bool:
        return self._documents.save_store(store)

    def ensure_month(self, store: DataStore, year: int, month: int) -> DataStore:
        return self._documents.ensure_month(store, year, month)

    def get_month_data(self, year: int, month: int) -> MonthData:
        return self._documents.get_month_data(year, month)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def set_day_data(self, year: int, month: int, day: int, partial: Patch) -> DayData:
        return self._mutator.set_day_data(year, month, day, partial)

    def set_week_data(self, year: int, month: int, week: int, partial: Patch) -> WeekData:
        return self._mutator.set_week_data(year, month, week, partial)

    def set_monthly_expenses(self, year: int, month: int, partial: Patch) -> MonthlyExpenses:
        return self._mutator.set_monthly_expenses(year, month, partial)

    # -------------------------------------------------------------------------
    # Calendar
    # -------------------------------------------------------------------------

    @staticmethod
    def get_days_in_month(year: int, month: int) -> int:
        return periods.get_days_in_month(year, month)

    @staticmethod
    def get_weeks_for_month(year: int, month: int) -> list[WeekRange]:
        return periods.get_weeks_for_month(year, month)

    @staticmethod
    def get_week_day_range(year: int, month: int, week: int) -> tuple[int, int]:
        return periods.get_week_day_range(year, month, week)

    @staticmethod
    def get_current_week_index(
        year: int,
        month: int,
        today: Optional[date] = None,
    ) -> int:
        return periods.get_current_week_index(year, month, today)

    @staticmethod
    def get_day_name(year: int, month: int, day: int) -> str:
        return periods.get_day_name(year, month, day)

    # -------------------------------------------------------------------------
    # Aggregates
    # -------------------------------------------------------------------------

    def compute_week_from_days(
        self,
        year: int,
        month: int,
        week: int,
        store: Optional[DataStore] = None,
    ) -> WeekData:
        """Week totals summed from day records, plus the stored weekly comment."""
        return self._aggregator.compute_week_from_days(year, month, week, store)

    def compute_month_summary(
        self,
        year: int,
        month: int,
        store: Optional[DataStore] = None,
    ) -> MonthSummary:
        """
        Full income, tax and savings figures for one month.

        Pass `store` to compute against a snapshot; it is not modified.
        """
        totals = self._aggregator.compute_month_totals(year, month, store)
        return derive_month_summary(totals)

    def compute_year_summary(
        self,
        year: int,
        store: Optional[DataStore] = None,
    ) -> YearSummary:
        """
        All twelve month summaries of a year, with totals.

        The store is loaded once and every month is computed against that
        same snapshot.
        """
        snapshot = store if store is not None else self.get_store()
        rows = [
            MonthSummaryRow(
                month=month,
                summary=self.compute_month_summary(year, month, snapshot),
            )
            for month in range(12)
        ]
        return summarize_year(year, rows)


def create_storage(settings: Optional[Settings] = None) -> KeyValueStorageInterface:
    """Build the key-value back end named in the storage settings."""
    storage_settings = (settings or get_settings()).storage
    if storage_settings.backend == "memory":
        return InMemoryKeyValueStorage()
    return JsonFileKeyValueStorage(
        storage_settings.data_dir,
        write_attempts=storage_settings.write_attempts,
    )


def create_tracker(
    storage: Optional[KeyValueStorageInterface] = None,
    settings: Optional[Settings] = None,
) -> DriverTracker:
    """
    Factory function to create a fully wired tracker.

    Args:
        storage: Key-value back end to use. Defaults to the one configured
                 in settings (JSON files unless told otherwise).
        settings: Settings to use instead of the cached environment settings.
    """
    settings = settings or get_settings()
    configure_logging(settings.logging)

    audit_logger = AuditLogger()
    document_store = DocumentStore(
        storage or create_storage(settings),
        key=settings.storage.key,
        audit_logger=audit_logger,
    )
    return DriverTracker(document_store, audit_logger)
