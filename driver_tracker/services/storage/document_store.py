"""
Tracker Document Store

The whole tracker lives in one JSON document stored under one fixed key:

    { "<year>": { "<month 0-11>": {
        "weeks": { "1": {...}, ..., "6": {...} },
        "days":  { "<day>": {...}, ... },
        "monthlyExpenses": { "rent": n, "phone": n, "svs": n, "others": n }
    }}}

DESIGN DECISION: Reading never fails, and never throws away good months.
- Nothing stored, unparsable JSON, or a document that is not an object
  read as an empty store.
- Inside the document every year and month is checked on its own. A month
  that cannot be used is replaced by an empty one, and entries with
  non-numeric keys are dropped; all other months are kept as stored.
- Missing months, week slots and sub-objects are back-filled on access
  (`ensure_month`), so callers never see a partially shaped month.

Writing reports failure through its return value instead of raising.
"""

import copy
from typing import Any, Mapping, NamedTuple, Optional

from pydantic import TypeAdapter, ValidationError

from driver_tracker.audit import AuditLogger
from driver_tracker.config import DEFAULT_STORAGE_KEY
from driver_tracker.models.records import (
    WEEK_SLOTS,
    DataStore,
    MonthData,
    WeekData,
    as_index,
)
from driver_tracker.periods import normalize_year_month
from driver_tracker.services.storage.interface import (
    KeyValueStorageInterface,
    StorageError,
)


_JSON_ADAPTER = TypeAdapter(Any)
_STORE_ADAPTER = TypeAdapter(DataStore)


class DocumentProblem(NamedTuple):
    """Something `parse_document` had to replace or drop."""

    year: Optional[int]
    month: Optional[int]
    what: str


def parse_document(document: Any) -> tuple[DataStore, list[DocumentProblem]]:
    """
    Turn a decoded document (or a hand-built snapshot) into a typed store.

    Years and months are checked one at a time, so one bad entry never
    costs the rest of the document.

    Raises:
        ValueError: If the document is not an object at the top level
    """
    if not isinstance(document, Mapping):
        raise ValueError(
            f"Document must be an object, got {type(document).__name__}"
        )

    store: DataStore = {}
    problems: list[DocumentProblem] = []

    for year_key, months in document.items():
        year = as_index(year_key)
        if year is None or not isinstance(months, Mapping):
            problems.append(DocumentProblem(None, None, f"year {year_key!r}"))
            continue

        parsed = store.setdefault(year, {})
        for month_key, month_data in months.items():
            month = as_index(month_key)
            if month is None:
                problems.append(DocumentProblem(year, None, f"month {month_key!r}"))
                continue
            try:
                parsed[month] = MonthData.model_validate(month_data)
            except ValidationError:
                parsed[month] = MonthData()
                problems.append(DocumentProblem(year, month, "month"))

    return store, problems


def ensure_month_shape(store: dict, year: int, month: int) -> list[str]:
    """
    Make sure store[year][month] exists and is fully shaped.

    Mutates `store` in place. Returns the names of the parts that had to
    be created (empty when the month was already complete).
    """
    filled: list[str] = []

    months = store.get(year)
    if not isinstance(months, dict):
        months = store[year] = {}
        filled.append("year")

    month_data = months.get(month)
    if month_data is None:
        months[month] = MonthData()
        filled.append("month")
        return filled

    if not isinstance(month_data, MonthData):
        # Hand-built stores may hold plain dicts.
        try:
            month_data = months[month] = MonthData.model_validate(month_data)
        except ValidationError:
            months[month] = MonthData()
            filled.append("month")
            return filled

    for slot in WEEK_SLOTS:
        if slot not in month_data.weeks:
            month_data.weeks[slot] = WeekData()
            filled.append(f"weeks.{slot}")

    return filled


class DocumentStore:
    """
    Reads and writes the tracker document through a key-value back end.

    This is the single store handle every engine operation goes through.
    """

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        key: str = DEFAULT_STORAGE_KEY,
        audit_logger: Optional[AuditLogger] = None,
    ):
        """
        Args:
            storage: Key-value back end (in-memory, JSON file, ...)
            key: The fixed key the document is stored under
            audit_logger: Where repairs and failures are reported.
                          Defaults to a local-only logger.
        """
        self._storage = storage
        self._key = key
        self._audit = audit_logger or AuditLogger()

    @property
    def key(self) -> str:
        return self._key

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit

    def get_store(self) -> DataStore:
        """
        Load the persisted store.

        Returns an empty store when nothing is stored, the stored text is
        not JSON, or the document is not an object. Unusable months inside
        a readable document are replaced one by one (see `parse_document`).
        """
        try:
            raw = self._storage.get(self._key)
        except StorageError as e:
            self._audit.log_store_load_failed("read_error", str(e))
            return {}

        if not raw:
            return {}

        try:
            document = _JSON_ADAPTER.validate_json(raw)
        except ValidationError as e:
            self._audit.log_store_load_failed(
                "invalid_json", f"{e.error_count()} validation error(s)"
            )
            return {}

        return self._parse(document, "invalid_document")

    def save_store(self, store: Mapping[Any, Any]) -> bool:
        """
        Persist the full store, replacing whatever was stored before.

        Returns:
            True if the document was written, False otherwise
        """
        try:
            normalized = _STORE_ADAPTER.validate_python(store)
            payload = _STORE_ADAPTER.dump_json(normalized, by_alias=True)
        except ValidationError as e:
            self._audit.log_store_save_failed(f"store is not serializable: {e}")
            return False

        try:
            self._storage.set(self._key, payload.decode("utf-8"))
        except StorageError as e:
            self._audit.log_store_save_failed(str(e))
            return False
        return True

    def ensure_month(self, store: DataStore, year: int, month: int) -> DataStore:
        """
        Back-fill store[year][month] in place and return the same store.

        Idempotent: a month that is already complete is left untouched.
        """
        year, month = normalize_year_month(year, month)
        filled = ensure_month_shape(store, year, month)
        if filled:
            self._audit.log_month_repaired(year, month, filled)
        return store

    def month(self, store: DataStore, year: int, month: int) -> MonthData:
        """Ensure and return one month of `store`."""
        year, month = normalize_year_month(year, month)
        self.ensure_month(store, year, month)
        return store[year][month]

    def get_month_data(self, year: int, month: int) -> MonthData:
        """
        Read-with-repair: load, back-fill the month, persist, return it.

        The repaired document is written back even though this is a read,
        so the stored document is normalized on first access.
        """
        store = self.get_store()
        month_data = self.month(store, year, month)
        self.save_store(store)
        return month_data

    def load(self, snapshot: Optional[DataStore] = None) -> DataStore:
        """
        Return a store that is safe to back-fill.

        A supplied snapshot is deep-copied so the caller's object is never
        modified; otherwise the persisted store is loaded fresh.
        """
        if snapshot is None:
            return self.get_store()
        # Also turns "2024"/"3" style keys from hand-built snapshots into ints.
        return self._parse(copy.deepcopy(snapshot), "invalid_snapshot")

    def _parse(self, document: Any, reason: str) -> DataStore:
        try:
            store, problems = parse_document(document)
        except ValueError as e:
            self._audit.log_store_load_failed(reason, str(e))
            return {}

        for problem in problems:
            if problem.month is None:
                self._audit.log_store_load_failed("entry_dropped", problem.what)
            else:
                self._audit.log_month_repaired(problem.year, problem.month, [problem.what])
        return store
