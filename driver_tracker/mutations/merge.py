"""
Field-by-field merge of partial updates into records.

A patch only overrides the fields it names; every other field keeps its
current value. Patches may use the stored camelCase names or the Python
attribute names, and may be plain mappings or pydantic models (only
explicitly set fields count).

All functions here are pure: they return new records and leave their
inputs untouched.
"""

from typing import Any, Callable, Mapping, Optional, TypeVar, Union

from pydantic import BaseModel

from driver_tracker.models.records import (
    DayData,
    MonthlyExpenses,
    TrackerRecord,
    WeekData,
)


RecordT = TypeVar("RecordT", bound=TrackerRecord)
Patch = Union[Mapping[str, Any], BaseModel, None]
UnknownKeyHandler = Callable[[str, str], None]


def as_mapping(patch: Patch) -> Mapping[str, Any]:
    """Turn a patch into a mapping of only the keys it actually sets."""
    if patch is None:
        return {}
    if isinstance(patch, BaseModel):
        return patch.model_dump(exclude_unset=True)
    if isinstance(patch, Mapping):
        return patch
    return {}


def normalize_patch(
    record_type: type[TrackerRecord],
    patch: Patch,
    on_unknown: Optional[UnknownKeyHandler] = None,
) -> dict[str, Any]:
    """
    Map patch keys to attribute names of `record_type`.

    Keys that match no field are dropped and reported to `on_unknown`
    as (record type name, key).
    """
    updates: dict[str, Any] = {}
    for key, value in as_mapping(patch).items():
        name = record_type.field_for_key(key)
        if name is None:
            if on_unknown:
                on_unknown(record_type.__name__, key)
            continue
        updates[name] = value
    return updates


def merge_fields(
    record: RecordT,
    patch: Patch,
    on_unknown: Optional[UnknownKeyHandler] = None,
) -> RecordT:
    """
    Merge a flat patch into a flat record.

    Patched values go through the record's validators, so unusable
    numbers end up as 0.
    """
    updates = normalize_patch(type(record), patch, on_unknown)
    return type(record).model_validate({**record.model_dump(), **updates})


def _merge_groups(
    record: Union[DayData, WeekData],
    patch: Patch,
    on_unknown: Optional[UnknownKeyHandler],
):
    groups = normalize_patch(type(record), patch, on_unknown)
    return type(record)(
        performance=merge_fields(
            record.performance, groups.get("performance"), on_unknown
        ),
        expenses=merge_fields(
            record.expenses, groups.get("expenses"), on_unknown
        ),
    )


def merge_day(
    day: DayData,
    patch: Patch,
    on_unknown: Optional[UnknownKeyHandler] = None,
) -> DayData:
    """Merge a `{performance, expenses}` patch into a day record."""
    return _merge_groups(day, patch, on_unknown)


def merge_week(
    week: WeekData,
    patch: Patch,
    on_unknown: Optional[UnknownKeyHandler] = None,
) -> WeekData:
    """Merge a `{performance, expenses}` patch into a legacy week slot."""
    return _merge_groups(week, patch, on_unknown)


def merge_monthly_expenses(
    expenses: MonthlyExpenses,
    patch: Patch,
    on_unknown: Optional[UnknownKeyHandler] = None,
) -> MonthlyExpenses:
    return merge_fields(expenses, patch, on_unknown)


def patched_field_names(patch: Patch) -> list[str]:
    """
    Dotted names of everything a patch touches, for audit logs.

    `{"performance": {"tips": 3}}` gives `["performance.tips"]`.
    """
    names: list[str] = []
    for key, value in as_mapping(patch).items():
        nested = as_mapping(value) if isinstance(value, (Mapping, BaseModel)) else None
        if nested:
            names.extend(f"{key}.{inner}" for inner in nested)
        else:
            names.append(str(key))
    return names
