"""Record mutation package."""

from driver_tracker.mutations.merge import (
    merge_day,
    merge_fields,
    merge_monthly_expenses,
    merge_week,
    normalize_patch,
    patched_field_names,
)
from driver_tracker.mutations.mutators import RecordMutator

__all__ = [
    "RecordMutator",
    "merge_day",
    "merge_fields",
    "merge_monthly_expenses",
    "merge_week",
    "normalize_patch",
    "patched_field_names",
]
