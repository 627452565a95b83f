"""Calendar partitioning package."""

from driver_tracker.periods.weeks import (
    DAY_NAMES,
    first_monday,
    get_current_week_index,
    get_day_name,
    get_days_in_month,
    get_month_label,
    get_week_day_range,
    get_weeks_for_month,
    normalize_year_month,
)

__all__ = [
    "DAY_NAMES",
    "first_monday",
    "get_current_week_index",
    "get_day_name",
    "get_days_in_month",
    "get_month_label",
    "get_week_day_range",
    "get_weeks_for_month",
    "normalize_year_month",
]
