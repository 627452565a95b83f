"""
Calendar Partitioner

Splits a month into Monday-start week buckets.

Rules:
- If the 1st is not a Monday, days before the first Monday form a short
  leading week (index 1).
- Every following week starts on a Monday and spans 7 days; the last one
  is cut off at the end of the month.

Months are 0-based (0 = January) to match the stored document. Out of
range months carry into the year, so (2024, 12) is January 2025.

Nothing here reads stored data, and nothing raises for odd input. Weekdays
come from `calendar.weekday`, which accepts years outside 1..9999.
"""

import calendar
from datetime import date
from typing import Optional

from driver_tracker.models.summary import WeekRange


DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def normalize_year_month(year: int, month: int) -> tuple[int, int]:
    """Carry months outside 0..11 into the year."""
    carry, month = divmod(month, 12)
    return year + carry, month


def get_days_in_month(year: int, month: int) -> int:
    year, month = normalize_year_month(year, month)
    return calendar.monthrange(year, month + 1)[1]


def get_month_label(year: int, month: int) -> str:
    """Lowercase short month name in the process locale ("jan", "feb", ...)."""
    year, month = normalize_year_month(year, month)
    return calendar.month_abbr[month + 1].lower()


def first_monday(year: int, month: int) -> int:
    """Day of month of the first Monday (1..7)."""
    year, month = normalize_year_month(year, month)
    weekday = calendar.weekday(year, month + 1, 1)  # Monday == 0
    return 1 + (7 - weekday) % 7


def get_weeks_for_month(year: int, month: int) -> list[WeekRange]:
    """
    Compute the ordered week ranges covering every day of the month.

    Ranges are contiguous, do not overlap, and together cover
    1..days_in_month exactly.
    """
    year, month = normalize_year_month(year, month)
    days_in_month = get_days_in_month(year, month)
    label = get_month_label(year, month)
    monday = first_monday(year, month)

    weeks: list[WeekRange] = []
    index = 1
    if monday > 1:
        weeks.append(WeekRange(
            index=index,
            start=1,
            end=monday - 1,
            label=f"1-{monday - 1} {label}",
        ))
        index += 1

    for start in range(monday, days_in_month + 1, 7):
        end = min(start + 6, days_in_month)
        weeks.append(WeekRange(
            index=index,
            start=start,
            end=end,
            label=f"{start}-{end} {label}",
        ))
        index += 1

    return weeks


def get_week_day_range(year: int, month: int, week: int) -> tuple[int, int]:
    """
    (start, end) of the week with the given index.

    Unknown indices fall back to the first week.
    """
    weeks = get_weeks_for_month(year, month)
    match = next((w for w in weeks if w.index == week), weeks[0])
    return match.start, match.end


def get_current_week_index(
    year: int,
    month: int,
    today: Optional[date] = None,
) -> int:
    """
    Index of the week containing today, if (year, month) is today's month.

    For any other month the first day is used, which always resolves to
    the first week.
    """
    today = today or date.today()
    year, month = normalize_year_month(year, month)
    if today.year == year and today.month == month + 1:
        day = today.day
    else:
        day = 1

    for week in get_weeks_for_month(year, month):
        if week.contains(day):
            return week.index
    return 1


def get_day_name(year: int, month: int, day: int) -> str:
    """
    Three-letter English weekday ("Mon".."Sun") of a date.

    Days outside the month roll over into the neighbouring months.
    """
    year, month = normalize_year_month(year, month)
    weekday = calendar.weekday(year, month + 1, 1) + day - 1
    return DAY_NAMES[weekday % 7]
