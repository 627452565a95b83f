"""
Record Models for Driver Tracker

These models define the shape of everything stored in the tracker document:
daily performance and expenses, the legacy weekly slots, and the fixed
monthly expenses.

DESIGN DECISION: Models NEVER reject numeric input.
Anything that is not a usable non-negative number becomes 0.
The tracker is a single-user tool and a typo in one field must not block
the rest of the entry.

Python attributes are snake_case. The serialized document uses the
camelCase names (hoursWorked, nonFood, monthlyExpenses, ...), so every model
is dumped with `by_alias=True`. Both forms are accepted on input.
"""

import math
from typing import Any, Optional, get_origin

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


# Legacy documents carry six week slots; only 1..5 feed the fallback totals.
WEEK_SLOTS = range(1, 7)
LEGACY_SUMMARY_SLOTS = range(1, 6)


def coerce_amount(value: Any) -> float:
    """
    Turn any user/stored value into a non-negative float.

    Unparsable input, NaN, infinities and negatives all become 0.0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number) or number < 0:
        return 0.0
    return number


def as_index(key: Any) -> Optional[int]:
    """Year, month, week or day number from a document key ("2024" -> 2024)."""
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key
    try:
        return int(str(key).strip())
    except ValueError:
        return None


class TrackerRecord(BaseModel):
    """Base for all persisted records: camelCase aliases, lenient numbers."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        """
        Treat null members as absent so defaults fill them.

        A nested record given as anything but an object (a stray string or
        number) is treated as absent too.
        """
        if not isinstance(data, dict):
            return data
        nested = cls.nested_record_fields()
        cleaned = {}
        for key, value in data.items():
            if value is None:
                continue
            if cls.field_for_key(key) in nested and not isinstance(value, (dict, BaseModel)):
                continue
            cleaned[key] = value
        return cleaned

    @classmethod
    def nested_record_fields(cls) -> set[str]:
        return {
            name
            for name, info in cls.model_fields.items()
            if get_origin(info.annotation) is None
            and isinstance(info.annotation, type)
            and issubclass(info.annotation, BaseModel)
        }

    @classmethod
    def field_for_key(cls, key: str) -> Optional[str]:
        """Resolve an alias or attribute name to the attribute name."""
        for name, info in cls.model_fields.items():
            if key == name or key == info.alias:
                return name
        return None


# =============================================================================
# DAILY RECORDS
# =============================================================================

class DailyPerformance(TrackerRecord):
    """One day's work performance."""

    hours_worked: float = Field(default=0.0, description="Hours on shift")
    revenue: float = Field(default=0.0, description="Base pay, excluding tips")
    tips: float = Field(default=0.0)
    orders_delivered: float = Field(default=0.0, description="Completed orders")

    @field_validator(
        "hours_worked", "revenue", "tips", "orders_delivered", mode="before"
    )
    @classmethod
    def coerce_numbers(cls, v: Any) -> float:
        return coerce_amount(v)


class DailyExpenses(TrackerRecord):
    """The six variable expense categories tracked per day (and per legacy week)."""

    food: float = 0.0
    non_food: float = 0.0
    transport: float = 0.0
    dining_out: float = 0.0
    entertainment: float = 0.0
    others: float = 0.0

    @field_validator(
        "food", "non_food", "transport", "dining_out", "entertainment", "others",
        mode="before",
    )
    @classmethod
    def coerce_numbers(cls, v: Any) -> float:
        return coerce_amount(v)

    @property
    def total(self) -> float:
        return (
            self.food
            + self.non_food
            + self.transport
            + self.dining_out
            + self.entertainment
            + self.others
        )


class WeeklyPerformance(DailyPerformance):
    """Legacy weekly performance. Still the only place the weekly comment lives."""

    comment: str = ""

    @field_validator("comment", mode="before")
    @classmethod
    def coerce_comment(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v)


class DayData(TrackerRecord):
    """A single calendar day. Created zero-filled on first write."""

    performance: DailyPerformance = Field(default_factory=DailyPerformance)
    expenses: DailyExpenses = Field(default_factory=DailyExpenses)


class WeekData(TrackerRecord):
    """
    A legacy week slot, or a week derived from day records.

    Pre-migration documents stored weekly totals directly. New entries are
    made per day, and weeks are computed from them.
    """

    performance: WeeklyPerformance = Field(default_factory=WeeklyPerformance)
    expenses: DailyExpenses = Field(default_factory=DailyExpenses)


# =============================================================================
# MONTHLY RECORDS
# =============================================================================

class MonthlyExpenses(TrackerRecord):
    """Fixed monthly costs. `svs` is the social-security contribution."""

    rent: float = 0.0
    phone: float = 0.0
    svs: float = 0.0
    others: float = 0.0

    @field_validator("rent", "phone", "svs", "others", mode="before")
    @classmethod
    def coerce_numbers(cls, v: Any) -> float:
        return coerce_amount(v)

    @property
    def total(self) -> float:
        return self.rent + self.phone + self.svs + self.others


def empty_weeks() -> dict[int, WeekData]:
    return {slot: WeekData() for slot in WEEK_SLOTS}


class MonthData(TrackerRecord):
    """
    Aggregate root for one (year, month).

    If `days` holds any entry, days are the source of truth for totals and
    `weeks` is only read for comments. Otherwise `weeks` is summed instead.
    """

    weeks: dict[int, WeekData] = Field(default_factory=empty_weeks)
    days: dict[int, DayData] = Field(default_factory=dict)
    monthly_expenses: MonthlyExpenses = Field(default_factory=MonthlyExpenses)

    @field_validator("weeks", "days", mode="before")
    @classmethod
    def drop_unusable_entries(cls, v: Any) -> dict:
        # Null or non-object slots and non-numeric keys are dropped;
        # missing week slots are back-filled later.
        if not isinstance(v, dict):
            return {}
        kept = {}
        for key, entry in v.items():
            index = as_index(key)
            if index is None or not isinstance(entry, (dict, BaseModel)):
                continue
            kept[index] = entry
        return kept

    @property
    def has_days(self) -> bool:
        return len(self.days) > 0


# year -> month (0-11) -> MonthData
DataStore = dict[int, dict[int, MonthData]]
