"""
Tests for the record and derived models.

Test strategy:
1. Lenient input: nothing a user can type makes a record invalid
2. Serialized names match the stored document format
3. Defaults produce a fully shaped, zero-filled month
"""

import math

import pytest

from driver_tracker.models import (
    WEEK_SLOTS,
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    DailyExpenses,
    DailyPerformance,
    DayData,
    MonthData,
    MonthlyExpenses,
    WeekData,
    WeekRange,
    as_index,
    coerce_amount,
)


class TestCoerceAmount:
    """Tests for numeric coercion."""

    @pytest.mark.parametrize("value, expected", [
        (5, 5.0),
        (2.5, 2.5),
        ("12.5", 12.5),
        (" 7 ", 7.0),
        ("", 0.0),
        ("abc", 0.0),
        (None, 0.0),
        (True, 0.0),
        (float("nan"), 0.0),
        (float("inf"), 0.0),
        (-3, 0.0),
        ([1], 0.0),
    ])
    def test_coerce_amount(self, value, expected):
        """Test every kind of input becomes a usable non-negative float."""
        result = coerce_amount(value)
        assert result == expected
        assert not math.isnan(result)


class TestRecordModels:
    """Tests for day, week and monthly records."""

    def test_performance_defaults_to_zero(self):
        """Test a new performance record is all zero."""
        perf = DailyPerformance()
        assert perf.hours_worked == 0
        assert perf.revenue == 0
        assert perf.tips == 0
        assert perf.orders_delivered == 0

    def test_accepts_camel_case_and_snake_case(self):
        """Test both stored names and attribute names are accepted."""
        assert DailyPerformance(hoursWorked=4).hours_worked == 4
        assert DailyPerformance(hours_worked=4).hours_worked == 4
        assert DailyExpenses(nonFood="3").non_food == 3

    def test_invalid_numbers_become_zero(self):
        """Test unparsable strings are stored as 0 instead of failing."""
        expenses = DailyExpenses(food="lots", transport="9.5")
        assert expenses.food == 0
        assert expenses.transport == 9.5

    def test_dump_uses_stored_names(self):
        """Test serialization uses the camelCase document names."""
        dumped = DayData().model_dump(by_alias=True)
        assert set(dumped["performance"]) == {
            "hoursWorked", "revenue", "tips", "ordersDelivered",
        }
        assert set(dumped["expenses"]) == {
            "food", "nonFood", "transport", "diningOut", "entertainment", "others",
        }

    def test_day_record_has_no_comment(self):
        """Test only week records carry a comment."""
        assert "comment" not in DayData().model_dump(by_alias=True)["performance"]
        assert WeekData().model_dump(by_alias=True)["performance"]["comment"] == ""

    def test_week_comment_coerced_to_string(self):
        """Test comments are always strings."""
        week = WeekData.model_validate({"performance": {"comment": 42}})
        assert week.performance.comment == "42"

    def test_expense_totals(self):
        """Test the total properties sum every category."""
        expenses = DailyExpenses(
            food=1, nonFood=2, transport=3, diningOut=4, entertainment=5, others=6
        )
        assert expenses.total == 21
        monthly = MonthlyExpenses(rent=500, phone=20, svs=200, others=0)
        assert monthly.total == 720

    def test_nulls_are_treated_as_absent(self):
        """Test null members fall back to their defaults."""
        day = DayData.model_validate({"performance": None, "expenses": {"food": None}})
        assert day.performance.revenue == 0
        assert day.expenses.food == 0


class TestMonthData:
    """Tests for the month aggregate root."""

    def test_new_month_is_fully_shaped(self):
        """Test a new month has six zero week slots, no days, zero expenses."""
        month = MonthData()
        assert list(month.weeks) == list(WEEK_SLOTS)
        assert month.days == {}
        assert month.monthly_expenses.total == 0
        assert month.has_days is False

    def test_string_keys_become_ints(self):
        """Test JSON object keys are read as integer day/week numbers."""
        month = MonthData.model_validate({
            "weeks": {"2": {"performance": {"revenue": 10}}},
            "days": {"15": {"performance": {"tips": 3}}},
        })
        assert month.weeks[2].performance.revenue == 10
        assert month.days[15].performance.tips == 3
        assert month.has_days is True

    def test_null_entries_dropped(self):
        """Test null day and week entries do not make the month invalid."""
        month = MonthData.model_validate({
            "weeks": None,
            "days": {"1": None, "2": {"performance": {"revenue": 5}}},
            "monthlyExpenses": None,
        })
        assert list(month.weeks) == list(WEEK_SLOTS)
        assert list(month.days) == [2]
        assert month.monthly_expenses.rent == 0

    def test_non_object_entries_dropped(self):
        """Test stray strings and non-numeric keys never make a month invalid."""
        month = MonthData.model_validate({
            "weeks": "broken",
            "days": {
                "1": "oops",
                "2": {"performance": "oops", "expenses": {"food": 3}},
                "third": {"performance": {"revenue": 1}},
            },
            "monthlyExpenses": 42,
        })
        assert month.weeks == {}
        assert list(month.days) == [2]
        assert month.days[2].performance.revenue == 0
        assert month.days[2].expenses.food == 3
        assert month.monthly_expenses.total == 0

    @pytest.mark.parametrize("key, expected", [
        ("2024", 2024), (" 7 ", 7), (3, 3), ("jan", None), ("1.5", None), (True, None),
    ])
    def test_as_index(self, key, expected):
        assert as_index(key) == expected


class TestDerivedModels:
    """Tests for computed values."""

    def test_week_range_contains(self):
        """Test WeekRange day membership."""
        week = WeekRange(index=2, start=2, end=8, label="2-8 sep")
        assert week.contains(2)
        assert week.contains(8)
        assert not week.contains(9)
        assert list(week.days) == [2, 3, 4, 5, 6, 7, 8]


class TestAuditModels:
    """Tests for audit events."""

    def test_audit_event_to_log_dict(self):
        """Test conversion to a log dictionary."""
        event = AuditEventBuilder.day_updated(2024, 3, 17, ["performance.tips"])
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "day_updated"
        assert log_dict["year"] == 2024
        assert log_dict["month"] == 3
        assert log_dict["details"] == {"day": 17, "fields": ["performance.tips"]}

    def test_failure_events_have_error_severity(self):
        """Test save failures are logged as errors."""
        event = AuditEventBuilder.store_save_failed("disk full")
        assert event.event_type == AuditEventType.STORE_SAVE_FAILED
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"

    def test_audit_event_defaults(self):
        """Test AuditEvent defaults to info severity."""
        event = AuditEvent(
            event_type=AuditEventType.MONTH_REPAIRED,
            description="filled",
        )
        assert event.severity == AuditSeverity.INFO
        assert event.timestamp.tzinfo is not None

    def test_long_unknown_key_is_shortened_in_description(self):
        """Test an oversized key still builds a valid event, with the full key in details."""
        key = "x" * 600
        event = AuditEventBuilder.patch_key_ignored("DailyPerformance", key)
        assert len(event.description) < 200
        assert event.description.startswith("Unknown field 'xxx")
        assert event.details["key"] == key


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
