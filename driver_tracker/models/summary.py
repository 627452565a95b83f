"""
Derived Models

Values computed from the stored document. None of these are persisted;
they are recomputed on every call.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from driver_tracker.models.records import MonthlyExpenses


class DerivedModel(BaseModel):
    """Read-only computed value, serialized with camelCase names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class WeekRange(DerivedModel):
    """
    One Monday-start week bucket inside a month.

    `start` and `end` are inclusive days of month.
    """

    index: int = Field(..., ge=1)
    start: int = Field(..., ge=1, le=31)
    end: int = Field(..., ge=1, le=31)
    label: str

    @property
    def days(self) -> range:
        return range(self.start, self.end + 1)

    def contains(self, day: int) -> bool:
        return self.start <= day <= self.end


class MonthTotals(DerivedModel):
    """Raw month aggregates, before any tax or savings figure is derived."""

    total_hours: float = 0.0
    total_orders: float = 0.0
    revenue: float = 0.0
    tips: float = 0.0
    weekly_expenses_total: float = Field(
        default=0.0,
        description="Sum of the six variable expense categories over the month",
    )
    monthly_expenses: MonthlyExpenses = Field(default_factory=MonthlyExpenses)
    from_days: bool = Field(
        default=True,
        description="False when totals came from legacy week slots",
    )


class MonthSummary(DerivedModel):
    """Full income, tax and savings figure set for one month."""

    total_hours: float
    total_orders: float
    revenue: float
    tips: float
    gross: float
    weekly_expenses_total: float
    monthly_expenses_total: float
    business_expense6: float
    svs: float
    net_before_tax: float
    taxable_amount: float = Field(description="Only the excess over the allowance")
    tax: float
    all_expenses_excl_svs: float = Field(alias="allExpensesExclSVS")
    savings_before_tax: float
    savings_after_tax: float


class MonthSummaryRow(DerivedModel):
    """One row of the yearly report."""

    month: int = Field(..., ge=0, le=11)
    summary: MonthSummary


class YearSummary(DerivedModel):
    """Twelve month summaries plus the totals shown under them."""

    year: int
    months: list[MonthSummaryRow]
    gross: float
    weekly_expenses_total: float
    monthly_expenses_total: float
    tax: float
    savings_after_tax: float
