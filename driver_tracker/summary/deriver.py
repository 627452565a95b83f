"""
Financial Summary Deriver

Turns one month's totals into the income, tax and savings figures:

    gross              = revenue + tips
    businessExpense6   = gross * 6%
    netBeforeTax       = gross - businessExpense6 - svs
    taxableAmount      = max(0, netBeforeTax - 1050)
    tax                = taxableAmount * 20%
    allExpensesExclSVS = (monthly fixed - svs) + weekly expenses
    savingsBeforeTax   = netBeforeTax - allExpensesExclSVS
    savingsAfterTax    = savingsBeforeTax - tax

The rates and the allowance are fixed for the jurisdiction the tracker is
built for. They are not settings.

svs is subtracted once, in netBeforeTax, and is therefore left out of
allExpensesExclSVS.
"""

from typing import Sequence

from driver_tracker.models.summary import (
    MonthSummary,
    MonthSummaryRow,
    MonthTotals,
    YearSummary,
)


# Flat-rate deductible business expense, as a share of gross
BUSINESS_EXPENSE_RATE = 0.06
# Monthly tax-free allowance
TAX_FREE_ALLOWANCE = 1050.0
# Applied to the part of net income above the allowance
TAX_RATE = 0.20


def derive_month_summary(totals: MonthTotals) -> MonthSummary:
    """Apply the formula chain to one month's totals. Pure."""
    monthly = totals.monthly_expenses
    monthly_expenses_total = monthly.total

    gross = totals.revenue + totals.tips
    business_expense6 = gross * BUSINESS_EXPENSE_RATE
    svs = monthly.svs
    net_before_tax = gross - business_expense6 - svs
    taxable_amount = max(0.0, net_before_tax - TAX_FREE_ALLOWANCE)
    tax = taxable_amount * TAX_RATE
    all_expenses_excl_svs = (
        (monthly_expenses_total - svs) + totals.weekly_expenses_total
    )
    savings_before_tax = net_before_tax - all_expenses_excl_svs
    savings_after_tax = savings_before_tax - tax

    return MonthSummary(
        total_hours=totals.total_hours,
        total_orders=totals.total_orders,
        revenue=totals.revenue,
        tips=totals.tips,
        gross=gross,
        weekly_expenses_total=totals.weekly_expenses_total,
        monthly_expenses_total=monthly_expenses_total,
        business_expense6=business_expense6,
        svs=svs,
        net_before_tax=net_before_tax,
        taxable_amount=taxable_amount,
        tax=tax,
        all_expenses_excl_svs=all_expenses_excl_svs,
        savings_before_tax=savings_before_tax,
        savings_after_tax=savings_after_tax,
    )


def summarize_year(year: int, rows: Sequence[MonthSummaryRow]) -> YearSummary:
    """
    Total a year's month summaries.

    Net before tax is not totalled; it is only meaningful per month
    because the allowance applies per month.
    """
    return YearSummary(
        year=year,
        months=list(rows),
        gross=sum(row.summary.gross for row in rows),
        weekly_expenses_total=sum(row.summary.weekly_expenses_total for row in rows),
        monthly_expenses_total=sum(row.summary.monthly_expenses_total for row in rows),
        tax=sum(row.summary.tax for row in rows),
        savings_after_tax=sum(row.summary.savings_after_tax for row in rows),
    )
