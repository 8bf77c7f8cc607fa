"""Rule-based insight text for savings, cashflow, comparison and category charts."""

from __future__ import annotations

import math
from collections.abc import Sequence
from enum import Enum

from analytics import (
    CategoryBreakdownEntry,
    ComparisonEntry,
    FlowBucket,
    SavingsPoint,
    percentage_change,
    savings_rate,
    top_categories,
)
from formatting import format_amount, format_percentage_change

HEALTHY_SAVINGS_RATE = 20.0
CAUTION_SAVINGS_RATE = 10.0
THIN_COVERAGE_RATIO = 1.2
CATEGORY_CONCENTRATION_PCT = 40.0
LARGE_CATEGORY_PCT = 20.0
MIN_CATEGORY_COUNT = 3
DEFAULT_INSIGHT = "Not enough variation yet to highlight anything specific. Keep tracking to unlock more insights."
BALANCED_CATEGORIES_INSIGHT = "Spending is well balanced across categories."


class InsightKind(str, Enum):
    SAVINGS = "savings"
    INCOME_EXPENSE = "income_expense"
    COMPARISON = "comparison"
    CATEGORY = "category"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def _savings_rate_insight(income: float, expense: float) -> str | None:
    if income <= 0:
        return None
    rate = savings_rate(income, expense)
    if rate >= HEALTHY_SAVINGS_RATE:
        return f"Healthy savings rate of {rate:.1f}%. You are keeping a solid share of your income."
    if rate >= CAUTION_SAVINGS_RATE:
        return f"Savings rate of {rate:.1f}% is fair. Aim for {HEALTHY_SAVINGS_RATE:.0f}% or more."
    return f"Watch out: your savings rate is only {rate:.1f}%."


def _trend_insight(values: Sequence[float], labels: str, trend_window: int, currency: str | None) -> str | None:
    if not values or trend_window <= 0:
        return None
    overall = sum(values) / len(values)
    tail = values[-trend_window:]
    recent = sum(tail) / len(tail)
    if math.isclose(recent, overall, rel_tol=1e-9, abs_tol=1e-9):
        return None
    span = _plural(len(tail), "period")
    if recent > overall:
        return (
            f"Positive momentum: {labels} over the last {span} averaged "
            f"{format_amount(recent, currency)}, above the overall {format_amount(overall, currency)}."
        )
    return (
        f"Slipping: {labels} over the last {span} averaged "
        f"{format_amount(recent, currency)}, below the overall {format_amount(overall, currency)}."
    )


def _savings_insights(points: Sequence[SavingsPoint], currency: str | None, trend_window: int) -> list[str]:
    out: list[str] = []
    total = sum(p.savings for p in points)
    income = sum(p.income for p in points)
    expenses = sum(p.expenses for p in points)
    span = _plural(len(points), "period")

    if total > 0:
        out.append(f"You saved {format_amount(total, currency)} in total across {span}.")
    elif total < 0:
        out.append(f"Spending exceeded income by {format_amount(abs(total), currency)} across {span}.")
    else:
        out.append(f"Income and expenses broke even across {span}.")

    rate_text = _savings_rate_insight(income, expenses)
    if rate_text:
        out.append(rate_text)

    best = max(points, key=lambda p: p.savings)
    out.append(f"Best period: {best.label} with {format_amount(best.savings, currency)} net savings.")
    if len(points) > 1:
        worst = min(points, key=lambda p: p.savings)
        out.append(f"Weakest period: {worst.label} with {format_amount(worst.savings, currency)} net savings.")

        positive = sum(1 for p in points if p.savings > 0)
        out.append(f"You saved money in {positive} of {span}.")

    trend_text = _trend_insight([p.savings for p in points], "savings", trend_window, currency)
    if trend_text:
        out.append(trend_text)
    return out


def _income_expense_insights(buckets: Sequence[FlowBucket], currency: str | None, trend_window: int) -> list[str]:
    out: list[str] = []
    income = sum(b.income for b in buckets)
    expense = sum(b.expense for b in buckets)
    net = income - expense

    if net > 0:
        out.append(f"Income exceeded expenses by {format_amount(net, currency)}.")
    elif net < 0:
        out.append(f"Expenses exceed income by {format_amount(abs(net), currency)}.")
    else:
        out.append("Income and expenses balanced out exactly.")

    rate_text = _savings_rate_insight(income, expense)
    if rate_text:
        out.append(rate_text)

    if income > 0 and expense > 0 and income / expense < THIN_COVERAGE_RATIO:
        out.append(f"Income covers expenses only {income / expense:.2f}x. Consider building a larger buffer.")

    best = max(buckets, key=lambda b: b.net)
    out.append(f"Best period: {best.label} with {format_amount(best.net, currency)} net.")
    if len(buckets) > 1:
        worst = min(buckets, key=lambda b: b.net)
        out.append(f"Weakest period: {worst.label} with {format_amount(worst.net, currency)} net.")

    heaviest = max(buckets, key=lambda b: b.expense)
    if heaviest.expense > 0:
        out.append(f"Highest spending: {heaviest.label} at {format_amount(heaviest.expense, currency)}.")

    if len(buckets) > 1:
        out.append(
            f"Average per period: income {format_amount(income / len(buckets), currency)}, "
            f"expenses {format_amount(expense / len(buckets), currency)}."
        )

    trend_text = _trend_insight([b.net for b in buckets], "net cashflow", trend_window, currency)
    if trend_text:
        out.append(trend_text)
    return out


def _comparison_insights(
    entries: Sequence[ComparisonEntry], currency: str | None, stable_change_pct: float
) -> list[str]:
    out: list[str] = []
    current_total = sum(e.current for e in entries)
    previous_total = sum(e.previous for e in entries)
    change = round(percentage_change(current_total, previous_total), 2)

    if previous_total == 0:
        out.append(
            f"Nothing was spent in the previous period; this period totals {format_amount(current_total, currency)}."
        )
    elif abs(change) < stable_change_pct:
        out.append(f"Spending is stable compared with the previous period ({format_percentage_change(change)}).")
    elif change > 0:
        out.append(
            f"Spending increased {format_percentage_change(change)} to {format_amount(current_total, currency)} "
            f"from {format_amount(previous_total, currency)}."
        )
    else:
        drop = format_percentage_change(abs(change)).lstrip("+")
        out.append(
            f"Spending decreased {drop} to {format_amount(current_total, currency)} "
            f"from {format_amount(previous_total, currency)}."
        )

    peak = max(entries, key=lambda e: e.current)
    if peak.current > 0:
        out.append(f"Peak this period: {peak.label} at {format_amount(peak.current, currency)}.")
    return out


def _category_insights(entries: Sequence[CategoryBreakdownEntry]) -> list[str]:
    out: list[str] = []
    ranked = top_categories(entries)
    top = ranked[0]
    if top.percentage > CATEGORY_CONCENTRATION_PCT:
        out.append(f"{top.name} makes up {top.percentage:.1f}% of spending. Consider diversifying.")

    large = [e.name for e in ranked if e.percentage > LARGE_CATEGORY_PCT]
    if len(large) > 2:
        out.append(f"Several categories take a large share: {', '.join(large)}.")

    if len(entries) < MIN_CATEGORY_COUNT:
        out.append(
            f"Only {_plural(len(entries), 'category')} recorded. More detailed categories give sharper insights."
        )

    average = sum(e.value for e in entries) / len(entries)
    heavy = [e.name for e in ranked if e.value > 2 * average]
    if heavy:
        out.append(f"Review {', '.join(heavy)}: more than twice the average category spend.")

    if not out:
        out.append(BALANCED_CATEGORIES_INSIGHT)
    return out


def _has_activity(series: Sequence, kind: InsightKind) -> bool:
    if kind == InsightKind.SAVINGS:
        return any(p.income or p.expenses or p.savings for p in series)
    if kind == InsightKind.INCOME_EXPENSE:
        return any(b.income or b.expense for b in series)
    if kind == InsightKind.COMPARISON:
        return any(e.current or e.previous for e in series)
    return any(e.value for e in series)


def insights(
    series: Sequence,
    kind: InsightKind | str,
    currency: str | None = None,
    trend_window: int = 3,
    stable_change_pct: float = 5.0,
) -> list[str]:
    """Generate insight sentences for a chart series.

    SAVINGS expects SavingsPoint items, INCOME_EXPENSE FlowBucket items,
    COMPARISON ComparisonEntry items and CATEGORY CategoryBreakdownEntry
    items. Empty or all-zero series yield no insights.
    """
    try:
        kind = InsightKind(kind)
    except ValueError as exc:
        raise ValueError(f"Unsupported insight kind: {kind}") from exc

    if not series or not _has_activity(series, kind):
        return []

    if kind == InsightKind.SAVINGS:
        out = _savings_insights(series, currency, trend_window)
    elif kind == InsightKind.INCOME_EXPENSE:
        out = _income_expense_insights(series, currency, trend_window)
    elif kind == InsightKind.COMPARISON:
        out = _comparison_insights(series, currency, stable_change_pct)
    else:
        out = _category_insights(series)
    return out or [DEFAULT_INSIGHT]
