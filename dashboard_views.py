"""Modular Streamlit page renderers."""

from __future__ import annotations

import pandas as pd
import streamlit as st

from formatting import exceeds_display_cap, format_amount, format_percentage_change
from insights import InsightKind
from metric_guide import METRIC_GUIDE
from reports import CurrencyReport

_BAND_LABELS = {0: "none", 1: "very low", 2: "low", 3: "medium", 4: "high", 5: "very high"}


def _records_frame(records, index: str | None = "label") -> pd.DataFrame:
    frame = pd.DataFrame([r.to_dict() for r in records])
    if index and not frame.empty:
        frame = frame.set_index(index)
    return frame


def _render_insights(lines: tuple[str, ...]) -> None:
    if not lines:
        st.caption("No insights for this selection.")
        return
    for line in lines:
        st.markdown(f"- {line}")


def render_kpis(report: CurrencyReport) -> None:
    stats = report.statistics
    currency = report.currency
    change = report.comparison_summary.percentage_change

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Income", format_amount(stats.total_income, currency))
    c2.metric(
        "Expenses",
        format_amount(stats.total_expense, currency),
        format_percentage_change(change),
        delta_color="inverse",
        help="Change vs previous period." + (" Actual change exceeds 100%." if exceeds_display_cap(change) else ""),
    )
    c3.metric("Net", format_amount(stats.net, currency))
    c4.metric("Savings rate", f"{stats.savings_rate:.1f}%")

    c5, c6, c7, c8 = st.columns(4)
    c5.metric("Transactions", f"{stats.transaction_count:,}")
    c6.metric("Average expense", format_amount(stats.average_expense, currency))
    c7.metric("Largest expense", format_amount(stats.largest_expense, currency))
    c8.metric("Recurring", f"{stats.recurring_count:,}")


def render_categories(report: CurrencyReport) -> None:
    st.markdown("### Expenses by category")
    if not report.expense_breakdown:
        st.info("No expenses in this period.")
    else:
        frame = _records_frame(report.expense_breakdown, index="name")
        left, right = st.columns([2, 1])
        with left:
            st.bar_chart(frame[["value"]])
        with right:
            st.dataframe(frame.round(2), use_container_width=True)
    _render_insights(report.insights.get(InsightKind.CATEGORY.value, ()))

    st.markdown("### Bills")
    if not report.bills_breakdown:
        st.info("No bills in this period.")
    else:
        st.dataframe(_records_frame(report.bills_breakdown, index="name").round(2), use_container_width=True)


def render_cashflow(report: CurrencyReport) -> None:
    st.markdown("### Income vs expenses")
    frame = _records_frame(report.flow)
    if frame.empty:
        st.info("No buckets for this selection.")
        return
    st.bar_chart(frame[["income", "expense"]])
    _render_insights(report.insights.get(InsightKind.INCOME_EXPENSE.value, ()))


def render_savings(report: CurrencyReport) -> None:
    st.markdown("### Savings trend")
    frame = _records_frame(report.savings)
    if frame.empty:
        st.info("No buckets for this selection.")
        return
    st.area_chart(frame[["savings"]])

    summary = report.savings_summary
    c1, c2, c3 = st.columns(3)
    c1.metric("Total savings", format_amount(summary.total_savings, report.currency))
    c2.metric("Average savings", format_amount(summary.average_savings, report.currency))
    c3.metric("Positive periods", f"{summary.positive_buckets} / {summary.active_buckets}")
    _render_insights(report.insights.get(InsightKind.SAVINGS.value, ()))


def render_comparison(report: CurrencyReport, current_label: str, previous_label: str) -> None:
    st.markdown(f"### {current_label} vs {previous_label}")
    frame = _records_frame(report.comparison)
    if frame.empty:
        st.info("Nothing to compare.")
        return
    frame = frame.rename(columns={"current": current_label, "previous": previous_label})
    st.line_chart(frame[[current_label, previous_label]])
    summary = report.comparison_summary
    st.caption(
        f"Expenses {format_amount(summary.current_total, report.currency)} vs "
        f"{format_amount(summary.previous_total, report.currency)} "
        f"({format_percentage_change(summary.percentage_change)}, {summary.trend})."
    )
    _render_insights(report.insights.get(InsightKind.COMPARISON.value, ()))


def render_heatmap(report: CurrencyReport) -> None:
    st.markdown(f"### Expense activity in {report.heatmap_year}")
    if not report.heatmap:
        st.info("No expenses recorded this year.")
        return
    frame = _records_frame(report.heatmap, index=None)
    frame["band"] = [_BAND_LABELS[report.heatmap_bands.get(cell.date, 0)] for cell in report.heatmap]
    frame["date"] = pd.to_datetime(frame["date"])
    weekly = frame.set_index("date")["count"].resample("W").sum()
    st.bar_chart(weekly)
    st.dataframe(frame, use_container_width=True, hide_index=True)


def render_currency_report(report: CurrencyReport, current_label: str, previous_label: str) -> None:
    st.subheader(f"{report.currency} · {current_label}")
    render_kpis(report)
    tabs = st.tabs(["Categories", "Cashflow", "Savings", "Comparison", "Activity"])
    with tabs[0]:
        render_categories(report)
    with tabs[1]:
        render_cashflow(report)
    with tabs[2]:
        render_savings(report)
    with tabs[3]:
        render_comparison(report, current_label, previous_label)
    with tabs[4]:
        render_heatmap(report)


def render_metric_guide() -> None:
    st.header("Metric Guide")
    st.caption("Definitions and formulas behind each chart.")
    st.dataframe(pd.DataFrame(METRIC_GUIDE), use_container_width=True, height=480)
