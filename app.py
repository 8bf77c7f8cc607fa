"""LedgerLens Streamlit entrypoint: period analytics per currency."""

from __future__ import annotations

import datetime

import streamlit as st

from analytics import available_years
from dashboard_views import render_currency_report, render_metric_guide
from logging_setup import configure_logging
from parsing import SUPPORTED_EXTENSIONS, merge_transactions
from periods import Period, default_sub_period, sub_period_options
from reports import cached_analytics
from settings import load_settings
from transactions import Transaction

st.set_page_config(page_title="LedgerLens", page_icon="\U0001f4ca", layout="wide")

_PERIOD_LABELS = {
    Period.MONTHLY: "Monthly",
    Period.QUARTERLY: "Quarterly",
    Period.HALF_YEARLY: "Half-yearly",
    Period.YEARLY: "Yearly",
}


def _render_header() -> None:
    st.title("LedgerLens")
    st.caption("Period analytics for your transactions, kept separate per currency.")


def _load_data(default_currency: str) -> list[Transaction] | None:
    st.sidebar.header("Data Setup")
    uploaded_files = st.sidebar.file_uploader(
        "Upload transaction exports",
        type=[ext.replace(".", "") for ext in SUPPORTED_EXTENSIONS],
        accept_multiple_files=True,
        help="CSV with a header row, or a JSON array of transactions.",
    )
    if not uploaded_files:
        st.info("Upload one or more transaction exports from the sidebar to start.")
        return None

    drop_duplicates = st.sidebar.checkbox("Auto-remove duplicate ids across files", value=True)
    try:
        transactions = merge_transactions(
            uploaded_files, drop_duplicates=drop_duplicates, default_currency=default_currency
        )
    except Exception as exc:
        st.error(f"Could not read file(s): {exc}")
        return None

    if not transactions:
        st.warning("No valid transactions found. Check the export columns: type, amount, date.")
        return None

    st.sidebar.success(
        f"Loaded {len(transactions):,} transactions from {len(uploaded_files)} file(s).\n"
        f"{transactions[0].date} -> {transactions[-1].date}"
    )
    return transactions


def _select_period(transactions: list[Transaction], today: datetime.date) -> tuple[Period, str, int]:
    st.sidebar.header("Period")
    period = st.sidebar.selectbox(
        "Period",
        list(Period),
        format_func=lambda p: _PERIOD_LABELS[p],
    )
    options = sub_period_options(period, today)
    default = default_sub_period(period, today)
    sub_period = st.sidebar.selectbox(
        "Sub-period",
        options,
        index=options.index(default) if default in options else 0,
    )
    year = today.year
    if period != Period.YEARLY:
        years = available_years(transactions, today)
        year = st.sidebar.selectbox("Year", years, index=years.index(today.year) if today.year in years else 0)
    return period, sub_period, int(year)


def main() -> None:
    configure_logging()
    settings = load_settings()
    _render_header()

    view = st.sidebar.radio("Navigate", ["Analytics", "Metric Guide"])
    if view == "Metric Guide":
        render_metric_guide()
        return

    transactions = _load_data(settings.default_currency)
    if transactions is None:
        return

    today = datetime.date.today()
    period, sub_period, year = _select_period(transactions, today)
    snapshot = cached_analytics(
        transactions, period, sub_period, reference_year=year, reference=today, settings=settings
    )
    if not snapshot.currencies:
        st.warning("No transactions to analyze.")
        return

    currencies = st.sidebar.multiselect("Currencies", list(snapshot.currencies), default=list(snapshot.currencies))
    if not currencies:
        st.info("Select at least one currency.")
        return

    period_range = snapshot.period_range
    for currency in currencies:
        render_currency_report(
            snapshot.reports[currency], period_range.current_label, period_range.previous_label
        )


if __name__ == "__main__":
    main()
