"""Transaction export loading and normalization helpers."""

from typing import Any

import pandas as pd

from logging_setup import get_logger
from transactions import DEFAULT_CURRENCY, Transaction, sanitize_rows

logger = get_logger("ledgerlens.parsing")

SUPPORTED_EXTENSIONS = (".csv", ".json")


def _export_name(uploaded_file: Any) -> str:
    return str(getattr(uploaded_file, "name", uploaded_file)).lower()


def read_export(uploaded_file: Any) -> pd.DataFrame:
    """Read a comma CSV or a JSON array export into a raw frame."""
    name = _export_name(uploaded_file)
    if name.endswith(".csv"):
        return pd.read_csv(uploaded_file, dtype=str, keep_default_na=False)
    if name.endswith(".json"):
        return pd.read_json(uploaded_file, orient="records", dtype=False, convert_dates=False)
    raise ValueError(
        f"Unsupported file type: {name or '<unknown>'}. Supported: csv, json."
    )


def load_transactions(uploaded_file: Any, default_currency: str = DEFAULT_CURRENCY) -> list[Transaction]:
    """Load an export and sanitize each row; invalid rows are skipped."""
    raw = read_export(uploaded_file)
    rows = raw.to_dict(orient="records")
    transactions, errors = sanitize_rows(rows, default_currency)
    if errors:
        logger.warning(
            "Dropped %d of %d row(s) from %s",
            len(errors),
            len(rows),
            _export_name(uploaded_file) or "<upload>",
        )
    return transactions


def deduplicate_transactions(transactions: list[Transaction]) -> list[Transaction]:
    """Drop repeated transaction ids, keeping the first occurrence."""
    seen: set[str] = set()
    out: list[Transaction] = []
    for tx in transactions:
        if tx.id:
            if tx.id in seen:
                continue
            seen.add(tx.id)
        out.append(tx)
    return out


def merge_transactions(
    uploaded_files: list[Any],
    drop_duplicates: bool = True,
    default_currency: str = DEFAULT_CURRENCY,
) -> list[Transaction]:
    """Load, combine, deduplicate and sort multiple exports by date."""
    merged: list[Transaction] = []
    for uploaded_file in uploaded_files:
        merged.extend(load_transactions(uploaded_file, default_currency))
    if drop_duplicates:
        merged = deduplicate_transactions(merged)
    return sorted(merged, key=lambda tx: tx.date)
