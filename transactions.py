"""Transaction records, the sanitize boundary and currency partitioning."""

from __future__ import annotations

import datetime
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

import pandas as pd

from logging_setup import get_logger

logger = get_logger("ledgerlens.transactions")

DEFAULT_CURRENCY = "INR"
DEFAULT_CATEGORY = "Other"
FRAME_COLUMNS = ["Id", "Date", "Type", "Category", "Amount", "Currency", "IsRecurring"]

_FIELD_ALIASES = {
    "id": ("id", "_id", "Id", "TransactionId"),
    "user_id": ("user_id", "userId", "UserId"),
    "type": ("type", "Type"),
    "category": ("category", "Category"),
    "amount": ("amount", "Amount"),
    "currency": ("currency", "Currency"),
    "date": ("date", "Date"),
    "is_recurring": ("is_recurring", "isRecurring", "IsRecurring"),
    "template_id": ("template_id", "templateId", "TemplateId"),
}
_TRUE_TEXT = {"1", "true", "yes", "y"}


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class InvalidTransactionError(ValueError):
    """Raised when a raw row cannot be turned into a transaction."""


@dataclass(frozen=True)
class Transaction:
    id: str
    user_id: str
    type: TransactionType
    category: str
    amount: float
    currency: str
    date: datetime.date
    is_recurring: bool = False
    template_id: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "type": self.type.value,
            "category": self.category,
            "amount": self.amount,
            "currency": self.currency,
            "date": self.date.isoformat(),
            "is_recurring": self.is_recurring,
            "template_id": self.template_id,
        }


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _field(raw: Mapping[str, Any], name: str) -> Any:
    for key in _FIELD_ALIASES[name]:
        if key in raw and not _is_missing(raw[key]):
            return raw[key]
    return None


def _parse_type(value: Any) -> TransactionType:
    if isinstance(value, TransactionType):
        return value
    text = str(value or "").strip().lower()
    for member in TransactionType:
        if member.value == text:
            return member
    raise InvalidTransactionError(f"Unsupported transaction type: {value}")


def _parse_amount(value: Any) -> float:
    if value is None:
        raise InvalidTransactionError("Missing amount")
    try:
        amount = float(str(value).replace(",", "").strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidTransactionError(f"Invalid amount: {value}") from exc
    if pd.isna(amount) or amount in (float("inf"), float("-inf")):
        raise InvalidTransactionError(f"Invalid amount: {value}")
    return abs(amount)


def _parse_date(value: Any) -> datetime.date:
    if value is None:
        raise InvalidTransactionError("Missing date")
    if isinstance(value, datetime.date) and not isinstance(value, datetime.datetime):
        return value
    stamp = pd.to_datetime(value, errors="coerce")
    if pd.isna(stamp):
        raise InvalidTransactionError(f"Invalid date: {value}")
    moment = stamp.to_pydatetime()
    if moment.tzinfo is not None:
        # Aware timestamps are bucketed by the local calendar day.
        moment = moment.astimezone()
    return moment.date()


def _parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_TEXT
    return bool(value) if value is not None else False


def sanitize_transaction(
    raw: Mapping[str, Any] | Transaction,
    default_currency: str = DEFAULT_CURRENCY,
) -> Transaction:
    """Normalize one raw row into a Transaction.

    Missing currency becomes ``default_currency``, missing category becomes
    ``Other`` and negative amounts are stored as their absolute value. A
    missing or unparseable date, amount or type raises InvalidTransactionError.
    """
    if isinstance(raw, Transaction):
        raw = raw.to_dict()

    currency = _field(raw, "currency")
    category = _field(raw, "category")
    template_id = _field(raw, "template_id")
    return Transaction(
        id=str(_field(raw, "id") or ""),
        user_id=str(_field(raw, "user_id") or ""),
        type=_parse_type(_field(raw, "type")),
        category=str(category).strip() if category is not None else DEFAULT_CATEGORY,
        amount=_parse_amount(_field(raw, "amount")),
        currency=str(currency if currency is not None else default_currency).strip().upper(),
        date=_parse_date(_field(raw, "date")),
        is_recurring=_parse_bool(_field(raw, "is_recurring")),
        template_id=str(template_id) if template_id is not None else None,
    )


def sanitize_rows(
    rows: Iterable[Mapping[str, Any] | Transaction],
    default_currency: str = DEFAULT_CURRENCY,
) -> tuple[list[Transaction], list[str]]:
    """Sanitize many rows, collecting an error message for each rejected row."""
    clean: list[Transaction] = []
    errors: list[str] = []
    for idx, raw in enumerate(rows):
        try:
            clean.append(sanitize_transaction(raw, default_currency))
        except InvalidTransactionError as exc:
            errors.append(f"row {idx}: {exc}")
    if errors:
        logger.warning("Skipped %d invalid transaction row(s); first: %s", len(errors), errors[0])
    return clean, errors


def partition_by_currency(transactions: Iterable[Transaction]) -> dict[str, list[Transaction]]:
    """Group transactions by currency code, keys sorted, input order kept inside."""
    groups: dict[str, list[Transaction]] = {}
    for tx in transactions:
        groups.setdefault(tx.currency, []).append(tx)
    return {currency: groups[currency] for currency in sorted(groups)}


def is_expense(tx: Transaction) -> bool:
    return tx.type == TransactionType.EXPENSE


def is_income(tx: Transaction) -> bool:
    return tx.type == TransactionType.INCOME


def bills_only(bills_category: str = "Bills") -> Callable[[Transaction], bool]:
    """Predicate for expenses booked under the bills category."""

    def _predicate(tx: Transaction) -> bool:
        return is_expense(tx) and tx.category == bills_category

    return _predicate


def general_expenses(bills_category: str = "Bills") -> Callable[[Transaction], bool]:
    """Predicate for expenses outside the bills category."""

    def _predicate(tx: Transaction) -> bool:
        return is_expense(tx) and tx.category != bills_category

    return _predicate


def transactions_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Tabular view used by the pandas aggregations."""
    rows = [
        {
            "Id": tx.id,
            "Date": tx.date,
            "Type": tx.type.value,
            "Category": tx.category,
            "Amount": tx.amount,
            "Currency": tx.currency,
            "IsRecurring": tx.is_recurring,
        }
        for tx in transactions
    ]
    out = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    out["Date"] = pd.to_datetime(out["Date"])
    out["Amount"] = out["Amount"].astype(float)
    out["IsRecurring"] = out["IsRecurring"].astype(bool)
    return out
