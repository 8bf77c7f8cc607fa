"""Analytics helpers for category, flow, comparison and heatmap charts."""

from __future__ import annotations

import dataclasses
import datetime
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

import pandas as pd

from periods import BucketUnit, DateRange, bucket_label
from transactions import Transaction, TransactionType, is_expense, transactions_frame

COMPARISON_METRICS = ("expense", "income", "net")
INTENSITY_THRESHOLDS = (0.2, 0.4, 0.6, 0.8)

TransactionFilter = Callable[[Transaction], bool]


@dataclass(frozen=True)
class CategoryBreakdownEntry:
    name: str
    value: float
    percentage: float

    def to_dict(self) -> dict[str, object]:
        return dataclasses.asdict(self)


@dataclass(frozen=True)
class FlowBucket:
    label: str
    income: float
    expense: float

    @property
    def net(self) -> float:
        return self.income - self.expense

    def to_dict(self) -> dict[str, object]:
        return {"label": self.label, "income": self.income, "expense": self.expense, "net": self.net}


@dataclass(frozen=True)
class ComparisonEntry:
    label: str
    current: float
    previous: float

    def to_dict(self) -> dict[str, object]:
        return dataclasses.asdict(self)


@dataclass(frozen=True)
class SavingsPoint:
    label: str
    savings: float
    income: float
    expenses: float

    def to_dict(self) -> dict[str, object]:
        return dataclasses.asdict(self)


@dataclass(frozen=True)
class SavingsSummary:
    total_savings: float
    average_savings: float
    positive_buckets: int
    negative_buckets: int
    active_buckets: int
    total_buckets: int
    best_label: str | None = None
    best_savings: float | None = None
    worst_label: str | None = None
    worst_savings: float | None = None

    def to_dict(self) -> dict[str, object]:
        return dataclasses.asdict(self)


@dataclass(frozen=True)
class ComparisonSummary:
    current_total: float
    previous_total: float
    percentage_change: float
    trend: str

    def to_dict(self) -> dict[str, object]:
        return dataclasses.asdict(self)


@dataclass(frozen=True)
class HeatmapCell:
    date: datetime.date
    count: int
    amount: float
    category: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "date": self.date.isoformat(),
            "count": self.count,
            "amount": self.amount,
            "category": self.category,
        }


@dataclass(frozen=True)
class AccountStatistics:
    transaction_count: int
    income_count: int
    expense_count: int
    total_income: float
    total_expense: float
    net: float
    savings_rate: float
    average_expense: float
    largest_expense: float
    recurring_count: int
    active_days: int

    def to_dict(self) -> dict[str, object]:
        return dataclasses.asdict(self)


def filter_by_date_range(df: pd.DataFrame, start_date, end_date) -> pd.DataFrame:
    """Filter transaction rows in inclusive date range."""
    mask = df["Date"].dt.date.between(start_date, end_date)
    return df.loc[mask].copy()


def _range_frame(
    transactions: Iterable[Transaction],
    date_range: DateRange,
    category_filter: TransactionFilter | None = None,
) -> pd.DataFrame:
    selected = [tx for tx in transactions if category_filter is None or category_filter(tx)]
    return filter_by_date_range(transactions_frame(selected), date_range.start, date_range.end)


def category_breakdown(
    transactions: Iterable[Transaction],
    date_range: DateRange,
    category_filter: TransactionFilter | None = None,
) -> list[CategoryBreakdownEntry]:
    """Sum amounts per category inside the range, with share of the total.

    Categories keep first-seen order. A zero total gives every entry 0%.
    """
    df = _range_frame(transactions, date_range, category_filter)
    if df.empty:
        return []

    totals = df.groupby("Category", sort=False)["Amount"].sum()
    total = float(totals.sum())
    return [
        CategoryBreakdownEntry(
            name=str(name),
            value=float(value),
            percentage=(float(value) / total * 100.0) if total else 0.0,
        )
        for name, value in totals.items()
    ]


def top_categories(entries: Sequence[CategoryBreakdownEntry], n: int | None = None) -> list[CategoryBreakdownEntry]:
    """Largest categories first; equal values keep their input order."""
    ranked = sorted(entries, key=lambda entry: entry.value, reverse=True)
    return ranked if n is None else ranked[:n]


def _bucket_day(key) -> datetime.date:
    if isinstance(key, pd.Period):
        return key.start_time.date()
    return key


def flow(
    transactions: Iterable[Transaction],
    date_range: DateRange,
    bucket_unit: BucketUnit | str,
) -> list[FlowBucket]:
    """Income and expense per day or month across the whole range.

    Every bucket of the range is emitted, including empty ones.
    """
    unit = BucketUnit(bucket_unit)
    start, end = pd.Timestamp(date_range.start), pd.Timestamp(date_range.end)
    if unit == BucketUnit.DAY:
        keys = pd.Index([stamp.date() for stamp in pd.date_range(start, end, freq="D")])
    else:
        keys = pd.period_range(start, end, freq="M")

    df = _range_frame(transactions, date_range)
    if df.empty:
        grouped = pd.DataFrame(0.0, index=keys, columns=["Income", "Expense"])
    else:
        if unit == BucketUnit.DAY:
            bucket = df["Date"].dt.date
        else:
            bucket = df["Date"].dt.to_period("M")
        work = df.assign(
            Bucket=bucket,
            Income=df["Amount"].where(df["Type"] == TransactionType.INCOME.value, 0.0),
            Expense=df["Amount"].where(df["Type"] == TransactionType.EXPENSE.value, 0.0),
        )
        grouped = work.groupby("Bucket")[["Income", "Expense"]].sum().reindex(keys).fillna(0.0)

    return [
        FlowBucket(
            label=bucket_label(_bucket_day(key), unit),
            income=float(row["Income"]),
            expense=float(row["Expense"]),
        )
        for key, row in grouped.iterrows()
    ]


def savings_series(buckets: Iterable[FlowBucket]) -> list[SavingsPoint]:
    """Savings per bucket: income minus expenses."""
    return [
        SavingsPoint(label=b.label, savings=b.net, income=b.income, expenses=b.expense)
        for b in buckets
    ]


def savings_rate(income: float, expense: float) -> float:
    """Share of income kept, in percent; 0 without income."""
    return float(((income - expense) / income * 100.0) if income else 0.0)


def savings_summary(points: Sequence[SavingsPoint]) -> SavingsSummary:
    """Totals and extremes over buckets that carry any activity."""
    active = [p for p in points if p.income or p.expenses]
    total = float(sum(p.savings for p in active))
    if not active:
        return SavingsSummary(
            total_savings=0.0,
            average_savings=0.0,
            positive_buckets=0,
            negative_buckets=0,
            active_buckets=0,
            total_buckets=len(points),
        )

    best = max(active, key=lambda p: p.savings)
    worst = min(active, key=lambda p: p.savings)
    return SavingsSummary(
        total_savings=total,
        average_savings=round(total / len(active), 2),
        positive_buckets=sum(1 for p in active if p.savings > 0),
        negative_buckets=sum(1 for p in active if p.savings < 0),
        active_buckets=len(active),
        total_buckets=len(points),
        best_label=best.label,
        best_savings=best.savings,
        worst_label=worst.label,
        worst_savings=worst.savings,
    )


def _metric_value(bucket: FlowBucket | None, metric: str) -> float:
    if bucket is None:
        return 0.0
    if metric == "expense":
        return bucket.expense
    if metric == "income":
        return bucket.income
    return bucket.net


def compare(
    current: Sequence[FlowBucket],
    previous: Sequence[FlowBucket],
    metric: str = "expense",
) -> list[ComparisonEntry]:
    """Align current and previous buckets by position.

    The shorter series is padded with zeros; labels come from the current
    series where it has the slot.
    """
    if metric not in COMPARISON_METRICS:
        raise ValueError(f"Unsupported metric: {metric}")

    entries: list[ComparisonEntry] = []
    for idx in range(max(len(current), len(previous))):
        cur = current[idx] if idx < len(current) else None
        prev = previous[idx] if idx < len(previous) else None
        label = cur.label if cur is not None else prev.label
        entries.append(
            ComparisonEntry(
                label=label,
                current=_metric_value(cur, metric),
                previous=_metric_value(prev, metric),
            )
        )
    return entries


def percentage_change(current: float, previous: float) -> float:
    """Relative change in percent, unclamped; 0 when previous is 0."""
    return float(((current - previous) / previous * 100.0) if previous else 0.0)


def comparison_summary(entries: Sequence[ComparisonEntry], stable_change_pct: float = 5.0) -> ComparisonSummary:
    current_total = float(sum(e.current for e in entries))
    previous_total = float(sum(e.previous for e in entries))
    change = round(percentage_change(current_total, previous_total), 2)
    if abs(change) < stable_change_pct:
        trend = "stable"
    elif change > 0:
        trend = "up"
    else:
        trend = "down"
    return ComparisonSummary(
        current_total=current_total,
        previous_total=previous_total,
        percentage_change=change,
        trend=trend,
    )


def heatmap(transactions: Iterable[Transaction], year: int) -> list[HeatmapCell]:
    """Per-day expense activity for one year, only days with expenses, sorted by date."""
    expenses = [tx for tx in transactions if is_expense(tx) and tx.date.year == int(year)]
    if not expenses:
        return []

    df = transactions_frame(expenses)
    daily = df.groupby("Date", sort=True).agg(Count=("Amount", "size"), Amount=("Amount", "sum"))

    # Highest summed category wins; ties go to the category seen first that day.
    dominant: dict[pd.Timestamp, tuple[str, float]] = {}
    for (day, category), amount in df.groupby(["Date", "Category"], sort=False)["Amount"].sum().items():
        if day not in dominant or amount > dominant[day][1]:
            dominant[day] = (str(category), float(amount))

    return [
        HeatmapCell(
            date=pd.Timestamp(day).date(),
            count=int(row["Count"]),
            amount=float(row["Amount"]),
            category=dominant[day][0],
        )
        for day, row in daily.iterrows()
    ]


def heatmap_max_count(cells: Iterable[HeatmapCell]) -> int:
    return max((cell.count for cell in cells), default=1)


def intensity_band(count: int, max_count: int) -> int:
    """Colour band 1-5 for a day's count; 0 means no activity."""
    if count <= 0:
        return 0
    ratio = count / max(max_count, 1)
    for band, threshold in enumerate(INTENSITY_THRESHOLDS, start=1):
        if ratio <= threshold:
            return band
    return len(INTENSITY_THRESHOLDS) + 1


def heatmap_bands(cells: Sequence[HeatmapCell]) -> dict[datetime.date, int]:
    max_count = heatmap_max_count(cells)
    return {cell.date: intensity_band(cell.count, max_count) for cell in cells}


def available_years(
    transactions: Iterable[Transaction], reference: datetime.date | None = None
) -> list[int]:
    """Years with any transaction, newest first; the reference year when empty."""
    years = sorted({tx.date.year for tx in transactions}, reverse=True)
    if years:
        return years
    return [(reference or datetime.date.today()).year]


def account_statistics(
    transactions: Iterable[Transaction], date_range: DateRange | None = None
) -> AccountStatistics:
    """Counts and totals for one currency's transactions."""
    df = transactions_frame(transactions)
    if date_range is not None:
        df = filter_by_date_range(df, date_range.start, date_range.end)

    income = df.loc[df["Type"] == TransactionType.INCOME.value, "Amount"]
    expense = df.loc[df["Type"] == TransactionType.EXPENSE.value, "Amount"]
    total_income = float(income.sum())
    total_expense = float(expense.sum())
    return AccountStatistics(
        transaction_count=int(len(df)),
        income_count=int(len(income)),
        expense_count=int(len(expense)),
        total_income=total_income,
        total_expense=total_expense,
        net=total_income - total_expense,
        savings_rate=savings_rate(total_income, total_expense),
        average_expense=float(expense.mean()) if len(expense) else 0.0,
        largest_expense=float(expense.max()) if len(expense) else 0.0,
        recurring_count=int(df["IsRecurring"].sum()),
        active_days=int(df["Date"].dt.date.nunique()),
    )
