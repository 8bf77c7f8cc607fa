"""Per-currency analytics reports for one period selection."""

from __future__ import annotations

import datetime
import json
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Any

from analytics import (
    AccountStatistics,
    CategoryBreakdownEntry,
    ComparisonEntry,
    ComparisonSummary,
    FlowBucket,
    HeatmapCell,
    SavingsPoint,
    SavingsSummary,
    account_statistics,
    category_breakdown,
    compare,
    comparison_summary,
    flow,
    heatmap,
    heatmap_bands,
    savings_series,
    savings_summary,
)
from insights import InsightKind, insights
from logging_setup import get_logger
from periods import Period, PeriodRange, resolve_range
from settings import DEFAULT_SETTINGS, AnalyticsSettings
from transactions import (
    Transaction,
    bills_only,
    general_expenses,
    partition_by_currency,
    sanitize_rows,
)

logger = get_logger("ledgerlens.reports")


@dataclass(frozen=True)
class CurrencyReport:
    currency: str
    expense_breakdown: tuple[CategoryBreakdownEntry, ...]
    bills_breakdown: tuple[CategoryBreakdownEntry, ...]
    flow: tuple[FlowBucket, ...]
    previous_flow: tuple[FlowBucket, ...]
    savings: tuple[SavingsPoint, ...]
    savings_summary: SavingsSummary
    comparison: tuple[ComparisonEntry, ...]
    comparison_summary: ComparisonSummary
    statistics: AccountStatistics
    insights: Mapping[str, tuple[str, ...]]
    heatmap_year: int
    heatmap: tuple[HeatmapCell, ...]
    heatmap_bands: Mapping[datetime.date, int]

    def to_dict(self) -> dict[str, Any]:
        return {
            "currency": self.currency,
            "expense_breakdown": [e.to_dict() for e in self.expense_breakdown],
            "bills_breakdown": [e.to_dict() for e in self.bills_breakdown],
            "flow": [b.to_dict() for b in self.flow],
            "previous_flow": [b.to_dict() for b in self.previous_flow],
            "savings": [p.to_dict() for p in self.savings],
            "savings_summary": self.savings_summary.to_dict(),
            "comparison": [e.to_dict() for e in self.comparison],
            "comparison_summary": self.comparison_summary.to_dict(),
            "statistics": self.statistics.to_dict(),
            "insights": {kind: list(lines) for kind, lines in self.insights.items()},
            "heatmap_year": self.heatmap_year,
            "heatmap": [
                {**cell.to_dict(), "band": self.heatmap_bands.get(cell.date, 0)} for cell in self.heatmap
            ],
        }


@dataclass(frozen=True)
class AnalyticsSnapshot:
    period_range: PeriodRange
    currencies: tuple[str, ...]
    reports: Mapping[str, CurrencyReport]

    def to_dict(self) -> dict[str, Any]:
        return {
            "period": self.period_range.to_dict(),
            "currencies": list(self.currencies),
            "reports": {currency: report.to_dict() for currency, report in self.reports.items()},
        }

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=True)


def build_currency_report(
    transactions: Iterable[Transaction],
    period_range: PeriodRange,
    currency: str,
    settings: AnalyticsSettings = DEFAULT_SETTINGS,
) -> CurrencyReport:
    """Run every aggregation for one currency's transactions."""
    txs = list(transactions)
    current = period_range.current

    expense_breakdown = category_breakdown(txs, current, general_expenses(settings.bills_category))
    bills_breakdown = category_breakdown(txs, current, bills_only(settings.bills_category))
    current_flow = flow(txs, current, period_range.bucket_unit)
    previous_flow = flow(txs, period_range.previous, period_range.bucket_unit)
    savings = savings_series(current_flow)
    comparison = compare(current_flow, previous_flow, metric="expense")

    insight_inputs = {
        InsightKind.SAVINGS: savings,
        InsightKind.INCOME_EXPENSE: current_flow,
        InsightKind.COMPARISON: comparison,
        InsightKind.CATEGORY: expense_breakdown,
    }
    insight_text = {
        kind.value: tuple(
            insights(
                series,
                kind,
                currency=currency,
                trend_window=settings.trend_window,
                stable_change_pct=settings.stable_change_pct,
            )
        )
        for kind, series in insight_inputs.items()
    }

    heatmap_year = current.start.year
    cells = heatmap(txs, heatmap_year)

    return CurrencyReport(
        currency=currency,
        expense_breakdown=tuple(expense_breakdown),
        bills_breakdown=tuple(bills_breakdown),
        flow=tuple(current_flow),
        previous_flow=tuple(previous_flow),
        savings=tuple(savings),
        savings_summary=savings_summary(savings),
        comparison=tuple(comparison),
        comparison_summary=comparison_summary(comparison, settings.stable_change_pct),
        statistics=account_statistics(txs, current),
        insights=MappingProxyType(insight_text),
        heatmap_year=heatmap_year,
        heatmap=tuple(cells),
        heatmap_bands=MappingProxyType(heatmap_bands(cells)),
    )


def _snapshot(
    transactions: tuple[Transaction, ...],
    period_range: PeriodRange,
    settings: AnalyticsSettings,
) -> AnalyticsSnapshot:
    groups = partition_by_currency(transactions)
    reports = {
        currency: build_currency_report(txs, period_range, currency, settings)
        for currency, txs in groups.items()
    }
    logger.debug(
        "Built %s analytics for %d currency group(s) from %d transaction(s)",
        period_range.current_label,
        len(reports),
        len(transactions),
    )
    return AnalyticsSnapshot(period_range=period_range, currencies=tuple(groups), reports=MappingProxyType(reports))


def _coerce_transactions(rows: Iterable[Any], settings: AnalyticsSettings) -> tuple[Transaction, ...]:
    rows = list(rows)
    if all(isinstance(row, Transaction) for row in rows):
        return tuple(rows)
    clean, _ = sanitize_rows(rows, settings.default_currency)
    return tuple(clean)


def build_analytics(
    transactions: Iterable[Transaction | Mapping[str, Any]],
    period: Period | str,
    sub_period: Any = None,
    reference_year: int | None = None,
    reference: datetime.date | datetime.datetime | None = None,
    settings: AnalyticsSettings | None = None,
) -> AnalyticsSnapshot:
    """Resolve the period and build one report per currency present.

    Raw mappings are sanitized first; rejected rows are skipped.
    """
    settings = settings or DEFAULT_SETTINGS
    period_range = resolve_range(period, sub_period, reference_year=reference_year, reference=reference)
    return _snapshot(_coerce_transactions(transactions, settings), period_range, settings)


# One memo per configured size, so callers with different settings keep their entries.
_snapshot_caches: dict[int, Callable[..., AnalyticsSnapshot]] = {}


def _snapshot_cache(maxsize: int) -> Callable[..., AnalyticsSnapshot]:
    cached = _snapshot_caches.get(maxsize)
    if cached is None:
        cached = _snapshot_caches[maxsize] = lru_cache(maxsize=maxsize)(_snapshot)
    return cached


def cache_info(maxsize: int = DEFAULT_SETTINGS.cache_size):
    return _snapshot_cache(maxsize).cache_info()


def cached_analytics(
    transactions: Iterable[Transaction | Mapping[str, Any]],
    period: Period | str,
    sub_period: Any = None,
    reference_year: int | None = None,
    reference: datetime.date | datetime.datetime | None = None,
    settings: AnalyticsSettings | None = None,
) -> AnalyticsSnapshot:
    """Memoized build_analytics keyed on the transaction tuple, period range and settings."""
    settings = settings or DEFAULT_SETTINGS
    period_range = resolve_range(period, sub_period, reference_year=reference_year, reference=reference)
    return _snapshot_cache(settings.cache_size)(_coerce_transactions(transactions, settings), period_range, settings)
