import pytest

from analytics import CategoryBreakdownEntry, ComparisonEntry, FlowBucket, SavingsPoint
from insights import BALANCED_CATEGORIES_INSIGHT, InsightKind, insights


def _points(*values: tuple[str, float, float]) -> list[SavingsPoint]:
    return [SavingsPoint(label, income - expense, income, expense) for label, income, expense in values]


def _savings_only(savings: list[float]) -> list[SavingsPoint]:
    return [SavingsPoint(f"M{idx}", value, max(value, 0.0) + 100.0, 100.0 - min(value, 0.0)) for idx, value in enumerate(savings, start=1)]


@pytest.mark.parametrize("kind", list(InsightKind))
def test_empty_series_yields_no_insights(kind: InsightKind) -> None:
    assert insights([], kind) == []


def test_all_zero_series_yields_no_insights() -> None:
    buckets = [FlowBucket(str(day), 0.0, 0.0) for day in range(1, 31)]

    assert insights(buckets, InsightKind.INCOME_EXPENSE) == []
    assert insights([ComparisonEntry("1", 0.0, 0.0)], "comparison") == []
    assert insights([CategoryBreakdownEntry("Food", 0.0, 0.0)], "category") == []


def test_healthy_savings_rate_with_total() -> None:
    out = insights(_points(("January", 1000.0, 700.0)), InsightKind.SAVINGS, currency="USD")

    assert out[0] == "You saved USD 300.00 in total across 1 period."
    assert any("Healthy savings rate of 30.0%" in line for line in out)
    assert any(line.startswith("Best period: January") for line in out)


@pytest.mark.parametrize(
    ("expense", "expected"),
    [(800.0, "Healthy"), (850.0, "is fair"), (900.0, "is fair"), (950.0, "Watch out")],
)
def test_savings_rate_tiers(expense: float, expected: str) -> None:
    out = insights(_points(("January", 1000.0, expense)), InsightKind.SAVINGS)

    assert any(expected in line for line in out)


def test_deficit_uses_absolute_amount() -> None:
    out = insights(_points(("March", 100.0, 300.0)), InsightKind.SAVINGS, currency="EUR")

    assert out[0] == "Spending exceeded income by EUR 200.00 across 1 period."
    assert any("Watch out" in line for line in out)


def test_no_savings_rate_statement_without_income() -> None:
    out = insights(_points(("January", 0.0, 40.0), ("February", 0.0, 60.0)), InsightKind.SAVINGS)

    assert out
    assert not any("savings rate" in line.lower() for line in out)


def test_break_even_statement() -> None:
    out = insights(_points(("January", 100.0, 100.0)), InsightKind.SAVINGS)

    assert out[0] == "Income and expenses broke even across 1 period."


def test_best_and_worst_ties_use_first_occurrence() -> None:
    out = insights(
        _points(("A", 150.0, 100.0), ("B", 150.0, 100.0), ("C", 90.0, 100.0), ("D", 90.0, 100.0)),
        InsightKind.SAVINGS,
    )

    assert any(line.startswith("Best period: A ") for line in out)
    assert any(line.startswith("Weakest period: C ") for line in out)
    assert "You saved money in 2 of 4 periods." in out


def test_trend_compares_recent_window_with_overall_average() -> None:
    rising = insights(_savings_only([10.0, 10.0, 10.0, 100.0, 100.0, 100.0]), InsightKind.SAVINGS)
    falling = insights(_savings_only([100.0, 100.0, 100.0, 10.0, 10.0, 10.0]), InsightKind.SAVINGS)
    flat = insights(_savings_only([50.0, 50.0, 50.0, 50.0]), InsightKind.SAVINGS)

    assert any(line.startswith("Positive momentum") for line in rising)
    assert any(line.startswith("Slipping") for line in falling)
    assert not any(line.startswith(("Positive momentum", "Slipping")) for line in flat)


def test_trend_window_is_configurable() -> None:
    series = _savings_only([100.0, 10.0, 10.0, 10.0, 50.0])

    assert any(line.startswith("Positive momentum") for line in insights(series, "savings", trend_window=1))
    assert any(line.startswith("Slipping") for line in insights(series, "savings", trend_window=3))


def test_income_expense_deficit_and_thin_coverage() -> None:
    deficit = insights([FlowBucket("January", 100.0, 150.0)], InsightKind.INCOME_EXPENSE, currency="USD")
    thin = insights(
        [FlowBucket("January", 550.0, 500.0), FlowBucket("February", 550.0, 500.0)],
        InsightKind.INCOME_EXPENSE,
    )

    assert deficit[0] == "Expenses exceed income by USD 50.00."
    assert any("covers expenses only 1.10x" in line for line in thin)
    assert any(line.startswith("Average per period: income 550.00") for line in thin)
    assert any(line.startswith("Highest spending: January") for line in thin)


def test_comparison_insights() -> None:
    rise = insights([ComparisonEntry("1", 150.0, 100.0)], InsightKind.COMPARISON, currency="USD")
    stable = insights([ComparisonEntry("1", 102.0, 100.0)], InsightKind.COMPARISON)
    fresh = insights([ComparisonEntry("1", 50.0, 0.0)], InsightKind.COMPARISON)
    huge = insights([ComparisonEntry("1", 500.0, 100.0)], InsightKind.COMPARISON)

    assert rise[0] == "Spending increased +50.0% to USD 150.00 from USD 100.00."
    assert "Peak this period: 1 at USD 150.00." in rise
    assert "stable" in stable[0]
    assert fresh[0].startswith("Nothing was spent in the previous period")
    assert "+100%+" in huge[0]


def test_comparison_decrease_reports_unsigned_drop() -> None:
    drop = insights([ComparisonEntry("1", 75.0, 100.0)], InsightKind.COMPARISON, currency="USD")

    assert drop[0] == "Spending decreased 25.0% to USD 75.00 from USD 100.00."


def test_category_concentration_and_low_variety() -> None:
    out = insights([CategoryBreakdownEntry("Food", 150.0, 100.0)], InsightKind.CATEGORY)

    assert out[0] == "Food makes up 100.0% of spending. Consider diversifying."
    assert any("Only 1 category recorded" in line for line in out)


def test_category_outliers_and_spread() -> None:
    spread = [
        CategoryBreakdownEntry("Rent", 30.0, 30.0),
        CategoryBreakdownEntry("Food", 25.0, 25.0),
        CategoryBreakdownEntry("Travel", 25.0, 25.0),
        CategoryBreakdownEntry("Fun", 20.0, 20.0),
    ]
    outlier = [
        CategoryBreakdownEntry("Rent", 70.0, 70.0),
        CategoryBreakdownEntry("Food", 10.0, 10.0),
        CategoryBreakdownEntry("Travel", 10.0, 10.0),
        CategoryBreakdownEntry("Fun", 10.0, 10.0),
    ]

    assert "Several categories take a large share: Rent, Food, Travel." in insights(spread, "category")
    assert "Review Rent: more than twice the average category spend." in insights(outlier, "category")


def test_balanced_categories_fall_back_to_neutral_statement() -> None:
    values = [20.0, 18.0, 17.0, 16.0, 15.0, 14.0]
    entries = [CategoryBreakdownEntry(f"C{idx}", value, value) for idx, value in enumerate(values)]

    assert insights(entries, InsightKind.CATEGORY) == [BALANCED_CATEGORIES_INSIGHT]


def test_insights_are_deterministic() -> None:
    series = _points(("January", 500.0, 300.0), ("February", 400.0, 450.0))

    assert insights(series, "savings", currency="INR") == insights(series, "savings", currency="INR")


def test_unknown_kind_raises() -> None:
    with pytest.raises(ValueError, match="Unsupported insight kind"):
        insights([FlowBucket("1", 1.0, 0.0)], "forecast")
