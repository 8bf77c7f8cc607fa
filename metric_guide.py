"""Human-readable metric definitions for the app."""

METRIC_GUIDE = [
    {
        "Metric": "Category share",
        "Meaning": "Share of the category's amount in the selected period's breakdown. Bills are shown separately.",
        "Formula": "value / sum(values) * 100 (0 when the total is 0)",
    },
    {
        "Metric": "Income / Expense",
        "Meaning": "Money in and out per day (monthly view) or per month (quarter, half-year, year).",
        "Formula": "sum(amount) per bucket and type",
    },
    {
        "Metric": "Net",
        "Meaning": "What a bucket added to or took from your balance.",
        "Formula": "Income - Expense",
    },
    {
        "Metric": "Savings",
        "Meaning": "Net per bucket, plotted as the savings trend.",
        "Formula": "Income - Expense",
    },
    {
        "Metric": "Savings rate",
        "Meaning": "Share of income kept after expenses. 20% or more is healthy, below 10% needs attention.",
        "Formula": "(Income - Expense) / Income * 100 (0 without income)",
    },
    {
        "Metric": "Average savings",
        "Meaning": "Average savings over buckets that had any income or expense.",
        "Formula": "sum(savings) / active buckets",
    },
    {
        "Metric": "Change vs previous",
        "Meaning": "Expense change against the previous month, quarter, half-year or year. Display caps at 100%+.",
        "Formula": "(current - previous) / previous * 100 (0 when previous is 0)",
    },
    {
        "Metric": "Trend",
        "Meaning": "Stable when the change is within the configured band (default 5%), otherwise up or down.",
        "Formula": "|change| < stable band",
    },
    {
        "Metric": "Activity heatmap",
        "Meaning": "Expense transactions per day of the year. Darker bands mean more transactions.",
        "Formula": "count / max(count) in bands of 20%",
    },
    {
        "Metric": "Recurring",
        "Meaning": "Transactions created from a recurring template.",
        "Formula": "count(is_recurring)",
    },
]
