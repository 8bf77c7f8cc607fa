"""Print a JSON analytics snapshot for one or more transaction exports."""

from __future__ import annotations

import argparse
import datetime
import sys
from pathlib import Path

from logging_setup import configure_logging, get_logger
from parsing import merge_transactions
from periods import Period
from reports import build_analytics
from settings import load_settings

logger = get_logger("ledgerlens.cli")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build period analytics from transaction exports.")
    parser.add_argument("files", nargs="+", help="CSV or JSON transaction exports.")
    parser.add_argument(
        "--period",
        default=Period.MONTHLY.value,
        choices=[p.value for p in Period],
        help="Calendar period to aggregate by.",
    )
    parser.add_argument(
        "--sub-period",
        default=None,
        help="Month name, Q1-Q4, H1/H2 or a year. Defaults to the one containing today.",
    )
    parser.add_argument("--year", type=int, default=None, help="Year for month, quarter and half-year selections.")
    parser.add_argument(
        "--reference-date",
        type=datetime.date.fromisoformat,
        default=None,
        help="ISO date used as 'today' for defaults.",
    )
    parser.add_argument("--currency", default=None, help="Only print this currency's report.")
    parser.add_argument("--settings", default=None, help="Path to analytics settings JSON.")
    parser.add_argument("--log-level", default=None, help="Logging level (default: LEDGERLENS_LOG_LEVEL or INFO).")
    parser.add_argument("--output", default=None, help="Write JSON here instead of stdout.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(args.log_level)
    settings = load_settings(args.settings)

    transactions = merge_transactions(
        [Path(path) for path in args.files], default_currency=settings.default_currency
    )
    logger.info("Loaded %d transaction(s) from %d file(s)", len(transactions), len(args.files))

    if args.currency:
        code = str(args.currency).strip().upper()
        transactions = [tx for tx in transactions if tx.currency == code]

    snapshot = build_analytics(
        transactions,
        args.period,
        args.sub_period,
        reference_year=args.year,
        reference=args.reference_date,
        settings=settings,
    )
    if not snapshot.reports:
        logger.warning("No transactions to report for %s", snapshot.period_range.current_label)

    payload = snapshot.to_json()
    if args.output:
        target = Path(args.output).expanduser()
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(payload + "\n", encoding="utf-8")
        print(f"Saved analytics to {target}")
    else:
        sys.stdout.write(payload + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
