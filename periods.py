"""Calendar period selection: sub-period parsing and current/previous date ranges."""

from __future__ import annotations

import calendar
import datetime
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from logging_setup import get_logger

logger = get_logger("ledgerlens.periods")

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
YEAR_OPTION_COUNT = 6

_QUARTER_RE = re.compile(r"^q([1-4])$")
_HALF_RE = re.compile(r"^h([12])$")
_YEAR_RE = re.compile(r"^[1-9]\d{3}$")


class Period(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    HALF_YEARLY = "half_yearly"
    YEARLY = "yearly"

    @classmethod
    def parse(cls, value: Any) -> "Period":
        """Accept enum members, values or loose spellings like 'Half-Yearly'."""
        if isinstance(value, cls):
            return value
        key = re.sub(r"[\s\-]+", "_", str(value).strip().lower())
        if key in ("halfyearly", "half_year", "half"):
            key = "half_yearly"
        for member in cls:
            if member.value == key:
                return member
        raise ValueError(f"Unsupported period: {value}")


class BucketUnit(str, Enum):
    DAY = "day"
    MONTH = "month"


PERIOD_BUCKET_UNITS = {
    Period.MONTHLY: BucketUnit.DAY,
    Period.QUARTERLY: BucketUnit.MONTH,
    Period.HALF_YEARLY: BucketUnit.MONTH,
    Period.YEARLY: BucketUnit.MONTH,
}
PERIOD_SPAN_MONTHS = {
    Period.MONTHLY: 1,
    Period.QUARTERLY: 3,
    Period.HALF_YEARLY: 6,
    Period.YEARLY: 12,
}


@dataclass(frozen=True)
class DateRange:
    start: datetime.date
    end: datetime.date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"Range start {self.start} is after end {self.end}")

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    def contains(self, day: datetime.date) -> bool:
        return self.start <= day <= self.end

    def to_dict(self) -> dict[str, str]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


@dataclass(frozen=True)
class PeriodRange:
    period: Period
    sub_period: str
    current: DateRange
    previous: DateRange
    bucket_unit: BucketUnit
    current_label: str
    previous_label: str

    def to_dict(self) -> dict[str, object]:
        return {
            "period": self.period.value,
            "sub_period": self.sub_period,
            "current": self.current.to_dict(),
            "previous": self.previous.to_dict(),
            "bucket_unit": self.bucket_unit.value,
            "current_label": self.current_label,
            "previous_label": self.previous_label,
        }


def month_name(month: int) -> str:
    """Full English month name for a 1-based month number."""
    return MONTH_NAMES[month - 1]


def bucket_label(day: datetime.date, unit: BucketUnit) -> str:
    if unit == BucketUnit.DAY:
        return str(day.day)
    return month_name(day.month)


def reference_date(reference: datetime.date | datetime.datetime | None = None) -> datetime.date:
    """Resolve the 'now' used for defaults; read from the clock when omitted."""
    if reference is None:
        return datetime.date.today()
    if isinstance(reference, datetime.datetime):
        if reference.tzinfo is not None:
            return reference.astimezone().date()
        return reference.date()
    return reference


def default_sub_period(
    period: Period | str, reference: datetime.date | datetime.datetime | None = None
) -> str:
    """Sub-period containing the reference date."""
    period = Period.parse(period)
    ref = reference_date(reference)
    if period == Period.MONTHLY:
        return month_name(ref.month)
    if period == Period.QUARTERLY:
        return f"Q{(ref.month - 1) // 3 + 1}"
    if period == Period.HALF_YEARLY:
        return "H1" if ref.month <= 6 else "H2"
    return str(ref.year)


def sub_period_options(
    period: Period | str, reference: datetime.date | datetime.datetime | None = None
) -> list[str]:
    """Selectable sub-periods for a period, newest year first for YEARLY."""
    period = Period.parse(period)
    if period == Period.MONTHLY:
        return list(MONTH_NAMES)
    if period == Period.QUARTERLY:
        return ["Q1", "Q2", "Q3", "Q4"]
    if period == Period.HALF_YEARLY:
        return ["H1", "H2"]
    year = reference_date(reference).year
    return [str(year - offset) for offset in range(YEAR_OPTION_COUNT)]


def _parse_month(text: str) -> int | None:
    key = text.lower()
    if key.isdigit() and 1 <= int(key) <= 12:
        return int(key)
    for idx, name in enumerate(MONTH_NAMES, start=1):
        lowered = name.lower()
        if key == lowered or (len(key) >= 3 and lowered.startswith(key)):
            return idx
    return None


def parse_sub_period(period: Period | str, sub_period: Any) -> int | None:
    """Return the month, quarter, half or year number, or None when unrecognised."""
    period = Period.parse(period)
    text = str(sub_period).strip()
    if period == Period.MONTHLY:
        return _parse_month(text)
    if period == Period.QUARTERLY:
        match = _QUARTER_RE.match(text.lower())
        return int(match.group(1)) if match else None
    if period == Period.HALF_YEARLY:
        match = _HALF_RE.match(text.lower())
        return int(match.group(1)) if match else None
    return int(text) if _YEAR_RE.match(text) else None


def _month_span(year: int, start_month: int, months: int) -> DateRange:
    end_month = start_month + months - 1
    last_day = calendar.monthrange(year, end_month)[1]
    return DateRange(datetime.date(year, start_month, 1), datetime.date(year, end_month, last_day))


def _span_label(period: Period, year: int, index: int) -> str:
    if period == Period.MONTHLY:
        return f"{month_name(index)} {year}"
    if period == Period.QUARTERLY:
        return f"Q{index} {year}"
    if period == Period.HALF_YEARLY:
        return f"H{index} {year}"
    return str(year)


def _canonical_sub_period(period: Period, index: int) -> str:
    if period == Period.MONTHLY:
        return month_name(index)
    if period == Period.QUARTERLY:
        return f"Q{index}"
    if period == Period.HALF_YEARLY:
        return f"H{index}"
    return str(index)


def resolve_range(
    period: Period | str,
    sub_period: Any = None,
    reference_year: int | None = None,
    reference: datetime.date | datetime.datetime | None = None,
) -> PeriodRange:
    """Resolve a period selection into current and previous date ranges.

    Month, quarter and half-year selections apply to ``reference_year`` (the
    reference date's year when omitted). Previous ranges wrap into the prior
    year: January to December, Q1 to Q4, H1 to H2. An unrecognised
    ``sub_period`` falls back to the default for the reference date.
    """
    period = Period.parse(period)
    ref = reference_date(reference)
    year = int(reference_year) if reference_year is not None else ref.year

    index = None
    if sub_period is not None and str(sub_period).strip():
        index = parse_sub_period(period, sub_period)
        if index is None:
            logger.warning(
                "Unrecognised %s sub-period %r; falling back to %s",
                period.value,
                sub_period,
                default_sub_period(period, ref),
            )
    if index is None:
        index = parse_sub_period(period, default_sub_period(period, ref))

    months = PERIOD_SPAN_MONTHS[period]
    if period == Period.YEARLY:
        year = index
        current = _month_span(year, 1, 12)
        previous = _month_span(year - 1, 1, 12)
        prev_year, prev_index = year - 1, year - 1
    else:
        count = 12 // months
        current = _month_span(year, (index - 1) * months + 1, months)
        if index == 1:
            prev_year, prev_index = year - 1, count
        else:
            prev_year, prev_index = year, index - 1
        previous = _month_span(prev_year, (prev_index - 1) * months + 1, months)

    return PeriodRange(
        period=period,
        sub_period=_canonical_sub_period(period, index),
        current=current,
        previous=previous,
        bucket_unit=PERIOD_BUCKET_UNITS[period],
        current_label=_span_label(period, year, index),
        previous_label=_span_label(period, prev_year, prev_index),
    )
