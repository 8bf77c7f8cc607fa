import datetime
import logging

import pytest

from periods import (
    BucketUnit,
    DateRange,
    Period,
    bucket_label,
    default_sub_period,
    parse_sub_period,
    resolve_range,
    sub_period_options,
)

REF = datetime.date(2024, 3, 15)


def test_monthly_range_covers_whole_month_with_previous() -> None:
    out = resolve_range("monthly", "March", reference_year=2024, reference=REF)

    assert out.current == DateRange(datetime.date(2024, 3, 1), datetime.date(2024, 3, 31))
    assert out.previous == DateRange(datetime.date(2024, 2, 1), datetime.date(2024, 2, 29))
    assert out.bucket_unit == BucketUnit.DAY
    assert out.current_label == "March 2024"
    assert out.previous_label == "February 2024"


def test_january_previous_wraps_to_december_of_prior_year() -> None:
    out = resolve_range(Period.MONTHLY, "January", reference_year=2024, reference=REF)

    assert out.current == DateRange(datetime.date(2024, 1, 1), datetime.date(2024, 1, 31))
    assert out.previous == DateRange(datetime.date(2023, 12, 1), datetime.date(2023, 12, 31))
    assert out.previous_label == "December 2023"


def test_quarter_one_previous_is_q4_of_prior_year() -> None:
    out = resolve_range("quarterly", "Q1", reference_year=2024, reference=REF)

    assert out.current == DateRange(datetime.date(2024, 1, 1), datetime.date(2024, 3, 31))
    assert out.previous == DateRange(datetime.date(2023, 10, 1), datetime.date(2023, 12, 31))
    assert out.bucket_unit == BucketUnit.MONTH
    assert (out.current_label, out.previous_label) == ("Q1 2024", "Q4 2023")


def test_quarter_three_previous_is_q2_same_year() -> None:
    out = resolve_range("quarterly", "q3", reference_year=2024, reference=REF)

    assert out.sub_period == "Q3"
    assert out.current == DateRange(datetime.date(2024, 7, 1), datetime.date(2024, 9, 30))
    assert out.previous == DateRange(datetime.date(2024, 4, 1), datetime.date(2024, 6, 30))


def test_half_years_wrap_and_split_at_july() -> None:
    second = resolve_range("half-yearly", "H2", reference_year=2024, reference=REF)
    first = resolve_range(Period.HALF_YEARLY, "H1", reference_year=2024, reference=REF)

    assert second.current == DateRange(datetime.date(2024, 7, 1), datetime.date(2024, 12, 31))
    assert second.previous == DateRange(datetime.date(2024, 1, 1), datetime.date(2024, 6, 30))
    assert first.previous == DateRange(datetime.date(2023, 7, 1), datetime.date(2023, 12, 31))
    assert first.previous_label == "H2 2023"


def test_yearly_uses_sub_period_year_and_ignores_reference_year() -> None:
    out = resolve_range("yearly", "2023", reference_year=2020, reference=REF)

    assert out.current == DateRange(datetime.date(2023, 1, 1), datetime.date(2023, 12, 31))
    assert out.previous == DateRange(datetime.date(2022, 1, 1), datetime.date(2022, 12, 31))
    assert out.bucket_unit == BucketUnit.MONTH
    assert (out.current_label, out.previous_label) == ("2023", "2022")


def test_month_names_are_case_insensitive_and_accept_abbreviations() -> None:
    assert parse_sub_period("monthly", "MARCH") == 3
    assert parse_sub_period("monthly", "sep") == 9
    assert parse_sub_period("monthly", "ju") is None
    assert resolve_range("monthly", "feb", reference_year=2023, reference=REF).current.end == datetime.date(2023, 2, 28)


def test_missing_sub_period_uses_reference_defaults() -> None:
    assert resolve_range("monthly", reference=REF).sub_period == "March"
    assert resolve_range("quarterly", "", reference=REF).sub_period == "Q1"
    assert resolve_range("half_yearly", None, reference=datetime.date(2024, 7, 1)).sub_period == "H2"
    assert resolve_range("yearly", reference=REF).current_label == "2024"


def test_unrecognised_sub_period_falls_back_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="ledgerlens.periods")

    out = resolve_range("quarterly", "Q7", reference_year=2024, reference=REF)

    assert out.sub_period == "Q1"
    assert out.current.start == datetime.date(2024, 1, 1)
    assert "Q7" in caplog.text


def test_default_sub_period_boundaries() -> None:
    assert default_sub_period("half_yearly", datetime.date(2024, 6, 30)) == "H1"
    assert default_sub_period("quarterly", datetime.date(2024, 10, 1)) == "Q4"
    assert default_sub_period("monthly", datetime.datetime(2024, 12, 31, 23, 0)) == "December"


def test_sub_period_options_lists_recent_years_newest_first() -> None:
    assert sub_period_options("yearly", REF) == ["2024", "2023", "2022", "2021", "2020", "2019"]
    assert sub_period_options("half_yearly", REF) == ["H1", "H2"]
    assert len(sub_period_options("monthly", REF)) == 12


def test_date_range_rejects_inverted_bounds() -> None:
    with pytest.raises(ValueError):
        DateRange(datetime.date(2024, 3, 2), datetime.date(2024, 3, 1))


def test_unknown_period_raises() -> None:
    with pytest.raises(ValueError, match="Unsupported period"):
        resolve_range("weekly", reference=REF)


def test_bucket_label_uses_day_number_or_month_name() -> None:
    day = datetime.date(2024, 3, 7)

    assert bucket_label(day, BucketUnit.DAY) == "7"
    assert bucket_label(day, BucketUnit.MONTH) == "March"
