import warnings

import pandas as pd
import pytest

from floating_rate_engine.errors import (
    EmptyScheduleError,
    InvalidFrequencyError,
    NonMonotonicScheduleError,
    ScheduleAdjustedWarning,
)
from floating_rate_engine.schedule import (
    build_payment_dates,
    sanitize_schedule,
    shift_past_accrual_start,
)


def test_monthly_five_year_calendar():
    dates = build_payment_dates(pd.Timestamp("2026-02-01"), 60, 12)
    assert len(dates) == 60
    assert dates[0] == pd.Timestamp("2026-03-01")
    assert dates[-1] == pd.Timestamp("2031-02-01")
    assert all(b > a for a, b in zip(dates, dates[1:]))


def test_partial_final_step_adds_a_period():
    dates = build_payment_dates("2026-01-15", 10, 4)
    assert [d.strftime("%Y-%m-%d") for d in dates] == [
        "2026-04-15",
        "2026-07-15",
        "2026-10-15",
        "2027-01-15",
    ]


def test_month_end_start_does_not_drift():
    dates = build_payment_dates("2026-01-31", 4, 12)
    assert [d.day for d in dates] == [28, 31, 30, 31]


@pytest.mark.parametrize("ppy", [0, -1, 5, 7, 24])
def test_invalid_frequency(ppy):
    with pytest.raises(InvalidFrequencyError):
        build_payment_dates("2026-02-01", 60, ppy)


def test_non_positive_term_gives_empty_calendar():
    assert build_payment_dates("2026-02-01", 0, 12) == []
    with pytest.raises(EmptyScheduleError):
        sanitize_schedule("2026-02-01", [])


def test_non_monotonic_dates_rejected():
    with pytest.raises(NonMonotonicScheduleError):
        sanitize_schedule("2026-01-01", ["2026-02-01", "2026-04-01", "2026-03-01"])
    with pytest.raises(NonMonotonicScheduleError):
        sanitize_schedule("2026-01-01", ["2026-02-01", "2026-02-01"])


def test_valid_schedule_passes_through_without_warning():
    dates = ["2026-03-01", "2026-04-01"]
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        out = sanitize_schedule("2026-02-01", dates)
    assert out == [pd.Timestamp(d) for d in dates]


def test_schedule_shifted_past_accrual_start():
    with pytest.warns(ScheduleAdjustedWarning):
        out = sanitize_schedule("2026-03-01", ["2026-02-15", "2026-03-15"])

    # shift = 14 days between first date and accrual start, plus one
    assert out == [pd.Timestamp("2026-03-02"), pd.Timestamp("2026-03-30")]
    assert out[0] > pd.Timestamp("2026-03-01")


def test_first_date_equal_to_accrual_start_is_shifted_one_day():
    with pytest.warns(ScheduleAdjustedWarning):
        out = sanitize_schedule("2026-03-01", ["2026-03-01", "2026-04-01"])
    assert out[0] == pd.Timestamp("2026-03-02")


def test_shift_returns_notice_without_warning():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        out, notice = shift_past_accrual_start("2026-03-01", ["2026-02-15", "2026-03-15"])
    assert out[0] == pd.Timestamp("2026-03-02")
    assert notice is not None and "Adjusted payment dates" in notice


def test_shift_leaves_valid_dates_alone():
    out, notice = shift_past_accrual_start("2026-02-01", ["2026-03-01", "2026-04-01"])
    assert notice is None
    assert out == [pd.Timestamp("2026-03-01"), pd.Timestamp("2026-04-01")]
