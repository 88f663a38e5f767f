import pandas as pd
import pytest

from floating_rate_engine.daycount import (
    SUPPORTED_DAY_COUNTS,
    add_days,
    add_months,
    check_convention,
    days_between,
    year_fraction,
)
from floating_rate_engine.errors import OrderingError, UnsupportedConventionError


@pytest.mark.parametrize("dc", SUPPORTED_DAY_COUNTS)
def test_year_fraction_zero_on_same_date(dc):
    d = pd.Timestamp("2026-02-13")
    assert year_fraction(d, d, dc) == 0.0


@pytest.mark.parametrize("dc", SUPPORTED_DAY_COUNTS)
def test_year_fraction_positive_and_ordered(dc):
    d1, d2 = pd.Timestamp("2026-02-13"), pd.Timestamp("2026-02-14")
    assert year_fraction(d1, d2, dc) > 0.0
    with pytest.raises(OrderingError):
        year_fraction(d2, d1, dc)


def test_30_360_one_month():
    assert abs(year_fraction("2024-01-15", "2024-02-15", "30/360") - 30 / 360) < 1e-15


def test_30_360_caps_day_31_at_30():
    # Jan 31 -> Mar 31: both days capped at 30, two months apart
    assert abs(year_fraction("2024-01-31", "2024-03-31", "30/360") - 60 / 360) < 1e-15
    # Feb 29 -> Mar 31: no end-of-month adjustment beyond the cap
    assert abs(year_fraction("2024-02-29", "2024-03-31", "30/360") - 31 / 360) < 1e-15


def test_actual_conventions():
    # 2024 is a leap year
    assert abs(year_fraction("2024-01-01", "2025-01-01", "ACT/365") - 366 / 365) < 1e-15
    assert abs(year_fraction("2026-01-01", "2026-07-01", "ACT/360") - 181 / 360) < 1e-15


def test_convention_names_are_case_and_space_insensitive():
    assert year_fraction("2026-01-01", "2026-07-01", "act / 360") == year_fraction(
        "2026-01-01", "2026-07-01", "ACT/360"
    )
    assert check_convention(" act/365 ") == "ACT/365"


def test_unsupported_convention_raises():
    with pytest.raises(UnsupportedConventionError):
        year_fraction("2026-01-01", "2026-07-01", "ACT/ACT")
    with pytest.raises(ValueError):
        check_convention("30E/360")


def test_calendar_arithmetic():
    assert add_months("2026-02-01", 1) == pd.Timestamp("2026-03-01")
    assert add_months("2026-01-31", 1) == pd.Timestamp("2026-02-28"), "month end clamps"
    assert add_days("2026-02-27", 2) == pd.Timestamp("2026-03-01")
    assert days_between("2026-03-01", "2026-02-15") == -14
    # time of day is ignored
    assert days_between("2026-03-01 23:00", "2026-03-02 01:00") == 1
