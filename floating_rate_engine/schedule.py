from __future__ import annotations

import logging
import math
import warnings
from typing import Iterable, List, Optional, Tuple

import pandas as pd

from .daycount import add_days, add_months, days_between, to_date
from .errors import (
    EmptyScheduleError,
    InvalidFrequencyError,
    NonMonotonicScheduleError,
    ScheduleAdjustedWarning,
)

logger = logging.getLogger(__name__)

VALID_PAYMENTS_PER_YEAR = (12, 6, 4, 3, 2, 1)


def build_payment_dates(start, term_months: int, payments_per_year: int) -> List[pd.Timestamp]:
    """
    Payment dates every 12 / payments_per_year months after start.

    The number of periods is ceil(term_months / step), so a term that is not a
    whole number of steps gets one extra (full-length) period. Each date is
    offset from start directly, so month-end clamping never accumulates.
    """
    payments_per_year = int(payments_per_year)
    if payments_per_year <= 0:
        raise InvalidFrequencyError("payments_per_year must be > 0")
    if 12 % payments_per_year != 0:
        raise InvalidFrequencyError("payments_per_year must divide 12 (12, 6, 4, 3, 2, 1).")

    step = 12 // payments_per_year
    n_periods = max(0, math.ceil(int(term_months) / step))

    start = to_date(start)
    return [add_months(start, step * k) for k in range(1, n_periods + 1)]


def check_strictly_increasing(dates: List[pd.Timestamp]) -> None:
    if len(dates) == 0:
        raise EmptyScheduleError("payment_dates cannot be empty")

    for i in range(1, len(dates)):
        if dates[i] <= dates[i - 1]:
            raise NonMonotonicScheduleError(
                f"payment_dates not strictly increasing at i={i}: "
                f"{dates[i - 1].date()} -> {dates[i].date()}"
            )


def shift_past_accrual_start(accrual_start, dates: Iterable) -> Tuple[List[pd.Timestamp], Optional[str]]:
    """
    Validate a payment schedule and make sure it starts after accrual start.

    If the first payment is on or before accrual_start, every date is moved
    forward by the same number of days so the first payment lands the day
    after accrual_start. Returns the dates and a notice describing the shift
    (None when nothing moved). Touches no global state.
    """
    accrual_start = to_date(accrual_start)
    dates = [to_date(d) for d in dates]
    check_strictly_increasing(dates)

    if dates[0] > accrual_start:
        return dates, None

    bump = days_between(dates[0], accrual_start) + 1
    adjusted = [add_days(d, bump) for d in dates]

    msg = (
        f"Adjusted payment dates by {bump} day(s) so first payment ({adjusted[0].date()}) "
        f"is after accrual start ({accrual_start.date()})."
    )
    logger.info(msg)
    return adjusted, msg


def sanitize_schedule(accrual_start, dates: Iterable) -> List[pd.Timestamp]:
    """
    Same as shift_past_accrual_start, but reports a shift with a
    ScheduleAdjustedWarning instead of returning it.
    """
    adjusted, notice = shift_past_accrual_start(accrual_start, dates)
    if notice is not None:
        warnings.warn(notice, ScheduleAdjustedWarning, stacklevel=2)
    return adjusted
