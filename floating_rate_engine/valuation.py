from __future__ import annotations

import logging
import numpy as np
from typing import Optional, Sequence

from scipy.optimize import brentq

from .daycount import to_date, year_fraction
from .errors import ValidationError

logger = logging.getLogger(__name__)

IRR_LOWER = -0.99
IRR_UPPER = 5.0
IRR_MAX_ITER = 120
IRR_TOL = 1e-10


def _year_fractions(dates: Sequence, accrual_start, convention: str) -> np.ndarray:
    start = to_date(accrual_start)
    return np.array([year_fraction(start, d, convention) for d in dates], dtype=float)


def _check_lengths(dates: Sequence, cashflows: Sequence) -> None:
    if len(dates) != len(cashflows):
        raise ValidationError(
            f"dates and cashflows must have the same length ({len(dates)} != {len(cashflows)})"
        )


def present_value(
    dates: Sequence,
    cashflows: Sequence[float],
    annual_yield: float,
    convention: str,
    accrual_start,
) -> float:
    """
    Sum of cashflows discounted at (1 + annual_yield) ** -t, where t is the
    year fraction from accrual_start to each date under `convention`.
    """
    _check_lengths(dates, cashflows)
    if len(cashflows) == 0:
        return 0.0

    taus = _year_fractions(dates, accrual_start, convention)
    cfs = np.asarray(cashflows, dtype=float)
    return float(np.sum(cfs * (1.0 + annual_yield) ** (-taus)))


def internal_rate_of_return(
    dates: Sequence,
    accrual_start,
    cashflows: Sequence[float],
    convention: str,
) -> Optional[float]:
    """
    Annual yield at which the discounted cashflows sum to zero, or None.

    None is returned when there is no sign change in the cashflows or when
    NPV has the same sign at both ends of [-0.99, 5.0]. Bisection runs for at
    most 120 iterations; if |NPV| never drops below 1e-10 the midpoint of the
    last bracket is returned.
    """
    _check_lengths(dates, cashflows)
    cfs = np.asarray(cashflows, dtype=float)
    if not (np.any(cfs < 0) and np.any(cfs > 0)):
        return None

    # year fractions do not depend on the rate
    taus = _year_fractions(dates, accrual_start, convention)

    def f(rate: float) -> float:
        return float(np.sum(cfs * (1.0 + rate) ** (-taus)))

    lo, hi = IRR_LOWER, IRR_UPPER
    flo, fhi = f(lo), f(hi)

    if abs(flo) < IRR_TOL:
        return lo
    if abs(fhi) < IRR_TOL:
        return hi
    if flo * fhi > 0:
        logger.debug("IRR not bracketed in [%s, %s]", lo, hi)
        return None

    for _ in range(IRR_MAX_ITER):
        mid = (lo + hi) / 2.0
        fmid = f(mid)
        if abs(fmid) < IRR_TOL:
            return mid
        if flo * fmid <= 0:
            hi, fhi = mid, fmid
        else:
            lo, flo = mid, fmid

    logger.debug("IRR bisection hit %d iterations; returning bracket midpoint", IRR_MAX_ITER)
    return (lo + hi) / 2.0


def yield_from_price(
    dates: Sequence,
    cashflows: Sequence[float],
    target_pv: float,
    convention: str,
    accrual_start,
) -> Optional[float]:
    """
    Discount yield at which present_value(...) equals target_pv.

    Solved with brentq over the same bracket as the IRR search; None if the
    bracket does not contain a solution.
    """
    _check_lengths(dates, cashflows)
    taus = _year_fractions(dates, accrual_start, convention)
    cfs = np.asarray(cashflows, dtype=float)

    def residual(rate: float) -> float:
        return float(np.sum(cfs * (1.0 + rate) ** (-taus))) - target_pv

    fa, fb = residual(IRR_LOWER), residual(IRR_UPPER)
    if fa == 0.0:
        return IRR_LOWER
    if fb == 0.0:
        return IRR_UPPER
    if fa * fb > 0:
        return None

    return float(brentq(residual, IRR_LOWER, IRR_UPPER, maxiter=300, xtol=1e-14))
