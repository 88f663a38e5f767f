from __future__ import annotations

import logging
import numpy as np
from typing import List, Optional, Sequence

from .daycount import check_convention, year_fraction
from .errors import ValidationError
from .loan import (
    AmortizationRow,
    CashflowVector,
    FIXED_PAYMENT,
    LoanTerms,
    PAYMENT_RULES,
    RECAST_ON_RESET,
)
from .schedule import check_strictly_increasing

logger = logging.getLogger(__name__)

ZERO_RATE_TOL = 1e-12


def annuity_payment(period_rate: float, periods: int, balance: float) -> float:
    """Level payment that amortizes balance over periods at a flat per-period rate."""
    if periods <= 0:
        return 0.0
    if abs(period_rate) < ZERO_RATE_TOL:
        return balance / periods
    return balance * period_rate / (1.0 - (1.0 + period_rate) ** (-periods))


def effective_rates(
    index_rates: Sequence[float],
    spread: float,
    floor_rate: Optional[float] = None,
    cap_rate: Optional[float] = None,
) -> np.ndarray:
    """All-in annual rates: index + spread, floored then capped."""
    rates = np.asarray(index_rates, dtype=float) + float(spread)
    if floor_rate is not None:
        rates = np.maximum(rates, float(floor_rate))
    if cap_rate is not None:
        rates = np.minimum(rates, float(cap_rate))
    return rates


def validate_terms(terms: LoanTerms) -> None:
    if not (np.isfinite(terms.principal) and terms.principal > 0):
        raise ValidationError("principal must be a finite number > 0")

    if not np.isfinite(terms.spread):
        raise ValidationError(f"spread must be finite, got {terms.spread}")

    for name in ("cap_rate", "floor_rate", "fixed_payment"):
        value = getattr(terms, name)
        if value is not None and not np.isfinite(value):
            raise ValidationError(f"{name} must be finite, got {value}")

    check_strictly_increasing(list(terms.payment_dates))

    if len(terms.index_rates) != terms.n_periods:
        raise ValidationError(
            f"index_rates must have same length as payment_dates "
            f"({len(terms.index_rates)} != {terms.n_periods})"
        )

    if not np.all(np.isfinite(np.asarray(terms.index_rates, dtype=float))):
        raise ValidationError("index_rates must all be finite")

    if terms.payment_rule not in PAYMENT_RULES:
        raise ValidationError(f"Unknown payment rule: {terms.payment_rule}")

    if terms.payment_rule == FIXED_PAYMENT and not (terms.fixed_payment is not None and terms.fixed_payment > 0):
        raise ValidationError("For fixed_payment, provide fixed_payment > 0.")

    if int(terms.reset_every_periods) < 1:
        raise ValidationError("reset_every_periods must be >= 1")

    if not (0 <= int(terms.interest_only_periods) <= terms.n_periods):
        raise ValidationError(
            f"interest_only_periods must be between 0 and {terms.n_periods}"
        )

    check_convention(terms.day_count)


def build_schedule(terms: LoanTerms) -> List[AmortizationRow]:
    """
    Period-by-period amortization of a floating-rate loan.

    Interest accrues on the beginning balance at the all-in rate times the
    period's day count fraction. During the interest-only window the payment
    equals interest. Afterwards:

    - recast_on_reset: the level payment is recomputed over the remaining
      periods at the current per-period rate on the first period after the
      window and every reset_every_periods periods after that.
    - fixed_payment: the supplied amount is paid every period.

    The final period always pays off the remaining balance, so the schedule
    ends at exactly zero. Raises before producing any row if the terms are
    invalid.
    """
    validate_terms(terms)

    n = terms.n_periods
    io = int(terms.interest_only_periods)
    reset_k = int(terms.reset_every_periods)
    pay_dates = list(terms.payment_dates)

    accrual_starts = [terms.accrual_start] + pay_dates[:-1]
    dcf = np.array(
        [year_fraction(s, e, terms.day_count) for s, e in zip(accrual_starts, pay_dates)],
        dtype=float,
    )
    eff_annual = effective_rates(terms.index_rates, terms.spread, terms.floor_rate, terms.cap_rate)

    current_payment: Optional[float] = None
    if terms.payment_rule == FIXED_PAYMENT:
        current_payment = float(terms.fixed_payment)

    rows: List[AmortizationRow] = []
    balance = float(terms.principal)
    cum_interest = 0.0
    cum_principal = 0.0

    for i in range(n):
        period = i + 1
        start_balance = balance
        rate_annual = float(eff_annual[i])
        interest = start_balance * rate_annual * float(dcf[i])

        if period <= io:
            payment = interest
        elif terms.payment_rule == RECAST_ON_RESET:
            if (period - io - 1) % reset_k == 0 or current_payment is None:
                current_payment = annuity_payment(rate_annual * float(dcf[i]), n - i, start_balance)
                logger.debug("recast at period %d: payment=%.6f", period, current_payment)
            payment = current_payment
        else:
            payment = current_payment

        principal_paid = payment - interest

        # final period pays off whatever is left
        if period == n:
            principal_paid = start_balance
            payment = interest + principal_paid

        balance = start_balance - principal_paid
        cum_interest += interest
        cum_principal += principal_paid

        rows.append(
            AmortizationRow(
                period=period,
                accrual_start=accrual_starts[i],
                payment_date=pay_dates[i],
                day_count_fraction=float(dcf[i]),
                index_rate=float(terms.index_rates[i]),
                spread=float(terms.spread),
                all_in_rate=rate_annual,
                beginning_balance=start_balance,
                payment=float(payment),
                interest=float(interest),
                principal=float(principal_paid),
                ending_balance=float(balance),
                cumulative_interest=cum_interest,
                cumulative_principal=cum_principal,
                negative_amortization=bool(principal_paid < 0),
            )
        )

    logger.debug("built %d-period schedule (%s, %s)", n, terms.payment_rule, terms.day_count)
    return rows


def schedule_cashflows(
    rows: Sequence[AmortizationRow],
    accrual_start,
    principal: float,
    upfront_fee: float = 0.0,
) -> CashflowVector:
    """Net disbursement (-principal + fee) at accrual start, then each payment."""
    return CashflowVector(
        dates=[accrual_start] + [r.payment_date for r in rows],
        amounts=[-float(principal) + float(upfront_fee)] + [r.payment for r in rows],
    )
