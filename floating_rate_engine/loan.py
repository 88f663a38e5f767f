from __future__ import annotations

import pandas as pd
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .daycount import to_date

RECAST_ON_RESET = "recast_on_reset"
FIXED_PAYMENT = "fixed_payment"
PAYMENT_RULES = (RECAST_ON_RESET, FIXED_PAYMENT)


@dataclass(frozen=True)
class LoanTerms:
    """
    Floating-rate loan terms, one index rate per payment date.

    Rates are decimals (0.0525 = 5.25%). cap_rate / floor_rate bound the
    all-in rate (index + spread); None leaves that side open.
    """
    principal: float
    spread: float
    index_rates: Tuple[float, ...]
    payment_dates: Tuple[pd.Timestamp, ...]
    accrual_start: pd.Timestamp
    day_count: str = "30/360"
    cap_rate: Optional[float] = None
    floor_rate: Optional[float] = None
    payment_rule: str = RECAST_ON_RESET
    reset_every_periods: int = 1
    interest_only_periods: int = 0
    fixed_payment: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, "index_rates", tuple(float(r) for r in self.index_rates))
        object.__setattr__(self, "payment_dates", tuple(to_date(d) for d in self.payment_dates))
        object.__setattr__(self, "accrual_start", to_date(self.accrual_start))

    @property
    def n_periods(self) -> int:
        return len(self.payment_dates)


@dataclass(frozen=True)
class AmortizationRow:
    period: int
    accrual_start: pd.Timestamp
    payment_date: pd.Timestamp
    day_count_fraction: float
    index_rate: float
    spread: float
    all_in_rate: float
    beginning_balance: float
    payment: float
    interest: float
    principal: float
    ending_balance: float
    cumulative_interest: float
    cumulative_principal: float
    negative_amortization: bool


@dataclass(frozen=True)
class CashflowVector:
    """Lender cashflows: net disbursement at accrual start, then each payment."""
    dates: Tuple[pd.Timestamp, ...] = field(default_factory=tuple)
    amounts: Tuple[float, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "dates", tuple(to_date(d) for d in self.dates))
        object.__setattr__(self, "amounts", tuple(float(a) for a in self.amounts))

    def __len__(self) -> int:
        return len(self.amounts)
