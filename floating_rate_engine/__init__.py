"""
Floating-Rate Loan Pricing Engine

Modules:
- daycount: calendar arithmetic + day count fractions
- schedule: payment date generation + sanitization
- index_rates: index path normalization
- loan: loan terms / schedule row / cashflow value types
- amortization: floating-rate amortization schedule
- valuation: present value, IRR, yield from price
- pricing: request parsing + end-to-end pricing
- reporting: schedule tables and CSV export
- config: settings + logging setup
"""
from .amortization import build_schedule
from .errors import (
    EmptyScheduleError,
    InvalidFrequencyError,
    NonMonotonicScheduleError,
    OrderingError,
    PricingError,
    ScheduleAdjustedWarning,
    UnsupportedConventionError,
    ValidationError,
)
from .loan import AmortizationRow, CashflowVector, LoanTerms
from .pricing import price_loan, run_pricing
from .valuation import internal_rate_of_return, present_value

__version__ = "0.1.0"
