from __future__ import annotations


class PricingError(ValueError):
    """Base class for every failure raised while building or valuing a schedule."""


class OrderingError(PricingError):
    """Dates supplied out of sequence (end before start)."""


class UnsupportedConventionError(PricingError):
    """Unknown day count convention."""


class InvalidFrequencyError(PricingError):
    """Payments per year is not a positive divisor of 12."""


class EmptyScheduleError(PricingError):
    pass


class NonMonotonicScheduleError(PricingError):
    pass


class ValidationError(PricingError):
    """Loan terms that cannot produce a schedule (principal, lengths, fixed payment...)."""


class ScheduleAdjustedWarning(UserWarning):
    """Payment dates were shifted so the first payment falls after accrual start."""
