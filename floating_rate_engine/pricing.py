"""
Pricing requests: raw parameters in, schedule and valuation metrics out.

Raw values (text from a query string or form, or plain numbers) are parsed
into a PricingRequest first; only validated, typed values reach the engine.
Both boundaries return tagged results instead of raising on bad input.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, List, Literal, Mapping, Optional, Tuple, Union

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator

from .amortization import build_schedule, schedule_cashflows
from .config import get_settings
from .daycount import check_convention, to_date
from .errors import PricingError
from .index_rates import normalize_rate_series
from .loan import AmortizationRow, FIXED_PAYMENT, LoanTerms, RECAST_ON_RESET
from .schedule import build_payment_dates, shift_past_accrual_start
from .valuation import internal_rate_of_return, present_value, yield_from_price

logger = logging.getLogger(__name__)


class PricingRequest(BaseModel):
    """User-facing loan and pricing inputs. Percentages and bps as entered."""

    model_config = ConfigDict(allow_inf_nan=False)

    principal: float = Field(..., gt=0, description="Loan amount.")
    spread_bps: float = Field(250.0, description="Spread over the index in basis points.")
    default_index_pct: float = Field(
        default_factory=lambda: get_settings().default_index_rate * 100.0,
        description="Index rate (%) used when no index path is supplied.",
    )
    accrual_start: date
    payments_per_year: int = Field(default_factory=lambda: get_settings().default_payments_per_year)
    term_months: int = Field(default_factory=lambda: get_settings().default_term_months, ge=1)
    payment_rule: Literal["recast_on_reset", "fixed_payment"] = RECAST_ON_RESET
    reset_every_periods: int = Field(1, ge=1)
    interest_only_periods: int = Field(0, ge=0)
    day_count: str = Field(default_factory=lambda: get_settings().default_day_count)
    cap_pct: Optional[float] = None
    floor_pct: Optional[float] = None
    fixed_payment: Optional[float] = None
    payment_dates: Optional[List[date]] = Field(
        None, description="Explicit payment calendar; overrides term_months / payments_per_year."
    )
    index_rates: Union[str, List[Any], None] = Field(
        None, description="Index path as annualized decimals, text or list."
    )
    discount_yield_pct: float = Field(
        default_factory=lambda: get_settings().default_discount_yield * 100.0,
        description="Discount yield / required return (%).",
    )
    upfront_fee_pct: float = Field(0.0, description="Upfront fee as % of principal.")

    @field_validator("cap_pct", "floor_pct", "fixed_payment", mode="before")
    @classmethod
    def blank_is_unset(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("day_count")
    @classmethod
    def known_day_count(cls, v: str) -> str:
        return check_convention(v)


@dataclass(frozen=True)
class ParseResult:
    ok: bool
    request: Optional[PricingRequest] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class PricingResult:
    terms: LoanTerms
    schedule: Tuple[AmortizationRow, ...]
    npv: float
    price: float
    pv_inflows: float
    irr: Optional[float]
    upfront_fee: float
    discount_yield: float
    notices: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def accrual_start(self) -> pd.Timestamp:
        return self.terms.accrual_start


@dataclass(frozen=True)
class PricingOutcome:
    ok: bool
    result: Optional[PricingResult] = None
    error: Optional[str] = None
    notices: Tuple[str, ...] = field(default_factory=tuple)


def _format_pydantic_errors(exc: PydanticValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err["loc"])
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


def parse_pricing_request(params: Mapping[str, Any]) -> ParseResult:
    """Validate raw parameters into a PricingRequest without raising."""
    try:
        return ParseResult(ok=True, request=PricingRequest.model_validate(dict(params)))
    except PydanticValidationError as exc:
        return ParseResult(ok=False, error=_format_pydantic_errors(exc))


def build_loan_terms(request: PricingRequest) -> Tuple[LoanTerms, List[str]]:
    """
    Generate the payment calendar and index path for a request.

    Returns the terms plus any non-fatal notices (e.g. the schedule had to
    be shifted past the accrual start date).
    """
    accrual_start = to_date(request.accrual_start)
    if request.payment_dates is not None:
        dates = [to_date(d) for d in request.payment_dates]
    else:
        dates = build_payment_dates(accrual_start, request.term_months, request.payments_per_year)

    dates, notice = shift_past_accrual_start(accrual_start, dates)
    notices = [] if notice is None else [notice]

    index_rates = normalize_rate_series(
        request.index_rates, len(dates), request.default_index_pct / 100.0
    )

    terms = LoanTerms(
        principal=request.principal,
        spread=request.spread_bps / 10000.0,
        index_rates=index_rates,
        payment_dates=dates,
        accrual_start=accrual_start,
        day_count=request.day_count,
        cap_rate=None if request.cap_pct is None else request.cap_pct / 100.0,
        floor_rate=None if request.floor_pct is None else request.floor_pct / 100.0,
        payment_rule=request.payment_rule,
        reset_every_periods=request.reset_every_periods,
        interest_only_periods=request.interest_only_periods,
        fixed_payment=request.fixed_payment if request.payment_rule == FIXED_PAYMENT else None,
    )
    return terms, notices


def price_loan(
    terms: LoanTerms,
    discount_yield: float,
    upfront_fee: float = 0.0,
    notices=(),
) -> PricingResult:
    """
    Build the schedule and value the lender's cashflows.

    npv   = -principal + upfront_fee + PV(payments)
    price = (upfront_fee + PV(payments)) / principal
    irr   = yield at which the full cashflow vector has zero NPV (None if undefined)
    """
    schedule = build_schedule(terms)

    pay_dates = [r.payment_date for r in schedule]
    payments = [r.payment for r in schedule]
    pv_inflows = present_value(pay_dates, payments, discount_yield, terms.day_count, terms.accrual_start)

    cfv = schedule_cashflows(schedule, terms.accrual_start, terms.principal, upfront_fee)
    irr = internal_rate_of_return(cfv.dates, terms.accrual_start, cfv.amounts, terms.day_count)

    return PricingResult(
        terms=terms,
        schedule=tuple(schedule),
        npv=-terms.principal + upfront_fee + pv_inflows,
        price=(upfront_fee + pv_inflows) / terms.principal,
        pv_inflows=pv_inflows,
        irr=irr,
        upfront_fee=upfront_fee,
        discount_yield=discount_yield,
        notices=tuple(notices),
    )


def implied_yield(result: PricingResult, price: float) -> Optional[float]:
    """Discount yield at which the priced schedule is worth `price` (fraction of par)."""
    terms = result.terms
    target_pv = price * terms.principal - result.upfront_fee
    return yield_from_price(
        [r.payment_date for r in result.schedule],
        [r.payment for r in result.schedule],
        target_pv,
        terms.day_count,
        terms.accrual_start,
    )


def run_pricing(params: Mapping[str, Any]) -> PricingOutcome:
    """
    End-to-end pricing of raw request parameters.

    Parse and engine failures come back as ok=False with a message; no
    partial result is returned alongside an error.
    """
    parsed = parse_pricing_request(params)
    if not parsed.ok:
        logger.warning("rejected pricing request: %s", parsed.error)
        return PricingOutcome(ok=False, error=parsed.error)

    request = parsed.request
    try:
        terms, notices = build_loan_terms(request)
        result = price_loan(
            terms,
            discount_yield=request.discount_yield_pct / 100.0,
            upfront_fee=request.upfront_fee_pct / 100.0 * request.principal,
            notices=notices,
        )
    except PricingError as exc:
        logger.warning("pricing failed: %s", exc)
        return PricingOutcome(ok=False, error=str(exc))

    return PricingOutcome(ok=True, result=result, notices=result.notices)
