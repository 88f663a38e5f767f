from __future__ import annotations

import pandas as pd
from dataclasses import asdict
from typing import Sequence

from .loan import AmortizationRow

SCHEDULE_COLUMNS = [
    ("period", "Period"),
    ("accrual_start", "Accrual Start"),
    ("payment_date", "Payment Date"),
    ("day_count_fraction", "Day Count"),
    ("index_rate", "Index Rate"),
    ("spread", "Spread"),
    ("all_in_rate", "All-in Rate"),
    ("beginning_balance", "Begin Balance"),
    ("payment", "Payment"),
    ("interest", "Interest"),
    ("principal", "Principal"),
    ("ending_balance", "End Balance"),
    ("cumulative_interest", "Cum Interest"),
    ("cumulative_principal", "Cum Principal"),
    ("negative_amortization", "Neg Am"),
]

DATE_COLUMNS = ["accrual_start", "payment_date"]
RATE_COLUMNS = ["index_rate", "all_in_rate"]
MONEY_COLUMNS = [
    "beginning_balance",
    "payment",
    "interest",
    "principal",
    "ending_balance",
    "cumulative_interest",
    "cumulative_principal",
]


def schedule_to_frame(rows: Sequence[AmortizationRow]) -> pd.DataFrame:
    """One row per period, raw numeric values, columns in display order."""
    cols = [c for c, _ in SCHEDULE_COLUMNS]
    return pd.DataFrame([asdict(r) for r in rows], columns=cols)


def format_schedule(frame: pd.DataFrame) -> pd.DataFrame:
    """Display strings: ISO dates, rates as percentages, money with 2 decimals."""
    out = frame.copy()
    for c in DATE_COLUMNS:
        out[c] = pd.to_datetime(out[c]).dt.strftime("%Y-%m-%d")
    for c in RATE_COLUMNS:
        out[c] = out[c].map(lambda x: f"{x * 100:.2f}%")
    for c in MONEY_COLUMNS:
        out[c] = out[c].map(lambda x: f"{x:,.2f}")
    return out


def schedule_to_csv(rows: Sequence[AmortizationRow], formatted: bool = True) -> str:
    """CSV text with the display labels as header."""
    frame = schedule_to_frame(rows)
    if formatted:
        frame = format_schedule(frame)
    return frame.rename(columns=dict(SCHEDULE_COLUMNS)).to_csv(index=False, lineterminator="\n")
