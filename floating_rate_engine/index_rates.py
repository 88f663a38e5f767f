from __future__ import annotations

import numbers
import re
from typing import Iterable, List, Union

import numpy as np
import pandas as pd

_SEPARATORS = re.compile(r"[,\s]+")


def _tokens(raw_values) -> list:
    if raw_values is None:
        return []
    if isinstance(raw_values, str):
        return [t for t in _SEPARATORS.split(raw_values) if t]
    if np.isscalar(raw_values):
        raw_values = [raw_values]
    tokens = []
    for v in raw_values:
        # bools would otherwise coerce to 0/1
        if isinstance(v, (bool, np.bool_)):
            continue
        if isinstance(v, str):
            tokens.extend(t for t in _SEPARATORS.split(v) if t)
        elif isinstance(v, numbers.Real):
            tokens.append(v)
    return tokens


def parse_rate_tokens(raw_values: Union[str, Iterable, None]) -> List[float]:
    """Finite numeric values from free text or a sequence of tokens, in order."""
    tokens = _tokens(raw_values)
    if not tokens:
        return []

    values = pd.to_numeric(pd.Series(tokens, dtype=object), errors="coerce").astype(float)
    values = values[np.isfinite(values)]
    return [float(v) for v in values]


def normalize_rate_series(
    raw_values: Union[str, Iterable, None],
    n_needed: int,
    default_value: float,
) -> List[float]:
    """
    Exactly n_needed period rates from an arbitrary caller-supplied series.

    Non-numeric entries are ignored. An empty series becomes [default_value];
    a short one is padded with its last value; a long one is truncated.
    """
    n_needed = int(n_needed)
    if n_needed <= 0:
        return []

    values = parse_rate_tokens(raw_values) or [float(default_value)]

    if len(values) < n_needed:
        values = values + [values[-1]] * (n_needed - len(values))
    return values[:n_needed]
