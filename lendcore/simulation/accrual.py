"""Index accrual projections over time.

Read-only projections use the reserve's lazy normalized income and debt;
``run_accrual`` drives the real update cycle and records each step.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np
import pandas as pd

from lendcore.data.constants import RAY, SECONDS_PER_YEAR
from lendcore.libraries.math_utils import (
    calculate_compounded_interest,
    calculate_linear_interest,
)
from lendcore.protocol.reserve import Reserve

SECONDS_PER_DAY = 24 * 3600


def project_indices(
    reserve: Reserve,
    start: int,
    horizon: int = SECONDS_PER_YEAR,
    step: int = SECONDS_PER_DAY,
) -> pd.DataFrame:
    """Project both indices forward from *start* at the current rates.

    The reserve is not mutated.

    Returns:
        DataFrame with columns: timestamp, elapsed_days, liquidity_index,
        variable_borrow_index (indices as floats, 1.0 = RAY)
    """
    timestamps = np.arange(start, start + horizon + 1, step, dtype=np.int64)
    income = [reserve.get_normalized_income(int(ts)) for ts in timestamps]
    debt = [reserve.get_normalized_debt(int(ts)) for ts in timestamps]

    return pd.DataFrame(
        {
            "timestamp": timestamps,
            "elapsed_days": (timestamps - start) / SECONDS_PER_DAY,
            "liquidity_index": np.array(income, dtype=float) / RAY,
            "variable_borrow_index": np.array(debt, dtype=float) / RAY,
        }
    )


def compare_compounding(rate: int, elapsed_seconds: Iterable[int]) -> pd.DataFrame:
    """Contrast linear, truncated binomial and exact continuous growth.

    Args:
        rate: Annual rate in ray.
        elapsed_seconds: Accrual periods to evaluate.

    Returns:
        DataFrame with columns: elapsed_seconds, linear, compounded, exact,
        approximation_error (exact minus compounded)
    """
    periods = np.asarray(list(elapsed_seconds), dtype=np.int64)
    linear = [calculate_linear_interest(rate, 0, int(n)) for n in periods]
    compounded = [calculate_compounded_interest(rate, 0, int(n)) for n in periods]

    rate_per_second = (rate // SECONDS_PER_YEAR) / RAY
    exact = np.power(1.0 + rate_per_second, periods.astype(float))
    compounded_float = np.array(compounded, dtype=float) / RAY

    return pd.DataFrame(
        {
            "elapsed_seconds": periods,
            "linear": np.array(linear, dtype=float) / RAY,
            "compounded": compounded_float,
            "exact": exact,
            "approximation_error": exact - compounded_float,
        }
    )


def run_accrual(reserve: Reserve, timestamps: Iterable[int]) -> pd.DataFrame:
    """Apply ``update_state`` and ``update_interest_rates`` at each timestamp.

    Returns:
        DataFrame with one row per step: timestamp, liquidity_index,
        variable_borrow_index, liquidity_rate, variable_borrow_rate,
        stable_borrow_rate (raw ray integers)
    """
    rows = []
    for ts in timestamps:
        reserve.update_state(ts)
        reserve.update_interest_rates()
        rows.append(
            {
                "timestamp": ts,
                "liquidity_index": reserve.liquidity_index,
                "variable_borrow_index": reserve.variable_borrow_index,
                "liquidity_rate": reserve.current_liquidity_rate,
                "variable_borrow_rate": reserve.current_variable_borrow_rate,
                "stable_borrow_rate": reserve.current_stable_borrow_rate,
            }
        )
    return pd.DataFrame(rows)
