"""Two-slope interest rate strategy.

Borrow rates rise gently with utilization up to the optimal point and steeply
beyond it. The deposit rate is the debt-weighted average borrow rate scaled by
utilization, less the reserve factor.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd

from lendcore.data.constants import PERCENTAGE_FACTOR, RAY
from lendcore.data.interfaces import InterestRateStrategyParams, LendingRateOracle
from lendcore.errors import InvalidConfigurationError
from lendcore.libraries.percentage_math import percent_mul
from lendcore.libraries.wad_ray_math import ray_div, ray_mul, wad_to_ray

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InterestRates:
    """Rates produced by one strategy evaluation, all ray."""

    liquidity_rate: int
    stable_borrow_rate: int
    variable_borrow_rate: int


def calculate_utilization(available_liquidity: int, total_debt: int) -> int:
    """Share of the reserve lent out, in ray. Always within [0, 1]."""
    if total_debt == 0:
        return 0
    return ray_div(total_debt, available_liquidity + total_debt)


def calculate_overall_borrow_rate(
    total_stable_debt: int,
    total_variable_debt: int,
    current_variable_borrow_rate: int,
    current_average_stable_borrow_rate: int,
) -> int:
    """Debt-weighted average of the variable rate and the average stable rate."""
    total_debt = total_stable_debt + total_variable_debt
    if total_debt == 0:
        return 0

    weighted_variable_rate = ray_mul(
        wad_to_ray(total_variable_debt), current_variable_borrow_rate
    )
    weighted_stable_rate = ray_mul(
        wad_to_ray(total_stable_debt), current_average_stable_borrow_rate
    )
    return ray_div(weighted_variable_rate + weighted_stable_rate, wad_to_ray(total_debt))


class InterestRateStrategy:
    """Kinked utilization curve for one reserve.

    Parameters
    ----------
    asset : str
        Reserve the strategy prices; passed to the lending rate oracle.
    params : InterestRateStrategyParams
        Curve parameters in ray. ``optimal_utilization_rate`` must lie strictly
        between 0 and 1.
    lending_rate_oracle : LendingRateOracle
        Source of the market borrow rate used as the stable rate base.
    """

    def __init__(
        self,
        asset: str,
        params: InterestRateStrategyParams,
        lending_rate_oracle: LendingRateOracle,
    ) -> None:
        if not 0 < params.optimal_utilization_rate < RAY:
            raise InvalidConfigurationError(
                f"optimal utilization {params.optimal_utilization_rate} must be in (0, RAY)"
            )
        self.asset = asset
        self.params = params
        self.lending_rate_oracle = lending_rate_oracle

    @property
    def excess_utilization_rate(self) -> int:
        return RAY - self.params.optimal_utilization_rate

    @property
    def max_variable_borrow_rate(self) -> int:
        p = self.params
        return p.base_variable_borrow_rate + p.variable_rate_slope1 + p.variable_rate_slope2

    def _excess_ratio(self, utilization: int) -> int:
        return ray_div(
            utilization - self.params.optimal_utilization_rate,
            self.excess_utilization_rate,
        )

    def variable_rate_at(self, utilization: int) -> int:
        """Variable borrow rate at *utilization* (ray)."""
        p = self.params
        if utilization > p.optimal_utilization_rate:
            return (
                p.base_variable_borrow_rate
                + p.variable_rate_slope1
                + ray_mul(p.variable_rate_slope2, self._excess_ratio(utilization))
            )
        # Expressed through U/U* so both branches agree exactly at the kink
        ratio = ray_div(utilization, p.optimal_utilization_rate)
        return p.base_variable_borrow_rate + ray_mul(p.variable_rate_slope1, ratio)

    def stable_rate_at(self, utilization: int, market_rate: int) -> int:
        """Stable borrow rate at *utilization* on top of *market_rate* (ray)."""
        p = self.params
        if utilization > p.optimal_utilization_rate:
            return (
                market_rate
                + p.stable_rate_slope1
                + ray_mul(p.stable_rate_slope2, self._excess_ratio(utilization))
            )
        ratio = ray_div(utilization, p.optimal_utilization_rate)
        return market_rate + ray_mul(p.stable_rate_slope1, ratio)

    def compute_rates(
        self,
        available_liquidity: int,
        total_stable_debt: int,
        total_variable_debt: int,
        average_stable_borrow_rate: int,
        reserve_factor: int,
    ) -> InterestRates:
        """Evaluate the curve for the given reserve balances.

        Args:
            available_liquidity: Underlying not lent out.
            total_stable_debt: Outstanding stable debt.
            total_variable_debt: Outstanding variable debt.
            average_stable_borrow_rate: Average rate of the stable debt (ray).
            reserve_factor: Share of interest kept by the treasury (percentage).

        Returns:
            Liquidity, stable and variable rates in ray.
        """
        if not 0 <= reserve_factor <= PERCENTAGE_FACTOR:
            raise InvalidConfigurationError(f"reserve factor {reserve_factor} out of range")

        total_debt = total_stable_debt + total_variable_debt
        utilization = calculate_utilization(available_liquidity, total_debt)
        market_rate = self.lending_rate_oracle.get_market_borrow_rate(self.asset)

        stable_rate = self.stable_rate_at(utilization, market_rate)
        variable_rate = self.variable_rate_at(utilization)

        overall_borrow_rate = calculate_overall_borrow_rate(
            total_stable_debt,
            total_variable_debt,
            variable_rate,
            average_stable_borrow_rate,
        )
        liquidity_rate = percent_mul(
            ray_mul(overall_borrow_rate, utilization),
            PERCENTAGE_FACTOR - reserve_factor,
        )

        logger.debug(
            "%s rates at utilization %d: liquidity=%d stable=%d variable=%d",
            self.asset,
            utilization,
            liquidity_rate,
            stable_rate,
            variable_rate,
        )
        return InterestRates(
            liquidity_rate=liquidity_rate,
            stable_borrow_rate=stable_rate,
            variable_borrow_rate=variable_rate,
        )

    def rate_curve(
        self,
        reserve_factor: int = 0,
        market_rate: int = 0,
        n_points: int = 201,
    ) -> pd.DataFrame:
        """Generate the full rate curve for plotting.

        The liquidity rate assumes all debt is variable.

        Returns:
            DataFrame with float columns: utilization, variable_rate,
            stable_rate, liquidity_rate
        """
        utilizations = [RAY * i // (n_points - 1) for i in range(n_points)]
        variable = [self.variable_rate_at(u) for u in utilizations]
        stable = [self.stable_rate_at(u, market_rate) for u in utilizations]
        liquidity = [
            percent_mul(ray_mul(rate, u), PERCENTAGE_FACTOR - reserve_factor)
            for rate, u in zip(variable, utilizations)
        ]

        return pd.DataFrame(
            {
                "utilization": np.array(utilizations, dtype=float) / RAY,
                "variable_rate": np.array(variable, dtype=float) / RAY,
                "stable_rate": np.array(stable, dtype=float) / RAY,
                "liquidity_rate": np.array(liquidity, dtype=float) / RAY,
            }
        )
