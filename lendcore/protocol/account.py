"""Account-level risk aggregation.

Values are summed in the common price unit (wei of ETH). Balances are read from
the token collaborators, which are expected to apply their reserve's latest
index; if they do not, the results are stale by the same amount.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from lendcore.data.constants import (
    HEALTH_FACTOR_INFINITE,
    HEALTH_FACTOR_LIQUIDATION_THRESHOLD,
)
from lendcore.data.interfaces import PriceOracle
from lendcore.errors import ArithmeticUnderflowError, ReserveNotFoundError
from lendcore.libraries.percentage_math import percent_mul
from lendcore.libraries.user_configuration import UserConfiguration
from lendcore.libraries.wad_ray_math import wad_div
from lendcore.protocol.reserve import Reserve


@dataclass(frozen=True)
class AccountData:
    """Aggregated position of one user."""

    total_collateral_eth: int
    total_debt_eth: int
    ltv: int  # Value-weighted average, percentage
    liquidation_threshold: int  # Value-weighted average, percentage
    health_factor: int  # Wad; HEALTH_FACTOR_INFINITE without debt

    @property
    def is_liquidatable(self) -> bool:
        return self.health_factor < HEALTH_FACTOR_LIQUIDATION_THRESHOLD


def calculate_health_factor_from_balances(
    total_collateral_eth: int, total_debt_eth: int, liquidation_threshold: int
) -> int:
    """HF = collateral * threshold / debt, as a wad."""
    if total_debt_eth == 0:
        return HEALTH_FACTOR_INFINITE
    return wad_div(percent_mul(total_collateral_eth, liquidation_threshold), total_debt_eth)


def calculate_available_borrows_eth(
    total_collateral_eth: int, total_debt_eth: int, ltv: int
) -> int:
    """Additional debt the collateral supports at *ltv*; 0 if none."""
    available_borrows_eth = percent_mul(total_collateral_eth, ltv)
    if available_borrows_eth < total_debt_eth:
        return 0
    return available_borrows_eth - total_debt_eth


def calculate_user_account_data(
    user: str,
    reserves: Sequence[Reserve],
    user_config: UserConfiguration,
    oracle: PriceOracle,
) -> AccountData:
    """Aggregate *user*'s collateral and debt across all flagged reserves.

    ``reserves`` must be ordered by reserve id so that position ``i`` matches
    bit pair ``i`` of ``user_config``.
    """
    if user_config.is_empty():
        return AccountData(0, 0, 0, 0, HEALTH_FACTOR_INFINITE)

    total_collateral_eth = 0
    total_debt_eth = 0
    weighted_ltv = 0
    weighted_threshold = 0

    for i, reserve in enumerate(reserves):
        if not user_config.is_using_as_collateral_or_borrowing(i):
            continue

        params = reserve.configuration.get_params()
        token_unit = 10**params.decimals
        unit_price = oracle.get_asset_price(reserve.asset)

        if params.liquidation_threshold != 0 and user_config.is_using_as_collateral(i):
            balance = reserve.deposit_token.balance_of(user)
            balance_eth = unit_price * balance // token_unit

            total_collateral_eth += balance_eth
            weighted_ltv += balance_eth * params.ltv
            weighted_threshold += balance_eth * params.liquidation_threshold

        if user_config.is_borrowing(i):
            debt = reserve.stable_debt_token.balance_of(user)
            debt += reserve.variable_debt_token.balance_of(user)
            total_debt_eth += unit_price * debt // token_unit

    avg_ltv = weighted_ltv // total_collateral_eth if total_collateral_eth > 0 else 0
    avg_threshold = (
        weighted_threshold // total_collateral_eth if total_collateral_eth > 0 else 0
    )

    return AccountData(
        total_collateral_eth=total_collateral_eth,
        total_debt_eth=total_debt_eth,
        ltv=avg_ltv,
        liquidation_threshold=avg_threshold,
        health_factor=calculate_health_factor_from_balances(
            total_collateral_eth, total_debt_eth, avg_threshold
        ),
    )


def _find_reserve(asset: str, reserves: Sequence[Reserve]) -> Reserve:
    for reserve in reserves:
        if reserve.asset == asset:
            return reserve
    raise ReserveNotFoundError(f"reserve {asset} is not listed")


def balance_decrease_allowed(
    asset: str,
    user: str,
    amount: int,
    reserves: Sequence[Reserve],
    user_config: UserConfiguration,
    oracle: PriceOracle,
) -> bool:
    """Whether *user* can remove *amount* of *asset* collateral and stay solvent.

    Removing collateral is always allowed when the user has no debt or the
    asset does not count as collateral. Otherwise the health factor after the
    decrease must stay at or above 1.0.
    """
    reserve = _find_reserve(asset, reserves)
    if not user_config.is_borrowing_any() or not user_config.is_using_as_collateral(
        reserve.id
    ):
        return True

    params = reserve.configuration.get_params()
    if params.liquidation_threshold == 0:
        return True

    account = calculate_user_account_data(user, reserves, user_config, oracle)
    if account.total_debt_eth == 0:
        return True

    amount_to_decrease_eth = (
        oracle.get_asset_price(asset) * amount // 10**params.decimals
    )
    collateral_after_decrease = account.total_collateral_eth - amount_to_decrease_eth
    if collateral_after_decrease < 0:
        raise ArithmeticUnderflowError(
            f"decrease of {amount_to_decrease_eth} exceeds collateral "
            f"{account.total_collateral_eth}"
        )
    if collateral_after_decrease == 0:
        return False

    # Flooring of the averaged threshold can push this marginally below zero
    threshold_after_decrease = max(
        0,
        (
            account.total_collateral_eth * account.liquidation_threshold
            - amount_to_decrease_eth * params.liquidation_threshold
        )
        // collateral_after_decrease,
    )

    health_factor_after_decrease = calculate_health_factor_from_balances(
        collateral_after_decrease, account.total_debt_eth, threshold_after_decrease
    )
    return health_factor_after_decrease >= HEALTH_FACTOR_LIQUIDATION_THRESHOLD
