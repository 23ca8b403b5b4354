"""Static data provider with hardcoded reference market parameters.

Values follow the Aave V2 Ethereum market listings. Prices are in wei of ETH per
whole token; rates and curve parameters are ray.
"""

from __future__ import annotations

from lendcore.data.constants import DAI, DAI_DECIMALS, USDC, USDC_DECIMALS, WETH, WETH_DECIMALS
from lendcore.data.interfaces import InterestRateStrategyParams, MarketDataProvider
from lendcore.libraries.reserve_configuration import ReserveConfiguration

# --- Interest rate strategies ---

_STRATEGY_PARAMS: dict[str, InterestRateStrategyParams] = {
    WETH: InterestRateStrategyParams(
        optimal_utilization_rate=65 * 10**25,
        base_variable_borrow_rate=0,
        variable_rate_slope1=8 * 10**25,
        variable_rate_slope2=100 * 10**25,
        stable_rate_slope1=10 * 10**25,
        stable_rate_slope2=100 * 10**25,
    ),
    USDC: InterestRateStrategyParams(
        optimal_utilization_rate=90 * 10**25,
        base_variable_borrow_rate=0,
        variable_rate_slope1=4 * 10**25,
        variable_rate_slope2=60 * 10**25,
        stable_rate_slope1=2 * 10**25,
        stable_rate_slope2=60 * 10**25,
    ),
    DAI: InterestRateStrategyParams(
        optimal_utilization_rate=80 * 10**25,
        base_variable_borrow_rate=0,
        variable_rate_slope1=4 * 10**25,
        variable_rate_slope2=75 * 10**25,
        stable_rate_slope1=2 * 10**25,
        stable_rate_slope2=75 * 10**25,
    ),
}

# --- Reserve configurations (percentages in basis points) ---

_CONFIGURATIONS: dict[str, ReserveConfiguration] = {
    WETH: ReserveConfiguration.from_params(
        ltv=8000,
        liquidation_threshold=8250,
        liquidation_bonus=10500,
        decimals=WETH_DECIMALS,
        reserve_factor=1000,
        stable_borrowing_enabled=True,
    ),
    USDC: ReserveConfiguration.from_params(
        ltv=8000,
        liquidation_threshold=8500,
        liquidation_bonus=10500,
        decimals=USDC_DECIMALS,
        reserve_factor=1000,
        stable_borrowing_enabled=True,
    ),
    DAI: ReserveConfiguration.from_params(
        ltv=7500,
        liquidation_threshold=8000,
        liquidation_bonus=10500,
        decimals=DAI_DECIMALS,
        reserve_factor=1000,
        stable_borrowing_enabled=True,
    ),
}

# Prices in wei per whole token
_ASSET_PRICES: dict[str, int] = {
    WETH: 10**18,
    USDC: 5 * 10**14,
    DAI: 5 * 10**14,
}

# Market borrow rates from the lending rate oracle
_MARKET_BORROW_RATES: dict[str, int] = {
    WETH: 3 * 10**25,
    USDC: 35 * 10**24,
    DAI: 35 * 10**24,
}


class StaticDataProvider(MarketDataProvider):
    """Market data from hardcoded parameters.

    Prices and market rates can be overridden per instance, which makes the
    provider usable as a scriptable oracle in simulations.
    """

    def __init__(
        self,
        prices: dict[str, int] | None = None,
        market_borrow_rates: dict[str, int] | None = None,
    ) -> None:
        self._prices = {**_ASSET_PRICES, **(prices or {})}
        self._market_borrow_rates = {**_MARKET_BORROW_RATES, **(market_borrow_rates or {})}

    @staticmethod
    def _lookup(table: dict, asset: str):
        try:
            return table[asset]
        except KeyError:
            raise ValueError(f"Unknown asset: {asset}") from None

    def get_strategy_params(self, asset: str) -> InterestRateStrategyParams:
        return self._lookup(_STRATEGY_PARAMS, asset)

    def get_reserve_configuration(self, asset: str) -> ReserveConfiguration:
        # Fresh copy; configurations are mutable
        return ReserveConfiguration(self._lookup(_CONFIGURATIONS, asset).data)

    def get_asset_price(self, asset: str) -> int:
        return self._lookup(self._prices, asset)

    def get_market_borrow_rate(self, asset: str) -> int:
        return self._lookup(self._market_borrow_rates, asset)

    def set_asset_price(self, asset: str, price: int) -> None:
        self._prices[asset] = price

    def set_market_borrow_rate(self, asset: str, rate: int) -> None:
        self._market_borrow_rates[asset] = rate
