"""Tests for the hardcoded market data provider."""

import pytest

from lendcore.data.constants import DAI, RAY, SUPPORTED_ASSETS, USDC, WETH
from lendcore.data.static_params import StaticDataProvider


@pytest.fixture
def provider() -> StaticDataProvider:
    return StaticDataProvider()


class TestLookups:
    @pytest.mark.parametrize("asset", SUPPORTED_ASSETS)
    def test_every_asset_is_complete(self, provider: StaticDataProvider, asset: str) -> None:
        params = provider.get_strategy_params(asset)
        config = provider.get_reserve_configuration(asset)

        assert 0 < params.optimal_utilization_rate < RAY
        assert params.variable_rate_slope1 < params.variable_rate_slope2
        assert config.get_ltv() <= config.get_liquidation_threshold()
        assert config.get_active()
        assert provider.get_asset_price(asset) > 0
        assert provider.get_market_borrow_rate(asset) > 0

    def test_decimals(self, provider: StaticDataProvider) -> None:
        assert provider.get_reserve_configuration(WETH).get_decimals() == 18
        assert provider.get_reserve_configuration(USDC).get_decimals() == 6

    @pytest.mark.parametrize(
        "method",
        ["get_strategy_params", "get_reserve_configuration", "get_asset_price", "get_market_borrow_rate"],
    )
    def test_unknown_asset(self, provider: StaticDataProvider, method: str) -> None:
        with pytest.raises(ValueError, match="Unknown asset"):
            getattr(provider, method)("WBTC")


class TestConfigurationCopies:
    def test_mutation_does_not_leak(self, provider: StaticDataProvider) -> None:
        config = provider.get_reserve_configuration(DAI)
        config.set_frozen(True)
        config.set_reserve_factor(0)

        fresh = provider.get_reserve_configuration(DAI)
        assert not fresh.get_frozen()
        assert fresh.get_reserve_factor() == 1_000


class TestOverrides:
    def test_constructor_overrides(self) -> None:
        provider = StaticDataProvider(prices={USDC: 4 * 10**14})
        assert provider.get_asset_price(USDC) == 4 * 10**14
        assert provider.get_asset_price(DAI) == 5 * 10**14

    def test_setters_are_per_instance(self, provider: StaticDataProvider) -> None:
        provider.set_asset_price(WETH, 2 * 10**18)
        provider.set_market_borrow_rate(WETH, 10**26)

        assert provider.get_asset_price(WETH) == 2 * 10**18
        assert provider.get_market_borrow_rate(WETH) == 10**26
        assert StaticDataProvider().get_asset_price(WETH) == 10**18
