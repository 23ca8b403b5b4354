"""Tests for the reserve registry."""

import pytest

from lendcore.data.constants import DAI, USDC, WAD, WETH
from lendcore.data.ledger import (
    InMemoryDepositToken,
    InMemoryStableDebtToken,
    InMemoryVariableDebtToken,
)
from lendcore.errors import (
    ReserveAlreadyInitializedError,
    ReserveNotFoundError,
    TooManyReservesError,
)
from lendcore.protocol.interest_rate import InterestRateStrategy
from lendcore.protocol.registry import ReserveRegistry

from conftest import list_reserve


def _list_bare(registry: ReserveRegistry, provider, clock, asset: str):
    strategy = InterestRateStrategy(asset, provider.get_strategy_params(asset), provider)
    return registry.init_reserve(
        asset,
        InMemoryDepositToken(asset, clock),
        InMemoryStableDebtToken(asset, clock),
        InMemoryVariableDebtToken(asset, clock),
        strategy,
        provider.get_reserve_configuration(asset),
    )


class TestListing:
    def test_ids_are_dense(self, registry, weth_reserve, usdc_reserve, dai_reserve) -> None:
        assert (weth_reserve.id, usdc_reserve.id, dai_reserve.id) == (0, 1, 2)
        assert registry.reserves_list() == [WETH, USDC, DAI]
        assert len(registry) == 3
        assert [reserve.asset for reserve in registry] == [WETH, USDC, DAI]

    def test_lookup(self, registry, weth_reserve, usdc_reserve) -> None:
        assert registry.get_reserve(USDC) is usdc_reserve
        assert registry.get_reserve_by_id(0) is weth_reserve
        assert WETH in registry
        assert DAI not in registry

    def test_unknown_asset(self, registry, weth_reserve) -> None:
        with pytest.raises(ReserveNotFoundError):
            registry.get_reserve(DAI)
        # Also a KeyError for mapping-style callers
        with pytest.raises(KeyError):
            registry.get_reserve(DAI)

    @pytest.mark.parametrize("reserve_id", [-1, 1, 128])
    def test_unknown_id(self, registry, weth_reserve, reserve_id: int) -> None:
        with pytest.raises(ReserveNotFoundError):
            registry.get_reserve_by_id(reserve_id)

    def test_listing_twice_rejected(self, registry, provider, clock, weth_reserve) -> None:
        with pytest.raises(ReserveAlreadyInitializedError):
            _list_bare(registry, provider, clock, WETH)
        assert len(registry) == 1
        assert registry.get_reserve(WETH) is weth_reserve

    def test_capacity(self, provider, clock) -> None:
        registry = ReserveRegistry(max_reserves=2)
        list_reserve(registry, provider, clock, WETH)
        list_reserve(registry, provider, clock, USDC)

        with pytest.raises(TooManyReservesError) as exc_info:
            list_reserve(registry, provider, clock, DAI)

        assert exc_info.value.code == "59"
        assert registry.reserves_list() == [WETH, USDC]

    def test_configuration_applied(self, registry, weth_reserve, provider) -> None:
        assert weth_reserve.configuration == provider.get_reserve_configuration(WETH)
        assert weth_reserve.configuration.get_reserve_factor() == 1_000


class TestEvents:
    def test_reserve_events_reach_registry_listeners(
        self, registry, weth_reserve, usdc_reserve, actions
    ) -> None:
        received = []
        registry.subscribe(received.append)

        actions.deposit(weth_reserve, "alice", 10 * WAD)
        actions.deposit(usdc_reserve, "bob", 1_000 * 10**6)

        assert [event.asset for event in received] == [WETH, USDC]

    def test_unsubscribe(self, registry, weth_reserve, actions) -> None:
        received = []
        registry.subscribe(received.append)
        registry.subscribe(received.append)
        actions.deposit(weth_reserve, "alice", WAD)
        registry.unsubscribe(received.append)
        actions.deposit(weth_reserve, "alice", WAD)

        assert len(received) == 1
