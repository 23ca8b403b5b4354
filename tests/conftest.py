"""Shared fixtures: a small market of in-memory reserves on a manual clock."""

from __future__ import annotations

import pytest

from lendcore.data.constants import DAI, USDC, WETH
from lendcore.data.ledger import Clock, create_in_memory_reserve
from lendcore.data.static_params import StaticDataProvider
from lendcore.libraries.reserve_configuration import ReserveConfiguration
from lendcore.protocol.interest_rate import InterestRateStrategy
from lendcore.protocol.registry import ReserveRegistry
from lendcore.protocol.reserve import Reserve

T0 = 1_700_000_000


class PoolActions:
    """Minimal deposit/borrow/repay flows wrapping the accrual engine."""

    def __init__(self, clock: Clock) -> None:
        self.clock = clock

    def deposit(self, reserve: Reserve, user: str, amount: int) -> None:
        reserve.update_state(self.clock.now)
        reserve.deposit_token.mint(user, amount, reserve.liquidity_index)
        reserve.update_interest_rates()

    def withdraw(self, reserve: Reserve, user: str, amount: int) -> None:
        reserve.update_state(self.clock.now)
        reserve.deposit_token.burn(user, amount, reserve.liquidity_index)
        reserve.update_interest_rates()

    def borrow_variable(self, reserve: Reserve, user: str, amount: int) -> None:
        reserve.update_state(self.clock.now)
        reserve.variable_debt_token.mint(user, amount, reserve.variable_borrow_index)
        reserve.deposit_token.transfer_underlying_out(amount)
        reserve.update_interest_rates()

    def repay_variable(self, reserve: Reserve, user: str, amount: int) -> None:
        reserve.update_state(self.clock.now)
        reserve.variable_debt_token.burn(user, amount, reserve.variable_borrow_index)
        reserve.deposit_token.transfer_underlying_in(amount)
        reserve.update_interest_rates()

    def borrow_stable(self, reserve: Reserve, user: str, amount: int) -> None:
        reserve.update_state(self.clock.now)
        reserve.stable_debt_token.mint(user, amount, reserve.current_stable_borrow_rate)
        reserve.deposit_token.transfer_underlying_out(amount)
        reserve.update_interest_rates()


@pytest.fixture
def clock() -> Clock:
    return Clock(now=T0)


@pytest.fixture
def provider() -> StaticDataProvider:
    return StaticDataProvider()


@pytest.fixture
def registry() -> ReserveRegistry:
    return ReserveRegistry()


@pytest.fixture
def actions(clock: Clock) -> PoolActions:
    return PoolActions(clock)


def list_reserve(
    registry: ReserveRegistry,
    provider: StaticDataProvider,
    clock: Clock,
    asset: str,
    configuration: ReserveConfiguration | None = None,
) -> Reserve:
    strategy = InterestRateStrategy(asset, provider.get_strategy_params(asset), provider)
    return create_in_memory_reserve(
        registry,
        asset,
        strategy,
        configuration or provider.get_reserve_configuration(asset),
        clock,
    )


@pytest.fixture
def weth_reserve(registry, provider, clock) -> Reserve:
    return list_reserve(registry, provider, clock, WETH)


@pytest.fixture
def usdc_reserve(registry, provider, clock, weth_reserve) -> Reserve:
    return list_reserve(registry, provider, clock, USDC)


@pytest.fixture
def dai_reserve(registry, provider, clock, usdc_reserve) -> Reserve:
    return list_reserve(registry, provider, clock, DAI)


@pytest.fixture
def make_reserve(registry, provider, clock):
    """List an asset, optionally with a custom configuration."""

    def _make(asset: str, configuration: ReserveConfiguration | None = None) -> Reserve:
        return list_reserve(registry, provider, clock, asset, configuration)

    return _make
