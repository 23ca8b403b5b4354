"""In-memory token collaborators.

Reference implementations of the deposit and debt tokens with the same scaled
balance accounting as the on-chain tokens. They back the simulation, the
dashboard and the test-suite; production callers plug in their own.

Deposit and variable debt balances are stored scaled (divided by the index at
the time of the operation) and expanded on read with the reserve's lazily
projected index, so they are always current to the clock.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from lendcore.data.interfaces import (
    DepositToken,
    StableDebtToken,
    StableSupplyData,
    VariableDebtToken,
)
from lendcore.errors import ArithmeticUnderflowError, InvalidConfigurationError
from lendcore.libraries.math_utils import calculate_compounded_interest
from lendcore.libraries.wad_ray_math import ray_div, ray_mul, wad_to_ray

if TYPE_CHECKING:
    from lendcore.libraries.reserve_configuration import ReserveConfiguration
    from lendcore.protocol.interest_rate import InterestRateStrategy
    from lendcore.protocol.registry import ReserveRegistry
    from lendcore.protocol.reserve import Reserve

logger = logging.getLogger(__name__)

TREASURY = "treasury"


@dataclass
class Clock:
    """Manually advanced block time in seconds."""

    now: int = 0

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError("time cannot move backwards")
        self.now += seconds
        return self.now


class _ScaledBalances:
    def __init__(self) -> None:
        self._scaled: dict[str, int] = {}
        self._scaled_total = 0

    def _add_scaled(self, user: str, amount_scaled: int) -> None:
        self._scaled[user] = self._scaled.get(user, 0) + amount_scaled
        self._scaled_total += amount_scaled

    def _sub_scaled(self, user: str, amount_scaled: int) -> None:
        balance = self._scaled.get(user, 0)
        if amount_scaled > balance:
            raise ArithmeticUnderflowError(
                f"burn of {amount_scaled} exceeds scaled balance {balance} of {user}"
            )
        self._scaled[user] = balance - amount_scaled
        self._scaled_total -= amount_scaled

    def scaled_balance_of(self, user: str) -> int:
        return self._scaled.get(user, 0)

    def scaled_total_supply(self) -> int:
        return self._scaled_total


class InMemoryDepositToken(_ScaledBalances, DepositToken):
    """Deposit token holding the reserve's free underlying liquidity."""

    def __init__(self, asset: str, clock: Clock, treasury: str = TREASURY) -> None:
        super().__init__()
        self.asset = asset
        self.clock = clock
        self.treasury = treasury
        self.reserve: Reserve | None = None
        self._liquidity = 0

    def bind(self, reserve: Reserve) -> None:
        self.reserve = reserve

    def _index(self) -> int:
        return self.reserve.get_normalized_income(self.clock.now)

    def mint(self, user: str, amount: int, index: int) -> None:
        """Deposit *amount* of underlying for *user* at *index*."""
        amount_scaled = ray_div(amount, index)
        if amount_scaled == 0:
            raise InvalidConfigurationError("mint amount rounds to zero", code="56")
        self._add_scaled(user, amount_scaled)
        self._liquidity += amount

    def burn(self, user: str, amount: int, index: int) -> None:
        """Withdraw *amount* of underlying for *user* at *index*."""
        if amount > self._liquidity:
            raise ArithmeticUnderflowError(f"{self.asset}: not enough liquidity to withdraw")
        self._sub_scaled(user, ray_div(amount, index))
        self._liquidity -= amount

    def balance_of(self, user: str) -> int:
        return ray_mul(self.scaled_balance_of(user), self._index())

    def total_supply(self) -> int:
        return ray_mul(self.scaled_total_supply(), self._index())

    def available_liquidity(self) -> int:
        return self._liquidity

    def transfer_underlying_in(self, amount: int) -> None:
        """Receive underlying from a repayment."""
        self._liquidity += amount

    def transfer_underlying_out(self, amount: int) -> None:
        """Release underlying to a borrower."""
        if amount > self._liquidity:
            raise ArithmeticUnderflowError(f"{self.asset}: not enough liquidity to lend")
        self._liquidity -= amount

    def mint_to_treasury(self, amount: int, index: int) -> None:
        if amount == 0:
            return
        self._add_scaled(self.treasury, ray_div(amount, index))
        logger.debug("%s: minted %d to treasury at index %d", self.asset, amount, index)

    def burn_from_treasury(self, amount: int, index: int) -> None:
        if amount == 0:
            return
        self._sub_scaled(self.treasury, ray_div(amount, index))
        logger.debug("%s: burned %d from treasury at index %d", self.asset, amount, index)


class InMemoryVariableDebtToken(_ScaledBalances, VariableDebtToken):
    """Variable debt token; balances follow the variable borrow index."""

    def __init__(self, asset: str, clock: Clock) -> None:
        super().__init__()
        self.asset = asset
        self.clock = clock
        self.reserve: Reserve | None = None

    def bind(self, reserve: Reserve) -> None:
        self.reserve = reserve

    def mint(self, user: str, amount: int, index: int) -> None:
        amount_scaled = ray_div(amount, index)
        if amount_scaled == 0:
            raise InvalidConfigurationError("mint amount rounds to zero", code="56")
        self._add_scaled(user, amount_scaled)

    def burn(self, user: str, amount: int, index: int) -> None:
        self._sub_scaled(user, ray_div(amount, index))

    def balance_of(self, user: str) -> int:
        scaled = self.scaled_balance_of(user)
        if scaled == 0:
            return 0
        return ray_mul(scaled, self.reserve.get_normalized_debt(self.clock.now))


class InMemoryStableDebtToken(StableDebtToken):
    """Stable debt token.

    Each user's debt compounds at their own fixed rate from their last action;
    the supply compounds at the debt-weighted average rate.
    """

    def __init__(self, asset: str, clock: Clock) -> None:
        self.asset = asset
        self.clock = clock
        self._principal: dict[str, int] = {}
        self._user_rate: dict[str, int] = {}
        self._timestamps: dict[str, int] = {}
        self._avg_stable_rate = 0
        self._total_supply = 0
        self._total_supply_timestamp = 0

    def principal_balance_of(self, user: str) -> int:
        return self._principal.get(user, 0)

    def get_user_stable_rate(self, user: str) -> int:
        return self._user_rate.get(user, 0)

    def balance_of(self, user: str) -> int:
        principal = self.principal_balance_of(user)
        if principal == 0:
            return 0
        cumulated = calculate_compounded_interest(
            self._user_rate[user], self._timestamps[user], self.clock.now
        )
        return ray_mul(principal, cumulated)

    def _calc_total_supply(self) -> int:
        if self._total_supply == 0:
            return 0
        cumulated = calculate_compounded_interest(
            self._avg_stable_rate, self._total_supply_timestamp, self.clock.now
        )
        return ray_mul(self._total_supply, cumulated)

    def total_supply(self) -> int:
        return self._calc_total_supply()

    def get_supply_data(self) -> StableSupplyData:
        return StableSupplyData(
            principal_supply=self._total_supply,
            total_supply=self._calc_total_supply(),
            average_rate=self._avg_stable_rate,
            last_updated_timestamp=self._total_supply_timestamp,
        )

    def get_total_supply_and_avg_rate(self) -> tuple[int, int]:
        return self._calc_total_supply(), self._avg_stable_rate

    def _balance_increase(self, user: str) -> tuple[int, int]:
        previous = self.principal_balance_of(user)
        if previous == 0:
            return 0, 0
        current = self.balance_of(user)
        return current, current - previous

    def mint(self, user: str, amount: int, rate: int) -> None:
        """Borrow *amount* at stable *rate* for *user*."""
        current_balance, balance_increase = self._balance_increase(user)
        previous_supply = self._calc_total_supply()
        next_supply = previous_supply + amount
        amount_in_ray = wad_to_ray(amount)

        self._user_rate[user] = ray_div(
            ray_mul(self.get_user_stable_rate(user), wad_to_ray(current_balance))
            + ray_mul(amount_in_ray, rate),
            wad_to_ray(current_balance + amount),
        )
        self._avg_stable_rate = ray_div(
            ray_mul(self._avg_stable_rate, wad_to_ray(previous_supply))
            + ray_mul(rate, amount_in_ray),
            wad_to_ray(next_supply),
        )
        self._timestamps[user] = self._total_supply_timestamp = self.clock.now
        self._total_supply = next_supply
        self._principal[user] = self.principal_balance_of(user) + amount + balance_increase

    def burn(self, user: str, amount: int) -> None:
        """Repay *amount* of *user*'s stable debt."""
        current_balance, balance_increase = self._balance_increase(user)
        if amount > current_balance:
            raise ArithmeticUnderflowError(f"repay of {amount} exceeds debt {current_balance}")

        previous_supply = self._calc_total_supply()
        if previous_supply <= amount:
            self._avg_stable_rate = 0
            self._total_supply = 0
        else:
            next_supply = previous_supply - amount
            first_term = ray_mul(self._avg_stable_rate, wad_to_ray(previous_supply))
            second_term = ray_mul(self.get_user_stable_rate(user), wad_to_ray(amount))
            if second_term >= first_term:
                next_supply = 0
                self._avg_stable_rate = 0
            else:
                self._avg_stable_rate = ray_div(
                    first_term - second_term, wad_to_ray(next_supply)
                )
            self._total_supply = next_supply

        if amount == current_balance:
            self._user_rate[user] = 0
            self._timestamps[user] = 0
        else:
            self._timestamps[user] = self.clock.now
        self._total_supply_timestamp = self.clock.now

        self._principal[user] = current_balance - amount


def create_in_memory_reserve(
    registry: ReserveRegistry,
    asset: str,
    interest_rate_strategy: InterestRateStrategy,
    configuration: ReserveConfiguration,
    clock: Clock,
) -> Reserve:
    """List *asset* in *registry* backed by fresh in-memory tokens."""
    deposit_token = InMemoryDepositToken(asset, clock)
    stable_debt_token = InMemoryStableDebtToken(asset, clock)
    variable_debt_token = InMemoryVariableDebtToken(asset, clock)

    reserve = registry.init_reserve(
        asset,
        deposit_token,
        stable_debt_token,
        variable_debt_token,
        interest_rate_strategy,
        configuration,
    )
    deposit_token.bind(reserve)
    variable_debt_token.bind(reserve)
    return reserve
