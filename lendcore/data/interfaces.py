"""Abstract interfaces for the collaborators the core queries.

Token amounts are integers in the token's own decimals; rates are ray; prices are
wei of the common unit (ETH) per whole token.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from lendcore.libraries.reserve_configuration import ReserveConfiguration


@dataclass(frozen=True)
class StableSupplyData:
    """Stable debt totals as returned by ``get_supply_data``."""

    principal_supply: int  # Supply as of the last stable debt update
    total_supply: int  # Supply compounded to now
    average_rate: int  # Ray
    last_updated_timestamp: int


@dataclass(frozen=True)
class InterestRateStrategyParams:
    """Two-slope curve parameters, all in ray."""

    optimal_utilization_rate: int
    base_variable_borrow_rate: int
    variable_rate_slope1: int
    variable_rate_slope2: int
    stable_rate_slope1: int
    stable_rate_slope2: int


class DepositToken(ABC):
    """Interest-bearing deposit token (aToken)."""

    @abstractmethod
    def balance_of(self, user: str) -> int:
        """Balance of *user* with the latest liquidity index applied."""

    @abstractmethod
    def available_liquidity(self) -> int:
        """Underlying asset held by the token and free to borrow."""

    @abstractmethod
    def mint_to_treasury(self, amount: int, index: int) -> None:
        """Credit *amount* of underlying to the treasury at *index*."""

    @abstractmethod
    def burn_from_treasury(self, amount: int, index: int) -> None:
        """Debit *amount* of underlying from the treasury at *index*."""


class StableDebtToken(ABC):
    """Fixed-rate debt token."""

    @abstractmethod
    def balance_of(self, user: str) -> int:
        """Debt of *user* compounded to now."""

    @abstractmethod
    def get_supply_data(self) -> StableSupplyData:
        """Principal, current supply, average rate and last update time."""

    @abstractmethod
    def get_total_supply_and_avg_rate(self) -> tuple[int, int]:
        """Current total supply and average stable rate."""


class VariableDebtToken(ABC):
    """Floating-rate debt token storing index-independent scaled balances."""

    @abstractmethod
    def balance_of(self, user: str) -> int:
        """Debt of *user* with the latest variable borrow index applied."""

    @abstractmethod
    def scaled_balance_of(self, user: str) -> int:
        """Scaled balance of *user*."""

    @abstractmethod
    def scaled_total_supply(self) -> int:
        """Sum of all scaled balances."""


class PriceOracle(ABC):
    @abstractmethod
    def get_asset_price(self, asset: str) -> int:
        """Price of one whole unit of *asset* in wei."""


class LendingRateOracle(ABC):
    @abstractmethod
    def get_market_borrow_rate(self, asset: str) -> int:
        """Reference market borrow rate for *asset*, in ray."""


class MarketDataProvider(PriceOracle, LendingRateOracle):
    """Source of market parameters for listing and valuing reserves."""

    @abstractmethod
    def get_strategy_params(self, asset: str) -> InterestRateStrategyParams:
        """Interest rate curve parameters for *asset*."""

    @abstractmethod
    def get_reserve_configuration(self, asset: str) -> ReserveConfiguration:
        """Packed reserve configuration for *asset*."""
