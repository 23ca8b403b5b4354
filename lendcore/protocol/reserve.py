"""Reserve state and the accrual engine.

A reserve keeps two cumulative ray indices. The liquidity index grows with the
deposit rate and converts scaled deposit balances into underlying; the variable
borrow index grows with the variable rate and does the same for variable debt.
Both start at 1.0 and are only ever multiplied upward, so any holder's balance
can be derived on demand without touching per-user state.

Every mutating operation computes and range-checks all new values before it
commits any of them, so a failed call leaves the reserve as it was.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from lendcore.data.constants import MAX_UINT128, RAY, TIMESTAMP_MASK
from lendcore.data.interfaces import (
    DepositToken,
    StableDebtToken,
    VariableDebtToken,
)
from lendcore.errors import (
    ArithmeticUnderflowError,
    MathOverflowError,
    ReserveAlreadyInitializedError,
    ReserveNotInitializedError,
)
from lendcore.libraries.math_utils import (
    calculate_compounded_interest,
    calculate_linear_interest,
)
from lendcore.libraries.percentage_math import percent_mul
from lendcore.libraries.reserve_configuration import ReserveConfiguration
from lendcore.libraries.wad_ray_math import ray_div, ray_mul, wad_to_ray
from lendcore.protocol.events import EventEmitter, ReserveDataUpdated
from lendcore.protocol.interest_rate import InterestRates, InterestRateStrategy

logger = logging.getLogger(__name__)

# Error codes of the 128-bit storage checks
LIQUIDITY_INDEX_OVERFLOW = "24"
VARIABLE_BORROW_INDEX_OVERFLOW = "25"
LIQUIDITY_RATE_OVERFLOW = "26"
VARIABLE_BORROW_RATE_OVERFLOW = "27"
STABLE_BORROW_RATE_OVERFLOW = "28"


def _check_uint128(value: int, code: str, name: str) -> int:
    if value > MAX_UINT128:
        raise MathOverflowError(f"{name} {value} exceeds 128 bits", code=code)
    return value


@dataclass
class Reserve:
    """Accounting record of one listed asset."""

    asset: str
    configuration: ReserveConfiguration = field(default_factory=ReserveConfiguration)
    id: int = 0
    liquidity_index: int = 0
    variable_borrow_index: int = 0
    current_liquidity_rate: int = 0
    current_variable_borrow_rate: int = 0
    current_stable_borrow_rate: int = 0
    last_update_timestamp: int = 0
    deposit_token: DepositToken | None = None
    stable_debt_token: StableDebtToken | None = None
    variable_debt_token: VariableDebtToken | None = None
    interest_rate_strategy: InterestRateStrategy | None = None
    events: EventEmitter = field(default_factory=EventEmitter, repr=False)

    @property
    def is_initialized(self) -> bool:
        return self.deposit_token is not None

    def _require_initialized(self) -> None:
        if not self.is_initialized:
            raise ReserveNotInitializedError(f"reserve {self.asset} is not initialized")

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    def init(
        self,
        deposit_token: DepositToken,
        stable_debt_token: StableDebtToken,
        variable_debt_token: VariableDebtToken,
        interest_rate_strategy: InterestRateStrategy,
    ) -> None:
        """Attach collaborators and set both indices to 1.0 ray.

        Raises:
            ReserveAlreadyInitializedError: The reserve already has a deposit token.
        """
        if self.is_initialized:
            raise ReserveAlreadyInitializedError(f"reserve {self.asset} already initialized")

        self.liquidity_index = RAY
        self.variable_borrow_index = RAY
        self.deposit_token = deposit_token
        self.stable_debt_token = stable_debt_token
        self.variable_debt_token = variable_debt_token
        self.interest_rate_strategy = interest_rate_strategy
        logger.info("Initialized reserve %s (id=%d)", self.asset, self.id)

    # ------------------------------------------------------------------
    # Read-only projections
    # ------------------------------------------------------------------

    def get_normalized_income(self, timestamp: int) -> int:
        """Liquidity index projected linearly to *timestamp*. Does not mutate."""
        if self.last_update_timestamp == timestamp & TIMESTAMP_MASK:
            return self.liquidity_index
        cumulated = calculate_linear_interest(
            self.current_liquidity_rate, self.last_update_timestamp, timestamp
        )
        return ray_mul(cumulated, self.liquidity_index)

    def get_normalized_debt(self, timestamp: int) -> int:
        """Variable borrow index compounded to *timestamp*. Does not mutate."""
        if self.last_update_timestamp == timestamp & TIMESTAMP_MASK:
            return self.variable_borrow_index
        cumulated = calculate_compounded_interest(
            self.current_variable_borrow_rate, self.last_update_timestamp, timestamp
        )
        return ray_mul(cumulated, self.variable_borrow_index)

    # ------------------------------------------------------------------
    # Accrual
    # ------------------------------------------------------------------

    def update_state(self, timestamp: int) -> None:
        """Accrue interest since the last update into both indices.

        A second call within the same second is a no-op. When the reserve
        factor is non-zero the treasury's share of the interest accrued on
        debt is minted (or burned, for a net decrease) on the deposit token.
        """
        self._require_initialized()
        scaled_variable_debt = self.variable_debt_token.scaled_total_supply()

        current_timestamp = timestamp & TIMESTAMP_MASK
        previous_timestamp = self.last_update_timestamp
        if previous_timestamp == current_timestamp:
            return
        if current_timestamp < previous_timestamp:
            raise ArithmeticUnderflowError(
                f"timestamp {current_timestamp} precedes last update {previous_timestamp}"
            )

        previous_variable_borrow_index = self.variable_borrow_index
        new_liquidity_index = self.liquidity_index
        new_variable_borrow_index = self.variable_borrow_index

        if self.current_liquidity_rate > 0:
            cumulated_liquidity_interest = calculate_linear_interest(
                self.current_liquidity_rate, previous_timestamp, current_timestamp
            )
            new_liquidity_index = _check_uint128(
                ray_mul(cumulated_liquidity_interest, self.liquidity_index),
                LIQUIDITY_INDEX_OVERFLOW,
                "liquidity index",
            )

            if scaled_variable_debt != 0:
                cumulated_variable_interest = calculate_compounded_interest(
                    self.current_variable_borrow_rate, previous_timestamp, current_timestamp
                )
                new_variable_borrow_index = _check_uint128(
                    ray_mul(cumulated_variable_interest, self.variable_borrow_index),
                    VARIABLE_BORROW_INDEX_OVERFLOW,
                    "variable borrow index",
                )

        skim = self.calculate_treasury_skim(
            scaled_variable_debt,
            previous_variable_borrow_index,
            new_variable_borrow_index,
            previous_timestamp,
        )
        if skim > 0:
            self.deposit_token.mint_to_treasury(skim, new_liquidity_index)
        elif skim < 0:
            self.deposit_token.burn_from_treasury(-skim, new_liquidity_index)

        self.liquidity_index = new_liquidity_index
        self.variable_borrow_index = new_variable_borrow_index
        self.last_update_timestamp = current_timestamp

        logger.debug(
            "%s updated at %d: liquidity_index=%d variable_borrow_index=%d treasury=%d",
            self.asset,
            current_timestamp,
            new_liquidity_index,
            new_variable_borrow_index,
            skim,
        )

    def calculate_treasury_skim(
        self,
        scaled_variable_debt: int,
        previous_variable_borrow_index: int,
        new_variable_borrow_index: int,
        previous_timestamp: int,
    ) -> int:
        """Signed treasury share of the debt accrued since *previous_timestamp*.

        Returns 0 when the reserve factor is 0. A negative value means total
        debt shrank net of interest and the treasury share must be burned.
        """
        reserve_factor = self.configuration.get_reserve_factor()
        if reserve_factor == 0:
            return 0

        supply = self.stable_debt_token.get_supply_data()

        previous_variable_debt = ray_mul(scaled_variable_debt, previous_variable_borrow_index)
        current_variable_debt = ray_mul(scaled_variable_debt, new_variable_borrow_index)

        cumulated_stable_interest = calculate_compounded_interest(
            supply.average_rate, supply.last_updated_timestamp, previous_timestamp
        )
        previous_stable_debt = ray_mul(supply.principal_supply, cumulated_stable_interest)

        total_debt_accrued = (
            current_variable_debt
            + supply.total_supply
            - previous_variable_debt
            - previous_stable_debt
        )
        amount = percent_mul(abs(total_debt_accrued), reserve_factor)
        return amount if total_debt_accrued >= 0 else -amount

    def update_interest_rates(
        self, liquidity_added: int = 0, liquidity_taken: int = 0
    ) -> InterestRates:
        """Refresh the three current rates from the strategy.

        Args:
            liquidity_added: Underlying entering the reserve in this operation.
            liquidity_taken: Underlying leaving the reserve in this operation.

        Returns:
            The newly stored rates. A ``ReserveDataUpdated`` event is emitted.
        """
        self._require_initialized()

        total_stable_debt, average_stable_rate = (
            self.stable_debt_token.get_total_supply_and_avg_rate()
        )
        total_variable_debt = ray_mul(
            self.variable_debt_token.scaled_total_supply(), self.variable_borrow_index
        )
        available_liquidity = (
            self.deposit_token.available_liquidity() + liquidity_added - liquidity_taken
        )
        if available_liquidity < 0:
            raise ArithmeticUnderflowError(
                f"{self.asset}: liquidity taken exceeds available liquidity"
            )

        rates = self.interest_rate_strategy.compute_rates(
            available_liquidity,
            total_stable_debt,
            total_variable_debt,
            average_stable_rate,
            self.configuration.get_reserve_factor(),
        )
        _check_uint128(rates.liquidity_rate, LIQUIDITY_RATE_OVERFLOW, "liquidity rate")
        _check_uint128(
            rates.stable_borrow_rate, STABLE_BORROW_RATE_OVERFLOW, "stable borrow rate"
        )
        _check_uint128(
            rates.variable_borrow_rate, VARIABLE_BORROW_RATE_OVERFLOW, "variable borrow rate"
        )

        self.current_liquidity_rate = rates.liquidity_rate
        self.current_stable_borrow_rate = rates.stable_borrow_rate
        self.current_variable_borrow_rate = rates.variable_borrow_rate

        self.events.emit(
            ReserveDataUpdated(
                asset=self.asset,
                liquidity_rate=rates.liquidity_rate,
                stable_borrow_rate=rates.stable_borrow_rate,
                variable_borrow_rate=rates.variable_borrow_rate,
                liquidity_index=self.liquidity_index,
                variable_borrow_index=self.variable_borrow_index,
            )
        )
        return rates

    def cumulate_to_liquidity_index(self, total_liquidity: int, amount: int) -> int:
        """Distribute *amount* to depositors by bumping the liquidity index.

        Used for one-off income such as flash loan fees. Returns the new index.
        """
        self._require_initialized()
        amount_to_liquidity_ratio = ray_div(wad_to_ray(amount), wad_to_ray(total_liquidity))
        new_index = _check_uint128(
            ray_mul(amount_to_liquidity_ratio + RAY, self.liquidity_index),
            LIQUIDITY_INDEX_OVERFLOW,
            "liquidity index",
        )
        self.liquidity_index = new_index
        return new_index
