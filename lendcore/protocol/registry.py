"""Reserve repository.

Reserves live in a dense list; a reserve's position in that list is its id and
also its bit position in every ``UserConfiguration``. Ids are assigned once and
never reused, so the list and the user bitmaps stay aligned.
"""

from __future__ import annotations

import logging
from typing import Iterator

from lendcore.data.constants import MAX_NUMBER_RESERVES
from lendcore.data.interfaces import (
    DepositToken,
    PriceOracle,
    StableDebtToken,
    VariableDebtToken,
)
from lendcore.errors import ReserveNotFoundError, TooManyReservesError
from lendcore.libraries.reserve_configuration import ReserveConfiguration
from lendcore.libraries.user_configuration import UserConfiguration
from lendcore.protocol.account import AccountData, calculate_user_account_data
from lendcore.protocol.events import EventEmitter, Listener
from lendcore.protocol.interest_rate import InterestRateStrategy
from lendcore.protocol.reserve import Reserve

logger = logging.getLogger(__name__)


class ReserveRegistry:
    """All listed reserves, addressable by asset or by id."""

    def __init__(self, max_reserves: int = MAX_NUMBER_RESERVES) -> None:
        self._reserves: list[Reserve] = []
        self._ids: dict[str, int] = {}
        self._max_reserves = max_reserves
        self.events = EventEmitter()

    def __len__(self) -> int:
        return len(self._reserves)

    def __iter__(self) -> Iterator[Reserve]:
        return iter(self._reserves)

    def __contains__(self, asset: object) -> bool:
        return asset in self._ids

    def init_reserve(
        self,
        asset: str,
        deposit_token: DepositToken,
        stable_debt_token: StableDebtToken,
        variable_debt_token: VariableDebtToken,
        interest_rate_strategy: InterestRateStrategy,
        configuration: ReserveConfiguration | None = None,
    ) -> Reserve:
        """List *asset* and initialize its reserve.

        Raises:
            ReserveAlreadyInitializedError: *asset* is already listed.
            TooManyReservesError: The registry is full.
        """
        if asset in self._ids:
            # Re-running init on the existing record raises the proper error
            self._reserves[self._ids[asset]].init(
                deposit_token, stable_debt_token, variable_debt_token, interest_rate_strategy
            )
        if len(self._reserves) >= self._max_reserves:
            raise TooManyReservesError(f"cannot list more than {self._max_reserves} reserves")

        reserve = Reserve(
            asset=asset,
            configuration=configuration or ReserveConfiguration(),
            id=len(self._reserves),
            events=self.events,
        )
        reserve.init(deposit_token, stable_debt_token, variable_debt_token, interest_rate_strategy)

        self._ids[asset] = reserve.id
        self._reserves.append(reserve)
        logger.info("Listed %s as reserve %d", asset, reserve.id)
        return reserve

    def get_reserve(self, asset: str) -> Reserve:
        try:
            return self._reserves[self._ids[asset]]
        except KeyError:
            raise ReserveNotFoundError(f"reserve {asset} is not listed") from None

    def get_reserve_by_id(self, reserve_id: int) -> Reserve:
        if not 0 <= reserve_id < len(self._reserves):
            raise ReserveNotFoundError(f"no reserve with id {reserve_id}")
        return self._reserves[reserve_id]

    def reserves_list(self) -> list[str]:
        """Listed assets ordered by reserve id."""
        return [reserve.asset for reserve in self._reserves]

    def subscribe(self, listener: Listener) -> None:
        self.events.subscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self.events.unsubscribe(listener)

    def get_user_account_data(
        self, user: str, user_config: UserConfiguration, oracle: PriceOracle
    ) -> AccountData:
        return calculate_user_account_data(user, self._reserves, user_config, oracle)
