"""Bit-packed reserve configuration.

Layout of the 256-bit configuration word (low bits first)::

    bit  0-15   LTV                          (percentage, 10000 = 100%)
    bit 16-31   liquidation threshold        (percentage)
    bit 32-47   liquidation bonus            (percentage, 10500 = 5% bonus)
    bit 48-55   decimals
    bit 56      reserve is active
    bit 57      reserve is frozen
    bit 58      borrowing is enabled
    bit 59      stable rate borrowing is enabled
    bit 60-63   reserved
    bit 64-79   reserve factor               (percentage)

The field order and widths double as the snapshot wire format and must not
change.
"""

from __future__ import annotations

from dataclasses import dataclass

from lendcore.errors import InvalidConfigurationError

LTV_START_BIT_POSITION = 0
LIQUIDATION_THRESHOLD_START_BIT_POSITION = 16
LIQUIDATION_BONUS_START_BIT_POSITION = 32
RESERVE_DECIMALS_START_BIT_POSITION = 48
IS_ACTIVE_START_BIT_POSITION = 56
IS_FROZEN_START_BIT_POSITION = 57
BORROWING_ENABLED_START_BIT_POSITION = 58
STABLE_BORROWING_ENABLED_START_BIT_POSITION = 59
RESERVE_FACTOR_START_BIT_POSITION = 64

MAX_VALID_LTV = 2**16 - 1
MAX_VALID_LIQUIDATION_THRESHOLD = 2**16 - 1
MAX_VALID_LIQUIDATION_BONUS = 2**16 - 1
MAX_VALID_DECIMALS = 2**8 - 1
MAX_VALID_RESERVE_FACTOR = 2**16 - 1


def _get_field(data: int, start: int, max_value: int) -> int:
    return (data >> start) & max_value


def _set_field(data: int, start: int, max_value: int, value: int, name: str) -> int:
    if not 0 <= value <= max_value:
        raise InvalidConfigurationError(f"{name} {value} out of range [0, {max_value}]")
    return (data & ~(max_value << start)) | (value << start)


@dataclass(frozen=True)
class ReserveParams:
    """Decoded numeric reserve parameters."""

    ltv: int
    liquidation_threshold: int
    liquidation_bonus: int
    decimals: int
    reserve_factor: int


@dataclass(frozen=True)
class ReserveFlags:
    """Decoded reserve state flags."""

    active: bool
    frozen: bool
    borrowing_enabled: bool
    stable_borrowing_enabled: bool


class ReserveConfiguration:
    """Mutable view over a packed reserve configuration word."""

    __slots__ = ("data",)

    def __init__(self, data: int = 0) -> None:
        if data < 0:
            raise InvalidConfigurationError("configuration word must be unsigned")
        self.data = data

    def __repr__(self) -> str:
        return f"ReserveConfiguration({self.data:#x})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ReserveConfiguration):
            return NotImplemented
        return self.data == other.data

    @classmethod
    def from_params(
        cls,
        ltv: int,
        liquidation_threshold: int,
        liquidation_bonus: int,
        decimals: int,
        reserve_factor: int = 0,
        active: bool = True,
        frozen: bool = False,
        borrowing_enabled: bool = True,
        stable_borrowing_enabled: bool = False,
    ) -> ReserveConfiguration:
        """Encode a configuration word from named fields."""
        config = cls()
        config.set_ltv(ltv)
        config.set_liquidation_threshold(liquidation_threshold)
        config.set_liquidation_bonus(liquidation_bonus)
        config.set_decimals(decimals)
        config.set_reserve_factor(reserve_factor)
        config.set_active(active)
        config.set_frozen(frozen)
        config.set_borrowing_enabled(borrowing_enabled)
        config.set_stable_rate_borrowing_enabled(stable_borrowing_enabled)
        return config

    # ------------------------------------------------------------------
    # Numeric fields
    # ------------------------------------------------------------------

    def get_ltv(self) -> int:
        return _get_field(self.data, LTV_START_BIT_POSITION, MAX_VALID_LTV)

    def set_ltv(self, ltv: int) -> None:
        self.data = _set_field(self.data, LTV_START_BIT_POSITION, MAX_VALID_LTV, ltv, "LTV")

    def get_liquidation_threshold(self) -> int:
        return _get_field(
            self.data,
            LIQUIDATION_THRESHOLD_START_BIT_POSITION,
            MAX_VALID_LIQUIDATION_THRESHOLD,
        )

    def set_liquidation_threshold(self, threshold: int) -> None:
        self.data = _set_field(
            self.data,
            LIQUIDATION_THRESHOLD_START_BIT_POSITION,
            MAX_VALID_LIQUIDATION_THRESHOLD,
            threshold,
            "liquidation threshold",
        )

    def get_liquidation_bonus(self) -> int:
        return _get_field(
            self.data, LIQUIDATION_BONUS_START_BIT_POSITION, MAX_VALID_LIQUIDATION_BONUS
        )

    def set_liquidation_bonus(self, bonus: int) -> None:
        self.data = _set_field(
            self.data,
            LIQUIDATION_BONUS_START_BIT_POSITION,
            MAX_VALID_LIQUIDATION_BONUS,
            bonus,
            "liquidation bonus",
        )

    def get_decimals(self) -> int:
        return _get_field(self.data, RESERVE_DECIMALS_START_BIT_POSITION, MAX_VALID_DECIMALS)

    def set_decimals(self, decimals: int) -> None:
        self.data = _set_field(
            self.data,
            RESERVE_DECIMALS_START_BIT_POSITION,
            MAX_VALID_DECIMALS,
            decimals,
            "decimals",
        )

    def get_reserve_factor(self) -> int:
        return _get_field(
            self.data, RESERVE_FACTOR_START_BIT_POSITION, MAX_VALID_RESERVE_FACTOR
        )

    def set_reserve_factor(self, reserve_factor: int) -> None:
        self.data = _set_field(
            self.data,
            RESERVE_FACTOR_START_BIT_POSITION,
            MAX_VALID_RESERVE_FACTOR,
            reserve_factor,
            "reserve factor",
        )

    # ------------------------------------------------------------------
    # Flags
    # ------------------------------------------------------------------

    def _get_flag(self, position: int) -> bool:
        return bool((self.data >> position) & 1)

    def _set_flag(self, position: int, value: bool) -> None:
        self.data = (self.data & ~(1 << position)) | (int(bool(value)) << position)

    def get_active(self) -> bool:
        return self._get_flag(IS_ACTIVE_START_BIT_POSITION)

    def set_active(self, active: bool) -> None:
        self._set_flag(IS_ACTIVE_START_BIT_POSITION, active)

    def get_frozen(self) -> bool:
        return self._get_flag(IS_FROZEN_START_BIT_POSITION)

    def set_frozen(self, frozen: bool) -> None:
        self._set_flag(IS_FROZEN_START_BIT_POSITION, frozen)

    def get_borrowing_enabled(self) -> bool:
        return self._get_flag(BORROWING_ENABLED_START_BIT_POSITION)

    def set_borrowing_enabled(self, enabled: bool) -> None:
        self._set_flag(BORROWING_ENABLED_START_BIT_POSITION, enabled)

    def get_stable_rate_borrowing_enabled(self) -> bool:
        return self._get_flag(STABLE_BORROWING_ENABLED_START_BIT_POSITION)

    def set_stable_rate_borrowing_enabled(self, enabled: bool) -> None:
        self._set_flag(STABLE_BORROWING_ENABLED_START_BIT_POSITION, enabled)

    # ------------------------------------------------------------------
    # Bulk decoding
    # ------------------------------------------------------------------

    def get_params(self) -> ReserveParams:
        return ReserveParams(
            ltv=self.get_ltv(),
            liquidation_threshold=self.get_liquidation_threshold(),
            liquidation_bonus=self.get_liquidation_bonus(),
            decimals=self.get_decimals(),
            reserve_factor=self.get_reserve_factor(),
        )

    def get_flags(self) -> ReserveFlags:
        return ReserveFlags(
            active=self.get_active(),
            frozen=self.get_frozen(),
            borrowing_enabled=self.get_borrowing_enabled(),
            stable_borrowing_enabled=self.get_stable_rate_borrowing_enabled(),
        )
