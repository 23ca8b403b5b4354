"""Per-user reserve usage bitmap.

Each reserve id owns two adjacent bits: bit ``2*id`` marks borrowing and bit
``2*id + 1`` marks usage as collateral. The id is the reserve's position in the
registry's dense reserve list.
"""

from __future__ import annotations

from lendcore.data.constants import MAX_NUMBER_RESERVES
from lendcore.errors import InvalidConfigurationError

BORROWING_MASK = int("01" * MAX_NUMBER_RESERVES, 2)


def _check_index(reserve_index: int) -> None:
    if not 0 <= reserve_index < MAX_NUMBER_RESERVES:
        raise InvalidConfigurationError(f"invalid reserve index {reserve_index}")


class UserConfiguration:
    """Bitmap of the reserves a user borrows from or uses as collateral."""

    __slots__ = ("data",)

    def __init__(self, data: int = 0) -> None:
        self.data = data

    def __repr__(self) -> str:
        return f"UserConfiguration({self.data:#x})"

    def set_borrowing(self, reserve_index: int, borrowing: bool) -> None:
        _check_index(reserve_index)
        bit = 1 << (reserve_index * 2)
        self.data = self.data | bit if borrowing else self.data & ~bit

    def set_using_as_collateral(self, reserve_index: int, using: bool) -> None:
        _check_index(reserve_index)
        bit = 1 << (reserve_index * 2 + 1)
        self.data = self.data | bit if using else self.data & ~bit

    def is_using_as_collateral_or_borrowing(self, reserve_index: int) -> bool:
        _check_index(reserve_index)
        return (self.data >> (reserve_index * 2)) & 3 != 0

    def is_borrowing(self, reserve_index: int) -> bool:
        _check_index(reserve_index)
        return (self.data >> (reserve_index * 2)) & 1 != 0

    def is_using_as_collateral(self, reserve_index: int) -> bool:
        _check_index(reserve_index)
        return (self.data >> (reserve_index * 2 + 1)) & 1 != 0

    def is_borrowing_any(self) -> bool:
        return self.data & BORROWING_MASK != 0

    def is_empty(self) -> bool:
        return self.data == 0
