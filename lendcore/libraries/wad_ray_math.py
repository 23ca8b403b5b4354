"""Wad and ray fixed-point arithmetic.

Two precisions are used throughout the protocol:

- WAD: 18 decimals, token amounts and the health factor
- RAY: 27 decimals, rates and indices

Every operation rounds half up (half the divisor is added before truncating),
which reproduces the reference on-chain results bit for bit. Products are
checked against the 256-bit word before scaling down; an operation that would
overflow raises ``MathOverflowError`` instead of wrapping.
"""

from lendcore.data.constants import (
    HALF_RAY,
    HALF_WAD,
    MAX_UINT256,
    RAY,
    WAD,
    WAD_RAY_RATIO,
)
from lendcore.errors import DivisionByZeroError, MathOverflowError


def wad_mul(a: int, b: int) -> int:
    if a == 0 or b == 0:
        return 0
    if a > (MAX_UINT256 - HALF_WAD) // b:
        raise MathOverflowError("wad_mul overflow")
    return (a * b + HALF_WAD) // WAD


def wad_div(a: int, b: int) -> int:
    if b == 0:
        raise DivisionByZeroError("wad_div by zero")
    half_b = b // 2
    if a > (MAX_UINT256 - half_b) // WAD:
        raise MathOverflowError("wad_div overflow")
    return (a * WAD + half_b) // b


def ray_mul(a: int, b: int) -> int:
    if a == 0 or b == 0:
        return 0
    if a > (MAX_UINT256 - HALF_RAY) // b:
        raise MathOverflowError("ray_mul overflow")
    return (a * b + HALF_RAY) // RAY


def ray_div(a: int, b: int) -> int:
    if b == 0:
        raise DivisionByZeroError("ray_div by zero")
    half_b = b // 2
    if a > (MAX_UINT256 - half_b) // RAY:
        raise MathOverflowError("ray_div overflow")
    return (a * RAY + half_b) // b


def ray_to_wad(a: int) -> int:
    half_ratio = WAD_RAY_RATIO // 2
    if a > MAX_UINT256 - half_ratio:
        raise MathOverflowError("ray_to_wad overflow")
    return (a + half_ratio) // WAD_RAY_RATIO


def wad_to_ray(a: int) -> int:
    result = a * WAD_RAY_RATIO
    if result > MAX_UINT256:
        raise MathOverflowError("wad_to_ray overflow")
    return result
