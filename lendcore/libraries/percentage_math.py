"""Percentage arithmetic with two decimals of precision (10000 = 100.00%)."""

from lendcore.data.constants import HALF_PERCENT, MAX_UINT256, PERCENTAGE_FACTOR
from lendcore.errors import DivisionByZeroError, MathOverflowError


def percent_mul(value: int, percentage: int) -> int:
    """Return ``value * percentage / 100.00%`` rounded half up."""
    if value == 0 or percentage == 0:
        return 0
    if value > (MAX_UINT256 - HALF_PERCENT) // percentage:
        raise MathOverflowError("percent_mul overflow")
    return (value * percentage + HALF_PERCENT) // PERCENTAGE_FACTOR


def percent_div(value: int, percentage: int) -> int:
    """Return ``value * 100.00% / percentage`` rounded half up."""
    if percentage == 0:
        raise DivisionByZeroError("percent_div by zero")
    half_percentage = percentage // 2
    if value > (MAX_UINT256 - half_percentage) // PERCENTAGE_FACTOR:
        raise MathOverflowError("percent_div overflow")
    return (value * PERCENTAGE_FACTOR + half_percentage) // percentage
