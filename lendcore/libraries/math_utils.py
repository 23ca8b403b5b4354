"""Interest accumulation factors.

Rates are annual ray values; elapsed time is measured in whole seconds.
"""

from lendcore.data.constants import RAY, SECONDS_PER_YEAR, TIMESTAMP_MASK
from lendcore.errors import ArithmeticUnderflowError
from lendcore.libraries.wad_ray_math import ray_mul


def _elapsed(last_update_timestamp: int, current_timestamp: int) -> int:
    elapsed = (current_timestamp & TIMESTAMP_MASK) - last_update_timestamp
    if elapsed < 0:
        raise ArithmeticUnderflowError(
            f"timestamp {current_timestamp} precedes last update {last_update_timestamp}"
        )
    return elapsed


def calculate_linear_interest(
    rate: int, last_update_timestamp: int, current_timestamp: int
) -> int:
    """Linear interest factor ``1 + rate * dt / year`` in ray."""
    elapsed = _elapsed(last_update_timestamp, current_timestamp)
    return rate * elapsed // SECONDS_PER_YEAR + RAY


def calculate_compounded_interest(
    rate: int, last_update_timestamp: int, current_timestamp: int
) -> int:
    """Compounded interest factor in ray.

    ``(1 + r)^n`` with ``r`` the per-second rate is approximated by the
    binomial expansion truncated after the second-order term::

        1 + r*n + r^2 * n*(n-1)/2

    The truncation undershoots the exact exponential slightly; the error is
    negligible for realistic per-second rates.
    """
    n = _elapsed(last_update_timestamp, current_timestamp)
    if n == 0:
        return RAY

    rate_per_second = rate // SECONDS_PER_YEAR
    base_power_two = ray_mul(rate_per_second, rate_per_second)

    second_term = n * (n - 1) * base_power_two // 2

    return RAY + rate_per_second * n + second_term
