"""Exception hierarchy.

Every error carries the Aave-style numeric ``code`` of the check that failed so
callers can surface a stable identifier to end users.
"""


class LendingCoreError(Exception):
    """Base class for all lendcore errors."""

    code: str = ""

    def __init__(self, message: str = "", code: str | None = None) -> None:
        if code is not None:
            self.code = code
        super().__init__(f"[{self.code}] {message}" if self.code else message)


class ReserveAlreadyInitializedError(LendingCoreError):
    code = "32"  # RL_RESERVE_ALREADY_INITIALIZED


class ReserveNotFoundError(LendingCoreError, KeyError):
    code = "LP_RESERVE_NOT_LISTED"


class TooManyReservesError(LendingCoreError):
    code = "59"  # LP_NO_MORE_RESERVES_ALLOWED


class InvalidConfigurationError(LendingCoreError, ValueError):
    code = "RC_INVALID_CONFIGURATION"


class MathOverflowError(LendingCoreError, OverflowError):
    code = "48"  # MATH_MULTIPLICATION_OVERFLOW


class DivisionByZeroError(LendingCoreError, ZeroDivisionError):
    code = "50"  # MATH_DIVISION_BY_ZERO


class ArithmeticUnderflowError(LendingCoreError, ArithmeticError):
    code = "MATH_SUBTRACTION_UNDERFLOW"


class ReserveNotInitializedError(LendingCoreError):
    code = "RL_RESERVE_NOT_INITIALIZED"
