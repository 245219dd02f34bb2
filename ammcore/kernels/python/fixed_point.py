"""
Fixed-point arithmetic kernel.

All reserve, fee and LP-share math routes through `mul_div` so the rounding
direction of every division is an explicit argument:
- amounts paid out by the pool (swap output, withdrawals) and LP units minted
  to users round DOWN,
- amounts retained by the pool (fees) round UP.

Working widths follow the ledger's integer types: operands and results are
u128, intermediate products must fit in u256.
"""

from __future__ import annotations

import math
from enum import Enum

from ...errors import AmmError, ErrorKind


U128_MAX = (1 << 128) - 1
U256_MAX = (1 << 256) - 1


class Rounding(Enum):
    DOWN = "down"
    UP = "up"


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def require_u128(name: str, value: int) -> int:
    """Return `value` if it is a u128, else raise (TypeError for non-ints, Overflow otherwise)."""
    _require_int(name, value)
    if value < 0:
        raise AmmError(ErrorKind.OVERFLOW, f"{name} must be non-negative: {value}")
    if value > U128_MAX:
        raise AmmError(ErrorKind.OVERFLOW, f"{name} exceeds u128: {value}")
    return value


def checked_add(a: int, b: int) -> int:
    require_u128("a", a)
    require_u128("b", b)
    total = a + b
    if total > U128_MAX:
        raise AmmError(ErrorKind.OVERFLOW, f"u128 addition overflow: {a} + {b}")
    return total


def checked_sub(a: int, b: int) -> int:
    require_u128("a", a)
    require_u128("b", b)
    if b > a:
        raise AmmError(ErrorKind.OVERFLOW, f"u128 subtraction underflow: {a} - {b}")
    return a - b


def mul_div(a: int, b: int, denom: int, rounding: Rounding = Rounding.DOWN) -> int:
    """
    Compute `a * b / denom` with explicit rounding.

    Raises:
        AmmError(Overflow): an operand or the result does not fit in u128, or
            the product does not fit in u256.
        AmmError(DivisionByZero): `denom == 0`.
    """
    require_u128("a", a)
    require_u128("b", b)
    require_u128("denom", denom)
    if not isinstance(rounding, Rounding):
        raise TypeError("rounding must be a Rounding")
    if denom == 0:
        raise AmmError(ErrorKind.DIVISION_BY_ZERO, "mul_div denominator is zero")

    product = a * b
    if product > U256_MAX:
        raise AmmError(ErrorKind.OVERFLOW, "mul_div product exceeds u256")

    if rounding is Rounding.DOWN:
        result = product // denom
    else:
        result = (product + denom - 1) // denom

    if result > U128_MAX:
        raise AmmError(ErrorKind.OVERFLOW, f"mul_div result exceeds u128: {result}")
    return result


def integer_sqrt(n: int) -> int:
    """Floor square root of a u256 value (exact, no floats)."""
    _require_int("n", n)
    if n < 0:
        raise AmmError(ErrorKind.OVERFLOW, f"integer_sqrt of a negative value: {n}")
    if n > U256_MAX:
        raise AmmError(ErrorKind.OVERFLOW, "integer_sqrt input exceeds u256")
    return math.isqrt(n)
