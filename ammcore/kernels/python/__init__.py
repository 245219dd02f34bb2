"""
Integer kernels for the pool engine.

No floats, no I/O: every function takes and returns ints (or frozen result
records of ints) and fails with `AmmError` when a value leaves the u128 domain.
"""

from .cpmm_swap import BPS_DENOM, swap_exact_in, swap_exact_out
from .fixed_point import U128_MAX, Rounding, integer_sqrt, mul_div
from .lp_math import burn_liquidity, mint_liquidity, optimal_liquidity

__all__ = [
    "BPS_DENOM",
    "swap_exact_in",
    "swap_exact_out",
    "U128_MAX",
    "Rounding",
    "integer_sqrt",
    "mul_div",
    "burn_liquidity",
    "mint_liquidity",
    "optimal_liquidity",
]
