"""
Liquidity math kernel.

Pure functions with explicit rounding rules:
- initial mint is the integer geometric mean of the two deposits,
- subsequent mints take the smaller of the two proportional shares (round down),
- burns pay out proportional reserves (round down).
"""

from __future__ import annotations

from dataclasses import dataclass

from ...errors import AmmError, ErrorKind
from .fixed_point import Rounding, checked_add, checked_sub, integer_sqrt, mul_div, require_u128


@dataclass(frozen=True)
class OptimalLiquidityResult:
    amount0_used: int
    amount1_used: int
    amount0_refund: int
    amount1_refund: int


@dataclass(frozen=True)
class MintLiquidityResult:
    liquidity_minted: int
    new_reserve0: int
    new_reserve1: int
    new_total_supply: int
    initial: bool


@dataclass(frozen=True)
class BurnLiquidityResult:
    amount0_out: int
    amount1_out: int
    new_reserve0: int
    new_reserve1: int
    new_total_supply: int


def optimal_liquidity(
    *,
    reserve0: int,
    reserve1: int,
    amount0_desired: int,
    amount1_desired: int,
) -> OptimalLiquidityResult:
    """
    Compute ratio-preserving used amounts and refunds.

    For an empty pool (reserve0 == 0 or reserve1 == 0), uses everything and refunds nothing.
    """
    for name, v in (
        ("reserve0", reserve0),
        ("reserve1", reserve1),
        ("amount0_desired", amount0_desired),
        ("amount1_desired", amount1_desired),
    ):
        require_u128(name, v)

    if amount0_desired <= 0 or amount1_desired <= 0:
        raise AmmError(ErrorKind.INVALID_AMOUNT, "desired amounts must be positive")

    if reserve0 == 0 or reserve1 == 0:
        return OptimalLiquidityResult(
            amount0_used=amount0_desired,
            amount1_used=amount1_desired,
            amount0_refund=0,
            amount1_refund=0,
        )

    amount1_from_amount0 = mul_div(amount0_desired, reserve1, reserve0, Rounding.DOWN)
    if amount1_from_amount0 <= amount1_desired:
        amount0_used = amount0_desired
        amount1_used = amount1_from_amount0
    else:
        amount0_used = mul_div(amount1_desired, reserve0, reserve1, Rounding.DOWN)
        amount1_used = amount1_desired

    if amount0_used <= 0 or amount1_used <= 0:
        raise AmmError(ErrorKind.INVALID_AMOUNT, "deposit too small for the current pool ratio")
    if amount0_used > amount0_desired or amount1_used > amount1_desired:
        raise AssertionError("used amounts exceed desired amounts")

    return OptimalLiquidityResult(
        amount0_used=amount0_used,
        amount1_used=amount1_used,
        amount0_refund=amount0_desired - amount0_used,
        amount1_refund=amount1_desired - amount1_used,
    )


def mint_liquidity_initial(*, amount0: int, amount1: int) -> int:
    """Initial liquidity mint: `floor(sqrt(amount0 * amount1))`."""
    require_u128("amount0", amount0)
    require_u128("amount1", amount1)

    minted = integer_sqrt(amount0 * amount1)
    if minted == 0:
        raise AmmError(ErrorKind.DEGENERATE_INITIAL_DEPOSIT, "sqrt(amount0 * amount1) rounds to zero")
    return minted


def mint_liquidity(
    *,
    reserve0: int,
    reserve1: int,
    total_supply: int,
    amount0: int,
    amount1: int,
) -> MintLiquidityResult:
    """
    Mint LP units for a deposit of exactly (amount0, amount1).

    Both amounts are added to the reserves in full; any excess over the pool
    ratio is not credited (the smaller share wins).
    """
    for name, v in (
        ("reserve0", reserve0),
        ("reserve1", reserve1),
        ("total_supply", total_supply),
        ("amount0", amount0),
        ("amount1", amount1),
    ):
        require_u128(name, v)

    if amount0 <= 0 or amount1 <= 0:
        raise AmmError(ErrorKind.INVALID_AMOUNT, f"deposit amounts must be positive: ({amount0}, {amount1})")

    if total_supply == 0:
        if reserve0 != 0 or reserve1 != 0:
            raise AmmError(ErrorKind.INVALID_RESERVES, "cannot mint initial liquidity when reserves are non-zero")
        minted = mint_liquidity_initial(amount0=amount0, amount1=amount1)
        return MintLiquidityResult(
            liquidity_minted=minted,
            new_reserve0=amount0,
            new_reserve1=amount1,
            new_total_supply=minted,
            initial=True,
        )

    if reserve0 == 0 or reserve1 == 0:
        raise AmmError(ErrorKind.INVALID_RESERVES, "cannot mint into an empty pool when total_supply > 0")

    liquidity0 = mul_div(amount0, total_supply, reserve0, Rounding.DOWN)
    liquidity1 = mul_div(amount1, total_supply, reserve1, Rounding.DOWN)
    minted = min(liquidity0, liquidity1)
    if minted == 0:
        raise AmmError(ErrorKind.INSUFFICIENT_LIQUIDITY, "liquidity_minted is zero (deposit too small)")

    return MintLiquidityResult(
        liquidity_minted=minted,
        new_reserve0=checked_add(reserve0, amount0),
        new_reserve1=checked_add(reserve1, amount1),
        new_total_supply=checked_add(total_supply, minted),
        initial=False,
    )


def burn_liquidity(*, lp_amount: int, reserve0: int, reserve1: int, total_supply: int) -> BurnLiquidityResult:
    """
    Burn LP units for underlying assets (floor rounding).

    Burning the whole supply pays out both reserves exactly.
    """
    for name, v in (
        ("reserve0", reserve0),
        ("reserve1", reserve1),
        ("total_supply", total_supply),
    ):
        require_u128(name, v)
    if not isinstance(lp_amount, int) or isinstance(lp_amount, bool):
        raise TypeError("lp_amount must be an int")

    if lp_amount <= 0:
        raise AmmError(ErrorKind.INVALID_BURN_AMOUNT, f"lp_amount must be positive: {lp_amount}")
    if lp_amount > total_supply:
        raise AmmError(ErrorKind.INVALID_BURN_AMOUNT, f"cannot burn more than total_supply: {lp_amount} > {total_supply}")

    amount0_out = mul_div(lp_amount, reserve0, total_supply, Rounding.DOWN)
    amount1_out = mul_div(lp_amount, reserve1, total_supply, Rounding.DOWN)

    return BurnLiquidityResult(
        amount0_out=amount0_out,
        amount1_out=amount1_out,
        new_reserve0=checked_sub(reserve0, amount0_out),
        new_reserve1=checked_sub(reserve1, amount1_out),
        new_total_supply=total_supply - lp_amount,
    )
