"""
Constant Product Market Maker (CPMM) pricing.

Maps a pool record and a swap direction onto the swap kernel:
    net_in = floor(amount_in * (10_000 - fee_bps) / 10_000)
    fee_paid = amount_in - net_in                (pool keeps the rounding)
    amount_out = floor(net_in * reserve_out / (reserve_in + net_in))
    new_reserve_in = reserve_in + amount_in      (fee stays in pool)
    new_reserve_out = reserve_out - amount_out

Invariant: new_reserve_a * new_reserve_b >= reserve_a * reserve_b
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..kernels.python.cpmm_swap import BPS_DENOM
from ..kernels.python.cpmm_swap import swap_exact_in as _kernel_swap_exact_in
from ..kernels.python.cpmm_swap import swap_exact_out as _kernel_swap_exact_out
from ..state.pools import PoolState


@dataclass(frozen=True)
class SwapQuote:
    amount_out: int
    fee_paid: int
    new_reserve_a: int
    new_reserve_b: int
    amount_in: int


def _orient(state: PoolState, a_to_b: bool) -> Tuple[int, int]:
    if not isinstance(a_to_b, bool):
        raise TypeError("a_to_b must be a bool")
    if a_to_b:
        return state.reserve_a, state.reserve_b
    return state.reserve_b, state.reserve_a


def _reserves_after(a_to_b: bool, new_reserve_in: int, new_reserve_out: int) -> Tuple[int, int]:
    if a_to_b:
        return new_reserve_in, new_reserve_out
    return new_reserve_out, new_reserve_in


def quote_swap(state: PoolState, amount_in: int, a_to_b: bool) -> SwapQuote:
    """
    Exact-in swap quote and post-swap reserves.

    Raises:
        AmmError(InvalidReserves): either reserve is zero.
        AmmError(InsufficientLiquidity): output rounds to zero or would drain the output side.
        AmmError(Overflow): an intermediate leaves the u128/u256 domain.
    """
    reserve_in, reserve_out = _orient(state, a_to_b)
    res = _kernel_swap_exact_in(
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_in=amount_in,
        fee_bps=state.fee_bps,
    )
    new_a, new_b = _reserves_after(a_to_b, res.new_reserve_in, res.new_reserve_out)
    if new_a * new_b < state.constant_product:
        raise AssertionError("CPMM invariant violated: k decreased")
    return SwapQuote(
        amount_out=res.amount_out,
        fee_paid=res.fee_total,
        new_reserve_a=new_a,
        new_reserve_b=new_b,
        amount_in=amount_in,
    )


def quote_swap_exact_out(state: PoolState, amount_out: int, a_to_b: bool) -> SwapQuote:
    """
    Smallest exact-in swap paying at least `amount_out`.

    The returned quote is the exact-in quote for that input, so a validator
    recomputing `quote_swap(state, quote.amount_in, a_to_b)` gets the same
    post-state.
    """
    reserve_in, reserve_out = _orient(state, a_to_b)
    res = _kernel_swap_exact_out(
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_out=amount_out,
        fee_bps=state.fee_bps,
    )
    new_a, new_b = _reserves_after(a_to_b, res.new_reserve_in, res.new_reserve_out)
    return SwapQuote(
        amount_out=res.amount_out,
        fee_paid=res.fee_total,
        new_reserve_a=new_a,
        new_reserve_b=new_b,
        amount_in=res.amount_in,
    )


def price_impact_bps(state: PoolState, amount_in: int, a_to_b: bool) -> int:
    """
    Relative drop of the pool's marginal price caused by the swap, in bps (rounded up).

    Marginal price is `reserve_out / reserve_in` before and after the swap.
    """
    reserve_in, reserve_out = _orient(state, a_to_b)
    quote = quote_swap(state, amount_in, a_to_b)
    new_in, new_out = _orient_after(quote, a_to_b)

    # after / before = (new_out * reserve_in) / (new_in * reserve_out) <= 1
    ratio_bps = (new_out * reserve_in * BPS_DENOM) // (new_in * reserve_out)
    return max(0, BPS_DENOM - ratio_bps)


def _orient_after(quote: SwapQuote, a_to_b: bool) -> Tuple[int, int]:
    if a_to_b:
        return quote.new_reserve_a, quote.new_reserve_b
    return quote.new_reserve_b, quote.new_reserve_a
