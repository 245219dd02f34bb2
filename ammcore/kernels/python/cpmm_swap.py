"""
CPMM swap kernel.

- Fee is charged on the *gross* input amount; the pool keeps the rounding.
  `net_in = floor(gross_in * (10_000 - fee_bps) / 10_000)`, so
  `fee_total = gross_in - net_in = ceil(gross_in * fee_bps / 10_000)`.
- Pricing uses `net_in` (Uniswap-v2 style).
- The whole gross input (fee included) is added to the input reserve.
- A swap may never pay out the full output reserve.
"""

from __future__ import annotations

from dataclasses import dataclass

from ...errors import AmmError, ErrorKind
from .fixed_point import Rounding, checked_add, checked_sub, mul_div, require_u128


BPS_DENOM = 10_000


def _require_fee_bps(fee_bps: int) -> None:
    if not isinstance(fee_bps, int) or isinstance(fee_bps, bool):
        raise TypeError("fee_bps must be an int")
    if not (0 <= fee_bps < BPS_DENOM):
        raise AmmError(ErrorKind.INVALID_STATE, f"fee_bps must be in [0, {BPS_DENOM}): {fee_bps}")


@dataclass(frozen=True)
class SwapExactInResult:
    amount_out: int
    fee_total: int
    net_in: int
    gross_in: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int


@dataclass(frozen=True)
class SwapExactOutResult:
    amount_in: int
    amount_out: int
    fee_total: int
    net_in: int
    new_reserve_in: int
    new_reserve_out: int


def compute_net_in(*, gross_in: int, fee_bps: int) -> int:
    """`floor(gross_in * (10_000 - fee_bps) / 10_000)`."""
    _require_fee_bps(fee_bps)
    return mul_div(gross_in, BPS_DENOM - fee_bps, BPS_DENOM, Rounding.DOWN)


def compute_fee_total(*, gross_in: int, fee_bps: int) -> int:
    """`ceil(gross_in * fee_bps / 10_000)`, the part of the input the pool retains."""
    _require_fee_bps(fee_bps)
    return mul_div(gross_in, fee_bps, BPS_DENOM, Rounding.UP)


def swap_exact_in(
    *,
    reserve_in: int,
    reserve_out: int,
    amount_in: int,
    fee_bps: int,
) -> SwapExactInResult:
    """
    Exact-in swap quote + post-state.

    Raises:
        AmmError(InvalidReserves): either reserve is zero.
        AmmError(InvalidAmount): `amount_in` is not positive.
        AmmError(InsufficientLiquidity): output rounds to zero or would drain `reserve_out`.
        AmmError(Overflow): any intermediate leaves the u128/u256 domain.
    """
    for name, v in (("reserve_in", reserve_in), ("reserve_out", reserve_out), ("amount_in", amount_in)):
        require_u128(name, v)
    _require_fee_bps(fee_bps)

    if reserve_in == 0 or reserve_out == 0:
        raise AmmError(ErrorKind.INVALID_RESERVES, f"cannot swap against an empty reserve: ({reserve_in}, {reserve_out})")
    if amount_in <= 0:
        raise AmmError(ErrorKind.INVALID_AMOUNT, f"amount_in must be positive: {amount_in}")

    k_before = reserve_in * reserve_out

    net_in = compute_net_in(gross_in=amount_in, fee_bps=fee_bps)
    fee_total = amount_in - net_in

    amount_out = mul_div(net_in, reserve_out, checked_add(reserve_in, net_in), Rounding.DOWN)
    if amount_out == 0:
        raise AmmError(ErrorKind.INSUFFICIENT_LIQUIDITY, "amount_out is zero (trade too small)")
    if amount_out >= reserve_out:
        raise AmmError(ErrorKind.INSUFFICIENT_LIQUIDITY, "swap would drain reserve_out")

    new_reserve_in = checked_add(reserve_in, amount_in)
    new_reserve_out = checked_sub(reserve_out, amount_out)
    k_after = new_reserve_in * new_reserve_out
    if k_after < k_before:
        raise AssertionError(f"constant product decreased: {k_after} < {k_before}")

    return SwapExactInResult(
        amount_out=amount_out,
        fee_total=fee_total,
        net_in=net_in,
        gross_in=amount_in,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=k_before,
        k_after=k_after,
    )


def swap_exact_out(
    *,
    reserve_in: int,
    reserve_out: int,
    amount_out: int,
    fee_bps: int,
) -> SwapExactOutResult:
    """
    Smallest gross input whose exact-in quote pays at least `amount_out`.

    The returned post-state is the exact-in post-state for that input, so it may
    pay out slightly more than requested (never less).
    """
    for name, v in (("reserve_in", reserve_in), ("reserve_out", reserve_out), ("amount_out", amount_out)):
        require_u128(name, v)
    _require_fee_bps(fee_bps)

    if reserve_in == 0 or reserve_out == 0:
        raise AmmError(ErrorKind.INVALID_RESERVES, f"cannot swap against an empty reserve: ({reserve_in}, {reserve_out})")
    if amount_out <= 0:
        raise AmmError(ErrorKind.INVALID_AMOUNT, f"amount_out must be positive: {amount_out}")
    if amount_out >= reserve_out:
        raise AmmError(ErrorKind.INSUFFICIENT_LIQUIDITY, "cannot drain full reserve_out")

    # net_in = ceil(reserve_in * amount_out / (reserve_out - amount_out))
    net_required = mul_div(reserve_in, amount_out, reserve_out - amount_out, Rounding.UP)
    # amount_in = ceil(net_in * 10_000 / (10_000 - fee_bps))
    amount_in = mul_div(net_required, BPS_DENOM, BPS_DENOM - fee_bps, Rounding.UP)

    # Both ceilings keep net_in >= net_required, so the forward quote never falls short.
    res = swap_exact_in(reserve_in=reserve_in, reserve_out=reserve_out, amount_in=amount_in, fee_bps=fee_bps)
    if res.amount_out < amount_out:
        raise AssertionError(f"exact-out candidate pays {res.amount_out} < {amount_out}")

    return SwapExactOutResult(
        amount_in=amount_in,
        amount_out=res.amount_out,
        fee_total=res.fee_total,
        net_in=res.net_in,
        new_reserve_in=res.new_reserve_in,
        new_reserve_out=res.new_reserve_out,
    )
