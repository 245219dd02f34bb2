"""Caller-supplied limits: deadlines and minimum outputs.

Each check returns None when it passes, else the TransitionError naming the
violated limit.
"""

from __future__ import annotations

from typing import Optional

from ..errors import ErrorKind, TransitionError
from .operations import AddLiquidity, RemoveLiquidity, Swap


def check_deadline(deadline: int, current_time: int) -> Optional[TransitionError]:
    """The deadline is inclusive: `current_time == deadline` passes."""
    if current_time > deadline:
        return TransitionError(ErrorKind.EXPIRED, f"current_time {current_time} is past deadline {deadline}")
    return None


def check_min_out(actual: int, minimum: int, label: str = "output") -> Optional[TransitionError]:
    if actual < minimum:
        return TransitionError(ErrorKind.SLIPPAGE_EXCEEDED, f"{label} {actual} below minimum {minimum}")
    return None


def guard_swap(op: Swap, amount_out: int) -> Optional[TransitionError]:
    return check_min_out(amount_out, op.min_out, "amount_out")


def guard_add_liquidity(op: AddLiquidity, lp_minted: int) -> Optional[TransitionError]:
    return check_min_out(lp_minted, op.min_lp_out, "lp_minted")


def guard_remove_liquidity(op: RemoveLiquidity, amount_a_out: int, amount_b_out: int) -> Optional[TransitionError]:
    return check_min_out(amount_a_out, op.min_a_out, "amount_a_out") or check_min_out(
        amount_b_out, op.min_b_out, "amount_b_out"
    )
