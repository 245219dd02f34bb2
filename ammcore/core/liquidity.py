"""
Liquidity provision and withdrawal.

Thin wrappers binding the LP kernel to pool records:
- the first deposit into an empty pool mints `isqrt(amount_a * amount_b)`,
- later deposits mint the smaller proportional share; the excess of the
  other side stays in the pool,
- burns pay out proportional reserves, rounded down.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..kernels.python.lp_math import burn_liquidity, mint_liquidity, optimal_liquidity
from ..state.pools import PoolState


@dataclass(frozen=True)
class AddLiquidityQuote:
    lp_minted: int
    new_reserve_a: int
    new_reserve_b: int
    new_lp_supply: int
    bootstrap: bool


@dataclass(frozen=True)
class RemoveLiquidityQuote:
    amount_a_out: int
    amount_b_out: int
    new_reserve_a: int
    new_reserve_b: int
    new_lp_supply: int
    full_withdrawal: bool


@dataclass(frozen=True)
class BalancedDeposit:
    amount_a: int
    amount_b: int
    refund_a: int
    refund_b: int


def quote_add_liquidity(state: PoolState, amount_a: int, amount_b: int) -> AddLiquidityQuote:
    """
    LP units minted for depositing exactly `(amount_a, amount_b)`.

    Raises:
        AmmError(InvalidAmount): a non-positive amount.
        AmmError(DegenerateInitialDeposit): bootstrap share rounds to zero.
        AmmError(InsufficientLiquidity): a later deposit mints zero LP units.
    """
    res = mint_liquidity(
        reserve0=state.reserve_a,
        reserve1=state.reserve_b,
        total_supply=state.lp_supply,
        amount0=amount_a,
        amount1=amount_b,
    )
    return AddLiquidityQuote(
        lp_minted=res.liquidity_minted,
        new_reserve_a=res.new_reserve0,
        new_reserve_b=res.new_reserve1,
        new_lp_supply=res.new_total_supply,
        bootstrap=res.initial,
    )


def quote_remove_liquidity(state: PoolState, lp_burn: int) -> RemoveLiquidityQuote:
    res = burn_liquidity(
        lp_amount=lp_burn,
        reserve0=state.reserve_a,
        reserve1=state.reserve_b,
        total_supply=state.lp_supply,
    )
    return RemoveLiquidityQuote(
        amount_a_out=res.amount0_out,
        amount_b_out=res.amount1_out,
        new_reserve_a=res.new_reserve0,
        new_reserve_b=res.new_reserve1,
        new_lp_supply=res.new_total_supply,
        full_withdrawal=res.new_total_supply == 0,
    )


def balance_deposit(state: PoolState, amount_a_desired: int, amount_b_desired: int) -> BalancedDeposit:
    """Trim a deposit to the pool ratio so nothing is donated; an empty pool takes everything."""
    res = optimal_liquidity(
        reserve0=state.reserve_a,
        reserve1=state.reserve_b,
        amount0_desired=amount_a_desired,
        amount1_desired=amount_b_desired,
    )
    return BalancedDeposit(
        amount_a=res.amount0_used,
        amount_b=res.amount1_used,
        refund_a=res.amount0_refund,
        refund_b=res.amount1_refund,
    )
