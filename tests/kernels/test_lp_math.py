# [TESTER] v1

from __future__ import annotations

import math

import pytest

from ammcore.errors import AmmError, ErrorKind
from ammcore.kernels.python.lp_math import (
    burn_liquidity,
    mint_liquidity,
    mint_liquidity_initial,
    optimal_liquidity,
)


def test_initial_mint_is_integer_geometric_mean() -> None:
    minted = mint_liquidity_initial(amount0=100_000_000, amount1=2_301_952_000)
    assert minted == math.isqrt(100_000_000 * 2_301_952_000)


def test_initial_mint_degenerate() -> None:
    with pytest.raises(AmmError) as exc_info:
        mint_liquidity_initial(amount0=0, amount1=5)
    assert exc_info.value.kind is ErrorKind.DEGENERATE_INITIAL_DEPOSIT


def test_mint_liquidity_rejects_inconsistent_initial_state() -> None:
    with pytest.raises(AmmError) as exc_info:
        mint_liquidity(reserve0=1, reserve1=1, total_supply=0, amount0=10, amount1=10)
    assert exc_info.value.kind is ErrorKind.INVALID_RESERVES


def test_mint_liquidity_takes_smaller_share() -> None:
    res = mint_liquidity(reserve0=1_000, reserve1=2_000, total_supply=1_000, amount0=100, amount1=300)
    assert res.liquidity_minted == 100
    assert res.new_reserve0 == 1_100
    assert res.new_reserve1 == 2_300
    assert res.new_total_supply == 1_100
    assert res.initial is False


def test_mint_liquidity_zero_share_fails() -> None:
    with pytest.raises(AmmError) as exc_info:
        mint_liquidity(reserve0=10**9, reserve1=10**9, total_supply=10, amount0=1, amount1=1)
    assert exc_info.value.kind is ErrorKind.INSUFFICIENT_LIQUIDITY


def test_burn_liquidity_proportional_floor() -> None:
    res = burn_liquidity(lp_amount=1, reserve0=10, reserve1=7, total_supply=3)
    assert res.amount0_out == 3
    assert res.amount1_out == 2
    assert res.new_reserve0 == 7
    assert res.new_reserve1 == 5
    assert res.new_total_supply == 2


def test_burn_full_supply_empties_pool() -> None:
    res = burn_liquidity(lp_amount=500, reserve0=1_234, reserve1=5_678, total_supply=500)
    assert (res.amount0_out, res.amount1_out) == (1_234, 5_678)
    assert (res.new_reserve0, res.new_reserve1, res.new_total_supply) == (0, 0, 0)


@pytest.mark.parametrize("lp_amount", [0, -1, 501])
def test_burn_liquidity_rejects_bad_amounts(lp_amount: int) -> None:
    with pytest.raises(AmmError) as exc_info:
        burn_liquidity(lp_amount=lp_amount, reserve0=1_000, reserve1=1_000, total_supply=500)
    assert exc_info.value.kind is ErrorKind.INVALID_BURN_AMOUNT


class TestOptimalLiquidity:
    def test_limited_by_first_asset(self) -> None:
        res = optimal_liquidity(reserve0=1_000, reserve1=2_000, amount0_desired=100, amount1_desired=300)
        assert (res.amount0_used, res.amount1_used) == (100, 200)
        assert (res.amount0_refund, res.amount1_refund) == (0, 100)

    def test_limited_by_second_asset(self) -> None:
        res = optimal_liquidity(reserve0=1_000, reserve1=2_000, amount0_desired=100, amount1_desired=100)
        assert (res.amount0_used, res.amount1_used) == (50, 100)
        assert (res.amount0_refund, res.amount1_refund) == (50, 0)

    def test_empty_pool_uses_everything(self) -> None:
        res = optimal_liquidity(reserve0=0, reserve1=0, amount0_desired=7, amount1_desired=9)
        assert (res.amount0_used, res.amount1_used, res.amount0_refund, res.amount1_refund) == (7, 9, 0, 0)
