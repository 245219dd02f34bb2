# [TESTER] v1

from __future__ import annotations

import logging
import math
from dataclasses import replace

import pytest

from ammcore.core.config import EngineConfig
from ammcore.core.operations import AddLiquidity, RemoveLiquidity, Swap
from ammcore.core.reserve import LedgerOutput, ReserveParams
from ammcore.core.validator import (
    expected_transition,
    validate_transition,
    validate_transition_or_raise,
)
from ammcore.errors import AmmError, ErrorKind
from ammcore.state.assets import AssetClass
from ammcore.state.pools import PoolState, PoolStatus, estimate_encoded_size, initial_pool_state


ASSET = AssetClass("a" * 56, "70756b7579")
OTHER_ASSET = AssetClass("c" * 56, "70756b7579")
POOL_NFT = AssetClass("b" * 56, "706f6f6c")

NOW = 1_000
DEADLINE = NOW + 1_200


def _pool(reserve_a: int = 100_000_000_000, reserve_b: int = 2_301_952_000_000, **overrides) -> PoolState:
    base = dict(
        reserve_a=reserve_a,
        reserve_b=reserve_b,
        lp_supply=math.isqrt(reserve_a * reserve_b),
        fee_bps=30,
        asset=ASSET,
        pool_nft=POOL_NFT,
        storage_deposit=10_000_000,
        version=7,
        status=PoolStatus.ACTIVE,
    )
    base.update(overrides)
    return PoolState(**base)


def _sizes(state: PoolState, **extra: int) -> dict:
    return {"pool": estimate_encoded_size(state), **extra}


def _run(old: PoolState, op, proposed: PoolState, **kwargs):
    sizes = kwargs.pop("encoded_sizes", None) or _sizes(proposed)
    return validate_transition(old, op, proposed, kwargs.pop("current_time", NOW), sizes, **kwargs)


def _swap(amount_in: int = 1_000_000, a_to_b: bool = True, min_out: int = 0, deadline: int = DEADLINE) -> Swap:
    return Swap(amount_in=amount_in, a_to_b=a_to_b, min_out=min_out, deadline=deadline)


class TestAccepted:
    def test_swap(self) -> None:
        old = _pool()
        op = _swap()
        proposed, quote = expected_transition(old, op)
        res = _run(old, op, proposed)
        assert res.accepted, res.error
        assert res.error is None
        assert res.expected_state == proposed
        assert res.outcome == quote
        assert 22_000_000 < quote.amount_out < 25_000_000
        assert proposed.version == old.version + 1

    def test_bootstrap(self) -> None:
        old = initial_pool_state(asset=ASSET, pool_nft=POOL_NFT, fee_bps=30, storage_deposit=10_000_000)
        op = AddLiquidity(amount_a=100_000_000, amount_b=2_301_952_000, min_lp_out=0, deadline=DEADLINE)
        lp = math.isqrt(100_000_000 * 2_301_952_000)
        proposed = old.successor(
            reserve_a=100_000_000,
            reserve_b=2_301_952_000,
            lp_supply=lp,
            status=PoolStatus.ACTIVE,
        )
        res = _run(old, op, proposed)
        assert res.accepted, res.error
        assert res.outcome.lp_minted == lp
        assert proposed.lp_supply == res.outcome.lp_minted

    def test_full_withdrawal_with_storage_deposit(self) -> None:
        old = _pool()
        op = RemoveLiquidity(lp_burn=old.lp_supply, min_a_out=old.reserve_a, min_b_out=old.reserve_b, deadline=DEADLINE)
        proposed = old.successor(reserve_a=0, reserve_b=0, lp_supply=0)
        res = _run(old, op, proposed)
        assert res.accepted, res.error
        assert res.outcome.full_withdrawal

    def test_reseed_after_full_withdrawal(self) -> None:
        drained = _pool(reserve_a=0, reserve_b=0)
        assert drained.lp_supply == 0 and drained.is_initialized
        op = AddLiquidity(amount_a=4_000_000, amount_b=9_000_000, min_lp_out=6_000_000, deadline=DEADLINE)
        proposed, quote = expected_transition(drained, op)
        assert quote.bootstrap and quote.lp_minted == 6_000_000
        assert _run(drained, op, proposed).accepted

    def test_deadline_equal_to_now(self) -> None:
        old = _pool()
        op = _swap(deadline=NOW)
        proposed, _ = expected_transition(old, op)
        assert _run(old, op, proposed).accepted

    def test_with_adequate_side_output(self) -> None:
        old = _pool()
        op = _swap()
        proposed, _ = expected_transition(old, op)
        user = LedgerOutput(native_amount=2_000_000, asset_count=1, label="user")
        res = _run(old, op, proposed, encoded_sizes=_sizes(proposed, user=0), side_outputs=[user])
        assert res.accepted, res.error


class TestRejected:
    def test_identity_change_with_correct_arithmetic(self) -> None:
        old = _pool()
        op = _swap()
        expected, _ = expected_transition(old, op)
        res = _run(old, op, replace(expected, asset=OTHER_ASSET))
        assert not res.accepted
        assert res.error.kind is ErrorKind.IDENTITY_MISMATCH

    def test_pool_nft_change(self) -> None:
        old = _pool()
        op = _swap()
        expected, _ = expected_transition(old, op)
        res = _run(old, op, replace(expected, pool_nft=OTHER_ASSET))
        assert res.error.kind is ErrorKind.IDENTITY_MISMATCH

    def test_fee_change(self) -> None:
        old = _pool()
        op = _swap()
        expected, _ = expected_transition(old, op)
        res = _run(old, op, replace(expected, fee_bps=31))
        assert res.error.kind is ErrorKind.FEE_MISMATCH

    def test_wrong_reserves(self) -> None:
        old = _pool()
        op = _swap()
        expected, _ = expected_transition(old, op)
        res = _run(old, op, replace(expected, reserve_b=expected.reserve_b - 1))
        assert res.error.kind is ErrorKind.MISMATCHED_RECOMPUTATION
        assert "reserve_b" in res.error.detail

    def test_version_not_bumped(self) -> None:
        old = _pool()
        op = _swap()
        expected, _ = expected_transition(old, op)
        res = _run(old, op, replace(expected, version=old.version))
        assert res.error.kind is ErrorKind.MISMATCHED_RECOMPUTATION
        assert "version" in res.error.detail

    def test_expired(self) -> None:
        old = _pool()
        op = _swap(deadline=NOW - 1)
        expected, _ = expected_transition(old, op)
        # Deadline is checked before recomputation: a wrong proposal still reports Expired.
        res = _run(old, op, replace(expected, reserve_a=1))
        assert res.error.kind is ErrorKind.EXPIRED

    def test_slippage(self) -> None:
        old = _pool()
        sizing = _swap()
        expected, quote = expected_transition(old, sizing)
        op = _swap(min_out=quote.amount_out + 1)
        res = _run(old, op, expected)
        assert res.error.kind is ErrorKind.SLIPPAGE_EXCEEDED

    def test_remove_liquidity_min_b(self) -> None:
        old = _pool()
        sizing = RemoveLiquidity(lp_burn=1_000_000, min_a_out=0, min_b_out=0, deadline=DEADLINE)
        expected, quote = expected_transition(old, sizing)
        op = replace(sizing, min_b_out=quote.amount_b_out + 1)
        res = _run(old, op, expected)
        assert res.error.kind is ErrorKind.SLIPPAGE_EXCEEDED
        assert "amount_b_out" in res.error.detail

    def test_underfunded_side_output(self) -> None:
        old = _pool()
        op = _swap()
        proposed, _ = expected_transition(old, op)
        user = LedgerOutput(native_amount=500_000, asset_count=1, label="user")
        res = _run(old, op, proposed, encoded_sizes=_sizes(proposed, user=0), side_outputs=[user])
        assert res.error.kind is ErrorKind.INSUFFICIENT_RESERVE
        assert "user" in res.error.detail

    def test_full_withdrawal_without_storage_deposit(self) -> None:
        old = _pool(storage_deposit=0)
        op = RemoveLiquidity(lp_burn=old.lp_supply, min_a_out=0, min_b_out=0, deadline=DEADLINE)
        proposed = old.successor(reserve_a=0, reserve_b=0, lp_supply=0)
        res = _run(old, op, proposed)
        assert res.error.kind is ErrorKind.INSUFFICIENT_RESERVE

    def test_record_too_large(self) -> None:
        old = _pool()
        op = _swap()
        proposed, _ = expected_transition(old, op)
        res = _run(old, op, proposed, encoded_sizes={"pool": 16_385})
        assert res.error.kind is ErrorKind.RECORD_TOO_LARGE

    def test_missing_encoded_size(self) -> None:
        old = _pool()
        op = _swap()
        proposed, _ = expected_transition(old, op)
        user = LedgerOutput(native_amount=2_000_000, asset_count=1, label="user")
        res = _run(old, op, proposed, side_outputs=[user])
        assert res.error.kind is ErrorKind.MALFORMED_REQUEST

    def test_stale_snapshot(self) -> None:
        old = _pool()
        op = _swap()
        proposed, _ = expected_transition(old, op)
        live = old.successor(reserve_a=old.reserve_a + 1)
        res = _run(old, op, proposed, live_state=live)
        assert res.error.kind is ErrorKind.STALE_STATE

    def test_swap_on_uninitialized_pool(self) -> None:
        old = initial_pool_state(asset=ASSET, pool_nft=POOL_NFT, fee_bps=30, storage_deposit=10_000_000)
        op = _swap()
        res = _run(old, op, old.successor())
        assert res.error.kind is ErrorKind.INVALID_TRANSITION

    def test_invalid_old_state(self) -> None:
        old = _pool(fee_bps=2_000)
        op = _swap()
        res = _run(old, op, old.successor())
        assert res.error.kind is ErrorKind.INVALID_STATE
        assert "inv_fee_in_range" in res.error.detail

    def test_fee_cap_is_configurable(self) -> None:
        old = _pool(fee_bps=2_000)
        op = _swap()
        proposed, _ = expected_transition(old, op)
        res = _run(old, op, proposed, config=EngineConfig(max_fee_bps=2_000))
        assert res.accepted, res.error

    def test_zero_amount(self) -> None:
        old = _pool()
        res = _run(old, _swap(amount_in=0), old.successor())
        assert res.error.kind is ErrorKind.INVALID_AMOUNT

    def test_zero_burn(self) -> None:
        old = _pool()
        op = RemoveLiquidity(lp_burn=0, min_a_out=0, min_b_out=0, deadline=DEADLINE)
        res = _run(old, op, old.successor())
        assert res.error.kind is ErrorKind.INVALID_BURN_AMOUNT

    def test_over_burn(self) -> None:
        old = _pool()
        op = RemoveLiquidity(lp_burn=old.lp_supply + 1, min_a_out=0, min_b_out=0, deadline=DEADLINE)
        res = _run(old, op, old.successor())
        assert res.error.kind is ErrorKind.INVALID_BURN_AMOUNT

    def test_unknown_operation(self) -> None:
        old = _pool()
        res = _run(old, object(), old.successor())
        assert res.error.kind is ErrorKind.MALFORMED_REQUEST

    def test_strict_reserve_params(self) -> None:
        old = _pool()
        op = _swap()
        proposed, _ = expected_transition(old, op)
        strict = EngineConfig(reserve=ReserveParams(pool_base=10**13))
        res = _run(old, op, proposed, config=strict)
        assert res.error.kind is ErrorKind.INSUFFICIENT_RESERVE

    def test_live_state_not_a_record(self) -> None:
        old = _pool()
        op = _swap()
        proposed, _ = expected_transition(old, op)
        res = _run(old, op, proposed, live_state={"version": old.version})
        assert not res.accepted
        assert res.error.kind is ErrorKind.MALFORMED_REQUEST

    def test_side_output_not_a_record(self) -> None:
        old = _pool()
        op = _swap()
        proposed, _ = expected_transition(old, op)
        res = _run(old, op, proposed, side_outputs=[{"native_amount": 2_000_000, "label": "user"}])
        assert not res.accepted
        assert res.error.kind is ErrorKind.MALFORMED_REQUEST
        assert "LedgerOutput" in res.error.detail

    def test_expired_swap_on_uninitialized_pool_reports_lifecycle(self) -> None:
        old = initial_pool_state(asset=ASSET, pool_nft=POOL_NFT, fee_bps=30, storage_deposit=10_000_000)
        res = _run(old, _swap(deadline=NOW - 1), old.successor())
        assert res.error.kind is ErrorKind.INVALID_TRANSITION

    def test_expected_transition_rejects_swap_on_uninitialized_pool(self) -> None:
        old = initial_pool_state(asset=ASSET, pool_nft=POOL_NFT, fee_bps=30, storage_deposit=10_000_000)
        with pytest.raises(AmmError) as exc_info:
            expected_transition(old, _swap())
        assert exc_info.value.kind is ErrorKind.INVALID_TRANSITION


class TestEngineErrorsAsResults:
    """Arithmetic failures inside the engine come back as rejected results."""

    def test_dust_swap_is_insufficient_liquidity(self) -> None:
        old = _pool(reserve_a=10**12, reserve_b=1)
        res = _run(old, _swap(amount_in=1), old.successor())
        assert not res.accepted
        assert res.error.kind is ErrorKind.INSUFFICIENT_LIQUIDITY

    def test_swap_on_drained_pool_is_invalid_reserves(self) -> None:
        drained = _pool(reserve_a=0, reserve_b=0)
        assert drained.status is PoolStatus.ACTIVE and drained.lp_supply == 0
        res = _run(drained, _swap(), drained.successor())
        assert not res.accepted
        assert res.error.kind is ErrorKind.INVALID_RESERVES

    def test_amount_beyond_u128_is_overflow(self) -> None:
        old = _pool()
        res = _run(old, _swap(amount_in=2**128), old.successor())
        assert not res.accepted
        assert res.error.kind is ErrorKind.OVERFLOW

    def test_deposit_minting_zero_lp_is_insufficient_liquidity(self) -> None:
        old = _pool(reserve_a=10**12, reserve_b=10**12, lp_supply=10)
        op = AddLiquidity(amount_a=1, amount_b=1, min_lp_out=0, deadline=DEADLINE)
        res = _run(old, op, old.successor())
        assert not res.accepted
        assert res.error.kind is ErrorKind.INSUFFICIENT_LIQUIDITY

    def test_or_raise_carries_engine_error(self) -> None:
        old = _pool()
        with pytest.raises(AmmError) as exc_info:
            validate_transition_or_raise(old, _swap(amount_in=2**128), old.successor(), NOW, _sizes(old))
        assert exc_info.value.kind is ErrorKind.OVERFLOW


def test_validate_or_raise() -> None:
    old = _pool()
    op = _swap()
    proposed, _ = expected_transition(old, op)
    assert validate_transition_or_raise(old, op, proposed, NOW, _sizes(proposed)).accepted
    with pytest.raises(AmmError) as exc_info:
        validate_transition_or_raise(old, op, replace(proposed, fee_bps=0), NOW, _sizes(proposed))
    assert exc_info.value.kind is ErrorKind.FEE_MISMATCH


def test_rejections_are_logged_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    old = _pool()
    with caplog.at_level(logging.DEBUG, logger="ammcore.core.validator"):
        _run(old, _swap(deadline=0), old.successor())
    assert any("Expired" in r.getMessage() for r in caplog.records)
