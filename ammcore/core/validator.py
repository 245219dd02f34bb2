"""Transition validator.

``validate_transition(old_state, operation, proposed_new_state, ...)`` is the
single entry point. It:

1. Checks the request shape and that the caller's snapshot is still live.
2. Checks the old state's invariants and the fields the transition must not touch.
3. Recomputes the next state independently from ``(old_state, operation)``.
4. Applies the caller's deadline and minimum-output limits.
5. Requires the proposed state to equal the recomputed one exactly.
6. Checks reserve adequacy of the pool record and every side output.

The first failing check wins. The validator is pure: it never mutates its
inputs and holds no state, so concurrent calls are independent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Callable, Dict, Mapping, Optional, Sequence, Tuple, Union

from ..errors import AmmError, ErrorKind, TransitionError
from ..state.pools import PoolState, PoolStatus, check_invariants
from .config import EngineConfig
from .guards import check_deadline, guard_add_liquidity, guard_remove_liquidity, guard_swap
from .liquidity import AddLiquidityQuote, RemoveLiquidityQuote, quote_add_liquidity, quote_remove_liquidity
from .operations import AddLiquidity, Operation, RemoveLiquidity, Swap, check_operation_fields
from .pricing import SwapQuote, quote_swap
from .reserve import LedgerOutput, check_adequacy

logger = logging.getLogger(__name__)

POOL_OUTPUT = "pool"

Outcome = Union[SwapQuote, AddLiquidityQuote, RemoveLiquidityQuote]


@dataclass(frozen=True)
class TransitionResult:
    accepted: bool
    error: Optional[TransitionError] = None
    expected_state: Optional[PoolState] = None
    outcome: Optional[Outcome] = None


# -- Per-operation recomputation --------------------------------------------


def _apply_swap(state: PoolState, op: Swap) -> Tuple[PoolState, SwapQuote]:
    q = quote_swap(state, op.amount_in, op.a_to_b)
    return state.successor(reserve_a=q.new_reserve_a, reserve_b=q.new_reserve_b), q


def _apply_add_liquidity(state: PoolState, op: AddLiquidity) -> Tuple[PoolState, AddLiquidityQuote]:
    q = quote_add_liquidity(state, op.amount_a, op.amount_b)
    new_state = state.successor(
        reserve_a=q.new_reserve_a,
        reserve_b=q.new_reserve_b,
        lp_supply=q.new_lp_supply,
        status=PoolStatus.ACTIVE,
    )
    return new_state, q


def _apply_remove_liquidity(state: PoolState, op: RemoveLiquidity) -> Tuple[PoolState, RemoveLiquidityQuote]:
    q = quote_remove_liquidity(state, op.lp_burn)
    new_state = state.successor(
        reserve_a=q.new_reserve_a,
        reserve_b=q.new_reserve_b,
        lp_supply=q.new_lp_supply,
    )
    return new_state, q


ApplyFn = Callable[[PoolState, Operation], Tuple[PoolState, Outcome]]
GuardFn = Callable[[Operation, Outcome], Optional[TransitionError]]

_DISPATCH: Dict[type, Tuple[ApplyFn, GuardFn]] = {
    Swap: (_apply_swap, lambda op, q: guard_swap(op, q.amount_out)),
    AddLiquidity: (_apply_add_liquidity, lambda op, q: guard_add_liquidity(op, q.lp_minted)),
    RemoveLiquidity: (
        _apply_remove_liquidity,
        lambda op, q: guard_remove_liquidity(op, q.amount_a_out, q.amount_b_out),
    ),
}


def _check_lifecycle(old_state: PoolState, operation: Operation) -> None:
    if old_state.status is PoolStatus.UNINITIALIZED and not isinstance(operation, AddLiquidity):
        raise AmmError(ErrorKind.INVALID_TRANSITION, "an uninitialized pool only accepts add-liquidity")


def expected_transition(old_state: PoolState, operation: Operation) -> Tuple[PoolState, Outcome]:
    """
    Recompute the next state and the engine quote for `operation`.

    Raises:
        AmmError: the operation is unknown, not allowed in the pool's lifecycle
            state, or the arithmetic fails (the engine's error kind).
    """
    entry = _DISPATCH.get(type(operation))
    if entry is None:
        raise AmmError(ErrorKind.MALFORMED_REQUEST, f"unknown operation type: {type(operation).__name__}")
    _check_lifecycle(old_state, operation)
    apply_fn, _ = entry
    return apply_fn(old_state, operation)


def _differing_fields(expected: PoolState, proposed: PoolState) -> list[str]:
    return [f.name for f in fields(PoolState) if getattr(expected, f.name) != getattr(proposed, f.name)]


def _check_transition(
    old_state: PoolState,
    operation: Operation,
    proposed_new_state: PoolState,
    current_time: int,
    encoded_sizes: Mapping[str, int],
    side_outputs: Sequence[LedgerOutput],
    live_state: Optional[PoolState],
    config: EngineConfig,
) -> TransitionResult:
    if type(operation) not in _DISPATCH:
        raise AmmError(ErrorKind.MALFORMED_REQUEST, f"unknown operation type: {type(operation).__name__}")
    if not isinstance(old_state, PoolState) or not isinstance(proposed_new_state, PoolState):
        raise AmmError(ErrorKind.MALFORMED_REQUEST, "old and proposed states must be PoolState records")
    if not isinstance(current_time, int) or isinstance(current_time, bool):
        raise AmmError(ErrorKind.MALFORMED_REQUEST, "current_time must be an int")
    if live_state is not None and not isinstance(live_state, PoolState):
        raise AmmError(ErrorKind.MALFORMED_REQUEST, "live_state must be a PoolState record")
    for out in side_outputs:
        if not isinstance(out, LedgerOutput):
            raise AmmError(ErrorKind.MALFORMED_REQUEST, f"side output must be a LedgerOutput: {type(out).__name__}")

    if live_state is not None and live_state != old_state:
        raise AmmError(
            ErrorKind.STALE_STATE,
            f"snapshot version {old_state.version} superseded by version {live_state.version}",
        )

    violated = check_invariants(old_state, config.max_fee_bps)
    if violated:
        raise AmmError(ErrorKind.INVALID_STATE, ", ".join(violated))

    if proposed_new_state.asset != old_state.asset or proposed_new_state.pool_nft != old_state.pool_nft:
        raise AmmError(ErrorKind.IDENTITY_MISMATCH, "asset and pool_nft are immutable")
    if proposed_new_state.fee_bps != old_state.fee_bps:
        raise AmmError(
            ErrorKind.FEE_MISMATCH,
            f"fee_bps changed from {old_state.fee_bps} to {proposed_new_state.fee_bps}",
        )

    field_error = check_operation_fields(operation)
    if field_error is not None:
        raise AmmError.from_error(field_error)

    _check_lifecycle(old_state, operation)

    deadline_error = check_deadline(operation.deadline, current_time)
    if deadline_error is not None:
        raise AmmError.from_error(deadline_error)

    expected_state, outcome = expected_transition(old_state, operation)

    _, guard_fn = _DISPATCH[type(operation)]
    slippage_error = guard_fn(operation, outcome)
    if slippage_error is not None:
        raise AmmError.from_error(slippage_error)

    if proposed_new_state != expected_state:
        diff = _differing_fields(expected_state, proposed_new_state)
        raise AmmError(ErrorKind.MISMATCHED_RECOMPUTATION, f"fields differ: {', '.join(diff)}")

    outputs: list[Tuple[str, Union[PoolState, LedgerOutput]]] = [(POOL_OUTPUT, proposed_new_state)]
    outputs.extend((out.label, out) for out in side_outputs)
    for label, output in outputs:
        if label not in encoded_sizes:
            raise AmmError(ErrorKind.MALFORMED_REQUEST, f"no encoded size for output {label!r}")
        adequacy_error = check_adequacy(output, encoded_sizes[label], config.reserve)
        if adequacy_error is not None:
            raise AmmError.from_error(adequacy_error)

    return TransitionResult(accepted=True, expected_state=expected_state, outcome=outcome)


def validate_transition(
    old_state: PoolState,
    operation: Operation,
    proposed_new_state: PoolState,
    current_time: int,
    encoded_sizes: Mapping[str, int],
    *,
    side_outputs: Sequence[LedgerOutput] = (),
    live_state: Optional[PoolState] = None,
    config: EngineConfig = EngineConfig(),
) -> TransitionResult:
    """
    Decide whether `proposed_new_state` is the valid successor of `old_state` under `operation`.

    `encoded_sizes` maps output labels to encoded byte sizes: ``"pool"`` for the
    pool record, plus the `label` of each side output. Never raises for a bad
    request; the rejection reason is carried in the result.
    """
    try:
        result = _check_transition(
            old_state,
            operation,
            proposed_new_state,
            current_time,
            encoded_sizes,
            tuple(side_outputs),
            live_state,
            config,
        )
    except AmmError as exc:
        logger.debug("transition rejected: %s", exc)
        return TransitionResult(accepted=False, error=exc.error)
    except (TypeError, ValueError) as exc:
        logger.debug("transition rejected as malformed: %s", exc)
        return TransitionResult(accepted=False, error=TransitionError(ErrorKind.MALFORMED_REQUEST, str(exc)))

    logger.debug(
        "transition accepted: %s on version %d",
        type(operation).__name__,
        old_state.version,
    )
    return result


def validate_transition_or_raise(
    old_state: PoolState,
    operation: Operation,
    proposed_new_state: PoolState,
    current_time: int,
    encoded_sizes: Mapping[str, int],
    *,
    side_outputs: Sequence[LedgerOutput] = (),
    live_state: Optional[PoolState] = None,
    config: EngineConfig = EngineConfig(),
) -> TransitionResult:
    """Like `validate_transition`, but raise `AmmError` on rejection."""
    result = validate_transition(
        old_state,
        operation,
        proposed_new_state,
        current_time,
        encoded_sizes,
        side_outputs=side_outputs,
        live_state=live_state,
        config=config,
    )
    if result.error is not None:
        raise AmmError.from_error(result.error)
    return result
