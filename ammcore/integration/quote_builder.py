"""
Quote builder.

Client-side counterpart of the transition validator:
- Computes the candidate next pool record and the user-facing amounts.
- Derives the operation's minimum-output limits from a slippage tolerance and
  its deadline from a window after `current_time`.
- Sizes the records and tops the user's payout record up to its own minimum
  reserve.
- Runs `validate_transition` on its own candidate and fails closed, so a
  returned quote is always one the validator accepts against the same snapshot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Mapping, Optional, Tuple

from ..core.config import EngineConfig
from ..core.liquidity import balance_deposit
from ..core.operations import AddLiquidity, Operation, RemoveLiquidity, Swap
from ..core.pricing import price_impact_bps, quote_swap_exact_out
from ..core.reserve import LedgerOutput, OutputKind, minimum_reserve
from ..core.validator import POOL_OUTPUT, Outcome, TransitionResult, expected_transition, validate_transition
from ..errors import AmmError, ErrorKind, TransitionError
from ..kernels.python.cpmm_swap import BPS_DENOM
from ..kernels.python.fixed_point import Rounding, mul_div
from ..state.pools import PoolState, estimate_encoded_size

logger = logging.getLogger(__name__)

USER_OUTPUT = "user"


@dataclass(frozen=True)
class QuoteBuilderConfig:
    # Tolerance applied to every minimum-output limit.
    slippage_bps: int = 50
    # Deadline = current_time + deadline_window (20 minutes of 1-second slots).
    deadline_window: int = 1200
    # Encoded size of the user's payout record (0 = no attached data).
    user_record_size: int = 0
    # Trim add-liquidity deposits to the pool ratio instead of donating the excess.
    balance_deposits: bool = True
    engine: EngineConfig = field(default_factory=EngineConfig)

    def __post_init__(self) -> None:
        if not isinstance(self.slippage_bps, int) or not (0 <= self.slippage_bps <= BPS_DENOM):
            raise ValueError(f"slippage_bps must be in [0, {BPS_DENOM}]")
        if not isinstance(self.deadline_window, int) or self.deadline_window < 0:
            raise ValueError("deadline_window must be a non-negative int")
        if not isinstance(self.user_record_size, int) or self.user_record_size < 0:
            raise ValueError("user_record_size must be a non-negative int")


@dataclass(frozen=True)
class TransitionQuote:
    base_state: PoolState
    operation: Operation
    proposed_state: PoolState
    encoded_sizes: Mapping[str, int]
    side_outputs: Tuple[LedgerOutput, ...]
    outcome: Outcome
    price_impact_bps: Optional[int] = None
    refund_a: int = 0
    refund_b: int = 0


@dataclass(frozen=True)
class QuoteResult:
    ok: bool
    quote: Optional[TransitionQuote] = None
    error: Optional[TransitionError] = None


def _apply_slippage(amount: int, slippage_bps: int) -> int:
    return mul_div(amount, BPS_DENOM - slippage_bps, BPS_DENOM, Rounding.DOWN)


def _user_output(native_paid: int, asset_count: int, config: QuoteBuilderConfig) -> LedgerOutput:
    required = minimum_reserve(config.user_record_size, asset_count, OutputKind.USER, config.engine.reserve)
    return LedgerOutput(
        native_amount=max(native_paid, required),
        asset_count=asset_count,
        kind=OutputKind.USER,
        label=USER_OUTPUT,
    )


def _finish(
    state: PoolState,
    operation: Operation,
    user_output: LedgerOutput,
    current_time: int,
    config: QuoteBuilderConfig,
    **extra,
) -> QuoteResult:
    proposed, outcome = expected_transition(state, operation)
    encoded_sizes = {POOL_OUTPUT: estimate_encoded_size(proposed), USER_OUTPUT: config.user_record_size}
    side_outputs = (user_output,)

    check = validate_transition(
        state,
        operation,
        proposed,
        current_time,
        encoded_sizes,
        side_outputs=side_outputs,
        config=config.engine,
    )
    if not check.accepted:
        logger.debug("quote for %s failed validation: %s", type(operation).__name__, check.error)
        return QuoteResult(ok=False, error=check.error)

    quote = TransitionQuote(
        base_state=state,
        operation=operation,
        proposed_state=proposed,
        encoded_sizes=encoded_sizes,
        side_outputs=side_outputs,
        outcome=outcome,
        **extra,
    )
    logger.debug("quote built: %s on version %d", type(operation).__name__, state.version)
    return QuoteResult(ok=True, quote=quote)


def _failed(exc: Exception) -> QuoteResult:
    if isinstance(exc, AmmError):
        error = exc.error
    else:
        error = TransitionError(ErrorKind.MALFORMED_REQUEST, str(exc))
    logger.debug("quote rejected: %s", error)
    return QuoteResult(ok=False, error=error)


def build_swap(
    state: PoolState,
    amount_in: int,
    a_to_b: bool,
    current_time: int,
    config: QuoteBuilderConfig = QuoteBuilderConfig(),
) -> QuoteResult:
    """Exact-in swap of `amount_in`, with `min_out` set `slippage_bps` below the quoted output."""
    try:
        deadline = current_time + config.deadline_window
        _, outcome = expected_transition(state, Swap(amount_in=amount_in, a_to_b=a_to_b, min_out=0, deadline=deadline))
        op = Swap(
            amount_in=amount_in,
            a_to_b=a_to_b,
            min_out=_apply_slippage(outcome.amount_out, config.slippage_bps),
            deadline=deadline,
        )
        # A->B pays out the paired asset; B->A pays out native currency.
        if a_to_b:
            user = _user_output(0, 1, config)
        else:
            user = _user_output(outcome.amount_out, 0, config)
        return _finish(
            state,
            op,
            user,
            current_time,
            config,
            price_impact_bps=price_impact_bps(state, amount_in, a_to_b),
        )
    except (AmmError, TypeError, ValueError) as exc:
        return _failed(exc)


def build_swap_exact_out(
    state: PoolState,
    amount_out: int,
    a_to_b: bool,
    current_time: int,
    config: QuoteBuilderConfig = QuoteBuilderConfig(),
) -> QuoteResult:
    """
    Swap sized to pay at least `amount_out`.

    The operation is the equivalent exact-in swap; `min_out` is the requested
    `amount_out` itself, so the price risk sits on the input side.
    """
    try:
        q = quote_swap_exact_out(state, amount_out, a_to_b)
        op = Swap(
            amount_in=q.amount_in,
            a_to_b=a_to_b,
            min_out=amount_out,
            deadline=current_time + config.deadline_window,
        )
        if a_to_b:
            user = _user_output(0, 1, config)
        else:
            user = _user_output(q.amount_out, 0, config)
        return _finish(
            state,
            op,
            user,
            current_time,
            config,
            price_impact_bps=price_impact_bps(state, q.amount_in, a_to_b),
        )
    except (AmmError, TypeError, ValueError) as exc:
        return _failed(exc)


def build_add_liquidity(
    state: PoolState,
    amount_a: int,
    amount_b: int,
    current_time: int,
    config: QuoteBuilderConfig = QuoteBuilderConfig(),
) -> QuoteResult:
    """
    Deposit quote.

    With `balance_deposits` the amounts are first trimmed to the pool ratio;
    the trimmed excess is reported as `refund_a` / `refund_b`.
    """
    try:
        refund_a = refund_b = 0
        if config.balance_deposits:
            bd = balance_deposit(state, amount_a, amount_b)
            amount_a, amount_b, refund_a, refund_b = bd.amount_a, bd.amount_b, bd.refund_a, bd.refund_b

        deadline = current_time + config.deadline_window
        probe = AddLiquidity(amount_a=amount_a, amount_b=amount_b, min_lp_out=0, deadline=deadline)
        _, outcome = expected_transition(state, probe)
        op = replace(probe, min_lp_out=_apply_slippage(outcome.lp_minted, config.slippage_bps))
        # The user's record receives the minted LP tokens.
        user = _user_output(0, 1, config)
        return _finish(state, op, user, current_time, config, refund_a=refund_a, refund_b=refund_b)
    except (AmmError, TypeError, ValueError) as exc:
        return _failed(exc)


def build_remove_liquidity(
    state: PoolState,
    lp_burn: int,
    current_time: int,
    config: QuoteBuilderConfig = QuoteBuilderConfig(),
) -> QuoteResult:
    try:
        deadline = current_time + config.deadline_window
        probe = RemoveLiquidity(lp_burn=lp_burn, min_a_out=0, min_b_out=0, deadline=deadline)
        _, outcome = expected_transition(state, probe)
        op = replace(
            probe,
            min_a_out=_apply_slippage(outcome.amount_a_out, config.slippage_bps),
            min_b_out=_apply_slippage(outcome.amount_b_out, config.slippage_bps),
        )
        user = _user_output(outcome.amount_a_out, 1 if outcome.amount_b_out > 0 else 0, config)
        return _finish(state, op, user, current_time, config)
    except (AmmError, TypeError, ValueError) as exc:
        return _failed(exc)


def revalidate_quote(
    quote: TransitionQuote,
    latest_state: PoolState,
    current_time: int,
    config: QuoteBuilderConfig = QuoteBuilderConfig(),
) -> TransitionResult:
    """
    Re-check a previously built quote just before submission.

    A quote built against a superseded record fails StaleState; otherwise the
    validator runs again with the latest time (so an expired quote fails Expired).
    """
    if latest_state.version != quote.base_state.version or latest_state != quote.base_state:
        error = TransitionError(
            ErrorKind.STALE_STATE,
            f"quote built on version {quote.base_state.version}, pool is at version {latest_state.version}",
        )
        logger.debug("quote is stale: %s", error)
        return TransitionResult(accepted=False, error=error)
    return validate_transition(
        quote.base_state,
        quote.operation,
        quote.proposed_state,
        current_time,
        quote.encoded_sizes,
        side_outputs=quote.side_outputs,
        live_state=latest_state,
        config=config.engine,
    )
