"""
ammcore: constant-product pool state-transition engine.

Decides whether a proposed swap, deposit or withdrawal turns one pool record
into a valid successor, using exact integer arithmetic.
"""

from .core import (
    AddLiquidity,
    AddLiquidityQuote,
    EngineConfig,
    LedgerOutput,
    Operation,
    OutputKind,
    RemoveLiquidity,
    RemoveLiquidityQuote,
    ReserveParams,
    Swap,
    SwapQuote,
    TransitionResult,
    check_adequacy,
    check_deadline,
    check_min_out,
    expected_transition,
    load_engine_config,
    minimum_reserve,
    quote_add_liquidity,
    quote_remove_liquidity,
    quote_swap,
    validate_transition,
    validate_transition_or_raise,
)
from .errors import AmmError, ErrorKind, TransitionError
from .integration import (
    PoolLedger,
    QuoteBuilderConfig,
    QuoteResult,
    TransitionQuote,
    build_add_liquidity,
    build_remove_liquidity,
    build_swap,
    build_swap_exact_out,
    revalidate_quote,
)
from .state import NATIVE_ASSET, AssetClass, PoolState, PoolStatus, initial_pool_state

__all__ = [
    "AddLiquidity",
    "AddLiquidityQuote",
    "EngineConfig",
    "LedgerOutput",
    "Operation",
    "OutputKind",
    "RemoveLiquidity",
    "RemoveLiquidityQuote",
    "ReserveParams",
    "Swap",
    "SwapQuote",
    "TransitionResult",
    "check_adequacy",
    "check_deadline",
    "check_min_out",
    "expected_transition",
    "load_engine_config",
    "minimum_reserve",
    "quote_add_liquidity",
    "quote_remove_liquidity",
    "quote_swap",
    "validate_transition",
    "validate_transition_or_raise",
    "AmmError",
    "ErrorKind",
    "TransitionError",
    "PoolLedger",
    "QuoteBuilderConfig",
    "QuoteResult",
    "TransitionQuote",
    "build_add_liquidity",
    "build_remove_liquidity",
    "build_swap",
    "build_swap_exact_out",
    "revalidate_quote",
    "NATIVE_ASSET",
    "AssetClass",
    "PoolState",
    "PoolStatus",
    "initial_pool_state",
]
