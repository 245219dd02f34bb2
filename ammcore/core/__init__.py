"""
Core pool algorithms: pricing, liquidity, reserve adequacy and transition validation.
"""

from .config import EngineConfig, load_engine_config
from .guards import check_deadline, check_min_out
from .liquidity import (
    AddLiquidityQuote,
    BalancedDeposit,
    RemoveLiquidityQuote,
    balance_deposit,
    quote_add_liquidity,
    quote_remove_liquidity,
)
from .operations import (
    AddLiquidity,
    Operation,
    OperationKind,
    RemoveLiquidity,
    Swap,
    check_operation_fields,
    operation_from_dict,
    operation_to_dict,
)
from .pricing import SwapQuote, price_impact_bps, quote_swap, quote_swap_exact_out
from .reserve import (
    LedgerOutput,
    OutputKind,
    ReserveBreakdown,
    ReserveParams,
    check_adequacy,
    minimum_reserve,
    pool_output,
    reserve_breakdown,
)
from .validator import (
    POOL_OUTPUT,
    TransitionResult,
    expected_transition,
    validate_transition,
    validate_transition_or_raise,
)

__all__ = [
    "EngineConfig",
    "load_engine_config",
    "check_deadline",
    "check_min_out",
    "AddLiquidityQuote",
    "BalancedDeposit",
    "RemoveLiquidityQuote",
    "balance_deposit",
    "quote_add_liquidity",
    "quote_remove_liquidity",
    "AddLiquidity",
    "Operation",
    "OperationKind",
    "RemoveLiquidity",
    "Swap",
    "check_operation_fields",
    "operation_from_dict",
    "operation_to_dict",
    "SwapQuote",
    "price_impact_bps",
    "quote_swap",
    "quote_swap_exact_out",
    "LedgerOutput",
    "OutputKind",
    "ReserveBreakdown",
    "ReserveParams",
    "check_adequacy",
    "minimum_reserve",
    "pool_output",
    "reserve_breakdown",
    "POOL_OUTPUT",
    "TransitionResult",
    "expected_transition",
    "validate_transition",
    "validate_transition_or_raise",
]
