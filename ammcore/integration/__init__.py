"""
Integration layer: quote building and the in-memory reference ledger.
"""

from .pool_ledger import PoolLedger
from .quote_builder import (
    QuoteBuilderConfig,
    QuoteResult,
    TransitionQuote,
    build_add_liquidity,
    build_remove_liquidity,
    build_swap,
    build_swap_exact_out,
    revalidate_quote,
)

__all__ = [
    "PoolLedger",
    "QuoteBuilderConfig",
    "QuoteResult",
    "TransitionQuote",
    "build_add_liquidity",
    "build_remove_liquidity",
    "build_swap",
    "build_swap_exact_out",
    "revalidate_quote",
]
