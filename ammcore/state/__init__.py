"""
State layer: asset identities, the pool record and its canonical encoding.
"""

from .assets import NATIVE_ASSET, AssetClass
from .canonical import canonical_json_bytes, canonical_json_size
from .pools import (
    MAX_FEE_BPS,
    PoolState,
    PoolStatus,
    check_invariants,
    estimate_encoded_size,
    initial_pool_state,
    state_from_dict,
    state_to_dict,
)

__all__ = [
    "AssetClass",
    "NATIVE_ASSET",
    "canonical_json_bytes",
    "canonical_json_size",
    "MAX_FEE_BPS",
    "PoolState",
    "PoolStatus",
    "check_invariants",
    "estimate_encoded_size",
    "initial_pool_state",
    "state_from_dict",
    "state_to_dict",
]
