"""
Pool state record.

A pool is one versioned record holding both reserves, the LP supply, the fee
rate and the two immutable identities (paired asset and pool NFT). Records are
frozen; every accepted transition produces a successor with `version + 1`.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Callable, Dict

from ..kernels.python.cpmm_swap import BPS_DENOM
from ..kernels.python.fixed_point import U128_MAX
from .assets import AssetClass
from .canonical import canonical_json_size


MAX_FEE_BPS = 1000


class PoolStatus(Enum):
    UNINITIALIZED = "UNINITIALIZED"
    ACTIVE = "ACTIVE"


def _require_amount(name: str, value: Any) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0 or value > U128_MAX:
        raise ValueError(f"{name} must be in [0, 2^128): {value}")


@dataclass(frozen=True)
class PoolState:
    reserve_a: int
    reserve_b: int
    lp_supply: int
    fee_bps: int
    asset: AssetClass
    pool_nft: AssetClass
    storage_deposit: int = 0
    version: int = 0
    status: PoolStatus = PoolStatus.UNINITIALIZED

    def __post_init__(self) -> None:
        for name in ("reserve_a", "reserve_b", "lp_supply", "storage_deposit", "version"):
            _require_amount(name, getattr(self, name))
        if not isinstance(self.fee_bps, int) or isinstance(self.fee_bps, bool):
            raise TypeError("fee_bps must be an int")
        if not (0 <= self.fee_bps <= BPS_DENOM):
            raise ValueError(f"fee_bps must be in [0, {BPS_DENOM}]: {self.fee_bps}")
        if not isinstance(self.asset, AssetClass):
            raise TypeError("asset must be an AssetClass")
        if not isinstance(self.pool_nft, AssetClass):
            raise TypeError("pool_nft must be an AssetClass")
        if not isinstance(self.status, PoolStatus):
            raise TypeError("status must be a PoolStatus")

    @property
    def constant_product(self) -> int:
        return self.reserve_a * self.reserve_b

    @property
    def native_amount(self) -> int:
        """Native currency held by the record: tradeable reserve plus the storage deposit."""
        return self.reserve_a + self.storage_deposit

    @property
    def asset_count(self) -> int:
        """Non-native assets carried by the record (the pool NFT always, the paired asset when held)."""
        return 1 + (1 if self.reserve_b > 0 else 0)

    @property
    def is_initialized(self) -> bool:
        return self.status is PoolStatus.ACTIVE

    def successor(self, **changes: Any) -> "PoolState":
        """Next version of this record with `changes` applied."""
        if "version" in changes:
            raise TypeError("successor() manages version itself")
        return replace(self, version=self.version + 1, **changes)


def initial_pool_state(
    *,
    asset: AssetClass,
    pool_nft: AssetClass,
    fee_bps: int,
    storage_deposit: int = 0,
) -> PoolState:
    """A freshly created, empty pool awaiting its bootstrap deposit."""
    return PoolState(
        reserve_a=0,
        reserve_b=0,
        lp_supply=0,
        fee_bps=fee_bps,
        asset=asset,
        pool_nft=pool_nft,
        storage_deposit=storage_deposit,
        version=0,
        status=PoolStatus.UNINITIALIZED,
    )


# ---------------------------------------------------------------------------
# Invariants
# ---------------------------------------------------------------------------


def inv_reserves_nonzero_when_supplied(s: PoolState) -> bool:
    if s.lp_supply == 0:
        return True
    return s.reserve_a > 0 and s.reserve_b > 0


def inv_reserves_zero_when_unsupplied(s: PoolState) -> bool:
    if s.lp_supply > 0:
        return True
    return s.reserve_a == 0 and s.reserve_b == 0


def inv_uninitialized_is_empty(s: PoolState) -> bool:
    if s.status is PoolStatus.ACTIVE:
        return True
    return s.lp_supply == 0


def inv_identities_distinct(s: PoolState) -> bool:
    return s.asset != s.pool_nft and not s.asset.is_native and not s.pool_nft.is_native


INVARIANT_REGISTRY: Dict[str, Callable[[PoolState], bool]] = {
    "inv_reserves_nonzero_when_supplied": inv_reserves_nonzero_when_supplied,
    "inv_reserves_zero_when_unsupplied": inv_reserves_zero_when_unsupplied,
    "inv_uninitialized_is_empty": inv_uninitialized_is_empty,
    "inv_identities_distinct": inv_identities_distinct,
}


def check_invariants(state: PoolState, max_fee_bps: int = MAX_FEE_BPS) -> list[str]:
    """Return list of violated invariant IDs (empty = all pass)."""
    violated = []
    if not (0 <= state.fee_bps <= max_fee_bps):
        violated.append("inv_fee_in_range")
    violated.extend(inv_id for inv_id, check_fn in INVARIANT_REGISTRY.items() if not check_fn(state))
    return violated


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

_STATE_KEYS = frozenset(f.name for f in fields(PoolState))


def state_to_dict(state: PoolState) -> dict:
    return {
        "reserve_a": state.reserve_a,
        "reserve_b": state.reserve_b,
        "lp_supply": state.lp_supply,
        "fee_bps": state.fee_bps,
        "asset": state.asset.to_dict(),
        "pool_nft": state.pool_nft.to_dict(),
        "storage_deposit": state.storage_deposit,
        "version": state.version,
        "status": state.status.value,
    }


def state_from_dict(data: dict) -> PoolState:
    if not isinstance(data, dict):
        raise TypeError("pool state must be an object")
    unknown = set(data.keys()) - _STATE_KEYS
    if unknown:
        raise ValueError(f"unknown pool state fields: {sorted(unknown)}")
    missing = {"reserve_a", "reserve_b", "lp_supply", "fee_bps", "asset", "pool_nft"} - set(data.keys())
    if missing:
        raise ValueError(f"missing pool state fields: {sorted(missing)}")
    return PoolState(
        reserve_a=data["reserve_a"],
        reserve_b=data["reserve_b"],
        lp_supply=data["lp_supply"],
        fee_bps=data["fee_bps"],
        asset=AssetClass.from_dict(data["asset"]),
        pool_nft=AssetClass.from_dict(data["pool_nft"]),
        storage_deposit=data.get("storage_deposit", 0),
        version=data.get("version", 0),
        status=PoolStatus(data.get("status", PoolStatus.UNINITIALIZED.value)),
    )


def estimate_encoded_size(state: PoolState) -> int:
    """Byte size of the record's canonical JSON encoding."""
    return canonical_json_size(state_to_dict(state))
