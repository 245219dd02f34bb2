"""
Engine configuration.

Defaults are the production values; `load_engine_config` lets a host override
the policy knobs from the environment with clamped integer parsing.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from ..kernels.python.cpmm_swap import BPS_DENOM
from ..state.pools import MAX_FEE_BPS
from .reserve import ReserveParams


@dataclass(frozen=True)
class EngineConfig:
    reserve: ReserveParams = field(default_factory=ReserveParams)
    max_fee_bps: int = MAX_FEE_BPS

    def __post_init__(self) -> None:
        if not isinstance(self.reserve, ReserveParams):
            raise TypeError("reserve must be a ReserveParams")
        if not isinstance(self.max_fee_bps, int) or isinstance(self.max_fee_bps, bool):
            raise TypeError("max_fee_bps must be an int")
        if not (0 <= self.max_fee_bps < BPS_DENOM):
            raise ValueError(f"max_fee_bps must be in [0, {BPS_DENOM})")


def _env_int(environ: Mapping[str, str], name: str, default: int, *, lo: int, hi: int) -> int:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return int(default)
    try:
        v = int(raw.strip())
    except ValueError:
        return int(default)
    if v < lo:
        return int(lo)
    if v > hi:
        return int(hi)
    return int(v)


def load_engine_config(environ: Optional[Mapping[str, str]] = None) -> EngineConfig:
    """
    Build an EngineConfig from environment variables.

    - AMM_MAX_FEE_BPS (default 1000, clamped to [0, 9999])
    - AMM_RESERVE_PER_BYTE (default 4310)
    - AMM_RESERVE_PER_ASSET (default 344798)
    - AMM_RESERVE_MAX_RECORD_SIZE (default 16384)
    """
    env = os.environ if environ is None else environ
    defaults = ReserveParams()
    reserve = ReserveParams(
        per_byte=_env_int(env, "AMM_RESERVE_PER_BYTE", defaults.per_byte, lo=0, hi=1_000_000),
        per_asset=_env_int(env, "AMM_RESERVE_PER_ASSET", defaults.per_asset, lo=0, hi=100_000_000),
        max_record_size=_env_int(env, "AMM_RESERVE_MAX_RECORD_SIZE", defaults.max_record_size, lo=1, hi=1 << 20),
    )
    return EngineConfig(
        reserve=reserve,
        max_fee_bps=_env_int(env, "AMM_MAX_FEE_BPS", MAX_FEE_BPS, lo=0, hi=BPS_DENOM - 1),
    )
