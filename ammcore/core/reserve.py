"""
Minimum native-currency reserve for ledger records.

Every record the ledger stores must carry enough native currency to fund its
own storage:

    minimum = base(kind) + asset_count * per_asset + encoded_size * per_byte + buffer(kind)

Pool records get a 10% buffer over their base. The minimum is monotone in both
`encoded_size` and `asset_count`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from ..errors import ErrorKind, TransitionError
from ..state.pools import PoolState


class OutputKind(Enum):
    POOL = "pool"
    SCRIPT = "script"
    LP_TOKEN = "lp_token"
    USER = "user"


@dataclass(frozen=True)
class ReserveParams:
    user_base: int = 1_000_000
    script_base: int = 2_000_000
    pool_base: int = 3_000_000
    lp_token_base: int = 2_000_000
    per_asset: int = 344_798
    per_byte: int = 4_310
    pool_buffer_divisor: int = 10
    max_record_size: int = 16_384

    def __post_init__(self) -> None:
        for name in (
            "user_base",
            "script_base",
            "pool_base",
            "lp_token_base",
            "per_asset",
            "per_byte",
            "max_record_size",
        ):
            v = getattr(self, name)
            if not isinstance(v, int) or isinstance(v, bool) or v < 0:
                raise ValueError(f"{name} must be a non-negative int")
        if not isinstance(self.pool_buffer_divisor, int) or self.pool_buffer_divisor <= 0:
            raise ValueError("pool_buffer_divisor must be a positive int")

    def base(self, kind: OutputKind) -> int:
        if kind is OutputKind.POOL:
            return self.pool_base
        if kind is OutputKind.SCRIPT:
            return self.script_base
        if kind is OutputKind.LP_TOKEN:
            return self.lp_token_base
        return self.user_base

    def buffer(self, kind: OutputKind) -> int:
        if kind is OutputKind.POOL:
            return self.pool_base // self.pool_buffer_divisor
        return 0


DEFAULT_RESERVE_PARAMS = ReserveParams()


@dataclass(frozen=True)
class LedgerOutput:
    """Any non-pool record produced alongside a transition (e.g. the user's payout)."""

    native_amount: int
    asset_count: int
    kind: OutputKind = OutputKind.USER
    label: str = ""

    def __post_init__(self) -> None:
        for name in ("native_amount", "asset_count"):
            v = getattr(self, name)
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
            if v < 0:
                raise ValueError(f"{name} must be non-negative")
        if not isinstance(self.kind, OutputKind):
            raise TypeError("kind must be an OutputKind")


@dataclass(frozen=True)
class ReserveBreakdown:
    base: int
    asset_cost: int
    size_cost: int
    buffer: int

    @property
    def total(self) -> int:
        return self.base + self.asset_cost + self.size_cost + self.buffer


def _require_count(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative: {value}")


def reserve_breakdown(
    encoded_size: int,
    asset_count: int,
    kind: OutputKind = OutputKind.USER,
    params: ReserveParams = DEFAULT_RESERVE_PARAMS,
) -> ReserveBreakdown:
    _require_count("encoded_size", encoded_size)
    _require_count("asset_count", asset_count)
    return ReserveBreakdown(
        base=params.base(kind),
        asset_cost=asset_count * params.per_asset,
        size_cost=encoded_size * params.per_byte,
        buffer=params.buffer(kind),
    )


def minimum_reserve(
    encoded_size: int,
    asset_count: int,
    kind: OutputKind = OutputKind.USER,
    params: ReserveParams = DEFAULT_RESERVE_PARAMS,
) -> int:
    """Minimum native amount a record of this size, asset count and kind must hold."""
    return reserve_breakdown(encoded_size, asset_count, kind, params).total


def pool_output(state: PoolState, label: str = "pool") -> LedgerOutput:
    """The pool record viewed as a ledger output."""
    return LedgerOutput(
        native_amount=state.native_amount,
        asset_count=state.asset_count,
        kind=OutputKind.POOL,
        label=label,
    )


def check_adequacy(
    output: Union[PoolState, LedgerOutput],
    encoded_size: int,
    params: ReserveParams = DEFAULT_RESERVE_PARAMS,
) -> Optional[TransitionError]:
    """
    Check that a record funds its own storage.

    Returns None if adequate, else RecordTooLarge (size above the ledger limit)
    or InsufficientReserve (native amount below the minimum).
    """
    if isinstance(output, PoolState):
        output = pool_output(output)
    elif not isinstance(output, LedgerOutput):
        raise TypeError("output must be a PoolState or LedgerOutput")

    _require_count("encoded_size", encoded_size)
    where = f" ({output.label})" if output.label else ""
    if encoded_size > params.max_record_size:
        return TransitionError(
            ErrorKind.RECORD_TOO_LARGE,
            f"record size {encoded_size} exceeds {params.max_record_size} bytes{where}",
        )

    required = minimum_reserve(encoded_size, output.asset_count, output.kind, params)
    if output.native_amount < required:
        return TransitionError(
            ErrorKind.INSUFFICIENT_RESERVE,
            f"native amount {output.native_amount} below minimum {required}{where}",
        )
    return None
