"""
Pool operations.

The operation set is closed: a swap, an add-liquidity deposit, or a
remove-liquidity burn. Each carries the caller's minimum-output limits and a
deadline; the validator rejects anything else.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Optional, Union

from ..errors import ErrorKind, TransitionError


class OperationKind(Enum):
    SWAP = "swap"
    ADD_LIQUIDITY = "add_liquidity"
    REMOVE_LIQUIDITY = "remove_liquidity"


@dataclass(frozen=True)
class Swap:
    """Sell `amount_in` of one side for at least `min_out` of the other (A->B when `a_to_b`)."""

    amount_in: int
    a_to_b: bool
    min_out: int
    deadline: int

    kind = OperationKind.SWAP


@dataclass(frozen=True)
class AddLiquidity:
    amount_a: int
    amount_b: int
    min_lp_out: int
    deadline: int

    kind = OperationKind.ADD_LIQUIDITY


@dataclass(frozen=True)
class RemoveLiquidity:
    lp_burn: int
    min_a_out: int
    min_b_out: int
    deadline: int

    kind = OperationKind.REMOVE_LIQUIDITY


Operation = Union[Swap, AddLiquidity, RemoveLiquidity]

OPERATION_TYPES: Dict[OperationKind, type] = {
    OperationKind.SWAP: Swap,
    OperationKind.ADD_LIQUIDITY: AddLiquidity,
    OperationKind.REMOVE_LIQUIDITY: RemoveLiquidity,
}


def _require_int(value: Any, *, name: str, non_negative: bool = False) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{name} must be an int")
    if non_negative and value < 0:
        raise ValueError(f"{name} must be non-negative")
    return int(value)


def check_operation_fields(op: Operation) -> Optional[TransitionError]:
    """
    Field-level checks that need no pool state.

    Returns None if the operation is well-formed, else the first failure:
    InvalidAmount for a non-positive input amount or a negative limit,
    InvalidBurnAmount for a non-positive `lp_burn`.
    """
    if isinstance(op, Swap):
        if not isinstance(op.a_to_b, bool):
            return TransitionError(ErrorKind.MALFORMED_REQUEST, "a_to_b must be a bool")
        positive = (("amount_in", op.amount_in),)
        limits = (("min_out", op.min_out), ("deadline", op.deadline))
    elif isinstance(op, AddLiquidity):
        positive = (("amount_a", op.amount_a), ("amount_b", op.amount_b))
        limits = (("min_lp_out", op.min_lp_out), ("deadline", op.deadline))
    elif isinstance(op, RemoveLiquidity):
        try:
            lp_burn = _require_int(op.lp_burn, name="lp_burn")
        except ValueError as exc:
            return TransitionError(ErrorKind.MALFORMED_REQUEST, str(exc))
        if lp_burn <= 0:
            return TransitionError(ErrorKind.INVALID_BURN_AMOUNT, f"lp_burn must be positive: {lp_burn}")
        positive = ()
        limits = (("min_a_out", op.min_a_out), ("min_b_out", op.min_b_out), ("deadline", op.deadline))
    else:
        return TransitionError(ErrorKind.MALFORMED_REQUEST, f"unknown operation type: {type(op).__name__}")

    try:
        for name, value in positive + limits:
            _require_int(value, name=name)
    except ValueError as exc:
        return TransitionError(ErrorKind.MALFORMED_REQUEST, str(exc))

    for name, value in positive:
        if value <= 0:
            return TransitionError(ErrorKind.INVALID_AMOUNT, f"{name} must be positive: {value}")
    for name, value in limits:
        if value < 0:
            return TransitionError(ErrorKind.INVALID_AMOUNT, f"{name} must be non-negative: {value}")
    return None


def operation_to_dict(op: Operation) -> Dict[str, Any]:
    """Plain mapping with a `"kind"` tag (the inverse of `operation_from_dict`)."""
    if type(op) not in OPERATION_TYPES.values():
        raise TypeError(f"unknown operation type: {type(op).__name__}")
    out: Dict[str, Any] = {"kind": op.kind.value}
    for f in fields(op):
        out[f.name] = getattr(op, f.name)
    return out


def operation_from_dict(data: Any) -> Operation:
    """
    Parse a tagged mapping into an Operation.

    Raises:
        ValueError: unknown `"kind"`, unknown or missing fields, or wrongly typed values.
    """
    if not isinstance(data, dict):
        raise ValueError("operation must be an object")
    raw_kind = data.get("kind")
    try:
        kind = OperationKind(raw_kind)
    except ValueError:
        raise ValueError(f"unknown operation kind: {raw_kind!r}") from None

    cls = OPERATION_TYPES[kind]
    names = [f.name for f in fields(cls)]
    unknown = set(data.keys()) - set(names) - {"kind"}
    if unknown:
        raise ValueError(f"unknown {kind.value} fields: {sorted(unknown)}")
    missing = [n for n in names if n not in data]
    if missing:
        raise ValueError(f"missing {kind.value} fields: {missing}")

    values: Dict[str, Any] = {}
    for name in names:
        value = data[name]
        if name == "a_to_b":
            if not isinstance(value, bool):
                raise ValueError("a_to_b must be a bool")
            values[name] = value
        else:
            values[name] = _require_int(value, name=name, non_negative=True)
    return cls(**values)
