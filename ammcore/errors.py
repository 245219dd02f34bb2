"""Error kinds for the pool transition engine.

Kernels and engines raise ``AmmError``; the public boundary (``validate_transition``
and the quote builder) converts it into a ``TransitionError`` value carried by a
result object. Every kind names exactly one failed rule, so callers can decide
whether to re-quote, abort or surface a message.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique


@unique
class ErrorKind(Enum):
    OVERFLOW = "Overflow"
    DIVISION_BY_ZERO = "DivisionByZero"
    INVALID_RESERVES = "InvalidReserves"
    INSUFFICIENT_LIQUIDITY = "InsufficientLiquidity"
    DEGENERATE_INITIAL_DEPOSIT = "DegenerateInitialDeposit"
    INVALID_BURN_AMOUNT = "InvalidBurnAmount"
    INSUFFICIENT_RESERVE = "InsufficientReserve"
    EXPIRED = "Expired"
    SLIPPAGE_EXCEEDED = "SlippageExceeded"
    IDENTITY_MISMATCH = "IdentityMismatch"
    FEE_MISMATCH = "FeeMismatch"
    STALE_STATE = "StaleState"
    MISMATCHED_RECOMPUTATION = "MismatchedRecomputation"

    # Request / state shape problems.
    INVALID_AMOUNT = "InvalidAmount"
    INVALID_STATE = "InvalidState"
    INVALID_TRANSITION = "InvalidTransition"
    RECORD_TOO_LARGE = "RecordTooLarge"
    MALFORMED_REQUEST = "MalformedRequest"


@dataclass(frozen=True)
class TransitionError:
    """A rejection reason: the kind plus a short human-readable detail."""

    kind: ErrorKind
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.kind.value}: {self.detail}"
        return self.kind.value


class AmmError(Exception):
    """Raised by kernels and engines when an operation cannot be computed."""

    def __init__(self, kind: ErrorKind, detail: str = "") -> None:
        self.kind = kind
        self.detail = detail
        super().__init__(f"{kind.value}: {detail}" if detail else kind.value)

    @property
    def error(self) -> TransitionError:
        return TransitionError(kind=self.kind, detail=self.detail)

    @classmethod
    def from_error(cls, error: TransitionError) -> "AmmError":
        return cls(error.kind, error.detail)
