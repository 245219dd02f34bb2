"""
In-memory pool ledger.

Models the host ledger's consumption rule: a pool record can be spent once.
Each submission names the snapshot it was built against; it is validated with
the ledger's live record as `live_state`, so of several submissions against
the same version exactly one is accepted and the rest fail StaleState.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Mapping, Optional, Sequence

from ..core.config import EngineConfig
from ..core.operations import Operation
from ..core.reserve import LedgerOutput
from ..core.validator import TransitionResult, validate_transition
from ..errors import ErrorKind
from ..state.assets import AssetClass
from ..state.pools import PoolState

logger = logging.getLogger(__name__)


class PoolLedger:
    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        self._config = config or EngineConfig()
        self._lock = threading.Lock()
        self._pools: Dict[AssetClass, PoolState] = {}

    def register(self, state: PoolState) -> None:
        """Add a new pool record; the pool NFT must not already be in use."""
        if not isinstance(state, PoolState):
            raise TypeError("state must be a PoolState")
        with self._lock:
            if state.pool_nft in self._pools:
                raise ValueError(f"pool already registered: {state.pool_nft.unit}")
            self._pools[state.pool_nft] = state

    def current(self, pool_nft: AssetClass) -> PoolState:
        with self._lock:
            try:
                return self._pools[pool_nft]
            except KeyError:
                raise KeyError(f"unknown pool: {pool_nft.unit}") from None

    def submit(
        self,
        old_state: PoolState,
        operation: Operation,
        proposed_new_state: PoolState,
        current_time: int,
        encoded_sizes: Mapping[str, int],
        *,
        side_outputs: Sequence[LedgerOutput] = (),
    ) -> TransitionResult:
        """Validate against the live record and, if accepted, replace it with `proposed_new_state`."""
        with self._lock:
            live = self._pools.get(old_state.pool_nft)
            if live is None:
                raise KeyError(f"unknown pool: {old_state.pool_nft.unit}")

            result = validate_transition(
                old_state,
                operation,
                proposed_new_state,
                current_time,
                encoded_sizes,
                side_outputs=side_outputs,
                live_state=live,
                config=self._config,
            )
            if result.accepted:
                self._pools[old_state.pool_nft] = proposed_new_state
            elif result.error is not None and result.error.kind is ErrorKind.STALE_STATE:
                logger.info(
                    "stale submission for pool %s: built on version %d, live version %d",
                    old_state.pool_nft.unit,
                    old_state.version,
                    live.version,
                )
            return result
