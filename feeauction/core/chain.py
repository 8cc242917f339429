"""
Chain - simulated execution host for contracts.

Conceptual Background:
---------------------
Every engine operation must apply all of its effects or none of them. On a
real chain the host runtime guarantees this; here the Chain object does:

1. **Clock**: a manually advanced timestamp (seconds)
2. **Registry**: address -> Contract, addresses allocated deterministically
3. **Snapshots**: each Contract declares the attributes that make up its
   state; a snapshot deep-copies them together with the clock
4. **Atomic scopes**: the outermost `atomic()` block snapshots on entry and
   reverts on any exception before re-raising

Nested atomic scopes join the outermost one, so a failure anywhere inside a
call unwinds the whole call.
"""

import copy
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple

from feeauction.crypto import keccak256, short_hex
from feeauction.utils.logger import get_logger
from feeauction.utils.validation import validate_timestamp

logger = get_logger("chain")


# =============================================================================
# Contracts
# =============================================================================


class Contract:
    """
    Base class for anything living at an address on the Chain.

    Subclasses list the attributes that make up their mutable state in
    `_state_fields`; only those are captured by snapshots.
    """

    _state_fields: Tuple[str, ...] = ()

    def __init__(self, chain: "Chain", label: str, address: Optional[bytes] = None):
        self.chain = chain
        self.address = address if address is not None else chain.new_address(label)
        chain.register(self)

    def _state_names(self) -> List[str]:
        names: List[str] = []
        for cls in type(self).__mro__:
            for name in cls.__dict__.get("_state_fields", ()):
                if name not in names:
                    names.append(name)
        return names

    def capture_state(self) -> Dict[str, Any]:
        return {name: copy.deepcopy(getattr(self, name)) for name in self._state_names()}

    def restore_state(self, state: Dict[str, Any]) -> None:
        for name, value in state.items():
            setattr(self, name, copy.deepcopy(value))


# =============================================================================
# Chain
# =============================================================================


@dataclass
class ChainSnapshot:
    """Captured state of the whole chain."""
    snapshot_id: int
    timestamp: int
    nonce: int
    contracts: Dict[bytes, Dict[str, Any]]


class Chain:
    """
    Single-threaded host holding contracts, a clock and snapshots.

    Attributes:
        timestamp: Current block timestamp in seconds
        contracts: Mapping of address to Contract
    """

    def __init__(self, timestamp: Optional[int] = None):
        self.timestamp = int(time.time()) if timestamp is None else timestamp
        self.contracts: Dict[bytes, Contract] = {}
        self._nonce = 0
        self._snapshots: Dict[int, ChainSnapshot] = {}
        self._next_snapshot_id = 1
        self._atomic_depth = 0

    # =========================================================================
    # Clock
    # =========================================================================

    @property
    def now(self) -> int:
        return self.timestamp

    def increase_time(self, seconds: int) -> int:
        """Advance the clock and return the new timestamp."""
        if seconds < 0:
            raise ValueError(f"Cannot move time backwards: {seconds}")
        self.timestamp += seconds
        return self.timestamp

    def set_time(self, timestamp: int) -> None:
        valid, err = validate_timestamp(timestamp)
        if not valid:
            raise ValueError(err)
        if timestamp < self.timestamp:
            raise ValueError(f"Timestamp {timestamp} is before current time {self.timestamp}")
        self.timestamp = timestamp

    # =========================================================================
    # Addresses and Registry
    # =========================================================================

    def new_address(self, label: str = "") -> bytes:
        """Allocate a fresh, deterministic 20-byte address."""
        self._nonce += 1
        seed = label.encode() + self._nonce.to_bytes(8, byteorder="big")
        return keccak256(seed)[-20:]

    def register(self, contract: Contract) -> None:
        if contract.address in self.contracts:
            raise ValueError(f"Address {short_hex(contract.address)} already in use")
        self.contracts[contract.address] = contract

    def get_contract(self, address: bytes) -> Optional[Contract]:
        return self.contracts.get(address)

    # =========================================================================
    # Snapshots
    # =========================================================================

    def snapshot(self) -> int:
        """Capture the full chain state; returns an id for `revert`."""
        snapshot_id = self._next_snapshot_id
        self._next_snapshot_id += 1
        self._snapshots[snapshot_id] = ChainSnapshot(
            snapshot_id=snapshot_id,
            timestamp=self.timestamp,
            nonce=self._nonce,
            contracts={
                address: contract.capture_state()
                for address, contract in self.contracts.items()
            },
        )
        return snapshot_id

    def revert(self, snapshot_id: int) -> None:
        """
        Restore the chain to a snapshot.

        Contracts registered after the snapshot are removed. The snapshot
        and any taken after it are discarded.
        """
        snap = self._snapshots.get(snapshot_id)
        if snap is None:
            raise KeyError(f"Unknown snapshot {snapshot_id}")

        for address in list(self.contracts):
            if address not in snap.contracts:
                del self.contracts[address]
        for address, state in snap.contracts.items():
            self.contracts[address].restore_state(state)

        self.timestamp = snap.timestamp
        self._nonce = snap.nonce

        for sid in [sid for sid in self._snapshots if sid >= snapshot_id]:
            del self._snapshots[sid]

    def _discard(self, snapshot_id: int) -> None:
        self._snapshots.pop(snapshot_id, None)

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """
        All-or-nothing call scope.

        Usage:
            with chain.atomic():
                token.transfer(...)
                engine_state.update(...)
        """
        if self._atomic_depth > 0:
            self._atomic_depth += 1
            try:
                yield
            finally:
                self._atomic_depth -= 1
            return

        snapshot_id = self.snapshot()
        self._atomic_depth = 1
        try:
            yield
        except BaseException:
            self._atomic_depth = 0
            self.revert(snapshot_id)
            logger.debug(f"Reverted call scope (snapshot {snapshot_id})")
            raise
        else:
            self._atomic_depth = 0
            self._discard(snapshot_id)

    def __repr__(self) -> str:
        return f"Chain(timestamp={self.timestamp}, contracts={len(self.contracts)})"
