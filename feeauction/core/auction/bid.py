"""
Bid records and auction events.

A BidRecord is the whole state of one reward token's auction. Inactive
records are represented explicitly (zero bidder, zero amounts) rather than
by absence, so readers always get a record back.
"""

from dataclasses import dataclass, replace
from enum import IntEnum

from feeauction.crypto import ZERO_ADDRESS, bytes_to_hex


@dataclass
class BidRecord:
    """
    State of one reward token's auction.

    Attributes:
        bidder: Current highest bidder (ZERO_ADDRESS when inactive)
        bid_amount: Bid tokens escrowed for `bidder`
        reward_amount: Reward tokens locked for the winner, fixed at start
        min_ttl: Earliest closing time, pushed forward by every bid
        max_ttl: Hard deadline, fixed at start
    """
    bidder: bytes = ZERO_ADDRESS
    bid_amount: int = 0
    reward_amount: int = 0
    min_ttl: int = 0
    max_ttl: int = 0

    @classmethod
    def inactive(cls) -> "BidRecord":
        return cls()

    @property
    def is_active(self) -> bool:
        return self.bidder != ZERO_ADDRESS

    def is_closed(self, now: int) -> bool:
        """Closed once either window boundary has passed."""
        return now >= self.min_ttl or now >= self.max_ttl

    def copy(self) -> "BidRecord":
        return replace(self)

    def to_dict(self) -> dict:
        return {
            "bidder": bytes_to_hex(self.bidder),
            "bid_amount": self.bid_amount,
            "reward_amount": self.reward_amount,
            "min_ttl": self.min_ttl,
            "max_ttl": self.max_ttl,
        }


class EventType(IntEnum):
    STARTED = 0
    PLACED_BID = 1
    ENDED = 2
    SKIMMED = 3
    RECEIVER_UPDATED = 4
    WHITELIST_UPDATED = 5
    OWNERSHIP_TRANSFERRED = 6
    LP_UNWOUND = 7


@dataclass(frozen=True)
class AuctionEvent:
    """
    Log entry for a successful engine call.

    `token` and `account` are ZERO_ADDRESS where they do not apply.
    """
    event_type: EventType
    timestamp: int
    token: bytes = ZERO_ADDRESS
    account: bytes = ZERO_ADDRESS
    amount: int = 0
    flag: bool = False
