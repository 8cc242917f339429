"""Fee-token auction engine"""
from feeauction.core.auction.bid import BidRecord, AuctionEvent, EventType
from feeauction.core.auction.guard import (
    check_auctionable,
    is_auctionable,
    is_lp_token,
)
from feeauction.core.auction.engine import AuctionEngine

__all__ = [
    "BidRecord",
    "AuctionEvent",
    "EventType",
    "check_auctionable",
    "is_auctionable",
    "is_lp_token",
    "AuctionEngine",
]
