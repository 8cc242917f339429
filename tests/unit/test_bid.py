"""
Unit tests for bid records and events.
"""

import pytest

from feeauction.core.auction import AuctionEvent, BidRecord, EventType
from feeauction.crypto import ZERO_ADDRESS


class TestBidRecord:
    """Tests for record state helpers."""

    def test_inactive_record(self):
        record = BidRecord.inactive()
        assert record.bidder == ZERO_ADDRESS
        assert record.bid_amount == 0
        assert not record.is_active

    def test_closed_at_min_ttl(self):
        record = BidRecord(bidder=b"\x01" * 20, bid_amount=1000, min_ttl=100, max_ttl=300)
        assert not record.is_closed(99)
        assert record.is_closed(100)

    def test_closed_at_max_ttl(self):
        record = BidRecord(bidder=b"\x01" * 20, bid_amount=1000, min_ttl=300, max_ttl=200)
        assert record.is_closed(200)

    def test_copy_is_independent(self):
        record = BidRecord(bidder=b"\x01" * 20, bid_amount=1000)
        clone = record.copy()
        clone.bid_amount = 5
        assert record.bid_amount == 1000

    def test_to_dict(self):
        data = BidRecord(bidder=b"\x01" * 20, bid_amount=7).to_dict()
        assert data["bidder"] == "0x" + "01" * 20
        assert data["bid_amount"] == 7


class TestAuctionEvent:
    def test_defaults_and_immutability(self):
        event = AuctionEvent(event_type=EventType.SKIMMED, timestamp=1, amount=10)
        assert event.token == ZERO_ADDRESS
        assert not event.flag
        with pytest.raises(AttributeError):
            event.amount = 11
