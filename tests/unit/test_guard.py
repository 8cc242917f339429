"""
Unit tests for the token eligibility rules.
"""

import pytest

from feeauction.core.auction import check_auctionable, is_auctionable, is_lp_token
from feeauction.core.errors import BidTokenNotAllowed, LPTokenNotAllowed, TokenNotWhitelisted


class TestLPDetection:
    """Tests for recognising pair shares."""

    def test_pair_is_lp(self, system):
        assert is_lp_token(system.chain, system.pair.address)

    def test_plain_token_is_not_lp(self, system):
        assert not is_lp_token(system.chain, system.tokens[0].address)

    def test_unknown_address_is_not_lp(self, system):
        assert not is_lp_token(system.chain, system.accounts[1])


class TestCheckAuctionable:
    """Tests for rule order and the whitelist."""

    def test_plain_token_passes(self, system):
        check_auctionable(system.chain, system.tokens[3].address, system.bid_token.address, {})

    def test_lp_checked_first(self, system):
        """A pair on the whitelist is still rejected as an LP token."""
        whitelist = {system.pair.address: True}
        with pytest.raises(LPTokenNotAllowed):
            check_auctionable(system.chain, system.pair.address, system.bid_token.address, whitelist)

    def test_bid_token_rejected_even_if_whitelisted(self, system):
        bid = system.bid_token.address
        with pytest.raises(BidTokenNotAllowed):
            check_auctionable(system.chain, bid, bid, {bid: True})

    def test_whitelist_restricts(self, system):
        whitelist = {system.tokens[1].address: True}
        check_auctionable(system.chain, system.tokens[1].address, system.bid_token.address, whitelist)
        with pytest.raises(TokenNotWhitelisted):
            check_auctionable(system.chain, system.tokens[2].address, system.bid_token.address, whitelist)

    def test_disabled_entries_do_not_configure_whitelist(self, system):
        whitelist = {system.tokens[1].address: False}
        check_auctionable(system.chain, system.tokens[2].address, system.bid_token.address, whitelist)

    def test_predicate(self, system):
        bid = system.bid_token.address
        assert is_auctionable(system.chain, system.tokens[0].address, bid, {})
        assert not is_auctionable(system.chain, system.pair.address, bid, {})
        assert not is_auctionable(system.chain, bid, bid, {})
