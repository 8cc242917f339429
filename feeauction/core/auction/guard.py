"""
Guard rules - which tokens may be auctioned.

Checked in order:
1. Liquidity-pair shares are never auctioned (they must be unwound first)
2. The bid token is never auctioned against itself
3. If any token is whitelisted, only whitelisted tokens pass
"""

from typing import Mapping

from feeauction.core.chain import Chain
from feeauction.core.errors import BidTokenNotAllowed, LPTokenNotAllowed, TokenNotWhitelisted


def is_lp_token(chain: Chain, token: bytes) -> bool:
    """True if the contract at `token` exposes the pair interface."""
    contract = chain.get_contract(token)
    return (
        contract is not None
        and getattr(contract, "token0", None) is not None
        and getattr(contract, "token1", None) is not None
    )


def whitelist_configured(whitelist: Mapping[bytes, bool]) -> bool:
    return any(whitelist.values())


def is_whitelisted(whitelist: Mapping[bytes, bool], token: bytes) -> bool:
    return whitelist.get(token, False)


def check_auctionable(
    chain: Chain,
    token: bytes,
    bid_token: bytes,
    whitelist: Mapping[bytes, bool],
) -> None:
    """
    Raise the first guard rule `token` violates.

    Raises:
        LPTokenNotAllowed: token is a liquidity pair
        BidTokenNotAllowed: token is the bid token
        TokenNotWhitelisted: a whitelist is active and token is not on it
    """
    if is_lp_token(chain, token):
        raise LPTokenNotAllowed()
    if token == bid_token:
        raise BidTokenNotAllowed()
    if whitelist_configured(whitelist) and not is_whitelisted(whitelist, token):
        raise TokenNotWhitelisted()


def is_auctionable(
    chain: Chain,
    token: bytes,
    bid_token: bytes,
    whitelist: Mapping[bytes, bool],
) -> bool:
    """Predicate form of `check_auctionable`."""
    try:
        check_auctionable(chain, token, bid_token, whitelist)
    except (LPTokenNotAllowed, BidTokenNotAllowed, TokenNotWhitelisted):
        return False
    return True
