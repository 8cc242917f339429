"""Pair address helpers.

Pair addresses are derived deterministically from the factory address, the
sorted token pair and the factory's pair code hash (CREATE2), so anyone can
locate a pair without querying the factory.
"""

from typing import Tuple

from feeauction.core.errors import IdenticalAddresses
from feeauction.crypto import ZERO_ADDRESS, create2_address, keccak256


def sort_tokens(token_a: bytes, token_b: bytes) -> Tuple[bytes, bytes]:
    """Order two token addresses the way pairs store them."""
    if token_a == token_b:
        raise IdenticalAddresses()
    token0, token1 = (token_a, token_b) if token_a < token_b else (token_b, token_a)
    if token0 == ZERO_ADDRESS:
        raise ValueError("Zero address is not a token")
    return token0, token1


def pair_salt(token_a: bytes, token_b: bytes) -> bytes:
    token0, token1 = sort_tokens(token_a, token_b)
    return keccak256(token0 + token1)


def pair_for(factory: bytes, token_a: bytes, token_b: bytes, pair_code_hash: bytes) -> bytes:
    """Compute the pair address without any lookup."""
    return create2_address(factory, pair_salt(token_a, token_b), pair_code_hash)
