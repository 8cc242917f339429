"""
LiquidityUnwinder - turns accumulated pair shares into their two tokens.

The engine receives protocol-fee shares from every pair it is `fee_to`
for. Unwinding sends the holder's whole share balance back to the pair and
burns it, after which the holder owns plain balances of both tokens, ready
to be auctioned.
"""

from typing import Tuple

from feeauction.core.amm.library import pair_for
from feeauction.core.amm.pair import LiquidityPair
from feeauction.core.chain import Chain
from feeauction.core.errors import PairNotFound
from feeauction.crypto import short_hex
from feeauction.utils.logger import get_logger

logger = get_logger("amm.unwinder")


class LiquidityUnwinder:
    """Burns `holder`'s share of a pair."""

    def __init__(self, chain: Chain, holder: bytes, factory: bytes, pair_code_hash: bytes):
        self.chain = chain
        self.holder = holder
        self.factory = factory
        self.pair_code_hash = pair_code_hash

    def pair_address(self, token_a: bytes, token_b: bytes) -> bytes:
        return pair_for(self.factory, token_a, token_b, self.pair_code_hash)

    def unwind_lp(self, token_a: bytes, token_b: bytes) -> Tuple[int, int]:
        """
        Burn the holder's full share of the (token_a, token_b) pair.

        Returns:
            (amount_a, amount_b) credited to the holder, in argument order

        Raises:
            PairNotFound: no pair exists at the derived address
            InsufficientLiquidityBurned: holder has no shares
        """
        address = self.pair_address(token_a, token_b)
        pair = self.chain.get_contract(address)
        if not isinstance(pair, LiquidityPair):
            raise PairNotFound(f"No pair at {short_hex(address)}")

        with self.chain.atomic():
            liquidity = pair.balance_of(self.holder)
            pair.transfer(self.holder, address, liquidity)
            amount0, amount1 = pair.burn(self.holder)

        logger.info(
            f"Unwound {liquidity} shares of {short_hex(address)}: "
            f"{amount0} token0, {amount1} token1"
        )
        if pair.token0 == token_a:
            return amount0, amount1
        return amount1, amount0
