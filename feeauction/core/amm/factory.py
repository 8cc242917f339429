"""
PairFactory - creates liquidity pairs at deterministic addresses.

Each pair lives at pair_for(factory, token0, token1, pair_code_hash), so the
auction engine can recognise and unwind pairs knowing only the factory
address and its code hash.
"""

from typing import Dict, List, Optional, Tuple

from feeauction.core.amm.library import pair_for, sort_tokens
from feeauction.core.amm.pair import LiquidityPair
from feeauction.core.chain import Chain, Contract
from feeauction.core.errors import Forbidden, PairExists
from feeauction.crypto import ZERO_ADDRESS, keccak256, short_hex
from feeauction.utils.logger import get_logger
from feeauction.utils.validation import require_address

logger = get_logger("amm.factory")

# Stand-in for keccak256(type(Pair).creationCode)
PAIR_INIT_CODE = b"feeauction.core.amm.pair.LiquidityPair"


class PairFactory(Contract):
    """
    Registry of pairs plus the protocol-fee recipient.

    Attributes:
        fee_to: Recipient of protocol-fee shares (ZERO_ADDRESS = fee off)
        fee_to_setter: Only account allowed to change fee_to
        pairs: (token0, token1) -> pair address
        all_pairs: Pair addresses in creation order
    """

    _state_fields = ("fee_to", "fee_to_setter", "pairs", "all_pairs")

    pair_code_hash: bytes = keccak256(PAIR_INIT_CODE)

    def __init__(self, chain: Chain, fee_to_setter: bytes):
        super().__init__(chain, label="factory")
        self.fee_to: bytes = ZERO_ADDRESS
        self.fee_to_setter: bytes = require_address(fee_to_setter, "fee_to_setter")
        self.pairs: Dict[Tuple[bytes, bytes], bytes] = {}
        self.all_pairs: List[bytes] = []

    def get_pair(self, token_a: bytes, token_b: bytes) -> Optional[bytes]:
        token0, token1 = sort_tokens(token_a, token_b)
        return self.pairs.get((token0, token1))

    def all_pairs_length(self) -> int:
        return len(self.all_pairs)

    def create_pair(self, token_a: bytes, token_b: bytes) -> LiquidityPair:
        token0, token1 = sort_tokens(token_a, token_b)
        if (token0, token1) in self.pairs:
            raise PairExists()

        address = pair_for(self.address, token0, token1, self.pair_code_hash)
        pair = LiquidityPair(self.chain, self, token0, token1, address=address)

        self.pairs[(token0, token1)] = address
        self.all_pairs.append(address)

        logger.info(
            f"Pair created {short_hex(address)} for "
            f"{short_hex(token0)}/{short_hex(token1)} ({len(self.all_pairs)} total)"
        )
        return pair

    def set_fee_to(self, caller: bytes, fee_to: bytes) -> None:
        if caller != self.fee_to_setter:
            raise Forbidden()
        self.fee_to = require_address(fee_to, "fee_to")

    def set_fee_to_setter(self, caller: bytes, fee_to_setter: bytes) -> None:
        if caller != self.fee_to_setter:
            raise Forbidden()
        self.fee_to_setter = require_address(fee_to_setter, "fee_to_setter")
