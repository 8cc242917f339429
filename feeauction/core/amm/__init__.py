"""Constant-product pairs, their factory, and the fee-share unwinder"""
from feeauction.core.amm.library import sort_tokens, pair_for
from feeauction.core.amm.pair import LiquidityPair, MINIMUM_LIQUIDITY
from feeauction.core.amm.factory import PairFactory, PAIR_INIT_CODE
from feeauction.core.amm.unwinder import LiquidityUnwinder

__all__ = [
    "sort_tokens",
    "pair_for",
    "LiquidityPair",
    "MINIMUM_LIQUIDITY",
    "PairFactory",
    "PAIR_INIT_CODE",
    "LiquidityUnwinder",
]
