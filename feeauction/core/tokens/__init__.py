"""Token ledgers and the custody adapter"""
from feeauction.core.tokens.erc20 import ERC20Token, MAX_UINT256
from feeauction.core.tokens.adapter import TokenAdapter

__all__ = [
    "ERC20Token",
    "MAX_UINT256",
    "TokenAdapter",
]
