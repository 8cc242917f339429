"""
TokenAdapter - transfer/balance glue between a holder contract and tokens.

The engine never touches token ledgers directly. It pulls funds into its
own custody and pushes them out through this adapter, which resolves token
addresses on the Chain.
"""

from feeauction.core.chain import Chain
from feeauction.core.errors import UnknownToken
from feeauction.core.tokens.erc20 import ERC20Token
from feeauction.crypto import short_hex


class TokenAdapter:
    """Moves tokens in and out of `holder`'s custody."""

    def __init__(self, chain: Chain, holder: bytes):
        self.chain = chain
        self.holder = holder

    def token(self, address: bytes) -> ERC20Token:
        contract = self.chain.get_contract(address)
        if not isinstance(contract, ERC20Token):
            raise UnknownToken(f"No token at {short_hex(address)}")
        return contract

    def balance(self, token: bytes) -> int:
        """Holder's balance of `token`."""
        return self.token(token).balance_of(self.holder)

    def pull(self, token: bytes, sender: bytes, amount: int) -> None:
        """Move `amount` from `sender` into custody (requires allowance)."""
        if amount == 0:
            return
        self.token(token).transfer_from(self.holder, sender, self.holder, amount)

    def push(self, token: bytes, to: bytes, amount: int) -> None:
        """Move `amount` out of custody to `to`."""
        if amount == 0:
            return
        self.token(token).transfer(self.holder, to, amount)
