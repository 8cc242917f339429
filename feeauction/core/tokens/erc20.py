"""
ERC20Token - fungible token ledger living on the Chain.

Balances and allowances are plain dicts keyed by 20-byte address. The
caller identity is passed explicitly (`sender`, `owner`, `spender`) in place
of an implicit message sender.

Transfer hooks:
--------------
A token may carry a `transfer_hook(sender, to, amount)` callable which runs
after balances move. It stands in for tokens that call back into the
receiving contract and is how re-entrancy is exercised.
"""

from typing import Callable, Dict, Optional, Tuple

from feeauction.core.chain import Chain, Contract
from feeauction.core.errors import InsufficientAllowance, InsufficientBalance
from feeauction.crypto import ZERO_ADDRESS, short_hex
from feeauction.utils.logger import get_logger
from feeauction.utils.validation import MAX_AMOUNT, require_address, require_amount

logger = get_logger("tokens")

MAX_UINT256 = MAX_AMOUNT

TransferHook = Callable[[bytes, bytes, int], None]


class ERC20Token(Contract):
    """
    Minimal ERC-20 ledger.

    Attributes:
        name: Token name
        symbol: Token symbol
        decimals: Display decimals
        balances: address -> balance
        allowances: (owner, spender) -> remaining allowance
        total_supply: Sum of all balances
    """

    _state_fields = ("balances", "allowances", "total_supply")

    def __init__(
        self,
        chain: Chain,
        name: str,
        symbol: str,
        decimals: int = 18,
        address: Optional[bytes] = None,
    ):
        super().__init__(chain, label=f"token:{symbol}", address=address)
        self.name = name
        self.symbol = symbol
        self.decimals = decimals

        self.balances: Dict[bytes, int] = {}
        self.allowances: Dict[Tuple[bytes, bytes], int] = {}
        self.total_supply: int = 0

        self.transfer_hook: Optional[TransferHook] = None

    # =========================================================================
    # Views
    # =========================================================================

    def balance_of(self, account: bytes) -> int:
        return self.balances.get(account, 0)

    def allowance(self, owner: bytes, spender: bytes) -> int:
        return self.allowances.get((owner, spender), 0)

    # =========================================================================
    # Mutations
    # =========================================================================

    def approve(self, owner: bytes, spender: bytes, amount: int) -> bool:
        owner = require_address(owner, "owner")
        spender = require_address(spender, "spender")
        self.allowances[(owner, spender)] = require_amount(amount)
        return True

    def transfer(self, sender: bytes, to: bytes, amount: int) -> bool:
        self._transfer(sender, to, amount)
        return True

    def transfer_from(self, spender: bytes, owner: bytes, to: bytes, amount: int) -> bool:
        """Move `amount` from `owner` to `to` using the spender's allowance."""
        amount = require_amount(amount)
        current = self.allowance(owner, spender)
        if current < amount:
            raise InsufficientAllowance()
        if current != MAX_UINT256:
            self.allowances[(owner, spender)] = current - amount
        self._transfer(owner, to, amount)
        return True

    def mint(self, to: bytes, amount: int) -> None:
        self._mint(to, amount)

    def burn(self, owner: bytes, amount: int) -> None:
        self._burn(owner, amount)

    def _mint(self, to: bytes, amount: int) -> None:
        to = require_address(to, "to")
        amount = require_amount(amount)
        self.balances[to] = self.balance_of(to) + amount
        self.total_supply += amount

    def _burn(self, owner: bytes, amount: int) -> None:
        amount = require_amount(amount)
        balance = self.balance_of(owner)
        if balance < amount:
            raise InsufficientBalance("ERC20: burn amount exceeds balance")
        self.balances[owner] = balance - amount
        self.total_supply -= amount

    def _transfer(self, sender: bytes, to: bytes, amount: int) -> None:
        sender = require_address(sender, "sender")
        to = require_address(to, "to")
        amount = require_amount(amount)
        if to == ZERO_ADDRESS:
            raise ValueError("ERC20: transfer to the zero address")

        balance = self.balance_of(sender)
        if balance < amount:
            raise InsufficientBalance()

        self.balances[sender] = balance - amount
        self.balances[to] = self.balance_of(to) + amount

        logger.debug(
            f"{self.symbol}: {short_hex(sender)} -> {short_hex(to)} amount={amount}"
        )

        if self.transfer_hook is not None:
            self.transfer_hook(sender, to, amount)

    def __repr__(self) -> str:
        return f"ERC20Token({self.symbol}, supply={self.total_supply})"
