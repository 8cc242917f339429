"""
LiquidityPair - constant-product pool whose shares are an ERC-20 token.

Conceptual Background:
---------------------
A pair holds reserves of two tokens and issues liquidity shares:

1. **mint**: tokens sent to the pair beyond its reserves become liquidity;
   the first deposit locks MINIMUM_LIQUIDITY shares at the zero address
2. **burn**: shares sent to the pair are destroyed for a pro-rata cut of
   both reserves
3. **swap**: x * y = k with a 0.3% input fee

Protocol fee:
------------
When the factory's `fee_to` is set, growth of sqrt(k) between liquidity
events is partly captured by minting 1/6 of it as new shares to `fee_to`.
These are the fee shares the auction engine later unwinds.
"""

from math import isqrt
from typing import TYPE_CHECKING, Tuple

from feeauction.core.chain import Chain
from feeauction.core.errors import (
    InsufficientInputAmount,
    InsufficientLiquidity,
    InsufficientLiquidityBurned,
    InsufficientLiquidityMinted,
    InsufficientOutputAmount,
    InvalidK,
)
from feeauction.core.tokens import ERC20Token, TokenAdapter
from feeauction.crypto import ZERO_ADDRESS, short_hex
from feeauction.utils.logger import get_logger

if TYPE_CHECKING:
    from feeauction.core.amm.factory import PairFactory

logger = get_logger("amm.pair")

MINIMUM_LIQUIDITY = 1000

# Swap fee of 0.3% expressed per mille
FEE_NUMERATOR = 3
FEE_DENOMINATOR = 1000


class LiquidityPair(ERC20Token):
    """
    A two-token pool.

    Attributes:
        factory: Factory that created the pair
        token0: Lower-sorted token address
        token1: Higher-sorted token address
        reserve0: Last synced reserve of token0
        reserve1: Last synced reserve of token1
        k_last: reserve0 * reserve1 after the most recent liquidity event
    """

    _state_fields = ("reserve0", "reserve1", "k_last")

    def __init__(
        self,
        chain: Chain,
        factory: "PairFactory",
        token0: bytes,
        token1: bytes,
        address: bytes,
    ):
        super().__init__(chain, name="Liquidity Pair", symbol="LP", decimals=18, address=address)
        self.factory = factory
        self.token0 = token0
        self.token1 = token1

        self.reserve0: int = 0
        self.reserve1: int = 0
        self.k_last: int = 0

        self._custody = TokenAdapter(chain, address)

    def get_reserves(self) -> Tuple[int, int]:
        return self.reserve0, self.reserve1

    # =========================================================================
    # Liquidity
    # =========================================================================

    def mint(self, to: bytes) -> int:
        """Issue shares for tokens deposited since the last sync."""
        with self.chain.atomic():
            balance0 = self._custody.balance(self.token0)
            balance1 = self._custody.balance(self.token1)
            amount0 = balance0 - self.reserve0
            amount1 = balance1 - self.reserve1

            fee_on = self._mint_fee()
            total = self.total_supply
            if total == 0:
                liquidity = isqrt(amount0 * amount1) - MINIMUM_LIQUIDITY
                if liquidity > 0:
                    self._mint(ZERO_ADDRESS, MINIMUM_LIQUIDITY)
            else:
                liquidity = min(
                    amount0 * total // self.reserve0,
                    amount1 * total // self.reserve1,
                )

            if liquidity <= 0:
                raise InsufficientLiquidityMinted()
            self._mint(to, liquidity)

            self._update(balance0, balance1)
            if fee_on:
                self.k_last = self.reserve0 * self.reserve1

        logger.debug(f"Pair {short_hex(self.address)} minted {liquidity} to {short_hex(to)}")
        return liquidity

    def burn(self, to: bytes) -> Tuple[int, int]:
        """Redeem the shares held by the pair itself for underlying tokens."""
        with self.chain.atomic():
            balance0 = self._custody.balance(self.token0)
            balance1 = self._custody.balance(self.token1)
            liquidity = self.balance_of(self.address)

            fee_on = self._mint_fee()
            total = self.total_supply
            amount0 = liquidity * balance0 // total if total else 0
            amount1 = liquidity * balance1 // total if total else 0
            if amount0 <= 0 or amount1 <= 0:
                raise InsufficientLiquidityBurned()

            self._burn(self.address, liquidity)
            self._custody.push(self.token0, to, amount0)
            self._custody.push(self.token1, to, amount1)

            self._update(
                self._custody.balance(self.token0),
                self._custody.balance(self.token1),
            )
            if fee_on:
                self.k_last = self.reserve0 * self.reserve1

        logger.debug(
            f"Pair {short_hex(self.address)} burned {liquidity}: "
            f"{amount0} token0, {amount1} token1 to {short_hex(to)}"
        )
        return amount0, amount1

    # =========================================================================
    # Trading
    # =========================================================================

    def swap(self, amount0_out: int, amount1_out: int, to: bytes) -> None:
        """Send out the requested amounts; inputs must already be in the pair."""
        if amount0_out <= 0 and amount1_out <= 0:
            raise InsufficientOutputAmount()
        if amount0_out >= self.reserve0 or amount1_out >= self.reserve1:
            raise InsufficientLiquidity()
        if to in (self.token0, self.token1):
            raise ValueError("Invalid swap recipient")

        with self.chain.atomic():
            self._custody.push(self.token0, to, amount0_out)
            self._custody.push(self.token1, to, amount1_out)

            balance0 = self._custody.balance(self.token0)
            balance1 = self._custody.balance(self.token1)
            amount0_in = max(balance0 - (self.reserve0 - amount0_out), 0)
            amount1_in = max(balance1 - (self.reserve1 - amount1_out), 0)
            if amount0_in <= 0 and amount1_in <= 0:
                raise InsufficientInputAmount()

            adjusted0 = balance0 * FEE_DENOMINATOR - amount0_in * FEE_NUMERATOR
            adjusted1 = balance1 * FEE_DENOMINATOR - amount1_in * FEE_NUMERATOR
            if adjusted0 * adjusted1 < self.reserve0 * self.reserve1 * FEE_DENOMINATOR ** 2:
                raise InvalidK()

            self._update(balance0, balance1)

    def skim(self, to: bytes) -> None:
        """Send balances above the reserves to `to`."""
        with self.chain.atomic():
            self._custody.push(self.token0, to, self._custody.balance(self.token0) - self.reserve0)
            self._custody.push(self.token1, to, self._custody.balance(self.token1) - self.reserve1)

    def sync(self) -> None:
        """Force reserves to match balances."""
        self._update(self._custody.balance(self.token0), self._custody.balance(self.token1))

    # =========================================================================
    # Internals
    # =========================================================================

    def _update(self, balance0: int, balance1: int) -> None:
        self.reserve0 = balance0
        self.reserve1 = balance1

    def _mint_fee(self) -> bool:
        fee_to = self.factory.fee_to
        fee_on = fee_to != ZERO_ADDRESS
        if fee_on:
            if self.k_last != 0:
                root_k = isqrt(self.reserve0 * self.reserve1)
                root_k_last = isqrt(self.k_last)
                if root_k > root_k_last:
                    numerator = self.total_supply * (root_k - root_k_last)
                    denominator = root_k * 5 + root_k_last
                    liquidity = numerator // denominator
                    if liquidity > 0:
                        self._mint(fee_to, liquidity)
        elif self.k_last != 0:
            self.k_last = 0
        return fee_on

    def __repr__(self) -> str:
        return (
            f"LiquidityPair({short_hex(self.token0)}/{short_hex(self.token1)}, "
            f"reserves=({self.reserve0}, {self.reserve1}))"
        )
