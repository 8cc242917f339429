"""
Shared fixtures: a deployed engine with fee shares already unwound.

Deployment mirrors production wiring:
1. Ten reward tokens and the bid token, all minted to accounts[0]
2. Factory with the engine as fee_to
3. One pair (tokens[0], tokens[1]) with liquidity, a trade and a second
   deposit so protocol-fee shares accrue to the engine
4. unwind_lp so the engine holds balances of tokens[0] and tokens[1]
"""

from dataclasses import dataclass
from typing import List

import pytest

from feeauction.core.amm import LiquidityPair, PairFactory
from feeauction.core.auction import AuctionEngine
from feeauction.core.chain import Chain
from feeauction.core.tokens import ERC20Token
from feeauction.crypto import generate_keypair

T0 = 1_700_000_000
UNIT = 10 ** 18


def get_amount(n: int) -> int:
    """n whole tokens in raw units."""
    return n * UNIT


@dataclass
class System:
    chain: Chain
    accounts: List[bytes]
    tokens: List[ERC20Token]
    bid_token: ERC20Token
    factory: PairFactory
    engine: AuctionEngine
    pair: LiquidityPair

    @property
    def receiver(self) -> bytes:
        return self.engine.receiver


def swap_in(pair: LiquidityPair, token_in: ERC20Token, amount_in: int, amount_out: int, to: bytes) -> None:
    token_in.transfer(to, pair.address, amount_in)
    if pair.token0 == token_in.address:
        pair.swap(0, amount_out, to)
    else:
        pair.swap(amount_out, 0, to)


@pytest.fixture
def chain():
    return Chain(timestamp=T0)


@pytest.fixture(scope="session")
def accounts():
    return [generate_keypair().address for _ in range(6)]


def deploy(chain: Chain, accounts: List[bytes], with_fees: bool = True) -> System:
    owner = accounts[0]
    tokens = []
    for i in range(10):
        token = ERC20Token(chain, f"Token{i}", f"TOK{i}")
        token.mint(owner, get_amount(1_000_000))
        tokens.append(token)

    bid_token = ERC20Token(chain, "Bid", "BID")
    bid_token.mint(owner, get_amount(1_000_000))

    factory = PairFactory(chain, fee_to_setter=owner)
    engine = AuctionEngine(
        chain,
        owner=owner,
        receiver=accounts[5],
        bid_token=bid_token.address,
        factory=factory.address,
        pair_code_hash=factory.pair_code_hash,
    )
    factory.set_fee_to(owner, engine.address)

    pair = factory.create_pair(tokens[0].address, tokens[1].address)

    if with_fees:
        tokens[0].transfer(owner, pair.address, get_amount(500_000))
        tokens[1].transfer(owner, pair.address, get_amount(500_000))
        pair.mint(owner)

        swap_in(pair, tokens[0], get_amount(100), 99, owner)

        tokens[0].transfer(owner, pair.address, get_amount(1))
        tokens[1].transfer(owner, pair.address, get_amount(1))
        pair.mint(owner)

        engine.unwind_lp(tokens[0].address, tokens[1].address)

    return System(
        chain=chain,
        accounts=accounts,
        tokens=tokens,
        bid_token=bid_token,
        factory=factory,
        engine=engine,
        pair=pair,
    )


@pytest.fixture
def system(chain, accounts):
    """Engine holding unwound fee balances of tokens[0] and tokens[1]."""
    return deploy(chain, accounts)


@pytest.fixture
def bare_system(chain, accounts):
    """Engine with no fee balances."""
    return deploy(chain, accounts, with_fees=False)
