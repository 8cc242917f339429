"""
Auction Engine - converts accumulated fee tokens into the bid token.

Conceptual Background:
---------------------
Each reward token held by the engine can be auctioned independently. An
auction is an English auction paid in a single bid token:

1. **start**: the opener escrows at least BID_MIN; the whole engine balance
   of the reward token becomes the prize; two clocks are stamped:
   - min_ttl = now + MIN_TTL (rolling, restarted by every bid)
   - max_ttl = now + MAX_TTL (hard deadline)
2. **place_bid**: while both clocks are still running, a higher bid (by at
   least 0.1%, floor division) replaces the previous one; the previous
   bidder is refunded in the same call
3. **end**: once either clock has run out, the winner receives the prize,
   the receiver receives the bid and the record is cleared

Staked balance:
--------------
`staked_bid_token` always equals the sum of escrowed bids. Anything the
engine holds above it is surplus and can be swept with `skim_bid_token`.

Call discipline:
---------------
Every public mutator runs inside `Chain.atomic()` behind a non-reentrancy
flag. Records and the staked counter are updated before any transfer; a
failing transfer reverts the whole call, refunds included.
"""

from functools import wraps
from typing import Callable, Dict, List, Optional, Tuple, TypeVar

from feeauction.core.amm.unwinder import LiquidityUnwinder
from feeauction.core.auction.bid import AuctionEvent, BidRecord, EventType
from feeauction.core.auction.guard import check_auctionable
from feeauction.core.chain import Chain, Contract
from feeauction.core.config import AuctionConfig
from feeauction.core.errors import (
    AuctionError,
    BidAlreadyStarted,
    BidFinished,
    BidNotFinished,
    BidNotStarted,
    InsufficientBidAmount,
    NotOwner,
    ReentrantCall,
)
from feeauction.core.tokens import TokenAdapter
from feeauction.crypto import short_hex
from feeauction.utils.logger import get_logger
from feeauction.utils.validation import require_account, require_address, require_amount

logger = get_logger("auction")

F = TypeVar("F", bound=Callable)


def external(func: F) -> F:
    """Run an engine method as one atomic, non-reentrant call."""

    @wraps(func)
    def wrapper(self: "AuctionEngine", *args, **kwargs):
        if self._entered:
            raise ReentrantCall()
        with self.chain.atomic():
            self._entered = True
            try:
                return func(self, *args, **kwargs)
            except AuctionError as e:
                logger.debug(f"{func.__name__} rejected: {e}")
                raise
            finally:
                self._entered = False

    return wrapper  # type: ignore[return-value]


class AuctionEngine(Contract):
    """
    Per-token auction state machine with escrow accounting.

    Attributes:
        owner: Account allowed to change receiver, whitelist and owner
        receiver: Account paid the winning bids and skimmed surplus
        bid_token: Token every bid is paid in
        factory: Pair factory whose fee shares the engine collects
        pair_code_hash: Code hash used to derive pair addresses
        staked_bid_token: Sum of all escrowed bids
        whitelisted_tokens: token -> whitelisted flag
        events: Log of successful calls
    """

    _state_fields = (
        "owner",
        "receiver",
        "bid_records",
        "staked_bid_token",
        "whitelisted_tokens",
        "events",
    )

    def __init__(
        self,
        chain: Chain,
        owner: bytes,
        receiver: bytes,
        bid_token: bytes,
        factory: bytes,
        pair_code_hash: bytes,
        config: Optional[AuctionConfig] = None,
    ):
        """
        Deploy the engine.

        Args:
            chain: Host chain
            owner: Admin account
            receiver: Initial proceeds receiver
            bid_token: Address of the token bids are paid in
            factory: Pair factory address
            pair_code_hash: 32-byte pair code hash of that factory
            config: Timing and amount parameters (contract constants by default)
        """
        super().__init__(chain, label="auction-engine")
        self.config = config or AuctionConfig()

        self.owner = require_address(owner, "owner")
        self.receiver = require_account(receiver, "receiver")
        self.bid_token = require_address(bid_token, "bid_token")
        self.factory = require_address(factory, "factory")
        self.pair_code_hash = pair_code_hash

        self.bid_records: Dict[bytes, BidRecord] = {}
        self.staked_bid_token: int = 0
        self.whitelisted_tokens: Dict[bytes, bool] = {}
        self.events: List[AuctionEvent] = []

        self.tokens = TokenAdapter(chain, self.address)
        self.unwinder = LiquidityUnwinder(chain, self.address, self.factory, pair_code_hash)
        self._entered = False

        logger.info(
            f"AuctionEngine deployed at {short_hex(self.address)} "
            f"(bid_token={short_hex(self.bid_token)}, min_ttl={self.config.min_ttl}, "
            f"max_ttl={self.config.max_ttl}, bid_min={self.config.bid_min})"
        )

    # =========================================================================
    # Views
    # =========================================================================

    def bids(self, token: bytes) -> BidRecord:
        """Copy of the record for `token` (inactive record if none)."""
        record = self.bid_records.get(token)
        return record.copy() if record is not None else BidRecord.inactive()

    def min_next_bid(self, token: bytes) -> int:
        """Smallest amount `place_bid` would currently accept for `token`."""
        record = self.bid_records.get(token)
        if record is None:
            return self.config.bid_min
        previous = record.bid_amount
        return max(previous + 1, previous + self.config.min_increment(previous))

    def active_tokens(self) -> List[bytes]:
        return [token for token, record in self.bid_records.items() if record.is_active]

    def surplus_bid_token(self) -> int:
        return max(self.tokens.balance(self.bid_token) - self.staked_bid_token, 0)

    @property
    def now(self) -> int:
        return self.chain.now

    # =========================================================================
    # Auction Transitions
    # =========================================================================

    @external
    def start(self, token: bytes, amount: int, bidder: bytes, sender: Optional[bytes] = None) -> None:
        """
        Open an auction for `token` with an initial bid.

        Args:
            token: Reward token to auction
            amount: Opening bid in bid tokens
            bidder: Account credited as the highest bidder
            sender: Account the bid is pulled from (defaults to bidder)

        Raises:
            LPTokenNotAllowed, BidTokenNotAllowed, TokenNotWhitelisted
            InsufficientBidAmount: amount < bid_min
            BidAlreadyStarted: an auction for token is running
        """
        token = require_address(token, "token")
        amount = require_amount(amount)
        bidder = require_account(bidder, "bidder")
        sender = require_account(sender, "sender") if sender is not None else bidder

        check_auctionable(self.chain, token, self.bid_token, self.whitelisted_tokens)
        if amount < self.config.bid_min:
            raise InsufficientBidAmount()
        if self.bids(token).is_active:
            raise BidAlreadyStarted()

        now = self.now
        record = BidRecord(
            bidder=bidder,
            bid_amount=amount,
            reward_amount=self.tokens.balance(token),
            min_ttl=now + self.config.min_ttl,
            max_ttl=now + self.config.max_ttl,
        )
        self.bid_records[token] = record
        self.staked_bid_token += amount

        self.tokens.pull(self.bid_token, sender, amount)

        self._emit(EventType.STARTED, token=token, account=bidder, amount=amount)
        logger.info(
            f"Auction started: token={short_hex(token)} bidder={short_hex(bidder)} "
            f"bid={amount} reward={record.reward_amount} "
            f"min_ttl={record.min_ttl} max_ttl={record.max_ttl}"
        )

    @external
    def place_bid(self, token: bytes, amount: int, bidder: bytes, sender: Optional[bytes] = None) -> None:
        """
        Outbid the current highest bidder.

        Accepted only while now < min_ttl and now < max_ttl, and only if
        amount > previous and amount >= previous + floor(previous * 0.1%).

        Raises:
            BidNotStarted: no auction running for token
            BidFinished: a window boundary has passed
            InsufficientBidAmount: amount below the increment threshold
        """
        token = require_address(token, "token")
        amount = require_amount(amount)
        bidder = require_account(bidder, "bidder")
        sender = require_account(sender, "sender") if sender is not None else bidder

        record = self.bid_records.get(token)
        if record is None or not record.is_active:
            raise BidNotStarted()

        now = self.now
        if now >= record.min_ttl or now >= record.max_ttl:
            raise BidFinished()

        previous_bidder = record.bidder
        previous_amount = record.bid_amount
        if amount <= previous_amount or amount < previous_amount + self.config.min_increment(previous_amount):
            raise InsufficientBidAmount()

        record.bidder = bidder
        record.bid_amount = amount
        record.min_ttl = min(now + self.config.min_ttl, record.max_ttl)
        self.staked_bid_token = self.staked_bid_token + amount - previous_amount

        self.tokens.push(self.bid_token, previous_bidder, previous_amount)
        self.tokens.pull(self.bid_token, sender, amount)

        self._emit(EventType.PLACED_BID, token=token, account=bidder, amount=amount)
        logger.info(
            f"Bid placed: token={short_hex(token)} bidder={short_hex(bidder)} "
            f"bid={amount} (refunded {previous_amount} to {short_hex(previous_bidder)}) "
            f"min_ttl={record.min_ttl}"
        )

    @external
    def end(self, token: bytes) -> Tuple[bytes, int]:
        """
        Settle a closed auction.

        Returns:
            (winner, bid_amount)

        Raises:
            BidNotStarted: no auction running for token
            BidNotFinished: both windows still open
        """
        token = require_address(token, "token")

        record = self.bid_records.get(token)
        if record is None or not record.is_active:
            raise BidNotStarted()
        if not record.is_closed(self.now):
            raise BidNotFinished()

        winner = record.bidder
        bid_amount = record.bid_amount
        reward_amount = record.reward_amount

        del self.bid_records[token]
        self.staked_bid_token -= bid_amount

        self.tokens.push(token, winner, reward_amount)
        self.tokens.push(self.bid_token, self.receiver, bid_amount)

        self._emit(EventType.ENDED, token=token, account=winner, amount=bid_amount)
        logger.info(
            f"Auction ended: token={short_hex(token)} winner={short_hex(winner)} "
            f"paid={bid_amount} reward={reward_amount}"
        )
        return winner, bid_amount

    # =========================================================================
    # Staked Balance
    # =========================================================================

    @external
    def skim_bid_token(self) -> int:
        """
        Send bid tokens not backing any escrowed bid to the receiver.

        Returns:
            Amount skimmed (0 if there is no surplus)
        """
        surplus = self.surplus_bid_token()
        if surplus > 0:
            self.tokens.push(self.bid_token, self.receiver, surplus)
            self._emit(EventType.SKIMMED, account=self.receiver, amount=surplus)
            logger.info(f"Skimmed {surplus} bid tokens to {short_hex(self.receiver)}")
        return surplus

    # =========================================================================
    # Liquidity
    # =========================================================================

    @external
    def unwind_lp(self, token_a: bytes, token_b: bytes) -> Tuple[int, int]:
        """Burn the engine's fee shares of the (token_a, token_b) pair."""
        token_a = require_address(token_a, "token_a")
        token_b = require_address(token_b, "token_b")
        amounts = self.unwinder.unwind_lp(token_a, token_b)
        self._emit(EventType.LP_UNWOUND, token=self.unwinder.pair_address(token_a, token_b))
        return amounts

    # =========================================================================
    # Admin
    # =========================================================================

    def _only_owner(self, caller: bytes) -> None:
        if caller != self.owner:
            raise NotOwner()

    @external
    def update_receiver(self, receiver: bytes, caller: bytes) -> None:
        self._only_owner(caller)
        self.receiver = require_account(receiver, "receiver")
        self._emit(EventType.RECEIVER_UPDATED, account=self.receiver)
        logger.info(f"Receiver updated to {short_hex(self.receiver)}")

    @external
    def update_whitelist_token(self, token: bytes, status: bool, caller: bytes) -> None:
        self._only_owner(caller)
        token = require_address(token, "token")
        self.whitelisted_tokens[token] = bool(status)
        self._emit(EventType.WHITELIST_UPDATED, token=token, flag=bool(status))
        logger.info(f"Whitelist: {short_hex(token)} -> {bool(status)}")

    @external
    def transfer_ownership(self, new_owner: bytes, caller: bytes) -> None:
        self._only_owner(caller)
        new_owner = require_address(new_owner, "new_owner")
        self._emit(EventType.OWNERSHIP_TRANSFERRED, account=new_owner)
        logger.info(f"Ownership transferred {short_hex(self.owner)} -> {short_hex(new_owner)}")
        self.owner = new_owner

    # =========================================================================
    # Utility
    # =========================================================================

    def _emit(self, event_type: EventType, **fields) -> None:
        self.events.append(AuctionEvent(event_type=event_type, timestamp=self.now, **fields))

    def __repr__(self) -> str:
        return (
            f"AuctionEngine(active={len(self.active_tokens())}, "
            f"staked={self.staked_bid_token})"
        )

    def stats(self) -> dict:
        """Get engine statistics."""
        return {
            "active_auctions": len(self.active_tokens()),
            "staked_bid_token": self.staked_bid_token,
            "surplus_bid_token": self.surplus_bid_token(),
            "whitelisted_tokens": sum(1 for v in self.whitelisted_tokens.values() if v),
            "events": len(self.events),
        }
