"""Error classes for the fee auction engine.

Every failure is synchronous and named. The message of each error is the
symbolic name in call form (``BidFinished()``) so callers can match on
either the class or the text.
"""


class AuctionError(Exception):
    """Base error for all engine operations."""

    def __init__(self, message: str = ""):
        super().__init__(message or f"{type(self).__name__}()")


# =============================================================================
# Eligibility
# =============================================================================


class EligibilityError(AuctionError):
    """Token identity fails the guard rules."""

    pass


class LPTokenNotAllowed(EligibilityError):
    """Liquidity-position tokens cannot be auctioned."""

    pass


class BidTokenNotAllowed(EligibilityError):
    """The bid token itself cannot be auctioned."""

    pass


class TokenNotWhitelisted(EligibilityError):
    """A whitelist is configured and the token is not on it."""

    pass


# =============================================================================
# Amounts
# =============================================================================


class InsufficientBidAmount(AuctionError):
    """Bid does not clear the minimum or the increment threshold."""

    pass


# =============================================================================
# Bid state
# =============================================================================


class BidStateError(AuctionError):
    """Bid record is not in the state required by the transition."""

    pass


class BidAlreadyStarted(BidStateError):
    pass


class BidNotStarted(BidStateError):
    pass


class BidFinished(BidStateError):
    """Bidding window closed (min or max TTL passed)."""

    pass


class BidNotFinished(BidStateError):
    """Neither the rolling window nor the hard deadline has passed."""

    pass


# =============================================================================
# Access and call discipline
# =============================================================================


class NotOwner(AuctionError):
    def __init__(self, message: str = "Ownable: caller is not the owner"):
        super().__init__(message)


class ReentrantCall(AuctionError):
    """Engine entered again while an operation is in progress."""

    pass


# =============================================================================
# Tokens
# =============================================================================


class TokenError(AuctionError):
    """Base error for token ledger operations."""

    pass


class InsufficientBalance(TokenError):
    def __init__(self, message: str = "ERC20: transfer amount exceeds balance"):
        super().__init__(message)


class InsufficientAllowance(TokenError):
    def __init__(self, message: str = "ERC20: insufficient allowance"):
        super().__init__(message)


class UnknownToken(TokenError):
    """No token contract is registered at the address."""

    pass


# =============================================================================
# Pairs
# =============================================================================


class PairError(AuctionError):
    """Base error for AMM pair and factory operations."""

    pass


class IdenticalAddresses(PairError):
    pass


class PairExists(PairError):
    pass


class PairNotFound(PairError):
    pass


class Forbidden(PairError):
    """Caller is not the factory's fee-to setter."""

    pass


class InsufficientLiquidityMinted(PairError):
    pass


class InsufficientLiquidityBurned(PairError):
    pass


class InsufficientOutputAmount(PairError):
    pass


class InsufficientInputAmount(PairError):
    pass


class InsufficientLiquidity(PairError):
    pass


class InvalidK(PairError):
    """Constant-product invariant violated by a swap."""

    pass
