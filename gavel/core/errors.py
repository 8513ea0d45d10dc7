"""
Auction ledger errors.

Every rejected call raises an AuctionError subclass before touching state.
Each class carries a short revert-style code which is also the prefix of
the message, so callers can match on either the type or the text.
"""

from typing import Optional


class AuctionError(Exception):
    """Base class for rejected ledger calls."""

    code = "AUCTION_ERROR"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail
        message = self.code if not detail else f"{self.code}: {detail}"
        super().__init__(message)


class Forbidden(AuctionError):
    """Privileged call made by someone other than the owner."""
    code = "FORBIDDEN"


class InvalidProductCode(AuctionError):
    """Product code is not positive, or names no live product."""
    code = "BAD_PCODE"


class ProductNotFound(AuctionError):
    """Removal of a product that is not live."""
    code = "PRODUCT_NOT_FOUND"


class NotAuthorized(AuctionError):
    """Bidder is not on the allow-list."""
    code = "NOT_AUTHORIZED"


class AuctionNotStarted(AuctionError):
    """Bid before the window opens, or with no window configured."""
    code = "NOT_STARTED"


class AlreadyClosed(AuctionError):
    """Bid at or after the end of the window."""
    code = "ALREADY_CLOSED"


class BidNotFound(AuctionError):
    """No bid recorded for the (product, bidder) pair."""
    code = "BID_NOT_FOUND"


class InvalidAmount(AuctionError):
    """Amount or price outside the unsigned 256-bit range."""
    code = "BAD_AMOUNT"


__all__ = [
    "AuctionError",
    "Forbidden",
    "InvalidProductCode",
    "ProductNotFound",
    "NotAuthorized",
    "AuctionNotStarted",
    "AlreadyClosed",
    "BidNotFound",
    "InvalidAmount",
]
