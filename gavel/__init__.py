"""
Gavel

An off-chain simulation of an owner-administered auction ledger:
- Allow-listed bidders
- Product catalog with index-stable keys
- Time-windowed bidding
- Highest-bid settlement and winner reporting
"""

from gavel.core.ledger import AuctionLedger, AuctionPhase
from gavel.core.catalog import Product, ProductCatalog
from gavel.core.clock import AuctionWindow, ChainClock
from gavel.core.errors import (
    AuctionError,
    Forbidden,
    InvalidProductCode,
    ProductNotFound,
    NotAuthorized,
    AuctionNotStarted,
    AlreadyClosed,
    BidNotFound,
    InvalidAmount,
)

__version__ = "0.1.0"

__all__ = [
    "AuctionLedger",
    "AuctionPhase",
    "Product",
    "ProductCatalog",
    "AuctionWindow",
    "ChainClock",
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
