"""
AuctionLedger - owner-administered auction state.

Conceptual Background:
---------------------
The ledger reproduces the observable behaviour of a single auction
contract:

1. **Allow-list**: the owner authorizes identities that may bid
2. **Catalog**: the owner lists and delists products (see catalog.py)
3. **Window**: the owner sets the [start, end) bidding interval
4. **Bids**: allow-listed identities bid on live products while the window
   is open; the latest bid per bidder and product counts
5. **Settlement**: after the window, the highest bid on each live product
   wins

Call Semantics:
--------------
Every public method takes the caller identity explicitly and runs under a
single lock. All checks happen before any state is written, so a rejected
call (an AuctionError) leaves the ledger exactly as it was.

Phases:
------
    UNCONFIGURED -> TIMING_SET -> OPEN -> CLOSED

The phase is derived from the window and the clock, never stored. Only
bidding depends on it; catalog and allow-list changes are accepted in
every phase.
"""

import threading
from contextlib import contextmanager
from enum import IntEnum
from typing import List, Optional, Set

from gavel.core.bids import BidBook
from gavel.core.catalog import Product, ProductCatalog
from gavel.core.clock import AuctionWindow, ChainClock
from gavel.core.errors import (
    AuctionError,
    AlreadyClosed,
    AuctionNotStarted,
    BidNotFound,
    Forbidden,
    InvalidAmount,
    InvalidProductCode,
    NotAuthorized,
    ProductNotFound,
)
from gavel.core.winners import WinningBid, serialize_winners
from gavel.crypto import normalize_address, to_checksum_address
from gavel.utils.logger import get_logger
from gavel.utils.validation import (
    validate_amount,
    validate_product_code,
    validate_timestamp,
)

logger = get_logger("ledger")


class AuctionPhase(IntEnum):
    """Lifecycle phase of the auction."""
    UNCONFIGURED = 0  # No window set yet
    TIMING_SET = 1    # Window set, not started
    OPEN = 2          # start <= now < end
    CLOSED = 3        # now >= end


class AuctionLedger:
    """
    Single-owner auction ledger.

    Attributes:
        clock: Source of the current ledger timestamp
        window: Bidding window, None until set
        catalog: Product catalog
        bid_book: Latest bid per (product, bidder)
    """

    def __init__(self, owner: str, clock: Optional[ChainClock] = None):
        """
        Args:
            owner: Address allowed to call privileged operations
            clock: Ledger clock. None = a clock starting at wall-clock time.
        """
        self._owner = normalize_address(owner)
        self.clock = clock or ChainClock()

        self._allowed_buyers: Set[str] = set()
        self.window: Optional[AuctionWindow] = None
        self.catalog = ProductCatalog()
        self.bid_book = BidBook()

        self._lock = threading.RLock()

        logger.info(f"Auction ledger created, owner={self._owner}")

    # =========================================================================
    # Internals
    # =========================================================================

    @contextmanager
    def _call(self, operation: str):
        """Serialize a call and log its rejection."""
        with self._lock:
            try:
                yield
            except AuctionError as e:
                logger.warning(f"{operation} rejected: {e}")
                raise

    def _require_owner(self, caller: str) -> None:
        if normalize_address(caller) != self._owner:
            raise Forbidden(f"{caller} is not the owner")

    # =========================================================================
    # State Access
    # =========================================================================

    @property
    def owner(self) -> str:
        """Owner address in EIP-55 checksummed form."""
        return to_checksum_address(self._owner)

    @property
    def live_products_count(self) -> int:
        return self.catalog.live_count

    def allowed_buyers(self, identity: str) -> bool:
        """Whether an identity may bid."""
        with self._lock:
            return normalize_address(identity) in self._allowed_buyers

    def products_keys(self, index: int) -> int:
        """Product code at an enumeration slot (0 once delisted)."""
        with self._lock:
            return self.catalog.key_at(index)

    def products_map(self, code: int) -> Product:
        """Catalog entry for a code; the zero product if unknown or removed."""
        with self._lock:
            return self.catalog.get(code)

    def phase(self, now: Optional[int] = None) -> AuctionPhase:
        """Current phase at `now` (defaults to the ledger clock)."""
        with self._lock:
            now = self.clock.now() if now is None else now
            if self.window is None:
                return AuctionPhase.UNCONFIGURED
            if not self.window.has_started(now):
                return AuctionPhase.TIMING_SET
            if self.window.has_ended(now):
                return AuctionPhase.CLOSED
            return AuctionPhase.OPEN

    # =========================================================================
    # Owner Operations
    # =========================================================================

    def authorize(self, caller: str, identity: str) -> None:
        """
        Add an identity to the allow-list. Re-authorizing is a no-op.

        Raises:
            Forbidden: caller is not the owner
        """
        with self._call("authorize"):
            self._require_owner(caller)
            buyer = normalize_address(identity)

            if buyer in self._allowed_buyers:
                logger.debug(f"{buyer} already authorized")
                return

            self._allowed_buyers.add(buyer)
            logger.info(f"Authorized bidder {buyer}")

    def set_auction_timing(self, caller: str, start_time: int, end_time: int) -> None:
        """
        Replace the bidding window with [start_time, end_time).

        Raises:
            Forbidden: caller is not the owner
        """
        with self._call("set_auction_timing"):
            self._require_owner(caller)
            for name, value in (("start_time", start_time), ("end_time", end_time)):
                valid, err = validate_timestamp(value, name)
                if not valid:
                    raise ValueError(err)

            self.window = AuctionWindow(start_time=start_time, end_time=end_time)
            logger.info(f"Auction window set to [{start_time}, {end_time})")

    def product(self, caller: str, code: int, price: int, remove: bool = False) -> None:
        """
        List, re-price or delist a product.

        Args:
            caller: Calling identity
            code: Product code (> 0)
            price: Asking price, ignored on removal
            remove: True delists the product, False lists/updates it

        Raises:
            InvalidProductCode: code is not a positive integer
            Forbidden: caller is not the owner
            InvalidAmount: price out of range
            ProductNotFound: removing a product that is not live
        """
        with self._call("product"):
            valid, err = validate_product_code(code)
            if not valid:
                raise InvalidProductCode(err)
            self._require_owner(caller)

            if remove:
                if not self.catalog.is_live(code):
                    raise ProductNotFound(f"product {code} is not live")
                self.catalog.remove(code)
                logger.info(f"Removed product {code}, live={self.catalog.live_count}")
                return

            valid, err = validate_amount(price, "price")
            if not valid:
                raise InvalidAmount(err)

            if self.catalog.upsert(code, price):
                logger.info(f"Added product {code} at {price}, live={self.catalog.live_count}")
            else:
                logger.info(f"Updated product {code} price to {price}")

    # =========================================================================
    # Bidding
    # =========================================================================

    def bid(self, caller: str, product_code: int, amount: int, now: Optional[int] = None) -> None:
        """
        Place or replace the caller's bid on a product.

        Args:
            caller: Bidding identity
            product_code: Live product to bid on
            amount: Bid in the smallest currency unit
            now: Timestamp of the call (defaults to the ledger clock).
                Must not be earlier than the ledger clock.

        Raises:
            ValueError: now is earlier than the ledger clock
            NotAuthorized: caller is not allow-listed
            AuctionNotStarted: no window, or now < start
            AlreadyClosed: now >= end
            InvalidProductCode: product is not live
            InvalidAmount: amount out of range
        """
        with self._call("bid"):
            bidder = normalize_address(caller)
            if bidder not in self._allowed_buyers:
                raise NotAuthorized(f"{bidder} is not an allowed buyer")

            ledger_time = self.clock.now()
            if now is None:
                now = ledger_time
            elif now < ledger_time:
                raise ValueError(f"Timestamp {now} is earlier than ledger time {ledger_time}")

            if self.window is None:
                raise AuctionNotStarted("auction timing not set")
            if not self.window.has_started(now):
                raise AuctionNotStarted(f"opens at {self.window.start_time}")
            if self.window.has_ended(now):
                raise AlreadyClosed(f"closed at {self.window.end_time}")

            valid, err = validate_product_code(product_code)
            if not valid:
                raise InvalidProductCode(err)
            if not self.catalog.is_live(product_code):
                raise InvalidProductCode(f"product {product_code} is not live")

            valid, err = validate_amount(amount)
            if not valid:
                raise InvalidAmount(err)

            self.bid_book.place(product_code, bidder, amount)
            logger.debug(f"Bid on product {product_code} by {bidder}: {amount}")

    # =========================================================================
    # Queries
    # =========================================================================

    def get_current_bids(self, product_code: int, identity: str) -> int:
        """
        Latest bid of an identity on a product.

        Raises:
            BidNotFound: the identity never bid on the product
        """
        with self._call("get_current_bids"):
            bidder = normalize_address(identity)
            record = self.bid_book.get(product_code, bidder)
            if record is None:
                raise BidNotFound(f"no bid by {bidder} on product {product_code}")
            return record.amount

    def get_highest_bid(self, product_code: int) -> int:
        """Highest bid on a product, 0 if there are none."""
        with self._lock:
            record = self.bid_book.highest(product_code)
            return record.amount if record else 0

    def winning_bids(self, caller: str) -> List[WinningBid]:
        """
        Highest bid per live product, in catalog order.

        Products without bids are left out.

        Raises:
            Forbidden: caller is not the owner
        """
        with self._call("get_winners"):
            self._require_owner(caller)

            winners = []
            for product in self.catalog.live_products():
                record = self.bid_book.highest(product.code)
                if record is None:
                    continue
                winners.append(WinningBid(
                    product_code=product.code,
                    amount=record.amount,
                    winner=to_checksum_address(record.bidder),
                ))
            return winners

    def get_winners(self, caller: str) -> str:
        """Winners as a JSON array of {productCode, amount, winner}."""
        winners = self.winning_bids(caller)
        logger.info(f"Winners computed for {len(winners)} product(s)")
        return serialize_winners(winners)

    # =========================================================================
    # Utility
    # =========================================================================

    def __repr__(self) -> str:
        return (
            f"AuctionLedger(owner={self.owner}, phase={self.phase().name}, "
            f"live_products={self.catalog.live_count}, bids={self.bid_book.bid_count()})"
        )

    def stats(self) -> dict:
        """Get ledger statistics."""
        with self._lock:
            return {
                "owner": self.owner,
                "phase": self.phase().name,
                "timestamp": self.clock.now(),
                "window": (
                    [self.window.start_time, self.window.end_time] if self.window else None
                ),
                "allowed_buyers": len(self._allowed_buyers),
                "live_products": self.catalog.live_count,
                "product_slots": self.catalog.key_count(),
                "bids": self.bid_book.bid_count(),
            }
