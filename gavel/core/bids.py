"""
Bid book - per-product, per-bidder bids.

Only the latest bid of each bidder on each product is kept; a new bid
replaces the old amount instead of adding to it. Highest bids and winners
are computed from the book on every query rather than cached.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from gavel.utils.logger import get_logger

logger = get_logger("bids")


@dataclass(frozen=True)
class BidRecord:
    """
    A bidder's current bid on one product.

    Attributes:
        product_code: Product the bid is for
        bidder: Normalized bidder address
        amount: Bid in the smallest currency unit
        sequence: Ledger-wide order of the call that set this amount
    """
    product_code: int
    bidder: str
    amount: int
    sequence: int


class BidBook:
    """Latest bid per (product_code, bidder)."""

    def __init__(self):
        self._bids: Dict[int, Dict[str, BidRecord]] = {}
        self._sequence = 0

    def place(self, product_code: int, bidder: str, amount: int) -> BidRecord:
        """Record or replace a bid."""
        self._sequence += 1
        record = BidRecord(
            product_code=product_code,
            bidder=bidder,
            amount=amount,
            sequence=self._sequence,
        )
        self._bids.setdefault(product_code, {})[bidder] = record
        return record

    def get(self, product_code: int, bidder: str) -> Optional[BidRecord]:
        return self._bids.get(product_code, {}).get(bidder)

    def bids_for(self, product_code: int) -> List[BidRecord]:
        """All current bids on a product, oldest first."""
        return sorted(self._bids.get(product_code, {}).values(), key=lambda b: b.sequence)

    def highest(self, product_code: int) -> Optional[BidRecord]:
        """
        Highest bid on a product.

        Ties go to the bid placed first. Returns None if nobody has bid.
        """
        best: Optional[BidRecord] = None
        for record in self.bids_for(product_code):
            if best is None or record.amount > best.amount:
                best = record
        return best

    def bid_count(self) -> int:
        return sum(len(bidders) for bidders in self._bids.values())

    def __repr__(self) -> str:
        return f"BidBook(products={len(self._bids)}, bids={self.bid_count()})"
