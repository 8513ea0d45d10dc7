"""
Product catalog.

The catalog mirrors contract storage:

- products: code -> Product (unknown codes read as the zero product)
- keys: append-only list of codes, enumerable by index
- live_count: number of products currently live

Removal never compacts `keys`. The slot that held the removed code is
rewritten to 0 in place, so every other index keeps pointing at the same
product. Re-adding a removed code appends a fresh slot.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Tuple

from gavel.utils.logger import get_logger

logger = get_logger("catalog")


@dataclass(frozen=True)
class Product:
    """
    A catalog entry.

    Attributes:
        code: Product identifier (> 0 while live, 0 once removed)
        price: Asking price in the smallest currency unit
        is_live: Whether the product can be bid on
    """
    code: int
    price: int
    is_live: bool

    def as_tuple(self) -> Tuple[int, int, bool]:
        """(code, price, is_live), the shape of the contract getter."""
        return (self.code, self.price, self.is_live)


EMPTY_PRODUCT = Product(code=0, price=0, is_live=False)


class ProductCatalog:
    """
    Keyed product store with index-stable enumeration.

    Performs no permission or range checks; the ledger does those before
    calling in.
    """

    def __init__(self):
        self._products: Dict[int, Product] = {}
        self._keys: List[int] = []
        self.live_count = 0

    # =========================================================================
    # Queries
    # =========================================================================

    def get(self, code: int) -> Product:
        return self._products.get(code, EMPTY_PRODUCT)

    def is_live(self, code: int) -> bool:
        return self.get(code).is_live

    def key_at(self, index: int) -> int:
        """
        Code stored at an enumeration slot.

        Raises:
            IndexError: if the slot was never written
        """
        if index < 0 or index >= len(self._keys):
            raise IndexError(f"Product key index {index} out of range [0, {len(self._keys)})")
        return self._keys[index]

    def key_count(self) -> int:
        return len(self._keys)

    def live_products(self) -> Iterator[Product]:
        """Live products in key order."""
        seen = set()
        for code in self._keys:
            if code == 0 or code in seen:
                continue
            seen.add(code)
            product = self.get(code)
            if product.is_live:
                yield product

    # =========================================================================
    # Mutations
    # =========================================================================

    def upsert(self, code: int, price: int) -> bool:
        """
        Create or re-price a product and mark it live.

        Returns:
            True if the product became live (new or re-added), False if an
            already-live product was only re-priced
        """
        was_live = self.is_live(code)
        self._products[code] = Product(code=code, price=price, is_live=True)

        if was_live:
            logger.debug(f"Product {code} re-priced to {price}")
            return False

        self._keys.append(code)
        self.live_count += 1
        logger.debug(f"Product {code} listed at slot {len(self._keys) - 1}")
        return True

    def remove(self, code: int) -> None:
        """
        Zero out a live product and its enumeration slot.

        The caller must have checked that the product is live.
        """
        self._products[code] = EMPTY_PRODUCT
        for i, key in enumerate(self._keys):
            if key == code:
                self._keys[i] = 0
        self.live_count -= 1
        logger.debug(f"Product {code} delisted")

    def __len__(self) -> int:
        return self.live_count

    def __repr__(self) -> str:
        return f"ProductCatalog(live={self.live_count}, slots={len(self._keys)})"
