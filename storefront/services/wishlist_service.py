# storefront/services/wishlist_service.py
from typing import List

from storefront.domain.errors import DuplicateEntry, PersistenceError
from storefront.domain.schemas import AddOutcome, Notice, ProductIn, WishlistEntry, WishlistOut
from storefront.repos.wishlist_repo import WishlistBackend
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class WishlistService:
    """Saved products of one identity, set semantics on product_id."""

    def __init__(self, backend: WishlistBackend):
        self.backend = backend
        self.entries: List[WishlistEntry] = []
        self.notice: Notice | None = None
        self.outcome: AddOutcome | None = None
        self.reload()

    @property
    def count(self) -> int:
        return len(self.entries)

    def contains(self, product_id: str) -> bool:
        return any(e.product_id == product_id for e in self.entries)

    def view(self) -> WishlistOut:
        return WishlistOut(items=self.entries, count=self.count, outcome=self.outcome, notice=self.notice)

    def reload(self) -> bool:
        try:
            self.entries = self.backend.load()
            return True
        except PersistenceError as e:
            logger.error(f"Error loading wishlist items: {e}")
            self.notice = Notice.error("Failed to load wishlist items")
            return False

    def add(self, product: ProductIn) -> AddOutcome:
        entry = WishlistEntry(**product.model_dump(include=set(ProductIn.model_fields)))
        try:
            self.backend.insert(entry)
        except DuplicateEntry:
            logger.info(f"Product {product.product_id} already in wishlist")
            self.notice = Notice.error("This item is already in your wishlist", title="Already in Wishlist")
            self.outcome = AddOutcome.ALREADY_EXISTS
            return self.outcome
        except PersistenceError as e:
            logger.warning(f"Wishlist add failed: {e}")
            self.notice = Notice.error("Failed to add item to wishlist")
            self.outcome = AddOutcome.FAILED
            return self.outcome

        logger.info(f"Product {product.product_id} added to wishlist")
        if not self.reload():
            self.entries = self.entries + [entry]
        self.notice = Notice.success("Added to Wishlist", f"{product.product_name} has been added to your wishlist")
        self.outcome = AddOutcome.ADDED
        return self.outcome

    def remove(self, product_id: str) -> bool:
        try:
            self.backend.delete(product_id)
        except PersistenceError as e:
            logger.warning(f"Wishlist remove failed: {e}")
            self.notice = Notice.error("Failed to remove item from wishlist")
            return False

        logger.info(f"Product {product_id} removed from wishlist")
        if not self.reload():
            self.entries = [e for e in self.entries if e.product_id != product_id]
        self.notice = Notice.success("Removed from Wishlist", "Item has been removed from your wishlist")
        return True

    def clear(self) -> bool:
        try:
            self.backend.clear()
        except PersistenceError as e:
            logger.warning(f"Wishlist clear failed: {e}")
            self.notice = Notice.error("Failed to clear wishlist")
            return False
        self.entries = []
        return True

    def switch_backend(self, backend: WishlistBackend, merge: bool = False) -> bool:
        """Same contract as CartService.switch_backend; duplicates are skipped on merge."""
        previous, carried = self.backend, list(self.entries)
        self.backend = backend
        self.notice = None
        if not self.reload():
            #never present the old identity's entries as the new one's
            self.entries = []
            return False
        if not merge or not carried:
            return False

        logger.info(f"Merging {len(carried)} guest wishlist entries into signed-in wishlist")
        try:
            for entry in carried:
                try:
                    backend.insert(entry)
                except DuplicateEntry:
                    continue
            previous.clear()
        except PersistenceError as e:
            logger.warning(f"Guest wishlist merge interrupted: {e}")
            self.notice = Notice.error("Failed to merge guest wishlist")
            self.reload()
            return False

        self.reload()
        return True
