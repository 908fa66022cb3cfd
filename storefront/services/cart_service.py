# storefront/services/cart_service.py
from typing import Callable, List

from storefront.domain.errors import PersistenceError
from storefront.domain.schemas import CartLine, CartOut, Notice, ProductIn
from storefront.repos.cart_repo import CartBackend
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Cart of one identity.
    commands (add, remove, update, clear) write through the backend and reload
    query (view, total, count) reads in-memory lines only

    A failed write leaves the lines as they were before the command and
    sets an error notice instead of raising.
    While the backend cannot be read the cart shows no lines and refuses
    commands, since they would be computed against an empty view.
    """

    def __init__(self, backend: CartBackend):
        self.backend = backend
        self.lines: List[CartLine] = []
        self.loaded = False
        self.notice: Notice | None = None
        self.reload()

    #query
    @property
    def total(self) -> int:
        return sum(line.product_price * line.quantity for line in self.lines)

    @property
    def count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def find(self, product_id: str) -> CartLine | None:
        return next((line for line in self.lines if line.product_id == product_id), None)

    def view(self) -> CartOut:
        return CartOut(items=self.lines, total=self.total, count=self.count, notice=self.notice)

    def reload(self) -> bool:
        try:
            self.lines = self.backend.load()
            self.loaded = True
            return True
        except PersistenceError as e:
            logger.error(f"Error loading cart items: {e}")
            self.lines = []
            self.loaded = False
            self.notice = Notice.error("Failed to load cart items")
            return False

    def _require_loaded(self) -> bool:
        if self.loaded or self.reload():
            return True
        logger.warning("Cart command refused, stored cart could not be read")
        return False

    def _commit(
        self,
        write: Callable[[], None],
        expected: List[CartLine],
        success: Notice | None,
        failure: str,
    ) -> bool:
        snapshot = list(self.lines)
        try:
            write()
        except PersistenceError as e:
            logger.warning(f"Cart write failed, keeping previous {len(snapshot)} line(s): {e}")
            self.lines = snapshot
            self.notice = Notice.error(failure)
            return False

        # the write landed; if only the re-read fails show what was written
        try:
            self.lines = self.backend.load()
        except PersistenceError as e:
            logger.warning(f"Cart reload after write failed: {e}")
            self.lines = expected

        self.notice = success
        return True

    #commands
    def add_to_cart(self, product: ProductIn, quantity: int = 1) -> bool:
        if quantity < 1:
            raise ValueError("Quantity must be at least 1")
        if not self._require_loaded():
            return False

        existing = self.find(product.product_id)
        new_quantity = quantity + (existing.quantity if existing else 0)
        line = CartLine(**product.model_dump(include=set(ProductIn.model_fields)), quantity=new_quantity)

        if existing:
            logger.info(
                f"Product {product.product_id} already in cart, quantity "
                f"{existing.quantity} -> {new_quantity}"
            )
            expected = [line if cur.product_id == line.product_id else cur for cur in self.lines]
        else:
            logger.info(f"Adding product {product.product_id} to cart")
            expected = self.lines + [line]

        return self._commit(
            lambda: self.backend.upsert(line),
            expected,
            Notice.success("Added to Cart", f"{product.product_name} has been added to your cart"),
            "Failed to add item to cart",
        )

    def remove_from_cart(self, product_id: str) -> bool:
        if not self._require_loaded():
            return False
        logger.info(f"Removing product {product_id} from cart")
        return self._commit(
            lambda: self.backend.delete(product_id),
            [cur for cur in self.lines if cur.product_id != product_id],
            Notice.success("Removed from Cart", "Item has been removed from your cart"),
            "Failed to remove item from cart",
        )

    def update_quantity(self, product_id: str, quantity: int) -> bool:
        if quantity <= 0:
            return self.remove_from_cart(product_id)
        if not self._require_loaded():
            return False

        logger.info(f"Setting quantity of product {product_id} to {quantity}")
        return self._commit(
            lambda: self.backend.set_quantity(product_id, quantity),
            [
                cur.model_copy(update={"quantity": quantity}) if cur.product_id == product_id else cur
                for cur in self.lines
            ],
            None,
            "Failed to update item quantity",
        )

    def clear_cart(self) -> bool:
        if not self._require_loaded():
            return False
        logger.info(f"Clearing cart with {len(self.lines)} line(s)")
        return self._commit(
            self.backend.clear,
            [],
            Notice.success("Cart Cleared", "All items have been removed from your cart"),
            "Failed to clear cart",
        )

    #identity change
    def switch_backend(self, backend: CartBackend, merge: bool = False) -> bool:
        """
        Point the cart at another identity's backend and reload from it.
        With merge=True the lines held so far are added on top of the new
        cart and the old backend is cleared; otherwise they stay where they were.
        Returns True when a merge happened.
        If the new backend cannot be read the cart shows no lines and nothing
        is merged; the carried lines stay in the old backend.
        """
        previous, carried = self.backend, list(self.lines)
        self.backend = backend
        self.notice = None
        if not self.reload():
            return False
        if not merge or not carried:
            return False

        logger.info(f"Merging {len(carried)} guest cart line(s) into signed-in cart")
        try:
            for line in carried:
                existing = self.find(line.product_id)
                if existing:
                    line = line.model_copy(update={"quantity": existing.quantity + line.quantity})
                backend.upsert(line)
            previous.clear()
        except PersistenceError as e:
            logger.warning(f"Guest cart merge interrupted: {e}")
            self.notice = Notice.error("Failed to merge guest cart")
            self.reload()
            return False

        self.reload()
        return True
