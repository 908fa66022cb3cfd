#import all models so SQLAlchemy registers them in Base.metadata

from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.wishlist_item import WishlistItemModel
from storefront.data.models.order import OrderModel

__all__ = ["CartItemModel", "WishlistItemModel", "OrderModel"]
