# storefront/services/session_service.py
from sqlalchemy.orm import Session

from storefront.domain.identity import Identity
from storefront.repos.cart_repo import select_cart_backend
from storefront.repos.device_store import DeviceStore
from storefront.repos.wishlist_repo import select_wishlist_backend
from storefront.services.cart_service import CartService
from storefront.services.wishlist_service import WishlistService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class SessionService:
    """Reloads cart and wishlist when the caller signs in or out."""

    def __init__(self, db: Session, device_store: DeviceStore):
        self.db = db
        self.device_store = device_store

    def sign_in(self, identity: Identity, merge: bool):
        """
        Start from the device's guest state, then switch to the account.
        merge=False: the account state replaces the guest state on screen,
        guest blobs stay on the device untouched.
        merge=True: guest lines and entries are moved into the account.
        """
        if not identity.is_authenticated:
            raise ValueError("Sign-in requires a user id")
        if not identity.device_id:
            raise ValueError("Sign-in requires a device id")

        guest = identity.anonymous()
        cart = CartService(select_cart_backend(guest, self.db, self.device_store))
        wishlist = WishlistService(select_wishlist_backend(guest, self.db, self.device_store))

        cart_merged = cart.switch_backend(select_cart_backend(identity, self.db, self.device_store), merge=merge)
        wishlist_merged = wishlist.switch_backend(
            select_wishlist_backend(identity, self.db, self.device_store), merge=merge
        )

        logger.info(
            f"User {identity.user_id} signed in on device {identity.device_id}, "
            f"merge={merge} cart_merged={cart_merged} wishlist_merged={wishlist_merged}"
        )
        return cart, wishlist, cart_merged or wishlist_merged

    def sign_out(self, identity: Identity):
        """Back to the device's guest state. Account data is never copied to the device."""
        if not identity.device_id:
            raise ValueError("Sign-out requires a device id")

        guest = identity.anonymous()
        cart = CartService(select_cart_backend(guest, self.db, self.device_store))
        wishlist = WishlistService(select_wishlist_backend(guest, self.db, self.device_store))
        logger.info(f"Device {identity.device_id} signed out")
        return cart, wishlist
