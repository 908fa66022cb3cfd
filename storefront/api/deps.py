# storefront/api/deps.py
import hmac
from functools import lru_cache
from uuid import UUID

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.identity import Identity
from storefront.repos.cart_repo import select_cart_backend
from storefront.repos.device_store import DeviceStore, build_device_store
from storefront.repos.wishlist_repo import select_wishlist_backend
from storefront.services.cart_service import CartService
from storefront.services.payment_client import build_payment_gateway
from storefront.services.wishlist_service import WishlistService
from storefront.utils.settings import ADMIN_TOKEN, DEVICE_STORE_URL


def _is_admin(token: str | None) -> bool:
    return bool(ADMIN_TOKEN) and token is not None and hmac.compare_digest(token, ADMIN_TOKEN)


def get_identity(
    x_user_id: str | None = Header(default=None),
    x_user_email: str | None = Header(default=None),
    x_device_id: str | None = Header(default=None),
    x_admin_token: str | None = Header(default=None),
) -> Identity:
    user_id = None
    if x_user_id:
        try:
            user_id = UUID(x_user_id)
        except ValueError:
            raise HTTPException(status_code=400, detail="X-User-Id must be a UUID")

    return Identity(
        user_id=user_id,
        email=x_user_email or None,
        device_id=x_device_id or None,
        is_admin=_is_admin(x_admin_token),
    )


def require_admin(identity: Identity = Depends(get_identity)) -> Identity:
    if not identity.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return identity


@lru_cache
def get_device_store() -> DeviceStore:
    return build_device_store(DEVICE_STORE_URL)


@lru_cache
def get_payment_gateway():
    return build_payment_gateway()


def get_cart_service(
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
    device_store: DeviceStore = Depends(get_device_store),
) -> CartService:
    try:
        return CartService(select_cart_backend(identity, db, device_store))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def get_wishlist_service(
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
    device_store: DeviceStore = Depends(get_device_store),
) -> WishlistService:
    try:
        return WishlistService(select_wishlist_backend(identity, db, device_store))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
