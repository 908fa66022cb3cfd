# storefront/api/routers/orders.py
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from storefront.api.deps import get_cart_service, get_identity
from storefront.data.database import get_db
from storefront.domain.errors import NotFound, PersistenceError
from storefront.domain.identity import Identity
from storefront.domain.order_status import OrderStatus
from storefront.domain.schemas import (
    CheckoutIn,
    CheckoutOut,
    OrderCreate,
    OrderCreatedOut,
    OrderOut,
    OrderTrackingOut,
)
from storefront.services.cart_service import CartService
from storefront.services.order_service import OrderService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.post("", response_model=OrderCreatedOut, status_code=201)
def create_order(
    payload: OrderCreate,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    """
    Places a pending order for a single product ("Buy Now").
    total_amount = product_price * quantity, frozen at creation.
    """
    svc = get_service(db)
    try:
        order = svc.create_order(payload, user_id=identity.user_id)
    except PersistenceError as e:
        logger.error(f"Database error: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to create order"})

    return {
        "success": True,
        "order_id": order.id,
        "message": "Order created successfully",
        "order": OrderOut.model_validate(order),
    }


@router.post("/checkout", response_model=CheckoutOut, status_code=201)
def checkout(
    payload: CheckoutIn,
    identity: Identity = Depends(get_identity),
    cart: CartService = Depends(get_cart_service),
    db: Session = Depends(get_db),
):
    """
    Turns every line of the caller's cart into a pending order and empties the cart.
    """
    svc = get_service(db)
    try:
        orders = svc.checkout_cart(cart, payload, user_id=identity.user_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError as e:
        logger.error(f"Database error: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to create order"})

    return {
        "success": True,
        "order_ids": [o.id for o in orders],
        "total_amount": sum(o.total_amount for o in orders),
        "orders": [OrderOut.model_validate(o) for o in orders],
        "notice": cart.notice,
    }


@router.get("", response_model=List[OrderOut])
def order_history(
    status: Optional[OrderStatus] = Query(None),
    search: Optional[str] = Query(None),
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    """
    Orders of the signed-in caller, matched by user id or email, newest first.
    """
    svc = get_service(db)
    try:
        return svc.order_history(identity, status=status, search=search)
    except PermissionError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{order_id}", response_model=OrderTrackingOut)
def track_order(
    order_id: UUID,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    """
    Order details with progress percentage and status timeline.
    """
    svc = get_service(db)
    try:
        tracking = svc.track_order(order_id, identity)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return {**tracking, "order": OrderOut.model_validate(tracking["order"])}
