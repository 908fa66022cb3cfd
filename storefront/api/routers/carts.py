#storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException

from storefront.api.deps import get_cart_service
from storefront.domain.schemas import CartItemIn, CartOut, QuantityIn
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=CartOut)
def get_cart(svc: CartService = Depends(get_cart_service)):
    return svc.view()


@router.post("/items", response_model=CartOut)
def add_item(payload: CartItemIn, svc: CartService = Depends(get_cart_service)):
    try:
        svc.add_to_cart(payload, quantity=payload.quantity)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return svc.view()


@router.patch("/items/{product_id}", response_model=CartOut)
def update_item(product_id: str, payload: QuantityIn, svc: CartService = Depends(get_cart_service)):
    svc.update_quantity(product_id, payload.quantity)
    return svc.view()


@router.delete("/items/{product_id}", response_model=CartOut)
def remove_item(product_id: str, svc: CartService = Depends(get_cart_service)):
    svc.remove_from_cart(product_id)
    return svc.view()


@router.delete("", response_model=CartOut)
def clear_cart(svc: CartService = Depends(get_cart_service)):
    svc.clear_cart()
    return svc.view()
