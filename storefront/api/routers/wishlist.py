#storefront/api/routers/wishlist.py
from fastapi import APIRouter, Depends

from storefront.api.deps import get_wishlist_service
from storefront.domain.schemas import ProductIn, WishlistContainsOut, WishlistOut
from storefront.services.wishlist_service import WishlistService

router = APIRouter(prefix="/wishlist", tags=["wishlist"])


@router.get("", response_model=WishlistOut)
def get_wishlist(svc: WishlistService = Depends(get_wishlist_service)):
    return svc.view()


@router.post("/items", response_model=WishlistOut)
def add_item(payload: ProductIn, svc: WishlistService = Depends(get_wishlist_service)):
    """
    Already saved products are not an error: the response carries
    outcome=already_exists and the list is unchanged.
    """
    svc.add(payload)
    return svc.view()


@router.get("/items/{product_id}", response_model=WishlistContainsOut)
def contains_item(product_id: str, svc: WishlistService = Depends(get_wishlist_service)):
    return {"product_id": product_id, "in_wishlist": svc.contains(product_id)}


@router.delete("/items/{product_id}", response_model=WishlistOut)
def remove_item(product_id: str, svc: WishlistService = Depends(get_wishlist_service)):
    svc.remove(product_id)
    return svc.view()
