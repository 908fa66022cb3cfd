# storefront/api/routers/session.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.api.deps import get_device_store, get_identity
from storefront.data.database import get_db
from storefront.domain.identity import Identity
from storefront.domain.schemas import SessionOut
from storefront.repos.device_store import DeviceStore
from storefront.services.session_service import SessionService
from storefront.utils.settings import MERGE_GUEST_ON_SIGN_IN

router = APIRouter(prefix="/session", tags=["session"])


@router.post("/sign-in", response_model=SessionOut)
def sign_in(
    merge: Optional[bool] = Query(None, description="Move guest cart/wishlist into the account"),
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
    device_store: DeviceStore = Depends(get_device_store),
):
    svc = SessionService(db, device_store)
    try:
        cart, wishlist, merged = svc.sign_in(
            identity, merge=MERGE_GUEST_ON_SIGN_IN if merge is None else merge
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"cart": cart.view(), "wishlist": wishlist.view(), "merged": merged}


@router.post("/sign-out", response_model=SessionOut)
def sign_out(
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
    device_store: DeviceStore = Depends(get_device_store),
):
    svc = SessionService(db, device_store)
    try:
        cart, wishlist = svc.sign_out(identity)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"cart": cart.view(), "wishlist": wishlist.view(), "merged": False}
