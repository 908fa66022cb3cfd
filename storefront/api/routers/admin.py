# storefront/api/routers/admin.py
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.api.deps import require_admin
from storefront.data.database import get_db
from storefront.domain.errors import InvalidTransition, NotFound, PersistenceError
from storefront.domain.order_status import OrderStatus
from storefront.domain.schemas import AdminStatsOut, OrderOut, StatusChangeIn
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def _change(action):
    try:
        return action()
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e))
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Failed to update order status")


@router.get("/orders", response_model=List[OrderOut])
def list_orders(status: Optional[OrderStatus] = Query(None), db: Session = Depends(get_db)):
    return OrderService(db).list_all(status=status)


@router.get("/stats", response_model=AdminStatsOut)
def stats(db: Session = Depends(get_db)):
    return OrderService(db).stats()


@router.post("/orders/{order_id}/advance", response_model=OrderOut)
def advance_order(order_id: UUID, db: Session = Depends(get_db)):
    return _change(lambda: OrderService(db).advance(order_id))


@router.post("/orders/{order_id}/cancel", response_model=OrderOut)
def cancel_order(order_id: UUID, db: Session = Depends(get_db)):
    return _change(lambda: OrderService(db).cancel(order_id))


@router.patch("/orders/{order_id}", response_model=OrderOut)
def change_status(order_id: UUID, payload: StatusChangeIn, db: Session = Depends(get_db)):
    return _change(lambda: OrderService(db).change_status(order_id, payload.status))
