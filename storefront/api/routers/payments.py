# storefront/api/routers/payments.py
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from storefront.api.deps import get_payment_gateway
from storefront.data.database import get_db
from storefront.domain.errors import (
    InvalidTransition,
    NotFound,
    PaymentDeclined,
    PaymentGatewayError,
    PersistenceError,
)
from storefront.domain.schemas import PaymentIn, PaymentOut
from storefront.services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("", response_model=PaymentOut)
def create_payment(
    payload: PaymentIn,
    db: Session = Depends(get_db),
    gateway=Depends(get_payment_gateway),
):
    """
    Charges a pending order and marks it paid.
    A decline answers 402 and leaves the order pending.
    """
    svc = PaymentService(db, gateway)
    try:
        return svc.pay_order(payload)
    except PaymentDeclined as e:
        return JSONResponse(
            status_code=402,
            content={"success": False, "error": e.reason, "order_id": str(e.order_id)},
        )
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PaymentGatewayError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Failed to update order status")
