# storefront/services/payment_service.py
from sqlalchemy.orm import Session

from storefront.domain.errors import InvalidTransition, NotFound, PaymentDeclined
from storefront.domain.order_status import OrderStatus
from storefront.domain.schemas import PaymentIn
from storefront.repos.order_repo import OrderRepo
from storefront.services.notification_service import NotificationService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentService:
    def __init__(self, db: Session, gateway):
        self.repo = OrderRepo(db)
        self.gateway = gateway
        self.notification_service = NotificationService()

    def pay_order(self, payload: PaymentIn) -> dict:
        """
        Use Case: pay a pending order.

        Only pending orders are charged, so a retried request for an order
        that is already paid is rejected before the gateway is called.
        A decline leaves the order pending.
        """
        order = self.repo.get_order(payload.order_id)
        if not order:
            raise NotFound("Order not found")

        if order.status is not OrderStatus.PENDING:
            raise InvalidTransition(f"Order is already {order.status.value}")

        if payload.amount != order.total_amount:
            raise ValueError("Payment amount does not match order total")

        result = self.gateway.charge(
            order_id=order.id,
            amount=payload.amount,
            customer_email=payload.customer_email,
            customer_name=payload.customer_name,
            product_name=payload.product_name or order.product_name,
        )

        if not result.success:
            logger.warning(f"Payment declined for order {order.id}: {result.error}")
            raise PaymentDeclined(order.id, result.error or "Payment failed")

        self.repo.update_order_status(order, OrderStatus.PAID, payment_reference=result.payment_id)
        logger.info(f"Order {order.id} paid, payment {result.payment_id}")

        self.notification_service.send_order_notification(order.id, order.customer_email, OrderStatus.PAID)

        return {
            "success": True,
            "payment_id": result.payment_id,
            "order_id": order.id,
            "message": "Payment processed successfully",
            "redirect_url": f"/order-tracking/{order.id}",
        }
