# storefront/services/notification_service.py
from uuid import UUID

from storefront.celery_worker import celery_app
from storefront.domain.order_status import OrderStatus
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Customer notifications about their orders.
    Dispatched through Celery so the request never waits on delivery.
    """

    @staticmethod
    def send_order_notification(order_id: UUID, customer_email: str, status: OrderStatus) -> bool:
        try:
            send_order_notification_task.delay(str(order_id), customer_email, status.value)
            return True
        except Exception as e:
            # broker down must not fail the order write that already happened
            logger.warning(f"Could not enqueue notification for order {order_id}: {e}")
            return False


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(order_id: str, customer_email: str, status: str):
    """
    A real deployment would hand this to an email provider.
    For now it only logs.
    """
    label = OrderStatus(status).label
    logger.info(f"[NOTIFICATION] {customer_email}: order {order_id} is now '{label}'")
    return {"order_id": order_id, "customer_email": customer_email, "status": status, "sent": True}
