# storefront/services/order_service.py
from typing import List
from uuid import UUID

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.domain.errors import InvalidTransition, NotFound, PersistenceError
from storefront.domain.identity import Identity
from storefront.domain.order_status import (
    OrderStatus,
    can_transition,
    next_status,
    progress_percentage,
    timeline,
)
from storefront.domain.schemas import CheckoutIn, OrderCreate, ShippingAddress
from storefront.repos.order_repo import OrderRepo
from storefront.services.cart_service import CartService
from storefront.services.notification_service import NotificationService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _address(address: ShippingAddress | None) -> dict | None:
    return address.model_dump(by_alias=True) if address else None


class OrderService:
    """
    Order domain: placing orders, tracking them and moving them through
    the status flow. Payment lives in PaymentService.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepo(db)
        self.notification_service = NotificationService()

    #commands
    def create_order(self, payload: OrderCreate, user_id: UUID | None = None) -> OrderModel:
        """
        Use Case: place an order for one product.
        Price is taken from the request and frozen on the order.
        """
        order = OrderModel(
            user_id=user_id,
            product_id=payload.product_id,
            product_name=payload.product_name,
            product_price=payload.product_price,
            quantity=payload.quantity,
            total_amount=payload.product_price * payload.quantity,
            customer_email=payload.customer_email,
            customer_name=payload.customer_name,
            shipping_address=_address(payload.shipping_address),
            status=OrderStatus.PENDING,
        )
        created = self.repo.create_order(order)
        logger.info(f"Order {created.id} created for {created.customer_email}, total {created.total_amount}")

        self.notification_service.send_order_notification(created.id, created.customer_email, created.status)
        return created

    def checkout_cart(self, cart: CartService, payload: CheckoutIn, user_id: UUID | None = None) -> List[OrderModel]:
        """
        Use Case: one pending order per cart line, then empty the cart.
        The orders are written in one transaction. If clearing the cart fails
        afterwards the orders stand and the cart keeps its lines.
        """
        if not cart.loaded:
            raise PersistenceError("Cart could not be loaded")
        if not cart.lines:
            raise ValueError("Cart is empty")

        orders = [
            OrderModel(
                user_id=user_id,
                product_id=line.product_id,
                product_name=line.product_name,
                product_price=line.product_price,
                quantity=line.quantity,
                total_amount=line.product_price * line.quantity,
                customer_email=payload.customer_email,
                customer_name=payload.customer_name,
                shipping_address=_address(payload.shipping_address),
                status=OrderStatus.PENDING,
            )
            for line in cart.lines
        ]
        created = self.repo.create_orders(orders)
        logger.info(f"Checkout created {len(created)} order(s) for {payload.customer_email}")

        if not cart.clear_cart():
            logger.warning(f"Orders {[str(o.id) for o in created]} placed but cart was not cleared")

        for order in created:
            self.notification_service.send_order_notification(order.id, order.customer_email, order.status)
        return created

    def change_status(self, order_id: UUID, target: OrderStatus) -> OrderModel:
        """
        Use Case: admin status change.
        One step forward at a time, or cancel from any non-terminal status.
        pending -> paid only happens through a payment.
        """
        order = self.get_order(order_id)
        current = order.status

        if target is OrderStatus.PAID:
            raise InvalidTransition("Orders are marked paid only by a successful payment")
        if not can_transition(current, target):
            raise InvalidTransition(f"Cannot move order from {current.value} to {target.value}")

        updated = self.repo.update_order_status(order, target)
        logger.info(f"Order {order_id} status {current.value} -> {target.value}")

        self.notification_service.send_order_notification(updated.id, updated.customer_email, target)
        return updated

    def advance(self, order_id: UUID) -> OrderModel:
        order = self.get_order(order_id)
        target = next_status(order.status)
        if target is None:
            raise InvalidTransition(f"Order is {order.status.value}, nothing to advance to")
        return self.change_status(order_id, target)

    def cancel(self, order_id: UUID) -> OrderModel:
        return self.change_status(order_id, OrderStatus.CANCELLED)

    #queries
    def get_order(self, order_id: UUID) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFound("Order Not Found")
        return order

    def track_order(self, order_id: UUID, identity: Identity) -> dict:
        """
        Guest orders are tracked by id alone, the id is the tracking link.
        Orders of a signed-in customer are visible to that customer and to admin.
        """
        order = self.get_order(order_id)

        if order.user_id is not None and not identity.is_admin:
            owns = identity.user_id == order.user_id or (
                identity.email is not None and identity.email == order.customer_email
            )
            if not owns:
                raise PermissionError("No access to this order")

        return {
            "order": order,
            "status_label": order.status.label,
            "status_color": order.status.color,
            "progress": progress_percentage(order.status),
            "timeline": timeline(order.status),
        }

    def order_history(
        self,
        identity: Identity,
        status: OrderStatus | None = None,
        search: str | None = None,
    ) -> List[OrderModel]:
        if not identity.is_authenticated:
            raise PermissionError("Sign in to view order history")

        orders = self.repo.list_orders(user_id=identity.user_id, email=identity.email, status=status)
        if search:
            term = search.lower()
            orders = [o for o in orders if term in o.product_name.lower() or term in str(o.id).lower()]
        return orders

    def list_all(self, status: OrderStatus | None = None) -> List[OrderModel]:
        return self.repo.list_orders(status=status)

    def stats(self) -> dict:
        return self.repo.stats()
