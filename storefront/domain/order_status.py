# storefront/domain/order_status.py
"""
Order lifecycle: a closed set of statuses and the transitions between them.

pending -> paid -> processing -> shipped -> delivered -> completed
Any non-terminal status may also move to cancelled.
"""
from enum import Enum
from typing import Dict, List, Optional


class OrderStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def label(self) -> str:
        return _DISPLAY[self][0]

    @property
    def description(self) -> str:
        return _DISPLAY[self][1]

    @property
    def color(self) -> str:
        return _DISPLAY[self][2]

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.COMPLETED, OrderStatus.CANCELLED)


_DISPLAY = {
    OrderStatus.PENDING: ("Order Placed", "Order has been received", "yellow"),
    OrderStatus.PAID: ("Payment Confirmed", "Payment processed successfully", "blue"),
    OrderStatus.PROCESSING: ("Processing", "Order is being prepared", "purple"),
    OrderStatus.SHIPPED: ("Shipped", "Order is on the way", "orange"),
    OrderStatus.DELIVERED: ("Delivered", "Order has been delivered", "green"),
    OrderStatus.COMPLETED: ("Completed", "Order completed successfully", "dark-green"),
    OrderStatus.CANCELLED: ("Cancelled", "Order has been cancelled", "red"),
}

ORDER_FLOW = (
    OrderStatus.PENDING,
    OrderStatus.PAID,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
    OrderStatus.COMPLETED,
)


def next_status(status: OrderStatus) -> Optional[OrderStatus]:
    if status.is_terminal:
        return None
    return ORDER_FLOW[ORDER_FLOW.index(status) + 1]


def can_transition(src: OrderStatus, dst: OrderStatus) -> bool:
    if src.is_terminal:
        return False
    if dst is OrderStatus.CANCELLED:
        return True
    return next_status(src) is dst


def progress_percentage(status: OrderStatus) -> float:
    # cancelled is outside the flow, the tracker shows no progress for it
    if status is OrderStatus.CANCELLED:
        return 0.0
    return (ORDER_FLOW.index(status) + 1) / len(ORDER_FLOW) * 100


def timeline(status: OrderStatus) -> List[Dict]:
    current = ORDER_FLOW.index(status) if status in ORDER_FLOW else -1
    return [
        {
            "key": step.value,
            "label": step.label,
            "description": step.description,
            "completed": index <= current,
            "current": index == current,
        }
        for index, step in enumerate(ORDER_FLOW)
    ]
