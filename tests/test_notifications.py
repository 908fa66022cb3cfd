import uuid

from storefront.domain.order_status import OrderStatus
from storefront.services import notification_service
from storefront.services.notification_service import NotificationService, send_order_notification_task


def test_task_reports_status():
    result = send_order_notification_task.run("abc", "a@example.com", "shipped")
    assert result == {"order_id": "abc", "customer_email": "a@example.com", "status": "shipped", "sent": True}


def test_dispatch_runs_eagerly_in_tests():
    assert NotificationService.send_order_notification(uuid.uuid4(), "a@example.com", OrderStatus.PAID)


def test_dispatch_failure_does_not_raise(monkeypatch):
    def broker_down(*args, **kwargs):
        raise ConnectionError("broker unreachable")

    monkeypatch.setattr(notification_service.send_order_notification_task, "delay", broker_down)

    assert NotificationService.send_order_notification(uuid.uuid4(), "a@example.com", OrderStatus.PAID) is False
