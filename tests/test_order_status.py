import pytest

from storefront.domain.order_status import (
    ORDER_FLOW,
    OrderStatus,
    can_transition,
    next_status,
    progress_percentage,
    timeline,
)


def test_flow_is_fixed_forward_sequence():
    assert [s.value for s in ORDER_FLOW] == [
        "pending", "paid", "processing", "shipped", "delivered", "completed",
    ]


@pytest.mark.parametrize("src,dst", list(zip(ORDER_FLOW, ORDER_FLOW[1:])))
def test_single_step_forward_allowed(src, dst):
    assert next_status(src) is dst
    assert can_transition(src, dst)


def test_no_skipping_and_no_going_back():
    assert not can_transition(OrderStatus.PENDING, OrderStatus.PROCESSING)
    assert not can_transition(OrderStatus.SHIPPED, OrderStatus.PAID)
    assert not can_transition(OrderStatus.DELIVERED, OrderStatus.DELIVERED)


@pytest.mark.parametrize("src", ORDER_FLOW[:-1])
def test_cancel_from_any_non_terminal(src):
    assert can_transition(src, OrderStatus.CANCELLED)


def test_terminal_statuses_go_nowhere():
    for terminal in (OrderStatus.COMPLETED, OrderStatus.CANCELLED):
        assert terminal.is_terminal
        assert next_status(terminal) is None
        assert not can_transition(terminal, OrderStatus.CANCELLED)
        assert not can_transition(terminal, OrderStatus.PENDING)


def test_progress_percentage():
    assert progress_percentage(OrderStatus.PENDING) == pytest.approx(100 / 6)
    assert progress_percentage(OrderStatus.SHIPPED) == pytest.approx(400 / 6)
    assert progress_percentage(OrderStatus.COMPLETED) == 100.0
    assert progress_percentage(OrderStatus.CANCELLED) == 0.0


def test_timeline_marks_completed_and_current_steps():
    steps = timeline(OrderStatus.PROCESSING)

    assert [s["key"] for s in steps] == [s.value for s in ORDER_FLOW]
    assert [s["completed"] for s in steps] == [True, True, True, False, False, False]
    assert [s["current"] for s in steps] == [False, False, True, False, False, False]
    assert steps[1]["label"] == "Payment Confirmed"


def test_cancelled_timeline_has_no_current_step():
    assert not any(s["completed"] or s["current"] for s in timeline(OrderStatus.CANCELLED))


def test_every_status_has_display_data():
    for status in OrderStatus:
        assert status.label and status.description and status.color
