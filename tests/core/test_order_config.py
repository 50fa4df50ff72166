"""주문 상태 전이/구독 상태 매핑 테스트"""
import pytest

from core.order_config import (
    DishOrderStatus,
    SubscriptionStatus,
    can_transition,
    map_paddle_subscription_status,
)


@pytest.mark.parametrize(
    "current,target",
    [
        (DishOrderStatus.NEW, DishOrderStatus.IN_PRODUCTION),
        (DishOrderStatus.IN_PRODUCTION, DishOrderStatus.READY),
        (DishOrderStatus.READY, DishOrderStatus.DELIVERED),
        (DishOrderStatus.NEW, DishOrderStatus.CANCELLED),
        (DishOrderStatus.IN_PRODUCTION, DishOrderStatus.CANCELLED),
        (DishOrderStatus.READY, DishOrderStatus.CANCELLED),
    ],
)
def test_allowed_transitions(current, target):
    assert can_transition(current, target)


@pytest.mark.parametrize(
    "current,target",
    [
        (DishOrderStatus.NEW, DishOrderStatus.READY),
        (DishOrderStatus.NEW, DishOrderStatus.DELIVERED),
        (DishOrderStatus.READY, DishOrderStatus.IN_PRODUCTION),
        (DishOrderStatus.DELIVERED, DishOrderStatus.CANCELLED),
        (DishOrderStatus.CANCELLED, DishOrderStatus.NEW),
    ],
)
def test_rejected_transitions(current, target):
    assert not can_transition(current, target)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("trialing", SubscriptionStatus.TRIALING),
        ("active", SubscriptionStatus.ACTIVE),
        ("canceled", SubscriptionStatus.CANCELED),
        ("paused", SubscriptionStatus.PAUSED),
        (" PAUSED ", SubscriptionStatus.PAUSED),
        ("past_due", SubscriptionStatus.ACTIVE),
        (None, SubscriptionStatus.ACTIVE),
    ],
)
def test_paddle_status_mapping(raw, expected):
    assert map_paddle_subscription_status(raw) == expected
