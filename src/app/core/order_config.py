"""
주문/결제/구독 상태 정의 및 주문 상태 전이 규칙
"""
from enum import Enum
from typing import Dict, FrozenSet

MIN_PHOTOS = 8
MAX_PHOTOS = 20


class DishOrderStatus(str, Enum):
    """디시 주문 진행 상태"""
    NEW = "NEW"
    IN_PRODUCTION = "IN_PRODUCTION"
    READY = "READY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, Enum):
    """결제 상태 (PAID/FAILED는 종료 상태)"""
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"


class SubscriptionStatus(str, Enum):
    """호스팅 구독 상태"""
    TRIALING = "TRIALING"
    ACTIVE = "ACTIVE"
    CANCELED = "CANCELED"
    PAUSED = "PAUSED"


class SubscriptionPlan(str, Enum):
    """호스팅 플랜"""
    BASIC = "BASIC"
    PRO = "PRO"


class NotificationType(str, Enum):
    """알림 메일 종류"""
    NEW_ORDER = "NEW_ORDER"
    ORDER_READY = "ORDER_READY"
    ORDER_DELIVERED = "ORDER_DELIVERED"


TERMINAL_ORDER_STATUSES: FrozenSet[DishOrderStatus] = frozenset(
    {DishOrderStatus.DELIVERED, DishOrderStatus.CANCELLED}
)

ORDER_TRANSITIONS: Dict[DishOrderStatus, FrozenSet[DishOrderStatus]] = {
    DishOrderStatus.NEW: frozenset({DishOrderStatus.IN_PRODUCTION, DishOrderStatus.CANCELLED}),
    DishOrderStatus.IN_PRODUCTION: frozenset({DishOrderStatus.READY, DishOrderStatus.CANCELLED}),
    DishOrderStatus.READY: frozenset({DishOrderStatus.DELIVERED, DishOrderStatus.CANCELLED}),
    DishOrderStatus.DELIVERED: frozenset(),
    DishOrderStatus.CANCELLED: frozenset(),
}

# Paddle 구독 상태 문자열 → 내부 상태
PADDLE_SUBSCRIPTION_STATUS_MAP: Dict[str, SubscriptionStatus] = {
    "trialing": SubscriptionStatus.TRIALING,
    "active": SubscriptionStatus.ACTIVE,
    "canceled": SubscriptionStatus.CANCELED,
    "paused": SubscriptionStatus.PAUSED,
}


def can_transition(current: DishOrderStatus, target: DishOrderStatus) -> bool:
    """현재 상태에서 목표 상태로 전이가 가능한지 확인"""
    return target in ORDER_TRANSITIONS.get(current, frozenset())


def map_paddle_subscription_status(raw_status) -> SubscriptionStatus:
    """Paddle 상태 문자열을 내부 구독 상태로 변환 (알 수 없으면 ACTIVE)"""
    if not isinstance(raw_status, str):
        return SubscriptionStatus.ACTIVE
    return PADDLE_SUBSCRIPTION_STATUS_MAP.get(raw_status.strip().lower(), SubscriptionStatus.ACTIVE)
