"""
API 요청/웹훅 페이로드 스키마
"""
from .dish_orders import DishOrderCreateRequest, DishOrderStaffUpdateRequest
from .notifications import NotificationData, NotificationEmailRequest
from .paddle import (
    PaddleEvent,
    PaddleEventEnvelope,
    SubscriptionActivatedEvent,
    SubscriptionStatusEvent,
    SubscriptionUpdatedEvent,
    TransactionCustomData,
    TransactionPaidEvent,
    UnhandledEvent,
    parse_paddle_event,
)
from .profile import OnboardingRequest, ProfileCreateRequest

__all__ = [
    "DishOrderCreateRequest",
    "DishOrderStaffUpdateRequest",
    "NotificationData",
    "NotificationEmailRequest",
    "OnboardingRequest",
    "ProfileCreateRequest",
    "PaddleEvent",
    "PaddleEventEnvelope",
    "SubscriptionActivatedEvent",
    "SubscriptionStatusEvent",
    "SubscriptionUpdatedEvent",
    "TransactionCustomData",
    "TransactionPaidEvent",
    "UnhandledEvent",
    "parse_paddle_event",
]
