"""
Paddle 웹훅 페이로드 스키마

봉투(`event_type`, `data`)를 먼저 검증한 뒤, 이벤트 종류별로 알려진 data 형태로
다시 검증해 태그드 유니온(PaddleEvent)으로 변환한다.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.responses import ValidationException

logger = logging.getLogger(__name__)


TRANSACTION_PAID_EVENTS = frozenset({"transaction.completed", "transaction.paid"})
SUBSCRIPTION_ACTIVATED_EVENTS = frozenset({"subscription.created", "subscription.activated"})
SUBSCRIPTION_UPDATED_EVENTS = frozenset({"subscription.updated"})
SUBSCRIPTION_STATUS_EVENTS = frozenset({"subscription.canceled", "subscription.cancelled", "subscription.paused"})


def _coerce_custom_data(value: Any) -> Dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return value
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError:
            logger.warning("[PADDLE] failed to decode custom_data payload: %s", value)
            return {}
        if isinstance(parsed, dict):
            return parsed
        logger.warning("[PADDLE] custom_data parsed to non-dict type: %s", type(parsed))
        return {}
    logger.warning("[PADDLE] unsupported custom_data type: %s", type(value))
    return {}


def _coerce_optional_id(value: Any) -> Optional[str]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, str)):
        text = str(value).strip()
        return text or None
    return None


class PaddleEventEnvelope(BaseModel):
    """웹훅 본문 최상위 봉투"""
    model_config = ConfigDict(extra="allow")

    event_type: str = Field(..., min_length=1, description="Paddle 이벤트 타입")
    event_id: Optional[str] = Field(None, description="Paddle 알림 이벤트 ID")
    data: Dict[str, Any] = Field(default_factory=dict, description="이벤트 데이터")

    @field_validator("data", mode="before")
    @classmethod
    def _default_data(cls, value):
        return value if isinstance(value, dict) else {}

    @property
    def normalized_type(self) -> str:
        return self.event_type.strip().lower()


class TransactionCustomData(BaseModel):
    """체크아웃 시 전달한 custom_data (크레딧 팩/단건 주문)"""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    user_id: Optional[str] = Field(None, alias="userId")
    # 원본 값을 보존하고 원장 갱신 단계에서 양의 정수인지 검증한다
    dishes_count: Any = Field(None, alias="dishesCount")
    dish_order_id: Optional[str] = Field(None, alias="dishOrderId")

    @field_validator("user_id", "dish_order_id", mode="before")
    @classmethod
    def _ids(cls, value):
        return _coerce_optional_id(value)


class TransactionPaidData(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1, description="Paddle 거래 ID")
    status: Optional[str] = None
    custom_data: TransactionCustomData = Field(default_factory=TransactionCustomData)

    @field_validator("custom_data", mode="before")
    @classmethod
    def _custom(cls, value):
        return _coerce_custom_data(value)


class SubscriptionCustomData(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    user_id: Optional[str] = Field(None, alias="userId")
    plan: Optional[str] = None

    @field_validator("user_id", mode="before")
    @classmethod
    def _ids(cls, value):
        return _coerce_optional_id(value)


class BillingPeriod(BaseModel):
    model_config = ConfigDict(extra="allow")

    starts_at: Optional[str] = None
    ends_at: Optional[str] = None


class ScheduledChange(BaseModel):
    model_config = ConfigDict(extra="allow")

    action: Optional[str] = None
    effective_at: Optional[str] = None


class SubscriptionPrice(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    description: Optional[str] = None


class SubscriptionItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    price: Optional[SubscriptionPrice] = None
    quantity: Optional[int] = None


class SubscriptionData(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1, description="Paddle 구독 ID")
    status: Optional[str] = None
    custom_data: SubscriptionCustomData = Field(default_factory=SubscriptionCustomData)
    current_billing_period: Optional[BillingPeriod] = None
    scheduled_change: Optional[ScheduledChange] = None
    items: List[SubscriptionItem] = Field(default_factory=list)

    @field_validator("custom_data", mode="before")
    @classmethod
    def _custom(cls, value):
        return _coerce_custom_data(value)

    @field_validator("items", mode="before")
    @classmethod
    def _items(cls, value):
        return value if isinstance(value, list) else []


class SubscriptionStatusData(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1, description="Paddle 구독 ID")


class TransactionPaidEvent(BaseModel):
    kind: Literal["transaction_paid"] = "transaction_paid"
    event_type: str
    event_id: Optional[str] = None
    data: TransactionPaidData


class SubscriptionActivatedEvent(BaseModel):
    kind: Literal["subscription_activated"] = "subscription_activated"
    event_type: str
    event_id: Optional[str] = None
    data: SubscriptionData


class SubscriptionUpdatedEvent(BaseModel):
    kind: Literal["subscription_updated"] = "subscription_updated"
    event_type: str
    event_id: Optional[str] = None
    data: SubscriptionData


class SubscriptionStatusEvent(BaseModel):
    kind: Literal["subscription_status"] = "subscription_status"
    event_type: str
    event_id: Optional[str] = None
    data: SubscriptionStatusData


class UnhandledEvent(BaseModel):
    kind: Literal["unhandled"] = "unhandled"
    event_type: str
    event_id: Optional[str] = None


PaddleEvent = Union[
    TransactionPaidEvent,
    SubscriptionActivatedEvent,
    SubscriptionUpdatedEvent,
    SubscriptionStatusEvent,
    UnhandledEvent,
]


def parse_paddle_event(envelope: PaddleEventEnvelope) -> PaddleEvent:
    """봉투를 이벤트 종류별 모델로 변환한다.

    알 수 없는 이벤트 타입은 UnhandledEvent가 된다. 알려진 타입의 data가
    형식에 맞지 않으면 ValidationException을 던진다.
    """

    event_type = envelope.normalized_type
    common = {"event_type": event_type, "event_id": envelope.event_id}

    if event_type in TRANSACTION_PAID_EVENTS:
        model, data_model = TransactionPaidEvent, TransactionPaidData
    elif event_type in SUBSCRIPTION_ACTIVATED_EVENTS:
        model, data_model = SubscriptionActivatedEvent, SubscriptionData
    elif event_type in SUBSCRIPTION_UPDATED_EVENTS:
        model, data_model = SubscriptionUpdatedEvent, SubscriptionData
    elif event_type in SUBSCRIPTION_STATUS_EVENTS:
        model, data_model = SubscriptionStatusEvent, SubscriptionStatusData
    else:
        return UnhandledEvent(**common)

    try:
        data = data_model.model_validate(envelope.data)
    except ValidationError as exc:
        errors = [
            {"field": ".".join(str(part) for part in err.get("loc", ())), "message": err.get("msg")}
            for err in exc.errors()
        ]
        raise ValidationException(
            f"{event_type} 이벤트 데이터 형식이 올바르지 않습니다",
            errors=errors,
            error_code="INVALID_WEBHOOK_PAYLOAD",
        ) from exc

    return model(data=data, **common)
