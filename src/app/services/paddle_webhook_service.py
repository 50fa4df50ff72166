"""
Paddle 웹훅 이벤트 디스패처

서명 검증을 통과한 이벤트를 종류별 핸들러로 보낸다.
- transaction.completed / transaction.paid: 크레딧 원장 갱신
- subscription.created / subscription.activated: 구독 기록 upsert
- subscription.updated: 플랜/상태/기간 갱신
- subscription.canceled / subscription.paused: 상태만 변경
- 그 외: 로그만 남기고 무시

핸들러 내부의 검증 실패와 저장소 오류는 잡아서 기록할 뿐, 호출자(웹훅
라우터)의 200 응답을 바꾸지 않는다.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Dict, Optional

from core.base_service import BaseService
from core.interfaces import IDatabaseHelper
from core.order_config import (
    SubscriptionPlan,
    SubscriptionStatus,
    map_paddle_subscription_status,
)
from core.responses import ValidationException
from schemas.paddle import (
    PaddleEventEnvelope,
    SubscriptionActivatedEvent,
    SubscriptionData,
    SubscriptionStatusEvent,
    SubscriptionUpdatedEvent,
    TransactionPaidEvent,
    UnhandledEvent,
    parse_paddle_event,
)
from services.credit_ledger_service import CreditLedgerService

logger = logging.getLogger(__name__)

DEFAULT_TRIAL_DAYS = 30

HandlerFunc = Callable[[Any], Awaitable[Dict[str, Any]]]


def _resolve_plan(raw_plan: Optional[str]) -> str:
    if isinstance(raw_plan, str) and raw_plan.strip().upper() in SubscriptionPlan.__members__:
        return SubscriptionPlan[raw_plan.strip().upper()].value
    return SubscriptionPlan.BASIC.value


def _plan_from_items(data: SubscriptionData) -> str:
    first = data.items[0] if data.items else None
    description = first.price.description if first and first.price else None
    if description and "Pro" in description:
        return SubscriptionPlan.PRO.value
    return SubscriptionPlan.BASIC.value


def _period_end(data: SubscriptionData) -> Optional[str]:
    period = data.current_billing_period
    return period.ends_at if period else None


class PaddleWebhookService(BaseService):
    """검증된 Paddle 이벤트를 처리"""

    def __init__(
        self,
        db_helper: IDatabaseHelper,
        ledger_service: Optional[CreditLedgerService] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        super().__init__(db_helper)
        self.ledger_service = ledger_service or CreditLedgerService(db_helper)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._handlers: Dict[str, HandlerFunc] = {
            "transaction_paid": self._handle_transaction_paid,
            "subscription_activated": self._handle_subscription_activated,
            "subscription_updated": self._handle_subscription_updated,
            "subscription_status": self._handle_subscription_status,
        }

    async def dispatch(self, envelope: PaddleEventEnvelope) -> Dict[str, Any]:
        """이벤트 1건 처리. 예외를 던지지 않고 처리 결과를 반환한다."""

        try:
            event = parse_paddle_event(envelope)
        except ValidationException as e:
            logger.warning("[PADDLE] invalid payload for %s: %s", envelope.event_type, e.errors)
            outcome = {
                "event_type": envelope.normalized_type,
                "status": "invalid_payload",
                "errors": e.errors,
            }
            await self._record_event(envelope, outcome)
            return outcome

        if isinstance(event, UnhandledEvent):
            logger.info("[PADDLE] unhandled event type: %s", envelope.event_type)
            return {"event_type": event.event_type, "status": "ignored"}

        handler = self._handlers[event.kind]
        logger.info("[PADDLE] event=%s event_id=%s", event.event_type, event.event_id)

        result = await self.handle_operation(event.event_type, handler, event)
        outcome = {
            "event_type": event.event_type,
            "status": "processed" if result.get("success") else "failed",
        }
        if result.get("success"):
            outcome["result"] = result.get("data") or {}
        else:
            outcome["error"] = result.get("error")

        await self._record_event(envelope, outcome)
        return outcome

    async def _record_event(self, envelope: PaddleEventEnvelope, outcome: Dict[str, Any]) -> None:
        """감사용 system_logs 기록 (실패해도 무시)"""
        try:
            await self.db_helper.log_system_event(
                event_type="paddle_webhook",
                event_data={
                    "event_id": envelope.event_id,
                    "paddle_event_type": envelope.event_type,
                    "outcome": outcome,
                },
            )
        except Exception as e:
            logger.warning("[PADDLE] webhook audit log failed: %s", e)

    async def _handle_transaction_paid(self, event: TransactionPaidEvent) -> Dict[str, Any]:
        outcome = await self.ledger_service.apply_transaction(event.data.id, event.data.custom_data)
        return outcome.to_dict()

    async def _handle_subscription_activated(self, event: SubscriptionActivatedEvent) -> Dict[str, Any]:
        data = event.data
        user_id = data.custom_data.user_id
        if not user_id:
            logger.warning("[PADDLE] subscription %s has no userId in custom_data; skipped", data.id)
            return {"subscription_id": data.id, "skipped": "missing_user"}

        trialing = (data.status or "").strip().lower() == "trialing"
        record: Dict[str, Any] = {
            "user_id": user_id,
            "paddle_subscription_id": data.id,
            "plan": _resolve_plan(data.custom_data.plan),
            "status": (SubscriptionStatus.TRIALING if trialing else SubscriptionStatus.ACTIVE).value,
            "trial_ends_at": self._trial_ends_at(data) if trialing else None,
        }
        period_end = _period_end(data)
        if period_end:
            record["current_period_end"] = period_end

        saved = await self.db_helper.upsert_subscription(record)
        logger.info("[PADDLE] subscription activated: %s status=%s", data.id, record["status"])
        return {"subscription_id": data.id, "status": record["status"], "plan": record["plan"], "saved": bool(saved)}

    def _trial_ends_at(self, data: SubscriptionData) -> str:
        if data.scheduled_change and data.scheduled_change.effective_at:
            return data.scheduled_change.effective_at
        return (self._clock() + timedelta(days=DEFAULT_TRIAL_DAYS)).isoformat()

    async def _handle_subscription_updated(self, event: SubscriptionUpdatedEvent) -> Dict[str, Any]:
        data = event.data
        fields: Dict[str, Any] = {
            "plan": _plan_from_items(data),
            "status": map_paddle_subscription_status(data.status).value,
        }
        period_end = _period_end(data)
        if period_end:
            fields["current_period_end"] = period_end

        updated = await self.db_helper.update_subscription(data.id, fields)
        if not updated:
            logger.warning("[PADDLE] subscription.updated for unknown subscription %s", data.id)
        return {"subscription_id": data.id, **fields, "updated": bool(updated)}

    async def _handle_subscription_status(self, event: SubscriptionStatusEvent) -> Dict[str, Any]:
        status = (
            SubscriptionStatus.PAUSED
            if event.event_type == "subscription.paused"
            else SubscriptionStatus.CANCELED
        )
        updated = await self.db_helper.update_subscription(event.data.id, {"status": status.value})
        if not updated:
            logger.warning("[PADDLE] %s for unknown subscription %s", event.event_type, event.data.id)
        logger.info("[PADDLE] subscription %s -> %s", event.data.id, status.value)
        return {"subscription_id": event.data.id, "status": status.value, "updated": bool(updated)}


