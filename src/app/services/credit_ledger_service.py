"""
팩 크레딧 원장 서비스

Paddle 거래 완료 이벤트를 받아 결제 멱등성을 확인하고, 레스토랑 프로필의
pack_dishes_remaining/pack_dishes_total을 원자적으로 증가시킨 뒤 주문 결제
기록을 PAID로 전환한다.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from core.base_service import BaseService
from core.interfaces import IDatabaseHelper
from schemas.paddle import TransactionCustomData

logger = logging.getLogger(__name__)


def parse_dishes_count(raw: Any) -> Optional[int]:
    """dishesCount 값을 양의 정수로 변환 (불가능하면 None)"""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        try:
            value = int(text, 10)
        except ValueError:
            return None
    else:
        return None
    return value if value > 0 else None


@dataclass
class LedgerOutcome:
    """거래 1건 처리 결과"""
    transaction_id: str
    status: str = "processed"  # processed | duplicate
    credits: Dict[str, Any] = field(default_factory=dict)
    payment: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"transaction_id": self.transaction_id, "status": self.status}
        if self.credits:
            result["credits"] = self.credits
        if self.payment:
            result["payment"] = self.payment
        return result


class CreditLedgerService(BaseService):
    """결제 완료 거래를 크레딧 원장과 결제 기록에 반영"""

    def __init__(self, db_helper: IDatabaseHelper):
        super().__init__(db_helper)

    async def apply_transaction(self, transaction_id: str, custom_data: TransactionCustomData) -> LedgerOutcome:
        """거래 완료 이벤트 적용

        이미 PAID로 기록된 거래 ID면 아무것도 변경하지 않는다. 크레딧 지급과
        결제 상태 전환은 서로 독립적이며, 한쪽 실패가 다른 쪽을 막지 않는다.
        멱등성 확인 자체가 실패하면 예외를 그대로 올린다.
        """

        outcome = LedgerOutcome(transaction_id=transaction_id)

        if await self.db_helper.has_paid_payment(transaction_id):
            logger.info("[PADDLE] transaction already applied: %s", transaction_id)
            outcome.status = "duplicate"
            return outcome

        if custom_data.user_id and custom_data.dishes_count is not None:
            outcome.credits = await self._grant_credits(
                transaction_id,
                custom_data.user_id,
                custom_data.dishes_count,
            )

        if custom_data.dish_order_id:
            outcome.payment = await self._mark_payment_paid(transaction_id, custom_data.dish_order_id)

        return outcome

    async def _grant_credits(self, transaction_id: str, user_id: str, raw_count: Any) -> Dict[str, Any]:
        dishes_count = parse_dishes_count(raw_count)
        if dishes_count is None:
            logger.warning(
                "[PADDLE] invalid dishesCount skipped: tx=%s user=%s value=%r",
                transaction_id,
                user_id,
                raw_count,
            )
            return {"success": False, "error": "invalid_dishes_count"}

        try:
            grant = await self.db_helper.grant_pack_credits(user_id, dishes_count, transaction_id)
        except Exception as e:
            logger.error("[PADDLE] credit grant failed: tx=%s user=%s error=%s", transaction_id, user_id, e)
            return {"success": False, "error": "credit_grant_failed", "dishes_count": dishes_count}

        if not grant.get("applied"):
            reason = grant.get("reason") or "not_applied"
            logger.info("[PADDLE] credit grant not applied: tx=%s user=%s reason=%s", transaction_id, user_id, reason)
            return {"success": False, "error": reason, "dishes_count": dishes_count}

        logger.info("[PADDLE] added %s credits to user %s (tx=%s)", dishes_count, user_id, transaction_id)
        return {
            "success": True,
            "dishes_count": dishes_count,
            "pack_dishes_remaining": grant.get("pack_dishes_remaining"),
            "pack_dishes_total": grant.get("pack_dishes_total"),
        }

    async def _mark_payment_paid(self, transaction_id: str, dish_order_id: str) -> Dict[str, Any]:
        try:
            updated = await self.db_helper.mark_order_payment_paid(dish_order_id, transaction_id)
        except Exception as e:
            logger.error("[PADDLE] payment update failed: tx=%s order=%s error=%s", transaction_id, dish_order_id, e)
            return {"success": False, "error": "payment_update_failed"}

        if not updated:
            logger.warning("[PADDLE] no pending payment record for order %s (tx=%s)", dish_order_id, transaction_id)
            return {"success": False, "error": "payment_record_not_found"}

        return {"success": True, "dish_order_id": dish_order_id, "records": len(updated)}
