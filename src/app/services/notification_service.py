"""
알림 메일 디스패처

주문 이벤트(신규 주문/검수 준비/전달 완료)를 메일 렌더링 엔드포인트로
전달한다. 결과는 NotifyResult로 돌려주며 예외를 던지지 않으므로, 호출하는
쪽의 주문 처리 흐름은 메일 실패와 무관하게 진행된다.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from core.interfaces import INotificationService
from core.order_config import NotificationType

logger = logging.getLogger(__name__)


@dataclass
class NotifyResult:
    """알림 전송 결과"""
    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {"success": True, "data": self.data}
        return {"success": False, "error": self.error}


def build_dashboard_url(site_url: str, dish_order_id: Optional[str]) -> str:
    base = site_url.rstrip("/")
    return f"{base}/admin/dishes/{dish_order_id}" if dish_order_id else f"{base}/admin"


def build_demo_url(site_url: str, dish_order_id: Optional[str]) -> str:
    return f"{site_url.rstrip('/')}/demo/dish/{dish_order_id}" if dish_order_id else ""


class NotificationService(INotificationService):
    """메일 렌더링 엔드포인트로 알림 요청을 전달"""

    def __init__(
        self,
        endpoint_url: str,
        site_url: str,
        api_key: Optional[str] = None,
        admin_email: Optional[str] = None,
        timeout: float = 10.0,
    ):
        self.endpoint_url = endpoint_url
        self.site_url = site_url
        self.api_key = api_key
        self.admin_email = admin_email
        self.timeout = timeout

    async def send_notification(
        self,
        notification_type: NotificationType,
        to: str,
        data: Dict[str, Any],
    ) -> NotifyResult:
        try:
            kind = NotificationType(notification_type)
        except ValueError:
            logger.error("[NOTIFY] unknown notification type: %s", notification_type)
            return NotifyResult(success=False, error=f"Unknown notification type: {notification_type}")

        if not to:
            logger.warning("[NOTIFY] %s skipped: no recipient", kind.value)
            return NotifyResult(success=False, error="Missing recipient")

        order_id = data.get("dishOrderId")
        payload = {
            "type": kind.value,
            "to": to,
            "data": {
                **data,
                "dashboardUrl": build_dashboard_url(self.site_url, order_id),
                "demoUrl": build_demo_url(self.site_url, order_id),
            },
        }
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.endpoint_url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error("[NOTIFY] %s to %s failed: %s", kind.value, to, e)
            return NotifyResult(success=False, error=str(e))

        if response.status_code >= 400:
            error = self._error_message(response)
            logger.error("[NOTIFY] %s to %s rejected: status=%s error=%s", kind.value, to, response.status_code, error)
            return NotifyResult(success=False, error=error)

        logger.info("[NOTIFY] %s sent to %s", kind.value, to)
        return NotifyResult(success=True, data=self._safe_json(response))

    async def notify_admin_new_order(
        self,
        restaurant_name: str,
        dish_name: str,
        internal_reference: Optional[str],
        dish_order_id: str,
        city: Optional[str] = None,
        country: Optional[str] = None,
    ) -> NotifyResult:
        """운영자에게 신규 주문 알림"""
        return await self.send_notification(
            NotificationType.NEW_ORDER,
            self.admin_email,
            {
                "restaurantName": restaurant_name,
                "dishName": dish_name,
                "internalReference": internal_reference,
                "dishOrderId": dish_order_id,
                "city": city,
                "country": country,
            },
        )

    async def notify_restaurant_order_ready(self, to: str, dish_name: str, dish_order_id: str) -> NotifyResult:
        """레스토랑에 검수 준비 완료 알림"""
        return await self.send_notification(
            NotificationType.ORDER_READY,
            to,
            {"dishName": dish_name, "dishOrderId": dish_order_id},
        )

    async def notify_restaurant_order_delivered(self, to: str, dish_name: str, dish_order_id: str) -> NotifyResult:
        """레스토랑에 데모 공개 알림"""
        return await self.send_notification(
            NotificationType.ORDER_DELIVERED,
            to,
            {"dishName": dish_name, "dishOrderId": dish_order_id},
        )

    @staticmethod
    def _safe_json(response: httpx.Response) -> Dict[str, Any]:
        try:
            payload = response.json()
            return payload if isinstance(payload, dict) else {"data": payload}
        except ValueError:
            return {"message": response.text}

    @classmethod
    def _error_message(cls, response: httpx.Response) -> str:
        payload = cls._safe_json(response)
        message = payload.get("error") or payload.get("message")
        if isinstance(message, str) and message.strip():
            return message
        return f"Notification endpoint returned {response.status_code}"
