"""NotificationService 단위 테스트"""
from typing import Any, Dict, List

import httpx
import pytest

from core.order_config import NotificationType
from services.notification_service import NotificationService, build_dashboard_url, build_demo_url

ENDPOINT = "https://api.menublend.test/api/v1/notifications/email"
SITE = "https://menublend.test"


class _RecordingAsyncClient:
    """httpx.AsyncClient 대체용 더블 (요청 기록)"""

    def __init__(self, outcome, calls: List[Dict[str, Any]]) -> None:
        self._outcome = outcome
        self._calls = calls

    async def __aenter__(self) -> "_RecordingAsyncClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        return False

    async def post(self, url: str, json=None, headers=None) -> httpx.Response:
        self._calls.append({"url": url, "json": json, "headers": headers})
        if isinstance(self._outcome, Exception):
            raise self._outcome
        return self._outcome


def _patch_async_client(monkeypatch, outcome) -> List[Dict[str, Any]]:
    calls: List[Dict[str, Any]] = []

    def _factory(*args, **kwargs):
        return _RecordingAsyncClient(outcome, calls)

    monkeypatch.setattr("services.notification_service.httpx.AsyncClient", _factory)
    return calls


def _service(**kwargs) -> NotificationService:
    params = {"endpoint_url": ENDPOINT, "site_url": SITE, "admin_email": "ops@menublend.test"}
    params.update(kwargs)
    return NotificationService(**params)


def test_derived_urls():
    assert build_dashboard_url(SITE, "ord-1") == f"{SITE}/admin/dishes/ord-1"
    assert build_dashboard_url(SITE + "/", None) == f"{SITE}/admin"
    assert build_demo_url(SITE, "ord-1") == f"{SITE}/demo/dish/ord-1"
    assert build_demo_url(SITE, None) == ""


@pytest.mark.asyncio
async def test_send_notification_posts_payload_with_derived_urls(monkeypatch):
    calls = _patch_async_client(monkeypatch, httpx.Response(200, json={"id": "email-1"}))

    result = await _service(api_key="secret-key").send_notification(
        NotificationType.ORDER_DELIVERED,
        "owner@bistro.test",
        {"dishName": "Risotto", "dishOrderId": "ord-1"},
    )

    assert result.success is True
    assert result.data == {"id": "email-1"}
    sent = calls[0]
    assert sent["url"] == ENDPOINT
    assert sent["headers"]["Authorization"] == "Bearer secret-key"
    assert sent["json"] == {
        "type": "ORDER_DELIVERED",
        "to": "owner@bistro.test",
        "data": {
            "dishName": "Risotto",
            "dishOrderId": "ord-1",
            "dashboardUrl": f"{SITE}/admin/dishes/ord-1",
            "demoUrl": f"{SITE}/demo/dish/ord-1",
        },
    }


@pytest.mark.asyncio
async def test_no_authorization_header_without_api_key(monkeypatch):
    calls = _patch_async_client(monkeypatch, httpx.Response(200, json={"id": "email-2"}))

    await _service().send_notification(NotificationType.NEW_ORDER, "ops@menublend.test", {})

    assert "Authorization" not in calls[0]["headers"]
    assert calls[0]["json"]["data"]["dashboardUrl"] == f"{SITE}/admin"
    assert calls[0]["json"]["data"]["demoUrl"] == ""


@pytest.mark.asyncio
async def test_endpoint_error_returns_failure_result(monkeypatch):
    _patch_async_client(monkeypatch, httpx.Response(500, json={"error": "Resend down"}))

    result = await _service().send_notification(NotificationType.ORDER_READY, "owner@bistro.test", {"dishOrderId": "o"})

    assert result.success is False
    assert result.error == "Resend down"
    assert result.to_dict() == {"success": False, "error": "Resend down"}


@pytest.mark.asyncio
async def test_network_error_never_raises(monkeypatch):
    _patch_async_client(monkeypatch, httpx.ConnectError("connection refused"))

    result = await _service().send_notification(NotificationType.ORDER_READY, "owner@bistro.test", {})

    assert result.success is False
    assert "connection refused" in result.error


@pytest.mark.asyncio
async def test_unknown_type_and_missing_recipient(monkeypatch):
    calls = _patch_async_client(monkeypatch, httpx.Response(200, json={}))
    service = _service()

    unknown = await service.send_notification("ORDER_LOST", "owner@bistro.test", {})
    no_recipient = await service.send_notification(NotificationType.ORDER_READY, "", {})

    assert unknown.success is False
    assert no_recipient.success is False
    assert calls == []


@pytest.mark.asyncio
async def test_notify_admin_new_order_uses_admin_address(monkeypatch):
    calls = _patch_async_client(monkeypatch, httpx.Response(200, json={"id": "email-3"}))

    result = await _service().notify_admin_new_order(
        restaurant_name="Test Bistro",
        dish_name="Risotto",
        internal_reference="RIS-01",
        dish_order_id="ord-9",
        city="Lisbon",
        country="PT",
    )

    assert result.success is True
    payload = calls[0]["json"]
    assert payload["type"] == "NEW_ORDER"
    assert payload["to"] == "ops@menublend.test"
    assert payload["data"]["restaurantName"] == "Test Bistro"
    assert payload["data"]["dashboardUrl"] == f"{SITE}/admin/dishes/ord-9"
