"""공통 테스트 설정: 환경 변수와 메모리 기반 DatabaseHelper"""
import os
import uuid
from copy import deepcopy
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

# core.config가 import 시점에 Settings()를 만들기 때문에 먼저 설정한다
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("PADDLE_WEBHOOK_SECRET", "pdl_ntfset_test_secret")
os.environ.setdefault("SITE_URL", "https://menublend.test")
os.environ.setdefault("ADMIN_NOTIFICATION_EMAIL", "ops@menublend.test")

import pytest

from core.interfaces import IDatabaseHelper
from services.notification_service import NotifyResult


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class FakeDatabaseHelper(IDatabaseHelper):
    """Supabase 테이블/RPC 동작을 흉내내는 메모리 저장소"""

    def __init__(self):
        self.profiles: Dict[str, Dict[str, Any]] = {}
        self.payments: List[Dict[str, Any]] = []
        self.subscriptions: Dict[str, Dict[str, Any]] = {}
        self.orders: Dict[str, Dict[str, Any]] = {}
        self.photos: List[Dict[str, Any]] = []
        self.grants: Dict[str, Dict[str, Any]] = {}
        self.roles: set = set()
        self.emails: Dict[str, str] = {}
        self.logs: List[Dict[str, Any]] = []
        self.mutations: List[str] = []
        self.fail_on: set = set()

    # 테스트 준비용
    def add_profile(self, user_id: str, **fields) -> Dict[str, Any]:
        profile = {
            "id": f"profile-{user_id}",
            "user_id": user_id,
            "restaurant_name": "Test Bistro",
            "country": "PT",
            "city": "Lisbon",
            "onboarding_completed": True,
            "pack_dishes_remaining": 0,
            "pack_dishes_total": 0,
            "pack_purchased_at": None,
        }
        profile.update(fields)
        self.profiles[user_id] = profile
        return profile

    def add_order(self, user_id: str, **fields) -> Dict[str, Any]:
        order = {
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            "restaurant_profile_id": f"profile-{user_id}",
            "dish_name": "Truffle Risotto",
            "internal_reference": "RIS-01",
            "status": "NEW",
            "price_charged": 99.0,
            "currency": "USD",
            "delivery_url": None,
            "delivery_note": None,
            "is_demo": True,
            "created_at": _now_iso(),
        }
        order.update(fields)
        self.orders[order["id"]] = order
        return order

    def snapshot(self) -> Dict[str, Any]:
        return deepcopy({
            "profiles": self.profiles,
            "payments": self.payments,
            "subscriptions": self.subscriptions,
            "orders": self.orders,
            "grants": self.grants,
        })

    def _check(self, name: str) -> None:
        if name in self.fail_on:
            raise RuntimeError(f"{name} failed")

    def _write(self, name: str) -> None:
        self._check(name)
        self.mutations.append(name)

    # 레스토랑 프로필 / 크레딧 원장
    async def get_restaurant_profile(self, user_id):
        profile = self.profiles.get(user_id)
        return dict(profile) if profile else None

    async def create_restaurant_profile(self, user_id, restaurant_name):
        if user_id not in self.profiles:
            self._write("create_restaurant_profile")
            self.add_profile(
                user_id,
                restaurant_name=restaurant_name,
                country=None,
                city=None,
                onboarding_completed=False,
            )
        return dict(self.profiles[user_id])

    async def update_restaurant_profile(self, user_id, fields):
        self._write("update_restaurant_profile")
        self.profiles[user_id].update(fields)
        return dict(self.profiles[user_id])

    async def grant_pack_credits(self, user_id, dishes_count, transaction_id):
        self._write("grant_pack_credits")
        if transaction_id in self.grants:
            return {"applied": False, "reason": "duplicate_transaction"}
        profile = self.profiles.get(user_id)
        if profile is None:
            return {"applied": False, "reason": "profile_not_found"}
        self.grants[transaction_id] = {"user_id": user_id, "dishes_count": dishes_count}
        profile["pack_dishes_remaining"] += dishes_count
        profile["pack_dishes_total"] += dishes_count
        profile["pack_purchased_at"] = _now_iso()
        return {
            "applied": True,
            "pack_dishes_remaining": profile["pack_dishes_remaining"],
            "pack_dishes_total": profile["pack_dishes_total"],
        }

    async def consume_pack_credit(self, user_id):
        self._write("consume_pack_credit")
        profile = self.profiles.get(user_id)
        if not profile or profile["pack_dishes_remaining"] <= 0:
            return None
        profile["pack_dishes_remaining"] -= 1
        return profile["pack_dishes_remaining"]

    async def release_pack_credit(self, user_id):
        self.mutations.append("release_pack_credit")
        profile = self.profiles.get(user_id)
        if not profile:
            return False
        profile["pack_dishes_remaining"] = min(profile["pack_dishes_remaining"] + 1, profile["pack_dishes_total"])
        return True

    # 결제 기록
    async def has_paid_payment(self, provider_payment_id):
        self._check("has_paid_payment")
        return any(
            p.get("provider_payment_id") == provider_payment_id and p.get("status") == "PAID"
            for p in self.payments
        )

    async def mark_order_payment_paid(self, dish_order_id, provider_payment_id):
        self._write("mark_order_payment_paid")
        updated = []
        for payment in self.payments:
            if payment["dish_order_id"] == dish_order_id and payment["status"] == "PENDING":
                payment.update({"status": "PAID", "provider": "paddle", "provider_payment_id": provider_payment_id})
                updated.append(dict(payment))
        return updated

    async def create_payment_record(self, record):
        self._write("create_payment_record")
        payment = {"id": str(uuid.uuid4()), "provider_payment_id": None, **record}
        self.payments.append(payment)
        return dict(payment)

    async def get_order_payment(self, dish_order_id):
        for payment in reversed(self.payments):
            if payment["dish_order_id"] == dish_order_id:
                return dict(payment)
        return None

    # 구독 기록
    async def upsert_subscription(self, record):
        self._write("upsert_subscription")
        existing = self.subscriptions.get(record["paddle_subscription_id"], {"id": str(uuid.uuid4())})
        existing.update(record)
        self.subscriptions[record["paddle_subscription_id"]] = existing
        return dict(existing)

    async def update_subscription(self, paddle_subscription_id, fields):
        self._write("update_subscription")
        existing = self.subscriptions.get(paddle_subscription_id)
        if existing is None:
            return None
        existing.update(fields)
        return dict(existing)

    async def get_latest_subscription(self, user_id):
        records = [s for s in self.subscriptions.values() if s.get("user_id") == user_id]
        return dict(records[-1]) if records else None

    # 디시 주문
    async def create_dish_order(self, record):
        self._write("create_dish_order")
        order = {"id": str(uuid.uuid4()), "created_at": _now_iso(), "delivery_url": None, "delivery_note": None, **record}
        self.orders[order["id"]] = order
        return dict(order)

    async def delete_dish_order(self, order_id):
        self.mutations.append("delete_dish_order")
        self.photos = [p for p in self.photos if p["dish_order_id"] != order_id]
        self.payments = [p for p in self.payments if p["dish_order_id"] != order_id]
        return self.orders.pop(order_id, None) is not None

    async def add_dish_photos(self, order_id, image_urls):
        self._write("add_dish_photos")
        rows = [{"id": str(uuid.uuid4()), "dish_order_id": order_id, "image_url": url} for url in image_urls]
        self.photos.extend(rows)
        return rows

    async def get_dish_photos(self, order_id):
        return [p for p in self.photos if p["dish_order_id"] == order_id]

    async def get_dish_order(self, order_id):
        order = self.orders.get(order_id)
        return dict(order) if order else None

    async def list_dish_orders(self, user_id=None, status=None, limit=None):
        orders = [
            dict(o) for o in self.orders.values()
            if (user_id is None or o["user_id"] == user_id) and (status is None or o["status"] == status)
        ]
        orders.sort(key=lambda o: o["created_at"], reverse=True)
        return orders[:limit] if limit else orders

    async def update_dish_order(self, order_id, fields):
        self._write("update_dish_order")
        self.orders[order_id].update(fields)
        return dict(self.orders[order_id])

    # 사용자/역할
    async def has_role(self, user_id, role):
        return (user_id, role) in self.roles

    async def get_user_email(self, user_id) -> Optional[str]:
        return self.emails.get(user_id)

    async def log_system_event(self, user_id=None, event_type="info", event_data=None):
        self.logs.append({"user_id": user_id, "event_type": event_type, "event_data": event_data or {}})
        return True


class RecordingNotificationService:
    """NotificationService 대체용 더블 (호출 기록)"""

    def __init__(self, success: bool = True):
        self.success = success
        self.calls: List[tuple] = []

    def _result(self):
        if self.success:
            return NotifyResult(success=True, data={"id": "email-1"})
        return NotifyResult(success=False, error="endpoint down")

    async def notify_admin_new_order(self, **kwargs):
        self.calls.append(("NEW_ORDER", kwargs))
        return self._result()

    async def notify_restaurant_order_ready(self, to, dish_name, dish_order_id):
        self.calls.append(("ORDER_READY", {"to": to, "dish_name": dish_name, "dish_order_id": dish_order_id}))
        return self._result()

    async def notify_restaurant_order_delivered(self, to, dish_name, dish_order_id):
        self.calls.append(("ORDER_DELIVERED", {"to": to, "dish_name": dish_name, "dish_order_id": dish_order_id}))
        return self._result()


@pytest.fixture
def fake_db() -> FakeDatabaseHelper:
    return FakeDatabaseHelper()


@pytest.fixture
def notifier() -> RecordingNotificationService:
    return RecordingNotificationService()


@pytest.fixture
def failing_notifier() -> RecordingNotificationService:
    return RecordingNotificationService(success=False)
