"""
디시 주문 서비스
레스토랑 사용자의 주문 생성/조회와 운영자의 상태 변경 처리
"""
import logging
from typing import Any, Dict, List, Optional

from core.base_service import BaseService
from core.interfaces import IDatabaseHelper, INotificationService
from core.order_config import (
    MAX_PHOTOS,
    MIN_PHOTOS,
    TERMINAL_ORDER_STATUSES,
    DishOrderStatus,
    PaymentStatus,
    can_transition,
)
from core.responses import (
    BusinessException,
    InsufficientCreditsException,
    InvalidTransitionException,
    NotFoundException,
    ValidationException,
)
from schemas.dish_orders import DishOrderCreateRequest

logger = logging.getLogger(__name__)

PAYMENT_PROVIDER = "paddle"


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class DishOrderService(BaseService):
    """디시 주문 관리 서비스"""

    def __init__(
        self,
        db_helper: IDatabaseHelper,
        notification_service: Optional[INotificationService] = None,
        demo_price: float = 99.0,
        currency: str = "USD",
    ):
        super().__init__(db_helper)
        self.notification_service = notification_service
        self.demo_price = demo_price
        self.currency = currency

    async def create_order(self, user_id: str, request: DishOrderCreateRequest) -> Dict[str, Any]:
        """주문 생성

        팩 크레딧 결제면 크레딧 1개를 먼저 차감하고 price_charged=0으로 저장한다.
        그 외에는 데모 가격으로 저장하고 PENDING 결제 기록을 만든다.
        """
        photo_urls = [url.strip() for url in request.photo_urls if url and url.strip()]
        self.validate_required_fields({"dish_name": request.dish_name}, ["dish_name"])
        if not MIN_PHOTOS <= len(photo_urls) <= MAX_PHOTOS:
            raise ValidationException(
                f"사진은 {MIN_PHOTOS}장 이상 {MAX_PHOTOS}장 이하로 등록해야 합니다",
                errors=[{"field": "photo_urls", "message": f"expected {MIN_PHOTOS}-{MAX_PHOTOS}, got {len(photo_urls)}"}],
                error_code="INVALID_PHOTO_COUNT",
            )

        profile = await self.db_helper.get_restaurant_profile(user_id)
        if not profile or not profile.get("onboarding_completed"):
            raise BusinessException("레스토랑 온보딩을 먼저 완료해야 합니다", "ONBOARDING_REQUIRED", 409)

        if request.use_pack_credit:
            remaining = await self.db_helper.consume_pack_credit(user_id)
            if remaining is None:
                raise InsufficientCreditsException("사용 가능한 팩 크레딧이 없습니다")
            self.logger.info(f"팩 크레딧 차감: user={user_id} remaining={remaining}")

        record = {
            "user_id": user_id,
            "restaurant_profile_id": profile.get("id"),
            "dish_name": request.dish_name.strip(),
            "description": _clean(request.description),
            "cuisine_type": _clean(request.cuisine_type),
            "target_use_case": _clean(request.target_use_case),
            "internal_reference": _clean(request.internal_reference),
            "status": DishOrderStatus.NEW.value,
            "price_charged": 0 if request.use_pack_credit else self.demo_price,
            "currency": self.currency,
            "is_demo": request.is_demo,
        }

        try:
            order = await self.db_helper.create_dish_order(record)
        except Exception:
            if request.use_pack_credit:
                await self.db_helper.release_pack_credit(user_id)
                self.logger.warning(f"주문 생성 실패로 팩 크레딧 반환: user={user_id}")
            raise

        order_id = order["id"]
        try:
            photos = await self.db_helper.add_dish_photos(order_id, photo_urls)
            payment = None
            if not request.use_pack_credit:
                payment = await self.db_helper.create_payment_record({
                    "dish_order_id": order_id,
                    "user_id": user_id,
                    "amount": self.demo_price,
                    "currency": self.currency,
                    "status": PaymentStatus.PENDING.value,
                    "provider": PAYMENT_PROVIDER,
                })
        except Exception:
            await self.db_helper.delete_dish_order(order_id)
            if request.use_pack_credit:
                await self.db_helper.release_pack_credit(user_id)
            raise

        await self.log_user_action(user_id, "dish_order_created", {"dish_order_id": order_id})

        notification = None
        if self.notification_service:
            result = await self.notification_service.notify_admin_new_order(
                restaurant_name=profile.get("restaurant_name"),
                dish_name=order.get("dish_name"),
                internal_reference=order.get("internal_reference"),
                dish_order_id=order_id,
                city=profile.get("city"),
                country=profile.get("country"),
            )
            notification = result.to_dict()

        return {**order, "photos": photos, "payment": payment, "notification": notification}

    async def list_orders(self, user_id: str, status: Optional[DishOrderStatus] = None) -> List[Dict[str, Any]]:
        """사용자 주문 목록 (최신순)"""
        return await self.db_helper.list_dish_orders(user_id=user_id, status=status.value if status else None)

    async def get_order(self, user_id: str, order_id: str) -> Dict[str, Any]:
        """사용자 주문 상세 (사진, 결제 기록 포함)"""
        order = await self.db_helper.get_dish_order(order_id)
        if not order or order.get("user_id") != user_id:
            raise NotFoundException("디시 주문을 찾을 수 없습니다")
        return await self._with_details(order)

    async def get_status_counts(self, user_id: str) -> Dict[str, int]:
        """대시보드용 상태별 주문 수"""
        orders = await self.db_helper.list_dish_orders(user_id=user_id)
        statuses = [order.get("status") for order in orders]
        return {
            "total": len(orders),
            "in_production": statuses.count(DishOrderStatus.IN_PRODUCTION.value),
            "ready": statuses.count(DishOrderStatus.READY.value),
            "delivered": statuses.count(DishOrderStatus.DELIVERED.value),
        }

    async def list_all_orders(self, status: Optional[DishOrderStatus] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """운영자용 전체 주문 목록"""
        return await self.db_helper.list_dish_orders(status=status.value if status else None, limit=limit)

    async def get_order_for_staff(self, order_id: str) -> Dict[str, Any]:
        """운영자용 주문 상세"""
        order = await self.db_helper.get_dish_order(order_id)
        if not order:
            raise NotFoundException("디시 주문을 찾을 수 없습니다")
        return await self._with_details(order)

    async def get_public_demo(self, order_id: str) -> Dict[str, Any]:
        """공개 데모 페이지용 최소 정보"""
        order = await self.db_helper.get_dish_order(order_id)
        if not order:
            raise NotFoundException("데모 디시를 찾을 수 없습니다")
        return {"dish_name": order.get("dish_name"), "internal_reference": order.get("internal_reference")}

    async def update_order_by_staff(
        self,
        order_id: str,
        status: Optional[DishOrderStatus] = None,
        delivery_url: Optional[str] = None,
        delivery_note: Optional[str] = None,
    ) -> Dict[str, Any]:
        """운영자 주문 수정

        상태 전이는 NEW → IN_PRODUCTION → READY → DELIVERED 순서만 허용하며,
        CANCELLED는 종료 전 어느 상태에서든 가능하다. 종료된 주문은 메모만
        수정할 수 있다. READY/DELIVERED 전환 후 레스토랑에 메일을 보낸다.
        """
        order = await self.db_helper.get_dish_order(order_id)
        if not order:
            raise NotFoundException("디시 주문을 찾을 수 없습니다")

        current = DishOrderStatus(order["status"])
        target = DishOrderStatus(status) if status is not None else None
        transition = target is not None and target != current
        delivery_url = _clean(delivery_url)

        fields: Dict[str, Any] = {}
        if delivery_note is not None:
            fields["delivery_note"] = _clean(delivery_note)

        if current in TERMINAL_ORDER_STATUSES and (transition or delivery_url):
            raise InvalidTransitionException(
                f"{current.value} 상태의 주문은 메모만 수정할 수 있습니다",
                error_code="ORDER_IMMUTABLE",
            )

        if delivery_url:
            fields["delivery_url"] = delivery_url

        if transition:
            if not can_transition(current, target):
                raise InvalidTransitionException(f"{current.value}에서 {target.value}(으)로 변경할 수 없습니다")
            if target == DishOrderStatus.DELIVERED and not (delivery_url or _clean(order.get("delivery_url"))):
                raise ValidationException(
                    "DELIVERED로 변경하려면 납품 URL이 필요합니다",
                    errors=[{"field": "delivery_url", "message": "required"}],
                    error_code="DELIVERY_URL_REQUIRED",
                )
            fields["status"] = target.value

        if not fields:
            return {"order": order, "notification": None}

        updated = await self.db_helper.update_dish_order(order_id, fields)
        self.logger.info(f"운영자 주문 수정: order={order_id} fields={sorted(fields)}")

        notification = None
        if transition and target in (DishOrderStatus.READY, DishOrderStatus.DELIVERED):
            notification = await self._notify_owner(updated or order, target)

        return {"order": updated or {**order, **fields}, "notification": notification}

    async def _notify_owner(self, order: Dict[str, Any], status: DishOrderStatus) -> Optional[Dict[str, Any]]:
        if not self.notification_service:
            return None

        email = await self.db_helper.get_user_email(order.get("user_id"))
        if not email:
            self.logger.warning(f"주문 소유자 이메일을 찾을 수 없음: order={order.get('id')}")
            return {"success": False, "error": "owner_email_not_found"}

        if status == DishOrderStatus.READY:
            result = await self.notification_service.notify_restaurant_order_ready(
                email, order.get("dish_name"), order.get("id")
            )
        else:
            result = await self.notification_service.notify_restaurant_order_delivered(
                email, order.get("dish_name"), order.get("id")
            )
        return result.to_dict()

    async def _with_details(self, order: Dict[str, Any]) -> Dict[str, Any]:
        photos = await self.db_helper.get_dish_photos(order["id"])
        payment = await self.db_helper.get_order_payment(order["id"])
        return {**order, "photos": photos, "payment": payment}
