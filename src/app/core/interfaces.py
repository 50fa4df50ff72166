"""
서비스 인터페이스 정의
"""
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, List


class IAuthService(ABC):
    """인증 서비스 인터페이스"""

    @abstractmethod
    async def verify_auth(self, credentials) -> Any:
        """토큰 검증"""
        pass

    @abstractmethod
    async def is_staff(self, user_id: str) -> bool:
        """내부 운영자(admin 역할) 여부"""
        pass


class IDatabaseHelper(ABC):
    """데이터베이스 헬퍼 인터페이스"""

    # 레스토랑 프로필 / 크레딧 원장
    @abstractmethod
    async def get_restaurant_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """레스토랑 프로필 조회"""
        pass

    @abstractmethod
    async def create_restaurant_profile(self, user_id: str, restaurant_name: str) -> Dict[str, Any]:
        """레스토랑 프로필 생성 (user_id당 1개, 이미 있으면 기존 행 유지)"""
        pass

    @abstractmethod
    async def update_restaurant_profile(self, user_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """레스토랑 프로필 수정"""
        pass

    @abstractmethod
    async def grant_pack_credits(self, user_id: str, dishes_count: int, transaction_id: str) -> Dict[str, Any]:
        """팩 크레딧 원자적 증가 (거래 ID 기준 1회만 적용)"""
        pass

    @abstractmethod
    async def consume_pack_credit(self, user_id: str) -> Optional[int]:
        """팩 크레딧 1개 차감, 남은 수량 반환 (부족하면 None)"""
        pass

    @abstractmethod
    async def release_pack_credit(self, user_id: str) -> bool:
        """차감했던 팩 크레딧 1개 반환"""
        pass

    # 결제 기록
    @abstractmethod
    async def has_paid_payment(self, provider_payment_id: str) -> bool:
        """해당 공급자 거래 ID로 PAID 처리된 결제가 있는지 확인"""
        pass

    @abstractmethod
    async def mark_order_payment_paid(self, dish_order_id: str, provider_payment_id: str) -> List[Dict[str, Any]]:
        """주문의 결제 기록을 PAID로 전환"""
        pass

    @abstractmethod
    async def create_payment_record(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """결제 기록 생성"""
        pass

    @abstractmethod
    async def get_order_payment(self, dish_order_id: str) -> Optional[Dict[str, Any]]:
        """주문의 결제 기록 조회"""
        pass

    # 구독 기록
    @abstractmethod
    async def upsert_subscription(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Paddle 구독 ID 기준 구독 기록 upsert"""
        pass

    @abstractmethod
    async def update_subscription(self, paddle_subscription_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Paddle 구독 ID 기준 구독 기록 수정"""
        pass

    @abstractmethod
    async def get_latest_subscription(self, user_id: str) -> Optional[Dict[str, Any]]:
        """사용자의 최신 구독 기록 조회"""
        pass

    # 디시 주문
    @abstractmethod
    async def create_dish_order(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """디시 주문 생성"""
        pass

    @abstractmethod
    async def delete_dish_order(self, order_id: str) -> bool:
        """디시 주문 삭제 (사진 포함)"""
        pass

    @abstractmethod
    async def add_dish_photos(self, order_id: str, image_urls: List[str]) -> List[Dict[str, Any]]:
        """주문 사진 등록"""
        pass

    @abstractmethod
    async def get_dish_photos(self, order_id: str) -> List[Dict[str, Any]]:
        """주문 사진 조회"""
        pass

    @abstractmethod
    async def get_dish_order(self, order_id: str) -> Optional[Dict[str, Any]]:
        """디시 주문 단건 조회"""
        pass

    @abstractmethod
    async def list_dish_orders(
        self,
        user_id: Optional[str] = None,
        status: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """디시 주문 목록 조회 (user_id가 없으면 전체)"""
        pass

    @abstractmethod
    async def update_dish_order(self, order_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """디시 주문 수정"""
        pass

    # 사용자/역할
    @abstractmethod
    async def has_role(self, user_id: str, role: str) -> bool:
        """사용자 역할 확인"""
        pass

    @abstractmethod
    async def get_user_email(self, user_id: str) -> Optional[str]:
        """사용자 이메일 조회"""
        pass

    @abstractmethod
    async def log_system_event(self, user_id: str = None, event_type: str = 'info', event_data: Dict[str, Any] = None) -> bool:
        """시스템 이벤트 로깅"""
        pass


class INotificationService(ABC):
    """알림 메일 디스패처 인터페이스"""

    @abstractmethod
    async def send_notification(self, notification_type, to: str, data: Dict[str, Any]):
        """알림 메일 전송 요청 (예외를 던지지 않음)"""
        pass

    @abstractmethod
    async def notify_admin_new_order(
        self,
        restaurant_name: str,
        dish_name: str,
        internal_reference: Optional[str],
        dish_order_id: str,
        city: Optional[str] = None,
        country: Optional[str] = None,
    ):
        """운영자에게 신규 주문 알림"""
        pass

    @abstractmethod
    async def notify_restaurant_order_ready(self, to: str, dish_name: str, dish_order_id: str):
        pass

    @abstractmethod
    async def notify_restaurant_order_delivered(self, to: str, dish_name: str, dish_order_id: str):
        pass
