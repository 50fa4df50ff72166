"""
데이터베이스 연결 및 CRUD 작업을 위한 헬퍼 모듈

조회 계열은 실패 시 로그를 남기고 빈 값을 반환한다. 쓰기 계열과 결제 멱등성
확인은 실패를 숨기면 데이터가 어긋나므로 ExternalServiceException으로 올린다.
"""

from typing import Dict, List, Optional, Any
from datetime import datetime, timezone
from supabase import Client
import logging

from core.interfaces import IDatabaseHelper
from core.order_config import PaymentStatus
from core.responses import ExternalServiceException

logger = logging.getLogger(__name__)

SERVICE_NAME = "Supabase"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class DatabaseHelper(IDatabaseHelper):
    def __init__(self, supabase_client: Client, admin_client: Client = None):
        self.supabase = supabase_client
        self.admin_client = admin_client or supabase_client

    def _get_client(self, use_admin: bool = False):
        """적절한 클라이언트 반환 - 일반적으로 admin client 사용"""
        return self.admin_client if use_admin or self.admin_client else self.supabase

    @staticmethod
    def _first(result) -> Optional[Dict[str, Any]]:
        data = getattr(result, "data", None)
        if isinstance(data, list):
            return data[0] if data else None
        return data if isinstance(data, dict) else None

    # Restaurant profiles / 크레딧 원장
    async def get_restaurant_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """레스토랑 프로필 조회"""
        try:
            client = self._get_client(use_admin=True)
            result = client.table('restaurant_profiles').select('*').eq('user_id', user_id).limit(1).execute()
            return self._first(result)
        except Exception as e:
            logger.error(f"레스토랑 프로필 조회 실패: {e}")
            return None

    async def create_restaurant_profile(self, user_id: str, restaurant_name: str) -> Dict[str, Any]:
        """레스토랑 프로필 생성

        user_id unique 제약에 기대어 중복 요청은 무시하고 저장된 행을 다시 읽는다.
        """
        try:
            client = self._get_client(use_admin=True)
            client.table('restaurant_profiles').upsert(
                {'user_id': user_id, 'restaurant_name': restaurant_name},
                on_conflict='user_id',
                ignore_duplicates=True,
            ).execute()
            result = client.table('restaurant_profiles').select('*').eq('user_id', user_id).limit(1).execute()
            return self._first(result) or {}
        except Exception as e:
            logger.error(f"레스토랑 프로필 생성 실패: {e}")
            raise ExternalServiceException(SERVICE_NAME, "레스토랑 프로필 생성에 실패했습니다") from e

    async def update_restaurant_profile(self, user_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """레스토랑 프로필 수정"""
        try:
            client = self._get_client(use_admin=True)
            payload = {**fields, 'updated_at': _utc_now_iso()}
            result = client.table('restaurant_profiles').update(payload).eq('user_id', user_id).execute()
            return self._first(result) or {}
        except Exception as e:
            logger.error(f"레스토랑 프로필 수정 실패: {e}")
            raise ExternalServiceException(SERVICE_NAME, "레스토랑 프로필 수정에 실패했습니다") from e

    async def grant_pack_credits(self, user_id: str, dishes_count: int, transaction_id: str) -> Dict[str, Any]:
        """팩 크레딧 원자적 증가

        grant_pack_credits RPC가 pack_credit_grants에 거래 ID를 먼저 기록하고,
        기록에 성공한 경우에만 remaining/total을 단일 UPDATE로 증가시킨다.
        """
        try:
            client = self._get_client(use_admin=True)
            rpc_res = client.rpc('grant_pack_credits', {
                'p_user_id': user_id,
                'p_dishes_count': dishes_count,
                'p_transaction_id': transaction_id,
            }).execute()
            data = rpc_res.data if hasattr(rpc_res, 'data') else None
            if isinstance(data, list):
                data = data[0] if data else None
            return data if isinstance(data, dict) else {'applied': False, 'reason': 'empty_response'}
        except Exception as e:
            logger.error(f"팩 크레딧 지급 실패: user_id={user_id} tx={transaction_id} error={e}")
            raise ExternalServiceException(SERVICE_NAME, "팩 크레딧 지급에 실패했습니다") from e

    async def consume_pack_credit(self, user_id: str) -> Optional[int]:
        """팩 크레딧 1개 차감 (remaining > 0 조건부 UPDATE)"""
        try:
            client = self._get_client(use_admin=True)
            rpc_res = client.rpc('consume_pack_credit', {'p_user_id': user_id}).execute()
            remaining = rpc_res.data if hasattr(rpc_res, 'data') else None
            if isinstance(remaining, list):
                remaining = remaining[0] if remaining else None
            return int(remaining) if remaining is not None else None
        except Exception as e:
            logger.error(f"팩 크레딧 차감 실패: {e}")
            raise ExternalServiceException(SERVICE_NAME, "팩 크레딧 차감에 실패했습니다") from e

    async def release_pack_credit(self, user_id: str) -> bool:
        """차감했던 팩 크레딧 반환"""
        try:
            client = self._get_client(use_admin=True)
            rpc_res = client.rpc('release_pack_credit', {'p_user_id': user_id}).execute()
            return rpc_res.data is not None
        except Exception as e:
            logger.error(f"팩 크레딧 반환 실패: user_id={user_id} error={e}")
            return False

    # Payment records
    async def has_paid_payment(self, provider_payment_id: str) -> bool:
        """공급자 거래 ID로 PAID 처리된 결제가 있는지 확인"""
        try:
            client = self._get_client(use_admin=True)
            result = (
                client.table('payment_records')
                .select('id')
                .eq('provider_payment_id', provider_payment_id)
                .eq('status', PaymentStatus.PAID.value)
                .limit(1)
                .execute()
            )
            return bool(result.data)
        except Exception as e:
            logger.error(f"결제 중복 확인 실패: {e}")
            raise ExternalServiceException(SERVICE_NAME, "결제 중복 여부를 확인하지 못했습니다") from e

    async def mark_order_payment_paid(self, dish_order_id: str, provider_payment_id: str) -> List[Dict[str, Any]]:
        """주문의 미완료 결제 기록을 PAID로 전환"""
        try:
            client = self._get_client(use_admin=True)
            result = (
                client.table('payment_records')
                .update({
                    'status': PaymentStatus.PAID.value,
                    'provider': 'paddle',
                    'provider_payment_id': provider_payment_id,
                })
                .eq('dish_order_id', dish_order_id)
                .eq('status', PaymentStatus.PENDING.value)
                .execute()
            )
            return result.data or []
        except Exception as e:
            logger.error(f"결제 상태 갱신 실패: order={dish_order_id} error={e}")
            raise ExternalServiceException(SERVICE_NAME, "결제 상태 갱신에 실패했습니다") from e

    async def create_payment_record(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """결제 기록 생성"""
        try:
            client = self._get_client(use_admin=True)
            result = client.table('payment_records').insert(record).execute()
            return self._first(result) or {}
        except Exception as e:
            logger.error(f"결제 기록 생성 실패: {e}")
            raise ExternalServiceException(SERVICE_NAME, "결제 기록 생성에 실패했습니다") from e

    async def get_order_payment(self, dish_order_id: str) -> Optional[Dict[str, Any]]:
        """주문의 최신 결제 기록 조회"""
        try:
            client = self._get_client(use_admin=True)
            result = (
                client.table('payment_records')
                .select('*')
                .eq('dish_order_id', dish_order_id)
                .order('created_at', desc=True)
                .limit(1)
                .execute()
            )
            return self._first(result)
        except Exception as e:
            logger.error(f"결제 기록 조회 실패: {e}")
            return None

    # Subscription records
    async def upsert_subscription(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Paddle 구독 ID 기준 upsert"""
        try:
            client = self._get_client(use_admin=True)
            result = (
                client.table('subscription_records')
                .upsert(record, on_conflict='paddle_subscription_id')
                .execute()
            )
            return self._first(result) or {}
        except Exception as e:
            logger.error(f"구독 기록 upsert 실패: {e}")
            raise ExternalServiceException(SERVICE_NAME, "구독 기록 저장에 실패했습니다") from e

    async def update_subscription(self, paddle_subscription_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Paddle 구독 ID 기준 부분 수정 (대상이 없으면 None)"""
        try:
            client = self._get_client(use_admin=True)
            result = (
                client.table('subscription_records')
                .update(fields)
                .eq('paddle_subscription_id', paddle_subscription_id)
                .execute()
            )
            return self._first(result)
        except Exception as e:
            logger.error(f"구독 기록 수정 실패: {e}")
            raise ExternalServiceException(SERVICE_NAME, "구독 기록 수정에 실패했습니다") from e

    async def get_latest_subscription(self, user_id: str) -> Optional[Dict[str, Any]]:
        """사용자의 최신 구독 기록 조회"""
        try:
            client = self._get_client(use_admin=True)
            result = (
                client.table('subscription_records')
                .select('*')
                .eq('user_id', user_id)
                .order('created_at', desc=True)
                .limit(1)
                .execute()
            )
            return self._first(result)
        except Exception as e:
            logger.error(f"구독 기록 조회 실패: {e}")
            return None

    # Dish orders
    async def create_dish_order(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """디시 주문 생성"""
        try:
            client = self._get_client(use_admin=True)
            result = client.table('dish_orders').insert(record).execute()
            created = self._first(result)
            if not created:
                raise ExternalServiceException(SERVICE_NAME, "디시 주문 생성 결과가 비어 있습니다")
            return created
        except ExternalServiceException:
            raise
        except Exception as e:
            logger.error(f"디시 주문 생성 실패: {e}")
            raise ExternalServiceException(SERVICE_NAME, "디시 주문 생성에 실패했습니다") from e

    async def delete_dish_order(self, order_id: str) -> bool:
        """디시 주문 삭제 (dish_photos/payment_records는 FK cascade)"""
        try:
            client = self._get_client(use_admin=True)
            result = client.table('dish_orders').delete().eq('id', order_id).execute()
            return bool(result.data)
        except Exception as e:
            logger.error(f"디시 주문 삭제 실패: {e}")
            return False

    async def add_dish_photos(self, order_id: str, image_urls: List[str]) -> List[Dict[str, Any]]:
        """주문 사진 일괄 등록"""
        try:
            client = self._get_client(use_admin=True)
            rows = [{'dish_order_id': order_id, 'image_url': url} for url in image_urls]
            result = client.table('dish_photos').insert(rows).execute()
            return result.data or []
        except Exception as e:
            logger.error(f"주문 사진 등록 실패: {e}")
            raise ExternalServiceException(SERVICE_NAME, "주문 사진 등록에 실패했습니다") from e

    async def get_dish_photos(self, order_id: str) -> List[Dict[str, Any]]:
        """주문 사진 조회"""
        try:
            client = self._get_client(use_admin=True)
            result = (
                client.table('dish_photos')
                .select('*')
                .eq('dish_order_id', order_id)
                .order('created_at')
                .execute()
            )
            return result.data or []
        except Exception as e:
            logger.error(f"주문 사진 조회 실패: {e}")
            return []

    async def get_dish_order(self, order_id: str) -> Optional[Dict[str, Any]]:
        """디시 주문 단건 조회"""
        try:
            client = self._get_client(use_admin=True)
            result = client.table('dish_orders').select('*').eq('id', order_id).limit(1).execute()
            return self._first(result)
        except Exception as e:
            logger.error(f"디시 주문 조회 실패: {e}")
            return None

    async def list_dish_orders(
        self,
        user_id: Optional[str] = None,
        status: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """디시 주문 목록 조회 (최신순)"""
        try:
            client = self._get_client(use_admin=True)
            query = client.table('dish_orders').select('*')
            if user_id:
                query = query.eq('user_id', user_id)
            if status:
                query = query.eq('status', status)
            query = query.order('created_at', desc=True)
            if limit:
                query = query.limit(limit)
            result = query.execute()
            return result.data or []
        except Exception as e:
            logger.error(f"디시 주문 목록 조회 실패: {e}")
            return []

    async def update_dish_order(self, order_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """디시 주문 수정"""
        try:
            client = self._get_client(use_admin=True)
            payload = {**fields, 'updated_at': _utc_now_iso()}
            result = client.table('dish_orders').update(payload).eq('id', order_id).execute()
            return self._first(result) or {}
        except Exception as e:
            logger.error(f"디시 주문 수정 실패: order={order_id} error={e}")
            raise ExternalServiceException(SERVICE_NAME, "디시 주문 수정에 실패했습니다") from e

    # Users / roles
    async def has_role(self, user_id: str, role: str) -> bool:
        """has_role 함수로 역할 확인"""
        try:
            client = self._get_client(use_admin=True)
            rpc_res = client.rpc('has_role', {'_user_id': user_id, '_role': role}).execute()
            return bool(rpc_res.data)
        except Exception as e:
            logger.error(f"사용자 역할 확인 실패: {e}")
            return False

    async def get_user_email(self, user_id: str) -> Optional[str]:
        """Supabase Auth 관리자 API로 사용자 이메일 조회"""
        try:
            response = self.admin_client.auth.admin.get_user_by_id(user_id)
            user = getattr(response, 'user', None)
            return getattr(user, 'email', None)
        except Exception as e:
            logger.error(f"사용자 이메일 조회 실패: {e}")
            return None

    # System logs
    async def log_system_event(self, user_id: str = None, event_type: str = 'info',
                             event_data: Dict[str, Any] = None) -> bool:
        """시스템 이벤트 로깅"""
        try:
            client = self._get_client(use_admin=True)
            client.table('system_logs').insert({
                'user_id': user_id,
                'event_type': event_type,
                'event_data': event_data or {},
            }).execute()
            return True
        except Exception as e:
            logger.error(f"시스템 로그 기록 실패: {e}")
            return False
