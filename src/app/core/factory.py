"""
서비스 팩토리 - 의존성 주입 설정
"""
from supabase import Client, create_client
import logging

from core.config import settings
from core.container import container
from core.interfaces import IAuthService, IDatabaseHelper, INotificationService
from database_helper import DatabaseHelper
from services.auth_service import AuthService
from services.credit_ledger_service import CreditLedgerService
from services.dish_order_service import DishOrderService
from services.email_client import ResendEmailClient
from services.notification_service import NotificationService
from services.paddle_webhook_service import PaddleWebhookService
from services.profile_service import ProfileService

logger = logging.getLogger(__name__)


class ServiceFactory:
    """서비스 의존성 등록 및 초기화"""

    @staticmethod
    def configure_dependencies():
        """의존성 주입 컨테이너 설정"""
        # 외부 클라이언트 생성
        supabase_client = create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
        supabase_admin = None
        if settings.SUPABASE_SERVICE_ROLE_KEY:
            supabase_admin = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
        else:
            logger.warning("SUPABASE_SERVICE_ROLE_KEY가 없어 웹훅 저장소 쓰기가 RLS에 막힐 수 있습니다.")
        container.register_singleton(Client, supabase_client)

        # Resend 클라이언트 (메일 렌더링 엔드포인트용)
        if settings.RESEND_API_KEY:
            resend_client = ResendEmailClient(
                api_key=settings.RESEND_API_KEY,
                base_url=settings.RESEND_API_BASE_URL,
            )
            container.register_singleton(ResendEmailClient, resend_client)
        else:
            logger.warning("[EMAIL] RESEND_API_KEY가 설정되지 않아 ResendEmailClient를 초기화하지 않습니다.")

        # DatabaseHelper 싱글톤 등록
        db_helper = DatabaseHelper(supabase_client, supabase_admin)
        container.register_singleton(IDatabaseHelper, db_helper)

        auth_service = AuthService(supabase_client, db_helper)
        container.register_singleton(IAuthService, auth_service)

        notification_service = NotificationService(
            endpoint_url=settings.notification_endpoint,
            site_url=settings.SITE_URL,
            api_key=settings.NOTIFICATION_API_KEY,
            admin_email=settings.ADMIN_NOTIFICATION_EMAIL,
            timeout=settings.NOTIFICATION_TIMEOUT_SECONDS,
        )
        container.register_singleton(INotificationService, notification_service)

        ledger_service = CreditLedgerService(db_helper)
        container.register_singleton(CreditLedgerService, ledger_service)
        container.register_factory(
            PaddleWebhookService,
            lambda: PaddleWebhookService(db_helper, ledger_service),
        )
        container.register_factory(
            DishOrderService,
            lambda: DishOrderService(
                db_helper,
                container.get(INotificationService),
                demo_price=settings.DEMO_DISH_PRICE,
                currency=settings.DEMO_DISH_CURRENCY,
            ),
        )
        container.register_factory(ProfileService, lambda: ProfileService(db_helper))

    @staticmethod
    def get_auth_service() -> IAuthService:
        """인증 서비스 조회"""
        return container.get(IAuthService)

    @staticmethod
    def get_db_helper() -> IDatabaseHelper:
        """DB 헬퍼 조회"""
        return container.get(IDatabaseHelper)

    @staticmethod
    def get_paddle_webhook_service() -> PaddleWebhookService:
        return container.get(PaddleWebhookService)

    @staticmethod
    def get_dish_order_service() -> DishOrderService:
        return container.get(DishOrderService)

    @staticmethod
    def get_profile_service() -> ProfileService:
        return container.get(ProfileService)

    @staticmethod
    def get_resend_client() -> ResendEmailClient | None:
        """Resend 클라이언트 조회 (미설정 시 None)"""
        if not container.has(ResendEmailClient):
            return None
        return container.get(ResendEmailClient)
