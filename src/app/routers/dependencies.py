"""
라우터 공통 의존성

서비스 인스턴스는 ServiceFactory(컨테이너)에서 꺼내며, 테스트에서는
app.dependency_overrides로 교체한다.
"""
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.factory import ServiceFactory
from core.interfaces import IAuthService
from core.responses import AuthorizationException
from services.dish_order_service import DishOrderService
from services.email_client import ResendEmailClient
from services.paddle_webhook_service import PaddleWebhookService
from services.profile_service import ProfileService

# HTTP Bearer 인증 스키마
security = HTTPBearer(auto_error=False)


def get_auth_service() -> IAuthService:
    return ServiceFactory.get_auth_service()


def get_paddle_webhook_service() -> PaddleWebhookService:
    return ServiceFactory.get_paddle_webhook_service()


def get_dish_order_service() -> DishOrderService:
    return ServiceFactory.get_dish_order_service()


def get_profile_service() -> ProfileService:
    return ServiceFactory.get_profile_service()


def get_resend_client() -> Optional[ResendEmailClient]:
    return ServiceFactory.get_resend_client()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    auth_service: IAuthService = Depends(get_auth_service),
):
    """현재 사용자 정보를 가져오는 의존성"""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="인증 토큰이 필요합니다.",
        )
    return await auth_service.verify_auth(credentials)


async def require_staff(
    user=Depends(get_current_user),
    auth_service: IAuthService = Depends(get_auth_service),
):
    """admin 역할 사용자만 허용"""
    if not await auth_service.is_staff(user.id):
        raise AuthorizationException("관리자 권한이 필요합니다.")
    return user
