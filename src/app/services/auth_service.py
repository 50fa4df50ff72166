from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from supabase import Client
import logging

# Core imports
from core.interfaces import IAuthService, IDatabaseHelper
from core.base_service import BaseService
from core.responses import AuthenticationException

logger = logging.getLogger(__name__)

STAFF_ROLE = "admin"


class AuthService(BaseService, IAuthService):
    """Supabase 토큰 인증 및 운영자 역할 확인"""

    def __init__(self, supabase_client: Client, db_helper: IDatabaseHelper):
        super().__init__(db_helper)
        self.supabase = supabase_client

    async def verify_auth(self, credentials: HTTPAuthorizationCredentials):
        """JWT 토큰 검증"""

        try:
            return await self._verify_token_internal(credentials)
        except AuthenticationException:
            raise HTTPException(status_code=401, detail="유효하지 않은 토큰입니다.")
        except Exception as e:
            self.logger.error(f"인증 실패: {e}")
            raise HTTPException(status_code=401, detail="인증에 실패했습니다.")

    async def _verify_token_internal(self, credentials: HTTPAuthorizationCredentials):
        """내부 토큰 검증 로직"""
        if credentials is None or not credentials.credentials:
            raise AuthenticationException("인증 토큰이 없습니다")

        try:
            # JWT 토큰으로 사용자 정보 조회
            response = self.supabase.auth.get_user(credentials.credentials)
        except Exception as e:
            self.logger.error(f"토큰 검증 중 오류: {e}")
            raise AuthenticationException("인증 처리 중 오류가 발생했습니다")

        if response is None or response.user is None:
            raise AuthenticationException("유효하지 않은 토큰입니다")
        return response.user

    async def is_staff(self, user_id: str) -> bool:
        """admin 역할 보유 여부"""
        return await self.db_helper.has_role(user_id, STAFF_ROLE)
