"""
레스토랑 프로필 서비스
온보딩, 팩 크레딧 잔액, 호스팅 구독 조회
"""
from typing import Any, Dict, Optional

from core.base_service import BaseService
from core.interfaces import IDatabaseHelper
from core.responses import NotFoundException
from schemas.profile import OnboardingRequest


class ProfileService(BaseService):
    """레스토랑 프로필 관리 서비스"""

    def __init__(self, db_helper: IDatabaseHelper):
        super().__init__(db_helper)

    async def get_profile(self, user_id: str) -> Dict[str, Any]:
        profile = await self.db_helper.get_restaurant_profile(user_id)
        if not profile:
            raise NotFoundException("레스토랑 프로필을 찾을 수 없습니다")
        return profile

    async def create_profile(self, user_id: str, restaurant_name: str) -> Dict[str, Any]:
        """가입 직후 레스토랑 프로필 생성

        같은 사용자가 다시 호출하면 기존 프로필을 그대로 돌려준다.
        """
        self.validate_required_fields({"restaurant_name": restaurant_name}, ["restaurant_name"])

        existing = await self.db_helper.get_restaurant_profile(user_id)
        if existing:
            return existing

        profile = await self.db_helper.create_restaurant_profile(user_id, restaurant_name.strip())
        await self.log_user_action(user_id, "profile_created", {"restaurant_name": profile.get("restaurant_name")})
        return profile

    async def complete_onboarding(self, user_id: str, request: OnboardingRequest) -> Dict[str, Any]:
        """온보딩 정보 저장 후 onboarding_completed = true"""
        data = request.model_dump()
        self.validate_required_fields(data, ["restaurant_name", "country", "city"])

        await self.get_profile(user_id)

        fields = {
            "restaurant_name": request.restaurant_name.strip(),
            "country": request.country.strip(),
            "city": request.city.strip(),
            "website_url": (request.website_url or "").strip() or None,
            "whatsapp_number": (request.whatsapp_number or "").strip() or None,
            "onboarding_completed": True,
        }
        updated = await self.db_helper.update_restaurant_profile(user_id, fields)
        await self.log_user_action(user_id, "onboarding_completed", {"restaurant_name": fields["restaurant_name"]})
        return updated

    async def get_credit_balance(self, user_id: str) -> Dict[str, Any]:
        """팩 크레딧 잔액"""
        profile = await self.get_profile(user_id)
        return {
            "pack_dishes_remaining": profile.get("pack_dishes_remaining") or 0,
            "pack_dishes_total": profile.get("pack_dishes_total") or 0,
            "pack_purchased_at": profile.get("pack_purchased_at"),
        }

    async def get_current_subscription(self, user_id: str) -> Optional[Dict[str, Any]]:
        return await self.db_helper.get_latest_subscription(user_id)
