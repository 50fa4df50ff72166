"""
레스토랑 프로필/결제 현황 API
"""
from fastapi import APIRouter, Depends

from core.responses import success_response
from routers.dependencies import get_current_user, get_profile_service
from schemas.profile import OnboardingRequest, ProfileCreateRequest
from services.profile_service import ProfileService

router = APIRouter(prefix="/api/v1/profile", tags=["profile"])


@router.get("")
async def get_profile(
    user=Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
):
    profile = await profile_service.get_profile(user.id)
    return success_response(data=profile, message="프로필 조회 성공")


@router.post("", status_code=201)
async def create_profile(
    request: ProfileCreateRequest,
    user=Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
):
    """가입 직후 프로필 생성 (이미 있으면 기존 프로필 반환)"""
    profile = await profile_service.create_profile(user.id, request.restaurant_name)
    return success_response(data=profile, message="프로필이 생성되었습니다")


@router.put("/onboarding")
async def complete_onboarding(
    request: OnboardingRequest,
    user=Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
):
    profile = await profile_service.complete_onboarding(user.id, request)
    return success_response(data=profile, message="온보딩이 완료되었습니다")


@router.get("/credits")
async def get_credit_balance(
    user=Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
):
    """팩 크레딧 잔액"""
    balance = await profile_service.get_credit_balance(user.id)
    return success_response(data=balance, message="크레딧 조회 성공")


@router.get("/subscription")
async def get_current_subscription(
    user=Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
):
    """현재 호스팅 구독 (없으면 null)"""
    subscription = await profile_service.get_current_subscription(user.id)
    return success_response(data={"subscription": subscription}, message="구독 조회 성공")
