from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ProfileCreateRequest(BaseModel):
    """가입 시 레스토랑 프로필 생성 요청"""
    restaurant_name: str = Field(..., description="레스토랑 이름")


class OnboardingRequest(BaseModel):
    """레스토랑 프로필 온보딩 완료 요청"""
    restaurant_name: str = Field(..., description="레스토랑 이름")
    country: str = Field(..., description="국가")
    city: str = Field(..., description="도시")
    website_url: Optional[str] = Field(None, description="웹사이트 주소")
    whatsapp_number: Optional[str] = Field(None, description="WhatsApp 번호")
