from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from core.order_config import DishOrderStatus


class DishOrderCreateRequest(BaseModel):
    """레스토랑 사용자의 디시 주문 생성 요청"""
    dish_name: str = Field(..., description="디시 이름")
    description: Optional[str] = Field(None, description="디시 설명")
    cuisine_type: Optional[str] = Field(None, description="요리 종류")
    target_use_case: Optional[str] = Field(None, description="활용 목적 (메뉴, 웹사이트 등)")
    internal_reference: Optional[str] = Field(None, description="레스토랑 내부 참조 코드")
    photo_urls: List[str] = Field(default_factory=list, description="업로드된 사진 URL 목록 (8~20장)")
    use_pack_credit: bool = Field(False, description="팩 크레딧으로 결제할지 여부")
    is_demo: bool = Field(True, description="데모 주문 여부")


class DishOrderStaffUpdateRequest(BaseModel):
    """운영자의 주문 상태/납품 정보 수정 요청"""
    status: Optional[DishOrderStatus] = Field(None, description="변경할 주문 상태")
    delivery_url: Optional[str] = Field(None, description="납품 URL (DELIVERED 전환 시 필수)")
    delivery_note: Optional[str] = Field(None, description="납품 메모")
