from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class NotificationData(BaseModel):
    """알림 메일 템플릿에 채워질 값 (wire 포맷은 camelCase)"""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    restaurant_name: Optional[str] = Field(None, alias="restaurantName")
    dish_name: Optional[str] = Field(None, alias="dishName")
    internal_reference: Optional[str] = Field(None, alias="internalReference")
    dish_order_id: Optional[str] = Field(None, alias="dishOrderId")
    city: Optional[str] = None
    country: Optional[str] = None
    demo_url: Optional[str] = Field(None, alias="demoUrl")
    dashboard_url: Optional[str] = Field(None, alias="dashboardUrl")


class NotificationEmailRequest(BaseModel):
    """메일 렌더링 엔드포인트 요청 본문"""
    model_config = ConfigDict(extra="ignore")

    type: Optional[str] = Field(None, description="NEW_ORDER | ORDER_READY | ORDER_DELIVERED")
    to: Optional[str] = Field(None, description="수신자 이메일")
    data: NotificationData = Field(default_factory=NotificationData)
