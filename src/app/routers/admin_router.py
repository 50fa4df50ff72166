"""
관리자(운영자) 전용 API 라우터
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from core.order_config import DishOrderStatus
from core.responses import success_response
from routers.dependencies import get_dish_order_service, require_staff
from schemas.dish_orders import DishOrderStaffUpdateRequest
from services.dish_order_service import DishOrderService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])


@router.get("/dish-orders")
async def list_all_dish_orders(
    status: Optional[DishOrderStatus] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    admin_user=Depends(require_staff),
    order_service: DishOrderService = Depends(get_dish_order_service),
):
    """작업 대기열용 전체 주문 목록"""
    orders = await order_service.list_all_orders(status, limit)
    return success_response(data={"orders": orders}, message="전체 주문 목록 조회 성공")


@router.get("/dish-orders/{order_id}")
async def get_dish_order_for_staff(
    order_id: str = Path(...),
    admin_user=Depends(require_staff),
    order_service: DishOrderService = Depends(get_dish_order_service),
):
    order = await order_service.get_order_for_staff(order_id)
    return success_response(data=order, message="주문 상세 조회 성공")


@router.patch("/dish-orders/{order_id}")
async def update_dish_order_by_staff(
    request: DishOrderStaffUpdateRequest,
    order_id: str = Path(...),
    admin_user=Depends(require_staff),
    order_service: DishOrderService = Depends(get_dish_order_service),
):
    """주문 상태/납품 정보 수정 (READY/DELIVERED 전환 시 레스토랑에 메일 발송)"""
    logger.info(f"운영자 주문 수정 요청: admin={admin_user.id} order={order_id} status={request.status}")
    result = await order_service.update_order_by_staff(
        order_id,
        status=request.status,
        delivery_url=request.delivery_url,
        delivery_note=request.delivery_note,
    )
    return success_response(data=result, message="주문이 수정되었습니다")
