"""
레스토랑 사용자용 디시 주문 API
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from core.order_config import DishOrderStatus
from core.responses import success_response
from routers.dependencies import get_current_user, get_dish_order_service
from schemas.dish_orders import DishOrderCreateRequest
from services.dish_order_service import DishOrderService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/dish-orders", tags=["dish-orders"])


@router.post("", status_code=201)
async def create_dish_order(
    request: DishOrderCreateRequest,
    user=Depends(get_current_user),
    order_service: DishOrderService = Depends(get_dish_order_service),
):
    """디시 주문 생성"""
    logger.info(f"디시 주문 생성 요청: user={user.id} credit={request.use_pack_credit}")
    order = await order_service.create_order(user.id, request)
    return success_response(data=order, message="디시 주문이 생성되었습니다")


@router.get("")
async def list_dish_orders(
    status: Optional[DishOrderStatus] = Query(None),
    user=Depends(get_current_user),
    order_service: DishOrderService = Depends(get_dish_order_service),
):
    orders = await order_service.list_orders(user.id, status)
    return success_response(data={"orders": orders}, message="디시 주문 목록 조회 성공")


@router.get("/summary")
async def get_dish_order_summary(
    user=Depends(get_current_user),
    order_service: DishOrderService = Depends(get_dish_order_service),
):
    """대시보드 상태별 주문 수"""
    counts = await order_service.get_status_counts(user.id)
    return success_response(data=counts, message="주문 현황 조회 성공")


@router.get("/{order_id}")
async def get_dish_order(
    order_id: str = Path(...),
    user=Depends(get_current_user),
    order_service: DishOrderService = Depends(get_dish_order_service),
):
    order = await order_service.get_order(user.id, order_id)
    return success_response(data=order, message="디시 주문 조회 성공")
