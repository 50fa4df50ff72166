"""Public endpoints for the demo viewer (no auth required)."""
from fastapi import APIRouter, Depends, Path

from core.responses import success_response
from routers.dependencies import get_dish_order_service
from services.dish_order_service import DishOrderService

router = APIRouter(prefix="/api/v1/public", tags=["public"])


@router.get("/demo/{order_id}")
async def get_public_demo(
    order_id: str = Path(...),
    order_service: DishOrderService = Depends(get_dish_order_service),
):
    demo = await order_service.get_public_demo(order_id)
    return success_response(data=demo)
