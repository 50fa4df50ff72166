# Routers package
from . import (
    admin_router,
    dish_order_router,
    notification_router,
    paddle_router,
    profile_router,
    public_router,
)

__all__ = [
    "admin_router",
    "dish_order_router",
    "notification_router",
    "paddle_router",
    "profile_router",
    "public_router",
]
