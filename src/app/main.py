from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
from contextlib import asynccontextmanager
import logging
from datetime import datetime

from core.config import settings
from core.factory import ServiceFactory
from core.middleware import setup_exception_handlers
from core.responses import success_response

# Routers Import
from routers import (
    admin_router,
    dish_order_router,
    notification_router,
    paddle_router,
    profile_router,
    public_router,
)

# 로깅 설정
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Factory 패턴으로 서비스 초기화
ServiceFactory.configure_dependencies()
db_helper = ServiceFactory.get_db_helper()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    if not settings.PADDLE_WEBHOOK_SECRET:
        logger.warning("[PADDLE] PADDLE_WEBHOOK_SECRET이 없어 모든 웹훅이 401로 거부됩니다.")

    try:
        await db_helper.log_system_event(
            event_type='server_start',
            event_data={'status': 'success', 'timestamp': datetime.now().isoformat()}
        )
    except Exception as e:
        logger.error(f"시작 로그 기록 실패: {e}")

    yield

    try:
        await db_helper.log_system_event(
            event_type='server_stop',
            event_data={'status': 'success', 'timestamp': datetime.now().isoformat()}
        )
    except Exception as e:
        logger.error(f"종료 로그 기록 실패: {e}")

app = FastAPI(
    title="Menublend Server",
    description="Dish orders, Paddle billing webhooks and notification e-mails for Menublend",
    version="1.0.0",
    lifespan=lifespan,
    debug=settings.DEBUG
)

# 예외 처리 미들웨어 설정
setup_exception_handlers(app)

# CORS 미들웨어 추가
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # 프로덕션에서는 특정 도메인만 허용
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 기본 엔드포인트
@app.get("/")
async def root():
    return success_response(
        data={"message": "Hello, Menublend Server!"},
        message="서버가 정상적으로 실행 중입니다"
    )

@app.get("/health")
async def health_check():
    return success_response(
        data={
            "timestamp": datetime.now().isoformat(),
            "version": "1.0.0",
            "environment": "development" if settings.DEBUG else "production"
        },
        message="헬스 체크(DB 미검사)"
    )

# 라우터 등록
app.include_router(paddle_router.router)  # Paddle 웹훅 라우터
app.include_router(notification_router.router)  # 알림 메일 렌더링/발송
app.include_router(dish_order_router.router)
app.include_router(profile_router.router)
app.include_router(admin_router.router)  # 운영자 전용
app.include_router(public_router.router)  # 공개 데모 API

if __name__ == "__main__":
    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        reload=settings.DEBUG
    )
