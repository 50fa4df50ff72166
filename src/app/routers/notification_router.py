"""
알림 메일 렌더링 엔드포인트

{type, to, data}를 받아 템플릿으로 제목/본문을 만들고 Resend로 발송한다.
응답 본문은 호출측(NotificationService)과 맞춘 평문 JSON을 사용한다.
"""
import hmac
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials

from core.config import settings
from core.order_config import NotificationType
from routers.dependencies import get_resend_client, security
from schemas.notifications import NotificationEmailRequest
from services.email_client import EmailAPIError, ResendEmailClient
from services.email_templates import render_notification

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])


def _authorized(credentials: Optional[HTTPAuthorizationCredentials]) -> bool:
    expected = settings.NOTIFICATION_API_KEY
    if not expected:
        return True
    if credentials is None or not credentials.credentials:
        return False
    return hmac.compare_digest(credentials.credentials.encode("utf-8"), expected.encode("utf-8"))


@router.post("/email")
async def send_notification_email(
    request: NotificationEmailRequest,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    email_client: Optional[ResendEmailClient] = Depends(get_resend_client),
):
    if not _authorized(credentials):
        return JSONResponse(status_code=401, content={"error": "Unauthorized"})

    try:
        notification_type = NotificationType(request.type)
    except ValueError:
        logger.warning("[EMAIL] invalid notification type: %s", request.type)
        return JSONResponse(status_code=400, content={"error": "Invalid notification type"})

    recipient = (request.to or "").strip()
    if not recipient:
        return JSONResponse(status_code=400, content={"error": "Invalid notification type"})

    if email_client is None:
        logger.error("[EMAIL] RESEND_API_KEY is not configured")
        return JSONResponse(status_code=500, content={"error": "Email provider is not configured"})

    subject, html = render_notification(notification_type, request.data)
    try:
        result = await email_client.send_email(
            sender=settings.EMAIL_FROM,
            to=[recipient],
            subject=subject,
            html=html,
        )
    except EmailAPIError as e:
        logger.error("[EMAIL] %s to %s failed: status=%s code=%s", notification_type.value, recipient, e.status_code, e.code)
        return JSONResponse(status_code=500, content={"error": str(e)})

    logger.info("[EMAIL] %s sent to %s id=%s", notification_type.value, recipient, result.get("id"))
    return JSONResponse(status_code=200, content=result)
