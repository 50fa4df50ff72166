"""
Paddle Webhook Router

Receives Paddle Billing webhook events:
- signature verification (HMAC-SHA256 over "<ts>:<raw body>") before anything else
- envelope parsing; malformed bodies answer 500 so that Paddle retries
- dispatch to PaddleWebhookService; handled and ignored events both answer 200
"""
import json
import logging

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from core.config import settings
from core.paddle_signature import verify_paddle_signature
from core.responses import success_response
from routers.dependencies import get_paddle_webhook_service
from schemas.paddle import PaddleEventEnvelope
from services.paddle_webhook_service import PaddleWebhookService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/webhooks", tags=["webhooks", "paddle"])


def _parse_envelope(raw: bytes) -> PaddleEventEnvelope:
    payload = json.loads(raw.decode("utf-8"))
    if not isinstance(payload, dict):
        raise ValueError("webhook body must be a JSON object")
    return PaddleEventEnvelope.model_validate(payload)


@router.get("/paddle")
async def paddle_webhook_get():
    return success_response(data={"ok": True}, message="paddle webhook alive")


@router.post("/paddle")
async def paddle_webhook(
    request: Request,
    paddle_signature: str | None = Header(default=None, alias="Paddle-Signature"),
    webhook_service: PaddleWebhookService = Depends(get_paddle_webhook_service),
):
    raw = await request.body()
    logger.info(
        "[PADDLE] webhook received: len=%s, has_signature=%s",
        len(raw),
        bool(paddle_signature),
    )

    if not verify_paddle_signature(
        raw,
        paddle_signature,
        settings.PADDLE_WEBHOOK_SECRET,
        tolerance_seconds=settings.PADDLE_WEBHOOK_TOLERANCE_SECONDS,
    ):
        return JSONResponse(status_code=401, content={"error": "Invalid signature"})

    try:
        envelope = _parse_envelope(raw)
    except (UnicodeDecodeError, ValueError, ValidationError) as e:
        logger.error("[PADDLE] webhook body rejected: %s", e)
        return JSONResponse(status_code=500, content={"error": str(e)})

    try:
        outcome = await webhook_service.dispatch(envelope)
    except Exception as e:
        logger.error("[PADDLE] webhook processing error: %s", e, exc_info=True)
        return JSONResponse(status_code=500, content={"error": str(e)})

    logger.info("[PADDLE] webhook done: event=%s status=%s", outcome.get("event_type"), outcome.get("status"))
    return JSONResponse(status_code=200, content={"received": True})
