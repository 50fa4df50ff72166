"""Resend 이메일 API 클라이언트

POST /emails는 멱등하지 않으므로 send_email 호출마다 Idempotency-Key를 하나
만들어 모든 재시도에 같은 값을 보낸다.
"""
from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any, Dict, List, Optional

import httpx


logger = logging.getLogger(__name__)


class EmailAPIError(RuntimeError):
    """Resend API 오류 (code는 Resend 응답의 name)"""

    def __init__(
        self,
        message: str,
        status_code: int,
        payload: Optional[Dict[str, Any]] = None,
        *,
        code: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload or {}
        self.code = code


class ResendEmailClient:
    """Resend REST API 비동기 클라이언트"""

    ERROR_CODE_MESSAGES: Dict[str, str] = {
        "validation_error": "메일 요청 파라미터를 검증하지 못했습니다.",
        "missing_required_field": "메일 요청에 필수 값이 누락되었습니다.",
        "invalid_from_address": "발신자 주소 형식이 올바르지 않습니다.",
        "invalid_api_key": "Resend API 키가 올바르지 않습니다.",
        "restricted_api_key": "Resend API 키에 메일 발송 권한이 없습니다.",
        "rate_limit_exceeded": "메일 발송 요청이 너무 많습니다. 잠시 후 다시 시도하세요.",
        "daily_quota_exceeded": "일일 메일 발송 한도를 초과했습니다.",
    }

    RETRYABLE_STATUS = {408, 429, 500, 502, 503, 504}

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.resend.com",
        timeout: float = 15.0,
        *,
        max_retries: int = 2,
        backoff_factor: float = 0.5,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ValueError("Resend API 키가 설정되지 않았습니다.")

        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max(0, int(max_retries))
        self.backoff_factor = max(0.0, float(backoff_factor))

    async def send_email(
        self,
        *,
        sender: str,
        to: List[str],
        subject: str,
        html: str,
        idempotency_key: Optional[str] = None,
    ) -> Dict[str, Any]:
        """메일 발송 요청 (성공 시 Resend 응답 {"id": ...} 반환)"""

        payload = {"from": sender, "to": to, "subject": subject, "html": html}
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Idempotency-Key": idempotency_key or str(uuid.uuid4()),
        }
        return await self._post_with_retry("/emails", payload, headers)

    async def _post_with_retry(
        self,
        path: str,
        payload: Dict[str, Any],
        headers: Dict[str, str],
    ) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        last_error: Optional[EmailAPIError] = None

        for attempt in range(self.max_retries + 1):
            if attempt:
                await asyncio.sleep(self.backoff_factor * (2 ** (attempt - 1)))

            try:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.request("POST", url, headers=headers, json=payload)
            except httpx.RequestError as exc:
                logger.warning("[EMAIL] POST %s network error attempt=%s: %s", path, attempt + 1, exc)
                last_error = EmailAPIError(
                    "Resend API 네트워크 오류가 발생했습니다.",
                    status_code=0,
                    payload={"message": str(exc)},
                    code="network_error",
                )
                continue

            if response.status_code < 400:
                return self._safe_json(response)

            last_error = self._build_error(response)
            if response.status_code not in self.RETRYABLE_STATUS:
                break
            logger.warning(
                "[EMAIL] POST %s retryable status=%s code=%s attempt=%s",
                path,
                response.status_code,
                last_error.code,
                attempt + 1,
            )

        logger.error("[EMAIL] POST %s failed: status=%s code=%s", path, last_error.status_code, last_error.code)
        raise last_error

    def _build_error(self, response: httpx.Response) -> EmailAPIError:
        """Resend 오류 응답({"name", "message"})을 EmailAPIError로 변환"""

        payload = self._safe_json(response)
        code = payload.get("name") if isinstance(payload.get("name"), str) else None
        message = self.ERROR_CODE_MESSAGES.get(code or "")
        if not message:
            raw = payload.get("message")
            message = raw if isinstance(raw, str) and raw.strip() else f"Resend API 요청에 실패했습니다 (HTTP {response.status_code})"
        return EmailAPIError(message, response.status_code, payload, code=code)

    @staticmethod
    def _safe_json(response: httpx.Response) -> Dict[str, Any]:
        try:
            payload = response.json()
            return payload if isinstance(payload, dict) else {"data": payload}
        except ValueError:
            return {"message": response.text}
