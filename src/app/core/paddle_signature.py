"""
Paddle-Signature 헤더 검증 (Billing HMAC-SHA256)

헤더 형식: ``ts=<unix_seconds>;h1=<hex_hmac>`` (h1은 여러 개일 수 있음)
서명 대상: ``"<ts>:<raw_body>"``
"""
import hashlib
import hmac
import logging
import time
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


def parse_signature_header(signature: Optional[str]) -> Dict[str, List[str]]:
    """``key=value`` 조각들을 키별 값 목록으로 분해 (형식이 맞지 않는 조각은 무시)

    시크릿 교체 중에는 ``h1``이 여러 개 올 수 있다.
    """
    parts: Dict[str, List[str]] = {}
    if not signature:
        return parts

    for chunk in signature.split(";"):
        chunk = chunk.strip()
        if not chunk or "=" not in chunk:
            continue
        key, value = chunk.split("=", 1)
        parts.setdefault(key.strip(), []).append(value.strip())
    return parts


def compute_signature(secret: str, ts: str, raw: bytes) -> str:
    """HMAC_SHA256(secret, f"{ts}:{raw}")의 hex 값"""
    payload = ts.encode("utf-8") + b":" + raw
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def verify_paddle_signature(
    raw: bytes,
    signature: Optional[str],
    secret: Optional[str],
    *,
    tolerance_seconds: int = 300,
    now: Optional[float] = None,
) -> bool:
    """웹훅 요청이 Paddle에서 생성되었는지 검증한다.

    헤더 누락, ts/h1 조각 누락, 시크릿 미설정, 허용 오차를 벗어난 타임스탬프,
    서명 불일치는 모두 실패로 처리한다. 예외를 던지지 않는다.
    """

    secret = (secret or "").strip()
    if not secret:
        logger.warning("[PADDLE] no webhook secret configured; rejecting webhook")
        return False

    if not signature:
        logger.warning("[PADDLE] missing Paddle-Signature header")
        return False

    parts = parse_signature_header(signature)
    ts = next(iter(parts.get("ts") or []), None)
    provided = [value for value in parts.get("h1", []) if value]
    if not ts or not provided:
        logger.warning("[PADDLE] signature header missing ts/h1 component")
        return False

    try:
        ts_value = int(ts)
    except ValueError:
        logger.warning("[PADDLE] signature timestamp is not an integer: %s", ts)
        return False

    if tolerance_seconds > 0:
        current = time.time() if now is None else now
        if abs(current - ts_value) > tolerance_seconds:
            logger.warning(
                "[PADDLE] signature timestamp outside tolerance: ts=%s drift=%.0fs",
                ts_value,
                current - ts_value,
            )
            return False

    expected = compute_signature(secret, ts, raw)
    if any(hmac.compare_digest(expected.encode("utf-8"), candidate.encode("utf-8")) for candidate in provided):
        return True

    logger.error("[PADDLE] signature mismatch")
    return False
