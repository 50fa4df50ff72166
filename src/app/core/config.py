"""
애플리케이션 설정 관리
"""
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_FILE_PATH = Path(__file__).resolve()


def _collect_env_files(file_path: Path) -> tuple[Path, ...]:
    """환경 파일 후보를 가까운 디렉터리부터 수집"""

    collected: list[Path] = []
    seen: set[Path] = set()

    for directory in file_path.parents:
        for name in (".env", ".env.local"):
            candidate = directory / name
            if candidate.exists() and candidate not in seen:
                collected.append(candidate)
                seen.add(candidate)

    return tuple(collected)


_ENV_FILES = _collect_env_files(_FILE_PATH)


def _load_dotenv_files() -> None:
    """프로젝트 전체에서 활용할 .env 파일들을 순차적으로 로드"""

    for dotenv_path in _ENV_FILES:
        load_dotenv(dotenv_path, override=False)


_load_dotenv_files()


class Settings(BaseSettings):
    """애플리케이션 설정"""

    model_config = SettingsConfigDict(
        env_file=tuple(str(path) for path in _ENV_FILES) if _ENV_FILES else None,
        case_sensitive=True,
        extra="allow",  # 추가 환경변수 허용
    )

    # 서버 설정
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False
    SERVER_BASE_URL: str = "http://localhost:8000"
    # 프론트엔드 주소 (대시보드/데모 링크 생성용)
    SITE_URL: str = "http://localhost:5173"

    # Supabase 설정
    SUPABASE_URL: str
    SUPABASE_ANON_KEY: str
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None

    # 로깅 설정
    LOG_LEVEL: str = "INFO"

    # Paddle 웹훅 설정
    PADDLE_WEBHOOK_SECRET: Optional[str] = None
    # 서명 타임스탬프 허용 오차(초). 0이면 검사하지 않음
    PADDLE_WEBHOOK_TOLERANCE_SECONDS: int = 300

    # 알림 메일 설정
    ADMIN_NOTIFICATION_EMAIL: str = "admin@menublend.com"
    NOTIFICATION_ENDPOINT_URL: Optional[str] = None
    NOTIFICATION_API_KEY: Optional[str] = None
    NOTIFICATION_TIMEOUT_SECONDS: float = 10.0

    # Resend 설정
    RESEND_API_KEY: Optional[str] = None
    RESEND_API_BASE_URL: str = "https://api.resend.com"
    EMAIL_FROM: str = "Menublend <onboarding@resend.dev>"

    # 데모 디시 가격
    DEMO_DISH_PRICE: float = 99.0
    DEMO_DISH_CURRENCY: str = "USD"

    @field_validator('SUPABASE_URL')
    @classmethod
    def validate_supabase_url(cls, v):
        if not v:
            raise ValueError('SUPABASE_URL은 필수입니다')
        return v

    @field_validator('SUPABASE_ANON_KEY')
    @classmethod
    def validate_supabase_anon_key(cls, v):
        if not v:
            raise ValueError('SUPABASE_ANON_KEY는 필수입니다')
        return v

    @field_validator('PADDLE_WEBHOOK_TOLERANCE_SECONDS')
    @classmethod
    def validate_tolerance(cls, v):
        if v < 0:
            raise ValueError('PADDLE_WEBHOOK_TOLERANCE_SECONDS는 0 이상이어야 합니다')
        return v

    @property
    def notification_endpoint(self) -> str:
        """메일 렌더링 엔드포인트 주소 (미설정 시 자체 서버)"""
        if self.NOTIFICATION_ENDPOINT_URL:
            return self.NOTIFICATION_ENDPOINT_URL
        return f"{self.SERVER_BASE_URL.rstrip('/')}/api/v1/notifications/email"


# 전역 설정 인스턴스
settings = Settings()
