"""환경 변수 기반 애플리케이션 설정을 중앙에서 관리합니다."""

from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./timeclock.db"
    SECRET_KEY: str = "change-me-to-a-random-secret-key"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # JWT
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 720

    # 외부 스케줄러(cron) 호출 인증용 시크릿. 비어 있으면 cron 엔드포인트는 모든 호출을 거부한다.
    CRON_SECRET: str = ""

    # 영업시간 기준 시간대. 비어 있으면 서버 로컬 시간을 사용한다.
    TIMEZONE: str = ""

    # No-overtime 정책 마감 시각 (월~토 / 일)
    WEEKDAY_CLOSING_HOUR: int = 20
    WEEKDAY_CLOSING_MINUTE: int = 0
    SUNDAY_CLOSING_HOUR: int = 18
    SUNDAY_CLOSING_MINUTE: int = 0

    # Transaction retry (exponential backoff)
    TX_MAX_RETRIES: int = 3
    TX_BASE_DELAY_MS: int = 100
    TX_MAX_DELAY_MS: int = 1000

    # 검토 대기 우선순위 기준 (일)
    REVIEW_HIGH_PRIORITY_DAYS: float = 3
    REVIEW_MEDIUM_PRIORITY_DAYS: float = 1

    class Config:
        # 실행 cwd와 무관하게 backend/.env를 로드한다.
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()
