"""환경 변수 기반 애플리케이션 설정을 중앙에서 관리합니다."""

from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./survey_platform.db"
    SECRET_KEY: str = "change-me-to-a-random-secret-key"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]
    API_PREFIX: str = "/api"

    # JWT
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    # 만료된 토큰도 이 시간 안에서는 refresh 로 재발급할 수 있다.
    TOKEN_REFRESH_GRACE_MINUTES: int = 1440

    # Accounts
    PASSWORD_MIN_LENGTH: int = 6
    ALLOW_ADMIN_REGISTRATION: bool = True

    # Frontend
    FRONTEND_DIR: str = str(Path(__file__).resolve().parents[2] / "frontend")

    class Config:
        # 실행 cwd와 무관하게 backend/.env를 로드한다.
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()
