"""
Application configuration using pydantic-settings.
All config is loaded from environment variables with sensible defaults.
"""

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Room Admission API"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_SOCKET_TIMEOUT: float = 5.0

    # Rooms
    ROOM_CAPACITY: int = Field(default=2, ge=1)
    ROOM_TTL_SECONDS: int = Field(default=600, gt=0)  # 10 minutes

    # Admission
    ADMISSION_STRATEGY: Literal["script", "optimistic"] = "script"
    ADMISSION_MAX_ATTEMPTS: int = Field(default=10, ge=1)

    # Session cookie; None means "secure only in production"
    COOKIE_SECURE: Optional[bool] = None

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
    }

    @property
    def cookie_secure(self) -> bool:
        if self.COOKIE_SECURE is not None:
            return self.COOKIE_SECURE
        return self.ENVIRONMENT == "production"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
