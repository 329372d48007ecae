from pydantic_settings import BaseSettings
from typing import Optional
from pydantic import Field

class Settings(BaseSettings):
    SECRET_KEY: str = Field("change-me-in-production")
    ALGORITHM: str = Field("HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(30)
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(7)

    DATABASE_URL: Optional[str] = None
    SQLALCHEMY_DATABASE_URL: Optional[str] = None
    SQL_ECHO: bool = Field(False)

    # AI insight service (OpenAI-compatible chat completions)
    AI_GATEWAY_URL: str = Field("https://ai.gateway.lovable.dev/v1/chat/completions")
    AI_API_KEY: Optional[str] = None
    AI_MODEL: str = Field("google/gemini-2.5-flash")
    AI_TIMEOUT_SECONDS: float = Field(30.0)

    # Roster thresholds, in days since the last check-in
    STALE_CHECKIN_DAYS: int = Field(7)
    INACTIVE_DAYS: int = Field(14)

    LOG_LEVEL: str = Field("INFO")

    model_config = {
        "env_file": ".env",
        "extra": "allow",
    }

    @property
    def effective_database_url(self) -> str:
        return self.SQLALCHEMY_DATABASE_URL or self.DATABASE_URL or "sqlite+aiosqlite:///./mindfit.db"

settings = Settings()
