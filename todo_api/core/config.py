from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    DATABASE_URL: str
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    VERIFICATION_TOKEN_EXPIRE_HOURS: int = 24

    API_PREFIX: str = "/api/v1"

    # Postgres session variable read by the row-level security policies
    TENANT_SETTING_NAME: str = "app.current_tenant_id"

    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = 1025
    MAIL_FROM: str = "noreply@good-todo.local"

    FRONTEND_URL: str = "http://localhost:3000"
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    @property
    def verification_url(self):
        return f"{self.FRONTEND_URL.rstrip('/')}/verify-email"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
