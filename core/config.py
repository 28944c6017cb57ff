from __future__ import annotations

import os

from pydantic import BaseModel


class Settings(BaseModel):
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "http://localhost:54321")
    SUPABASE_KEY: str = os.getenv("SUPABASE_KEY", "")
    # signs the access tokens handed out by Supabase Auth
    SUPABASE_JWT_SECRET: str = os.getenv("SUPABASE_JWT_SECRET", "dev-change-me")
    JWT_AUDIENCE: str = os.getenv("JWT_AUDIENCE", "authenticated")

    CACHE_TTL_S: float = float(os.getenv("CACHE_TTL_S", "60"))
    CACHE_MAXSIZE: int = int(os.getenv("CACHE_MAXSIZE", "256"))

    MIN_PASSWORD_LENGTH: int = int(os.getenv("MIN_PASSWORD_LENGTH", "6"))
    RECENT_LIMIT: int = int(os.getenv("RECENT_LIMIT", "5"))
    EMAIL_REDIRECT_TO: str = os.getenv("EMAIL_REDIRECT_TO", "http://localhost:8501/")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    CORS_ALLOW_ORIGINS: list[str] = os.getenv("CORS_ALLOW_ORIGINS", "http://localhost:8501").split(
        ","
    )


settings = Settings()
