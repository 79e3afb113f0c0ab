from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict


# Load .env early for local development
load_dotenv()


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True)

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./app.db")

    # Security
    app_secret_key: str = os.getenv("APP_SECRET_KEY", "dev-secret-change-me")
    access_token_exp_minutes: int = int(os.getenv("ACCESS_TOKEN_EXP_MINUTES", str(60 * 24 * 7)))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_dir: str = os.getenv("LOG_DIR", "./logs")

    # OpenRouteService directions
    ors_api_key: str = os.getenv("ORS_API_KEY", "")
    ors_base_url: str = os.getenv("ORS_BASE_URL", "https://api.openrouteservice.org/v2/directions")
    ors_profile: str = os.getenv("ORS_PROFILE", "foot-hiking")
    ors_timeout_seconds: float = float(os.getenv("ORS_TIMEOUT_SECONDS", "15"))

    # Photo uploads
    uploads_dir: str = os.getenv("UPLOADS_DIR", "./uploads")

    # HTTP
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")  # comma-separated

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()] or ["*"]


settings = Settings()
