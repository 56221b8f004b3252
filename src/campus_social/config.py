"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    mongo_uri: str
    mongo_database: str = "campus_social"
    mongo_timeout_ms: int = 5000
    request_timeout_seconds: float = 10.0
    bcrypt_rounds: int = 10
    upload_dir: str = "uploads"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    supabase_bucket: str = "profile-images"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def uses_supabase_storage(self) -> bool:
        """Return True when Supabase Storage credentials are configured."""
        return bool(self.supabase_url and self.supabase_service_key)
