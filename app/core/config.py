"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "job_portal"

    # JWT session token
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # Session cookie
    cookie_name: str = "token"
    environment: str = "development"

    # Cloudinary (media store for logos, avatars, resumes)
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    max_upload_mb: int = 5

    # App
    api_prefix: str = "/api/v1"
    frontend_origins: List[str] = ["http://localhost:5173"]
    enforce_company_ownership: bool = False
    debug: bool = False
    log_level: str = "INFO"

    @property
    def cookie_secure(self) -> bool:
        """Secure cookies only when deployed behind HTTPS."""
        return self.environment == "production"

    @property
    def cookie_max_age(self) -> int:
        """Cookie lifetime in seconds, aligned with token expiry."""
        return self.jwt_expire_minutes * 60

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
