"""
Pinboard configuration.

Every setting can be overridden from the environment or a ``.env`` file
(names are case-insensitive). List-valued settings accept either a JSON
array or a comma-separated string.
"""
import json
from functools import lru_cache
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def split_list(raw: str) -> List[str]:
    """``'["a","b"]'`` or ``"a,b"`` -> ``["a", "b"]``."""
    raw = raw.strip()
    if raw.startswith("["):
        try:
            return [str(item).strip() for item in json.loads(raw)]
        except json.JSONDecodeError:
            raw = raw.strip("[]")
    return [item.strip().strip('"') for item in raw.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # =========================================================================
    # Service
    # =========================================================================
    APP_NAME: str = "Pinboard API"
    APP_DESCRIPTION: str = "Pins, boards, follows and feeds on MongoDB"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    HOST: str = "0.0.0.0"
    PORT: int = 8000
    RELOAD: bool = True

    API_V1_PREFIX: str = "/api"
    DOCS_URL: str = "/docs"
    REDOC_URL: str = "/redoc"
    OPENAPI_URL: str = "/openapi.json"

    # =========================================================================
    # MongoDB
    # =========================================================================
    MONGODB_URL: str = "mongodb://localhost:27017"
    MONGODB_DB_NAME: str = "pinboard"
    MONGODB_MIN_POOL_SIZE: int = 1
    MONGODB_MAX_POOL_SIZE: int = 10
    MONGODB_MAX_IDLE_TIME_MS: int = 30000
    # Off by default: transactions need a replica set, standalone servers
    # fall back to compensating writes
    MONGODB_USE_TRANSACTIONS: bool = False

    # =========================================================================
    # Accounts & tokens
    # =========================================================================
    SECRET_KEY: str = "your-super-secret-key-change-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    AUTH_TOKEN_HEADER: str = "x-auth-token"
    PASSWORD_MIN_LENGTH: int = 6
    BCRYPT_ROUNDS: int = 12

    # =========================================================================
    # HTTP edge: CORS and rate limiting
    # =========================================================================
    CORS_ORIGINS: str = "*"
    CORS_ALLOW_METHODS: str = "GET,POST,PUT,DELETE,OPTIONS"
    CORS_ALLOW_HEADERS: str = "Content-Type,Authorization,x-auth-token"
    CORS_ALLOW_CREDENTIALS: bool = True

    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_REQUESTS: int = 100
    RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60

    # =========================================================================
    # Uploads
    # =========================================================================
    UPLOAD_DIR: str = "uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    MAX_UPLOAD_SIZE_BYTES: int = 5 * 1024 * 1024

    # =========================================================================
    # Listings
    # =========================================================================
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100
    TRENDING_LIMIT: int = 50

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def cors_origins_list(self) -> List[str]:
        return split_list(self.CORS_ORIGINS) or ["*"]

    @property
    def cors_methods_list(self) -> List[str]:
        return split_list(self.CORS_ALLOW_METHODS) or ["*"]

    @property
    def cors_headers_list(self) -> List[str]:
        return split_list(self.CORS_ALLOW_HEADERS) or ["*"]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
