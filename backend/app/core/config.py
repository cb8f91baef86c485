# backend/app/core/config.py
"""
Application settings (pydantic-settings).

Values come from the environment first, then `.env`, then the defaults
below. The defaults are for local development only: in production the
built-in SECRET_KEY and ENCRYPTION_KEY are refused at startup.

Both keys are read once here and handed to the token codec and note
cipher by the dependency layer; nothing rewrites them at runtime.
"""
import base64
import binascii
from functools import lru_cache
from typing import List

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

INSECURE_SECRET_KEY = "INSECURE_DEV_KEY_CHANGE_IN_PRODUCTION"
# base64 of b"INSECURE_DEV_NOTE_KEY_0123456789" (32 bytes)
INSECURE_ENCRYPTION_KEY = "SU5TRUNVUkVfREVWX05PVEVfS0VZXzAxMjM0NTY3ODk="

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./notora.db"


class Settings(BaseSettings):
    # ─────────────────────────────────────────────────────────────
    # Application
    # ─────────────────────────────────────────────────────────────
    PROJECT_NAME: str = "Notora"
    PROJECT_VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    # "production" turns on the secret checks below
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # ─────────────────────────────────────────────────────────────
    # Access tokens: HS256 JWT, short-lived
    # ─────────────────────────────────────────────────────────────
    SECRET_KEY: str = INSECURE_SECRET_KEY
    ACCESS_TOKEN_EXPIRE_SECONDS: int = 300

    # ─────────────────────────────────────────────────────────────
    # Opaque server-side tokens
    # ─────────────────────────────────────────────────────────────
    REFRESH_TOKEN_EXPIRE_SECONDS: int = 7 * 24 * 3600
    RESET_TOKEN_EXPIRE_MINUTES: int = 10
    # Revoke every session of an account when an already-rotated
    # refresh token is presented again
    REFRESH_REUSE_REVOKES_ALL: bool = False
    USER_SALT_LENGTH: int = 16

    # ─────────────────────────────────────────────────────────────
    # Note encryption at rest (AES-256-GCM, base64 key)
    # ─────────────────────────────────────────────────────────────
    ENCRYPTION_KEY: str = INSECURE_ENCRYPTION_KEY
    ENCRYPTED_NOTES_ENABLED: bool = True

    # ─────────────────────────────────────────────────────────────
    # Cookies and links
    # ─────────────────────────────────────────────────────────────
    # Empty means a host-only cookie
    COOKIE_DOMAIN: str = ""
    COOKIE_SECURE: bool = False
    # Prefix for reset and share links
    APP_BASE_URL: str = "http://localhost:8000"

    # ─────────────────────────────────────────────────────────────
    # Database
    # ─────────────────────────────────────────────────────────────
    DATABASE_URL: str = DEFAULT_DATABASE_URL
    # Logs every statement with its parameters; keep off in production
    DATABASE_ECHO: bool = False

    # Comma-separated; empty means no CORS middleware at all
    CORS_ORIGINS: str = "http://localhost:5173,http://127.0.0.1:5173"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("ENCRYPTION_KEY")
    @classmethod
    def validate_encryption_key(cls, v: str) -> str:
        try:
            raw = base64.b64decode(v.strip(), validate=True)
        except (binascii.Error, ValueError) as ex:
            raise ValueError("ENCRYPTION_KEY must be valid base64") from ex
        if len(raw) != 32:
            raise ValueError("ENCRYPTION_KEY must decode to exactly 32 bytes")
        return v.strip()

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def normalize_database_url(cls, v: str) -> str:
        """
        Point plain driver URLs at the async drivers.

        postgres:// and postgresql:// -> postgresql+asyncpg://
        sqlite:///                    -> sqlite+aiosqlite:///
        """
        if v is None:
            return DEFAULT_DATABASE_URL

        url = v.strip()
        for prefix, async_prefix in (
            ("postgres://", "postgresql+asyncpg://"),
            ("postgresql://", "postgresql+asyncpg://"),
            ("sqlite:///", "sqlite+aiosqlite:///"),
        ):
            if url.startswith(prefix):
                return async_prefix + url[len(prefix):]
        return url

    @model_validator(mode="after")
    def reject_dev_secrets_in_production(self) -> "Settings":
        if self.is_production:
            if self.SECRET_KEY == INSECURE_SECRET_KEY:
                raise ValueError("SECRET_KEY must be set in production")
            if self.ENCRYPTION_KEY == INSECURE_ENCRYPTION_KEY:
                raise ValueError("ENCRYPTION_KEY must be set in production")
        return self

    @property
    def BACKEND_CORS_ORIGINS(self) -> List[str]:
        """Allowed origins as a list. Never a wildcard: cookies require explicit origins."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def encryption_key_bytes(self) -> bytes:
        return base64.b64decode(self.ENCRYPTION_KEY)

    @property
    def reset_token_expire_seconds(self) -> int:
        return self.RESET_TOKEN_EXPIRE_MINUTES * 60


@lru_cache()
def get_settings() -> Settings:
    """Load settings once per process (also the FastAPI dependency)."""
    return Settings()


# Module-level instance for import-time wiring (engine, app factory)
settings = get_settings()
