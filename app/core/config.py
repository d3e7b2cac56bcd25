"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Required fields (e.g. SECRET_KEY) are validated at
load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except secret_key, validated in
    validate_required. Firestore credentials are checked when the client is
    initialized at startup, not here, so tests can run with injected stores.
    """

    # App
    app_name: str = "coworking"
    app_version: str = "1.0.0"
    debug: bool = False

    # Security
    secret_key: SecretStr = SecretStr("")
    # Shared service token accepted as a bearer credential (admin principal).
    auth_secret_key: SecretStr | None = None
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 480  # 8 hours

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Request / middleware
    request_timeout_seconds: int = 60
    request_id_header: str = "X-Request-ID"
    max_request_size: int = 2 * 1024 * 1024  # 2MB

    # Firebase / Firestore: use key (env) or path (file).
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None

    # Redis Cache
    redis_enabled: bool = True
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    # Fixed TTL for every cache entry (no sliding expiration).
    cache_ttl_default: int = 3600
    # Per-collection TTL, e.g. CACHE_TTL_OVERRIDES='{"notificaciones": 300}'
    cache_ttl_overrides: dict[str, int] = {}

    # Rate limiting (slowapi); tests turn it off
    rate_limit_enabled: bool = True

    # Pagination
    default_page_limit: int = 10
    max_page_limit: int = 100

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate required env and numeric ranges."""
        if not self.secret_key.get_secret_value():
            raise ValueError(
                "SECRET_KEY is required. Generate with: openssl rand -hex 32."
            )
        if self.cache_ttl_default <= 0:
            raise ValueError("CACHE_TTL_DEFAULT must be a positive number of seconds")
        for collection, ttl in self.cache_ttl_overrides.items():
            if ttl <= 0:
                raise ValueError(
                    f"CACHE_TTL_OVERRIDES[{collection!r}] must be a positive number of seconds"
                )
        return self

    def cache_ttl_for(self, collection: str) -> int:
        """Return the cache TTL (seconds) for a collection."""
        return self.cache_ttl_overrides.get(collection, self.cache_ttl_default)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
