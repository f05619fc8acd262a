"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide defaults suitable for local development

Collaborators:
  - api/main.py: reads settings for CORS, pool and startup validation
  - container.py: chooses backends (in-memory / postgres / redis)
  - infrastructure/services/hosted_auth_client.py: URL, keys and timeouts
  - identity/auth_users.py: JWT secret and audience for access tokens

Constraints:
  - Lives in API/infrastructure layer, NOT in domain/application
  - No business logic, pure configuration

Notes:
  - Uses pydantic-settings for env parsing and validation
  - Singleton via lru_cache for performance
"""

from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        database_url: PostgreSQL connection string (cooperative tables)
        app_env: Application environment (development/test/production)
        allowed_origins: Comma-separated CORS origins
        auth_url: Base URL of the hosted auth service (GoTrue compatible)
        auth_anon_key: Public API key sent on every hosted auth call
        auth_service_key: Service key for privileged calls (admin-signup)
        auth_jwt_secret: Shared secret used to verify access tokens
        auth_jwt_audience: Expected "aud" claim of access tokens
        backend_timeout_seconds: Timeout for every hosted backend call
        redis_url: Redis connection string for the role selection store
        selection_ttl_seconds: TTL of a persisted selectedRole entry
        selection_store_max_entries: Cap of the in-memory store (LRU eviction)
        cooperative_timezone: IANA timezone for schedule windows
        log_level: Root log level
        log_json: Emit JSON logs (default: True)
    """

    # Required (no defaults)
    database_url: str

    # Environment
    app_env: str = "development"

    # CORS configuration
    allowed_origins: str = "http://localhost:8080"
    cors_allow_credentials: bool = False

    # Hosted auth (managed backend)
    auth_url: str = "http://localhost:54321"
    auth_anon_key: str = ""
    auth_service_key: str = ""
    auth_jwt_secret: str = "dev-secret"
    auth_jwt_audience: str = "authenticated"
    backend_timeout_seconds: float = 10.0

    # Role selection store ("local storage" per session)
    redis_url: str = ""
    redis_socket_timeout_seconds: float = 5.0
    selection_ttl_seconds: int = 60 * 60 * 24 * 7
    selection_store_max_entries: int = 10_000

    # Schedules
    cooperative_timezone: str = "America/Guayaquil"

    # Database - Connection Pool
    db_pool_min_size: int = 2
    db_pool_max_size: int = 10
    db_statement_timeout_ms: int = 30000  # 30 seconds

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Security - Hardening
    max_body_bytes: int = 1 * 1024 * 1024  # 1MB

    @field_validator("backend_timeout_seconds")
    @classmethod
    def backend_timeout_must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("backend_timeout_seconds must be greater than 0")
        return v

    @field_validator("selection_ttl_seconds", "selection_store_max_entries")
    @classmethod
    def selection_limits_must_be_positive(cls, v: int, info) -> int:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be greater than 0")
        return v

    @field_validator("cooperative_timezone")
    @classmethod
    def cooperative_timezone_valid(cls, v: str) -> str:
        tz = (v or "").strip()
        try:
            ZoneInfo(tz)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown cooperative_timezone: {v!r}") from exc
        return tz

    @field_validator("auth_url")
    @classmethod
    def auth_url_strip_slash(cls, v: str) -> str:
        return (v or "").strip().rstrip("/")

    def validate_pool_params(self) -> None:
        """
        Cross-field validation: pool min must not exceed max.
        Called explicitly after instantiation.
        """
        if self.db_pool_min_size > self.db_pool_max_size:
            raise ValueError(
                f"db_pool_min_size ({self.db_pool_min_size}) must be <= "
                f"db_pool_max_size ({self.db_pool_max_size})"
            )

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    def get_timezone(self) -> ZoneInfo:
        return ZoneInfo(self.cooperative_timezone)

    @model_validator(mode="after")
    def validate_security_requirements(self):
        if not self.is_production():
            return self

        insecure_secrets = {"dev-secret", "changeme", "change-me", "password"}
        jwt_secret = (self.auth_jwt_secret or "").strip()
        if not jwt_secret or jwt_secret in insecure_secrets:
            raise ValueError(
                "AUTH_JWT_SECRET must be set to a strong, non-default value in production"
            )
        if len(jwt_secret) < 32:
            raise ValueError(
                "AUTH_JWT_SECRET must be at least 32 characters in production"
            )
        if not self.auth_anon_key.strip():
            raise ValueError("AUTH_ANON_KEY is required in production")
        if not self.redis_url.strip():
            raise ValueError("REDIS_URL is required in production")

        return self

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    def is_test(self) -> bool:
        return self.app_env.strip().lower() in {"test", "testing", "ci"}

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    settings = Settings()
    settings.validate_pool_params()
    return settings
