from functools import lru_cache
from urllib.parse import urlparse

from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Bale"
    app_env: str = "development"  # development, testing, production
    debug: bool = False
    enable_openapi: bool = True

    # Security
    log_user_emails: bool = False  # GDPR: keep emails out of logs unless enabled
    allowed_site_domains: list[str] = ["localhost", "127.0.0.1"]

    # Database
    database_url: str
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_ssl_mode: str = "prefer"  # disable, prefer, require, verify-ca, verify-full

    # Hosted auth provider (GoTrue-compatible)
    auth_url: str = "http://localhost:54321/auth/v1"
    auth_anon_key: str = ""
    auth_jwt_secret: str
    auth_jwt_algorithm: str = "HS256"
    auth_jwt_audience: str = "authenticated"
    auth_request_timeout_seconds: float = 10.0
    session_cookie_prefix: str = "sb-"
    session_cookie_name: str = "sb-bale-auth-token"
    session_cookie_secure: bool = True

    # Demo account (shared credential, no user record)
    demo_email: str = "demo@bale.inventory"
    demo_password: str = "demo1234"

    # Site
    site_url: str = "http://localhost:3000"  # Origin for magic links and redirects
    cors_origins: list[str] = ["http://localhost:3000"]

    # Invites
    invite_expire_days: int = 7
    invite_direct_expire_hours: int = 48
    invite_code_max_attempts: int = 10

    # Metrics
    metrics_api_key: str | None = None  # If set, /metrics requires this key

    # Email (Resend)
    resend_api_key: str | None = None  # If not set, emails are logged but not sent
    email_from: str = "noreply@bale.inventory"
    email_send_timeout_seconds: int = 10

    # Rate limiting
    rate_limit_storage_uri: str | None = None  # e.g. "redis://localhost:6379/0"

    @field_validator("auth_jwt_secret")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        if len(v) < 32:
            raise ValueError("AUTH_JWT_SECRET must be at least 32 characters")
        return v

    @field_validator("session_cookie_name")
    @classmethod
    def validate_cookie_name(cls, v: str, info: ValidationInfo) -> str:
        """The session cookie must be recognisable by the edge pre-check."""
        prefix = info.data.get("session_cookie_prefix", "sb-")
        if not v.startswith(prefix) or "auth-token" not in v:
            raise ValueError(
                f"SESSION_COOKIE_NAME must start with '{prefix}' and contain 'auth-token'"
            )
        return v

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        """Reject wildcards, credentials are always allowed."""
        for origin in v:
            if origin == "*":
                raise ValueError(
                    "CORS wildcard '*' is not allowed when allow_credentials=True. "
                    "Specify explicit origins instead."
                )
        return v

    @field_validator("site_url")
    @classmethod
    def validate_site_url(cls, v: str, info: ValidationInfo) -> str:
        """Magic links are built from SITE_URL, so it must be an allowed domain."""
        allowed = info.data.get("allowed_site_domains", ["localhost", "127.0.0.1"])
        hostname = urlparse(v).hostname or ""

        if not any(hostname == domain or hostname.endswith(f".{domain}") for domain in allowed):
            raise ValueError(
                f"SITE_URL domain '{hostname}' not in allowed list. "
                f"Add it to ALLOWED_SITE_DOMAINS or use: {allowed}"
            )
        return v.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    return Settings()
