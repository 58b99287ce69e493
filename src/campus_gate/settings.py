"""
campus_gate.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (e.g., session signing secret).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Enterprise pattern:
    - Strict env-driven configuration
    - Defaults safe for local dev
    - Single settings object injected across layers
    """

    model_config = SettingsConfigDict(env_prefix="CAMPUS_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables and dev sessions.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "campus-gate"
    log_level: str = "INFO"
    # "console" is easier to read locally; deployments ship JSON.
    log_format: Literal["json", "console"] = "json"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Session tokens (identity provider)
    jwt_alg: str = "HS256"
    jwt_issuer: str = "campus-gate"
    jwt_audience: str = "campus-web"
    jwt_secret: str = Field(default="dev-secret-change-me-before-deploying", repr=False)

    session_cookie_name: str = "campus_session"
    session_ttl_minutes: int = Field(default=60, ge=1)
    # Sessions closer than this to expiry are re-issued by the edge gate.
    session_refresh_window_minutes: int = Field(default=10, ge=0)
    session_cookie_secure: bool = False

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./campus.db"

    # Edge gate
    sign_in_path: str = "/auth"

    # Client role cache / resolver
    # Freshness window of the client role cache: minutes, not hours.
    role_cache_ttl_seconds: int = Field(default=300, ge=1, le=3600)
    role_cache_path: str | None = None
    role_retry_max_attempts: int = Field(default=2, ge=1)
    role_retry_delay_ms: int = Field(default=200, ge=0)

    @property
    def session_ttl(self) -> timedelta:
        return timedelta(minutes=self.session_ttl_minutes)

    @property
    def session_refresh_window(self) -> timedelta:
        return timedelta(minutes=self.session_refresh_window_minutes)

    @property
    def role_cache_ttl(self) -> timedelta:
        return timedelta(seconds=self.role_cache_ttl_seconds)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# The edge gate and the client-side AuthSession read different subsets of these
# settings; both are built from the same object so deployments stay consistent.
