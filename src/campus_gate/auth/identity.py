"""
campus_gate.auth.identity

Server-side identity provider backed by a signed session cookie.

Responsibilities:
- Re-validate the session cookie on every request (`refresh_session`).
- Rotate the cookie when the session is close to expiry, or delete it when invalid.
- Issue fresh session cookies on sign-in.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from campus_gate.auth.jwt import (
    JwtConfig,
    JwtValidationError,
    decode_and_validate,
    expires_at,
    issue_token,
)
from campus_gate.auth.models import Principal
from campus_gate.observability.logging import get_logger
from campus_gate.settings import Settings

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class SessionCookie:
    name: str
    value: str
    max_age: int
    secure: bool = False

    @property
    def is_deletion(self) -> bool:
        return self.max_age <= 0


@dataclass(frozen=True, slots=True)
class SessionRefresh:
    principal: Principal | None
    cookies: tuple[SessionCookie, ...] = field(default_factory=tuple)


class IdentityProvider(Protocol):
    async def refresh_session(self, cookies: Mapping[str, str]) -> SessionRefresh: ...


def jwt_config(settings: Settings) -> JwtConfig:
    return JwtConfig(
        alg=settings.jwt_alg,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        secret=settings.jwt_secret,
    )


class SessionIdentityProvider:
    def __init__(self, *, settings: Settings) -> None:
        self._cfg = jwt_config(settings)
        self._cookie_name = settings.session_cookie_name
        self._ttl = settings.session_ttl
        self._refresh_window = settings.session_refresh_window
        self._secure = settings.session_cookie_secure

    @property
    def cookie_name(self) -> str:
        return self._cookie_name

    def issue_session(self, principal: Principal, *, now: datetime | None = None) -> SessionCookie:
        token = issue_token(
            cfg=self._cfg,
            subject=principal.id,
            email=principal.email,
            ttl=self._ttl,
            now=now,
        )
        return SessionCookie(
            name=self._cookie_name,
            value=token,
            max_age=int(self._ttl.total_seconds()),
            secure=self._secure,
        )

    def clear_session(self) -> SessionCookie:
        return SessionCookie(name=self._cookie_name, value="", max_age=0, secure=self._secure)

    async def refresh_session(self, cookies: Mapping[str, str]) -> SessionRefresh:
        token = cookies.get(self._cookie_name)
        if not token:
            return SessionRefresh(principal=None)

        try:
            payload = decode_and_validate(cfg=self._cfg, token=token)
        except JwtValidationError as e:
            log.info("session_invalid", error=str(e))
            return SessionRefresh(principal=None, cookies=(self.clear_session(),))

        subject = str(payload.get("sub", ""))
        if not subject:
            return SessionRefresh(principal=None, cookies=(self.clear_session(),))

        principal = Principal(id=subject, email=payload.get("email"))
        now = datetime.now(tz=UTC)
        remaining: timedelta = expires_at(payload) - now
        if remaining < self._refresh_window:
            return SessionRefresh(
                principal=principal,
                cookies=(self.issue_session(principal, now=now),),
            )
        return SessionRefresh(principal=principal)


# --- Module Notes -----------------------------------------------------------
# Rotated cookies are copied onto every outgoing response by the edge gate,
# including redirects and allowed requests.
