"""
campus_gate.auth.jwt

Session-token issuing and validation helpers.

Responsibilities:
- Issue signed session tokens carried in the session cookie.
- Decode and validate tokens with strict claim requirements (iss/aud/exp/iat/sub).

Note:
- Production deployments often prefer RS256 + JWKS; this repo uses HS256 for simplicity.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError


@dataclass(frozen=True, slots=True)
class JwtConfig:
    # Algorithm/issuer/audience are enforced during decoding.
    alg: str
    issuer: str
    audience: str
    secret: str


class JwtValidationError(Exception):
    pass


def issue_token(
    *,
    cfg: JwtConfig,
    subject: str,
    email: str | None = None,
    ttl: timedelta = timedelta(hours=1),
    now: datetime | None = None,
) -> str:
    now = now or datetime.now(tz=UTC)
    # Keep payload minimal and stable; role data never travels in the token.
    payload: dict[str, Any] = {
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    if email:
        payload["email"] = email
    return jwt.encode(payload, cfg.secret, algorithm=cfg.alg)


def decode_and_validate(*, cfg: JwtConfig, token: str) -> dict[str, Any]:
    try:
        # jwt.decode enforces signature + registered claims (issuer/audience/exp, etc.).
        return jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            issuer=cfg.issuer,
            audience=cfg.audience,
            options={
                "require": ["exp", "iat", "iss", "aud", "sub"],
            },
        )
    except InvalidTokenError as e:
        raise JwtValidationError(str(e)) from e


def expires_at(payload: dict[str, Any]) -> datetime:
    return datetime.fromtimestamp(int(payload["exp"]), tz=UTC)


# --- Module Notes -----------------------------------------------------------
# Token issuing is used by:
# - `auth/identity.py` (sign-in and rolling refresh of the session cookie)
# - `api/routers/dev_auth.py` (dev convenience, via the identity provider)
