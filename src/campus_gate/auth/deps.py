"""
campus_gate.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Expose the principal established by the edge gate to route handlers.
- Enforce role requirements in handlers via reusable dependency factories,
  always against the live Role Store.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from campus_gate.auth.identity import SessionIdentityProvider
from campus_gate.auth.models import Principal
from campus_gate.auth.roles import Role
from campus_gate.auth.store import RoleStore, RoleStoreError
from campus_gate.observability.logging import get_logger

log = get_logger(__name__)


def identity_from_app(request: Request) -> SessionIdentityProvider:
    return request.app.state.identity  # type: ignore[attr-defined]


def role_store_from_app(request: Request) -> RoleStore:
    return request.app.state.role_store  # type: ignore[attr-defined]


def get_principal(request: Request) -> Principal:
    # Set by EdgeGateMiddleware after refreshing the session cookie.
    principal: Principal | None = getattr(request.state, "principal", None)
    if principal is None:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Not signed in")
    return principal


async def live_role(store: RoleStore, principal: Principal) -> Role:
    try:
        role = await store.get_role(principal.id)
    except RoleStoreError as e:
        # Fail closed: an unreadable role is the least-privileged role.
        log.warning("live_role_read_failed", principal_id=principal.id, error=str(e))
        return Role.user
    return role or Role.user


def require_roles(*allowed: Role):
    allowed_set = frozenset(allowed)

    async def _dep(
        principal: Principal = Depends(get_principal),
        store: RoleStore = Depends(role_store_from_app),
    ) -> Role:
        role = await live_role(store, principal)
        if role not in allowed_set:
            raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Insufficient role")
        return role

    return _dep


async def require_active_trainer(
    principal: Principal = Depends(get_principal),
    store: RoleStore = Depends(role_store_from_app),
) -> Principal:
    try:
        active = await store.has_active_trainer_record(principal.id)
    except RoleStoreError as e:
        log.warning("live_trainer_read_failed", principal_id=principal.id, error=str(e))
        active = False
    if not active:
        raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="No active trainer record")
    return principal


# --- Module Notes -----------------------------------------------------------
# These checks repeat the edge gate inside handlers so a route stays protected
# even if it is mounted outside the gated namespaces.
