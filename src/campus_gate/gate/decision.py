"""
campus_gate.gate.decision

The edge request gate as a framework-free decision procedure.

Responsibilities:
- Refresh the session for every request and carry rotated cookies on every decision.
- Apply the route table: sign-in redirect, site-root redirect, or admin-root redirect.
- Always read the live Role Store; fail closed on any backend error.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from urllib.parse import urlencode

from campus_gate.auth.identity import IdentityProvider, SessionCookie, SessionRefresh
from campus_gate.auth.models import Principal
from campus_gate.auth.roles import Role
from campus_gate.auth.store import RoleStore
from campus_gate.gate.routes import Protection, Requirement, classify
from campus_gate.observability.logging import get_logger

log = get_logger(__name__)


class GateOutcome(enum.StrEnum):
    allow = "allow"
    sign_in = "sign_in"
    denied = "denied"


@dataclass(frozen=True, slots=True)
class GateDecision:
    outcome: GateOutcome
    reason: str
    principal: Principal | None = None
    role: Role | None = None
    location: str | None = None
    cookies: tuple[SessionCookie, ...] = ()

    @property
    def allowed(self) -> bool:
        return self.outcome is GateOutcome.allow


class AccessGate:
    """
    Stateless per request: holds only its collaborators, never a role cache.
    """

    def __init__(
        self,
        *,
        identity: IdentityProvider,
        store: RoleStore,
        sign_in_path: str = "/auth",
    ) -> None:
        self._identity = identity
        self._store = store
        self._sign_in_path = sign_in_path

    def sign_in_location(self, path: str) -> str:
        return f"{self._sign_in_path}?{urlencode({'redirect': path})}"

    async def evaluate(self, path: str, cookies: Mapping[str, str]) -> GateDecision:
        refresh = await self._refresh(cookies)
        principal, rotated = refresh.principal, refresh.cookies

        protection = classify(path)
        if protection is None:
            return GateDecision(
                outcome=GateOutcome.allow,
                reason="unprotected",
                principal=principal,
                cookies=rotated,
            )

        if principal is None:
            return GateDecision(
                outcome=GateOutcome.sign_in,
                reason="unauthenticated",
                location=self.sign_in_location(path),
                cookies=rotated,
            )

        return await self._authorize(protection, principal, rotated)

    async def _authorize(
        self,
        protection: Protection,
        principal: Principal,
        rotated: tuple[SessionCookie, ...],
    ) -> GateDecision:
        namespace = protection.namespace

        if namespace.requirement is Requirement.active_trainer:
            if not await self._has_trainer_record(principal):
                return self._deny(principal, None, namespace.denied_redirect, "no_active_trainer", rotated)
            return GateDecision(
                outcome=GateOutcome.allow,
                reason="trainer",
                principal=principal,
                cookies=rotated,
            )

        role = await self._role(principal)
        if role not in namespace.allowed_roles:
            return self._deny(principal, role, namespace.denied_redirect, "namespace_role", rotated)

        for rule in protection.sub_rules:
            if role not in rule.allowed_roles:
                return self._deny(principal, role, rule.denied_redirect, "sub_area_role", rotated)

        return GateDecision(
            outcome=GateOutcome.allow,
            reason="role",
            principal=principal,
            role=role,
            cookies=rotated,
        )

    def _deny(
        self,
        principal: Principal,
        role: Role | None,
        location: str,
        reason: str,
        rotated: tuple[SessionCookie, ...],
    ) -> GateDecision:
        return GateDecision(
            outcome=GateOutcome.denied,
            reason=reason,
            principal=principal,
            role=role,
            location=location,
            cookies=rotated,
        )

    async def _refresh(self, cookies: Mapping[str, str]) -> SessionRefresh:
        try:
            return await self._identity.refresh_session(cookies)
        except Exception:
            # Fail closed: an unreachable identity provider means "signed out" for this request.
            log.warning("gate_session_refresh_failed", exc_info=True)
            return SessionRefresh(principal=None)

    async def _role(self, principal: Principal) -> Role:
        try:
            role = await self._store.get_role(principal.id)
        except Exception:
            log.warning("gate_role_read_failed", principal_id=principal.id, exc_info=True)
            return Role.user
        # Missing row (or an unrecognized value) is the least-privileged role.
        return role or Role.user

    async def _has_trainer_record(self, principal: Principal) -> bool:
        try:
            return await self._store.has_active_trainer_record(principal.id)
        except Exception:
            log.warning("gate_trainer_read_failed", principal_id=principal.id, exc_info=True)
            return False


# --- Module Notes -----------------------------------------------------------
# Worst case per request: one session refresh and one store read. Unprotected paths
# stop after the refresh.
