"""
campus_gate.client.session

The client-side auth session: one explicit object per client context.

Responsibilities:
- React to identity events (initial session, sign-in, token refresh, sign-out).
- Paint optimistically from the role cache, then resolve the real role once per
  principal with a single-flight guard.
- Discard results that arrive after sign-out or an identity switch (per-attempt
  cancellation tokens checked before every commit).
- Expose the real role, the effective role (with admin-only simulation),
  organizations, profile and trainer status to the UI layer.

Lifecycle: construct on app start -> `start()` -> `handle_event(...)` as identity
events arrive -> `sign_out()` (or a signed-out event) tears the state down.
"""

from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass
from typing import Protocol

from campus_gate.auth.models import OrganizationMembership, Principal, UserProfile
from campus_gate.auth.roles import Role
from campus_gate.auth.store import RoleStore, RoleStoreError
from campus_gate.client.arbiter import RoleArbiter
from campus_gate.client.cache import RoleCache
from campus_gate.client.resolver import Resolution, RoleResolver
from campus_gate.client.retry import RetryPolicy
from campus_gate.observability.logging import get_logger

log = get_logger(__name__)


class IdentityError(Exception):
    """The identity provider could not be reached or answered unexpectedly."""


class IdentityClient(Protocol):
    async def get_current_principal(self) -> Principal | None: ...

    async def sign_out(self) -> None: ...


class SessionState(enum.StrEnum):
    idle = "idle"
    resolving = "resolving"
    resolved = "resolved"


class AuthEventKind(enum.StrEnum):
    initial_session = "INITIAL_SESSION"
    signed_in = "SIGNED_IN"
    signed_out = "SIGNED_OUT"
    token_refreshed = "TOKEN_REFRESHED"
    user_updated = "USER_UPDATED"


@dataclass(frozen=True, slots=True)
class AuthEvent:
    kind: AuthEventKind
    principal: Principal | None = None


class ResolutionToken:
    """Cancellation token for one resolution attempt."""

    __slots__ = ("principal_id", "_cancelled")

    def __init__(self, principal_id: str) -> None:
        self.principal_id = principal_id
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class AuthSession:
    def __init__(
        self,
        *,
        identity: IdentityClient,
        store: RoleStore,
        cache: RoleCache,
        policy: RetryPolicy | None = None,
    ) -> None:
        self._identity = identity
        self._store = store
        self._cache = cache
        self._resolver = RoleResolver(store, policy=policy)
        self._arbiter = RoleArbiter()

        self._principal: Principal | None = None
        self._state = SessionState.idle
        self._memberships: tuple[OrganizationMembership, ...] = ()
        self._current_organization_id: str | None = None
        self._profile: UserProfile | None = None
        self._is_trainer = False

        # Principal id whose resolution has been committed (success or degraded).
        self._resolved_for: str | None = None
        # In-flight guard: set before the first await, cleared in `finally`.
        self._inflight: ResolutionToken | None = None
        self._tasks: set[asyncio.Task[None]] = set()

    # -- read side ---------------------------------------------------------

    @property
    def principal(self) -> Principal | None:
        return self._principal

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def loading(self) -> bool:
        return self._inflight is not None

    @property
    def role(self) -> Role | None:
        return self._arbiter.real_role

    @property
    def simulated_role(self) -> Role | None:
        return self._arbiter.simulated_role

    @property
    def effective_role(self) -> Role | None:
        return self._arbiter.effective

    @property
    def is_admin(self) -> bool:
        return self._arbiter.real_role in (Role.superadmin, Role.admin)

    @property
    def memberships(self) -> tuple[OrganizationMembership, ...]:
        return self._memberships

    @property
    def current_organization_id(self) -> str | None:
        return self._current_organization_id

    @property
    def profile(self) -> UserProfile | None:
        return self._profile

    @property
    def is_trainer(self) -> bool:
        return self._is_trainer

    # -- lifecycle ---------------------------------------------------------

    async def start(self) -> None:
        """Initial mount: pick up an existing session and resolve it."""
        try:
            principal = await self._identity.get_current_principal()
        except IdentityError as e:
            # Treated as signed out; the next identity event starts over.
            log.warning("session_lookup_failed", error=str(e))
            principal = None
        await self.handle_event(AuthEvent(kind=AuthEventKind.initial_session, principal=principal))
        await self.settled()

    async def handle_event(self, event: AuthEvent) -> None:
        if event.kind is AuthEventKind.signed_out or event.principal is None:
            if self._principal is not None or event.kind is AuthEventKind.signed_out:
                self._teardown()
            return
        self._on_principal(event.principal)

    async def settled(self) -> None:
        """Wait for every resolution task spawned so far (including discarded ones)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def sign_out(self) -> None:
        self._teardown()
        try:
            await self._identity.sign_out()
        except IdentityError as e:
            # Local state is already gone; the server session will expire on its own.
            log.warning("sign_out_failed", error=str(e))

    # -- UI operations -----------------------------------------------------

    def simulate_role(self, role: Role | None) -> bool:
        return self._arbiter.simulate(role)

    def set_current_organization(self, organization_id: str | None) -> None:
        if organization_id is not None and organization_id not in {
            m.organization_id for m in self._memberships
        }:
            raise ValueError(f"not a member of organization {organization_id!r}")
        self._current_organization_id = organization_id

    async def refresh_profile(self) -> None:
        principal = self._principal
        if principal is None:
            return
        try:
            profile = await self._store.get_profile(principal.id)
        except RoleStoreError as e:
            log.warning("profile_refresh_failed", principal_id=principal.id, error=str(e))
            return
        if self._principal is None or self._principal.id != principal.id:
            return
        if profile is not None:
            self._profile = profile

    # -- internals ---------------------------------------------------------

    def _on_principal(self, principal: Principal) -> None:
        if self._principal is not None and self._principal.id != principal.id:
            # Identity switch without a sign-out in between.
            self._teardown()
        self._principal = principal

        if self._resolved_for == principal.id:
            return
        if self._inflight is not None and self._inflight.principal_id == principal.id:
            return

        cached = self._cache.get(principal.id)
        if cached is not None:
            self._arbiter.set_real_role(cached)

        token = ResolutionToken(principal.id)
        self._inflight = token
        self._state = SessionState.resolving
        task = asyncio.get_running_loop().create_task(self._run(token))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, token: ResolutionToken) -> None:
        try:
            resolution = await self._resolver.resolve(token.principal_id)
            if not self._is_current(token):
                log.info("role_resolution_discarded", principal_id=token.principal_id)
                return
            self._commit(resolution)
        finally:
            if self._inflight is token:
                self._inflight = None

    def _is_current(self, token: ResolutionToken) -> bool:
        return (
            not token.cancelled
            and self._principal is not None
            and self._principal.id == token.principal_id
        )

    def _commit(self, resolution: Resolution) -> None:
        self._arbiter.set_real_role(resolution.role)
        self._memberships = resolution.memberships
        self._current_organization_id = resolution.current_organization_id
        self._profile = resolution.profile
        self._is_trainer = resolution.is_trainer
        self._resolved_for = resolution.principal_id
        self._state = SessionState.resolved
        if resolution.degraded:
            # An older entry may hold a higher role than the one settled on.
            self._cache.clear()
        else:
            self._cache.set(resolution.principal_id, resolution.role)
        log.info(
            "role_resolved",
            principal_id=resolution.principal_id,
            role=resolution.role.value,
            degraded=resolution.degraded,
        )

    def _teardown(self) -> None:
        if self._inflight is not None:
            self._inflight.cancel()
            self._inflight = None
        self._principal = None
        self._arbiter.reset()
        self._memberships = ()
        self._current_organization_id = None
        self._profile = None
        self._is_trainer = False
        self._resolved_for = None
        self._state = SessionState.idle
        self._cache.clear()


# --- Module Notes -----------------------------------------------------------
# All state-committing writes happen in `_commit`, behind `_is_current`; a result
# for a cancelled token is inert no matter when it arrives.
