"""
campus_gate.client.resolver

Role and organization resolution for one principal.

Responsibilities:
- Issue the role, membership, profile and trainer reads concurrently.
- Retry once (per `RetryPolicy`) when the role read fails, then degrade to `user`.
- Apply organization post-processing (org_manager only, primary-first selection).
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TypeVar

from campus_gate.auth.models import (
    OrganizationMembership,
    UserProfile,
    select_current_organization,
)
from campus_gate.auth.roles import Role
from campus_gate.auth.store import RoleStore, RoleStoreError
from campus_gate.client.retry import RetryPolicy, resolve_with_retry
from campus_gate.observability.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Resolution:
    principal_id: str
    role: Role
    memberships: tuple[OrganizationMembership, ...] = ()
    current_organization_id: str | None = None
    profile: UserProfile | None = None
    is_trainer: bool = False
    # True when the role read never succeeded and `role` is the `user` fallback.
    degraded: bool = False


class RoleReadError(RoleStoreError):
    """
    The role read failed while the auxiliary reads of the same attempt settled.
    `partial` carries those auxiliary values for the degraded result.
    """

    def __init__(self, message: str, *, partial: Resolution) -> None:
        super().__init__(message)
        self.partial = partial


class RoleResolver:
    def __init__(self, store: RoleStore, *, policy: RetryPolicy | None = None) -> None:
        self._store = store
        self._policy = policy or RetryPolicy()

    async def resolve(self, principal_id: str) -> Resolution:
        try:
            return await resolve_with_retry(
                lambda: self._attempt(principal_id),
                policy=self._policy,
                retry_on=(RoleStoreError,),
                operation="role_resolution",
            )
        except RoleReadError as e:
            log.warning("role_resolution_degraded", principal_id=principal_id, error=str(e))
            return e.partial
        except RoleStoreError as e:
            log.warning("role_resolution_degraded", principal_id=principal_id, error=str(e))
        except Exception:
            # Unexpected shapes are an operator problem; the UI still gets the safe role.
            log.error("role_resolution_failed", principal_id=principal_id, exc_info=True)
        return Resolution(principal_id=principal_id, role=Role.user, degraded=True)

    async def _attempt(self, principal_id: str) -> Resolution:
        role_result, orgs_result, profile_result, trainer_result = await asyncio.gather(
            self._store.get_role(principal_id),
            self._store.get_organization_memberships(principal_id),
            self._store.get_profile(principal_id),
            self._store.has_active_trainer_record(principal_id),
            return_exceptions=True,
        )

        memberships = _or_default(orgs_result, [], "memberships", principal_id)
        profile = _or_default(profile_result, None, "profile", principal_id)
        is_trainer = _or_default(trainer_result, False, "trainer", principal_id)

        # Only the role read drives the retry; the other reads degrade in place.
        if isinstance(role_result, BaseException):
            if not isinstance(role_result, RoleStoreError):
                raise role_result
            partial = Resolution(
                principal_id=principal_id,
                role=Role.user,
                profile=profile,
                is_trainer=bool(is_trainer),
                degraded=True,
            )
            raise RoleReadError(str(role_result), partial=partial) from role_result

        role = role_result or Role.user
        if role is Role.org_manager:
            kept = tuple(memberships)
            current = select_current_organization(kept)
        else:
            kept, current = (), None

        return Resolution(
            principal_id=principal_id,
            role=role,
            memberships=kept,
            current_organization_id=current,
            profile=profile,
            is_trainer=bool(is_trainer),
        )


def _or_default(result: T | BaseException, default: T, what: str, principal_id: str) -> T:
    if isinstance(result, BaseException):
        if not isinstance(result, Exception):
            raise result
        log.warning("auxiliary_read_failed", what=what, principal_id=principal_id, error=str(result))
        return default
    return result


# --- Module Notes -----------------------------------------------------------
# The resolver is stateless; the single-flight guard and stale-result checks live
# in `client.session.AuthSession`, which owns the state it commits to.
