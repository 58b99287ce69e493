"""
campus_gate.client.http

HTTP collaborators used by a client process to reach the service.

Responsibilities:
- `HttpIdentityClient`: current principal from the session cookie, sign-out.
- `HttpRoleStore`: the Role Store protocol over `/v1/principals/{id}/*`.
- Normalize transport/status/shape failures into `IdentityError` / `RoleStoreError`.
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError
from starlette.status import HTTP_401_UNAUTHORIZED

from campus_gate.auth.models import OrganizationMembership, Principal, UserProfile
from campus_gate.auth.roles import Role
from campus_gate.auth.schemas import MembershipOut, ProfileOut, RoleOut, SessionOut, TrainerOut
from campus_gate.auth.store import RoleStoreError, role_from_value
from campus_gate.client.session import IdentityError


class HttpIdentityClient:
    """
    The session cookie lives in the `httpx.AsyncClient` cookie jar, so sign-in
    and sign-out responses update it without extra plumbing.
    """

    def __init__(self, *, http: httpx.AsyncClient) -> None:
        self._http = http

    async def get_current_principal(self) -> Principal | None:
        try:
            r = await self._http.get("/v1/auth/session")
            if r.status_code == HTTP_401_UNAUTHORIZED:
                return None
            r.raise_for_status()
            return SessionOut.model_validate(r.json()).to_domain()
        except (httpx.HTTPError, ValidationError, ValueError) as e:
            raise IdentityError(f"session lookup failed: {e}") from e

    async def sign_out(self) -> None:
        try:
            r = await self._http.post("/v1/auth/sign-out")
            r.raise_for_status()
        except httpx.HTTPError as e:
            raise IdentityError(f"sign-out failed: {e}") from e


class HttpRoleStore:
    def __init__(self, *, http: httpx.AsyncClient) -> None:
        self._http = http

    async def _get(self, principal_id: str, resource: str) -> Any:
        try:
            r = await self._http.get(f"/v1/principals/{principal_id}/{resource}")
            r.raise_for_status()
            return r.json()
        except (httpx.HTTPError, ValueError) as e:
            raise RoleStoreError(f"{resource} read failed: {e}") from e

    async def get_role(self, principal_id: str) -> Role | None:
        body = await self._get(principal_id, "role")
        try:
            out = RoleOut.model_validate(body)
        except ValidationError as e:
            raise RoleStoreError(f"role read failed: {e}") from e
        return role_from_value(out.role, principal_id=principal_id)

    async def get_organization_memberships(
        self, principal_id: str
    ) -> list[OrganizationMembership]:
        body = await self._get(principal_id, "organizations")
        try:
            return [MembershipOut.model_validate(item).to_domain() for item in body]
        except (ValidationError, TypeError) as e:
            raise RoleStoreError(f"organizations read failed: {e}") from e

    async def has_active_trainer_record(self, principal_id: str) -> bool:
        body = await self._get(principal_id, "trainer")
        try:
            return TrainerOut.model_validate(body).active
        except ValidationError as e:
            raise RoleStoreError(f"trainer read failed: {e}") from e

    async def get_profile(self, principal_id: str) -> UserProfile | None:
        body = await self._get(principal_id, "profile")
        if body is None:
            return None
        try:
            return ProfileOut.model_validate(body).to_domain()
        except ValidationError as e:
            raise RoleStoreError(f"profile read failed: {e}") from e


# --- Module Notes -----------------------------------------------------------
# Timeouts and base_url are configured on the AsyncClient by the caller.
