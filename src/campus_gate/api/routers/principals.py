"""
campus_gate.api.routers.principals

Live Role Store reads for the signed-in principal.

Responsibilities:
- Serve role, memberships, profile and trainer status to `client.http.HttpRoleStore`.
- Restrict every read to the caller's own principal.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from starlette.status import HTTP_403_FORBIDDEN, HTTP_503_SERVICE_UNAVAILABLE

from campus_gate.auth.deps import get_principal, role_store_from_app
from campus_gate.auth.models import Principal
from campus_gate.auth.schemas import MembershipOut, ProfileOut, RoleOut, TrainerOut
from campus_gate.auth.store import RoleStore, RoleStoreError

router = APIRouter(prefix="/v1/principals", tags=["principals"])


def own_principal(principal_id: str, principal: Principal = Depends(get_principal)) -> str:
    if principal.id != principal_id:
        raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Not your principal")
    return principal_id


def _unavailable(e: RoleStoreError) -> HTTPException:
    # Clients treat 5xx as a transient store error and retry once.
    return HTTPException(status_code=HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))


@router.get("/{principal_id}/role", response_model=RoleOut)
async def principal_role(
    principal_id: str = Depends(own_principal),
    store: RoleStore = Depends(role_store_from_app),
) -> RoleOut:
    try:
        role = await store.get_role(principal_id)
    except RoleStoreError as e:
        raise _unavailable(e) from e
    return RoleOut(role=role.value if role is not None else None)


@router.get("/{principal_id}/organizations", response_model=list[MembershipOut])
async def principal_organizations(
    principal_id: str = Depends(own_principal),
    store: RoleStore = Depends(role_store_from_app),
) -> list[MembershipOut]:
    try:
        memberships = await store.get_organization_memberships(principal_id)
    except RoleStoreError as e:
        raise _unavailable(e) from e
    return [MembershipOut.from_domain(m) for m in memberships]


@router.get("/{principal_id}/profile", response_model=ProfileOut | None)
async def principal_profile(
    principal_id: str = Depends(own_principal),
    store: RoleStore = Depends(role_store_from_app),
) -> ProfileOut | None:
    try:
        profile = await store.get_profile(principal_id)
    except RoleStoreError as e:
        raise _unavailable(e) from e
    return ProfileOut.from_domain(profile) if profile is not None else None


@router.get("/{principal_id}/trainer", response_model=TrainerOut)
async def principal_trainer(
    principal_id: str = Depends(own_principal),
    store: RoleStore = Depends(role_store_from_app),
) -> TrainerOut:
    try:
        active = await store.has_active_trainer_record(principal_id)
    except RoleStoreError as e:
        raise _unavailable(e) from e
    return TrainerOut(active=active)
