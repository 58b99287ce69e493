"""
campus_gate.auth.store

Role Store boundary.

Responsibilities:
- Define the read-only `RoleStore` protocol consumed by the edge gate and the
  client resolver.
- Provide the SQL-backed implementation over the repositories in `db.repositories`.
- Normalize backend failures into `RoleStoreError`.
"""

from __future__ import annotations

from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from campus_gate.auth.models import OrganizationMembership, UserProfile
from campus_gate.auth.roles import MembershipRole, Role
from campus_gate.db.repositories.formateurs import FormateurRepo
from campus_gate.db.repositories.organizations import MembershipRepo
from campus_gate.db.repositories.profiles import ProfileRepo
from campus_gate.db.repositories.roles import UserRoleRepo
from campus_gate.observability.logging import get_logger

log = get_logger(__name__)

UNKNOWN_ORGANIZATION_NAME = "Organisme inconnu"


class RoleStoreError(Exception):
    """The Role Store could not be read (unreachable, timeout, bad response)."""


class RoleStore(Protocol):
    async def get_role(self, principal_id: str) -> Role | None: ...

    async def get_organization_memberships(
        self, principal_id: str
    ) -> list[OrganizationMembership]: ...

    async def has_active_trainer_record(self, principal_id: str) -> bool: ...

    async def get_profile(self, principal_id: str) -> UserProfile | None: ...


def role_from_value(value: object, *, principal_id: str) -> Role | None:
    if value is None:
        return None
    role = Role.parse(value)
    if role is None:
        # Malformed data is an operator concern; callers treat None as "user".
        log.warning("role_value_unrecognized", principal_id=principal_id, value=str(value))
    return role


class SqlRoleStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_role(self, principal_id: str) -> Role | None:
        try:
            async with self._session_factory() as session:
                value = await UserRoleRepo(session).get_role_value(principal_id)
        except SQLAlchemyError as e:
            raise RoleStoreError(f"role read failed: {e}") from e
        return role_from_value(value, principal_id=principal_id)

    async def get_organization_memberships(
        self, principal_id: str
    ) -> list[OrganizationMembership]:
        try:
            async with self._session_factory() as session:
                rows = await MembershipRepo(session).list_for_user(principal_id)
        except SQLAlchemyError as e:
            raise RoleStoreError(f"membership read failed: {e}") from e
        return [
            OrganizationMembership(
                id=row.id,
                organization_id=row.organization_id,
                organization_name=(
                    row.organization.name if row.organization is not None else UNKNOWN_ORGANIZATION_NAME
                ),
                role=MembershipRole(row.role),
                is_primary=bool(row.is_primary),
            )
            for row in rows
        ]

    async def has_active_trainer_record(self, principal_id: str) -> bool:
        try:
            async with self._session_factory() as session:
                return await FormateurRepo(session).has_active(principal_id)
        except SQLAlchemyError as e:
            raise RoleStoreError(f"trainer read failed: {e}") from e

    async def get_profile(self, principal_id: str) -> UserProfile | None:
        try:
            async with self._session_factory() as session:
                row = await ProfileRepo(session).get(principal_id)
        except SQLAlchemyError as e:
            raise RoleStoreError(f"profile read failed: {e}") from e
        if row is None:
            return None
        return UserProfile(
            first_name=row.first_name,
            last_name=row.last_name,
            avatar_url=row.avatar_url,
            telephone=row.telephone,
            entreprise=row.entreprise,
            image_rights_consent=row.image_rights_consent,
            image_rights_consent_date=row.image_rights_consent_date,
        )


# --- Module Notes -----------------------------------------------------------
# The store is read-only from this service's point of view; seeding helpers live on
# the repositories so tests and tooling do not need a second write path.
