"""
campus_gate.db.repositories.organizations

Repository for organizations and principal memberships.

Responsibilities:
- List a principal's memberships with their organization eagerly loaded.
- Create organizations and memberships (seeding, tests).
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from campus_gate.auth.roles import MembershipRole
from campus_gate.db.models import Organization, UserOrganization


class MembershipRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_user(self, user_id: str) -> list[UserOrganization]:
        # Insertion order is the "first returned" order used for current-org selection.
        stmt = (
            select(UserOrganization)
            .options(selectinload(UserOrganization.organization))
            .where(UserOrganization.user_id == user_id)
            .order_by(UserOrganization.created_at, UserOrganization.id)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def add_organization(self, *, name: str, organization_id: str | None = None) -> Organization:
        org = Organization(name=name)
        if organization_id is not None:
            org.id = organization_id
        self._session.add(org)
        await self._session.flush()
        return org

    async def add_membership(
        self,
        *,
        user_id: str,
        organization_id: str,
        role: MembershipRole = MembershipRole.viewer,
        is_primary: bool = False,
    ) -> UserOrganization:
        membership = UserOrganization(
            user_id=user_id,
            organization_id=organization_id,
            role=role,
            is_primary=is_primary,
        )
        self._session.add(membership)
        await self._session.flush()
        return membership
