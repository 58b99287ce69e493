"""
campus_gate.db.repositories.roles

Repository for `UserRole` rows.

Responsibilities:
- Read the single stored role value for a principal.
- Upsert a role value (seeding, back-office tooling, tests).
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus_gate.auth.roles import Role
from campus_gate.db.models import UserRole


class UserRoleRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_role_value(self, user_id: str) -> str | None:
        # Raw value: unknown strings are handled by the caller, not here.
        stmt = select(UserRole.role).where(UserRole.user_id == user_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def set_role(self, *, user_id: str, role: Role) -> UserRole:
        row = await self._session.get(UserRole, user_id)
        if row is None:
            row = UserRole(user_id=user_id, role=role.value)
            self._session.add(row)
        else:
            row.role = role.value
        await self._session.flush()
        return row


# --- Module Notes -----------------------------------------------------------
# `user_id` is the primary key, so the store never sees more than one role per principal.
