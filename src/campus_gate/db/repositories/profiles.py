"""
campus_gate.db.repositories.profiles

Repository for `Profile` rows.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from campus_gate.db.models import Profile


class ProfileRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: str) -> Profile | None:
        return await self._session.get(Profile, user_id)

    async def upsert(self, *, user_id: str, **fields: Any) -> Profile:
        row = await self._session.get(Profile, user_id)
        if row is None:
            row = Profile(id=user_id)
            self._session.add(row)
        for name, value in fields.items():
            setattr(row, name, value)
        await self._session.flush()
        return row
