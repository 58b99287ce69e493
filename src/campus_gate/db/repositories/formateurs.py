"""
campus_gate.db.repositories.formateurs

Repository for trainer (`Formateur`) records.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus_gate.db.models import Formateur


class FormateurRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def has_active(self, user_id: str) -> bool:
        stmt = (
            select(Formateur.id)
            .where(Formateur.user_id == user_id, Formateur.active.is_(True))
            .limit(1)
        )
        return (await self._session.execute(stmt)).scalar_one_or_none() is not None

    async def add(self, *, user_id: str, active: bool = True) -> Formateur:
        row = Formateur(user_id=user_id, active=active)
        self._session.add(row)
        await self._session.flush()
        return row
