"""
campus_gate.db.init_db

DB initialization helpers (dev/test convenience).

Responsibilities:
- Create the role/membership/profile tables for local development and tests.
- Keep production migration workflow separate (Alembic).
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from campus_gate.db import models  # noqa: F401  # register tables on Base.metadata
from campus_gate.db.base import Base


async def init_db(engine: AsyncEngine) -> None:
    """
    Dev/test bootstrap: create tables if they don't exist.
    """

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# --- Module Notes -----------------------------------------------------------
# Called from the app lifespan when env is dev/test, and directly by tests that
# seed a database before building the app.
