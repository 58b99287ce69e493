"""
campus_gate.db.base

SQLAlchemy declarative base for the Role Store tables.

Responsibilities:
- Provide the shared DeclarativeBase for the role, membership, trainer and profile models.
- Pin constraint names so Alembic batch migrations on SQLite can address them.
"""

from __future__ import annotations

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION: dict[str, str] = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


# --- Module Notes -----------------------------------------------------------
# `alembic/env.py` targets `Base.metadata`; models are registered by importing
# `campus_gate.db.models` (see `db.init_db`).
