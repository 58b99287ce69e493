"""
campus_gate.db.models

Persistence schema read by the Role Store.

Responsibilities:
- Define ORM models for the identity-adjacent tables:
  - UserRole: at most one role per principal
  - Organization / UserOrganization: org memberships (one primary at most)
  - Formateur: trainer records (active flag gates /formateur)
  - Profile: display profile shown once a principal is resolved
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Enum, ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campus_gate.auth.roles import MembershipRole
from campus_gate.db.base import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    # Persist naive UTC timestamps for simplicity; production systems may use tz-aware types.
    return datetime.utcnow()


class UserRole(Base):
    __tablename__ = "user_roles"

    # One row per principal; a missing row means role "user".
    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    # Stored as plain text so an unknown value can be logged instead of failing the read.
    role: Mapped[str] = mapped_column(String(32), nullable=False)

    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)


class Organization(Base):
    __tablename__ = "organizations"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(256), nullable=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    memberships: Mapped[list[UserOrganization]] = relationship(back_populates="organization")


class UserOrganization(Base):
    __tablename__ = "user_organizations"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    organization_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("organizations.id"), nullable=False, index=True
    )
    role: Mapped[MembershipRole] = mapped_column(
        Enum(MembershipRole), nullable=False, default=MembershipRole.viewer
    )
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    organization: Mapped[Organization | None] = relationship(back_populates="memberships")

    __table_args__ = (
        # At most one primary membership per principal.
        Index(
            "uq_user_organizations_primary",
            "user_id",
            unique=True,
            sqlite_where=text("is_primary = 1"),
            postgresql_where=text("is_primary"),
        ),
        Index("ix_user_organizations_user_created", "user_id", "created_at"),
    )


class Formateur(Base):
    __tablename__ = "formateurs"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    user_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)


class Profile(Base):
    __tablename__ = "profiles"

    # Same identifier as the principal.
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    first_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    telephone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    entreprise: Mapped[str | None] = mapped_column(String(256), nullable=True)
    image_rights_consent: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    image_rights_consent_date: Mapped[datetime | None] = mapped_column(nullable=True)


# --- Module Notes -----------------------------------------------------------
# This service only reads these tables. Writes come from the back-office screens,
# which live outside this package.
