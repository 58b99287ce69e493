"""
campus_gate.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`Principal`).
- Define the read models returned by the Role Store (memberships, profile).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from campus_gate.auth.roles import MembershipRole


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity. `id` is opaque and stable for the session.
    """

    id: str
    email: str | None = None


@dataclass(frozen=True, slots=True)
class OrganizationMembership:
    id: str
    organization_id: str
    organization_name: str
    role: MembershipRole
    is_primary: bool


@dataclass(frozen=True, slots=True)
class UserProfile:
    first_name: str | None = None
    last_name: str | None = None
    avatar_url: str | None = None
    telephone: str | None = None
    entreprise: str | None = None
    image_rights_consent: bool | None = None
    image_rights_consent_date: datetime | None = None


def select_current_organization(
    memberships: list[OrganizationMembership] | tuple[OrganizationMembership, ...],
) -> str | None:
    # Primary membership wins; otherwise the first one returned by the store.
    for membership in memberships:
        if membership.is_primary:
            return membership.organization_id
    if memberships:
        return memberships[0].organization_id
    return None


# --- Module Notes -----------------------------------------------------------
# Keep these models minimal; they cross the API, the SQL store and the client session.
