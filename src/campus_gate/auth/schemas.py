"""
campus_gate.auth.schemas

Wire models shared by the API routers and the HTTP client collaborators.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from campus_gate.auth.models import OrganizationMembership, Principal, UserProfile
from campus_gate.auth.roles import MembershipRole


class SessionOut(BaseModel):
    principal_id: str
    email: str | None = None

    @classmethod
    def from_domain(cls, principal: Principal) -> SessionOut:
        return cls(principal_id=principal.id, email=principal.email)

    def to_domain(self) -> Principal:
        return Principal(id=self.principal_id, email=self.email)


class RoleOut(BaseModel):
    # Raw stored value; null when the principal has no role row.
    role: str | None = None


class TrainerOut(BaseModel):
    active: bool


class MembershipOut(BaseModel):
    id: str
    organization_id: str
    organization_name: str
    role: MembershipRole
    is_primary: bool

    @classmethod
    def from_domain(cls, m: OrganizationMembership) -> MembershipOut:
        return cls(
            id=m.id,
            organization_id=m.organization_id,
            organization_name=m.organization_name,
            role=m.role,
            is_primary=m.is_primary,
        )

    def to_domain(self) -> OrganizationMembership:
        return OrganizationMembership(
            id=self.id,
            organization_id=self.organization_id,
            organization_name=self.organization_name,
            role=self.role,
            is_primary=self.is_primary,
        )


class ProfileOut(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    avatar_url: str | None = None
    telephone: str | None = None
    entreprise: str | None = None
    image_rights_consent: bool | None = None
    image_rights_consent_date: datetime | None = None

    @classmethod
    def from_domain(cls, p: UserProfile) -> ProfileOut:
        return cls(
            first_name=p.first_name,
            last_name=p.last_name,
            avatar_url=p.avatar_url,
            telephone=p.telephone,
            entreprise=p.entreprise,
            image_rights_consent=p.image_rights_consent,
            image_rights_consent_date=p.image_rights_consent_date,
        )

    def to_domain(self) -> UserProfile:
        return UserProfile(**self.model_dump())
