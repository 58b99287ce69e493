"""
campus_gate.auth.roles

The closed set of authorization roles.

Responsibilities:
- Define `Role` as an enumerated type (no free-form role strings past parsing).
- Name the role subsets used by the edge gate and the client arbiter.
"""

from __future__ import annotations

import enum


class Role(enum.StrEnum):
    # Values are stored in `user_roles.role`; treat them as a stable contract.
    superadmin = "superadmin"
    admin = "admin"
    org_manager = "org_manager"
    moderator = "moderator"
    formateur = "formateur"
    client_manager = "client_manager"
    user = "user"

    @classmethod
    def parse(cls, value: object) -> Role | None:
        """Map a stored value to a member; unrecognized values give None."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return None


class MembershipRole(enum.StrEnum):
    manager = "manager"
    viewer = "viewer"


# Roles allowed into the /admin namespace at all.
ADMIN_CLASS_ROLES: frozenset[Role] = frozenset(
    {Role.superadmin, Role.admin, Role.org_manager, Role.moderator}
)
SUPERADMIN_ROLES: frozenset[Role] = frozenset({Role.superadmin})
ADMIN_ONLY_ROLES: frozenset[Role] = frozenset({Role.superadmin, Role.admin})
# Roles that may preview the UI as another role.
SIMULATION_ROLES: frozenset[Role] = ADMIN_ONLY_ROLES


def is_admin_class(role: Role | None) -> bool:
    return role in ADMIN_CLASS_ROLES


def can_simulate(role: Role | None) -> bool:
    return role in SIMULATION_ROLES


# --- Module Notes -----------------------------------------------------------
# "Unknown" (no row yet / not resolved) is represented as None, never as a member.
