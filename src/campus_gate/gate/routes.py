"""
campus_gate.gate.routes

The fixed route-prefix rule table consumed by the edge gate.

Responsibilities:
- Declare protected namespaces and their coarse requirement.
- Declare the sub-area rules that narrow the admin namespace.
- Classify a request path into the rules that apply to it.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from campus_gate.auth.roles import ADMIN_CLASS_ROLES, ADMIN_ONLY_ROLES, SUPERADMIN_ROLES, Role


class Requirement(enum.StrEnum):
    # What the principal must have once authenticated.
    role = "role"
    active_trainer = "active_trainer"


@dataclass(frozen=True, slots=True)
class NamespaceRule:
    prefix: str
    requirement: Requirement
    allowed_roles: frozenset[Role] = frozenset()
    # Where an authenticated but under-privileged principal is sent.
    denied_redirect: str = "/"

    def matches(self, path: str) -> bool:
        return path == self.prefix or path.startswith(self.prefix + "/")


@dataclass(frozen=True, slots=True)
class SubAreaRule:
    prefixes: tuple[str, ...]
    allowed_roles: frozenset[Role]
    denied_redirect: str = "/admin"

    def matches(self, path: str) -> bool:
        # Literal string prefixes: "/admin/roles" also covers "/admin/roles-audit".
        return any(path.startswith(prefix) for prefix in self.prefixes)


ADMIN_NAMESPACE = NamespaceRule(
    prefix="/admin",
    requirement=Requirement.role,
    allowed_roles=ADMIN_CLASS_ROLES,
)
TRAINER_NAMESPACE = NamespaceRule(prefix="/formateur", requirement=Requirement.active_trainer)

NAMESPACE_RULES: tuple[NamespaceRule, ...] = (ADMIN_NAMESPACE, TRAINER_NAMESPACE)

SUPERADMIN_ONLY = SubAreaRule(
    prefixes=("/admin/roles", "/admin/security", "/admin/redirects", "/admin/cookies"),
    allowed_roles=SUPERADMIN_ROLES,
)
ADMIN_OR_ABOVE = SubAreaRule(
    prefixes=("/admin/users", "/admin/settings", "/admin/formateurs"),
    allowed_roles=ADMIN_ONLY_ROLES,
)

# Evaluated in order, after the admin namespace rule has passed.
ADMIN_SUB_RULES: tuple[SubAreaRule, ...] = (SUPERADMIN_ONLY, ADMIN_OR_ABOVE)


@dataclass(frozen=True, slots=True)
class Protection:
    namespace: NamespaceRule
    sub_rules: tuple[SubAreaRule, ...] = ()


def classify(path: str) -> Protection | None:
    """Return the rules protecting `path`, or None when the gate does not apply."""
    for namespace in NAMESPACE_RULES:
        if not namespace.matches(path):
            continue
        if namespace is ADMIN_NAMESPACE:
            subs = tuple(rule for rule in ADMIN_SUB_RULES if rule.matches(path))
            return Protection(namespace=namespace, sub_rules=subs)
        return Protection(namespace=namespace)
    return None


# --- Module Notes -----------------------------------------------------------
# Sub-area denials go back to /admin while namespace denials go to the site root:
# an admin-class principal who is merely under-scoped stays inside the back-office.
