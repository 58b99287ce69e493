"""
campus_gate.client.arbiter

Effective-role arbitration and the admin-only simulated role.

Responsibilities:
- Compute the role used for UI gating (`effective_role`).
- Own the simulated-role setter so the admin-class check cannot be bypassed.
"""

from __future__ import annotations

from campus_gate.auth.roles import Role, can_simulate
from campus_gate.observability.logging import get_logger

log = get_logger(__name__)


def effective_role(real_role: Role | None, simulated_role: Role | None) -> Role | None:
    if simulated_role is not None and can_simulate(real_role):
        return simulated_role
    return real_role


class RoleArbiter:
    """
    In-memory only: the simulated role is never persisted and never sent to the
    server. It is a display filter, not a grant.
    """

    def __init__(self) -> None:
        self._real: Role | None = None
        self._simulated: Role | None = None

    @property
    def real_role(self) -> Role | None:
        return self._real

    @property
    def simulated_role(self) -> Role | None:
        return self._simulated

    @property
    def effective(self) -> Role | None:
        return effective_role(self._real, self._simulated)

    @property
    def is_simulating(self) -> bool:
        return self._simulated is not None and can_simulate(self._real)

    def set_real_role(self, role: Role | None) -> None:
        self._real = role
        if not can_simulate(role):
            # A downgrade must not leave a preview override behind.
            self._simulated = None

    def simulate(self, role: Role | None) -> bool:
        """Set (or clear, with None) the simulated role. Returns False when rejected."""
        if role is None:
            self._simulated = None
            return True
        if not can_simulate(self._real):
            log.info(
                "role_simulation_rejected",
                real_role=self._real.value if self._real is not None else None,
                requested=role.value,
            )
            return False
        self._simulated = role
        return True

    def reset(self) -> None:
        self._real = None
        self._simulated = None


# --- Module Notes -----------------------------------------------------------
# Only superadmin and admin may simulate; org_manager and moderator are admin-class
# for the gate but not for previews.
