from __future__ import annotations

import pytest

from campus_gate.auth.models import select_current_organization
from campus_gate.auth.roles import Role, can_simulate, is_admin_class
from tests.fakes import membership


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("admin", Role.admin),
        ("org_manager", Role.org_manager),
        (Role.moderator, Role.moderator),
        ("owner", None),
        ("", None),
        (None, None),
    ],
)
def test_parse(value: object, expected: Role | None) -> None:
    assert Role.parse(value) is expected


def test_admin_class_and_simulation_sets() -> None:
    assert {r for r in Role if is_admin_class(r)} == {
        Role.superadmin,
        Role.admin,
        Role.org_manager,
        Role.moderator,
    }
    assert {r for r in Role if can_simulate(r)} == {Role.superadmin, Role.admin}
    assert not is_admin_class(None)
    assert not can_simulate(None)


def test_select_current_organization_prefers_primary() -> None:
    assert select_current_organization([]) is None
    assert select_current_organization([membership("a"), membership("b")]) == "a"
    assert select_current_organization([membership("a"), membership("b", primary=True)]) == "b"
