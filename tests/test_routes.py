"""
tests.test_routes

Route-table classification: which paths the edge gate protects, and how.
"""

from __future__ import annotations

import pytest

from campus_gate.gate.routes import (
    ADMIN_NAMESPACE,
    ADMIN_OR_ABOVE,
    SUPERADMIN_ONLY,
    TRAINER_NAMESPACE,
    classify,
)


@pytest.mark.parametrize(
    "path",
    ["/", "/auth", "/formations", "/administrator", "/formateurs", "/v1/auth/session", "/healthz"],
)
def test_unprotected_paths(path: str) -> None:
    assert classify(path) is None


def test_admin_root_has_no_sub_rules() -> None:
    protection = classify("/admin")
    assert protection is not None
    assert protection.namespace is ADMIN_NAMESPACE
    assert protection.sub_rules == ()


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/admin/roles", (SUPERADMIN_ONLY,)),
        ("/admin/security/audit", (SUPERADMIN_ONLY,)),
        ("/admin/cookies", (SUPERADMIN_ONLY,)),
        ("/admin/redirects", (SUPERADMIN_ONLY,)),
        ("/admin/users/42", (ADMIN_OR_ABOVE,)),
        ("/admin/settings", (ADMIN_OR_ABOVE,)),
        ("/admin/formateurs", (ADMIN_OR_ABOVE,)),
        ("/admin/sessions", ()),
        ("/admin/articles", ()),
    ],
)
def test_admin_sub_rules(path: str, expected: tuple) -> None:
    protection = classify(path)
    assert protection is not None
    assert protection.sub_rules == expected


def test_sub_rules_match_literal_prefixes() -> None:
    protection = classify("/admin/roles-audit")
    assert protection is not None
    assert protection.sub_rules == (SUPERADMIN_ONLY,)


def test_trainer_namespace() -> None:
    for path in ("/formateur", "/formateur/planning"):
        protection = classify(path)
        assert protection is not None
        assert protection.namespace is TRAINER_NAMESPACE
