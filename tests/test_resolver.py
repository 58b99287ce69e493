"""
tests.test_resolver

Role resolution: concurrent reads, retry-then-degrade, organization handling.
"""

from __future__ import annotations

import pytest

from campus_gate.auth.models import UserProfile
from campus_gate.auth.roles import Role
from campus_gate.client.resolver import RoleResolver
from campus_gate.client.retry import RetryPolicy
from tests.fakes import BrokenRoleStore, FakeRoleStore, membership

FAST = RetryPolicy(max_attempts=2, delay=0)


@pytest.mark.asyncio
async def test_reads_everything_for_one_principal() -> None:
    store = FakeRoleStore(
        roles={"carol": Role.formateur},
        trainers={"carol"},
        profiles={"carol": UserProfile(first_name="Carol")},
    )
    resolution = await RoleResolver(store, policy=FAST).resolve("carol")

    assert resolution.role is Role.formateur
    assert resolution.is_trainer
    assert resolution.profile == UserProfile(first_name="Carol")
    assert not resolution.degraded
    assert (store.role_calls, store.membership_calls, store.profile_calls, store.trainer_calls) == (1, 1, 1, 1)


@pytest.mark.asyncio
async def test_missing_role_row_resolves_to_user() -> None:
    resolution = await RoleResolver(FakeRoleStore(), policy=FAST).resolve("nobody")
    assert resolution.role is Role.user
    assert not resolution.degraded


@pytest.mark.asyncio
async def test_one_retry_then_success() -> None:
    store = FakeRoleStore(roles={"dan": Role.admin}, role_failures=1)
    resolution = await RoleResolver(store, policy=FAST).resolve("dan")

    assert resolution.role is Role.admin
    assert store.role_calls == 2


@pytest.mark.asyncio
async def test_two_failures_degrade_to_user() -> None:
    store = FakeRoleStore(roles={"dan": Role.admin}, role_failures=2)
    resolution = await RoleResolver(store, policy=FAST).resolve("dan")

    assert resolution.role is Role.user
    assert resolution.degraded
    assert store.role_calls == 2


@pytest.mark.asyncio
async def test_unexpected_errors_degrade_without_retry() -> None:
    resolution = await RoleResolver(BrokenRoleStore(RuntimeError("bad shape")), policy=FAST).resolve("dan")
    assert resolution.role is Role.user
    assert resolution.degraded


@pytest.mark.asyncio
async def test_auxiliary_failures_keep_the_role() -> None:
    store = FakeRoleStore(roles={"erin": Role.org_manager})
    store.aux_error = ConnectionError("profiles table offline")
    resolution = await RoleResolver(store, policy=FAST).resolve("erin")

    assert resolution.role is Role.org_manager
    assert not resolution.degraded
    assert resolution.memberships == ()
    assert resolution.profile is None
    assert not resolution.is_trainer


@pytest.mark.asyncio
async def test_org_manager_current_organization_prefers_primary() -> None:
    store = FakeRoleStore(
        roles={"erin": Role.org_manager},
        memberships={"erin": [membership("o1"), membership("o2", primary=True), membership("o3")]},
    )
    resolution = await RoleResolver(store, policy=FAST).resolve("erin")

    assert [m.organization_id for m in resolution.memberships] == ["o1", "o2", "o3"]
    assert resolution.current_organization_id == "o2"


@pytest.mark.asyncio
async def test_org_manager_without_primary_takes_first() -> None:
    store = FakeRoleStore(
        roles={"erin": Role.org_manager},
        memberships={"erin": [membership("o1"), membership("o2")]},
    )
    resolution = await RoleResolver(store, policy=FAST).resolve("erin")
    assert resolution.current_organization_id == "o1"


@pytest.mark.asyncio
@pytest.mark.parametrize("role", [Role.admin, Role.moderator, Role.user])
async def test_memberships_dropped_for_other_roles(role: Role) -> None:
    store = FakeRoleStore(roles={"erin": role}, memberships={"erin": [membership("o1", primary=True)]})
    resolution = await RoleResolver(store, policy=FAST).resolve("erin")

    assert resolution.memberships == ()
    assert resolution.current_organization_id is None


@pytest.mark.asyncio
async def test_degraded_resolution_keeps_auxiliary_reads() -> None:
    store = FakeRoleStore(
        roles={"erin": Role.org_manager},
        memberships={"erin": [membership("o1", primary=True)]},
        profiles={"erin": UserProfile(first_name="Erin")},
        trainers={"erin"},
        role_failures=2,
    )
    resolution = await RoleResolver(store, policy=FAST).resolve("erin")

    assert resolution.degraded
    assert resolution.role is Role.user
    assert resolution.profile == UserProfile(first_name="Erin")
    assert resolution.is_trainer
    # Memberships only apply to a resolved org_manager.
    assert resolution.memberships == ()
    assert resolution.current_organization_id is None
    assert store.role_calls == 2
