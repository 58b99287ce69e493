"""
tests.test_auth_session

Client session lifecycle under concurrent identity events.

Responsibilities:
- Single-flight: many events for one principal cause one resolution.
- Late results after sign-out or an identity switch are discarded.
- The role cache is painted optimistically and only written by good resolutions.
"""

from __future__ import annotations

import asyncio

import pytest

from campus_gate.auth.models import Principal, UserProfile
from campus_gate.auth.roles import Role
from campus_gate.auth.store import RoleStoreError
from campus_gate.client.cache import ROLE_CACHE_KEY, RoleCache
from campus_gate.client.retry import RetryPolicy
from campus_gate.client.session import AuthEvent, AuthEventKind, AuthSession, SessionState
from campus_gate.client.storage import MemoryStorage
from tests.fakes import FakeIdentityClient, FakeRoleStore, membership

ADA = Principal(id="ada", email="ada@example.org")
BEN = Principal(id="ben")
FAST = RetryPolicy(max_attempts=2, delay=0)


def _session(store: FakeRoleStore, *, principal: Principal | None = ADA, storage: MemoryStorage | None = None):
    storage = storage or MemoryStorage()
    identity = FakeIdentityClient(principal)
    session = AuthSession(identity=identity, store=store, cache=RoleCache(storage), policy=FAST)
    return session, identity, storage


def signed_in(principal: Principal) -> AuthEvent:
    return AuthEvent(kind=AuthEventKind.signed_in, principal=principal)


@pytest.mark.asyncio
async def test_start_resolves_and_caches() -> None:
    store = FakeRoleStore(roles={"ada": Role.admin}, profiles={"ada": UserProfile(first_name="Ada")})
    session, _, storage = _session(store)

    await session.start()

    assert session.state is SessionState.resolved
    assert not session.loading
    assert session.role is Role.admin
    assert session.effective_role is Role.admin
    assert session.is_admin
    assert session.profile == UserProfile(first_name="Ada")
    assert RoleCache(storage).get("ada") is Role.admin


@pytest.mark.asyncio
async def test_start_without_session_stays_idle() -> None:
    store = FakeRoleStore()
    session, _, _ = _session(store, principal=None)

    await session.start()

    assert session.state is SessionState.idle
    assert session.role is None
    assert store.role_calls == 0


@pytest.mark.asyncio
async def test_concurrent_events_resolve_once() -> None:
    store = FakeRoleStore(roles={"ada": Role.moderator})
    store.gate = asyncio.Event()
    session, _, _ = _session(store)

    await asyncio.gather(
        session.handle_event(AuthEvent(kind=AuthEventKind.initial_session, principal=ADA)),
        *(session.handle_event(signed_in(ADA)) for _ in range(5)),
    )
    await asyncio.sleep(0)
    await session.handle_event(AuthEvent(kind=AuthEventKind.token_refreshed, principal=ADA))
    assert session.loading

    store.gate.set()
    await session.settled()
    await session.handle_event(AuthEvent(kind=AuthEventKind.user_updated, principal=ADA))
    await session.settled()

    assert store.role_calls == 1
    assert session.role is Role.moderator


@pytest.mark.asyncio
async def test_sign_out_discards_pending_resolution() -> None:
    store = FakeRoleStore(roles={"ada": Role.admin})
    store.gate = asyncio.Event()
    session, identity, storage = _session(store)

    await session.handle_event(signed_in(ADA))
    await asyncio.sleep(0)
    assert session.state is SessionState.resolving

    await session.sign_out()
    assert session.state is SessionState.idle
    assert identity.sign_out_calls == 1

    store.gate.set()
    await session.settled()

    assert session.state is SessionState.idle
    assert session.principal is None
    assert session.role is None
    assert session.effective_role is None
    assert storage.get(ROLE_CACHE_KEY) is None


@pytest.mark.asyncio
async def test_sign_out_survives_identity_errors() -> None:
    store = FakeRoleStore(roles={"ada": Role.user})
    session, identity, _ = _session(store)
    identity.sign_out_error = True
    await session.start()

    await session.sign_out()

    assert session.state is SessionState.idle
    assert session.principal is None


@pytest.mark.asyncio
async def test_identity_switch_discards_previous_principal() -> None:
    store = FakeRoleStore(roles={"ada": Role.superadmin, "ben": Role.user})
    store.gate = asyncio.Event()
    session, _, storage = _session(store)

    await session.handle_event(signed_in(ADA))
    await asyncio.sleep(0)
    await session.handle_event(signed_in(BEN))

    store.gate.set()
    await session.settled()

    assert session.principal == BEN
    assert session.role is Role.user
    assert not session.is_admin
    assert RoleCache(storage).get("ben") is Role.user
    assert RoleCache(storage).get("ada") is None
    assert store.role_calls == 2


@pytest.mark.asyncio
async def test_cached_role_paints_before_resolution() -> None:
    storage = MemoryStorage()
    RoleCache(storage).set("ada", Role.admin)
    store = FakeRoleStore(roles={"ada": Role.moderator})
    store.gate = asyncio.Event()
    session, _, _ = _session(store, storage=storage)

    await session.handle_event(signed_in(ADA))
    assert session.role is Role.admin
    assert session.loading

    store.gate.set()
    await session.settled()
    assert session.role is Role.moderator


@pytest.mark.asyncio
async def test_cache_for_another_principal_is_not_painted() -> None:
    storage = MemoryStorage()
    RoleCache(storage).set("ben", Role.superadmin)
    store = FakeRoleStore(roles={"ada": Role.user})
    store.gate = asyncio.Event()
    session, _, _ = _session(store, storage=storage)

    await session.handle_event(signed_in(ADA))
    assert session.role is None

    store.gate.set()
    await session.settled()
    assert session.role is Role.user


@pytest.mark.asyncio
async def test_degraded_resolution_is_final_and_not_cached() -> None:
    store = FakeRoleStore(roles={"ada": Role.admin}, role_failures=2)
    session, _, storage = _session(store)

    await session.start()

    assert session.state is SessionState.resolved
    assert session.role is Role.user
    assert store.role_calls == 2
    assert storage.get(ROLE_CACHE_KEY) is None

    # No retry loop: later events for the same principal do not re-read.
    await session.handle_event(AuthEvent(kind=AuthEventKind.token_refreshed, principal=ADA))
    await session.settled()
    assert store.role_calls == 2


@pytest.mark.asyncio
async def test_signed_out_event_tears_down() -> None:
    store = FakeRoleStore(roles={"ada": Role.admin})
    session, identity, storage = _session(store)
    await session.start()

    await session.handle_event(AuthEvent(kind=AuthEventKind.signed_out))

    assert session.state is SessionState.idle
    assert storage.get(ROLE_CACHE_KEY) is None
    assert identity.sign_out_calls == 0


@pytest.mark.asyncio
async def test_simulation_is_admin_only() -> None:
    store = FakeRoleStore(roles={"ada": Role.admin, "ben": Role.moderator})
    session, _, _ = _session(store)
    await session.start()

    assert session.simulate_role(Role.org_manager)
    assert session.effective_role is Role.org_manager
    assert session.role is Role.admin
    assert session.is_admin

    await session.handle_event(signed_in(BEN))
    await session.settled()
    assert session.simulated_role is None
    assert not session.simulate_role(Role.superadmin)
    assert session.effective_role is Role.moderator


@pytest.mark.asyncio
async def test_current_organization_must_be_a_membership() -> None:
    store = FakeRoleStore(
        roles={"ada": Role.org_manager},
        memberships={"ada": [membership("o1", primary=True), membership("o2")]},
    )
    session, _, _ = _session(store)
    await session.start()
    assert session.current_organization_id == "o1"

    session.set_current_organization("o2")
    assert session.current_organization_id == "o2"

    with pytest.raises(ValueError):
        session.set_current_organization("o9")
    assert session.current_organization_id == "o2"

    session.set_current_organization(None)
    assert session.current_organization_id is None


@pytest.mark.asyncio
async def test_refresh_profile() -> None:
    store = FakeRoleStore(roles={"ada": Role.user}, profiles={"ada": UserProfile(first_name="Ada")})
    session, _, _ = _session(store)
    await session.start()

    store.profiles["ada"] = UserProfile(first_name="Ada", last_name="Lovelace")
    await session.refresh_profile()
    assert session.profile == UserProfile(first_name="Ada", last_name="Lovelace")

    store.aux_error = RoleStoreError("profiles unavailable")
    await session.refresh_profile()
    assert session.profile == UserProfile(first_name="Ada", last_name="Lovelace")


@pytest.mark.asyncio
async def test_unreachable_identity_provider_leaves_session_idle() -> None:
    store = FakeRoleStore(roles={"ada": Role.admin})
    session, identity, _ = _session(store)
    identity.lookup_error = True

    await session.start()

    assert session.state is SessionState.idle
    assert session.principal is None
    assert session.role is None
    assert store.role_calls == 0


@pytest.mark.asyncio
async def test_degraded_resolution_keeps_profile_and_trainer_status() -> None:
    store = FakeRoleStore(
        roles={"ada": Role.admin},
        profiles={"ada": UserProfile(first_name="Ada")},
        trainers={"ada"},
        role_failures=2,
    )
    session, _, _ = _session(store)

    await session.start()

    assert session.role is Role.user
    assert session.profile == UserProfile(first_name="Ada")
    assert session.is_trainer


@pytest.mark.asyncio
async def test_degraded_resolution_drops_older_cache_entry() -> None:
    storage = MemoryStorage()
    RoleCache(storage).set("ada", Role.admin)
    store = FakeRoleStore(roles={"ada": Role.admin}, role_failures=2)
    session, _, _ = _session(store, storage=storage)

    await session.start()

    assert session.role is Role.user
    assert storage.get(ROLE_CACHE_KEY) is None
    assert RoleCache(storage).get("ada") is None
