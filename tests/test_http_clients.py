"""
tests.test_http_clients

Client-side AuthSession wired to the service over HTTP.

Responsibilities:
- HttpIdentityClient / HttpRoleStore against the real routers.
- An admin previewing another role still reaches admin-only areas at the edge.
"""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from campus_gate.auth.roles import Role
from campus_gate.auth.store import RoleStoreError
from campus_gate.client.cache import RoleCache
from campus_gate.client.http import HttpIdentityClient, HttpRoleStore
from campus_gate.client.navigation import admin_menu
from campus_gate.client.retry import RetryPolicy
from campus_gate.client.session import AuthSession, SessionState
from campus_gate.client.storage import MemoryStorage
from tests.fakes import running_app, seed, sign_in


def client_session(client: httpx.AsyncClient, storage: MemoryStorage | None = None) -> AuthSession:
    return AuthSession(
        identity=HttpIdentityClient(http=client),
        store=HttpRoleStore(http=client),
        cache=RoleCache(storage or MemoryStorage()),
        policy=RetryPolicy(delay=0),
    )


@pytest.mark.asyncio
async def test_simulated_role_does_not_change_edge_decisions(tmp_path: Path) -> None:
    async with running_app(tmp_path) as (app, client):
        await seed(app.state.sessionmaker, roles={"adm": Role.admin})
        await sign_in(client, "adm")

        session = client_session(client)
        await session.start()
        assert session.role is Role.admin

        assert session.simulate_role(Role.user)
        assert session.effective_role is Role.user
        assert admin_menu(session.effective_role) == ()

        r = await client.get("/admin/settings")
        assert r.status_code == 200
        assert r.json()["role"] == "admin"


@pytest.mark.asyncio
async def test_org_manager_resolution_over_http(tmp_path: Path) -> None:
    async with running_app(tmp_path) as (app, client):
        await seed(
            app.state.sessionmaker,
            roles={"om": Role.org_manager},
            organizations={"o1": "Centre Nord", "o2": "Centre Sud"},
            memberships=[("om", "o1", False), ("om", "o2", True)],
            profiles={"om": {"first_name": "Odile"}},
        )
        await sign_in(client, "om")

        session = client_session(client)
        await session.start()

        assert session.role is Role.org_manager
        assert [m.organization_name for m in session.memberships] == ["Centre Nord", "Centre Sud"]
        assert session.current_organization_id == "o2"
        assert session.profile is not None and session.profile.first_name == "Odile"
        assert not session.is_trainer


@pytest.mark.asyncio
async def test_no_session_and_sign_out(tmp_path: Path) -> None:
    async with running_app(tmp_path) as (app, client):
        session = client_session(client)
        await session.start()
        assert session.state is SessionState.idle
        assert await HttpIdentityClient(http=client).get_current_principal() is None

        await seed(app.state.sessionmaker, roles={"p1": Role.moderator})
        await sign_in(client, "p1")
        await session.start()
        assert session.role is Role.moderator

        await session.sign_out()
        assert session.state is SessionState.idle
        assert await HttpIdentityClient(http=client).get_current_principal() is None


@pytest.mark.asyncio
async def test_http_role_store_errors(tmp_path: Path) -> None:
    async with running_app(tmp_path) as (_, client):
        store = HttpRoleStore(http=client)

        # Not signed in: the service answers 401, which the client treats as a store error.
        with pytest.raises(RoleStoreError):
            await store.get_role("p1")

        await sign_in(client, "p1")
        with pytest.raises(RoleStoreError):
            await store.get_role("someone-else")
        assert await store.get_role("p1") is None
        assert await store.get_organization_memberships("p1") == []
        assert await store.get_profile("p1") is None
        assert await store.has_active_trainer_record("p1") is False
