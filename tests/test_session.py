"""End-to-end tests for the dashboard session."""

from __future__ import annotations

import asyncio
from decimal import Decimal

import pytest

from core.errors import AuthFailure, PermissionDenied, TransportFailure, WriteError
from core.models import EntityKind, FormState, SyncStatus, ViewMode
from core.session import DashboardSession
from core.store import AnonymousAuth, InMemoryStore


async def _settle(turns: int = 5) -> None:
    for _ in range(turns):
        await asyncio.sleep(0)


def _seeded_store() -> InMemoryStore:
    store = InMemoryStore()
    store.seed(
        "travel_groups",
        {
            "t1": {
                "groupNo": "TG-1",
                "date": "2024-05-10",
                "destination": "Osaka",
                "status": "Confirmed",
                "recruitCount": 10,
                "revenue": 1000,
                "expense": 700,
            },
            "t2": {"groupNo": "TG-2", "date": "2024-04-01", "destination": "Bali", "revenue": 400, "expense": 100},
        },
    )
    store.seed(
        "business_projects",
        {"b1": {"projectName": "Retreat", "date": "2024-05-10", "revenue": 600, "expense": 200}},
    )
    return store


def test_failed_sign_in_starts_no_mirror():
    store = _seeded_store()
    session = DashboardSession(store, AnonymousAuth(failure=RuntimeError("auth offline")))

    with pytest.raises(AuthFailure):
        asyncio.run(session.start())

    assert not session.started
    assert not any(mirror.running for mirror in session.mirrors.values())
    assert session.loading


def test_mutations_require_a_started_session():
    session = DashboardSession(InMemoryStore(), AnonymousAuth())

    with pytest.raises(AuthFailure):
        asyncio.run(session.submit(FormState.empty(), is_editing=False))


def test_dashboard_reflects_both_collections():
    async def scenario():
        session = DashboardSession(_seeded_store(), AnonymousAuth())
        user_id = await session.start()
        await _settle()
        total = session.dashboard()
        may_travel = session.dashboard(ViewMode.TRAVEL_ONLY, "2024-05")
        session.stop()
        return user_id, total, may_travel

    user_id, total, may_travel = asyncio.run(scenario())

    assert user_id.startswith("anon-")
    assert [item.identity for item in total["items"]] == ["t1", "b1", "t2"]
    assert total["stats"]["total_revenue"] == Decimal("2000")
    assert total["stats"]["total_profit"] == Decimal("1000")
    assert total["margin"] == Decimal("50")
    assert total["months"] == ["2024-05", "2024-04"]
    assert total["sync_status"] is SyncStatus.IDLE
    assert not total["loading"]
    assert [point["name"] for point in total["chart_series"]] == ["Osaka", "Retreat", "Bali"]
    assert [item.identity for item in may_travel["items"]] == ["t1"]
    assert may_travel["stats"]["active_groups"] == 1


def test_submit_and_remove_flow_through_the_mirrors():
    async def scenario():
        session = DashboardSession(_seeded_store(), AnonymousAuth())
        await session.start()
        await _settle()

        draft = FormState.empty(EntityKind.BUSINESS)
        draft.update("project_name", "Incentive Trip")
        draft.update("date", "2024-06-01")
        draft.update("revenue", 5000)
        result = await session.submit(draft, is_editing=False)
        await _settle()
        created = session.find(EntityKind.BUSINESS, result.identity)

        await session.remove(created)
        await _settle()
        after = session.find(EntityKind.BUSINESS, result.identity)
        session.stop()
        return result, created, after, session

    result, created, after, session = asyncio.run(scenario())

    assert result.created
    assert created is not None and created.project_name == "Incentive Trip"
    assert created.creator_id == session.user_id
    assert after is None
    assert session.tracker.status is SyncStatus.IDLE


def test_mirror_errors_surface_in_the_dashboard():
    async def scenario():
        store = _seeded_store()
        session = DashboardSession(store, AnonymousAuth())
        await session.start()
        await _settle()
        store.break_subscriptions("business_projects", PermissionDenied("missing read rule"))
        await _settle()
        data = session.dashboard()
        session.stop()
        return data

    data = asyncio.run(scenario())

    assert data["errors"] == ["business_projects: missing read rule"]
    assert len(data["items"]) == 3


def test_second_start_is_rejected():
    async def scenario():
        session = DashboardSession(InMemoryStore(), AnonymousAuth())
        await session.start()
        try:
            with pytest.raises(RuntimeError):
                await session.start()
        finally:
            session.stop()

    asyncio.run(scenario())


def test_failed_update_keeps_mirror_and_draft():
    async def scenario():
        store = _seeded_store()
        session = DashboardSession(store, AnonymousAuth())
        await session.start()
        await _settle()

        original = session.find(EntityKind.TRAVEL, "t1")
        draft = FormState.from_item(original)
        draft.update("revenue", 99999)
        before = draft.copy()
        store.fail_next_write(TransportFailure("connection reset"))
        with pytest.raises(WriteError):
            await session.submit(draft, is_editing=True)
        await _settle()
        current = session.find(EntityKind.TRAVEL, "t1")
        session.stop()
        return original, current, draft, before, session.tracker.status

    original, current, draft, before, status = asyncio.run(scenario())

    assert current == original
    assert draft == before
    assert status is SyncStatus.ERROR
