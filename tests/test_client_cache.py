"""Tests for the client-side node group cache."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
import pytest
from fastapi import FastAPI

import NodeGroup_GUI.api.node_groups as node_groups_api
from NodeGroup_GUI.client_cache import NodeGroupClientCache
from NodeGroup_GUI.exception_handlers import add_exception_handlers
from NodeGroup_GUI.exceptions import NodeGroupClientError
from NodeGroup_GUI.node_group_store import NodeGroupStore
from NodeGroup_GUI.storage import MemoryStorage

CacheAction = Callable[[NodeGroupClientCache], Awaitable[Any]]


@pytest.fixture
def app(monkeypatch: pytest.MonkeyPatch) -> FastAPI:
    monkeypatch.setattr(
        node_groups_api,
        "node_group_store",
        NodeGroupStore(MemoryStorage(), "test_node_groups"),
    )
    app = FastAPI()
    app.include_router(node_groups_api.router)
    add_exception_handlers(app)
    return app


def _run(app: FastAPI, action: CacheAction) -> Any:
    async def runner() -> Any:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(
            transport=transport, base_url="http://testserver"
        ) as client:
            cache = NodeGroupClientCache(client=client)
            return await action(cache)

    return asyncio.run(runner())


def test_fetch_groups_empty(app: FastAPI) -> None:
    async def action(cache: NodeGroupClientCache) -> tuple[list, bool]:
        items = await cache.fetch_groups()
        return items, cache.is_loading

    items, is_loading = _run(app, action)

    assert items == []
    assert is_loading is False


def test_save_and_delete_replace_local_list(app: FastAPI) -> None:
    async def action(cache: NodeGroupClientCache) -> dict[str, Any]:
        created = await cache.save_group({"name": "EU", "nodeIds": ["n1", "n2"]})
        await cache.save_group({"name": "US", "nodeIds": ["n2"], "enabled": False})
        eu_id = created["data"][0]["id"]
        snapshot = {
            "names": [g["name"] for g in cache.items],
            "active": [g["name"] for g in cache.active_items],
            "by_node": [g["name"] for g in cache.get_groups_by_node_id("n2")],
            "by_id": cache.get_group_by_id(eu_id)["name"],
        }
        deleted = await cache.delete_group(eu_id)
        snapshot["delete_message"] = deleted["message"]
        snapshot["after_delete"] = [g["name"] for g in cache.items]
        return snapshot

    snapshot = _run(app, action)

    assert snapshot["names"] == ["EU", "US"]
    assert snapshot["active"] == ["EU"]
    assert snapshot["by_node"] == ["EU", "US"]
    assert snapshot["by_id"] == "EU"
    assert snapshot["delete_message"] == "deleted"
    assert snapshot["after_delete"] == ["US"]


def test_failed_save_keeps_local_state(app: FastAPI) -> None:
    async def action(cache: NodeGroupClientCache) -> tuple[Any, list, list]:
        await cache.save_group({"name": "EU", "nodeIds": ["n1"]})
        before = cache.items
        with pytest.raises(NodeGroupClientError) as exc_info:
            await cache.save_group({"name": "EU", "nodeIds": ["n3"]})
        return exc_info.value, before, cache.items

    error, before, after = _run(app, action)

    assert error.status_code == 400
    assert error.message == "duplicate name"
    assert after == before


def test_failed_delete_raises_not_found(app: FastAPI) -> None:
    async def action(cache: NodeGroupClientCache) -> NodeGroupClientError:
        with pytest.raises(NodeGroupClientError) as exc_info:
            await cache.delete_group("missing")
        return exc_info.value

    error = _run(app, action)

    assert error.status_code == 404


def test_optimistic_changes_are_overwritten_by_server(app: FastAPI) -> None:
    async def action(cache: NodeGroupClientCache) -> dict[str, Any]:
        result = await cache.save_group({"name": "EU", "nodeIds": ["n1"]})
        eu_id = result["data"][0]["id"]

        cache.update(eu_id, {"name": "EU (editing)"})
        cache.add({"id": "local-1", "name": "Draft", "nodeIds": ["n9"]})
        optimistic = [g["name"] for g in cache.items]
        authoritative = [g["name"] for g in cache.authoritative_items]
        pending = cache.has_pending_changes

        await cache.fetch_groups()
        return {
            "optimistic": optimistic,
            "authoritative": authoritative,
            "pending": pending,
            "reconciled": [g["name"] for g in cache.items],
            "pending_after": cache.has_pending_changes,
        }

    result = _run(app, action)

    assert result["optimistic"] == ["EU (editing)", "Draft"]
    assert result["authoritative"] == ["EU"]
    assert result["pending"] is True
    assert result["reconciled"] == ["EU"]
    assert result["pending_after"] is False


def test_optimistic_remove_and_set_items() -> None:
    cache = NodeGroupClientCache(client=httpx.AsyncClient())
    cache.set_items(
        [
            {"id": "g1", "name": "A", "nodeIds": ["n1"]},
            {"id": "g2", "name": "B", "nodeIds": ["n1"], "enabled": False},
        ]
    )

    cache.remove("g1")

    assert [g["id"] for g in cache.items] == ["g2"]
    assert cache.active_items == []
    assert cache.get_group_by_id("g1") is None

    cache.set_items(None)

    assert cache.items == []
    assert cache.has_pending_changes is False


def test_transport_error_is_wrapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async def runner() -> tuple[NodeGroupClientError, bool]:
        async with httpx.AsyncClient(
            transport=httpx.MockTransport(handler), base_url="http://testserver"
        ) as client:
            cache = NodeGroupClientCache(client=client)
            with pytest.raises(NodeGroupClientError) as exc_info:
                await cache.fetch_groups()
            return exc_info.value, cache.is_loading

    error, is_loading = asyncio.run(runner())

    assert "connection refused" in error.message
    assert is_loading is False


def test_unsuccessful_payload_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"success": False, "message": "nope"})

    async def runner() -> NodeGroupClientError:
        async with httpx.AsyncClient(
            transport=httpx.MockTransport(handler), base_url="http://testserver"
        ) as client:
            cache = NodeGroupClientCache(client=client)
            with pytest.raises(NodeGroupClientError) as exc_info:
                await cache.fetch_groups()
            return exc_info.value

    error = asyncio.run(runner())

    assert error.message == "nope"
    assert error.status_code == 200
