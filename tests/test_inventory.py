from __future__ import annotations

import asyncio
import json
from pathlib import Path

import httpx
import pytest

from storydocs.inventory import (
    InventoryUnavailableError,
    StoryInventory,
    fetch_inventory,
    load_inventory_file,
)
from tests._fixtures.projects import ANGULAR_INDEX


LEGACY_INDEX = {
    "v": 3,
    "stories": {
        "example-card--basic": {
            "id": "example-card--basic",
            "kind": "Example/Card",
            "name": "Basic",
            "importPath": "./src/Card.stories.js",
        },
    },
}


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_from_document_reads_entries_in_order() -> None:
    inventory = StoryInventory.from_document(ANGULAR_INDEX)

    assert len(inventory) == 3
    assert [entry.id for entry in inventory] == list(ANGULAR_INDEX["entries"])
    assert inventory.get("example-button--primary").import_path == "./src/app/button/button.stories.ts"
    assert "example-introduction--docs" in inventory
    assert inventory.get("missing--story") is None


def test_from_document_falls_back_to_legacy_stories() -> None:
    inventory = StoryInventory.from_document(LEGACY_INDEX)
    entry = inventory.get("example-card--basic")

    assert entry.title == "Example/Card"
    assert entry.summary()["kind"] == "Example/Card"


def test_list_filters_by_kind() -> None:
    inventory = StoryInventory.from_document(ANGULAR_INDEX)

    assert [entry.name for entry in inventory.list("Example/Button")] == ["Primary", "Large"]
    assert inventory.list("Nope") == []


def test_from_document_skips_malformed_entries() -> None:
    inventory = StoryInventory.from_document({
        "entries": {
            "ok--story": {"title": "Ok", "name": "Story"},
            "bad--story": "not an object",
            "bad--tags": {"title": "Bad", "tags": "story"},
        },
    })

    assert [entry.id for entry in inventory] == ["ok--story"]


@pytest.mark.parametrize("document", [[], {"v": 5}, {"entries": []}])
def test_from_document_rejects_documents_without_entries(document) -> None:
    with pytest.raises(InventoryUnavailableError):
        StoryInventory.from_document(document)


def test_empty_inventory_is_valid() -> None:
    inventory = StoryInventory.from_document({"entries": {}})

    assert len(inventory) == 0
    assert inventory.list() == []


def test_load_inventory_file(tmp_path: Path) -> None:
    path = tmp_path / "index.json"
    path.write_text(json.dumps(ANGULAR_INDEX), encoding="utf-8")

    assert len(load_inventory_file(path)) == 3


def test_load_inventory_file_missing_or_invalid(tmp_path: Path) -> None:
    with pytest.raises(InventoryUnavailableError):
        load_inventory_file(tmp_path / "index.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(InventoryUnavailableError):
        load_inventory_file(broken)


def test_fetch_inventory_reads_index_json() -> None:
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(request.url.path)
        return httpx.Response(200, json=ANGULAR_INDEX)

    async def run():
        async with _client(handler) as client:
            return await fetch_inventory("http://storybook.test/", client=client)

    inventory = asyncio.run(run())

    assert requested == ["/index.json"]
    assert len(inventory) == 3


def test_fetch_inventory_falls_back_to_stories_json() -> None:
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(request.url.path)
        if request.url.path == "/index.json":
            return httpx.Response(404)
        return httpx.Response(200, json=LEGACY_INDEX)

    async def run():
        async with _client(handler) as client:
            return await fetch_inventory("http://storybook.test", client=client)

    inventory = asyncio.run(run())

    assert requested == ["/index.json", "/stories.json"]
    assert "example-card--basic" in inventory


def test_fetch_inventory_reports_unreachable_server() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async def run():
        async with _client(handler) as client:
            return await fetch_inventory("http://storybook.test", client=client)

    with pytest.raises(InventoryUnavailableError, match="unreachable"):
        asyncio.run(run())


@pytest.mark.parametrize(
    "status, body",
    [
        (500, ""),
        (200, "<html>not json</html>"),
        (404, ""),
    ],
)
def test_fetch_inventory_rejects_bad_responses(status: int, body: str) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, text=body)

    async def run():
        async with _client(handler) as client:
            return await fetch_inventory("http://storybook.test", client=client)

    with pytest.raises(InventoryUnavailableError):
        asyncio.run(run())
