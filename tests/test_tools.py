from __future__ import annotations

import asyncio
from pathlib import Path

import httpx

from storydocs.inventory import StoryInventory
from storydocs.schemas import Framework
from storydocs.tools import StoryTools
from tests._fixtures.projects import ANGULAR_INDEX


def _tools(project: Path) -> StoryTools:
    return StoryTools(project, index_file=project / "storybook-static" / "index.json")


def test_list_stories(angular_project: Path) -> None:
    result = asyncio.run(_tools(angular_project).list_stories())

    assert result["success"] is True
    assert result["count"] == 3
    assert result["stories"][0] == {
        "id": "example-button--primary",
        "name": "Primary",
        "title": "Example/Button",
        "kind": "Example/Button",
        "importPath": "./src/app/button/button.stories.ts",
        "tags": ["story"],
        "type": "story",
    }


def test_list_stories_filtered_by_kind(angular_project: Path) -> None:
    result = asyncio.run(_tools(angular_project).list_stories("Example/Introduction"))

    assert result["count"] == 1
    assert result["stories"][0]["id"] == "example-introduction--docs"


def test_get_story_includes_args_and_component_docs(angular_project: Path) -> None:
    result = asyncio.run(_tools(angular_project).get_story("example-button--primary"))

    story = result["story"]
    assert result["success"] is True
    assert story["component"] == "ButtonComponent"
    assert story["args"] == {"primary": True, "label": "Click me"}
    assert story["docs"]["selector"] == "app-button"
    assert story["docs"]["componentName"] == "ButtonComponent"


def test_get_story_docs(angular_project: Path) -> None:
    result = asyncio.run(_tools(angular_project).get_story_docs("example-button--large"))

    docs = result["docs"]
    assert result["success"] is True
    assert docs["storyId"] == "example-button--large"
    assert docs["usageExamples"]["Large"].startswith("<!-- Large -->\n<app-button")


def test_get_stories_by_kind_omits_paths(angular_project: Path) -> None:
    result = asyncio.run(_tools(angular_project).get_stories_by_kind("Example/Button"))

    assert result["kind"] == "Example/Button"
    assert result["count"] == 2
    assert all("importPath" not in story and "tags" not in story for story in result["stories"])


def test_unknown_story_is_not_found(angular_project: Path) -> None:
    tools = _tools(angular_project)

    story = asyncio.run(tools.get_story("nope--story"))
    docs = asyncio.run(tools.get_story_docs("nope--story"))

    assert story == {"success": False, "error": 'Story "nope--story" not found', "reason": "not_found"}
    assert docs["reason"] == "not_found"


def test_missing_index_is_unavailable(angular_project: Path) -> None:
    tools = StoryTools(angular_project, index_file=angular_project / "missing" / "index.json")

    result = asyncio.run(tools.get_story("example-button--primary"))

    assert result["success"] is False
    assert result["reason"] == "unavailable"
    assert "hint" in result


def test_no_source_configured_is_unavailable(angular_project: Path) -> None:
    result = asyncio.run(StoryTools(angular_project).list_stories())

    assert result["reason"] == "unavailable"


def test_unreachable_server_is_unavailable(angular_project: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            tools = StoryTools(angular_project, storybook_url="http://localhost:6006", client=client)
            return await tools.list_stories()

    result = asyncio.run(run())

    assert result["reason"] == "unavailable"
    assert "localhost:6006" in result["hint"]


def test_server_inventory_is_used(angular_project: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=ANGULAR_INDEX)

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            tools = StoryTools(angular_project, storybook_url="http://localhost:6006", client=client)
            return await tools.get_story_docs("example-button--primary")

    result = asyncio.run(run())

    assert result["docs"]["selector"] == "app-button"


def test_preloaded_inventory_and_framework_override(angular_project: Path) -> None:
    inventory = StoryInventory.from_document(ANGULAR_INDEX)
    tools = StoryTools(angular_project, framework=Framework.ANGULAR, inventory=inventory)

    result = asyncio.run(tools.list_stories())

    assert tools.framework == Framework.ANGULAR
    assert result["count"] == 3
