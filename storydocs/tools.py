"""
Tool handlers exposing story documentation to assistants and HTTP clients.

Each handler returns a plain ``{"success": bool, ...}`` dictionary so the
same results can be served over any transport. Handlers never raise: a
missing story, an unavailable inventory or an unexpected error is turned
into a ``success: False`` result.
"""

import asyncio
from pathlib import Path
from typing import Any, Dict, Optional
import logging

import httpx

from storydocs.extractors.framework_detector import detect_framework
from storydocs.inventory import (
    InventoryUnavailableError,
    StoryInventory,
    fetch_inventory,
    load_inventory_file,
)
from storydocs.pipeline import StoryPipeline, story_file_path
from storydocs.schemas import Framework

logger = logging.getLogger(__name__)


def not_found(story_id: str) -> Dict[str, Any]:
    """Result for a story id missing from the inventory."""
    return {"success": False, "error": f'Story "{story_id}" not found', "reason": "not_found"}


def unavailable(error: Exception, hint: Optional[str] = None) -> Dict[str, Any]:
    """Result for an inventory that could not be read."""
    result = {"success": False, "error": f"Storybook is not ready: {error}", "reason": "unavailable"}
    if hint:
        result["hint"] = hint
    return result


class StoryTools:
    """
    Story tool handlers for one Storybook project.

    The inventory comes from ``index_file`` when given, otherwise from the
    running server at ``storybook_url``. It is re-read on every call so the
    handlers always reflect the current build.
    """

    def __init__(
        self,
        project_dir: Path,
        storybook_url: Optional[str] = None,
        index_file: Optional[Path] = None,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
        framework: Optional[Framework] = None,
        inventory: Optional[StoryInventory] = None
    ):
        """
        Initialize tool handlers.

        Args:
            project_dir: Storybook project root
            storybook_url: Base URL of a running Storybook server
            index_file: Path of a built index.json (takes precedence over the URL)
            timeout: HTTP timeout for inventory requests
            client: Optional HTTP client to reuse
            framework: Framework override (None to detect)
            inventory: Fixed inventory to serve instead of reading a source
        """
        self.project_dir = Path(project_dir)
        self.storybook_url = storybook_url
        self.index_file = Path(index_file) if index_file else None
        self.timeout = timeout
        self.client = client
        self.framework = framework or detect_framework(self.project_dir)
        self.pipeline = StoryPipeline(self.project_dir, self.framework)
        self.inventory = inventory

    async def load_inventory(self) -> StoryInventory:
        """
        Read the current inventory.

        Raises:
            InventoryUnavailableError: If no source is configured or it cannot be read
        """
        if self.inventory is not None:
            return self.inventory
        if self.index_file is not None:
            return await asyncio.to_thread(load_inventory_file, self.index_file)
        if self.storybook_url:
            return await fetch_inventory(self.storybook_url, timeout=self.timeout, client=self.client)
        raise InventoryUnavailableError("No story index source configured")

    def _hint(self) -> Optional[str]:
        if self.index_file is not None:
            return f"Build Storybook so that {self.index_file} exists"
        if self.storybook_url:
            return f"Make sure Storybook is running at {self.storybook_url}"
        return None

    async def list_stories(self, kind: Optional[str] = None) -> Dict[str, Any]:
        """List all stories, optionally filtered by kind/title."""
        try:
            inventory = await self.load_inventory()
            stories = [entry.summary() for entry in inventory.list(kind)]
            return {"success": True, "count": len(stories), "stories": stories}
        except InventoryUnavailableError as e:
            logger.warning(f"Inventory unavailable: {e}")
            return unavailable(e, self._hint())
        except Exception as e:
            logger.exception(f"list_stories failed: {e}")
            return {"success": False, "error": str(e)}

    async def get_story(self, story_id: str) -> Dict[str, Any]:
        """
        Get one story with its component, effective args and component docs.

        Args:
            story_id: Story id from the index

        Returns:
            ``{"success": True, "story": {...}}`` or a failure result
        """
        try:
            inventory = await self.load_inventory()
            entry = inventory.get(story_id)
            if entry is None:
                return not_found(story_id)

            story = entry.summary()
            if entry.import_path:
                path = story_file_path(self.project_dir, entry.import_path)
                parsed = await asyncio.to_thread(self.pipeline.parse_story, path, story_id)
                if parsed is not None:
                    story["component"] = parsed.component
                    story["args"] = parsed.args
                    story["argTypes"] = parsed.arg_types
                    if parsed.component_docs is not None:
                        story["docs"] = parsed.component_docs.model_dump(mode="json", by_alias=True)

            return {"success": True, "story": story}
        except InventoryUnavailableError as e:
            logger.warning(f"Inventory unavailable: {e}")
            return unavailable(e, self._hint())
        except Exception as e:
            logger.exception(f"get_story failed for {story_id}: {e}")
            return {"success": False, "error": str(e)}

    async def get_story_docs(self, story_id: str) -> Dict[str, Any]:
        """
        Get the full documentation document of a story.

        Args:
            story_id: Story id from the index

        Returns:
            ``{"success": True, "docs": {...}}`` or a failure result
        """
        try:
            inventory = await self.load_inventory()
            entry = inventory.get(story_id)
            if entry is None:
                return not_found(story_id)

            docs = await asyncio.to_thread(self.pipeline.build_docs, entry)
            return {"success": True, "docs": docs.to_json_dict()}
        except InventoryUnavailableError as e:
            logger.warning(f"Inventory unavailable: {e}")
            return unavailable(e, self._hint())
        except Exception as e:
            logger.exception(f"get_story_docs failed for {story_id}: {e}")
            return {"success": False, "error": str(e)}

    async def get_stories_by_kind(self, kind: str) -> Dict[str, Any]:
        """Get the stories of one kind/title."""
        try:
            inventory = await self.load_inventory()
            stories = [entry.summary(include_import_path=False) for entry in inventory.list(kind)]
            return {"success": True, "count": len(stories), "kind": kind, "stories": stories}
        except InventoryUnavailableError as e:
            logger.warning(f"Inventory unavailable: {e}")
            return unavailable(e, self._hint())
        except Exception as e:
            logger.exception(f"get_stories_by_kind failed for {kind}: {e}")
            return {"success": False, "error": str(e)}
