"""
Story inventory: the set of stories a Storybook build exposes.

The inventory is read from Storybook's ``index.json`` (v7+, ``entries``)
or the legacy ``stories.json`` (v6, ``stories``), either from a file on
disk or from a running Storybook server.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional
import logging

import httpx
from pydantic import ValidationError

from storydocs.schemas import StoryIndexEntry

logger = logging.getLogger(__name__)


class InventoryUnavailableError(Exception):
    """The story index could not be read (unreachable server, malformed document)."""


class StoryInventory:
    """
    Read-only lookup over story index entries.

    Entries keep the order of the source document. An empty inventory is
    valid; entries without an id are skipped.
    """

    def __init__(self, entries: Optional[Dict[str, StoryIndexEntry]] = None):
        self.entries: Dict[str, StoryIndexEntry] = entries or {}

    @classmethod
    def from_document(cls, data: Any) -> "StoryInventory":
        """
        Build an inventory from a parsed index document.

        Args:
            data: Parsed ``index.json`` / ``stories.json`` content

        Returns:
            StoryInventory

        Raises:
            InventoryUnavailableError: If the document has no entry mapping
        """
        if not isinstance(data, dict):
            raise InventoryUnavailableError("Story index must be a JSON object")

        raw_entries = data.get('entries')
        if raw_entries is None:
            raw_entries = data.get('stories')
        if not isinstance(raw_entries, dict):
            raise InventoryUnavailableError("Story index has no 'entries' or 'stories' mapping")

        entries: Dict[str, StoryIndexEntry] = {}
        for key, raw in raw_entries.items():
            if not isinstance(raw, dict):
                logger.warning(f"Skipping malformed index entry: {key}")
                continue
            raw = {'id': key, **raw}
            try:
                entry = StoryIndexEntry.model_validate(raw)
            except ValidationError as e:
                logger.warning(f"Skipping invalid index entry {key}: {e}")
                continue
            # Storybook 6 only carries kind
            if entry.title is None and entry.kind:
                entry.title = entry.kind
            entries[entry.id] = entry

        logger.debug(f"Loaded {len(entries)} index entries")
        return cls(entries)

    def get(self, story_id: str) -> Optional[StoryIndexEntry]:
        """Return the entry for ``story_id`` or None."""
        return self.entries.get(story_id)

    def list(self, kind: Optional[str] = None) -> List[StoryIndexEntry]:
        """
        List entries, optionally restricted to one kind (title).

        Args:
            kind: Story title/kind to filter on (exact match)

        Returns:
            Entries in index order
        """
        if kind is None:
            return list(self.entries.values())
        return [
            entry for entry in self.entries.values()
            if entry.title == kind or entry.kind == kind
        ]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[StoryIndexEntry]:
        return iter(self.entries.values())

    def __contains__(self, story_id: str) -> bool:
        return story_id in self.entries


def load_inventory_file(path: Path) -> StoryInventory:
    """
    Load an inventory from an ``index.json`` file.

    Args:
        path: Path to index.json (or stories.json)

    Returns:
        StoryInventory

    Raises:
        InventoryUnavailableError: If the file is missing or not valid JSON
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding='utf-8'))
    except FileNotFoundError as e:
        raise InventoryUnavailableError(f"Story index not found: {path}") from e
    except (OSError, ValueError) as e:
        raise InventoryUnavailableError(f"Could not read story index {path}: {e}") from e

    logger.info(f"Loading story index from {path}")
    return StoryInventory.from_document(data)


INDEX_PATHS = ['index.json', 'stories.json']


async def fetch_inventory(
    storybook_url: str,
    timeout: float = 10.0,
    client: Optional[httpx.AsyncClient] = None
) -> StoryInventory:
    """
    Fetch the inventory from a running Storybook server.

    Tries ``/index.json`` first and falls back to the legacy
    ``/stories.json`` when the server answers 404.

    Args:
        storybook_url: Base URL of the Storybook server
        timeout: Request timeout in seconds
        client: Optional client to reuse (its own timeout applies)

    Returns:
        StoryInventory

    Raises:
        InventoryUnavailableError: If the server is unreachable or the
            document is malformed
    """
    base_url = storybook_url.rstrip('/')
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=timeout)

    try:
        for index_path in INDEX_PATHS:
            url = f"{base_url}/{index_path}"
            try:
                response = await client.get(url, follow_redirects=True)
            except httpx.HTTPError as e:
                raise InventoryUnavailableError(f"Storybook server unreachable at {url}: {e}") from e

            if response.status_code == 404:
                logger.debug(f"{url} returned 404")
                continue

            try:
                response.raise_for_status()
                data = response.json()
            except (httpx.HTTPStatusError, ValueError) as e:
                raise InventoryUnavailableError(f"Invalid story index at {url}: {e}") from e

            logger.info(f"Fetched story index from {url}")
            return StoryInventory.from_document(data)
    finally:
        if owns_client:
            await client.aclose()

    raise InventoryUnavailableError(f"No story index found at {base_url}")
