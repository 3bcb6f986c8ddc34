"""
Static API generation.

Writes pre-rendered JSON API files into a built Storybook directory so the
documentation can be served by any static web server:

<static_dir>/api/
  index.json            API description
  stories.json          All stories (list_stories result)
  stories/<id>.json     Story details (get_story result)
  docs/<id>.json        Story documentation (get_story_docs result)
  nginx.conf.example    Example nginx configuration

Stories are processed by a pool of asyncio workers draining a shared queue;
each story's files are independent of every other story's.
"""

import asyncio
import json
import re
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn, TimeElapsedColumn

from storydocs.inventory import load_inventory_file
from storydocs.tools import StoryTools

logger = logging.getLogger(__name__)

console = Console()

DEFAULT_STATIC_DIRS = ['storybook-static', 'dist/storybook', 'build/storybook']

NGINX_TEMPLATE = """# nginx configuration for static Storybook API
# Add this to your server block

location /api {{
    alias {static_dir}/api;
    default_type application/json;
    add_header Access-Control-Allow-Origin *;

    # Rewrite for pretty URLs
    try_files $uri $uri.json =404;
}}

location /api/stories/ {{
    alias {static_dir}/api/stories/;
    default_type application/json;
    add_header Access-Control-Allow-Origin *;
}}

location /api/docs/ {{
    alias {static_dir}/api/docs/;
    default_type application/json;
    add_header Access-Control-Allow-Origin *;
}}
"""


def safe_story_id(story_id: str) -> str:
    """Map a story id to a file name: characters outside [A-Za-z0-9_-] become ``_``."""
    return re.sub(r'[^A-Za-z0-9_-]', '_', story_id)


def detect_static_dir(project_dir: Path) -> Optional[Path]:
    """
    Find the Storybook build output directory of a project.

    Checks ``build-storybook`` ``outputDir`` in angular.json first, then the
    common default directories (which must contain an index.json).

    Args:
        project_dir: Project root

    Returns:
        Build directory, or None if none was found
    """
    project_dir = Path(project_dir)

    angular_json = project_dir / 'angular.json'
    if angular_json.is_file():
        try:
            data = json.loads(angular_json.read_text(encoding='utf-8'))
        except (OSError, ValueError) as e:
            logger.debug(f"Could not parse {angular_json}: {e}")
            data = {}

        projects = data.get('projects') if isinstance(data, dict) else None
        for project in (projects or {}).values():
            if not isinstance(project, dict):
                continue
            build = (project.get('architect') or {}).get('build-storybook') or {}
            output_dir = (build.get('options') or {}).get('outputDir')
            if output_dir:
                candidate = project_dir / output_dir
                if candidate.is_dir():
                    logger.debug(f"Static dir from angular.json: {candidate}")
                    return candidate

    for name in DEFAULT_STATIC_DIRS:
        candidate = project_dir / name
        if (candidate / 'index.json').is_file():
            logger.debug(f"Static dir auto-detected: {candidate}")
            return candidate

    return None


def write_json(path: Path, data: Any):
    """Write JSON with a stable layout (2-space indent, key order preserved)."""
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding='utf-8')


class StaticApiGenerator:
    """Generate the static JSON API inside a Storybook build directory."""

    def __init__(
        self,
        static_dir: Path,
        project_dir: Path,
        num_workers: int = 5,
        show_progress: bool = False
    ):
        """
        Initialize static API generator.

        Args:
            static_dir: Storybook build directory (contains index.json)
            project_dir: Project root used to read story/component sources
            num_workers: Number of parallel workers (default: 5)
            show_progress: Render a rich progress bar while generating
        """
        if num_workers < 1:
            raise ValueError("num_workers must be at least 1")

        self.static_dir = Path(static_dir)
        self.project_dir = Path(project_dir)
        self.num_workers = num_workers
        self.show_progress = show_progress

        self.api_dir = self.static_dir / 'api'
        self.stories_dir = self.api_dir / 'stories'
        self.docs_dir = self.api_dir / 'docs'

    def api_description(self) -> Dict[str, Any]:
        from storydocs import __version__

        return {
            "success": True,
            "name": "storydocs static API",
            "version": __version__,
            "mode": "static",
            "endpoints": {
                "GET /api": "This documentation",
                "GET /api/stories.json": "Get all stories",
                "GET /api/stories/{storyId}.json": "Get story details",
                "GET /api/docs/{storyId}.json": "Get story documentation",
            },
            "note": "This is a static API. Live tool calls require a running server.",
        }

    async def _write_story(self, tools: StoryTools, story_id: str):
        safe_id = safe_story_id(story_id)

        story_result = await tools.get_story(story_id)
        await asyncio.to_thread(write_json, self.stories_dir / f"{safe_id}.json", story_result)

        docs_result = await tools.get_story_docs(story_id)
        await asyncio.to_thread(write_json, self.docs_dir / f"{safe_id}.json", docs_result)

    async def _worker(
        self,
        worker_id: int,
        story_queue: asyncio.Queue,
        tools: StoryTools,
        progress: Optional[Progress],
        overall_task
    ) -> List[Dict[str, Any]]:
        """
        Worker that writes story/docs files for ids taken from the queue.

        Returns:
            One result entry per story processed by this worker
        """
        worker_results = []

        while True:
            try:
                story_id = await asyncio.wait_for(story_queue.get(), timeout=0.1)
            except asyncio.TimeoutError:
                break

            try:
                await self._write_story(tools, story_id)
                worker_results.append({"story_id": story_id, "status": "success"})
            except Exception as e:
                logger.error(f"Worker {worker_id}: failed {story_id}: {e}")
                worker_results.append({"story_id": story_id, "status": "failed", "error": str(e)})
            finally:
                if progress is not None:
                    progress.update(overall_task, advance=1)
                story_queue.task_done()

        return worker_results

    async def generate_async(self) -> Dict[str, Any]:
        """
        Generate all API files.

        Returns:
            Summary with apiDir, storyCount, docsCount and failures

        Raises:
            FileNotFoundError: If static_dir has no index.json
        """
        index_path = self.static_dir / 'index.json'
        if not index_path.is_file():
            raise FileNotFoundError(f"No index.json found in {self.static_dir}")

        inventory = await asyncio.to_thread(load_inventory_file, index_path)
        tools = StoryTools(self.project_dir, index_file=index_path, inventory=inventory)

        self.stories_dir.mkdir(parents=True, exist_ok=True)
        self.docs_dir.mkdir(parents=True, exist_ok=True)

        write_json(self.api_dir / 'index.json', self.api_description())

        stories_result = await tools.list_stories()
        write_json(self.api_dir / 'stories.json', stories_result)
        logger.info(f"Generated stories.json ({stories_result.get('count', 0)} stories)")

        story_queue: asyncio.Queue = asyncio.Queue()
        for entry in inventory:
            await story_queue.put(entry.id)

        if self.show_progress:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                TimeElapsedColumn(),
                console=console,
            ) as progress:
                overall_task = progress.add_task(f"[cyan]Generating {len(inventory)} stories", total=len(inventory))
                worker_results = await asyncio.gather(*[
                    self._worker(worker_id, story_queue, tools, progress, overall_task)
                    for worker_id in range(self.num_workers)
                ])
        else:
            worker_results = await asyncio.gather(*[
                self._worker(worker_id, story_queue, tools, None, None)
                for worker_id in range(self.num_workers)
            ])

        results = [r for worker in worker_results for r in worker]
        written = sum(1 for r in results if r["status"] == "success")
        failures = [r for r in results if r["status"] == "failed"]

        (self.api_dir / 'nginx.conf.example').write_text(
            NGINX_TEMPLATE.format(static_dir=self.static_dir),
            encoding='utf-8'
        )

        logger.info(f"Generated {written} story and docs files in {self.api_dir}")
        return {
            "apiDir": str(self.api_dir),
            "storyCount": written,
            "docsCount": written,
            "failures": failures,
        }

    def generate(self) -> Dict[str, Any]:
        """Synchronous wrapper around generate_async."""
        return asyncio.run(self.generate_async())
