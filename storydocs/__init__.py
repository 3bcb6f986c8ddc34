"""
storydocs - Documentation extraction for Storybook projects.

Reads a Storybook project without running it and turns its stories and
component sources into structured documentation: component selectors,
templates and properties, story variants with their args, and generated
usage snippets in the framework's own binding syntax.

Main Components:
- Extractors: Framework detection, import resolution, component and story extraction
- Generators: Usage examples per framework convention
- Pipeline: Story parsing and documentation assembly
- Inventory / Tools: Story index access and tool handlers
- Static API: Pre-rendered JSON API inside a Storybook build

Usage:
    from storydocs import build_story_docs, load_inventory_file
    from pathlib import Path

    inventory = load_inventory_file(Path("storybook-static/index.json"))
    docs = build_story_docs(inventory.get("example-button--primary"), Path("."))
    print(docs.usage_examples["Primary"])
"""

from .schemas import (
    Framework,
    StoryIndexEntry,
    PropertyDoc,
    ComponentDoc,
    StoryVariant,
    StoryFileDoc,
    ParsedStory,
    StoryDocs,
)

from .extractors import (
    detect_framework,
    resolve_component_path,
    extract_component_docs,
    extract_story_examples,
)
from .generators import generate_usage_example
from .pipeline import StoryPipeline, parse_story_file, build_story_docs, story_file_path
from .inventory import StoryInventory, InventoryUnavailableError, load_inventory_file, fetch_inventory
from .tools import StoryTools
from .static_api import StaticApiGenerator, detect_static_dir

__all__ = [
    # Schemas
    "Framework",
    "StoryIndexEntry",
    "PropertyDoc",
    "ComponentDoc",
    "StoryVariant",
    "StoryFileDoc",
    "ParsedStory",
    "StoryDocs",

    # Extraction
    "detect_framework",
    "resolve_component_path",
    "extract_component_docs",
    "extract_story_examples",
    "generate_usage_example",

    # Pipeline
    "StoryPipeline",
    "parse_story_file",
    "build_story_docs",
    "story_file_path",

    # Inventory and tools
    "StoryInventory",
    "InventoryUnavailableError",
    "load_inventory_file",
    "fetch_inventory",
    "StoryTools",

    # Static API
    "StaticApiGenerator",
    "detect_static_dir",
]

__version__ = "0.1.0"
