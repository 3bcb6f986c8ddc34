"""
Import resolution for story component imports.

Story files import the component they document with a relative specifier
(``import { Button } from './button.component'``). The resolver finds the
specifier for a given component name and maps it to a concrete file by
probing a fixed, ordered list of extensions.
"""

import re
from pathlib import Path
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class ImportResolver:
    """
    Resolve relative import specifiers to component source files.

    Extensions are probed in a fixed order and the first existing file wins.
    The order is deliberate: an exact match beats any added extension, and
    earlier extensions beat later ones when several candidates exist.
    """

    # Probe order for `<specifier><ext>`
    EXTENSIONS = ['', '.ts', '.tsx', '.js', '.jsx', '.vue', '.svelte']

    # Probed only after every extension failed (directory imports)
    INDEX_FILES = ['index.ts', 'index.tsx', 'index.js', 'index.jsx']

    def find_import_specifier(self, story_source: str, component_name: str) -> Optional[str]:
        """
        Find the module specifier that provides ``component_name``.

        Handles named imports (also renamed: ``{ Foo as Button }``) and
        default imports.

        Args:
            story_source: Story file content
            component_name: Identifier used in the meta ``component:`` field

        Returns:
            The specifier string, or None if no import provides the name
        """
        name = re.escape(component_name)

        named = re.search(
            rf'import\s+(?:type\s+)?(?:[\w$]+\s*,\s*)?\{{[^}}]*?(?<![\w$]){name}(?![\w$])[^}}]*\}}\s*from\s*[\'"]([^\'"]+)[\'"]',
            story_source
        )
        if named:
            return named.group(1)

        default = re.search(
            rf'import\s+{name}\s*(?:,\s*\{{[^}}]*\}}\s*)?from\s*[\'"]([^\'"]+)[\'"]',
            story_source
        )
        if default:
            return default.group(1)

        return None

    def resolve(self, story_file_path: Path, import_specifier: str) -> Optional[Path]:
        """
        Resolve an import specifier relative to the story file.

        Args:
            story_file_path: Path of the story file that contains the import
            import_specifier: Relative specifier (``./button``, ``../Button.vue``)

        Returns:
            Path of the first existing candidate, or None
        """
        if not import_specifier or not import_specifier.startswith('.'):
            logger.debug(f"Not a relative import, skipping: {import_specifier!r}")
            return None

        base = (Path(story_file_path).parent / import_specifier).resolve()

        for ext in self.EXTENSIONS:
            candidate = Path(f"{base}{ext}")
            if candidate.is_file():
                return candidate

        if base.is_dir():
            for index_name in self.INDEX_FILES:
                candidate = base / index_name
                if candidate.is_file():
                    return candidate

        logger.debug(f"Could not resolve {import_specifier!r} from {story_file_path}")
        return None

    def resolve_component(self, story_file_path: Path, story_source: str, component_name: str) -> Optional[Path]:
        """Find and resolve the import for ``component_name`` in one step."""
        specifier = self.find_import_specifier(story_source, component_name)
        if specifier is None:
            logger.debug(f"No import found for component {component_name}")
            return None
        return self.resolve(story_file_path, specifier)


def resolve_component_path(story_file_path: Path, import_specifier: str) -> Optional[Path]:
    """
    Convenience function to resolve a component import.

    Args:
        story_file_path: Story file containing the import
        import_specifier: Relative import specifier

    Returns:
        Resolved component file, or None when nothing matches
    """
    return ImportResolver().resolve(story_file_path, import_specifier)


def find_component_import(story_source: str, component_name: str) -> Optional[str]:
    """Convenience function returning the import specifier for a component."""
    return ImportResolver().find_import_specifier(story_source, component_name)
