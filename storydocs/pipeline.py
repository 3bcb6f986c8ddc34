"""
Story documentation pipeline.

Composes the extractors into the two documents served to clients:

1. parse_story_file: component identity, effective args and argTypes of one
   story, plus the component's documentation
2. build_story_docs: the full documentation document for an index entry
   (component docs, story examples, usage examples, or MDX content)

Every stage is best effort. A missing component file, an unrecognised
story shape or an unresolvable import leaves the corresponding fields
empty and never fails the whole document.
"""

from pathlib import Path
from typing import Dict, Optional, Tuple
import logging

from storydocs.extractors.component_extractor import ComponentDocExtractor
from storydocs.extractors.framework_detector import detect_framework
from storydocs.extractors.import_resolver import ImportResolver
from storydocs.extractors.story_extractor import StoryExampleExtractor
from storydocs.generators.usage_example import generate_usage_example
from storydocs.schemas import (
    ComponentDoc,
    Framework,
    ParsedStory,
    StoryDocs,
    StoryFileDoc,
    StoryIndexEntry,
    StoryVariant,
)
from storydocs.utils.source_text import kebab_case, read_source

logger = logging.getLogger(__name__)


def story_file_path(project_root: Path, import_path: str) -> Path:
    """
    Join an index ``importPath`` onto the project root.

    Args:
        project_root: Project root directory
        import_path: Path from the story index (usually ``./src/...``)

    Returns:
        Absolute-ish story file path
    """
    relative = import_path[2:] if import_path.startswith('./') else import_path
    return Path(project_root) / relative


class StoryPipeline:
    """
    Build story documents for one project.

    The framework is detected once per project (detection results are also
    cached process-wide) and passed explicitly to the component extractor.
    """

    def __init__(self, project_root: Path, framework: Optional[Framework] = None):
        """
        Initialize pipeline.

        Args:
            project_root: Storybook project root
            framework: Framework override (None to detect)

        Raises:
            ValueError: If project_root is empty
        """
        if project_root is None or str(project_root).strip() == '':
            raise ValueError("project_root is required")

        self.project_root = Path(project_root)
        self._framework = framework
        self.resolver = ImportResolver()
        self.story_extractor = StoryExampleExtractor()

    @property
    def framework(self) -> Framework:
        if self._framework is None:
            self._framework = detect_framework(self.project_root)
        return self._framework

    # ------------------------------------------------------------------
    # shared steps
    # ------------------------------------------------------------------

    def _read_story(self, path: Path) -> Tuple[Optional[str], Optional[StoryFileDoc]]:
        content = read_source(path)
        if content is None:
            logger.warning(f"Story file not found: {path}")
            return None, None
        if path.suffix == '.mdx':
            return content, None
        return content, self.story_extractor.extract_from_source(content)

    def component_docs_for(self, path: Path, content: str, component_name: Optional[str]) -> Optional[ComponentDoc]:
        """Resolve the meta component import and extract its documentation."""
        if not component_name:
            return None

        component_path = self.resolver.resolve_component(path, content, component_name)
        if component_path is None:
            logger.debug(f"Could not resolve component {component_name} from {path}")
            return None

        return ComponentDocExtractor(self.framework).extract_from_file(component_path, component_name)

    @staticmethod
    def select_variant(story_doc: StoryFileDoc, story_id: str) -> Optional[StoryVariant]:
        """
        Pick the variant a story id refers to.

        The part of the id after ``--`` is compared with the kebab-cased
        export name, then with the kebab-cased display name.
        """
        if '--' not in story_id:
            return None
        story_part = story_id.split('--', 1)[1]

        for variant in story_doc.stories.values():
            if kebab_case(variant.name) == story_part:
                return variant
        for variant in story_doc.stories.values():
            if variant.story_name and kebab_case(variant.story_name) == story_part:
                return variant
        return None

    # ------------------------------------------------------------------
    # documents
    # ------------------------------------------------------------------

    def parse_story(self, path: Path, story_id: str) -> Optional[ParsedStory]:
        """
        Parse one story of a story file.

        Args:
            path: Story file path
            story_id: Story id used to pick the variant

        Returns:
            ParsedStory, or None if the file is missing or not a CSF file
        """
        path = Path(path)
        content, story_doc = self._read_story(path)
        if content is None or story_doc is None:
            return None

        variant = self.select_variant(story_doc, story_id)
        if variant is None:
            logger.debug(f"No variant matches {story_id} in {path.name}")

        args = dict(story_doc.meta_args)
        arg_types = dict(story_doc.meta_arg_types)
        if variant is not None:
            args.update(variant.args)
            arg_types.update(variant.arg_types)

        return ParsedStory(
            component=story_doc.component,
            args=args,
            arg_types=arg_types,
            component_docs=self.component_docs_for(path, content, story_doc.component),
        )

    def build_docs(self, entry: StoryIndexEntry) -> StoryDocs:
        """
        Build the documentation document for an index entry.

        Args:
            entry: Story index entry

        Returns:
            StoryDocs (fields the sources do not provide are left empty)
        """
        docs = StoryDocs(
            story_id=entry.id,
            title=entry.title,
            name=entry.name,
            type=entry.type,
            framework=self.framework,
        )

        if not entry.import_path:
            logger.debug(f"Entry {entry.id} has no importPath")
            return docs

        path = story_file_path(self.project_root, entry.import_path)
        content, story_doc = self._read_story(path)
        if content is None:
            return docs

        if path.suffix == '.mdx':
            docs.mdx_content = content
            return docs

        if story_doc is None:
            logger.debug(f"No stories recognised in {path}")
            return docs

        component_doc = self.component_docs_for(path, content, story_doc.component)

        docs.component = story_doc.component
        docs.imports = story_doc.imports
        docs.meta_code = story_doc.meta
        docs.story_examples = story_doc.stories

        if component_doc is not None:
            docs.selector = component_doc.selector
            docs.template = component_doc.template
            docs.component_code = component_doc.component_code
            docs.properties = component_doc.properties
            docs.component_description = component_doc.description

            usage_examples = self._usage_examples(story_doc, component_doc)
            if usage_examples:
                docs.usage_examples = usage_examples

        return docs

    def _usage_examples(self, story_doc: StoryFileDoc, component_doc: ComponentDoc) -> Dict[str, str]:
        identity = component_doc.identity or story_doc.component
        if not identity:
            return {}

        framework = component_doc.framework if self.framework == Framework.UNKNOWN else self.framework
        examples = {}
        for name, variant in story_doc.stories.items():
            example = generate_usage_example(identity, variant.args, name, framework, component_doc.source_path)
            variant.usage_example = example
            examples[name] = example
        return examples


def parse_story_file(
    story_file_path: Path,
    story_id: str,
    project_root: Path,
    framework: Optional[Framework] = None
) -> Optional[ParsedStory]:
    """
    Convenience function to parse one story of a story file.

    Args:
        story_file_path: Story file path
        story_id: Story id (``<title>--<story>``)
        project_root: Project root (for framework detection)
        framework: Framework override

    Returns:
        ParsedStory or None
    """
    return StoryPipeline(project_root, framework).parse_story(story_file_path, story_id)


def build_story_docs(
    entry: StoryIndexEntry,
    project_root: Path,
    framework: Optional[Framework] = None
) -> StoryDocs:
    """
    Convenience function to build the documentation document of a story.

    Args:
        entry: Story index entry
        project_root: Project root
        framework: Framework override (None to detect)

    Returns:
        StoryDocs
    """
    return StoryPipeline(project_root, framework).build_docs(entry)
