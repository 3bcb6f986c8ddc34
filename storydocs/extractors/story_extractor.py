"""
Story example extraction from Component Story Format (CSF) files.

Extracts, without executing or compiling the file:
- The import statements at the top of the file
- The meta declaration (``const meta = {...}`` / ``export default {...}``)
- Every named story export with its args, in declaration order

Supported story shapes:
- CSF3 objects:        export const Primary: Story = { args: {...} };
- CSF2 template binds: export const Primary = Template.bind({}); Primary.args = {...};
- Function stories:    export const Primary = () => <Button />;
"""

import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
import logging

from storydocs.extractors.js_literal import RawExpression, decode_js_literal
from storydocs.schemas import StoryFileDoc, StoryVariant
from storydocs.utils.source_text import (
    balanced_block,
    find_closing,
    object_members,
    read_source,
    statement_end,
)

logger = logging.getLogger(__name__)


class StoryExampleExtractor:
    """
    Extract imports, meta and variants from a story file.

    Pattern based: each part is located independently and missing parts
    are left empty. The extractor does not check args against the
    component's declared properties.
    """

    IMPORT_PATTERN = re.compile(
        r'^[ \t]*import\s+(?:type\s+)?(?:[\w$*{}\s,]+?\s+from\s+)?[\'"][^\'"\n]+[\'"][ \t]*;?',
        re.MULTILINE
    )

    EXPORT_DEFAULT_IDENTIFIER = re.compile(
        r'^export\s+default\s+([A-Za-z_$][\w$]*)\s*;?\s*$',
        re.MULTILINE
    )

    EXPORT_DEFAULT_OBJECT = re.compile(
        r'^export\s+default\s*(?=\{)',
        re.MULTILINE
    )

    # export const Primary: StoryObj<typeof Button> = ...
    EXPORT_CONST = re.compile(
        r'^export\s+(?:const|let|var)\s+([A-Za-z_$][\w$]*)\s*(?::\s*[^=\n]+?)?\s*=\s*',
        re.MULTILINE
    )

    EXPORT_FUNCTION = re.compile(
        r'^export\s+(?:async\s+)?function\s+([A-Za-z_$][\w$]*)\s*\(',
        re.MULTILINE
    )

    TEMPLATE_BIND = re.compile(r'[A-Za-z_$][\w$]*\.bind\(\s*\{\s*\}\s*\)')

    # `satisfies Meta<typeof Button>` / `as Meta` after an object literal
    TYPE_SUFFIX = re.compile(r'\s*(?:satisfies|as)\s+[^;\n]+;?|\s*;')

    # Exports that are never stories
    RESERVED_EXPORTS = {'__namedExportsOrder', 'default'}

    def extract_from_file(self, story_file_path: Path) -> Optional[StoryFileDoc]:
        """
        Extract story examples from a story file.

        Args:
            story_file_path: Path to a CSF story file

        Returns:
            StoryFileDoc, or None if the file is missing, is MDX, or
            contains neither a meta declaration nor story exports
        """
        story_file_path = Path(story_file_path)

        if story_file_path.suffix == '.mdx':
            logger.debug(f"Skipping MDX story file: {story_file_path}")
            return None

        content = read_source(story_file_path)
        if content is None:
            logger.debug(f"Story file not found: {story_file_path}")
            return None

        return self.extract_from_source(content)

    def extract_from_source(self, content: str) -> Optional[StoryFileDoc]:
        """
        Extract story examples from story source text.

        Args:
            content: Story file content

        Returns:
            StoryFileDoc, or None if the text is not a story file
        """
        imports = self._extract_imports(content)
        meta_code, meta_object = self._extract_meta(content)
        meta_members = object_members(meta_object) if meta_object else {}

        excluded = self._excluded_story_matcher(meta_members)
        meta_args = self._dict_value(meta_members.get('args'))
        stories = self._extract_variants(content, excluded, meta_args, self._meta_names(content))

        if meta_code is None and not stories:
            logger.debug("No meta declaration or story exports found")
            return None

        doc = StoryFileDoc(
            imports=imports,
            meta=meta_code,
            component=self._identifier(meta_members.get('component')),
            title=self._string_value(meta_members.get('title')),
            meta_args=meta_args,
            meta_arg_types=self._dict_value(meta_members.get('argTypes')),
            stories=stories,
        )

        # Regex fallback for metas the member splitter could not read
        if doc.component is None and meta_code:
            match = re.search(r'\bcomponent\s*:\s*([A-Za-z_$][\w$]*)', meta_code)
            if match:
                doc.component = match.group(1)

        logger.debug(
            f"Extracted {len(imports)} imports, meta={'yes' if meta_code else 'no'}, "
            f"{len(stories)} stories"
        )
        return doc

    # ------------------------------------------------------------------
    # imports
    # ------------------------------------------------------------------

    def _extract_imports(self, content: str) -> List[str]:
        return [match.group(0).strip() for match in self.IMPORT_PATTERN.finditer(content)]

    # ------------------------------------------------------------------
    # meta
    # ------------------------------------------------------------------

    def _extract_meta(self, content: str) -> Tuple[Optional[str], Optional[str]]:
        """
        Locate the meta declaration.

        Returns:
            (raw declaration text, raw object literal text), both None when
            no meta is found
        """
        # export default { ... }
        match = self.EXPORT_DEFAULT_OBJECT.search(content)
        if match:
            open_index = match.end()
            return self._declaration_with_object(content, match.start(), open_index)

        # const meta = { ... }; export default meta;
        identifier = None
        match = self.EXPORT_DEFAULT_IDENTIFIER.search(content)
        if match:
            identifier = match.group(1)

        names = [identifier] if identifier else ['meta']
        for name in names:
            declaration = re.search(
                rf'^(?:export\s+)?(?:const|let|var)\s+{re.escape(name)}\s*(?::\s*[^=\n]+?)?\s*=\s*(?=\{{)',
                content,
                re.MULTILINE
            )
            if declaration:
                return self._declaration_with_object(content, declaration.start(), declaration.end())

        return None, None

    def _declaration_with_object(
        self,
        content: str,
        start: int,
        open_index: int
    ) -> Tuple[Optional[str], Optional[str]]:
        close = find_closing(content, open_index)
        if close is None:
            logger.debug("Unbalanced meta object literal")
            return None, None

        end = close + 1
        suffix = self.TYPE_SUFFIX.match(content, end)
        if suffix:
            end = suffix.end()

        return content[start:end].strip(), content[open_index:close + 1]

    def _excluded_story_matcher(self, meta_members: Dict[str, str]):
        """Build a predicate for meta.excludeStories / meta.includeStories."""
        exclude = self._name_filter(meta_members.get('excludeStories'))
        include = self._name_filter(meta_members.get('includeStories'))

        def is_excluded(name: str) -> bool:
            if exclude and exclude(name):
                return True
            if include and not include(name):
                return True
            return False

        return is_excluded

    def _name_filter(self, raw: Optional[str]):
        if not raw:
            return None

        regex = re.fullmatch(r'/(.+)/([a-z]*)', raw.strip())
        if regex:
            flags = re.IGNORECASE if 'i' in regex.group(2) else 0
            try:
                pattern = re.compile(regex.group(1), flags)
            except re.error:
                logger.debug(f"Unsupported story filter regex: {raw}")
                return None
            return lambda name: bool(pattern.search(name))

        value = decode_js_literal(raw)
        if isinstance(value, str):
            value = [value]
        if isinstance(value, list):
            names = {item for item in value if isinstance(item, str)}
            return lambda name: name in names
        return None

    # ------------------------------------------------------------------
    # variants
    # ------------------------------------------------------------------

    def _extract_variants(
        self,
        content: str,
        is_excluded,
        meta_args: Optional[Dict[str, Any]] = None,
        meta_names: Tuple[str, ...] = ('meta',)
    ) -> Dict[str, StoryVariant]:
        declarations = []
        for match in self.EXPORT_CONST.finditer(content):
            declarations.append((match.start(), match.group(1), match.end()))
        for match in self.EXPORT_FUNCTION.finditer(content):
            declarations.append((match.start(), match.group(1), None))
        declarations.sort(key=lambda item: item[0])

        stories: Dict[str, StoryVariant] = {}
        for start, name, value_index in declarations:
            if name in self.RESERVED_EXPORTS or name in stories or is_excluded(name):
                continue

            if value_index is None:
                variant = self._function_story(content, name, start)
            elif content.startswith('{', value_index):
                variant = self._object_story(content, name, start, value_index)
            else:
                variant = self._expression_story(content, name, start)

            if variant is None:
                continue

            self._apply_assignments(content, variant)
            variant.args = self._resolve_spreads(variant.args, stories, meta_args or {}, meta_names)
            stories[name] = variant

        return stories

    def _object_story(self, content: str, name: str, start: int, open_index: int) -> Optional[StoryVariant]:
        code, object_text = self._declaration_with_object(content, start, open_index)
        if code is None:
            return None

        members = object_members(object_text)
        args_code = members.get('args')

        return StoryVariant(
            name=name,
            story_name=self._string_value(members.get('name') or members.get('storyName')),
            args=self._dict_value(args_code),
            args_code=args_code,
            arg_types=self._dict_value(members.get('argTypes')),
            code=code,
        )

    def _expression_story(self, content: str, name: str, start: int) -> StoryVariant:
        end = statement_end(content, start)
        return StoryVariant(name=name, code=content[start:end].strip())

    def _function_story(self, content: str, name: str, start: int) -> StoryVariant:
        body_open = content.find('{', start)
        close = find_closing(content, body_open) if body_open != -1 else None
        end = close + 1 if close is not None else statement_end(content, start)
        return StoryVariant(name=name, code=content[start:end].strip())

    def _apply_assignments(self, content: str, variant: StoryVariant):
        """Merge CSF2 style ``Name.args = {...}`` / ``Name.storyName = '...'`` assignments."""
        name = re.escape(variant.name)
        assignment = re.compile(rf'^{name}\.(args|argTypes|storyName)\s*=\s*', re.MULTILINE)

        for match in assignment.finditer(content):
            prop = match.group(1)
            value_start = match.end()

            if content.startswith('{', value_start):
                value_code = balanced_block(content, value_start)
            else:
                value_code = content[value_start:statement_end(content, value_start)].rstrip(';').strip()
            if not value_code:
                continue

            statement = content[match.start():statement_end(content, value_start)].strip()
            variant.code = f"{variant.code}\n{statement}"

            if prop == 'args':
                variant.args = {**variant.args, **self._dict_value(value_code)}
                variant.args_code = value_code
            elif prop == 'argTypes':
                variant.arg_types = {**variant.arg_types, **self._dict_value(value_code)}
            elif prop == 'storyName':
                variant.story_name = self._string_value(value_code)

    SPREAD_ARGS = re.compile(r'\.\.\.\s*([A-Za-z_$][\w$]*)\.args')

    def _meta_names(self, content: str) -> Tuple[str, ...]:
        """Identifiers the meta object can be referenced by (``meta.args``)."""
        match = self.EXPORT_DEFAULT_IDENTIFIER.search(content)
        if match and match.group(1) != 'meta':
            return ('meta', match.group(1))
        return ('meta',)

    def _resolve_spreads(
        self,
        args: Dict[str, Any],
        stories: Dict[str, StoryVariant],
        meta_args: Dict[str, Any],
        meta_names: Tuple[str, ...]
    ) -> Dict[str, Any]:
        """
        Inline ``...Sibling.args`` / ``...meta.args`` spreads of an args object.

        Spreads of earlier variants or of the meta are replaced by the
        referenced args; later keys override spread ones as in JavaScript.
        Any other spread is kept as a RawExpression member.
        """
        resolved: Dict[str, Any] = {}
        for key, value in args.items():
            if isinstance(value, RawExpression) and key.startswith('...'):
                match = self.SPREAD_ARGS.fullmatch(key)
                source = None
                if match and match.group(1) in stories:
                    source = stories[match.group(1)].args
                elif match and match.group(1) in meta_names:
                    source = meta_args
                if source is not None:
                    resolved.update(source)
                    continue
                logger.debug(f"Unresolved args spread: {key}")
            resolved[key] = value
        return resolved

    # ------------------------------------------------------------------
    # value helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _dict_value(raw: Optional[str]) -> Dict[str, Any]:
        value = decode_js_literal(raw)
        return value if isinstance(value, dict) else {}

    @staticmethod
    def _string_value(raw: Optional[str]) -> Optional[str]:
        value = decode_js_literal(raw)
        if isinstance(value, str) and not isinstance(value, RawExpression):
            return value
        return None

    @staticmethod
    def _identifier(raw: Optional[str]) -> Optional[str]:
        if raw and re.fullmatch(r'[A-Za-z_$][\w$]*', raw.strip()):
            return raw.strip()
        return None


def extract_story_examples(story_file_path: Path) -> Optional[StoryFileDoc]:
    """
    Convenience function to extract story examples from a story file.

    Args:
        story_file_path: Path to a CSF story file

    Returns:
        StoryFileDoc or None

    Example:
        >>> doc = extract_story_examples(Path("src/stories/Button.stories.ts"))
        >>> list(doc.stories)
        ['Primary', 'Secondary', 'Large']
    """
    return StoryExampleExtractor().extract_from_file(story_file_path)
