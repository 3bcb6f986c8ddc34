"""
Component documentation extraction.

Extracts structural metadata (selector, template, properties, description)
from a component source file. Each framework convention has its own
strategy class; the strategy is picked from the detected Framework, or
inferred from the file when the framework is unknown.

Strategies:
- AngularComponentStrategy: @Component decorator, @Input/@Output, signal inputs
- ReactComponentStrategy: exported components, Props interfaces, propTypes
- SingleFileComponentStrategy: .vue <template>/<script>, .svelte markup
- WebComponentStrategy: Lit @customElement/@property, customElements.define

Every strategy is best effort: a field that cannot be matched is left
empty and no value is ever invented.
"""

import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Tuple
import logging

from storydocs.extractors.js_literal import RawExpression, decode_js_literal
from storydocs.schemas import ComponentDoc, Framework, PropertyDoc
from storydocs.utils.source_text import (
    balanced_block,
    clean_doc_comment,
    doc_comment_before,
    find_closing,
    object_members,
    read_source,
    skip_comment,
    skip_string,
    split_top_level,
    statement_end,
)

logger = logging.getLogger(__name__)


_IDENT = r'[A-Za-z_$][\w$]*'

# interface member: /** doc */ readonly name?: type
_TYPE_MEMBER = re.compile(
    rf'(?:/\*\*(?P<doc>(?:(?!\*/).)*)\*/\s*)?(?:readonly\s+)?(?P<name>{_IDENT}|[\'"][^\'"]+[\'"])(?P<opt>\?)?\s*(?P<sep>[:(])',
    re.DOTALL
)


def parse_type_members(body: str) -> List[PropertyDoc]:
    """
    Parse the members of a TypeScript interface or type literal body.

    Args:
        body: Text between the braces of ``interface X { ... }``

    Returns:
        One PropertyDoc per top-level member, in declaration order
    """
    properties = []
    i = 0
    length = len(body)

    while i < length:
        ch = body[i]
        if ch.isspace() or ch in ';,':
            i += 1
            continue
        if body.startswith('//', i) or (body.startswith('/*', i) and not body.startswith('/**', i)):
            i = skip_comment(body, i)
            continue

        match = _TYPE_MEMBER.match(body, i)
        if not match:
            # Index signatures, spreads, anything unexpected: skip the member
            i = _member_end(body, i) + 1
            continue

        type_start = match.end() if match.group('sep') == ':' else match.start('sep')
        end = _member_end(body, type_start)
        type_text = body[type_start:end].strip()
        if match.group('sep') == '(':
            type_text = type_text.split('=>')[0].strip() if '=>' in type_text else type_text

        name = match.group('name').strip('\'"')
        doc = clean_doc_comment(match.group('doc')) if match.group('doc') else None

        properties.append(PropertyDoc(
            name=name,
            type=type_text or None,
            description=doc,
            required=not match.group('opt'),
            kind='prop',
        ))
        i = end + 1

    return properties


def _member_end(body: str, index: int) -> int:
    """Index of the ; , or newline that ends the member starting at ``index``."""
    depth = 0
    i = index
    length = len(body)
    while i < length:
        ch = body[i]
        if ch in '\'"`':
            i = skip_string(body, i)
            continue
        if ch == '/' and body.startswith(('//', '/*'), i):
            i = skip_comment(body, i)
            continue
        if ch in '{[(<':
            depth += 1
        elif ch in '}])':
            depth -= 1
        elif ch == '>' and body[i - 1:i] != '=':
            depth -= 1
        elif ch in ';,\n' and depth <= 0:
            # Union types continued on the next line
            if ch == '\n' and body[i + 1:].lstrip().startswith(('|', '&')):
                i += 1
                continue
            return i
        i += 1
    return length


def destructured_defaults(pattern: str) -> Dict[str, str]:
    """
    Read default values from a destructuring pattern.

    ``{ primary = false, size: s = 'medium', label }`` -> {'primary': 'false', 'size': "'medium'"}
    """
    text = pattern.strip()
    if text.startswith('{') and text.endswith('}'):
        text = text[1:-1]

    defaults = {}
    for part in split_top_level(text, ','):
        match = re.match(rf'\s*({_IDENT})\s*(?::\s*{_IDENT}\s*)?=\s*(.+)', part, re.DOTALL)
        if match:
            defaults[match.group(1)] = match.group(2).strip()
    return defaults


def find_type_body(content: str, type_name: str) -> Optional[str]:
    """Return the body of ``interface <type_name>`` or ``type <type_name> = {...}``."""
    name = re.escape(type_name)
    match = re.search(
        rf'(?:interface\s+{name}(?:\s*<[^>]*>)?(?:\s+extends\s+[^{{]+)?|type\s+{name}(?:\s*<[^>]*>)?\s*=\s*(?:[\w.<>\s,]+&\s*)?)\s*(?=\{{)',
        content
    )
    if not match:
        return None
    block = balanced_block(content, match.end())
    return block[1:-1] if block else None


def _merge_defaults(properties: List[PropertyDoc], defaults: Dict[str, str]):
    for prop in properties:
        if prop.default is None and prop.name in defaults:
            prop.default = defaults[prop.name]


def _string_literal(raw: Optional[str]) -> Optional[str]:
    value = decode_js_literal(raw)
    if isinstance(value, str) and not isinstance(value, RawExpression):
        return value
    return None


def _template_literal_body(raw: Optional[str]) -> Optional[str]:
    """Inner text of a template/string literal, exactly as written."""
    if not raw:
        return None
    raw = raw.strip()
    if raw.startswith('`'):
        end = skip_string(raw, 0)
        return raw[1:end - 1] if end > 1 else None
    return _string_literal(raw)


# ============================================================================
# STRATEGIES
# ============================================================================

class ComponentDocStrategy(ABC):
    """Extraction strategy for one framework convention."""

    framework: Framework = Framework.UNKNOWN

    @abstractmethod
    def matches(self, path: Path, content: str) -> bool:
        """Whether the file looks like a component of this convention."""

    @abstractmethod
    def extract(self, path: Path, content: str, component_name: Optional[str] = None) -> Optional[ComponentDoc]:
        """
        Extract component metadata.

        Args:
            path: Component file path
            content: Component file content
            component_name: Identifier the story imports, used to pick among
                several exports

        Returns:
            ComponentDoc, or None if no component signature was found
        """

    def _doc(self, path: Path, **fields) -> ComponentDoc:
        return ComponentDoc(framework=self.framework, source_path=str(path), **fields)


class AngularComponentStrategy(ComponentDocStrategy):
    """Angular components: decorator metadata plus class inputs/outputs."""

    framework = Framework.ANGULAR

    COMPONENT_DECORATOR = re.compile(r'@Component\s*\(\s*(?=\{)')
    CLASS_DECLARATION = re.compile(rf'(?:export\s+)?(?:default\s+)?(?:abstract\s+)?class\s+({_IDENT})[^{{]*\{{')

    INPUT_DECORATOR = re.compile(
        rf'@(?P<decorator>Input|Output)\s*\((?P<arg>[^)]*)\)\s*'
        rf'(?:(?:public|private|protected|readonly|override)\s+)*'
        rf'(?P<setter>set\s+)?(?P<name>{_IDENT})(?P<opt>[?!])?\s*'
        rf'(?::\s*(?P<type>[^=;\n{{(]+?))?\s*'
        rf'(?:=\s*(?P<default>[^;\n]+))?\s*(?=;|\n|\(|$)',
    )

    SIGNAL_PROPERTY = re.compile(
        rf'(?:(?:public|private|protected|readonly|override)\s+)*(?P<name>{_IDENT})\s*=\s*'
        rf'(?P<fn>input|output|model)(?P<required>\.required)?\s*(?:<(?P<type>[^()]*?)>)?\s*(?=\()'
    )

    def matches(self, path: Path, content: str) -> bool:
        return bool(self.COMPONENT_DECORATOR.search(content))

    def extract(self, path: Path, content: str, component_name: Optional[str] = None) -> Optional[ComponentDoc]:
        components = []
        for decorator in self.COMPONENT_DECORATOR.finditer(content):
            metadata_block = balanced_block(content, decorator.end())
            class_match = self.CLASS_DECLARATION.search(content, decorator.end() + len(metadata_block or ''))
            components.append((decorator, metadata_block, class_match))

        if not components:
            logger.debug(f"No @Component decorator in {path}")
            return None

        decorator, metadata_block, class_match = components[0]
        if component_name:
            for candidate in components:
                if candidate[2] and candidate[2].group(1) == component_name:
                    decorator, metadata_block, class_match = candidate
                    break

        metadata = object_members(metadata_block) if metadata_block else {}

        selector = _string_literal(metadata.get('selector'))
        template = self._template(path, metadata)

        class_name = class_match.group(1) if class_match else None
        class_body = ''
        code_end = len(content)
        if class_match:
            close = find_closing(content, class_match.end() - 1)
            if close is not None:
                class_body = content[class_match.end():close]
                code_end = close + 1

        return self._doc(
            path,
            selector=selector,
            component_name=class_name,
            template=template,
            component_code=content[decorator.start():code_end].strip(),
            properties=self._properties(class_body),
            description=doc_comment_before(content, decorator.start()),
        )

    def _template(self, path: Path, metadata: Dict[str, str]) -> Optional[str]:
        inline = _template_literal_body(metadata.get('template'))
        if inline is not None:
            return inline.strip('\n') or None

        template_url = _string_literal(metadata.get('templateUrl'))
        if template_url:
            template_path = (path.parent / template_url).resolve()
            template = read_source(template_path)
            if template is None:
                logger.debug(f"templateUrl not found: {template_path}")
                return None
            return template.strip() or None
        return None

    def _properties(self, class_body: str) -> List[PropertyDoc]:
        found: List[Tuple[int, PropertyDoc]] = []

        for match in self.INPUT_DECORATOR.finditer(class_body):
            kind = 'input' if match.group('decorator') == 'Input' else 'output'
            arg = match.group('arg') or ''
            prop_type = match.group('type').strip() if match.group('type') else None
            default = match.group('default').strip() if match.group('default') else None

            if kind == 'output' and default:
                emitter = re.match(r'new\s+EventEmitter\s*(<.+>)?\s*\(', default)
                if emitter:
                    prop_type = prop_type or f"EventEmitter{emitter.group(1) or ''}"
                    default = None

            found.append((match.start(), PropertyDoc(
                name=match.group('name'),
                type=prop_type,
                default=default,
                description=doc_comment_before(class_body, match.start()),
                required=bool(re.search(r'required\s*:\s*true', arg)),
                kind=kind,
            )))

        for match in self.SIGNAL_PROPERTY.finditer(class_body):
            call = balanced_block(class_body, match.end())
            call_args = split_top_level(call[1:-1], ',') if call else []
            required = bool(match.group('required'))
            fn = match.group('fn')

            default = None
            if fn in ('input', 'model') and not required and call_args:
                default = call_args[0].strip()

            found.append((match.start(), PropertyDoc(
                name=match.group('name'),
                type=match.group('type').strip() if match.group('type') else None,
                default=default,
                description=doc_comment_before(class_body, match.start()),
                required=required,
                kind='output' if fn == 'output' else 'input',
            )))

        found.sort(key=lambda item: item[0])
        return [prop for _, prop in found]


class ReactComponentStrategy(ComponentDocStrategy):
    """React components: exported functions/classes and their Props types."""

    framework = Framework.REACT

    EXPORT_PATTERNS = [
        re.compile(rf'^export\s+default\s+(?:async\s+)?function\s+(?P<name>[A-Z][\w$]*)', re.MULTILINE),
        re.compile(rf'^export\s+(?:async\s+)?function\s+(?P<name>[A-Z][\w$]*)', re.MULTILINE),
        re.compile(rf'^export\s+const\s+(?P<name>[A-Z][\w$]*)\s*(?::\s*[^=\n]+)?=', re.MULTILINE),
        re.compile(rf'^export\s+(?:default\s+)?class\s+(?P<name>[A-Z][\w$]*)', re.MULTILINE),
    ]

    LOCAL_DECLARATION = r'^(?:const|let|function|class)\s+{name}\b'
    DEFAULT_EXPORT_NAME = re.compile(rf'^export\s+default\s+(?:React\.)?(?:memo\()?(?P<name>[A-Z][\w$]*)', re.MULTILINE)
    NAMED_EXPORT_LIST = re.compile(r'^export\s*\{([^}]*)\}', re.MULTILINE)

    PROPS_ANNOTATION = re.compile(rf'\}}\s*:\s*(?P<type>{_IDENT})(?:<[^>]*>)?\s*\)')
    FC_ANNOTATION = re.compile(rf'(?:React\.)?(?:FC|FunctionComponent|VFC)\s*<\s*(?P<type>{_IDENT})')
    CLASS_PROPS = re.compile(rf'extends\s+(?:React\.)?(?:Pure)?Component\s*<\s*(?P<type>{_IDENT})')
    PROPS_INTERFACE = re.compile(rf'(?:interface|type)\s+(?P<type>{_IDENT}Props)\b')

    def matches(self, path: Path, content: str) -> bool:
        if path.suffix in ('.tsx', '.jsx'):
            return True
        return self._find_export(content, None) is not None and bool(
            re.search(r'from\s+[\'"]react[\'"]|<[A-Za-z][\w.]*[\s/>]|React\.', content)
        )

    def extract(self, path: Path, content: str, component_name: Optional[str] = None) -> Optional[ComponentDoc]:
        export = self._find_export(content, component_name)
        if export is None:
            logger.debug(f"No exported React component in {path}")
            return None

        name, start = export
        end = statement_end(content, start)
        declaration = content[start:end]

        properties = self._properties(content, name, declaration)

        return self._doc(
            path,
            component_name=name,
            component_code=declaration.strip(),
            properties=properties,
            description=doc_comment_before(content, start),
        )

    def _find_export(self, content: str, component_name: Optional[str]) -> Optional[Tuple[str, int]]:
        candidates: List[Tuple[int, str]] = []
        for pattern in self.EXPORT_PATTERNS:
            for match in pattern.finditer(content):
                candidates.append((match.start(), match.group('name')))

        # `const Button = ...; export default Button;` / `export { Button }`
        exported_names = []
        default_export = self.DEFAULT_EXPORT_NAME.search(content)
        if default_export:
            exported_names.append(default_export.group('name'))
        for match in self.NAMED_EXPORT_LIST.finditer(content):
            for item in match.group(1).split(','):
                local = item.strip().split(' as ')[0].strip()
                if local[:1].isupper():
                    exported_names.append(local)
        for local in exported_names:
            declaration = re.search(self.LOCAL_DECLARATION.format(name=re.escape(local)), content, re.MULTILINE)
            if declaration:
                candidates.append((declaration.start(), local))

        if not candidates:
            return None

        candidates.sort()
        if component_name:
            for start, name in candidates:
                if name == component_name:
                    return name, start
        start, name = candidates[0]
        return name, start

    def _properties(self, content: str, name: str, declaration: str) -> List[PropertyDoc]:
        properties: List[PropertyDoc] = []

        type_name = None
        for pattern in (self.FC_ANNOTATION, self.PROPS_ANNOTATION, self.CLASS_PROPS):
            match = pattern.search(declaration)
            if match:
                type_name = match.group('type')
                break
        if type_name is None and find_type_body(content, f"{name}Props") is not None:
            type_name = f"{name}Props"
        if type_name is None:
            match = self.PROPS_INTERFACE.search(content)
            if match:
                type_name = match.group('type')

        if type_name:
            body = find_type_body(content, type_name)
            if body is not None:
                properties = parse_type_members(body)

        # Inline parameter type: ({ a, b }: { a: string; b?: number })
        params = self._destructured_params(declaration)
        if not properties and params:
            inline = re.search(r'\}\s*:\s*(?=\{)', declaration)
            if inline:
                block = balanced_block(declaration, inline.end())
                if block:
                    properties = parse_type_members(block[1:-1])

        if not properties:
            properties = self._prop_types(content, name)

        if params:
            _merge_defaults(properties, destructured_defaults(params))

        default_props = re.search(rf'^{re.escape(name)}\.defaultProps\s*=\s*(?=\{{)', content, re.MULTILINE)
        if default_props:
            block = balanced_block(content, default_props.end())
            if block:
                _merge_defaults(properties, object_members(block))

        return properties

    @staticmethod
    def _destructured_params(declaration: str) -> Optional[str]:
        match = re.search(r'\(\s*(?=\{)', declaration)
        if not match:
            return None
        return balanced_block(declaration, match.end())

    def _prop_types(self, content: str, name: str) -> List[PropertyDoc]:
        match = re.search(rf'^{re.escape(name)}\.propTypes\s*=\s*(?=\{{)', content, re.MULTILINE)
        if not match:
            return []
        block = balanced_block(content, match.end())
        if not block:
            return []

        properties = []
        for prop_name, raw in object_members(block).items():
            type_match = re.match(r'PropTypes\.(\w+(?:\([^)]*\))?)', raw)
            properties.append(PropertyDoc(
                name=prop_name,
                type=type_match.group(1) if type_match else raw,
                required=raw.rstrip().endswith('.isRequired'),
                kind='prop',
            ))
        return properties


class SingleFileComponentStrategy(ComponentDocStrategy):
    """Vue single-file components (.vue), also used for Svelte components."""

    framework = Framework.VUE

    TEMPLATE = re.compile(r'^<template(?:\s[^>]*)?>\n?(?P<body>.*)^</template>', re.MULTILINE | re.DOTALL)
    SCRIPT = re.compile(r'<script(?P<attrs>[^>]*)>(?P<body>.*?)</script>', re.DOTALL)
    STYLE_START = re.compile(r'^<style[\s>]', re.MULTILINE)
    LEADING_HTML_COMMENT = re.compile(r'^\s*<!--(?P<body>.*?)-->', re.DOTALL)
    DOCS_BLOCK = re.compile(r'<docs[^>]*>(?P<body>.*?)</docs>', re.DOTALL)

    NAME_OPTION = re.compile(r'\bname\s*:\s*[\'"](?P<name>[^\'"]+)[\'"]')

    def matches(self, path: Path, content: str) -> bool:
        return path.suffix in ('.vue', '.svelte')

    def extract(self, path: Path, content: str, component_name: Optional[str] = None) -> Optional[ComponentDoc]:
        scripts = list(self.SCRIPT.finditer(content))
        if path.suffix == '.svelte':
            return self._extract_svelte(path, content, scripts)

        template_match = self.TEMPLATE.search(content)
        template = template_match.group('body').rstrip() if template_match else None

        script = self._primary_script(scripts)
        script_body = script.group('body') if script else ''

        if template is None and not script_body.strip():
            logger.debug(f"No <template> or <script> in {path}")
            return None

        name_match = self.NAME_OPTION.search(script_body)
        name = name_match.group('name') if name_match else None

        return self._doc(
            path,
            selector=name,
            component_name=name,
            template=template or None,
            component_code=script_body.strip() or None,
            properties=self._vue_properties(script_body),
            description=self._description(content, script_body),
        )

    @staticmethod
    def _primary_script(scripts):
        for script in scripts:
            if 'setup' in script.group('attrs'):
                return script
        return scripts[0] if scripts else None

    def _description(self, content: str, script_body: str) -> Optional[str]:
        docs = self.DOCS_BLOCK.search(content)
        if docs and docs.group('body').strip():
            return docs.group('body').strip()

        comment = self.LEADING_HTML_COMMENT.match(content)
        if comment and comment.group('body').strip():
            return comment.group('body').strip()

        for anchor in (r'export\s+default', r'defineProps', r'defineComponent'):
            match = re.search(anchor, script_body)
            if match:
                line_start = script_body.rfind('\n', 0, match.start()) + 1
                doc = doc_comment_before(script_body, line_start)
                if doc:
                    return doc
        return None

    def _vue_properties(self, script: str) -> List[PropertyDoc]:
        properties: List[PropertyDoc] = []

        # defineProps<{ ... }>()
        typed_literal = re.search(r'defineProps\s*<\s*(?=\{)', script)
        typed_name = re.search(rf'defineProps\s*<\s*(?P<type>{_IDENT})\s*>', script)
        runtime = re.search(r'defineProps\s*\(\s*(?=[\{\[])', script)
        options = re.search(r'\bprops\s*:\s*(?=[\{\[])', script)

        if typed_literal:
            block = balanced_block(script, typed_literal.end())
            if block:
                properties = parse_type_members(block[1:-1])
        elif typed_name:
            body = find_type_body(script, typed_name.group('type'))
            if body is not None:
                properties = parse_type_members(body)
        elif runtime or options:
            match = runtime or options
            properties = self._runtime_props(script, match.end())

        defaults = re.search(r'withDefaults\s*\(', script)
        if defaults:
            call = balanced_block(script, defaults.end() - 1)
            if call:
                parts = split_top_level(call[1:-1], ',')
                if len(parts) > 1 and parts[1].strip().startswith('{'):
                    _merge_defaults(properties, object_members(parts[1].strip()))

        return properties

    def _runtime_props(self, script: str, open_index: int) -> List[PropertyDoc]:
        block = balanced_block(script, open_index)
        if not block:
            return []

        if block.startswith('['):
            names = decode_js_literal(block)
            if not isinstance(names, list):
                return []
            return [PropertyDoc(name=name, kind='prop') for name in names if isinstance(name, str)]

        properties = []
        for name, raw in object_members(block).items():
            prop = PropertyDoc(name=name, kind='prop')
            if raw.startswith('{'):
                options = object_members(raw)
                prop.type = options.get('type')
                prop.default = options.get('default')
                prop.required = options.get('required', '').strip() == 'true'
            else:
                prop.type = raw
            properties.append(prop)
        return properties

    def _extract_svelte(self, path: Path, content: str, scripts) -> Optional[ComponentDoc]:
        instance = None
        for script in scripts:
            # <script context="module"> (Svelte 4) / <script module> (Svelte 5)
            if not re.search(r'\bmodule\b', script.group('attrs')):
                instance = script
        script_body = instance.group('body') if instance else ''

        markup_start = scripts[-1].end() if scripts else 0
        style = self.STYLE_START.search(content, markup_start)
        markup_end = style.start() if style else len(content)
        template = content[markup_start:markup_end].strip()

        if not template and not script_body.strip():
            return None

        return self._doc(
            path,
            template=template or None,
            component_code=script_body.strip() or None,
            properties=self._svelte_properties(script_body),
            description=self._description(content, script_body),
        )

    def _svelte_properties(self, script: str) -> List[PropertyDoc]:
        properties = []

        for match in re.finditer(
            rf'^\s*export\s+let\s+(?P<name>{_IDENT})\s*(?::\s*(?P<type>[^=;\n]+?))?\s*(?:=\s*(?P<default>[^;\n]+?))?\s*;?\s*$',
            script,
            re.MULTILINE
        ):
            properties.append(PropertyDoc(
                name=match.group('name'),
                type=match.group('type').strip() if match.group('type') else None,
                default=match.group('default').strip() if match.group('default') else None,
                description=doc_comment_before(script, match.start()),
                required=match.group('default') is None,
                kind='prop',
            ))

        # Svelte 5: let { a = 1, b }: Props = $props();
        runes = re.search(r'let\s*(?=\{[^;]*\$props\s*\(\s*\))', script)
        if runes:
            pattern = balanced_block(script, runes.end())
            if pattern:
                after = script[runes.end() + len(pattern):]
                type_match = re.match(rf'\s*:\s*(?P<type>{_IDENT})', after)
                typed = []
                if type_match:
                    body = find_type_body(script, type_match.group('type'))
                    typed = parse_type_members(body) if body is not None else []
                defaults = destructured_defaults(pattern)
                if typed:
                    _merge_defaults(typed, defaults)
                    properties.extend(typed)
                else:
                    for part in split_top_level(pattern[1:-1], ','):
                        name_match = re.match(rf'\s*({_IDENT})', part)
                        if name_match and not part.strip().startswith('...'):
                            name = name_match.group(1)
                            properties.append(PropertyDoc(name=name, default=defaults.get(name), kind='prop'))

        return properties


class WebComponentStrategy(ComponentDocStrategy):
    """Custom elements: Lit decorators/static properties or vanilla HTMLElement."""

    framework = Framework.WEB_COMPONENTS

    CUSTOM_ELEMENT_DECORATOR = re.compile(r'@customElement\(\s*[\'"](?P<tag>[^\'"]+)[\'"]\s*\)')
    DEFINE_CALL = re.compile(rf'customElements\.define\(\s*[\'"](?P<tag>[^\'"]+)[\'"]\s*,\s*(?P<cls>{_IDENT})?')
    CLASS_DECLARATION = re.compile(rf'(?:export\s+)?(?:default\s+)?class\s+(?P<name>{_IDENT})\s+extends\s+(?P<base>[\w.$]+(?:\([^)]*\))?)[^{{]*\{{')

    PROPERTY_DECORATOR = re.compile(
        rf'@property\s*\((?P<opts>[^)]*)\)\s*'
        rf'(?:(?:public|private|protected|declare|accessor|override|readonly)\s+)*'
        rf'(?P<name>{_IDENT})(?P<opt>[?!])?\s*'
        rf'(?::\s*(?P<type>[^=;\n]+?))?\s*'
        rf'(?:=\s*(?P<default>[^;\n]+?))?\s*(?=;|\n|$)'
    )

    STATIC_PROPERTIES = re.compile(r'static\s+(?:get\s+properties\s*\(\s*\)\s*\{\s*return\s*|properties\s*=\s*)(?=\{)')
    OBSERVED_ATTRIBUTES = re.compile(
        r'static\s+(?:get\s+observedAttributes\s*\(\s*\)\s*\{\s*return\s*|observedAttributes\s*=\s*)(?=\[)'
    )
    RENDER_METHOD = re.compile(r'\brender\s*\(\s*\)\s*(?::\s*[\w<>.|\s]+)?\{')
    HTML_TEMPLATE = re.compile(r'\bhtml\s*(?=`)')
    INNER_HTML = re.compile(r'\.innerHTML\s*=\s*(?=`)')
    CONSTRUCTOR_ASSIGNMENT = re.compile(rf'this\.(?P<name>{_IDENT})\s*=\s*(?P<value>[^;\n]+?)\s*;?\s*$', re.MULTILINE)

    def matches(self, path: Path, content: str) -> bool:
        return bool(
            self.CUSTOM_ELEMENT_DECORATOR.search(content)
            or self.DEFINE_CALL.search(content)
            or re.search(r'extends\s+(?:LitElement|HTMLElement)\b', content)
        )

    def extract(self, path: Path, content: str, component_name: Optional[str] = None) -> Optional[ComponentDoc]:
        decorator = self.CUSTOM_ELEMENT_DECORATOR.search(content)
        define = self.DEFINE_CALL.search(content)
        tag = decorator.group('tag') if decorator else (define.group('tag') if define else None)

        class_match = self._find_class(content, component_name, define)
        if tag is None and class_match is None:
            logger.debug(f"No custom element in {path}")
            return None

        class_body = ''
        code_start = decorator.start() if decorator else (class_match.start() if class_match else 0)
        code_end = len(content)
        if class_match:
            close = find_closing(content, class_match.end() - 1)
            if close is not None:
                class_body = content[class_match.end():close]
                code_end = close + 1
        if decorator and class_match and class_match.start() < decorator.start():
            code_start = class_match.start()

        description = doc_comment_before(content, code_start)
        if description is None and class_match:
            line_start = content.rfind('\n', 0, class_match.start()) + 1
            description = doc_comment_before(content, line_start)

        return self._doc(
            path,
            selector=tag,
            component_name=class_match.group('name') if class_match else None,
            template=self._template(class_body),
            component_code=content[code_start:code_end].strip() if class_match else None,
            properties=self._properties(class_body),
            description=description,
        )

    def _find_class(self, content: str, component_name: Optional[str], define):
        classes = list(self.CLASS_DECLARATION.finditer(content))
        if not classes:
            return None
        preferred = [component_name]
        if define and define.group('cls'):
            preferred.append(define.group('cls'))
        for name in preferred:
            for match in classes:
                if name and match.group('name') == name:
                    return match
        return classes[0]

    def _template(self, class_body: str) -> Optional[str]:
        render = self.RENDER_METHOD.search(class_body)
        search_space = class_body
        if render:
            block = balanced_block(class_body, render.end() - 1)
            if block:
                search_space = block

        for pattern in (self.HTML_TEMPLATE, self.INNER_HTML):
            match = pattern.search(search_space)
            if match:
                body = _template_literal_body(search_space[match.end():])
                if body is not None and body.strip():
                    return body.strip('\n')
        return None

    def _properties(self, class_body: str) -> List[PropertyDoc]:
        properties: List[PropertyDoc] = []
        seen = set()

        for match in self.PROPERTY_DECORATOR.finditer(class_body):
            opts = match.group('opts')
            prop_type = match.group('type').strip() if match.group('type') else None
            if prop_type is None:
                declared = re.search(r'type\s*:\s*(\w+)', opts)
                prop_type = declared.group(1) if declared else None
            properties.append(PropertyDoc(
                name=match.group('name'),
                type=prop_type,
                default=match.group('default').strip() if match.group('default') else None,
                description=doc_comment_before(class_body, match.start()),
                kind='prop',
            ))
            seen.add(match.group('name'))

        static = self.STATIC_PROPERTIES.search(class_body)
        if static:
            block = balanced_block(class_body, static.end())
            for name, raw in (object_members(block).items() if block else []):
                if name in seen:
                    continue
                declared = re.search(r'type\s*:\s*(\w+)', raw)
                properties.append(PropertyDoc(name=name, type=declared.group(1) if declared else None, kind='prop'))
                seen.add(name)

        observed = self.OBSERVED_ATTRIBUTES.search(class_body)
        if observed:
            names = decode_js_literal(balanced_block(class_body, observed.end()))
            for name in names if isinstance(names, list) else []:
                if isinstance(name, str) and name not in seen:
                    properties.append(PropertyDoc(name=name, kind='attribute'))
                    seen.add(name)

        constructor = re.search(r'\bconstructor\s*\([^)]*\)\s*\{', class_body)
        if constructor:
            block = balanced_block(class_body, constructor.end() - 1) or ''
            assignments = {m.group('name'): m.group('value') for m in self.CONSTRUCTOR_ASSIGNMENT.finditer(block)}
            _merge_defaults(properties, assignments)

        return properties


# ============================================================================
# EXTRACTOR
# ============================================================================

class ComponentDocExtractor:
    """
    Extract ComponentDoc from a component file.

    The strategy comes from the framework passed in. With no framework (or
    UNKNOWN) the first strategy whose signature matches the file is used.
    """

    STRATEGIES: Dict[Framework, ComponentDocStrategy] = {
        Framework.ANGULAR: AngularComponentStrategy(),
        Framework.REACT: ReactComponentStrategy(),
        Framework.VUE: SingleFileComponentStrategy(),
        Framework.WEB_COMPONENTS: WebComponentStrategy(),
    }

    # Inference order: most specific signatures first
    INFERENCE_ORDER = [Framework.VUE, Framework.ANGULAR, Framework.WEB_COMPONENTS, Framework.REACT]

    def __init__(self, framework: Optional[Framework] = None):
        """
        Initialize component extractor.

        Args:
            framework: Project framework (None or UNKNOWN to infer per file)
        """
        self.framework = framework

    def strategy_for(self, path: Path, content: str) -> Optional[ComponentDocStrategy]:
        """Select the extraction strategy for a file."""
        if self.framework is not None and self.framework != Framework.UNKNOWN:
            return self.STRATEGIES[self.framework]

        for framework in self.INFERENCE_ORDER:
            strategy = self.STRATEGIES[framework]
            if strategy.matches(path, content):
                return strategy
        return None

    def extract_from_file(self, component_file_path: Path, component_name: Optional[str] = None) -> Optional[ComponentDoc]:
        """
        Extract component documentation from a file.

        Args:
            component_file_path: Component source file
            component_name: Identifier imported by the story (optional hint)

        Returns:
            ComponentDoc, or None if the file is missing or unrecognised
        """
        path = Path(component_file_path)
        content = read_source(path)
        if content is None:
            logger.debug(f"Component file not found: {path}")
            return None

        strategy = self.strategy_for(path, content)
        if strategy is None:
            logger.debug(f"No extraction strategy matches {path}")
            return None

        doc = strategy.extract(path, content, component_name)
        if doc is not None:
            logger.debug(
                f"Extracted {strategy.framework.value} component from {path.name}: "
                f"selector={doc.selector}, {len(doc.properties)} properties"
            )
        return doc


def extract_component_docs(
    component_file_path: Path,
    framework: Optional[Framework] = None,
    component_name: Optional[str] = None
) -> Optional[ComponentDoc]:
    """
    Convenience function to extract component documentation.

    Args:
        component_file_path: Component source file
        framework: Detected project framework (None to infer from the file)
        component_name: Identifier imported by the story (optional hint)

    Returns:
        ComponentDoc or None

    Example:
        >>> doc = extract_component_docs(Path("src/app/button.component.ts"), Framework.ANGULAR)
        >>> doc.selector
        'app-button'
    """
    return ComponentDocExtractor(framework).extract_from_file(component_file_path, component_name)
