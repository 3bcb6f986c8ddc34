"""
Usage example generation.

Turns a component identity plus a story's args into a ready-to-paste
markup snippet in the framework's own binding syntax:

<!-- Primary -->
<app-button label="Click me" [primary]="true"></app-button>

The generator is pure and deterministic: the same identity, args, variant
name and framework always give the same text.
"""

import json
import re
from typing import Any, Dict, List, Optional, Union
import logging

from storydocs.extractors.js_literal import RawExpression, to_js_literal
from storydocs.schemas import Framework

logger = logging.getLogger(__name__)


# Svelte components share the single-file convention but bind like JSX
SVELTE_STYLE = 'svelte'

_FUNCTION_LIKE = re.compile(r'^(?:async\s+)?(?:function\b|\([^)]*\)\s*=>|[A-Za-z_$][\w$]*\s*=>|(?:fn|action|jest\.fn|vi\.fn)\s*\()')
_EVENT_PROP = re.compile(r'^on([A-Z]\w*)$')


def is_spread(name: str, value: Any) -> bool:
    """Whether an args member is an unresolved object spread (`...expr`)."""
    return isinstance(value, RawExpression) and name.startswith('...')


def is_function_like(value: Any) -> bool:
    """Whether a decoded arg is a function expression (handler, action, spy)."""
    return isinstance(value, RawExpression) and bool(_FUNCTION_LIKE.match(value.strip()))


def _escape_attribute(value: str, quote: str = '"') -> str:
    if quote == '"':
        return value.replace('"', '&quot;')
    return value.replace("'", '&#39;')


def _event_name(prop: str) -> str:
    """onClick -> click, closed -> closed."""
    match = _EVENT_PROP.match(prop)
    if match:
        name = match.group(1)
        return name[0].lower() + name[1:]
    return prop


def _handler_name(event: str) -> str:
    return 'on' + event[0].upper() + event[1:]


class UsageExampleGenerator:
    """
    Render usage snippets for one framework convention.

    Layout rules:
    - First line is a comment naming the variant
    - Attributes follow args insertion order
    - More than MAX_INLINE_ATTRIBUTES attributes, or an invocation longer
      than MAX_LINE_LENGTH, puts one attribute per line
    """

    MAX_INLINE_ATTRIBUTES = 3
    MAX_LINE_LENGTH = 80
    INDENT = '  '

    def __init__(self, framework: Union[Framework, str], component_file: Optional[str] = None):
        """
        Initialize usage example generator.

        Args:
            framework: Framework whose binding syntax is used
            component_file: Resolved component source path; a ``.svelte``
                file selects Svelte bindings within the single-file convention
        """
        self.framework = Framework(framework)
        self.component_file = component_file

    def generate(self, component_identity: str, args: Optional[Dict[str, Any]], variant_name: str) -> str:
        """
        Generate a usage example.

        Args:
            component_identity: Selector/tag or component name used in markup
            args: Decoded story args (may be empty)
            variant_name: Story export name, used in the leading comment

        Returns:
            Snippet text (comment line + invocation)

        Raises:
            ValueError: If component_identity is empty
        """
        if not component_identity:
            raise ValueError("component_identity is required")

        args = args or {}
        style = self._style_for(component_identity)

        if style == Framework.ANGULAR:
            attributes, content = self._angular_attributes(args), None
        elif style == Framework.VUE:
            attributes, content = self._vue_attributes(args), None
        elif style == SVELTE_STYLE:
            attributes, content = self._svelte_attributes(args), None
        elif style == Framework.WEB_COMPONENTS:
            attributes, content = self._html_attributes(args), None
        else:
            attributes, content = self._jsx_attributes(args)

        comment = f"// {variant_name}" if style == Framework.REACT else f"<!-- {variant_name} -->"
        invocation = self._render_element(component_identity, attributes, content, style)

        return f"{comment}\n{invocation}"

    def _style_for(self, identity: str) -> str:
        if self.component_file and str(self.component_file).endswith('.svelte'):
            return SVELTE_STYLE
        if self.framework != Framework.UNKNOWN:
            return self.framework
        return Framework.WEB_COMPONENTS if '-' in identity else Framework.REACT

    # ------------------------------------------------------------------
    # attribute rendering per framework
    # ------------------------------------------------------------------

    def _angular_attributes(self, args: Dict[str, Any]) -> List[str]:
        attributes = []
        for name, value in args.items():
            if is_spread(name, value):
                continue
            if is_function_like(value) or (_EVENT_PROP.match(name) and isinstance(value, RawExpression)):
                event = _event_name(name)
                attributes.append(f'({event})="{_handler_name(event)}($event)"')
            elif isinstance(value, str) and not isinstance(value, RawExpression):
                attributes.append(f'{name}="{_escape_attribute(value)}"')
            else:
                attributes.append(f'[{name}]="{_escape_attribute(to_js_literal(value))}"')
        return attributes

    def _vue_attributes(self, args: Dict[str, Any]) -> List[str]:
        attributes = []
        for name, value in args.items():
            if is_spread(name, value):
                continue
            if is_function_like(value) or (_EVENT_PROP.match(name) and isinstance(value, RawExpression)):
                event = _event_name(name)
                attributes.append(f'@{event}="{_handler_name(event)}"')
            elif isinstance(value, str) and not isinstance(value, RawExpression):
                attributes.append(f'{name}="{_escape_attribute(value)}"')
            else:
                attributes.append(f':{name}="{_escape_attribute(to_js_literal(value))}"')
        return attributes

    def _svelte_attributes(self, args: Dict[str, Any]) -> List[str]:
        attributes = []
        for name, value in args.items():
            if is_spread(name, value):
                attributes.append('{' + str(value) + '}')
            elif is_function_like(value) or (_EVENT_PROP.match(name) and isinstance(value, RawExpression)):
                event = _event_name(name)
                attributes.append(f'on:{event}={{{_handler_name(event)}}}')
            elif isinstance(value, str) and not isinstance(value, RawExpression) and '"' not in value:
                attributes.append(f'{name}="{value}"')
            else:
                attributes.append(f'{name}={{{to_js_literal(value)}}}')
        return attributes

    def _html_attributes(self, args: Dict[str, Any]) -> List[str]:
        attributes = []
        for name, value in args.items():
            # Plain HTML cannot carry expressions
            if value is None or value is False or isinstance(value, RawExpression):
                continue
            if value is True:
                attributes.append(name)
            elif isinstance(value, str):
                attributes.append(f'{name}="{_escape_attribute(value)}"')
            elif isinstance(value, (dict, list)):
                if self._contains_expression(value):
                    continue
                encoded = json.dumps(value, ensure_ascii=False)
                attributes.append(f"{name}='{_escape_attribute(encoded, quote=chr(39))}'")
            else:
                attributes.append(f'{name}="{json.dumps(value)}"')
        return attributes

    def _jsx_attributes(self, args: Dict[str, Any]):
        attributes = []
        content = None
        for name, value in args.items():
            if is_spread(name, value):
                attributes.append('{' + str(value) + '}')
                continue
            if name == 'children':
                if isinstance(value, str) and not isinstance(value, RawExpression):
                    content = value
                else:
                    content = '{' + to_js_literal(value) + '}'
                continue
            if isinstance(value, str) and not isinstance(value, RawExpression) and '"' not in value and '\n' not in value:
                attributes.append(f'{name}="{value}"')
            else:
                attributes.append(f'{name}={{{to_js_literal(value)}}}')
        return attributes, content

    def _contains_expression(self, value: Any) -> bool:
        if isinstance(value, RawExpression):
            return True
        if isinstance(value, dict):
            return any(self._contains_expression(item) for item in value.values())
        if isinstance(value, list):
            return any(self._contains_expression(item) for item in value)
        return False

    # ------------------------------------------------------------------
    # element layout
    # ------------------------------------------------------------------

    def _render_element(
        self,
        identity: str,
        attributes: List[str],
        content: Optional[str],
        style: str
    ) -> str:
        self_closing = style in (Framework.REACT, Framework.VUE, SVELTE_STYLE) and content is None
        closing_tag = f"</{identity}>"

        inline_attrs = ''.join(f' {attr}' for attr in attributes)
        if self_closing:
            single_line = f"<{identity}{inline_attrs} />"
        else:
            single_line = f"<{identity}{inline_attrs}>{content or ''}{closing_tag}"

        if len(attributes) <= self.MAX_INLINE_ATTRIBUTES and len(single_line) <= self.MAX_LINE_LENGTH:
            return single_line

        lines = [f"<{identity}"]
        lines.extend(f"{self.INDENT}{attr}" for attr in attributes)
        if self_closing:
            lines.append("/>")
        else:
            lines.append(f">{content or ''}{closing_tag}")
        return '\n'.join(lines)


def generate_usage_example(
    component_identity: str,
    args: Optional[Dict[str, Any]],
    variant_name: str,
    framework: Union[Framework, str],
    component_file: Optional[str] = None
) -> str:
    """
    Convenience function to generate a usage example.

    Args:
        component_identity: Selector/tag or component name
        args: Decoded story args
        variant_name: Story export name
        framework: Framework convention
        component_file: Resolved component source path (optional)

    Returns:
        Usage snippet

    Example:
        >>> print(generate_usage_example("app-button", {"label": "Click me"}, "Primary", Framework.ANGULAR))
        <!-- Primary -->
        <app-button label="Click me"></app-button>
    """
    return UsageExampleGenerator(framework, component_file).generate(component_identity, args, variant_name)
