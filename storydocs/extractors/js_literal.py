"""
Best-effort decoding of JavaScript object/array literals.

Story files declare ``args`` and ``argTypes`` as JavaScript object literals.
They are mostly plain data (strings, numbers, booleans, nested objects) but
may contain arbitrary expressions such as ``fn()``, arrow functions or
identifiers. Plain data is decoded into Python values; every other
expression is kept as a RawExpression holding its source text, so the
result stays JSON-serializable and the usage generator can still emit
binding syntax for it.
"""

import json
import re
from typing import Any, Dict, Optional
import logging

from storydocs.utils.source_text import skip_comment, skip_string

logger = logging.getLogger(__name__)


class RawExpression(str):
    """JavaScript expression that is not plain data, kept as source text."""

    def __repr__(self) -> str:
        return f"RawExpression({str.__repr__(self)})"


class JsLiteralError(ValueError):
    """Raised when a literal cannot be decoded at all."""


_NUMBER = re.compile(
    r'-?(?:0[xX][0-9a-fA-F_]+|0[bB][01_]+|0[oO][0-7_]+|(?:\d[\d_]*)?\.?\d[\d_]*(?:[eE][+-]?\d+)?)n?'
)
_IDENTIFIER = re.compile(r'[A-Za-z_$][\w$]*')
_SIMPLE_KEY = re.compile(r'^[A-Za-z_$][\w$]*$')

_ESCAPES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    'b': '\b',
    'f': '\f',
    'v': '\v',
    '0': '\0',
}

_KEYWORDS = {
    'true': True,
    'false': False,
    'null': None,
    'undefined': None,
}


class _LiteralParser:
    """Recursive-descent reader over a single literal."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self._key_start = 0

    # ------------------------------------------------------------------
    # scanning helpers
    # ------------------------------------------------------------------

    def _skip_ws(self):
        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]
            if ch.isspace():
                self.pos += 1
            elif ch == '/' and text.startswith(('//', '/*'), self.pos):
                self.pos = skip_comment(text, self.pos)
            else:
                break

    def _peek(self) -> str:
        self._skip_ws()
        return self.text[self.pos] if self.pos < len(self.text) else ''

    def _at_value_end(self) -> bool:
        return self._peek() in (',', '}', ']', ')', '')

    def _consume_raw(self, start: int) -> RawExpression:
        """Consume an arbitrary expression up to the next top-level , } or ]."""
        text = self.text
        i = start
        depth = 0
        while i < len(text):
            ch = text[i]
            if ch in '\'"`':
                i = skip_string(text, i)
                continue
            if ch == '/' and text.startswith(('//', '/*'), i):
                i = skip_comment(text, i)
                continue
            if ch in '{[(':
                depth += 1
            elif ch in '}])':
                if depth == 0:
                    break
                depth -= 1
            elif ch == ',' and depth == 0:
                break
            i += 1
        self.pos = i
        raw = text[start:i].strip()
        if not raw:
            raise JsLiteralError(f"Empty expression at offset {start}")
        return RawExpression(raw)

    # ------------------------------------------------------------------
    # grammar
    # ------------------------------------------------------------------

    def parse(self) -> Any:
        value = self.parse_value()
        if self._peek():
            raise JsLiteralError(f"Unexpected trailing text at offset {self.pos}")
        return value

    def parse_value(self) -> Any:
        ch = self._peek()
        start = self.pos

        if not ch:
            raise JsLiteralError("Unexpected end of literal")

        if ch == '{':
            value = self._parse_object()
        elif ch == '[':
            value = self._parse_array()
        elif ch in '\'"':
            value = self._parse_string()
        elif ch == '`':
            value = self._parse_template()
        elif ch.isdigit() or (ch in '-.' and self._looks_numeric()):
            value = self._parse_number()
        else:
            match = _IDENTIFIER.match(self.text, self.pos)
            if match and match.group(0) in _KEYWORDS:
                self.pos = match.end()
                value = _KEYWORDS[match.group(0)]
            else:
                return self._consume_raw(start)

        # `'a' + b`, `{...}.x`, `[1].map(...)`: not plain data after all
        if not self._at_value_end():
            return self._consume_raw(start)
        return value

    def _looks_numeric(self) -> bool:
        nxt = self.text[self.pos + 1:self.pos + 2]
        return nxt.isdigit() or nxt == '.'

    def _parse_number(self):
        match = _NUMBER.match(self.text, self.pos)
        if not match or not match.group(0).strip('-.'):
            return self._consume_raw(self.pos)
        self.pos = match.end()
        literal = match.group(0).replace('_', '').rstrip('n')
        negative = literal.startswith('-')
        body = literal.lstrip('-')
        if body[:2].lower() in ('0x', '0b', '0o'):
            value = int(body, 0)
            return -value if negative else value
        if re.fullmatch(r'\d+', body):
            return int(literal)
        return float(literal)

    def _parse_string(self) -> str:
        quote = self.text[self.pos]
        self.pos += 1
        chars = []
        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]
            if ch == '\\':
                self.pos += 1
                chars.append(self._read_escape())
                continue
            if ch == quote:
                self.pos += 1
                return ''.join(chars)
            if ch == '\n':
                break
            chars.append(ch)
            self.pos += 1
        raise JsLiteralError("Unterminated string literal")

    def _read_escape(self) -> str:
        text = self.text
        if self.pos >= len(text):
            raise JsLiteralError("Dangling escape")
        ch = text[self.pos]
        self.pos += 1
        if ch in _ESCAPES:
            return _ESCAPES[ch]
        if ch == 'u':
            if text.startswith('{', self.pos):
                end = text.find('}', self.pos)
                code = text[self.pos + 1:end]
                self.pos = end + 1
            else:
                code = text[self.pos:self.pos + 4]
                self.pos += 4
            try:
                return chr(int(code, 16))
            except ValueError:
                raise JsLiteralError(f"Invalid unicode escape: {code}")
        if ch == 'x':
            code = text[self.pos:self.pos + 2]
            self.pos += 2
            try:
                return chr(int(code, 16))
            except ValueError:
                raise JsLiteralError(f"Invalid hex escape: {code}")
        if ch == '\n':
            return ''
        return ch

    def _parse_template(self) -> Any:
        start = self.pos
        end = skip_string(self.text, start)
        raw = self.text[start:end]
        self.pos = end
        if '${' in raw:
            return RawExpression(raw)
        body = raw[1:-1] if raw.endswith('`') and len(raw) > 1 else raw[1:]
        return re.sub(r'\\(.)', lambda m: _ESCAPES.get(m.group(1), m.group(1)), body, flags=re.DOTALL)

    def _parse_array(self) -> list:
        self.pos += 1
        items = []
        while True:
            ch = self._peek()
            if ch == ']':
                self.pos += 1
                return items
            if not ch:
                raise JsLiteralError("Unterminated array literal")
            if self.text.startswith('...', self.pos):
                items.append(self._consume_raw(self.pos))
            else:
                items.append(self.parse_value())
            ch = self._peek()
            if ch == ',':
                self.pos += 1
            elif ch != ']':
                raise JsLiteralError(f"Expected , or ] at offset {self.pos}")

    def _parse_object(self) -> Dict[str, Any]:
        self.pos += 1
        members: Dict[str, Any] = {}
        while True:
            ch = self._peek()
            if ch == '}':
                self.pos += 1
                return members
            if not ch:
                raise JsLiteralError("Unterminated object literal")

            if self.text.startswith('...', self.pos):
                spread = self._consume_raw(self.pos)
                members[str(spread)] = spread
            else:
                key = self._parse_key()
                ch = self._peek()
                if ch == ':':
                    self.pos += 1
                    members[key] = self.parse_value()
                elif ch == '(':
                    # method shorthand: render() { ... }
                    members[key] = self._consume_raw(self._key_start)
                else:
                    # property shorthand: { label }
                    members[key] = RawExpression(key)

            ch = self._peek()
            if ch == ',':
                self.pos += 1
            elif ch != '}':
                raise JsLiteralError(f"Expected , or }} at offset {self.pos}")

    def _parse_key(self) -> str:
        ch = self._peek()
        self._key_start = self.pos
        if ch in '\'"':
            return self._parse_string()
        if ch == '[':
            end = self.text.find(']', self.pos)
            if end == -1:
                raise JsLiteralError("Unterminated computed key")
            key = self.text[self.pos:end + 1]
            self.pos = end + 1
            return key
        match = _IDENTIFIER.match(self.text, self.pos) or _NUMBER.match(self.text, self.pos)
        if not match or not match.group(0):
            raise JsLiteralError(f"Invalid object key at offset {self.pos}")
        self.pos = match.end()
        key = match.group(0)
        # accessor / async / generator prefixes: get label() {}
        if key in ('get', 'set', 'async') and _IDENTIFIER.match(self.text, self._skip_ws_pos()):
            return self._parse_key_after_prefix()
        return key

    def _skip_ws_pos(self) -> int:
        self._skip_ws()
        return self.pos

    def _parse_key_after_prefix(self) -> str:
        start = self._key_start
        match = _IDENTIFIER.match(self.text, self.pos)
        self.pos = match.end()
        self._key_start = start
        return match.group(0)


def parse_js_value(text: str) -> Any:
    """
    Decode a JavaScript literal into Python values.

    Args:
        text: Source text of a single literal (object, array, string, ...)

    Returns:
        dict / list / str / int / float / bool / None, with RawExpression
        for non-data sub-expressions

    Raises:
        JsLiteralError: If the text is not a literal at all
    """
    return _LiteralParser(text).parse()


def decode_js_literal(text: Optional[str]) -> Optional[Any]:
    """
    Like parse_js_value, but returns None instead of raising.

    Args:
        text: Literal source text (None is accepted)

    Returns:
        Decoded value, or None if decoding failed
    """
    if text is None:
        return None
    try:
        return parse_js_value(text)
    except (JsLiteralError, RecursionError) as e:
        logger.debug(f"Could not decode literal {text[:60]!r}: {e}")
        return None


def to_js_literal(value: Any, quote: str = "'") -> str:
    """
    Render a decoded value back to compact JavaScript.

    Strings use ``quote``; object keys are unquoted when they are valid
    identifiers. RawExpression values are emitted verbatim. Output is
    deterministic and follows dict insertion order.

    Args:
        value: Decoded value
        quote: Quote character for strings (' or ")

    Returns:
        JavaScript source text
    """
    if isinstance(value, RawExpression):
        return str(value)
    if value is None:
        return 'null'
    if value is True:
        return 'true'
    if value is False:
        return 'false'
    if isinstance(value, (int, float)):
        return json.dumps(value)
    if isinstance(value, str):
        escaped = value.replace('\\', '\\\\').replace(quote, '\\' + quote).replace('\n', '\\n')
        return f"{quote}{escaped}{quote}"
    if isinstance(value, (list, tuple)):
        return '[' + ', '.join(to_js_literal(item, quote) for item in value) + ']'
    if isinstance(value, dict):
        if not value:
            return '{}'
        members = []
        for key, item in value.items():
            if isinstance(item, RawExpression) and str(item) == key and key.startswith('...'):
                members.append(key)
                continue
            key_text = key if _SIMPLE_KEY.match(key) else to_js_literal(key, quote)
            members.append(f"{key_text}: {to_js_literal(item, quote)}")
        return '{ ' + ', '.join(members) + ' }'
    return to_js_literal(str(value), quote)
