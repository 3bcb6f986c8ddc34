"""
Text helpers for best-effort scanning of JavaScript/TypeScript sources.

Nothing here parses a real grammar. The scanner only knows enough about
string literals, template literals and comments to find the bracket that
closes a given opening bracket, which is what the extractors need to cut
object literals and class bodies out of a file.
"""

import re
from pathlib import Path
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

_PAIRS = {'{': '}', '[': ']', '(': ')', '<': '>'}

# Upper bound on how far a single balanced block may extend
MAX_BLOCK_LENGTH = 200_000

_GENERIC_ARGS = re.compile(r'<[\w .,|\[\]\'"]*>')


def read_source(path: Path) -> Optional[str]:
    """
    Read a source file as UTF-8.

    Args:
        path: File to read

    Returns:
        File content, or None if the file is missing or unreadable
    """
    try:
        return Path(path).read_text(encoding='utf-8', errors='ignore')
    except FileNotFoundError:
        return None
    except OSError as e:
        logger.warning(f"Could not read {path}: {e}")
        return None


def skip_string(text: str, index: int) -> int:
    """Return the index just past the string literal starting at ``index``."""
    quote = text[index]
    i = index + 1
    length = len(text)
    while i < length:
        ch = text[i]
        if ch == '\\':
            i += 2
            continue
        if quote == '`' and ch == '$' and i + 1 < length and text[i + 1] == '{':
            end = find_closing(text, i + 1)
            if end is None:
                return length
            i = end + 1
            continue
        if ch == quote:
            return i + 1
        if ch == '\n' and quote != '`':
            # Unterminated ordinary string; resume on the next line
            return i
        i += 1
    return length


def skip_comment(text: str, index: int) -> int:
    """Return the index just past the comment starting at ``index``, or ``index``."""
    if text.startswith('//', index):
        end = text.find('\n', index)
        return len(text) if end == -1 else end
    if text.startswith('/*', index):
        end = text.find('*/', index + 2)
        return len(text) if end == -1 else end + 2
    return index


def find_closing(text: str, open_index: int) -> Optional[int]:
    """
    Find the bracket matching the one at ``open_index``.

    Strings, template literals and comments are skipped. Only the bracket
    kind found at ``open_index`` is counted, so ``<`` generics do not
    interfere with ``{`` blocks.

    Args:
        text: Source text
        open_index: Index of an opening ``{``, ``[``, ``(`` or ``<``

    Returns:
        Index of the matching closing bracket, or None if unbalanced
    """
    if open_index >= len(text) or text[open_index] not in _PAIRS:
        return None

    opener = text[open_index]
    closer = _PAIRS[opener]
    depth = 0
    i = open_index
    limit = min(len(text), open_index + MAX_BLOCK_LENGTH)

    while i < limit:
        ch = text[i]
        if ch in '\'"`' and opener != '<':
            i = skip_string(text, i)
            continue
        if ch == '/' and i + 1 < limit and text[i + 1] in '/*':
            i = skip_comment(text, i)
            continue
        if ch == opener:
            depth += 1
        elif ch == closer:
            depth -= 1
            if depth == 0:
                return i
        i += 1

    return None


def balanced_block(text: str, open_index: int) -> Optional[str]:
    """Return the text from ``open_index`` through its matching bracket."""
    end = find_closing(text, open_index)
    if end is None:
        return None
    return text[open_index:end + 1]


def split_top_level(body: str, separators: str = ",") -> List[str]:
    """
    Split ``body`` on separators that are not nested inside brackets or strings.

    Used to split object members and destructuring lists.
    """
    parts = []
    depth = 0
    start = 0
    i = 0
    length = len(body)

    while i < length:
        ch = body[i]
        if ch in '\'"`':
            i = skip_string(body, i)
            continue
        if ch == '/' and i + 1 < length and body[i + 1] in '/*':
            i = skip_comment(body, i)
            continue
        if ch in '{[(':
            depth += 1
        elif ch in '}])':
            depth -= 1
        elif ch == '<':
            # Generic arguments in type annotations (Array<string>, Record<K, V>)
            generic = _GENERIC_ARGS.match(body, i)
            if generic:
                i = generic.end()
                continue
        elif ch in separators and depth == 0:
            parts.append(body[start:i])
            start = i + 1
        i += 1

    parts.append(body[start:])
    return [p for p in parts if p.strip()]


def clean_doc_comment(raw: str) -> Optional[str]:
    """
    Strip comment markers from the inside of a ``/** ... */`` block.

    Leading ``*`` gutters are removed line by line; ``@tag`` lines are kept.
    Returns None for an empty comment.
    """
    lines = []
    for line in raw.splitlines():
        stripped = line.strip()
        if stripped.startswith('*'):
            stripped = stripped[1:]
            if stripped.startswith(' '):
                stripped = stripped[1:]
        lines.append(stripped.rstrip())

    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()

    if not lines:
        return None
    return '\n'.join(lines)


def doc_comment_before(text: str, index: int) -> Optional[str]:
    """
    Return the cleaned JSDoc block that ends immediately before ``index``.

    Only whitespace and decorator/export keywords may separate the comment
    from ``index``; anything else means the comment belongs elsewhere.
    """
    window_start = max(0, index - 5000)
    window = text[window_start:index]
    end = window.rfind('*/')
    if end == -1:
        return None
    between = window[end + 2:]
    if between.strip() and not re.fullmatch(r'\s*(?:export\s+)?(?:default\s+)?', between):
        return None
    start = window.rfind('/**', 0, end)
    if start == -1:
        return None
    return clean_doc_comment(window[start + 3:end])


def kebab_case(name: str) -> str:
    """Convert an export name to Storybook's id form (PrimaryLarge -> primary-large)."""
    name = re.sub(r'([a-z0-9])([A-Z])', r'\1-\2', name)
    name = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1-\2', name)
    name = re.sub(r'([A-Za-z])([0-9])', r'\1-\2', name)
    name = re.sub(r'([0-9])([a-z])', r'\1-\2', name)
    name = re.sub(r'[^A-Za-z0-9]+', '-', name)
    return name.strip('-').lower()


_LEADING_COMMENTS = re.compile(r'^(?:\s*(?://[^\n]*|/\*.*?\*/))*\s*', re.DOTALL)
_MEMBER_KEY = re.compile(r'(?:(["\'])(?P<quoted>.+?)\1|(?P<bare>[A-Za-z_$][\w$]*))\s*:\s*', re.DOTALL)


def object_members(object_text: str) -> Dict[str, str]:
    """
    Split an object literal into its top-level ``key: value`` members.

    Args:
        object_text: Text of a balanced ``{ ... }`` block

    Returns:
        Mapping of key to raw value text, in declaration order. Shorthand
        members, spreads and methods are skipped.
    """
    text = object_text.strip()
    if not (text.startswith('{') and text.endswith('}')):
        return {}

    members: Dict[str, str] = {}
    for part in split_top_level(text[1:-1], ','):
        part = _LEADING_COMMENTS.sub('', part, count=1)
        match = _MEMBER_KEY.match(part)
        if not match:
            continue
        key = match.group('quoted') or match.group('bare')
        members[key] = part[match.end():].strip()
    return members


_CONTINUATION_ENDINGS = ('=>', '=', ',', '(', '[', '{', '+', '-', '?', ':', '&&', '||', '.')


def statement_end(text: str, index: int) -> int:
    """
    Find the end of the statement starting at ``index``.

    Stops after a top-level ``;`` or at a top-level newline when the line
    does not end with an operator that continues the expression.
    """
    depth = 0
    i = index
    length = len(text)
    line_start = index
    while i < length:
        ch = text[i]
        if ch in '\'"`':
            i = skip_string(text, i)
            continue
        if ch == '/' and i + 1 < length and text[i + 1] in '/*':
            i = skip_comment(text, i)
            continue
        if ch in '{[(':
            depth += 1
        elif ch in '}])':
            depth -= 1
        elif ch == ';' and depth <= 0:
            return i + 1
        elif ch == '\n':
            if depth <= 0 and text[line_start:i].strip() and not text[line_start:i].rstrip().endswith(_CONTINUATION_ENDINGS):
                return i
            line_start = i + 1
        i += 1
    return length
