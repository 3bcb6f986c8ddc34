"""Extraction components for storydocs."""

from .framework_detector import FrameworkDetector, detect_framework, clear_framework_cache
from .import_resolver import ImportResolver, resolve_component_path, find_component_import
from .component_extractor import ComponentDocExtractor, extract_component_docs
from .story_extractor import StoryExampleExtractor, extract_story_examples
from .js_literal import RawExpression, JsLiteralError, parse_js_value, decode_js_literal, to_js_literal

__all__ = [
    "FrameworkDetector",
    "detect_framework",
    "clear_framework_cache",
    "ImportResolver",
    "resolve_component_path",
    "find_component_import",
    "ComponentDocExtractor",
    "extract_component_docs",
    "StoryExampleExtractor",
    "extract_story_examples",
    "RawExpression",
    "JsLiteralError",
    "parse_js_value",
    "decode_js_literal",
    "to_js_literal",
]
