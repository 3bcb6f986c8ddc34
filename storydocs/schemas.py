"""
Pydantic schemas for storydocs.

This module defines the data models produced by the story documentation
pipeline and consumed by the tool handlers and the static API generator.

Architecture:
- Framework: Closed set of supported UI framework conventions
- StoryIndexEntry: One entry of Storybook's index.json (read-only input)
- PropertyDoc: Declared component input/prop
- ComponentDoc: Structural metadata extracted from a component source file
- StoryVariant / StoryFileDoc: Variants (named exports) of a story file
- ParsedStory: Single-story composition used by get_story
- StoryDocs: Full documentation document returned by get_story_docs

JSON output uses the camelCase names of the public API (``componentCode``,
``metaCode``, ``storyExamples`` ...). Always dump with ``by_alias=True``.
"""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# FRAMEWORK
# ============================================================================

class Framework(str, Enum):
    """
    UI framework convention of a Storybook project.

    - ANGULAR: markup-template (decorator with selector + template)
    - REACT: jsx-component (exported functions, Props types)
    - VUE: single-file-component (.vue, also used for .svelte)
    - WEB_COMPONENTS: template-description (custom elements / Lit)
    - UNKNOWN: no recognised signature
    """
    ANGULAR = "angular"
    REACT = "react"
    VUE = "vue"
    WEB_COMPONENTS = "web-components"
    UNKNOWN = "unknown"


# ============================================================================
# INVENTORY SCHEMAS
# ============================================================================

class StoryIndexEntry(BaseModel):
    """Entry of the Storybook story index (``index.json``)."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(description="Unique story identifier (e.g. example-button--primary)")
    name: Optional[str] = Field(None, description="Display name of the story")
    title: Optional[str] = Field(None, description="Grouping path (e.g. Example/Button)")
    kind: Optional[str] = Field(None, description="Legacy grouping path, defaults to title")
    import_path: Optional[str] = Field(
        None,
        alias="importPath",
        description="Story file path relative to the project root"
    )
    tags: List[str] = Field(default_factory=list, description="Story tags")
    type: Optional[str] = Field(None, description="Entry type (story or docs)")

    def summary(self, include_import_path: bool = True) -> Dict[str, Any]:
        """Public dictionary form used by list/get tools."""
        data = {
            "id": self.id,
            "name": self.name,
            "title": self.title,
            "kind": self.kind or self.title,
        }
        if include_import_path:
            data["importPath"] = self.import_path
            data["tags"] = list(self.tags)
        data["type"] = self.type
        return data


# ============================================================================
# COMPONENT SCHEMAS
# ============================================================================

class PropertyDoc(BaseModel):
    """Declared component property (input, output, prop or attribute)."""
    model_config = ConfigDict(json_schema_extra={
        "example": {
            "name": "label",
            "type": "string",
            "default": "'Button'",
            "description": "Button contents",
            "required": False,
            "kind": "input"
        }
    })

    name: str = Field(description="Property name")
    type: Optional[str] = Field(None, description="Type annotation as written in source")
    default: Optional[str] = Field(None, description="Default value as written in source")
    description: Optional[str] = Field(None, description="Doc comment attached to the property")
    required: bool = Field(False, description="Whether the property is declared required")
    kind: Literal["input", "output", "prop", "attribute"] = Field(
        "prop",
        description="How the property is declared"
    )


class ComponentDoc(BaseModel):
    """
    Structural metadata extracted from a component source file.

    Every field is optional: what can be recovered depends on the framework
    convention and the source file. Present values are always text found
    literally in the source (or its sibling template file).
    """
    model_config = ConfigDict(populate_by_name=True)

    framework: Framework = Field(description="Convention used to read the file")
    source_path: str = Field(alias="sourcePath", description="Component file path")
    selector: Optional[str] = Field(None, description="Markup tag/selector used to invoke the component")
    component_name: Optional[str] = Field(
        None,
        alias="componentName",
        description="Exported class/function name"
    )
    template: Optional[str] = Field(None, description="Raw template markup")
    component_code: Optional[str] = Field(
        None,
        alias="componentCode",
        description="Source excerpt of the component declaration"
    )
    properties: List[PropertyDoc] = Field(default_factory=list, description="Declared properties")
    description: Optional[str] = Field(None, description="Leading documentation comment")

    @property
    def identity(self) -> Optional[str]:
        """How the component is invoked: selector first, then component name."""
        return self.selector or self.component_name


# ============================================================================
# STORY SCHEMAS
# ============================================================================

class StoryVariant(BaseModel):
    """Named story export with its argument mapping."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(description="Export name, unique within the story file")
    story_name: Optional[str] = Field(
        None,
        alias="storyName",
        description="Display name override (name:/storyName)"
    )
    args: Dict[str, Any] = Field(default_factory=dict, description="Decoded args, declaration order")
    args_code: Optional[str] = Field(None, alias="argsCode", description="Raw args object literal")
    arg_types: Dict[str, Any] = Field(default_factory=dict, alias="argTypes", description="Decoded argTypes")
    code: str = Field(description="Raw source of the variant declaration")
    usage_example: Optional[str] = Field(
        None,
        alias="usageExample",
        description="Generated usage snippet"
    )


class StoryFileDoc(BaseModel):
    """Imports, meta declaration and variants of one story file."""
    model_config = ConfigDict(populate_by_name=True)

    imports: List[str] = Field(default_factory=list, description="Raw import statements")
    meta: Optional[str] = Field(None, description="Raw meta/default export declaration")
    component: Optional[str] = Field(None, description="Identifier given to meta component:")
    title: Optional[str] = Field(None, description="Meta title")
    meta_args: Dict[str, Any] = Field(default_factory=dict, alias="metaArgs")
    meta_arg_types: Dict[str, Any] = Field(default_factory=dict, alias="metaArgTypes")
    stories: Dict[str, StoryVariant] = Field(
        default_factory=dict,
        description="Variants keyed by export name, declaration order"
    )


class ParsedStory(BaseModel):
    """Single story view: component identity, effective args and argTypes."""
    model_config = ConfigDict(populate_by_name=True)

    component: Optional[str] = None
    args: Dict[str, Any] = Field(default_factory=dict)
    arg_types: Dict[str, Any] = Field(default_factory=dict, alias="argTypes")
    component_docs: Optional[ComponentDoc] = Field(None, alias="componentDocs")


class StoryDocs(BaseModel):
    """Documentation document served by get_story_docs and /api/docs."""
    model_config = ConfigDict(populate_by_name=True)

    story_id: str = Field(alias="storyId")
    title: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    framework: Framework = Framework.UNKNOWN

    component: Optional[str] = None
    selector: Optional[str] = None
    template: Optional[str] = None
    component_code: Optional[str] = Field(None, alias="componentCode")
    properties: Optional[List[PropertyDoc]] = None
    component_description: Optional[str] = Field(None, alias="componentDescription")

    imports: Optional[List[str]] = None
    meta_code: Optional[str] = Field(None, alias="metaCode")
    story_examples: Optional[Dict[str, StoryVariant]] = Field(None, alias="storyExamples")
    usage_examples: Optional[Dict[str, str]] = Field(None, alias="usageExamples")

    mdx_content: Optional[str] = Field(None, alias="mdxContent")

    def to_json_dict(self) -> Dict[str, Any]:
        """Serialize with public field names, dropping absent fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
