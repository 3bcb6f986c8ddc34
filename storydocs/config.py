"""
Runtime configuration.

Settings come from ``STORYDOCS_*`` environment variables (a ``.env`` file
found from the working directory is loaded first). CLI options override
them.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv, find_dotenv
from pydantic import BaseModel, Field, field_validator

load_dotenv(find_dotenv(usecwd=True))

ENV_PREFIX = "STORYDOCS_"


class StorydocsSettings(BaseModel):
    """Configuration shared by the CLI, tool handlers and static generator."""

    project_dir: Path = Field(default_factory=Path.cwd, description="Storybook project root")
    storybook_url: Optional[str] = Field(None, description="Base URL of a running Storybook server")
    index_file: Optional[Path] = Field(None, description="Path to a built index.json")
    workers: int = Field(5, ge=1, description="Static API generator workers")
    http_timeout: float = Field(10.0, gt=0, description="Inventory request timeout in seconds")

    @field_validator("storybook_url")
    @classmethod
    def _strip_trailing_slash(cls, value: Optional[str]) -> Optional[str]:
        return value.rstrip("/") if value else value

    @classmethod
    def from_env(cls, **overrides) -> "StorydocsSettings":
        """
        Build settings from the environment.

        Args:
            **overrides: Explicit values (None values are ignored)

        Returns:
            StorydocsSettings

        Raises:
            pydantic.ValidationError: If a variable holds an invalid value
        """
        values = {}
        for name in cls.model_fields:
            raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if raw not in (None, ""):
                values[name] = raw

        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
