from __future__ import annotations

import json
from pathlib import Path
from typing import Callable, Mapping

import pytest

from storydocs.extractors.framework_detector import clear_framework_cache
from tests._fixtures.projects import ANGULAR_INDEX, ANGULAR_PROJECT, write_files


@pytest.fixture(autouse=True)
def _reset_framework_cache():
    clear_framework_cache()
    yield
    clear_framework_cache()


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[[Mapping[str, str]], Path]:
    """Build a throwaway project under tmp_path from a file mapping."""

    def _make(files: Mapping[str, str]) -> Path:
        root = tmp_path / "project"
        root.mkdir(exist_ok=True)
        return write_files(root, files)

    return _make


@pytest.fixture
def angular_project(make_project) -> Path:
    """Angular Storybook project with a built storybook-static/index.json."""
    root = make_project(ANGULAR_PROJECT)
    static_dir = root / "storybook-static"
    static_dir.mkdir()
    (static_dir / "index.json").write_text(json.dumps(ANGULAR_INDEX), encoding="utf-8")
    return root
