"""Shared fixtures for UI tests."""

import pytest

from tasktree.models.config import Config, EditorConfig


@pytest.fixture
def fast_config():
    """Configuration with no debounce delay so edits settle quickly."""
    return Config(editor=EditorConfig(debounce_ms=0))


@pytest.fixture
def todo_file(tmp_path):
    """Write a markdown file and return its path."""

    def _write(text: str):
        path = tmp_path / "todo.md"
        path.write_text(text, encoding="utf-8")
        return path

    return _write
