"""Shared test fixtures for all test modules."""

from textwrap import dedent

import pytest

from tasktree.models.config import Config, EditorConfig
from tasktree.services.document import AnnotationStore, RecordingNotifier, TextDocument
from tasktree.services.pipeline import TaskPipeline


def doc_lines(markdown: str) -> list[str]:
    """Dedent a markdown snippet and split it into lines."""
    return dedent(markdown).strip("\n").split("\n")


@pytest.fixture
def make_document():
    """Factory for in-memory documents from dedented markdown."""

    def _make(markdown: str, doc_id: str = "todo.md") -> TextDocument:
        return TextDocument(doc_id, "\n".join(doc_lines(markdown)))

    return _make


@pytest.fixture
def store():
    return AnnotationStore()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def config_holder():
    """Mutable holder so tests can change configuration between renders."""
    return {"config": Config(editor=EditorConfig(debounce_ms=10))}


@pytest.fixture
def pipeline(store, notifier, config_holder):
    return TaskPipeline(store, notifier, config_provider=lambda: config_holder["config"])
