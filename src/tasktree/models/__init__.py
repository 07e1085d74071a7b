"""Data models for tasktree."""

from tasktree.models.config import Config, EditorConfig, GtdConfig

__all__ = ["Config", "EditorConfig", "GtdConfig"]
