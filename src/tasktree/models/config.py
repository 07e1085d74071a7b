"""Configuration models for tasktree."""

from pydantic import BaseModel, Field, field_validator
from pathlib import Path
from typing import Any, Dict, Optional
import yaml
import os


class GtdConfig(BaseModel):
    """Settings for task progress display."""

    show_progress: bool = Field(
        default=True,
        description="Draw roll-up progress annotations next to parent tasks"
    )

    progress_highlight_group: str = Field(
        default="Comment",
        description="Highlight group (style name) used for progress annotations"
    )

    @field_validator('progress_highlight_group')
    @classmethod
    def validate_highlight_group(cls, v: str) -> str:
        """Reject blank highlight group names."""
        if not v.strip():
            raise ValueError("progress_highlight_group must not be empty")
        return v.strip()

    model_config = {"frozen": True}


class EditorConfig(BaseModel):
    """Settings for the live editing pipeline."""

    debounce_ms: int = Field(
        default=200,
        ge=0,
        le=10000,
        description="Quiet period after the last edit before the pipeline runs"
    )

    model_config = {"frozen": True}


class Config(BaseModel):
    """Root configuration for tasktree."""

    gtd: GtdConfig = Field(default_factory=GtdConfig, description="Progress display settings")
    editor: EditorConfig = Field(default_factory=EditorConfig, description="Editing pipeline settings")

    @classmethod
    def load(cls, path: Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            path: Path to config.yaml file

        Returns:
            Validated Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If YAML is invalid or validation fails
        """
        if not path.exists():
            raise FileNotFoundError(
                f"Configuration file not found at {path}\n\n"
                f"Expected format:\n\n"
                f"gtd:\n"
                f"  show_progress: true\n"
                f"  progress_highlight_group: Comment\n\n"
                f"editor:\n"
                f"  debounce_ms: 200\n"
            )

        with open(path) as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Configuration root must be a mapping: {path}")

        return cls(**data)

    model_config = {"frozen": True}


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from YAML file with environment variable overrides.

    A missing file is not an error: defaults apply.

    Args:
        config_path: Path to config file. If None, uses ~/.config/tasktree/config.yaml

    Returns:
        Validated Config object

    Raises:
        ValueError: If config file is invalid

    Environment Variables:
        TASKTREE_SHOW_PROGRESS: Override gtd.show_progress ("0"/"false"/"no" disable)
        TASKTREE_PROGRESS_HIGHLIGHT_GROUP: Override gtd.progress_highlight_group
        TASKTREE_DEBOUNCE_MS: Override editor.debounce_ms
    """
    if config_path is None:
        config_path = Path.home() / ".config" / "tasktree" / "config.yaml"

    if config_path.exists():
        data = Config.load(config_path).model_dump()
    else:
        data = {}

    data = _apply_env_overrides(data)
    return Config(**data)


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    """Apply TASKTREE_* environment variable overrides to configuration data."""
    data.setdefault("gtd", {})
    data.setdefault("editor", {})

    if (env_show := os.getenv("TASKTREE_SHOW_PROGRESS")) is not None:
        data["gtd"]["show_progress"] = env_show.strip().lower() not in ("0", "false", "no", "off")

    if env_group := os.getenv("TASKTREE_PROGRESS_HIGHLIGHT_GROUP"):
        data["gtd"]["progress_highlight_group"] = env_group

    if env_debounce := os.getenv("TASKTREE_DEBOUNCE_MS"):
        try:
            data["editor"]["debounce_ms"] = int(env_debounce)
        except ValueError:
            pass  # Invalid value, ignore

    return data
