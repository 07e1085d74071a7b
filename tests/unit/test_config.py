"""Unit tests for configuration models."""

import pytest
from pydantic import ValidationError

from tasktree.models.config import Config, EditorConfig, GtdConfig, load_config


class TestGtdConfig:
    def test_defaults(self):
        config = GtdConfig()
        assert config.show_progress is True
        assert config.progress_highlight_group == "Comment"

    def test_blank_highlight_group_rejected(self):
        with pytest.raises(ValidationError):
            GtdConfig(progress_highlight_group="   ")

    def test_immutable(self):
        config = GtdConfig()
        with pytest.raises(ValidationError):
            config.show_progress = False


class TestEditorConfig:
    def test_default_debounce(self):
        assert EditorConfig().debounce_ms == 200

    @pytest.mark.parametrize("value", [-1, 10001])
    def test_debounce_bounds(self, value):
        with pytest.raises(ValidationError):
            EditorConfig(debounce_ms=value)


class TestConfigLoad:
    def test_load_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "gtd:\n"
            "  show_progress: false\n"
            "  progress_highlight_group: WarningMsg\n"
            "editor:\n"
            "  debounce_ms: 50\n"
        )
        config = Config.load(path)

        assert config.gtd.show_progress is False
        assert config.gtd.progress_highlight_group == "WarningMsg"
        assert config.editor.debounce_ms == 50

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert Config.load(path) == Config()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            Config.load(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("gtd: [unclosed\n")
        with pytest.raises(ValueError, match="Invalid YAML"):
            Config.load(path)

    def test_non_mapping_root(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError, match="mapping"):
            Config.load(path)

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("editor:\n  debounce_ms: -5\n")
        with pytest.raises(ValidationError):
            Config.load(path)


class TestLoadConfig:
    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ("TASKTREE_SHOW_PROGRESS", "TASKTREE_PROGRESS_HIGHLIGHT_GROUP", "TASKTREE_DEBOUNCE_MS"):
            monkeypatch.delenv(name, raising=False)

    def test_missing_file_uses_defaults(self, tmp_path):
        assert load_config(tmp_path / "missing.yaml") == Config()

    def test_default_path_under_home(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        config_dir = tmp_path / ".config" / "tasktree"
        config_dir.mkdir(parents=True)
        (config_dir / "config.yaml").write_text("editor:\n  debounce_ms: 75\n")

        assert load_config().editor.debounce_ms == 75

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text("gtd:\n  show_progress: true\n")
        monkeypatch.setenv("TASKTREE_SHOW_PROGRESS", "false")
        monkeypatch.setenv("TASKTREE_PROGRESS_HIGHLIGHT_GROUP", "DiagnosticInfo")
        monkeypatch.setenv("TASKTREE_DEBOUNCE_MS", "20")

        config = load_config(path)

        assert config.gtd.show_progress is False
        assert config.gtd.progress_highlight_group == "DiagnosticInfo"
        assert config.editor.debounce_ms == 20

    def test_invalid_env_debounce_ignored(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TASKTREE_DEBOUNCE_MS", "soon")
        assert load_config(tmp_path / "missing.yaml").editor.debounce_ms == 200
