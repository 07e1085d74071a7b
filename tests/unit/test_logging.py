"""Unit tests for logging configuration."""

import pytest

from tasktree.utils import logging as tasktree_logging


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setattr(tasktree_logging, "_log_stream", None)
    return home


class TestConfigureLogging:
    def test_log_file_under_cache_dir(self, isolated_home):
        path = tasktree_logging.log_file_path()
        assert path == isolated_home / ".cache" / "tasktree" / "logs" / "tasktree.log"
        assert path.parent.is_dir()

    def test_repeated_calls_share_one_stream(self):
        tasktree_logging.configure_logging()
        first = tasktree_logging._log_stream
        tasktree_logging.configure_logging()

        assert tasktree_logging._log_stream is first
        assert not first.closed

    def test_new_path_opens_new_stream(self, tmp_path, monkeypatch):
        tasktree_logging.configure_logging()
        first = tasktree_logging._log_stream

        other = tmp_path / "other"
        other.mkdir()
        monkeypatch.setenv("HOME", str(other))
        tasktree_logging.configure_logging()

        assert tasktree_logging._log_stream is not first
        assert tasktree_logging._log_stream.name.startswith(str(other))


class TestLogLevel:
    @pytest.mark.parametrize(
        "value, expected",
        [("debug", "DEBUG"), ("WARNING", "WARNING"), ("verbose", "INFO")],
    )
    def test_level_from_environment(self, monkeypatch, value, expected):
        monkeypatch.setenv("TASKTREE_LOG_LEVEL", value)
        assert tasktree_logging.resolve_log_level() == expected

    def test_default_level(self, monkeypatch):
        monkeypatch.delenv("TASKTREE_LOG_LEVEL", raising=False)
        assert tasktree_logging.resolve_log_level() == "INFO"
