"""Structured logging setup for tasktree."""

import structlog
from pathlib import Path
from typing import Any, Optional, TextIO
import os

VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

_log_stream: Optional[TextIO] = None


def log_file_path() -> Path:
    """Location of the JSON log file, created on demand."""
    log_dir = Path.home() / ".cache" / "tasktree" / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / "tasktree.log"


def resolve_log_level() -> str:
    """Level from TASKTREE_LOG_LEVEL, falling back to INFO when unset or unknown."""
    level = os.environ.get("TASKTREE_LOG_LEVEL", "INFO").upper()
    return level if level in VALID_LEVELS else "INFO"


def _open_log_stream(path: Path) -> TextIO:
    # Cached loggers hold the stream they were created with; it is never closed
    global _log_stream
    if _log_stream is None or _log_stream.closed or _log_stream.name != str(path):
        _log_stream = open(path, "a", encoding="utf-8")
    return _log_stream


def configure_logging() -> None:
    """
    Configure structlog for JSON logging to ~/.cache/tasktree/logs/tasktree.log.

    Safe to call repeatedly (every CLI invocation does): the log file is
    opened once per path and shared.

    Log levels:
    - DEBUG: Tree builds, renders, debounce scheduling
    - INFO: Document attach/detach, toggles, validator rewrites
    - WARNING: Aborted toggles
    - ERROR: Configuration and file errors

    Example:
        export TASKTREE_LOG_LEVEL=DEBUG
        tasktree edit todo.md
        tail -f ~/.cache/tasktree/logs/tasktree.log | jq .
    """
    stream = _open_log_stream(log_file_path())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(resolve_log_level()),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Get a structured logger, e.g. ``get_logger(__name__).info("tree_built", nodes=12)``."""
    return structlog.get_logger(name)
