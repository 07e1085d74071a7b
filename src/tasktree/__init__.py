"""tasktree: live task-list progress and consistency for indented markdown lists."""

__version__ = "0.1.0"
