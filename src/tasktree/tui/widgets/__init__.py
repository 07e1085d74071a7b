"""Widgets for the tasktree editor."""

from tasktree.tui.widgets.progress_panel import ProgressPanel
from tasktree.tui.widgets.task_editor import TaskEditor

__all__ = ["ProgressPanel", "TaskEditor"]
