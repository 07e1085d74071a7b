"""Indentation-based task outline: line classification, tree building and progress."""

from tasktree.outline.classifier import LineInfo, classify_line
from tasktree.outline.progress import calculate_progress, child_task_stats
from tasktree.outline.tree import TaskNode, TaskTree, build_tree

__all__ = [
    "LineInfo",
    "classify_line",
    "TaskNode",
    "TaskTree",
    "build_tree",
    "calculate_progress",
    "child_task_stats",
]
