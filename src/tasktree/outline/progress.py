"""Roll-up completion progress for task nodes."""

from dataclasses import dataclass
from typing import Optional

from tasktree.outline.tree import TaskNode

ProgressMemo = dict[int, tuple[float, bool]]


@dataclass(frozen=True)
class ChildTaskStats:
    """Aggregate over a node's direct task children."""

    progress_total: float = 0.0
    task_count: int = 0
    all_done: bool = True


def child_task_stats(node: TaskNode, memo: Optional[ProgressMemo] = None) -> ChildTaskStats:
    """Gather completion statistics for a node's direct task children.

    Non-task children are ignored. Each task child contributes its own
    progress, so grandchildren only count through their parent.
    """
    progress_total = 0.0
    task_count = 0
    all_done = True
    for child in node.children:
        if not child.is_task:
            continue
        task_count += 1
        child_progress, _ = calculate_progress(child, memo)
        progress_total += child_progress
        if not child.is_done:
            all_done = False
    return ChildTaskStats(progress_total=progress_total, task_count=task_count, all_done=all_done)


def calculate_progress(node: TaskNode, memo: Optional[ProgressMemo] = None) -> tuple[float, bool]:
    """Calculate the completion ratio of a node.

    Args:
        node: Node to evaluate
        memo: Optional cache of results keyed by line, shared across calls
            over the same tree snapshot

    Returns:
        Tuple of (progress in [0.0, 1.0], has_task_children)
    """
    own = 1.0 if (node.is_task and node.is_done) else 0.0
    if not node.children:
        return own, False

    if memo is not None and node.line in memo:
        return memo[node.line]

    stats = child_task_stats(node, memo)
    if stats.task_count == 0:
        result = (own, False)
    else:
        result = (stats.progress_total / stats.task_count, True)

    if memo is not None:
        memo[node.line] = result
    return result


def format_progress(progress: float) -> str:
    """Annotation text for a progress ratio, e.g. `` [ 50% ]``."""
    return " [ %.0f%% ]" % (progress * 100)
