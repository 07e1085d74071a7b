"""Consistency validation between parent tasks and their task children.

A task with task children is done exactly when all of those children are
done; its checkbox is derived, never authored. A task without task children
keeps whatever state the user wrote.
"""

from tasktree.outline.classifier import set_checkbox_state
from tasktree.outline.tree import TaskTree
from tasktree.services.document import Document
from tasktree.utils.logging import get_logger


logger = get_logger(__name__)


def plan_validation(tree: TaskTree) -> dict[int, str]:
    """Compute the checkbox rewrites needed to make a tree consistent.

    Nodes are visited in post-order so every child's corrected state is
    known before its parent is evaluated. A grandparent therefore sees the
    state its children will have after the rewrite, and a single pass is
    enough to reach a fixed point.

    Args:
        tree: Tree snapshot to check

    Returns:
        Rewritten line content keyed by line number (empty when consistent)
    """
    effective: dict[int, bool] = {}
    changes: dict[int, str] = {}

    for node in tree.post_order():
        if not node.is_task:
            continue

        task_children = [child for child in node.children if child.is_task]
        if task_children:
            should_be_done = all(effective[child.line] for child in task_children)
        else:
            should_be_done = bool(node.is_done)

        effective[node.line] = should_be_done
        if bool(node.is_done) != should_be_done:
            changes[node.line] = set_checkbox_state(node.raw_text, should_be_done)

    return changes


def apply_validation(document: Document, tree: TaskTree) -> bool:
    """Rewrite inconsistent parent checkboxes in a document.

    All rewrites are applied as one update; the document keeps its cursor.
    When this returns True the tree is stale and must be rebuilt.

    Args:
        document: Document the tree was built from
        tree: Tree snapshot of the document's current text

    Returns:
        True if any line was changed
    """
    changes = plan_validation(tree)
    if not changes:
        return False

    document.replace_lines(changes)
    logger.info("validation_applied", doc_id=document.doc_id, lines=sorted(changes))
    return True
