"""Interactive task toggling.

A toggle targets one line or a contiguous range of lines:

- An existing task flips its state, and every task below it is forced to
  the same new state.
- A plain list item becomes a task. It starts done only when it already
  has task children and all of them are done.
- A single plain item may also convert its chain of plain-item ancestors
  when the host confirms.

All rewrites are staged and returned together so the caller can commit
them as one update. Reads during the operation see staged content first,
because earlier steps change what later steps decide.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from tasktree.outline.classifier import classify_line, insert_checkbox, set_checkbox_state
from tasktree.outline.tree import TaskNode, TaskTree
from tasktree.services.document import Notifier
from tasktree.utils.logging import get_logger


logger = get_logger(__name__)

ConfirmAncestors = Callable[[int], bool]


class ToggleAbort(str, Enum):
    """Reasons a toggle made no changes."""

    NOT_A_LIST_ITEM = "not_a_list_item"
    NON_LIST_IN_SELECTION = "non_list_in_selection"
    MIXED_STATES = "mixed_states"


ABORT_MESSAGES = {
    ToggleAbort.NOT_A_LIST_ITEM: "Only list items can be turned into tasks. Aborting.",
    ToggleAbort.NON_LIST_IN_SELECTION: "Selection contains non-list items. Aborting.",
    ToggleAbort.MIXED_STATES: "Selection contains items with mixed states. Aborting.",
}


@dataclass
class ToggleResult:
    """Outcome of a toggle operation.

    Attributes:
        changes: Staged line rewrites keyed by line number
        aborted: Abort reason, None when the operation went through
    """

    changes: dict[int, str] = field(default_factory=dict)
    aborted: Optional[ToggleAbort] = None

    @property
    def applied(self) -> bool:
        return self.aborted is None and bool(self.changes)


def ancestor_prompt(count: int) -> str:
    """Question shown before converting plain-item ancestors."""
    return f"Convert {count} parent item(s) to tasks as well?"


class ToggleOperation:
    """One staged toggle over a fresh tree snapshot.

    Args:
        tree: Tree built from the document's current text
        notifier: Channel for abort diagnostics
        confirm: Asked with the number of plain-item ancestors before a
            single-line conversion; None means the offer is declined
    """

    def __init__(
        self,
        tree: TaskTree,
        notifier: Notifier,
        confirm: Optional[ConfirmAncestors] = None,
    ):
        self.tree = tree
        self.notifier = notifier
        self.confirm = confirm
        self.staged: dict[int, str] = {}

    def run(self, start: int, end: Optional[int] = None) -> ToggleResult:
        """Stage the toggle for a line, or for a line range when end is given.

        Returns:
            ToggleResult with the staged rewrites, empty on abort
        """
        if end is None:
            aborted = self._process_line(start, is_batch=False)
        else:
            aborted = self._process_selection(min(start, end), max(start, end))

        if aborted is not None:
            self.notifier.notify(ABORT_MESSAGES[aborted], severity="warning")
            logger.warning("toggle_aborted", reason=aborted.value, start=start, end=end)
            return ToggleResult(aborted=aborted)

        return ToggleResult(changes=dict(self.staged))

    def future_line(self, lnum: int) -> Optional[str]:
        """Line content as it will be after the staged rewrites."""
        if lnum in self.staged:
            return self.staged[lnum]
        node = self.tree.get(lnum)
        return node.raw_text if node else None

    def _line_for_state(self, node: TaskNode, is_done: bool) -> Optional[str]:
        line = self.future_line(node.line)
        if line is None or not node.is_task:
            return line
        return set_checkbox_state(line, is_done)

    def _cascade_down(self, node: TaskNode, is_done: bool) -> None:
        for child in node.children:
            if child.is_task:
                self.staged[child.line] = self._line_for_state(child, is_done)
                self._cascade_down(child, is_done)

    def _toggle_existing_task(self, node: TaskNode) -> None:
        new_state = not node.is_done
        self.staged[node.line] = self._line_for_state(node, new_state)
        self._cascade_down(node, new_state)

    def should_new_task_be_done(self, node: TaskNode) -> bool:
        """Initial state for a plain item about to become a task.

        True only if it has task children (as staged so far) and none of
        them is incomplete.
        """
        if not node.children:
            return False

        has_task_children = False
        for child in node.children:
            info = classify_line(self.future_line(child.line) or "")
            if info is None or not info.is_task:
                continue
            has_task_children = True
            if not info.is_done:
                return False
        return has_task_children

    def non_task_ancestors(self, node: TaskNode) -> list[TaskNode]:
        """Plain-item ancestors from nearest upward, stopping at the first task."""
        ancestors = []
        for ancestor in self.tree.ancestors(node):
            if ancestor.is_task:
                break
            ancestors.append(ancestor)
        return ancestors

    def _create_task_from_list_item(self, node: TaskNode, is_batch: bool) -> None:
        nodes_to_create = [node]

        if not is_batch:
            ancestors = self.non_task_ancestors(node)
            if ancestors and self.confirm is not None and self.confirm(len(ancestors)):
                nodes_to_create.extend(ancestors)

        # Nearest first, so each ancestor sees its converted children
        for target in nodes_to_create:
            is_done = self.should_new_task_be_done(target)
            line = self.future_line(target.line)
            self.staged[target.line] = insert_checkbox(line, target.content_column, is_done)

    def _process_line(self, lnum: int, is_batch: bool) -> Optional[ToggleAbort]:
        node = self.tree.get(lnum)
        if node is None:
            return ToggleAbort.NOT_A_LIST_ITEM

        if node.is_task:
            self._toggle_existing_task(node)
        else:
            self._create_task_from_list_item(node, is_batch)
        return None

    def _process_selection(self, start: int, end: int) -> Optional[ToggleAbort]:
        # Validate the whole range before staging anything
        first_state = None
        for lnum in range(start, end + 1):
            node = self.tree.get(lnum)
            if node is None:
                return ToggleAbort.NON_LIST_IN_SELECTION
            if first_state is None:
                first_state = node.state_label
            elif node.state_label != first_state:
                return ToggleAbort.MIXED_STATES

        for lnum in range(start, end + 1):
            self._process_line(lnum, is_batch=True)
        return None
