"""Task tree model and the two-pass indentation tree builder.

The tree is a forest: list items with no shallower predecessor are roots.
Nodes are identified by their 1-based line number within one document
snapshot. Parents are referenced by line number only, so ownership flows
strictly from the tree to its roots and from each node to its children.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence

from tasktree.outline.classifier import classify_line


@dataclass
class TaskNode:
    """One list-item line in a document snapshot.

    Attributes:
        line: 1-based line number (identity within the snapshot)
        raw_text: Line content at classification time
        indent_level: Count of leading whitespace characters
        content_column: Index into raw_text where item content begins
        is_task: Line carries a checkbox token
        is_done: Checkbox state (None for plain list items)
        parent_line: Line number of the parent node, None for roots
        children: Child nodes in ascending line order
    """

    line: int
    raw_text: str
    indent_level: int
    content_column: int
    is_task: bool
    is_done: Optional[bool] = None
    parent_line: Optional[int] = None
    children: list["TaskNode"] = field(default_factory=list)

    @property
    def is_root(self) -> bool:
        return self.parent_line is None

    @property
    def state_label(self) -> str:
        """Selection-validation class of this node."""
        if not self.is_task:
            return "LIST_ITEM"
        return "COMPLETE" if self.is_done else "NOT_COMPLETE"


@dataclass
class TaskTree:
    """Forest of list-item nodes plus a line -> node index.

    Attributes:
        roots: Top-level nodes in line order
        nodes: Every node in the forest keyed by line number
    """

    roots: list[TaskNode] = field(default_factory=list)
    nodes: dict[int, TaskNode] = field(default_factory=dict)

    def get(self, line: int) -> Optional[TaskNode]:
        """Return the node on a line, or None for non-list lines."""
        return self.nodes.get(line)

    def parent_of(self, node: TaskNode) -> Optional[TaskNode]:
        if node.parent_line is None:
            return None
        return self.nodes[node.parent_line]

    def ancestors(self, node: TaskNode) -> Iterator[TaskNode]:
        """Yield ancestors from nearest to furthest."""
        parent = self.parent_of(node)
        while parent is not None:
            yield parent
            parent = self.parent_of(parent)

    def tasks(self) -> Iterator[TaskNode]:
        """Yield task nodes in line order."""
        for line in sorted(self.nodes):
            node = self.nodes[line]
            if node.is_task:
                yield node

    def post_order(self) -> Iterator[TaskNode]:
        """Yield every node after all of its descendants.

        Iterative so that deeply nested outlines cannot exhaust the
        interpreter's recursion limit.
        """
        stack: list[tuple[TaskNode, bool]] = [(root, False) for root in reversed(self.roots)]
        while stack:
            node, expanded = stack.pop()
            if expanded:
                yield node
                continue
            stack.append((node, True))
            for child in reversed(node.children):
                stack.append((child, False))

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[TaskNode]:
        for line in sorted(self.nodes):
            yield self.nodes[line]


def build_tree(lines: Sequence[str]) -> TaskTree:
    """Build a task tree from document lines.

    Runs in two passes:

    1. Classify every line and create a node for each list item.
       Non-list lines are skipped entirely and do not reset indentation
       tracking.
    2. Scan nodes in line order, remembering the most recent node seen at
       each indent level. Each node's parent is the most recent node at the
       nearest strictly smaller level.

    Args:
        lines: Document lines (index 0 is line 1)

    Returns:
        TaskTree for the snapshot
    """
    nodes: dict[int, TaskNode] = {}

    # Pass 1
    for lnum, text in enumerate(lines, start=1):
        info = classify_line(text)
        if info is None:
            continue
        nodes[lnum] = TaskNode(
            line=lnum,
            raw_text=text,
            indent_level=info.indent_level,
            content_column=info.content_column,
            is_task=info.is_task,
            is_done=info.is_done,
        )

    # Pass 2
    roots: list[TaskNode] = []
    last_by_level: dict[int, TaskNode] = {}
    for lnum in sorted(nodes):
        node = nodes[lnum]
        last_by_level[node.indent_level] = node

        # A shallow node closes every deeper branch before it
        for level in [lvl for lvl in last_by_level if lvl > node.indent_level]:
            del last_by_level[level]

        parent = None
        for level in range(node.indent_level - 1, -1, -1):
            if level in last_by_level:
                parent = last_by_level[level]
                break

        if parent is None:
            roots.append(node)
        else:
            node.parent_line = parent.line
            parent.children.append(node)

    return TaskTree(roots=roots, nodes=nodes)
