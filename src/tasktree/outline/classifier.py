"""Line classifier for markdown list items and task checkboxes.

Recognised markers are unordered bullets (``*``, ``-``, ``+``) and ordered
numbers (``1.`` or ``1)``). A marker followed by a ``[ ]`` or ``[x]`` token and
whitespace is a task; a marker followed by whitespace is a plain list item.
Everything else is not a list item.
"""

import re
from dataclasses import dataclass
from typing import Optional

UNCHECKED = "[ ]"
CHECKED = "[x]"

_MARKER = r"(?:[*+-]|\d+[.)])"
_TASK_PREFIX = re.compile(r"^(\s*)" + _MARKER + r"\s*\[( |x)\]\s+")
_LIST_PREFIX = re.compile(r"^(\s*)" + _MARKER + r"\s+")


@dataclass(frozen=True)
class LineInfo:
    """Classification of a single list-item line.

    Attributes:
        is_task: Line carries a checkbox token
        is_done: Checkbox state; None for plain list items
        indent_level: Number of leading whitespace characters
        content_column: Index into the line where item content starts
    """

    is_task: bool
    is_done: Optional[bool]
    indent_level: int
    content_column: int


def classify_line(line: str) -> Optional[LineInfo]:
    """Classify a line as a task, a plain list item, or neither.

    Args:
        line: Line content without trailing newline

    Returns:
        LineInfo for list items, None otherwise

    Examples:
        >>> classify_line("  - [x] done")
        LineInfo(is_task=True, is_done=True, indent_level=2, content_column=8)
        >>> classify_line("1. item")
        LineInfo(is_task=False, is_done=None, indent_level=0, content_column=3)
        >>> classify_line("plain text") is None
        True
    """
    match = _TASK_PREFIX.match(line)
    if match:
        return LineInfo(
            is_task=True,
            is_done=match.group(2) == "x",
            indent_level=len(match.group(1)),
            content_column=match.end(),
        )

    match = _LIST_PREFIX.match(line)
    if match:
        return LineInfo(
            is_task=False,
            is_done=None,
            indent_level=len(match.group(1)),
            content_column=match.end(),
        )

    return None


def has_checkbox_tokens(text: str) -> bool:
    """Check whether text contains any checkbox token at all."""
    return UNCHECKED in text or CHECKED in text


def set_checkbox_state(line: str, is_done: bool) -> str:
    """Rewrite the checkbox token that follows the list marker.

    Checkbox-like text in the item content is never touched. Lines that
    are not tasks, or are already in the requested state, are returned
    unchanged.
    """
    match = _TASK_PREFIX.match(line)
    if match is None:
        return line
    start, end = match.span(2)
    return f"{line[:start]}{'x' if is_done else ' '}{line[end:]}"


def insert_checkbox(line: str, content_column: int, is_done: bool) -> str:
    """Turn a plain list item into a task by inserting a checkbox token.

    Args:
        line: Current line content
        content_column: Where item content starts (after the list marker)
        is_done: Initial state of the new task
    """
    marker = CHECKED if is_done else UNCHECKED
    return f"{line[:content_column]}{marker} {line[content_column:]}"
