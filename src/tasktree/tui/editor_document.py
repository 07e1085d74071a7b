"""Document adapter over the Textual editor widget."""

from typing import Mapping, Optional

from textual.widgets.text_area import Selection

from tasktree.services.document import Document
from tasktree.services.exceptions import DocumentClosedError
from tasktree.tui.widgets.task_editor import TaskEditor


class EditorDocument(Document):
    """Exposes a TaskEditor's text, cursor and typing state to the pipeline.

    Rewrites made through ``load`` and ``replace_lines`` are counted so that
    the editor's change notifications for them are not mistaken for typing.
    """

    def __init__(self, editor: TaskEditor, doc_id: str):
        self.editor = editor
        self.doc_id = doc_id
        self.insert_active = False
        self._programmatic_text: Optional[str] = None
        self._pending_changes = 0
        self._closed = False

    @property
    def is_valid(self) -> bool:
        return not self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise DocumentClosedError(self.doc_id)

    def lines(self) -> list[str]:
        self._check_open()
        return self.editor.text.split("\n")

    def load(self, text: str) -> None:
        """Load text into the editor without it counting as an edit."""
        self._check_open()
        self.editor.load_text(text)
        self._expect_changes(1)

    def replace_lines(self, changes: Mapping[int, str]) -> None:
        self._check_open()
        saved = self.editor.selection
        for lnum in sorted(changes):
            row = lnum - 1
            old = self.editor.document.get_line(row)
            self.editor.replace(changes[lnum], (row, 0), (row, len(old)))
        self.editor.selection = Selection(self._clamp(saved.start), self._clamp(saved.end))
        self._expect_changes(len(changes))

    def _expect_changes(self, count: int) -> None:
        # Each load or replace posts exactly one Changed message
        self._programmatic_text = self.editor.text
        self._pending_changes += count

    def _clamp(self, location: tuple[int, int]) -> tuple[int, int]:
        row, column = location
        row = min(row, self.editor.document.line_count - 1)
        return row, min(column, len(self.editor.document.get_line(row)))

    def is_programmatic_change(self, text: str) -> bool:
        """Consume one change notification caused by our own rewrites.

        Returns True while rewrite notifications are outstanding and the
        text still matches what the rewrite produced. Once they are used up,
        text equal to the last rewrite (after an undo, say) counts as an edit.
        """
        if self._pending_changes and text == self._programmatic_text:
            self._pending_changes -= 1
            return True
        self._pending_changes = 0
        self._programmatic_text = None
        return False

    @property
    def cursor_line(self) -> int:
        return self.editor.cursor_location[0] + 1

    @property
    def selection(self) -> Optional[tuple[int, int]]:
        selection = self.editor.selection
        if selection.start == selection.end:
            return None
        start, end = sorted((selection.start, selection.end))
        last = end[0]
        # The end is exclusive: a selection ending at column 0 stops on the row above
        if end[1] == 0 and end[0] > start[0]:
            last -= 1
        return start[0] + 1, last + 1

    @property
    def insert_mode(self) -> bool:
        return self.insert_active and self.editor.has_focus

    def close(self) -> None:
        self._closed = True
