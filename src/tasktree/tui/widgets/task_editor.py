"""TaskEditor widget: the live markdown document being edited."""

from textual.message import Message
from textual.widgets import TextArea


class TaskEditor(TextArea):
    """Multi-line editor for a markdown task list."""

    class InsertLeft(Message):
        """Posted when the editor loses focus."""

    def __init__(self, *args, **kwargs):
        """Initialize TaskEditor."""
        super().__init__("", *args, id="task-editor", **kwargs)
        self.can_focus = True
        self.show_line_numbers = True

    def on_focus(self) -> None:
        """Handle focus event."""
        self.styles.border = ("heavy", "blue")

    def on_blur(self) -> None:
        """Handle blur event."""
        self.styles.border = ("solid", "white")
        self.post_message(self.InsertLeft())
