"""Main tasktree TUI application.

Hosts one markdown document in a TaskEditor and wires editor events to
the TaskPipeline:

- text changes are debounced and rebuild the task tree
- typing in the focused editor counts as insert mode; leaving the editor
  (escape or focus change) runs checkbox validation
- ctrl+t toggles the task on the cursor line or every line in the selection
"""

from pathlib import Path
from typing import Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Footer, Header, TextArea
import structlog

from tasktree.models.config import Config
from tasktree.services.document import PROGRESS_NAMESPACE, AnnotationStore, Notifier, Severity
from tasktree.services.pipeline import TaskPipeline
from tasktree.services.toggle import ancestor_prompt
from tasktree.tui.editor_document import EditorDocument
from tasktree.tui.screens import ConfirmScreen
from tasktree.tui.widgets import ProgressPanel, TaskEditor

logger = structlog.get_logger()


class AppNotifier(Notifier):
    """Routes diagnostics to Textual toast notifications."""

    def __init__(self, app: App):
        self.app = app

    def notify(self, message: str, severity: Severity = "information") -> None:
        self.app.notify(message, severity=severity, title="tasktree")


class LiveAnnotationStore(AnnotationStore):
    """AnnotationStore that reports every change to a callback."""

    def __init__(self, on_change, namespace: str = PROGRESS_NAMESPACE):
        super().__init__(namespace)
        self.on_change = on_change

    def draw_eol(self, doc_id: str, line: int, text: str, highlight: str) -> None:
        super().draw_eol(doc_id, line, text, highlight)
        self.on_change()

    def clear(self, doc_id: str) -> None:
        super().clear(doc_id)
        self.on_change()


class TaskTreeApp(App):
    """Single-document task list editor."""

    CSS = """
    Screen {
        background: $surface;
    }

    #task-editor {
        width: 1fr;
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("ctrl+t", "toggle_task", "Toggle task", show=True, priority=True),
        Binding("ctrl+s", "save", "Save", show=True, priority=True),
        Binding("escape", "leave_insert", "Stop editing", show=True),
        Binding("ctrl+q", "quit", "Quit", show=True, priority=True),
    ]

    def __init__(self, path: Path, config: Optional[Config] = None):
        """Initialize the tasktree app.

        Args:
            path: Markdown file to edit
            config: Application configuration (defaults when None)
        """
        super().__init__()
        self.path = path
        self.config = config or Config()
        self.store = LiveAnnotationStore(self._schedule_panel_refresh)
        self.pipeline = TaskPipeline(
            self.store,
            AppNotifier(self),
            config_provider=lambda: self.config,
        )
        self.editor: Optional[TaskEditor] = None
        self.document: Optional[EditorDocument] = None
        self.panel: Optional[ProgressPanel] = None

    def compose(self) -> ComposeResult:
        self.editor = TaskEditor()
        self.panel = ProgressPanel(self.store, str(self.path))
        yield Header()
        with Horizontal():
            yield self.editor
            yield self.panel
        yield Footer()

    def on_mount(self) -> None:
        """Load the file, seed the pipeline and focus the editor."""
        self.title = "tasktree"
        self.sub_title = str(self.path)
        self.document = EditorDocument(self.editor, str(self.path))
        text = self.path.read_text(encoding="utf-8") if self.path.exists() else ""
        self.document.load(text)
        self.pipeline.attach(self.document)
        self.editor.focus()
        logger.info("app_mounted", path=str(self.path), lines=len(self.document.lines()))

    def on_unmount(self) -> None:
        if self.document is not None:
            self.document.close()
            self.pipeline.detach(self.document)

    def _schedule_panel_refresh(self) -> None:
        self.call_after_refresh(self._refresh_panel)

    def _refresh_panel(self) -> None:
        if self.panel is None or self.document is None or not self.document.is_valid:
            return
        self.panel.refresh_annotations(self.document.lines())

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if self.document is None:
            return
        if self.document.is_programmatic_change(event.text_area.text):
            return
        if self.editor.has_focus:
            self.document.insert_active = True
        self.pipeline.notify_edit(self.document)

    def on_task_editor_insert_left(self, event: TaskEditor.InsertLeft) -> None:
        if self.document is None or not self.document.insert_active:
            return
        self.document.insert_active = False
        self.pipeline.leave_insert(self.document)

    def action_leave_insert(self) -> None:
        self.set_focus(None)

    def action_toggle_task(self) -> None:
        """Toggle the task on the cursor line, or every task in the selection."""
        document = self.document
        if document is None:
            return

        if document.selection is not None:
            self.pipeline.toggle(document)
            return

        line = document.cursor_line
        count = self.pipeline.ancestor_candidates(document, line)
        if count == 0:
            self.pipeline.toggle(document, line)
            return

        def on_answer(answer: Optional[bool]) -> None:
            self.pipeline.toggle(document, line, confirm=lambda _count: bool(answer))

        self.push_screen(ConfirmScreen(ancestor_prompt(count)), on_answer)

    def action_save(self) -> None:
        if self.document is None:
            return
        self.path.write_text(self.editor.text, encoding="utf-8")
        logger.info("document_saved", path=str(self.path))
        self.notify(f"Saved {self.path.name}", title="tasktree")
