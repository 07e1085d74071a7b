"""ProgressPanel widget listing progress annotations beside the editor.

TextArea has no virtual end-of-line text, so annotations drawn for the
document are shown here, one row per annotated line.
"""

from rich.errors import StyleSyntaxError
from rich.style import Style
from rich.text import Text
from textual.widgets import Static

from tasktree.services.document import AnnotationStore

# Editor highlight group names mapped to terminal styles
HIGHLIGHT_STYLES = {
    "Comment": "dim italic",
    "Normal": "",
    "WarningMsg": "yellow",
    "ErrorMsg": "bold red",
    "DiagnosticInfo": "cyan",
    "DiagnosticHint": "green",
}


def highlight_style(group: str) -> str:
    """Resolve a highlight group to a rich style string.

    Unknown groups are tried as rich style definitions, falling back to
    no styling.
    """
    if group in HIGHLIGHT_STYLES:
        return HIGHLIGHT_STYLES[group]
    try:
        Style.parse(group)
    except StyleSyntaxError:
        return ""
    return group


class ProgressPanel(Static):
    """Shows the progress annotations of one document."""

    DEFAULT_CSS = """
    ProgressPanel {
        width: 40;
        height: 1fr;
        border: solid $accent;
        padding: 0 1;
    }
    """

    def __init__(self, store: AnnotationStore, doc_id: str, *args, **kwargs):
        """Initialize ProgressPanel.

        Args:
            store: Annotation store the pipeline renders into
            doc_id: Document whose annotations are shown
        """
        super().__init__("", *args, id="progress-panel", **kwargs)
        self.store = store
        self.doc_id = doc_id

    def on_mount(self) -> None:
        self.refresh_annotations([])

    def refresh_annotations(self, lines: list[str]) -> None:
        """Redraw from the store.

        Args:
            lines: Current document lines, used for a short label per row
        """
        annotations = self.store.annotations(self.doc_id)
        if not annotations:
            self.update("No open parent tasks")
            return

        text = Text()
        for annotation in annotations:
            label = lines[annotation.line - 1].strip() if annotation.line <= len(lines) else ""
            text.append(f"L{annotation.line}", style="bold")
            text.append(annotation.text, style=highlight_style(annotation.highlight))
            text.append(f" {label[:24]}\n")
        self.update(text)
