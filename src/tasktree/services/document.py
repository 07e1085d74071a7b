"""Host interfaces consumed by the task engine.

The engine never talks to an editor directly. It reads and rewrites lines
through a ``Document``, draws progress through an ``AnnotationRenderer`` and
reports user-facing problems through a ``Notifier``. In-memory
implementations of all three are provided for the CLI and for tests; the
Textual editor supplies its own ``Document``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Literal, Mapping, Optional

from tasktree.services.exceptions import DocumentClosedError

Severity = Literal["information", "warning", "error"]

PROGRESS_NAMESPACE = "tasktree_progress"


class Document(ABC):
    """Abstract interface for an open, editable text document."""

    doc_id: str

    @property
    @abstractmethod
    def is_valid(self) -> bool:
        """True while the document is open."""
        pass

    @abstractmethod
    def lines(self) -> list[str]:
        """Return all lines (index 0 is line 1)."""
        pass

    @abstractmethod
    def replace_lines(self, changes: Mapping[int, str]) -> None:
        """Atomically replace lines by 1-based line number.

        Cursor and selection are preserved.

        Args:
            changes: New content keyed by line number
        """
        pass

    @property
    @abstractmethod
    def cursor_line(self) -> int:
        """1-based line of the cursor."""
        pass

    @property
    @abstractmethod
    def selection(self) -> Optional[tuple[int, int]]:
        """Selected 1-based inclusive line range, or None without a selection."""
        pass

    @property
    @abstractmethod
    def insert_mode(self) -> bool:
        """True while the user is actively typing into the document."""
        pass


class TextDocument(Document):
    """In-memory document backed by a list of lines."""

    def __init__(self, doc_id: str, text: str = "", cursor: tuple[int, int] = (1, 0)):
        self.doc_id = doc_id
        self._lines = text.split("\n")
        self._cursor = cursor
        self._selection: Optional[tuple[int, int]] = None
        self._insert_mode = False
        self._closed = False

    @property
    def is_valid(self) -> bool:
        return not self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise DocumentClosedError(self.doc_id)

    def lines(self) -> list[str]:
        self._check_open()
        return list(self._lines)

    @property
    def text(self) -> str:
        self._check_open()
        return "\n".join(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def replace_lines(self, changes: Mapping[int, str]) -> None:
        self._check_open()
        for lnum in changes:
            if not 1 <= lnum <= len(self._lines):
                raise IndexError(f"Line {lnum} out of range for {self.doc_id}")
        for lnum, content in changes.items():
            self._lines[lnum - 1] = content

    def set_text(self, text: str) -> None:
        """Replace the whole document, as a user edit would."""
        self._check_open()
        self._lines = text.split("\n")

    @property
    def cursor(self) -> tuple[int, int]:
        return self._cursor

    @cursor.setter
    def cursor(self, value: tuple[int, int]) -> None:
        self._cursor = value

    @property
    def cursor_line(self) -> int:
        return self._cursor[0]

    @property
    def selection(self) -> Optional[tuple[int, int]]:
        return self._selection

    def select(self, start: int, end: int) -> None:
        """Select an inclusive line range (order of arguments does not matter)."""
        self._selection = (min(start, end), max(start, end))

    def clear_selection(self) -> None:
        self._selection = None

    @property
    def insert_mode(self) -> bool:
        return self._insert_mode

    @insert_mode.setter
    def insert_mode(self, value: bool) -> None:
        self._insert_mode = value

    def close(self) -> None:
        self._closed = True


@dataclass(frozen=True)
class Annotation:
    """Virtual end-of-line text drawn next to a document line."""

    line: int
    text: str
    highlight: str


class AnnotationRenderer(ABC):
    """Scoped, clearable end-of-line annotation surface."""

    namespace: str = PROGRESS_NAMESPACE

    @abstractmethod
    def draw_eol(self, doc_id: str, line: int, text: str, highlight: str) -> None:
        """Draw text at the end of a 1-based line."""
        pass

    @abstractmethod
    def clear(self, doc_id: str) -> None:
        """Remove every annotation in this namespace for a document.

        Clearing a document with no annotations is a no-op.
        """
        pass


class AnnotationStore(AnnotationRenderer):
    """In-memory renderer that keeps annotations for later display."""

    def __init__(self, namespace: str = PROGRESS_NAMESPACE):
        self.namespace = namespace
        self._annotations: dict[str, dict[int, Annotation]] = {}

    def draw_eol(self, doc_id: str, line: int, text: str, highlight: str) -> None:
        self._annotations.setdefault(doc_id, {})[line] = Annotation(line, text, highlight)

    def clear(self, doc_id: str) -> None:
        self._annotations.pop(doc_id, None)

    def annotations(self, doc_id: str) -> list[Annotation]:
        """Annotations for a document sorted by line."""
        drawn = self._annotations.get(doc_id, {})
        return [drawn[line] for line in sorted(drawn)]


class Notifier(ABC):
    """User-visible diagnostic channel."""

    @abstractmethod
    def notify(self, message: str, severity: Severity = "information") -> None:
        pass


class RecordingNotifier(Notifier):
    """Notifier that keeps every message it receives."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, Severity]] = []

    def notify(self, message: str, severity: Severity = "information") -> None:
        self.messages.append((message, severity))
