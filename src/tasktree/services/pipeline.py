"""Reactive update pipeline and per-document tree cache.

The pipeline keeps task trees, document text and progress annotations in
step. Every run rebuilds the whole tree from the current text, validates
parent checkboxes, rebuilds again if validation rewrote anything, then
redraws annotations.

Entry points:
    attach(document)        seed the cache and draw initial annotations
    notify_edit(document)   debounced; coalesces bursts of edits
    leave_insert(document)  full run once typing stops
    toggle(document, ...)   fresh rebuild, staged toggle, commit, full run
    detach(document)        cancel pending runs and evict the cache entry
"""

from dataclasses import dataclass
from typing import Callable, Optional

from tasktree.models.config import Config
from tasktree.outline.classifier import has_checkbox_tokens
from tasktree.outline.progress import calculate_progress, format_progress
from tasktree.outline.tree import TaskTree, build_tree
from tasktree.services.debounce import Debouncer
from tasktree.services.document import AnnotationRenderer, Document, Notifier
from tasktree.services.toggle import ConfirmAncestors, ToggleOperation, ToggleResult
from tasktree.services.validator import apply_validation
from tasktree.utils.logging import get_logger


logger = get_logger(__name__)

ConfigProvider = Callable[[], Config]


@dataclass(frozen=True)
class CacheEntry:
    """Most recent complete tree build for one document."""

    tree: TaskTree


class TaskPipeline:
    """Owns the per-document cache and drives rebuild/validate/render.

    The cache maps document id to the last complete build. Entries are
    created on the first run for a document, replaced wholesale by every
    rebuild and evicted on detach or when the document has no checkboxes.

    Args:
        renderer: Annotation surface for progress text
        notifier: Channel for user-visible diagnostics
        config_provider: Called at every render and debounce to read the
            current configuration
        debouncer: Scheduler for deferred edit runs
    """

    def __init__(
        self,
        renderer: AnnotationRenderer,
        notifier: Notifier,
        config_provider: Optional[ConfigProvider] = None,
        debouncer: Optional[Debouncer] = None,
    ):
        self.renderer = renderer
        self.notifier = notifier
        self.config_provider = config_provider or Config
        self.debouncer = debouncer or Debouncer()
        self._cache: dict[str, CacheEntry] = {}

    # Cache

    def cached(self, doc_id: str) -> Optional[CacheEntry]:
        return self._cache.get(doc_id)

    def rebuild(self, document: Document) -> TaskTree:
        """Build a tree from the document's current text and cache it.

        The tree is fully built before the cache entry is replaced.
        """
        tree = build_tree(document.lines())
        self._cache[document.doc_id] = CacheEntry(tree=tree)
        logger.debug("tree_built", doc_id=document.doc_id, nodes=len(tree), roots=len(tree.roots))
        return tree

    def _drop(self, doc_id: str) -> None:
        self._cache.pop(doc_id, None)

    # Lifecycle

    def attach(self, document: Document) -> None:
        logger.info("document_attached", doc_id=document.doc_id)
        self.run(document)

    def detach(self, document: Document) -> None:
        self.debouncer.cancel(document.doc_id)
        self._drop(document.doc_id)
        self.renderer.clear(document.doc_id)
        logger.info("document_detached", doc_id=document.doc_id)

    def notify_edit(self, document: Document) -> None:
        """Schedule a deferred run, superseding any pending one for the document."""
        delay = self.config_provider().editor.debounce_ms / 1000
        self.debouncer.schedule(document.doc_id, delay, lambda: self._run_deferred(document))

    def _run_deferred(self, document: Document) -> None:
        if not document.is_valid:
            logger.debug("debounced_run_skipped", doc_id=document.doc_id)
            return
        self.handle_edit(document)

    def handle_edit(self, document: Document) -> None:
        """Process an edit immediately.

        While the user is typing only the tree and annotations are
        refreshed; checkbox correction waits until insert mode ends.
        """
        if not document.is_valid:
            return

        if document.insert_mode and has_checkbox_tokens("\n".join(document.lines())):
            self.rebuild(document)
            self.render(document.doc_id)
            return

        self.run(document)

    def leave_insert(self, document: Document) -> None:
        self.run(document)

    # Pipeline

    def run(self, document: Document) -> None:
        """Full pipeline: rebuild, validate, rebuild if changed, render."""
        if not document.is_valid:
            return

        if not has_checkbox_tokens("\n".join(document.lines())):
            self._drop(document.doc_id)
            self.render(document.doc_id)
            return

        tree = self.rebuild(document)
        if apply_validation(document, tree):
            self.rebuild(document)
        self.render(document.doc_id)

    def render(self, doc_id: str) -> None:
        """Redraw progress annotations for every incomplete parent task."""
        self.renderer.clear(doc_id)

        gtd = self.config_provider().gtd
        entry = self._cache.get(doc_id)
        if not gtd.show_progress or entry is None:
            return

        memo: dict[int, tuple[float, bool]] = {}
        drawn = 0
        for node in entry.tree.tasks():
            progress, has_task_children = calculate_progress(node, memo)
            if has_task_children and progress < 1.0:
                self.renderer.draw_eol(doc_id, node.line, format_progress(progress), gtd.progress_highlight_group)
                drawn += 1
        logger.debug("progress_rendered", doc_id=doc_id, annotations=drawn)

    # Toggle

    def ancestor_candidates(self, document: Document, line: int) -> int:
        """Number of plain-item ancestors a single-line toggle would offer to convert."""
        tree = self.rebuild(document)
        node = tree.get(line)
        if node is None or node.is_task:
            return 0
        return len(ToggleOperation(tree, self.notifier).non_task_ancestors(node))

    def toggle(
        self,
        document: Document,
        start: Optional[int] = None,
        end: Optional[int] = None,
        confirm: Optional[ConfirmAncestors] = None,
    ) -> ToggleResult:
        """Toggle the task(s) at a line or line range.

        Without explicit lines the document's selection is used as a batch,
        or the cursor line when nothing is selected.

        Args:
            document: Target document
            start: First (or only) target line
            end: Last line of a batch range
            confirm: Ancestor conversion prompt for single-line conversions

        Returns:
            ToggleResult describing what was committed
        """
        if not document.is_valid:
            return ToggleResult()

        if start is None:
            selection = document.selection
            if selection is not None:
                start, end = selection
            else:
                start = document.cursor_line

        # Operate on current text, not on a cache the debounce has yet to refresh
        tree = self.rebuild(document)

        result = ToggleOperation(tree, self.notifier, confirm).run(start, end)
        if result.applied:
            document.replace_lines(result.changes)
            logger.info("toggle_applied", doc_id=document.doc_id, lines=sorted(result.changes))
            self.run(document)
        return result
