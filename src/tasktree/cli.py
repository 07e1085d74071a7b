"""CLI entry point for tasktree."""

import click
from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from pydantic import ValidationError

from tasktree import __version__
from tasktree.models.config import Config, load_config
from tasktree.outline.progress import calculate_progress
from tasktree.outline.tree import build_tree
from tasktree.services.document import AnnotationStore, Notifier, Severity, TextDocument
from tasktree.services.pipeline import TaskPipeline
from tasktree.services.validator import plan_validation
from tasktree.utils.logging import configure_logging, get_logger


logger = get_logger(__name__)
console = Console()

_SEVERITY_STYLES = {
    "information": "cyan",
    "warning": "yellow",
    "error": "bold red",
}


class ConsoleNotifier(Notifier):
    """Prints diagnostics to the terminal."""

    def __init__(self, output: Console = console):
        self.output = output

    def notify(self, message: str, severity: Severity = "information") -> None:
        self.output.print(f"[{_SEVERITY_STYLES[severity]}]{escape(message)}[/]")


def load_cli_config(config_path: Optional[Path]) -> Config:
    """
    Load configuration for a CLI command.

    Args:
        config_path: Explicit config file, or None for the default location

    Returns:
        Validated Config instance

    Raises:
        click.ClickException: If the config file is missing or invalid
    """
    try:
        if config_path is not None:
            config = Config.load(config_path)
        else:
            config = load_config()
        logger.info("config_loaded", path=str(config_path) if config_path else "default")
        return config
    except FileNotFoundError as e:
        logger.error("config_not_found", path=str(config_path))
        raise click.ClickException(str(e))
    except (ValidationError, ValueError) as e:
        logger.error("config_validation_error", error=str(e))
        raise click.ClickException(f"Configuration validation failed:\n{e}")


def read_document(path: Path) -> TextDocument:
    """Open a markdown file as an in-memory document."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error("document_read_error", path=str(path), error=str(e))
        raise click.ClickException(f"Cannot read {path}: {e}")
    return TextDocument(str(path), text)


def write_document(path: Path, document: TextDocument) -> None:
    path.write_text(document.text, encoding="utf-8")
    logger.info("document_written", path=str(path))


@click.group()
@click.version_option(version=__version__, prog_name="tasktree")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.config/tasktree/config.yaml)",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path]):
    """tasktree: roll-up progress and consistent checkboxes for markdown task lists."""
    configure_logging()
    ctx.obj = {"config_path": config_path}


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--fix", is_flag=True, help="Rewrite inconsistent parent checkboxes in place")
def check(file: Path, fix: bool):
    """
    Show task progress and report inconsistent parent checkboxes.

    Exits with status 1 when parents disagree with their children and
    --fix was not given.

    Examples:
        tasktree check todo.md
        tasktree check --fix todo.md
    """
    logger.info("check_command_started", path=str(file), fix=fix)
    document = read_document(file)
    tree = build_tree(document.lines())

    table = Table(title=escape(str(file)))
    table.add_column("Line", justify="right")
    table.add_column("State")
    table.add_column("Progress", justify="right")
    table.add_column("Task")

    tasks = list(tree.tasks())
    memo: dict[int, tuple[float, bool]] = {}
    for node in tasks:
        progress, has_task_children = calculate_progress(node, memo)
        state = "[green]done[/]" if node.is_done else "open"
        shown = f"{progress * 100:.0f}%" if has_task_children else ""
        table.add_row(str(node.line), state, shown, escape(node.raw_text[node.content_column:]))

    if tasks:
        console.print(table)
    else:
        console.print("No tasks found.")

    changes = plan_validation(tree)
    if not changes:
        return

    for lnum in sorted(changes):
        console.print(f"[yellow]line {lnum}:[/] {escape(changes[lnum].strip())}")

    if fix:
        document.replace_lines(changes)
        write_document(file, document)
        console.print(f"Fixed {len(changes)} line(s).")
    else:
        console.print(f"{len(changes)} parent task(s) disagree with their children. Run with --fix.")
        raise SystemExit(1)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("line", type=click.IntRange(min=1))
@click.option("--end", type=click.IntRange(min=1), default=None, help="Last line of a batch toggle")
@click.option("--with-parents", is_flag=True, help="Also convert plain parent items to tasks")
@click.pass_context
def toggle(ctx: click.Context, file: Path, line: int, end: Optional[int], with_parents: bool):
    """
    Toggle the task on LINE, or every task from LINE to --end.

    Plain list items become tasks; existing tasks flip and cascade
    their new state to all tasks below them.

    Examples:
        tasktree toggle todo.md 3
        tasktree toggle todo.md 3 --end 6
        tasktree toggle todo.md 7 --with-parents
    """
    logger.info("toggle_command_started", path=str(file), line=line, end=end)
    config = load_cli_config(ctx.obj["config_path"])
    document = read_document(file)

    store = AnnotationStore()
    pipeline = TaskPipeline(store, ConsoleNotifier(), config_provider=lambda: config)
    pipeline.attach(document)
    result = pipeline.toggle(document, line, end, confirm=lambda _count: with_parents)

    if result.aborted is not None:
        raise SystemExit(1)

    write_document(file, document)
    for annotation in store.annotations(document.doc_id):
        console.print(f"line {annotation.line}:{escape(annotation.text)}")


@cli.command()
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
def edit(ctx: click.Context, file: Path):
    """
    Open FILE in the interactive task editor.

    Examples:
        tasktree edit todo.md
    """
    from tasktree.tui.app import TaskTreeApp

    config = load_cli_config(ctx.obj["config_path"])
    if not file.exists():
        file.write_text("", encoding="utf-8")
    logger.info("edit_command_started", path=str(file))
    TaskTreeApp(file, config).run()


if __name__ == "__main__":
    cli()
