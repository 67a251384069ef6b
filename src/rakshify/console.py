"""Rich console utilities for styled terminal output.

This module provides the consistent interface used for all progress,
warning and error output of a rakshify run. Worker threads share the
single console instance below.
"""

from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table
from rich.theme import Theme

_THEME = Theme(
    {
        "info": "cyan",
        "success": "green",
        "warning": "yellow",
        "error": "red bold",
        "highlight": "cyan bold",
        "muted": "dim",
    }
)

UNSUPPORTED_KIND_MSG = "Skipping the {file}: unsupported object type"

# Shared console instance
console = Console(theme=_THEME, highlight=False)


def info(message: str) -> None:
    console.print(f"[info]ℹ[/info] {message}")


def success(message: str) -> None:
    console.print(f"[success]✓[/success] {message}")


def warning(message: str) -> None:
    console.print(f"[warning]⚠[/warning] {message}")


def error(message: str) -> None:
    console.print(f"[error]✗[/error] {message}")


def action(message: str) -> None:
    """Print an action/progress message, e.g. the start of a file."""
    console.print(f"[info]→[/info] {message}")


def step(message: str) -> None:
    console.print(f"[muted]•[/muted] {message}")


def highlight(text: str | Path) -> str:
    """Wrap text (or a path) in highlight markup."""
    return f"[highlight]{text}[/highlight]"


def unsupported(file: str | Path, detail: str | None = None) -> None:
    """Warn that a manifest (or one of its documents) is being skipped.

    Args:
        file: The manifest file being skipped.
        detail: Optional reason appended in parentheses.

    """
    message = UNSUPPORTED_KIND_MSG.format(file=file)
    if detail:
        message = f"{message} ({detail})"
    warning(message)


def create_task_progress() -> Progress:
    """Create the progress bar advanced once per finished manifest file.

    Returns:
        A Progress bound to the shared console, so messages printed by
        workers appear above the bar.

    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TextColumn("[muted]{task.completed}/{task.total}[/muted]"),
        console=console,
        transient=True,
    )


def summary_panel(title: str, items: dict[str, str], *, failed: bool = False) -> None:
    """Print a panel of label/value rows, bordered red when ``failed``."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold")
    table.add_column(style="cyan")

    for label, value in items.items():
        table.add_row(f"{label}:", value)

    console.print(Panel(table, title=f"[bold]{title}[/bold]", border_style="red" if failed else "green"))


def newline() -> None:
    console.print()
