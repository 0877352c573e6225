"""Rich terminal formatting helpers."""

from __future__ import annotations

from datetime import date, datetime

from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TextColumn, TimeRemainingColumn
from rich.table import Table
from rich.text import Text

from focusgarden.models import Notice, PlotState, StatsSummary, Task, ThemeName

console = Console()

_THEME_ACCENT: dict[ThemeName, str] = {
    ThemeName.CUTE: "#ff8a80",
    ThemeName.DARK: "#e67e22",
    ThemeName.FOREST: "#a6ffcb",
}

_PLOT_ICON: dict[PlotState, str] = {
    PlotState.EMPTY: ".",
    PlotState.BLOOMED: "✿",
    PlotState.WITHERED: "❀",
}


def accent(theme: ThemeName) -> str:
    return _THEME_ACCENT[theme]


def print_garden(garden: list[PlotState], timer_text: str, theme: ThemeName, active: bool) -> None:
    """Print the flower grid with the countdown underneath."""
    plots = Text(justify="center")
    for index, plot in enumerate(garden):
        if index == len(garden) // 2:
            plots.append("\n")
        style = accent(theme) if plot == PlotState.BLOOMED else "dim"
        plots.append(f" {_PLOT_ICON[plot]} ", style=style)
    plots.append(f"\n\n{timer_text}", style="bold")
    plots.append("  (running)" if active else "  (paused)", style="dim")
    console.print(Panel(plots, title="Garden", border_style=accent(theme)))


def _due_label(task: Task) -> str:
    return datetime.fromtimestamp(task.deadline / 1000).strftime("%b %d")


def print_task_list(tasks: list[Task], theme: ThemeName, title: str = "Tasks") -> None:
    """Print the task list in a panel."""
    if not tasks:
        console.print(Panel("Add a task to begin your garden!", title=title, border_style="dim"))
        return

    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("status", width=3)
    table.add_column("id")
    table.add_column("text")
    table.add_column("due", style="dim")

    for task in tasks:
        table.add_row(
            "[x]" if task.completed else "[ ]",
            task.id,
            task.text,
            f"Due: {_due_label(task)}",
            style="strike dim" if task.completed else None,
        )

    console.print(Panel(table, title=title, border_style=accent(theme)))


def print_stats(
    summary: StatsSummary,
    histogram: list[int],
    days: list[date],
    theme: ThemeName,
) -> None:
    """Print totals and a small bar per day."""
    lines: list[str] = [
        f"Focus sessions: {summary.total_sessions}",
        f"Minutes focused: {summary.total_time}",
        f"Tasks completed: {summary.tasks_completed}",
        "",
    ]
    for day, count in zip(days, histogram):
        lines.append(f"{day.strftime('%a %d')}  {'#' * count} {count}")
    console.print(Panel("\n".join(lines), title="Stats", border_style=accent(theme)))


def print_notice(notice: Notice) -> None:
    """Print an alert-style message."""
    text = Text(notice.message, justify="center")
    console.print(Panel(text, title=notice.title, border_style="magenta", padding=(1, 4)))


def print_success(message: str) -> None:
    console.print(f"[green]{message}[/green]")


def print_info(message: str) -> None:
    console.print(f"[blue]{message}[/blue]")


def print_warning(message: str) -> None:
    console.print(f"[yellow]{message}[/yellow]")


def create_timer_progress() -> Progress:
    """Create a Rich progress bar for the focus timer."""
    return Progress(
        TextColumn("[bold blue]{task.description}"),
        BarColumn(bar_width=40),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TimeRemainingColumn(),
        console=console,
    )
