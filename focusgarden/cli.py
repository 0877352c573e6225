"""Focus Garden CLI -- grow a garden one focus session at a time."""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from focusgarden import config as cfg
from focusgarden import display, store
from focusgarden.app import FocusGarden, running_app
from focusgarden.charts import weekly_focus_chart
from focusgarden.models import DeadlineChoice, NotifierKind
from focusgarden.stats import histogram_days

app = typer.Typer(
    name="focusgarden",
    help="A focus timer that grows a garden. Miss a deadline and a flower withers.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _session():
    """Open the store and run one foreground activation around a command."""
    return running_app(
        store.open_store(),
        config=cfg.load_config(),
        notify=display.print_notice,
    )


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


@app.command()
def add(
    text: str = typer.Argument(..., help="What do you need to do?"),
    due: DeadlineChoice = typer.Option(DeadlineChoice.TODAY, "--due", "-d", help="Deadline day"),
) -> None:
    """Add a task due at the end of today or tomorrow."""

    async def _add():
        async with _session() as screen:
            return await screen.reconciler.add_task(text, due)

    task = asyncio.run(_add())
    if task is None:
        display.print_info("Nothing to add.")
        return
    display.print_success(f"Added task {task.id}: {task.text} (due {due.value})")


@app.command(name="list")
def list_tasks() -> None:
    """List your tasks."""

    async def _list():
        async with _session() as screen:
            display.print_task_list(screen.tasks, screen.settings.theme)

    asyncio.run(_list())


@app.command()
def done(task_id: str = typer.Argument(..., help="ID of the task to toggle")) -> None:
    """Mark a task as done (or not done again)."""

    async def _done():
        async with _session() as screen:
            return await screen.reconciler.toggle_completed(task_id)

    task = asyncio.run(_done())
    if task is None:
        display.print_warning(f"Task {task_id} not found.")
        raise typer.Exit(1)
    if task.completed:
        display.print_success(f"Completed: {task.text}")
    else:
        display.print_info(f"Reopened: {task.text}")


@app.command()
def delete(task_id: str = typer.Argument(..., help="ID of the task to delete")) -> None:
    """Delete a task."""

    async def _delete():
        async with _session() as screen:
            return await screen.reconciler.delete_task(task_id)

    if not asyncio.run(_delete()):
        display.print_warning(f"Task {task_id} not found.")
        raise typer.Exit(1)
    display.print_success(f"Deleted task {task_id}.")


# ---------------------------------------------------------------------------
# Garden & timer
# ---------------------------------------------------------------------------


def _show_garden(screen: FocusGarden) -> None:
    display.print_garden(
        screen.garden, screen.timer.display, screen.settings.theme, screen.timer.is_active
    )


@app.command()
def garden() -> None:
    """Show your garden and the focus timer."""

    async def _garden():
        async with _session() as screen:
            _show_garden(screen)

    asyncio.run(_garden())


@app.command()
def focus() -> None:
    """Start (or resume) a 25-minute focus session. Ctrl-C steps away."""

    async def _focus():
        async with _session() as screen:
            timer = screen.timer
            if timer.is_active:
                display.print_info(f"Resuming focus session: {timer.display} left.")
            else:
                screen.start_timer()
                display.print_info("Starting a 25-minute focus session.")
            progress = display.create_timer_progress()
            with progress:
                bar = progress.add_task(
                    "Focus", total=timer.session_seconds, completed=timer.elapsed_seconds
                )
                while timer.is_active:
                    await asyncio.sleep(0.2)
                    progress.update(bar, completed=timer.elapsed_seconds)
            _show_garden(screen)

    try:
        asyncio.run(_focus())
    except KeyboardInterrupt:
        display.print_warning(
            "Stepped away. The session keeps counting; run 'focusgarden focus' to return."
        )


@app.command()
def pause() -> None:
    """Pause a session left running in the background."""

    async def _pause():
        async with _session() as screen:
            if not screen.timer.is_active:
                return None
            screen.pause_timer()
            return screen.timer.display

    left = asyncio.run(_pause())
    if left is None:
        display.print_info("No focus session is running.")
    else:
        display.print_success(f"Paused with {left} left.")


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------


@app.command()
def stats(
    chart: Optional[Path] = typer.Option(None, "--chart", help="Save a PNG chart of the last 7 days"),
    on: Optional[str] = typer.Option(None, "--date", help="Last day of the week shown (YYYY-MM-DD)"),
) -> None:
    """See your focus totals and the last seven days."""
    try:
        reference = date.fromisoformat(on) if on else date.today()
    except ValueError:
        display.print_warning(f"Invalid date '{on}'. Use YYYY-MM-DD.")
        raise typer.Exit(1)

    async def _stats():
        async with _session() as screen:
            summary, histogram = await screen.statistics(reference)
            return summary, histogram, screen.settings.theme

    summary, histogram, theme = asyncio.run(_stats())
    display.print_stats(summary, histogram, histogram_days(reference), theme)
    if chart is not None:
        img = weekly_focus_chart(histogram, reference, theme=theme)
        img.save(chart)
        display.print_success(f"Chart saved to {chart}")


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@app.command()
def theme(name: Optional[str] = typer.Argument(None, help="cute, dark or forest")) -> None:
    """Show or change the theme."""

    async def _theme():
        async with _session() as screen:
            if name:
                await screen.settings.set_theme(name)
            return screen.settings.theme

    try:
        current = asyncio.run(_theme())
    except ValueError:
        display.print_warning(f"Unknown theme '{name}'. Use cute, dark or forest.")
        raise typer.Exit(1)
    display.print_info(f"Theme: {current.value}")


@app.command()
def ringtone(name: Optional[str] = typer.Argument(None, help="ding, chime or harp")) -> None:
    """Show or change the session-complete sound."""

    async def _ringtone():
        async with _session() as screen:
            if name:
                await screen.settings.set_ringtone(name)
            return screen.settings.ringtone

    try:
        current = asyncio.run(_ringtone())
    except ValueError:
        display.print_warning(f"Unknown ringtone '{name}'. Use ding, chime or harp.")
        raise typer.Exit(1)
    display.print_info(f"Ringtone: {current.value}")


@app.command()
def clear(yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation")) -> None:
    """Erase all tasks, garden progress, stats and settings."""
    if not yes:
        go = typer.confirm(
            "This will erase all your tasks, garden progress, and stats. Continue?",
            default=False,
        )
        if not go:
            display.print_info("Nothing was cleared.")
            return

    async def _clear():
        async with _session() as screen:
            return await screen.clear_all_data()

    if not asyncio.run(_clear()):
        raise typer.Exit(1)


@app.command()
def config(
    store_path: Optional[str] = typer.Option(None, "--store-path", help="Set a custom store file path"),
    reset: bool = typer.Option(False, "--reset", help="Reset to the default store path"),
    notifier: Optional[NotifierKind] = typer.Option(None, "--notifier", help="How sounds are played"),
    sound_dir: Optional[str] = typer.Option(None, "--sound-dir", help="Directory of ding/chime/harp .mp3 files"),
    show: bool = typer.Option(False, "--show", help="Show current config"),
) -> None:
    """Configure where data is stored and how sounds are played."""
    if store_path:
        result = cfg.set_store_path(store_path)
        display.print_success(f"Store path set to: {result.store_path}")
    elif reset:
        cfg.reset_store_path()
        display.print_success("Reset to default local store.")
    elif notifier:
        cfg.set_notifier(notifier)
        display.print_success(f"Notifier set to: {notifier.value}")
    elif sound_dir:
        result = cfg.set_sound_dir(sound_dir)
        display.print_success(f"Sound directory set to: {result.sound_dir}")
    elif show:
        current = cfg.load_config()
        resolved = cfg.get_store_path()
        if current.store_path:
            display.print_info(f"Store: {current.store_path}")
        else:
            display.print_info(f"Store: {resolved} (default)")
        display.print_info(f"Notifier: {current.notifier.value}")
    else:
        display.print_info("Use --store-path, --reset, --notifier, --sound-dir, or --show.")
