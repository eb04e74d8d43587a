"""Developer CLI for the scheduling grid.

Renders the day, week and month layouts of a JSON lesson export so overlap
columns, clipping and snapping can be inspected without a browser.
"""

from datetime import date, datetime
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from coachcal.calendar.callbacks import CalendarCallbacks
from coachcal.calendar.coordinates import GridPoint
from coachcal.calendar.errors import GridConfigError, LessonLoadError
from coachcal.calendar.loader import load_events
from coachcal.calendar.models import EventMove, LessonEvent
from coachcal.calendar.views import MonthRendering, SchedulingGrid, TimeGridRendering, ViewMode
from coachcal.config.settings import GridSettings
from coachcal.core.logger import setup_logger

# Initialize Rich console for output
console = Console()

app = typer.Typer(
    name="coachcal",
    help="coachcal CLI - inspect scheduling grid layouts",
    add_completion=False,
)

DATE_FORMATS = ["%Y-%m-%d"]


@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    setup_logger(level="DEBUG" if debug else "WARNING")


def _load(file: Path) -> list[LessonEvent]:
    try:
        return load_events(file)
    except LessonLoadError as e:
        console.print(Panel(Text("Could not load lessons", style="bold red"), subtitle=str(e), border_style="red"))
        raise typer.Exit(1) from e


def _grid(file: Path, on: datetime | None, tz: str | None, view: ViewMode, **kwargs) -> SchedulingGrid:
    try:
        config = GridSettings(timezone=tz) if tz else GridSettings()
        anchor: date | None = on.date() if on else None
        return SchedulingGrid(_load(file), anchor=anchor, view=view, config=config, **kwargs)
    except GridConfigError as e:
        console.print(Panel(Text("Invalid grid settings", style="bold red"), subtitle=str(e), border_style="red"))
        raise typer.Exit(1) from e


def _print_time_grid(rendering: TimeGridRendering) -> None:
    console.print(Panel(Text(rendering.header, style="bold"), border_style="cyan"))
    for column in rendering.columns:
        title = f"{column.label} {column.date.isoformat()}" + (" (today)" if column.is_today else "")
        table = Table(title=title, show_lines=False)
        table.add_column("Id")
        table.add_column("Title")
        table.add_column("Start")
        table.add_column("End")
        table.add_column("Top px", justify="right")
        table.add_column("Height px", justify="right")
        table.add_column("Column", justify="center")
        table.add_column("Class")
        for ev in column.events:
            tz = column.window.tz
            table.add_row(
                ev.id,
                ev.title + (" ↻" if ev.is_recurring else ""),
                f"{ev.clipped_start.astimezone(tz):%H:%M}",
                f"{ev.clipped_end.astimezone(tz):%H:%M}",
                f"{ev.top_offset_px:.1f}",
                f"{ev.height_px:.1f}",
                f"{ev.column_index + 1}/{ev.column_count}",
                ev.style_class + (" small" if ev.is_small else ""),
            )
        console.print(table)
    if rendering.refresh_seconds:
        console.print(f"[dim]Current-time line refreshes every {rendering.refresh_seconds}s[/dim]")


def _print_month(rendering: MonthRendering) -> None:
    table = Table(title=rendering.header, show_lines=True)
    for label in rendering.weekday_labels:
        table.add_column(label, justify="center")
    for week in range(6):
        row = []
        for cell in rendering.cells[week * 7 : week * 7 + 7]:
            text = f"{cell.date.day}" + (f" [{cell.count}]" if cell.count else "")
            style = "bold cyan" if cell.is_today else ("" if cell.is_current_month else "dim")
            row.append(Text(text, style=style))
        table.add_row(*row)
    console.print(table)


@app.command()
def day(
    file: Path = typer.Argument(..., exists=True, readable=True, help="JSON lesson export"),
    on: datetime = typer.Option(None, "--date", formats=DATE_FORMATS, help="Anchor date (default: today)"),
    tz: str = typer.Option(None, "--tz", help="Display timezone (default: COACHCAL_TIMEZONE)"),
) -> None:
    """Show the day view layout."""
    grid = _grid(file, on, tz, ViewMode.DAY)
    _print_time_grid(grid.render())


@app.command()
def week(
    file: Path = typer.Argument(..., exists=True, readable=True, help="JSON lesson export"),
    on: datetime = typer.Option(None, "--date", formats=DATE_FORMATS, help="Any date in the week"),
    tz: str = typer.Option(None, "--tz", help="Display timezone (default: COACHCAL_TIMEZONE)"),
) -> None:
    """Show the week view layout, one table per day."""
    grid = _grid(file, on, tz, ViewMode.WEEK)
    _print_time_grid(grid.render())


@app.command()
def month(
    file: Path = typer.Argument(..., exists=True, readable=True, help="JSON lesson export"),
    on: datetime = typer.Option(None, "--date", formats=DATE_FORMATS, help="Any date in the month"),
    tz: str = typer.Option(None, "--tz", help="Display timezone (default: COACHCAL_TIMEZONE)"),
) -> None:
    """Show the 6-week month grid with lesson counts."""
    grid = _grid(file, on, tz, ViewMode.MONTH)
    _print_month(grid.render())


@app.command()
def move(
    file: Path = typer.Argument(..., exists=True, readable=True, help="JSON lesson export"),
    event_id: str = typer.Option(..., "--event-id", help="Event to drag"),
    to_y: float = typer.Option(..., "--to-y", help="Grid-relative Y offset of the event's new top edge"),
    on: datetime = typer.Option(None, "--date", formats=DATE_FORMATS, help="Anchor date (default: today)"),
    tz: str = typer.Option(None, "--tz", help="Display timezone (default: COACHCAL_TIMEZONE)"),
) -> None:
    """Simulate a mouse drag of one event and print the resulting move."""
    moves: list[EventMove] = []
    grid = _grid(file, on, tz, ViewMode.DAY, callbacks=CalendarCallbacks(on_move_event=moves.append, on_move_block=moves.append))
    grid.render()

    target = grid.controller.layout.find(event_id)
    if target is None:
        console.print(f"[red]Event {event_id} is not visible on {grid.anchor.isoformat()}[/red]")
        raise typer.Exit(1)

    grab = GridPoint(1.0, target.top_offset_px + 1.0)
    drop = GridPoint(1.0, to_y + 1.0)
    controller = grid.controller
    controller.press(grab, at_ms=0, event_id=event_id)
    controller.move(drop, at_ms=50)
    controller.release(drop, at_ms=100)

    if not moves:
        console.print("[yellow]No move emitted (drag did not pass the movement threshold)[/yellow]")
        raise typer.Exit(1)
    result = moves[-1]
    logger.debug(f"Simulated move of {event_id}")
    console.print(f"{result.id}: {result.new_start.isoformat()} -> {result.new_end.isoformat()}")


@app.command()
def snap(
    offset_px: float = typer.Argument(..., help="Grid-relative Y offset in pixels"),
    on: datetime = typer.Option(None, "--date", formats=DATE_FORMATS, help="Anchor date (default: today)"),
    tz: str = typer.Option(None, "--tz", help="Display timezone (default: COACHCAL_TIMEZONE)"),
) -> None:
    """Print the slot a click at OFFSET_PX would book."""
    config = GridSettings(timezone=tz) if tz else GridSettings()
    slots = []
    grid = SchedulingGrid(
        anchor=on.date() if on else None,
        callbacks=CalendarCallbacks(on_select_slot=slots.append),
        config=config,
    )
    grid.render()
    grid.controller.click(GridPoint(0.0, offset_px), at_ms=0)
    slot = slots[-1]
    console.print(f"{slot.start:%Y-%m-%d %H:%M} -> {slot.end:%H:%M}")


if __name__ == "__main__":
    app()
