"""Main CLI entry point for session-sync."""

import sys
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .core.app import SyncApp, create_app
from .core.exceptions import SessionSyncError, TimeFormatError
from .core.logger import setup_logging
from .core.models import DEFAULT_TIME
from .core.settings import reload_settings
from .core.sheet_export import build_whatsapp_summary, format_clipboard_times
from .core.time_format import format_time, normalize_time
from .utils.error_handler import ErrorSeverity

app = typer.Typer(
    name="session-sync",
    help="Record video session timings and sync them to Google Sheets",
    no_args_is_help=True,
)
candidates_app = typer.Typer(help="Manage export candidates (sheet name to row range)")
app.add_typer(candidates_app, name="candidates")

console = Console()

SEVERITY_STYLES = {
    ErrorSeverity.INFO: "cyan",
    ErrorSeverity.SUCCESS: "green",
    ErrorSeverity.WARNING: "yellow",
    ErrorSeverity.ERROR: "red",
}


class SessionField(str, Enum):
    session_id = "session-id"
    high_impedance = "high-impedance"
    low_impedance = "low-impedance"


class VideoField(str, Enum):
    start_time = "start"
    end_time = "end"
    notes = "notes"


class Mark(str, Enum):
    start_time = "start"
    end_time = "end"


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file (default: config/session_sync.yaml)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
):
    """Session Sync: session timer with Google Sheets export."""
    ctx.ensure_object(dict)
    ctx.obj["config"] = config or Path("config/session_sync.yaml")
    ctx.obj["verbose"] = verbose


def _get_app(ctx: typer.Context) -> SyncApp:
    if "app" not in ctx.obj:
        try:
            settings = reload_settings(ctx.obj["config"])
        except (SessionSyncError, ValueError) as e:
            # pydantic's ValidationError is a ValueError
            console.print(f"[red]Configuration error:[/red] {e}")
            raise typer.Exit(2)
        setup_logging(
            settings.log_dir,
            "DEBUG" if ctx.obj["verbose"] else settings.log_level,
            settings.log_format,
        )
        ctx.obj["app"] = create_app(settings)
    return ctx.obj["app"]


def _print_notifications(sync_app: SyncApp) -> None:
    for notification in sync_app.notifications.drain():
        style = SEVERITY_STYLES[notification.severity]
        title = f"{notification.title}: " if notification.title else ""
        console.print(f"[{style}]{escape(title + notification.message)}[/{style}]")


def _session_index(sync_app: SyncApp, session: Optional[int]) -> int:
    if session is None:
        return sync_app.store.current_index
    if not 1 <= session <= sync_app.store.session_count:
        console.print(f"[red]Session must be between 1 and {sync_app.store.session_count}[/red]")
        raise typer.Exit(1)
    return session - 1


def _video_index(sync_app: SyncApp, video: int) -> int:
    if not 1 <= video <= sync_app.store.videos_per_session:
        console.print(f"[red]Video must be between 1 and {sync_app.store.videos_per_session}[/red]")
        raise typer.Exit(1)
    return video - 1


def _render_session(sync_app: SyncApp) -> None:
    store = sync_app.store
    session = store.current_session

    header = f"[bold]Session {store.current_index + 1} of {store.session_count}[/bold]"
    if session.session_id:
        header += f"  ID: {session.session_id}"
    header += f"\nImpedance: H {session.high_impedance or '-'}K / L {session.low_impedance or '-'}K"
    candidate = sync_app.registry.selected
    if candidate:
        header += f"\nCandidate: {candidate}"
    console.print(Panel.fit(header, border_style="cyan"))

    table = Table()
    table.add_column("Video", justify="right", style="cyan")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Last updated", style="dim")
    table.add_column("Notes")

    for number, video in enumerate(session.videos, start=1):
        table.add_row(
            str(number),
            video.start_time if video.start_time != DEFAULT_TIME else "-",
            video.end_time if video.end_time != DEFAULT_TIME else "-",
            video.last_updated or "",
            video.notes,
        )
    console.print(table)


@app.command()
def version():
    """Show version information."""
    from . import __version__
    console.print(f"[bold cyan]session-sync[/bold cyan] version [green]{__version__}[/green]")


@app.command()
def show(ctx: typer.Context):
    """Show the current session."""
    _render_session(_get_app(ctx))


@app.command("set-session")
def set_session(
    ctx: typer.Context,
    field: SessionField = typer.Argument(..., help="Field to set"),
    value: str = typer.Argument(..., help="New value"),
    session: Optional[int] = typer.Option(None, "--session", "-s", help="Session number (default: current)"),
):
    """Set a session's ID or impedance readings."""
    sync_app = _get_app(ctx)
    index = _session_index(sync_app, session)
    sync_app.store.update_session_field(index, field.name, value)
    console.print(f"[green]✓[/green] Session {index + 1} {field.value} set to {value!r}")


@app.command("set-video")
def set_video(
    ctx: typer.Context,
    video: int = typer.Argument(..., help="Video number"),
    field: VideoField = typer.Argument(..., help="Field to set"),
    value: str = typer.Argument(..., help="HH:MM:SS for times, free text for notes"),
    session: Optional[int] = typer.Option(None, "--session", "-s", help="Session number (default: current)"),
):
    """Set a video's start time, end time or notes."""
    sync_app = _get_app(ctx)
    index = _session_index(sync_app, session)
    video_index = _video_index(sync_app, video)

    if field is not VideoField.notes:
        try:
            value = normalize_time(value)
        except TimeFormatError as e:
            console.print(f"[red]{e.message}[/red]")
            raise typer.Exit(1)

    sync_app.store.update_video_field(index, video_index, field.name, value)
    console.print(f"[green]✓[/green] Session {index + 1} video {video} {field.value} updated")


@app.command()
def record(
    ctx: typer.Context,
    which: Mark = typer.Argument(..., help="Record the start or end of the video"),
    video: int = typer.Argument(..., help="Video number in the current session"),
):
    """Record the current time for a video in the current session."""
    sync_app = _get_app(ctx)
    video_index = _video_index(sync_app, video)
    recorded = sync_app.store.record_now(video_index, which.name)
    console.print(
        f"[green]✓[/green] Session {sync_app.store.current_index + 1} video {video} "
        f"{which.value}: {format_time(recorded)}"
    )


@app.command()
def clear(
    ctx: typer.Context,
    session: Optional[int] = typer.Option(None, "--session", "-s", help="Session number (default: current)"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    """Reset all video timings of a session."""
    sync_app = _get_app(ctx)
    index = _session_index(sync_app, session)
    if not yes:
        typer.confirm(f"Clear all timings of session {index + 1}?", abort=True)
    sync_app.store.clear_session(index)
    console.print(f"[green]✓[/green] Session {index + 1} cleared")


@app.command("next")
def next_session(ctx: typer.Context):
    """Move to the next session."""
    sync_app = _get_app(ctx)
    sync_app.store.next_session()
    _render_session(sync_app)


@app.command("prev")
def prev_session(ctx: typer.Context):
    """Move to the previous session."""
    sync_app = _get_app(ctx)
    sync_app.store.prev_session()
    _render_session(sync_app)


@app.command()
def summary(ctx: typer.Context):
    """Print a WhatsApp-ready summary of the shift."""
    sync_app = _get_app(ctx)
    try:
        text = build_whatsapp_summary(sync_app.store.sessions, date.today())
    except TimeFormatError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)
    print(text)


@app.command("copy-times")
def copy_times(
    ctx: typer.Context,
    session: Optional[int] = typer.Option(None, "--session", "-s", help="Session number (default: current)"),
):
    """Print a session's start/end times tab-separated, for pasting into a sheet."""
    sync_app = _get_app(ctx)
    index = _session_index(sync_app, session)
    try:
        text = format_clipboard_times(sync_app.store.sessions[index])
    except TimeFormatError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)
    print(text)


@app.command()
def select(ctx: typer.Context, name: str = typer.Argument(..., help="Candidate sheet name")):
    """Choose the candidate exports go to."""
    sync_app = _get_app(ctx)
    if not sync_app.registry.refresh():
        _print_notifications(sync_app)
        raise typer.Exit(1)
    if name not in sync_app.registry.names:
        console.print(f"[yellow]Unknown candidate {name!r}; ask an admin to add it[/yellow]")
        raise typer.Exit(1)
    sync_app.registry.select(name)
    console.print(f"[green]✓[/green] Candidate set to {name}")


@app.command()
def export(
    ctx: typer.Context,
    candidate: Optional[str] = typer.Option(None, "--candidate", help="Candidate sheet name (default: selected)"),
):
    """Export every session to the candidate's block of the sheet."""
    sync_app = _get_app(ctx)
    name = candidate if candidate is not None else sync_app.registry.selected

    if not sync_app.registry.refresh():
        _print_notifications(sync_app)
        raise typer.Exit(1)
    try:
        dispatcher = sync_app.dispatcher
    except SessionSyncError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(2)

    with console.status("Updating sheet..."):
        result = dispatcher.export_to_sheet(name)

    _print_notifications(sync_app)
    if not result.success:
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] Exported to {result.range_name}")


@candidates_app.command("list")
def candidates_list(ctx: typer.Context):
    """List export candidates."""
    sync_app = _get_app(ctx)
    if not sync_app.registry.refresh():
        _print_notifications(sync_app)
        raise typer.Exit(1)

    selected = sync_app.registry.selected
    table = Table(title="Candidates")
    table.add_column("ID", style="dim")
    table.add_column("Sheet name", style="cyan")
    table.add_column("Sheet range", justify="right", style="green")
    for entry in sync_app.registry.candidates:
        marker = " *" if entry.sheet_name == selected else ""
        table.add_row(entry.id, entry.sheet_name + marker, entry.sheet_range)
    console.print(table)


@candidates_app.command("add")
def candidates_add(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Sheet name"),
    sheet_range: str = typer.Argument(..., help="First row of the candidate's block"),
):
    """Add an export candidate."""
    sync_app = _get_app(ctx)
    ok = sync_app.registry.create(name, sheet_range)
    _print_notifications(sync_app)
    if not ok:
        raise typer.Exit(1)


@candidates_app.command("update")
def candidates_update(
    ctx: typer.Context,
    candidate_id: str = typer.Argument(..., help="Candidate ID"),
    name: str = typer.Argument(..., help="Sheet name"),
    sheet_range: str = typer.Argument(..., help="First row of the candidate's block"),
):
    """Update an export candidate."""
    sync_app = _get_app(ctx)
    ok = sync_app.registry.update(candidate_id, name, sheet_range)
    _print_notifications(sync_app)
    if not ok:
        raise typer.Exit(1)


@candidates_app.command("delete")
def candidates_delete(
    ctx: typer.Context,
    candidate_id: str = typer.Argument(..., help="Candidate ID"),
):
    """Delete an export candidate."""
    sync_app = _get_app(ctx)
    ok = sync_app.registry.delete(candidate_id)
    _print_notifications(sync_app)
    if not ok:
        raise typer.Exit(1)


def main_cli():
    """Entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)
    except SessionSyncError as e:
        console.print(f"\n[red]Error:[/red] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main_cli()
