"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Optional, Annotated

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..adapters.memory_store import InMemoryAppointmentStore
from ..config import BoardConfig, get_default_config_path
from ..domain.exceptions import SchedulingError
from ..domain.models import Appointment, AppointmentStatus, parse_date, style_for
from ..domain.time_grid import MINUTES_PER_DAY, TimeGrid
from ..domain.view_axis import ViewAxisResolver, ViewMode, WeekStart
from ..services.board import BoardService, BoardView

app = typer.Typer(
    name="salonboard",
    help="Inspect and rearrange the salon scheduling board",
    add_completion=False
)

console = Console()

STATUS_RICH_STYLES = {
    AppointmentStatus.CONFIRMED: "green",
    AppointmentStatus.PENDING: "grey62",
    AppointmentStatus.COMPLETED: "dim strike",
    AppointmentStatus.BLOCKED: "grey70 on grey23",
    AppointmentStatus.CANCELLED: "red",
}


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


def _load_config(config_file: Optional[Path]) -> BoardConfig:
    config_path = config_file or get_default_config_path()
    if config_file is None and not config_path.exists():
        # No config anywhere: run with the reference salon defaults
        return BoardConfig()
    return BoardConfig.load_from_yaml(config_path)


def _load_store(config: BoardConfig, data_file: Optional[Path]) -> InMemoryAppointmentStore:
    source = data_file or config.appointments_file
    if source is None:
        return InMemoryAppointmentStore()
    return InMemoryAppointmentStore.from_json_file(source)


def _build_service(
    config: BoardConfig,
    store: InMemoryAppointmentStore,
    *,
    view: ViewMode,
    date_option: Optional[str],
    resource: Optional[str],
    week_start: Optional[WeekStart],
) -> BoardService:
    """Assemble a board for the requested view."""
    today = pendulum.today(config.timezone).date()
    reference = parse_date(date_option) if date_option else today
    my_resource = config.resolve_resource(resource) if resource else config.my_resource_id

    resolver = ViewAxisResolver(
        mode=view,
        reference_date=reference,
        resources=config.to_resources(),
        my_resource_id=my_resource,
        week_start=week_start or config.week_start,
        today=today,
    )

    return BoardService(
        store=store,
        grid=config.grid.to_time_grid(),
        resolver=resolver,
        row_height_px=config.grid.row_height_px,
        services=config.to_services(),
    )


def _end_text(grid: TimeGrid, appointment: Appointment) -> str:
    if appointment.end_minutes >= MINUTES_PER_DAY:
        return "next day"
    return grid.end_label(appointment.start_slot, appointment.duration_minutes)


def _render_board(board: BoardView, service: BoardService, title: str) -> Table:
    """Render the board as one table row per slot."""
    table = Table(title=title, show_header=True, header_style="bold cyan", show_lines=False)
    table.add_column("Time", style="bold", no_wrap=True)

    for column_view in board.columns:
        header = column_view.column.title
        table.add_column(f"[reverse]{header}[/reverse]" if column_view.is_today else header)

    grid = service.grid
    cells = {slot: [[] for _ in board.columns] for slot in board.slots}

    for index, column_view in enumerate(board.columns):
        for appointment, box in column_view.placed():
            slot = grid.snap(appointment.start_minutes)
            lane = f"{box.sub_column_index + 1}/{box.sub_column_count}"
            end = _end_text(grid, appointment)
            label = escape(appointment.client_name or appointment.service)
            price = f" ${appointment.price:g}" if style_for(appointment.status).shows_price else ""
            overflow = " ↧" if box.overflows_close else ""
            cells[slot][index].append(
                f"[{STATUS_RICH_STYLES[appointment.status]}]"
                f"[{lane}] {label}{price} ({appointment.start_slot}-{end}){overflow}"
                f"[/]"
            )

    for slot in board.slots:
        table.add_row(slot, *("\n".join(entries) for entries in cells[slot]))

    return table


ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
DataOption = Annotated[Optional[Path], typer.Option("--data", help="JSON file with appointments")]
DateOption = Annotated[Optional[str], typer.Option("--date", help="Reference date (YYYY-MM-DD), defaults to today")]
ViewOption = Annotated[ViewMode, typer.Option("--view", help="resource: team view for one day; date: one resource's week")]
ResourceOption = Annotated[Optional[str], typer.Option("--resource", "-r", help="Resource id or name for the week view")]
WeekStartOption = Annotated[Optional[WeekStart], typer.Option("--week-start", help="rolling or a weekday name")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")]


@app.command()
def board(
    config_file: ConfigOption = None,
    data: DataOption = None,
    date: DateOption = None,
    view: ViewOption = ViewMode.DATE,
    resource: ResourceOption = None,
    week_start: WeekStartOption = None,
    verbose: VerboseOption = False,
):
    """
    Show the board with every appointment's lane.

    Examples:

        salonboard board --data appointments.json --date 2024-11-25

        salonboard board --view resource --date 2024-11-25
    """
    _configure_logging(verbose)
    try:
        config = _load_config(config_file)
        store = _load_store(config, data)
        service = _build_service(
            config, store, view=view, date_option=date, resource=resource, week_start=week_start
        )

        board_view = service.render()
        reference = service.resolver.reference_date
        title = (
            f"Team – {reference.format('ddd, MMMM D')}"
            if view is ViewMode.RESOURCE
            else f"Week of {board_view.columns[0].column.date.format('MMMM D, YYYY')}"
        )

        console.print()
        console.print(_render_board(board_view, service, title))
        console.print()

    except (FileNotFoundError, ValueError, SchedulingError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def slots(
    config_file: ConfigOption = None,
    start: Annotated[Optional[str], typer.Option("--from", help="Show block durations available from this slot")] = None,
):
    """
    List the grid's slots and their minute offsets.
    """
    try:
        config = _load_config(config_file)
        grid = config.grid.to_time_grid()

        if start:
            options = grid.block_duration_options(start)
            console.print(f"\n[bold]Block durations from {start}:[/bold] {', '.join(str(o) for o in options)} min\n")
            return

        table = Table(title=f"{len(grid.slots())} slots", show_header=True, header_style="bold cyan")
        table.add_column("#", justify="right")
        table.add_column("Slot", style="bold yellow")
        table.add_column("Minutes", justify="right", style="dim")

        for index, label in enumerate(grid.slots()):
            table.add_row(str(index), label, str(grid.to_minutes(label)))

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError, SchedulingError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def move(
    appointment_id: Annotated[str, typer.Argument(help="Id of the appointment to move")],
    to_slot: Annotated[str, typer.Option("--to-slot", help="Target slot, e.g. '10:30 AM'")],
    to_resource: Annotated[Optional[str], typer.Option("--to-resource", help="Target resource id or name")] = None,
    to_date: Annotated[Optional[str], typer.Option("--to-date", help="Target date (YYYY-MM-DD)")] = None,
    config_file: ConfigOption = None,
    data: DataOption = None,
    verbose: VerboseOption = False,
):
    """
    Reschedule an appointment and show its new column.

    The appointment keeps its duration, status and client; only resource,
    date and start slot change. Nothing is written back to the data file.
    """
    _configure_logging(verbose)
    try:
        config = _load_config(config_file)
        store = _load_store(config, data)
        current = store.get(appointment_id)

        resource_id = config.resolve_resource(to_resource) if to_resource else current.resource_id
        target_date = parse_date(to_date) if to_date else current.date
        if target_date is None:
            target_date = pendulum.today(config.timezone).date()

        service = _build_service(
            config,
            store,
            view=ViewMode.RESOURCE,
            date_option=target_date.to_date_string(),
            resource=None,
            week_start=None,
        )
        moved = service.reschedule(appointment_id, resource_id, target_date, to_slot)

        console.print(
            f"\n[green]✓ {moved.id} moved to {moved.resource_id} on "
            f"{moved.date.to_date_string()} at {moved.start_slot}[/green]"
        )
        console.print(_render_board(service.render(), service, f"Team – {target_date.format('ddd, MMMM D')}"))
        console.print()

    except KeyError as e:
        console.print(f"[bold red]Error:[/bold red] Unknown appointment {e}")
        raise typer.Exit(1)

    except (FileNotFoundError, ValueError, SchedulingError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def overlaps(
    config_file: ConfigOption = None,
    data: DataOption = None,
    date: DateOption = None,
    view: ViewOption = ViewMode.RESOURCE,
    resource: ResourceOption = None,
):
    """
    Report double-booked appointments per column.
    """
    try:
        config = _load_config(config_file)
        store = _load_store(config, data)
        service = _build_service(
            config, store, view=view, date_option=date, resource=resource, week_start=None
        )

        report = service.double_bookings()
        if not report:
            console.print("\n[green]✓ No double bookings.[/green]\n")
            return

        table = Table(title="Double bookings", show_header=True, header_style="bold cyan")
        table.add_column("Column", style="bold yellow")
        table.add_column("Overlapping appointments")

        for title, pairs in report.items():
            table.add_row(title, "\n".join(f"{a} ↔ {b}" for a, b in pairs))

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError, SchedulingError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]salonboard[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
