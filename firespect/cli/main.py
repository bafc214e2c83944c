"""CLI interface for Firespect using Typer."""

import json
from datetime import date, datetime, time, timezone
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.agents.inspection_agent import InspectionAgent
from ..core.clients.service import ClientService
from ..core.compliance.rules import summarize
from ..core.config.loader import load_config
from ..core.models.client import Client
from ..core.models.compliance import AgentResponse
from ..core.models.enums import Industry, ServiceFrequency
from ..core.scheduling.scheduler import Scheduler, SchedulingError
from ..core.storage.object_store import (
    JsonClientRepository,
    JsonJobRepository,
    JsonServiceHistoryRepository,
    ObjectStore,
)
from ..observability.logger import get_logger, setup_logging_from_config

logger = get_logger(__name__)
console = Console()

app = typer.Typer(
    name="firespect",
    help="Fire protection inspection assistant - NFPA 25 checks and technician scheduling",
    add_completion=False,
)

STATUS_STYLES = {
    "pass": "green",
    "fail": "red",
    "warning": "yellow",
    "compliant": "green",
    "non_compliant": "red",
    "requires_attention": "yellow",
}


def _configure() -> dict:
    config = load_config()
    setup_logging_from_config(config)
    return config


def _get_store(config: dict, store_dir: Path | None = None) -> ObjectStore:
    """Get file-based object store from config."""
    base_dir = store_dir or config.get("storage", {}).get("object_store_dir", "data/store")
    return ObjectStore(base_dir)


def _get_clients(config: dict, store_dir: Path | None = None) -> ClientService:
    store = _get_store(config, store_dir)
    return ClientService(JsonClientRepository(store), JsonServiceHistoryRepository(store))


def _get_scheduler(config: dict, store_dir: Path | None = None) -> Scheduler:
    return Scheduler.from_config(
        config,
        repository=JsonJobRepository(_get_store(config, store_dir)),
        clients=_get_clients(config, store_dir),
    )


def _styled(value: str) -> str:
    style = STATUS_STYLES.get(value)
    return f"[{style}]{value}[/{style}]" if style else value


def _print_response(response: AgentResponse) -> None:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Requirement")
    table.add_column("Status", width=8)
    table.add_column("Message")
    table.add_column("Reference", style="dim")
    for check in response.compliance_checks:
        table.add_row(check.requirement, _styled(check.status), check.message, check.nfpa_reference)
    console.print(table)

    counts = summarize(response.compliance_checks)
    console.print(
        f"[dim]{counts['pass']} pass, {counts['fail']} fail, {counts['warning']} warning "
        f"(parsed via {response.parse_source})[/dim]"
    )

    if response.missing_critical_fields:
        console.print("\n[bold]Missing fields:[/bold]")
        for field in response.missing_critical_fields:
            console.print(f"  - {field}")

    if response.follow_up_questions:
        console.print("\n[bold]Follow-up questions:[/bold]")
        for question in response.follow_up_questions:
            console.print(f"  {escape(f'[{question.priority}]')} {escape(question.question)}")

    console.print(f"\n[bold]Overall status:[/bold] {_styled(response.overall_status)}")


@app.command()
def analyze(
    transcript: Annotated[str | None, typer.Argument(help="Transcript text")] = None,
    file: Annotated[
        Path | None,
        typer.Option("--file", "-f", help="Read transcript from file", exists=True, dir_okay=False),
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the raw response as JSON")] = False,
    technician: Annotated[
        str | None, typer.Option("--technician", "-t", help="Save as an inspection by this technician")
    ] = None,
    location: Annotated[str, typer.Option("--location", "-l", help="Inspection location")] = "Unknown Location",
    store_dir: Annotated[Path | None, typer.Option("--store", help="Object store directory")] = None,
):
    """Parse a transcript and run NFPA 25 compliance checks."""
    if file is not None:
        try:
            transcript = file.read_text(encoding="utf-8")
        except (IOError, UnicodeDecodeError) as e:
            console.print(f"[red]! Error reading transcript:[/red] {e}")
            raise typer.Exit(code=1)

    if not transcript:
        console.print("[red]! Error:[/red] provide transcript text or --file")
        raise typer.Exit(code=1)

    config = _configure()
    agent = InspectionAgent.from_config(config)
    response = agent.process_sync(transcript)

    if as_json:
        typer.echo(json.dumps(response.model_dump(mode="json", by_alias=True), indent=2))
    else:
        _print_response(response)

    if technician:
        inspection = agent.build_inspection(response, technician=technician, location=location)
        _get_store(config, store_dir).save_inspection(inspection)
        logger.info("inspection_saved", inspection_id=inspection.id, technician=technician)
        console.print(f"\n[green]Inspection saved:[/green] {inspection.id}")


@app.command()
def schedule(
    description: Annotated[str, typer.Argument(help="Free-text job request")],
    store_dir: Annotated[Path | None, typer.Option("--store", help="Object store directory")] = None,
):
    """Create a job from a spoken or typed request."""
    config = _configure()
    scheduler = _get_scheduler(config, store_dir)

    try:
        job = scheduler.create_from_description(description)
    except SchedulingError as e:
        console.print(f"[red]! Scheduling failed:[/red] {e}")
        raise typer.Exit(code=1)

    table = Table(show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Job ID", job.id)
    table.add_row("Title", job.title)
    table.add_row("Technician", job.technician)
    table.add_row("Start", job.scheduled_date.isoformat())
    table.add_row("Duration", f"{job.estimated_duration:g} h")
    table.add_row("Location", job.location)
    table.add_row("Client", job.client_name or "")
    if job.client_id:
        table.add_row("Client record", job.client_id)
    table.add_row("Priority", str(job.priority))
    console.print(table)


@app.command()
def daily(
    day: Annotated[
        str | None, typer.Option("--date", "-d", help="Day to show (YYYY-MM-DD, default today)")
    ] = None,
    store_dir: Annotated[Path | None, typer.Option("--store", help="Object store directory")] = None,
):
    """Show each technician's jobs for one day."""
    config = _configure()
    scheduler = _get_scheduler(config, store_dir)

    try:
        target = date.fromisoformat(day) if day else scheduler.clock().date()
    except ValueError:
        console.print(f"[red]! Invalid date:[/red] {day}")
        raise typer.Exit(code=1)

    table = Table(show_header=True, header_style="bold magenta", title=f"Schedule for {target}")
    table.add_column("Technician")
    table.add_column("Start")
    table.add_column("Job")
    table.add_column("Status")

    for entry in scheduler.daily_schedule(target):
        if not entry.jobs:
            table.add_row(entry.technician, "-", "[dim]free[/dim]", "")
        for job in entry.jobs:
            table.add_row(entry.technician, job.scheduled_date.strftime("%H:%M"), job.title, str(job.status))

    console.print(table)


@app.command()
def upcoming(
    days: Annotated[int, typer.Option("--days", "-n", help="Look-ahead window in days")] = 7,
    store_dir: Annotated[Path | None, typer.Option("--store", help="Object store directory")] = None,
):
    """List scheduled jobs in the next N days."""
    if days <= 0:
        console.print("[red]! Error:[/red] --days must be greater than 0")
        raise typer.Exit(code=1)

    config = _configure()
    jobs = _get_scheduler(config, store_dir).upcoming(days)

    if not jobs:
        console.print("[yellow]No upcoming jobs[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Start")
    table.add_column("Technician")
    table.add_column("Job")
    table.add_column("Priority")
    for job in jobs:
        table.add_row(
            job.scheduled_date.strftime("%Y-%m-%d %H:%M"),
            job.technician,
            job.title,
            str(job.priority),
        )
    console.print(table)


@app.command()
def pending(
    store_dir: Annotated[Path | None, typer.Option("--store", help="Object store directory")] = None,
):
    """List saved inspections that have not been synced yet."""
    config = _configure()
    inspections = _get_store(config, store_dir).list_pending()

    if not inspections:
        console.print("[green]Nothing pending[/green]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Inspection ID")
    table.add_column("Timestamp")
    table.add_column("Technician")
    table.add_column("Location")
    table.add_column("Risers", justify="right")
    for inspection in inspections:
        table.add_row(
            inspection.id,
            inspection.timestamp.strftime("%Y-%m-%d %H:%M"),
            inspection.technician,
            inspection.location,
            str(len(inspection.risers)),
        )
    console.print(table)


@app.command("client-add")
def client_add(
    name: Annotated[str, typer.Argument(help="Client display name")],
    phone: Annotated[str, typer.Option("--phone", help="Main phone number")] = "",
    address: Annotated[str, typer.Option("--address", help="Site street address")] = "",
    city: Annotated[str, typer.Option("--city", help="Site city")] = "",
    industry: Annotated[Industry, typer.Option("--industry", help="Industry segment")] = Industry.COMMERCIAL,
    frequency: Annotated[
        ServiceFrequency, typer.Option("--frequency", help="Contracted inspection cadence")
    ] = ServiceFrequency.ANNUAL,
    next_inspection: Annotated[
        str | None, typer.Option("--next-inspection", help="Next inspection due (YYYY-MM-DD)")
    ] = None,
    store_dir: Annotated[Path | None, typer.Option("--store", help="Object store directory")] = None,
):
    """Add a client record."""
    try:
        due = date.fromisoformat(next_inspection) if next_inspection else None
    except ValueError:
        console.print(f"[red]! Invalid date:[/red] {next_inspection}")
        raise typer.Exit(code=1)

    config = _configure()
    client = _get_clients(config, store_dir).create(
        Client(
            name=name,
            phone=phone,
            address=address,
            city=city,
            industry=industry,
            service_frequency=frequency,
            next_inspection_date=datetime.combine(due, time(), tzinfo=timezone.utc) if due else None,
        )
    )
    console.print(f"[green]Added client[/green] {escape(client.name)} ({client.id})")


@app.command()
def clients(
    search: Annotated[str | None, typer.Option("--search", "-s", help="Match on name or business name")] = None,
    overdue: Annotated[bool, typer.Option("--overdue", help="Only clients past their inspection date")] = False,
    due: Annotated[int | None, typer.Option("--due", help="Only clients due within N days")] = None,
    store_dir: Annotated[Path | None, typer.Option("--store", help="Object store directory")] = None,
):
    """List client records and when they are next due."""
    config = _configure()
    service = _get_clients(config, store_dir)

    records = service.search(name=search)
    if overdue or due is not None:
        matched = {c.id for c in records}
        ranked = service.overdue_clients() if overdue else service.clients_needing_service(due)
        records = [c for c in ranked if c.id in matched]

    if not records:
        console.print("[yellow]No matching clients[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Client ID")
    table.add_column("Name")
    table.add_column("City")
    table.add_column("Phone")
    table.add_column("Frequency")
    table.add_column("Next inspection")
    for client in records:
        next_date = client.next_inspection_date
        table.add_row(
            client.id,
            escape(client.name),
            client.city,
            client.phone,
            str(client.service_frequency),
            next_date.strftime("%Y-%m-%d") if next_date else "-",
        )
    console.print(table)

    stats = service.stats()
    console.print(
        f"[dim]{stats.active_clients} active of {stats.total_clients}, "
        f"{stats.overdue_services} overdue, {stats.upcoming_services} due this week[/dim]"
    )


if __name__ == "__main__":
    app()
