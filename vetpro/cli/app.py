"""
Main CLI application using Typer.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..adapters.json_records import JsonRecordSource, care_event_to_dict
from ..config import AppConfig, get_default_config_path
from ..domain.dates import calculate_age, format_date_for_display, to_date, to_date_string
from ..domain.exceptions import VetProError
from ..domain.models import CareKind, CareStatus
from ..domain.protocol_resolver import humanize_offset, validate_interval_ordering
from ..services.care_planner import CarePlannerService

app = typer.Typer(
    name="vetpro",
    help="Créneaux de rendez-vous et rappels de soins pour cliniques vétérinaires",
    add_completion=False
)

console = Console()

DEFAULT_RECORDS_PATH = Path("records.json")

STATUS_LABELS = {
    CareStatus.COMPLETED: "[green]Terminé[/green]",
    CareStatus.OVERDUE: "[red]En retard[/red]",
    CareStatus.UPCOMING: "[yellow]Bientôt[/yellow]",
    CareStatus.SCHEDULED: "[cyan]Programmé[/cyan]",
}

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]
RecordsOption = Annotated[
    Path,
    typer.Option("--records", "-r", help="JSON export of appointments and care events"),
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Afficher les journaux détaillés.")] = False,
):
    """
    VetPro care scheduling tools.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    return AppConfig.load_from_yaml(config_path)


def _build_service(config: AppConfig, records: Path) -> CarePlannerService:
    return CarePlannerService(record_source=JsonRecordSource(records), config=config)


def _fail(error: Exception) -> None:
    console.print(f"[bold red]Erreur:[/bold red] {escape(str(error))}")
    raise typer.Exit(1)


def _today(config: AppConfig):
    return pendulum.today(config.timezone).date()


@app.command()
def slots(
    date: Annotated[Optional[str], typer.Option("--date", help="Jour unique (YYYY-MM-DD)")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Date de début (YYYY-MM-DD)")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="Date de fin (YYYY-MM-DD)")] = None,
    only_available: Annotated[bool, typer.Option("--available", help="N'afficher que les créneaux libres.")] = False,
    config_file: ConfigOption = None,
    records: RecordsOption = DEFAULT_RECORDS_PATH,
):
    """
    Show bookable slots for a day or a date range.

    Examples:

        vetpro slots --date 2024-01-15

        vetpro slots --start 2024-01-15 --end 2024-01-21 --available
    """
    try:
        config = _load_config(config_file)

        if date:
            start_date = end_date = to_date(date)
        else:
            start_date = to_date(start) if start else _today(config)
            end_date = to_date(end) if end else start_date.add(days=6)

        if end_date < start_date:
            raise ValueError("La date de fin doit être postérieure à la date de début.")

        service = _build_service(config, records)
        days = asyncio.run(service.find_open_slots(start_date=start_date, end_date=end_date))

        if not days:
            console.print("[yellow]⚠ Aucun jour ouvré dans cette période.[/yellow]")
            return

        for day in days:
            console.print(
                f"\n[bold]{format_date_for_display(day.date)}[/bold] "
                f"({day.available_count} libre(s))"
            )
            table = Table(
                show_header=True,
                header_style="bold cyan"
            )
            table.add_column("Heure", style="bold")
            table.add_column("Statut")

            for slot in day.slots:
                if only_available and not slot.is_available:
                    continue
                if slot.is_lunch_break:
                    status = "[dim]Pause déjeuner[/dim]"
                elif slot.is_available:
                    status = "[green]Libre[/green]"
                else:
                    status = "[red]Réservé[/red]"
                table.add_row(slot.time, status)

            console.print(table)

    except (VetProError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def check(
    date: Annotated[str, typer.Argument(help="Date du rendez-vous (YYYY-MM-DD)")],
    time: Annotated[str, typer.Argument(help="Heure du rendez-vous (HH:MM)")],
    config_file: ConfigOption = None,
    records: RecordsOption = DEFAULT_RECORDS_PATH,
):
    """
    Check whether a single slot can still be booked.
    """
    try:
        config = _load_config(config_file)
        service = _build_service(config, records)

        if asyncio.run(service.check_slot(date=date, time=time)):
            console.print(f"[green]✓ Créneau {date} {time} disponible.[/green]")
        else:
            console.print(f"[red]✗ Créneau {date} {time} indisponible.[/red]")
            raise typer.Exit(2)

    except (VetProError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command("due-dates")
def due_dates(
    protocol_name: Annotated[str, typer.Argument(help="Nom du protocole (vaccin ou antiparasitaire)")],
    species: Annotated[str, typer.Option("--species", "-s", help="Espèce de l'animal")],
    date_given: Annotated[Optional[str], typer.Option("--date-given", help="Date d'administration (YYYY-MM-DD)")] = None,
    config_file: ConfigOption = None,
):
    """
    Propose the due dates implied by a care protocol.
    """
    try:
        config = _load_config(config_file)
        reference = to_date(date_given) if date_given else _today(config)

        service = _build_service(config, DEFAULT_RECORDS_PATH)
        proposals = service.propose_due_dates(
            protocol_name=protocol_name,
            species=species,
            date_given=reference,
        )

        if not proposals:
            console.print("[yellow]Protocole à dose unique : aucun rappel à programmer.[/yellow]")
            return

        table = Table(
            title=f"{protocol_name} ({species}) - administré le {to_date_string(reference)}",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Rappel", style="bold yellow")
        table.add_column("Intervalle")
        table.add_column("Date prévue")

        for proposal in proposals:
            table.add_row(
                proposal.interval.label or "-",
                humanize_offset(proposal.interval.offset_days),
                to_date_string(proposal.due.value),
            )

        console.print(table)

    except (VetProError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def protocols(
    kind: Annotated[Optional[CareKind], typer.Option("--kind", help="vaccination ou antiparasitic")] = None,
    config_file: ConfigOption = None,
):
    """
    List configured care protocols and flag malformed interval lists.
    """
    try:
        config = _load_config(config_file)
        configured = config.get_protocols(kind=kind)

        if not configured:
            console.print("[yellow]Aucun protocole défini dans la configuration.[/yellow]")
            return

        table = Table(
            title="Protocoles configurés",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Nom", style="bold yellow")
        table.add_column("Espèce")
        table.add_column("Type", style="dim")
        table.add_column("Intervalles")
        table.add_column("Actif")

        warnings = []
        for protocol in configured:
            table.add_row(
                protocol.name,
                protocol.species,
                protocol.kind.value,
                ", ".join(humanize_offset(i.offset_days) for i in protocol.intervals) or "-",
                "oui" if protocol.is_active else "non",
            )
            for issue in validate_interval_ordering(protocol.intervals):
                warnings.append(f"{protocol.name} ({protocol.species}): {issue.message}")

        console.print()
        console.print(table)

        for warning in warnings:
            console.print(f"[yellow]⚠ {warning}[/yellow]")
        console.print()

    except (VetProError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def reminders(
    config_file: ConfigOption = None,
    records: RecordsOption = DEFAULT_RECORDS_PATH,
):
    """
    Show vaccination and antiparasitic reminders by status.
    """
    try:
        config = _load_config(config_file)
        service = _build_service(config, records)
        overview = asyncio.run(service.reminder_overview(today=_today(config)))

        if not overview.entries:
            console.print("[yellow]Aucun soin enregistré.[/yellow]")
            return

        table = Table(
            title="Rappels de soins",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("ID", style="dim")
        table.add_column("Produit", style="bold yellow")
        table.add_column("Administré le")
        table.add_column("Prochain rappel")
        table.add_column("Statut")

        for event, status in overview.entries:
            next_due = "-"
            if event.next_due:
                next_due = to_date_string(event.next_due.value)
                if event.next_due.is_manual:
                    next_due += " (manuel)"
            table.add_row(
                event.id,
                event.protocol_name,
                to_date_string(event.date_given),
                next_due,
                STATUS_LABELS[status],
            )

        console.print(table)
        summary = ", ".join(
            f"{STATUS_LABELS[status]}: {count}" for status, count in overview.counts.items()
        )
        console.print(summary)

    except (VetProError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def confirm(
    event_id: Annotated[str, typer.Argument(help="Identifiant du soin à confirmer")],
    date_performed: Annotated[Optional[str], typer.Option("--date", help="Date du rappel effectué (YYYY-MM-DD)")] = None,
    next_due: Annotated[Optional[str], typer.Option("--next-due", help="Date du prochain rappel, saisie manuellement")] = None,
    config_file: ConfigOption = None,
    records: RecordsOption = DEFAULT_RECORDS_PATH,
):
    """
    Confirm a reminder dose and print the resulting records as JSON.
    """
    try:
        config = _load_config(config_file)
        performed = to_date(date_performed) if date_performed else _today(config)

        service = _build_service(config, records)
        parent, reminder = asyncio.run(
            service.confirm_reminder(
                event_id=event_id,
                date_performed=performed,
                new_next_due=next_due,
            )
        )

        console.print_json(json.dumps({
            "original": care_event_to_dict(parent),
            "reminder": care_event_to_dict(reminder),
        }))

    except (VetProError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def age(
    birth_date: Annotated[str, typer.Argument(help="Date de naissance (YYYY-MM-DD)")],
    config_file: ConfigOption = None,
):
    """
    Show an animal's age as displayed in patient records.
    """
    try:
        config = _load_config(config_file)
        console.print(calculate_age(birth_date, today=_today(config)))
    except (VetProError, FileNotFoundError, ValueError) as e:
        _fail(e)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]vetpro[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
