"""Admin console commands: participant status, stored files and email rounds."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from intake_portal.api import AdminClient, ParticipantPage
from intake_portal.cli.helpers import console, print_json, run_or_exit
from intake_portal.config import PortalConfig
from intake_portal.intake.status import format_upload_date

DEFAULT_ARCHIVE_NAME = "all_user_uploads.zip"

app = typer.Typer(
    name="admin",
    help="Admin console: participants, uploaded files and notification emails.",
    no_args_is_help=True,
)


def _client() -> AdminClient:
    return AdminClient(config=PortalConfig())


def _yes_no(value: bool) -> str:
    return "[green]yes[/green]" if value else "[red]no[/red]"


def _print_participants(result: ParticipantPage, page: int, page_size: int, timezone: str) -> None:
    table = Table(title="Participants", show_header=True)
    table.add_column("#", justify="right")
    table.add_column("Email", style="cyan", overflow="fold")
    table.add_column("Date Uploaded")
    table.add_column("File Status")
    table.add_column("Send Mail 01")
    table.add_column("Send Mail 02")

    offset = (page - 1) * page_size
    for index, participant in enumerate(result.participants, start=1):
        uploaded_on = format_upload_date(participant.date_uploaded, timezone) if participant.date_uploaded else "-"
        table.add_row(
            str(offset + index),
            escape(participant.email),
            uploaded_on,
            _yes_no(participant.file_status),
            _yes_no(participant.send_mail_01),
            _yes_no(participant.send_mail_02),
        )

    console.print(table)
    console.print(f"Page {page} of {max(result.total_pages(page_size), 1)} ({result.total} participants)")


@app.command("participants")
def participants_command(
    page: int = typer.Option(1, "--page", min=1, help="Page number"),
    page_size: int = typer.Option(10, "--page-size", min=1, max=500, help="Rows per page"),
    sort_by_status: bool = typer.Option(False, "--sort-by-status", help="Order by upload status"),
    as_json: bool = typer.Option(False, "--json", help="Render participants as JSON"),
) -> None:
    """List participants with their upload and email status."""

    def _run() -> None:
        config = PortalConfig()
        with AdminClient(config=config) as client:
            result = client.list_participants(page=page, page_size=page_size, sort_by_status=sort_by_status)

        if as_json:
            print_json(result.model_dump())
            return
        if not result.participants:
            console.print("No participants found")
            return
        _print_participants(result, page, page_size, config.get_display_timezone())

    run_or_exit(_run)


@app.command("files")
def files_command(
    email: str = typer.Argument(..., help="Participant email address"),
    as_json: bool = typer.Option(False, "--json", help="Render file list as JSON"),
) -> None:
    """List the files stored for a participant."""

    def _run() -> None:
        with _client() as client:
            result = client.user_files(email)

        if as_json:
            print_json(result.model_dump())
            return
        if not result.uploaded_files:
            console.print(f"No files uploaded for {escape(email)}")
            return
        console.print(f"Files for {escape(email)} ({len(result.uploaded_files)})")
        for name in result.uploaded_files:
            console.print(f"  - {escape(name)}")

    run_or_exit(_run)


@app.command("delete")
def delete_command(
    email: str = typer.Argument(..., help="Participant email address"),
    filename: Optional[str] = typer.Option(None, "--file", help="Delete only this file"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Delete without asking for confirmation"),
) -> None:
    """Delete one stored file, or all files, for a participant."""

    def _run() -> None:
        target = f"{filename} for {email}" if filename else f"all files for {email}"
        if not yes and not typer.confirm(f"Delete {target}? This cannot be undone."):
            console.print("Deletion cancelled")
            raise typer.Exit(1)

        with _client() as client:
            if filename:
                client.delete_user_file(email, filename)
            else:
                client.delete_user_files(email)
        console.print(f"[green]Deleted {escape(target)}[/green]")

    run_or_exit(_run)


@app.command("download-all")
def download_all_command(
    output: Path = typer.Option(
        Path(DEFAULT_ARCHIVE_NAME),
        "--output",
        "-o",
        dir_okay=False,
        help="Where to save the archive",
    ),
) -> None:
    """Download every participant's uploads as one ZIP archive."""

    def _run() -> None:
        with _client() as client:
            data = client.download_all_files()
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(data)
        console.print(f"[green]Download saved to {escape(str(output))}[/green] ({len(data):,} bytes)")

    run_or_exit(_run)


@app.command("send-round")
def send_round_command(
    round_: str = typer.Argument(..., metavar="ROUND", help="Email round to send: 1, 2 or all"),
) -> None:
    """Trigger a batch of notification emails."""

    def _run() -> None:
        with _client() as client:
            result = client.send_round(round_)
        console.print(f"[green]{escape(result.display_message)}[/green]")

    run_or_exit(_run)
