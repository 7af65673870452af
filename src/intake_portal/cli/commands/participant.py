"""Participant commands: upload pre-check, local validation and submission."""

from __future__ import annotations

from pathlib import Path
from typing import List

import typer
from rich.markup import escape

from intake_portal.api import PortalClient
from intake_portal.cli.helpers import (
    console,
    print_json,
    read_selection,
    render_outcome,
    render_session,
    run_or_exit,
    session_payload,
)
from intake_portal.config import PortalConfig
from intake_portal.intake import (
    CorruptArchive,
    IncompleteSubmission,
    IntakeSession,
    SessionState,
    UploadFailed,
)
from intake_portal.intake import status

CONTACT_HINT = "If you want to delete or re-upload, please contact the portal admin."

FilesArgument = typer.Argument(
    ...,
    exists=True,
    dir_okay=False,
    readable=True,
    help="JSON files and/or a ZIP export containing them",
)


def check_command(
    email: str = typer.Argument(..., help="Participant email address"),
    as_json: bool = typer.Option(False, "--json", help="Render upload status as JSON"),
) -> None:
    """Show whether a participant has already uploaded their files."""

    def _run() -> None:
        config = PortalConfig()
        with PortalClient(config=config) as client:
            upload_status = client.check_upload(email)

        if as_json:
            print_json({"email": email, **upload_status.model_dump()})
            return

        if upload_status.uploaded:
            console.print(
                status.already_uploaded_message(
                    upload_status.last_uploaded_date, config.get_display_timezone()
                )
            )
        else:
            console.print(f"No upload recorded for {escape(email)}")

    run_or_exit(_run)


def validate_command(
    files: List[Path] = FilesArgument,
    show_all_extras: bool = typer.Option(False, "--all-extras", help="List every unexpected file"),
    as_json: bool = typer.Option(False, "--json", help="Render validation result as JSON"),
) -> None:
    """Check a selection against the required files without uploading anything."""

    def _run() -> None:
        session = IntakeSession("local", PortalConfig().load_manifest())
        try:
            outcome = session.offer_selection(read_selection(files))
        except CorruptArchive:
            console.print(f"[red]{status.CORRUPT_ARCHIVE_MESSAGE}[/red]")
            raise typer.Exit(1)

        if as_json:
            print_json(session_payload(session, outcome))
        else:
            render_session(session, show_all_extras=show_all_extras)
            render_outcome(outcome)

        if not session.ready_to_submit:
            raise typer.Exit(1)

    run_or_exit(_run)


def submit_command(
    files: List[Path] = FilesArgument,
    email: str = typer.Option(..., "--email", "-e", help="Participant email address"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Submit without asking for confirmation"),
    show_all_extras: bool = typer.Option(False, "--all-extras", help="List every unexpected file"),
) -> None:
    """Stage the selected files and upload them once every required file is present."""

    def _run() -> None:
        config = PortalConfig()
        manifest = config.load_manifest()

        with PortalClient(config=config) as client:
            session = IntakeSession.start(email, client, manifest)
            if session.state is SessionState.SUBMITTED:
                console.print(
                    status.already_uploaded_message(
                        session.last_uploaded_date, config.get_display_timezone()
                    )
                )
                console.print(f"[dim]{CONTACT_HINT}[/dim]")
                return

            try:
                outcome = session.offer_selection(read_selection(files))
            except CorruptArchive:
                console.print(f"[red]{status.CORRUPT_ARCHIVE_MESSAGE}[/red]")
                raise typer.Exit(1)

            render_session(session, show_all_extras=show_all_extras)
            render_outcome(outcome)

            if session.ready_to_submit and not yes:
                if not typer.confirm(f"Submit {len(session.accepted)} files for {email}?"):
                    console.print("Submission cancelled")
                    raise typer.Exit(1)

            try:
                if session.ready_to_submit:
                    console.print(status.UPLOADING_MESSAGE)
                session.submit(client)
            except IncompleteSubmission as exc:
                console.print(f"[red]{status.incomplete_submission_message(exc)}[/red]")
                raise typer.Exit(1)
            except UploadFailed:
                console.print(f"[red]{status.UPLOAD_FAILED_MESSAGE}[/red]")
                raise typer.Exit(1)

        console.print(f"[green]{status.UPLOAD_SUCCESS_MESSAGE}[/green]")

    run_or_exit(_run)
