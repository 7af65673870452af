"""Shared console, error handling and rendering for CLI commands."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Sequence, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from intake_portal.api.errors import PortalApiError
from intake_portal.config import ConfigError
from intake_portal.intake import IntakeError, IntakeSession, OfferedFile, OfferOutcome

console = Console()
err_console = Console(stderr=True)

EXTRAS_PREVIEW_LIMIT = 5

T = TypeVar("T")


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    if not verbose:
        logging.getLogger("httpx").setLevel(logging.ERROR)
        logging.getLogger("httpcore").setLevel(logging.ERROR)


def print_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, sort_keys=True, default=str))


def run_or_exit(fn: Callable[[], T]) -> T:
    try:
        return fn()
    except (IntakeError, PortalApiError, ConfigError, ValueError) as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc


def read_selection(paths: Sequence[Path]) -> list[OfferedFile]:
    """Load the files a participant picked, in the order given."""
    return [OfferedFile.from_path(path) for path in paths]


def status_style(message: str) -> str:
    return "red" if "missing" in message.lower() else "green"


def render_outcome(outcome: OfferOutcome) -> None:
    console.print(escape(outcome.progress_message))
    message = outcome.status_message
    console.print(f"[{status_style(message)}]{escape(message)}[/{status_style(message)}]")


def render_session(session: IntakeSession, *, show_all_extras: bool = False) -> None:
    """Staged files, then missing and unexpected names."""
    if session.accepted:
        table = Table(title="Selected files", show_header=True)
        table.add_column("File", style="cyan")
        table.add_column("Size", justify="right")
        table.add_column("Required", style="green")
        for staged in session.accepted:
            required = "yes" if staged.name in session.manifest else "no"
            table.add_row(escape(staged.name), f"{staged.size_bytes:,} B", required)
        console.print(table)

    if session.missing:
        console.print(f"[red]Missing files ({len(session.missing)})[/red]")
        for name in session.missing:
            console.print(f"  - {escape(name)}")

    if session.extra:
        extras = session.extra if show_all_extras else session.extra[:EXTRAS_PREVIEW_LIMIT]
        console.print(f"[yellow]Extra or unexpected files ({len(session.extra)})[/yellow]")
        for name in extras:
            console.print(f"  - {escape(name)}")
        hidden = len(session.extra) - len(extras)
        if hidden > 0:
            console.print(f"  [dim]... {hidden} more (use --all-extras)[/dim]")


def session_payload(session: IntakeSession, outcome: OfferOutcome | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "participant": session.participant,
        "state": session.state.value,
        "accepted": list(session.accepted_names),
        "missing": list(session.missing),
        "extra": list(session.extra),
        "found_count": session.found_count,
        "required_count": len(session.manifest),
        "ready_to_submit": session.ready_to_submit,
    }
    if outcome is not None:
        payload["progress"] = outcome.progress_message
        payload["status"] = outcome.status_message
    return payload
