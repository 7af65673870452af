"""Configuration commands."""

from __future__ import annotations

import typer
from rich.markup import escape

from intake_portal.cli.helpers import console, print_json, run_or_exit
from intake_portal.config import PortalConfig

app = typer.Typer(name="config", help="Show or change portal client settings.", no_args_is_help=True)


@app.command("show")
def show_command(as_json: bool = typer.Option(False, "--json", help="Render settings as JSON")) -> None:
    """Show the effective configuration."""

    def _run() -> None:
        payload = PortalConfig().as_dict()
        if as_json:
            print_json(payload)
            return
        for key, value in payload.items():
            console.print(f"- {key}: {escape(str(value))}")

    run_or_exit(_run)


@app.command("set-server")
def set_server_command(url: str = typer.Argument(..., help="Backend base URL")) -> None:
    """Persist the backend URL."""

    def _run() -> None:
        config = PortalConfig()
        config.set_server_url(url)
        console.print(f"[green]Server URL set to:[/green] {escape(config.get_server_url())}")

    run_or_exit(_run)
