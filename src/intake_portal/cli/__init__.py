"""Command-line interface for the intake portal."""

from __future__ import annotations

import typer

from intake_portal.cli.commands import admin, config_cmd, participant
from intake_portal.cli.helpers import configure_logging

app = typer.Typer(
    name="intake-portal",
    help="Stage and submit data-export files to the intake portal, and run its admin console.",
    add_completion=False,
    no_args_is_help=True,
)


@app.callback()
def callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    configure_logging(verbose)


app.command("check")(participant.check_command)
app.command("validate")(participant.validate_command)
app.command("submit")(participant.submit_command)
app.add_typer(admin.app, name="admin")
app.add_typer(config_cmd.app, name="config")

__all__ = ["app"]
