"""Intake portal client: stage a participant's data-export files and submit them.

Usage:
    intake-portal validate export.zip
    intake-portal submit --email someone@example.org export.zip
    intake-portal admin participants --page 2
"""

__version__ = "0.3.0"

from intake_portal.cli import app


def main() -> None:
    app()


__all__ = ["app", "main", "__version__"]
