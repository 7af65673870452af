"""CLI command modules for intake-portal."""
