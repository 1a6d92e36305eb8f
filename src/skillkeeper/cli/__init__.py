"""Command-line interface for Skillkeeper."""

from skillkeeper.cli.main import cli, main

__all__ = ["cli", "main"]
