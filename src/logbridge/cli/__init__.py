"""Command-line tools for inspecting backend selection and plugins."""

from .main import cli_main, main

__all__ = ["main", "cli_main"]
