"""Command line interface."""

from grammarkit.cli import commands  # noqa: F401  (registers generator commands)
from grammarkit.cli.main import app

__all__ = ["app"]
