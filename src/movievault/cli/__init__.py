"""Command line interface."""

from .typer_app import app

__all__ = ["app"]
