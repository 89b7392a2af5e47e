"""Entry point for ``python -m movievault``."""

from movievault.cli.typer_app import app

if __name__ == "__main__":
    app()
