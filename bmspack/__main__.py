"""Allow running the CLI with `python -m bmspack`."""

from bmspack.cli import app

app()
