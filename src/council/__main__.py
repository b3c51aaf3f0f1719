"""Entry point for ``python -m council``."""
from .cli import app

app(prog_name="council")
