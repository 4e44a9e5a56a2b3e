"""Allow ``python -m closure_build``."""

from closure_build.cli.app import app

app()
