"""closure-build command line interface."""

from closure_build.cli.app import app

__all__ = ["app"]
