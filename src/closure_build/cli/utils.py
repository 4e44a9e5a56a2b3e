"""
CLI utility helpers: settings loading and output formatting.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from closure_build.core.errors import BuildError
from closure_build.core.logging import configure_logging
from closure_build.core.settings import BuildSettings
from closure_build.orchestration.runner import RunResult

console = Console()
err_console = Console(stderr=True)


def load_settings(
    *,
    base_dir: Path | None = None,
    compiler: str | None = None,
    debug: bool | None = None,
) -> BuildSettings:
    """Settings from the environment, with command line overrides applied."""
    try:
        settings = BuildSettings()
    except BuildError as exc:
        output_error(exc)
        raise typer.Exit(code=1) from exc
    overrides: dict[str, Any] = {}
    if base_dir is not None:
        overrides["base_dir"] = base_dir
    if compiler is not None:
        overrides["compiler"] = compiler
    if debug:
        overrides["debug"] = True
    if overrides:
        settings = settings.model_copy(update=overrides)
    configure_logging(
        level="DEBUG" if settings.debug else settings.log_level,
        json_format=settings.json_logs,
    )
    return settings


def output_run(result: RunResult, *, as_json: bool = False) -> None:
    """Render a ``RunResult`` and exit non-zero if it failed."""
    if as_json:
        console.print_json(json.dumps(result.to_dict(), default=str))
    else:
        table = Table(title=result.task_name, show_lines=False, pad_edge=False)
        table.add_column("stage", overflow="fold")
        table.add_column("status")
        table.add_column("seconds", justify="right")
        for execution in result.executions:
            seconds = execution.duration_seconds
            table.add_row(
                execution.task_name,
                _status_markup(execution.status),
                f"{seconds:.2f}" if seconds is not None else "",
            )
        console.print(table)

    if not result.ok:
        output_error(result.exception, step=result.error_step)
        raise typer.Exit(code=1)


def output_error(error: BaseException | None, *, step: str | None = None) -> None:
    """Print a stage failure to stderr."""
    where = f" in [bold]{step}[/bold]" if step else ""
    if isinstance(error, BuildError):
        err_console.print(
            f"[bold red]Error[/bold red] ({error.category.value}){where}: {error.message}"
        )
        stderr = getattr(error, "stderr", "")
        if stderr:
            err_console.print(stderr.rstrip(), markup=False, highlight=False)
    else:
        err_console.print(f"[bold red]Error[/bold red]{where}: {error}")


def _status_markup(status: str) -> str:
    colour = {"completed": "green", "failed": "red"}.get(status, "dim")
    return f"[{colour}]{status}[/{colour}]"
