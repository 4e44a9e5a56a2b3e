"""
Root Typer application for the closure-build CLI.
"""

from __future__ import annotations

from pathlib import Path

import typer
from typer import Typer

from closure_build.cli.utils import console, load_settings, output_error, output_run
from closure_build.core.errors import BuildError
from closure_build.locations import Locations
from closure_build.options import build_options, collect_options, render_flags
from closure_build.orchestration import TaskRegistry, TaskRunner
from closure_build.pipeline import DEFAULT_TASK_NAME, PipelineAssembler
from closure_build.tasks.cleanup import CleanupTaskFactory

app = Typer(
    name="closure-build",
    help="Minimal, dependency-ordered Closure Compiler builds per namespace.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

BaseDirOption = typer.Option(None, "--base-dir", "-C", help="Project root (default: settings).")
CompilerOption = typer.Option(None, "--compiler", help="Compiler command line.")


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from closure_build import __version__

        typer.echo(f"closure-build {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Build, inspect and clean Closure namespace pipelines."""


# ── Commands ─────────────────────────────────────────────────────────────


@app.command("build")
def build(
    namespaces: list[str] = typer.Argument(..., help="Closure namespaces to build"),
    task_name: str | None = typer.Option(None, "--task-name", "-t", help="Composite task name"),
    debug: bool = typer.Option(False, "--debug", help="goog.DEBUG=true and log every input"),
    base_dir: Path | None = BaseDirOption,
    compiler: str | None = CompilerOption,
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Collect the files each namespace needs, then compile them."""
    settings = load_settings(base_dir=base_dir, compiler=compiler, debug=debug)
    registry = TaskRegistry()
    assembler = PipelineAssembler.from_settings(registry, settings)

    if len(namespaces) == 1:
        names = [assembler.register(task_name, namespaces[0])]
    else:
        prefix = task_name or DEFAULT_TASK_NAME
        names = [assembler.register(f"{prefix}:{ns}", ns) for ns in namespaces]

    for result in TaskRunner(registry).run_many(names):
        output_run(result, as_json=json_out)


@app.command("flags")
def flags(
    namespace: str = typer.Argument(..., help="Closure namespace"),
    collect: bool = typer.Option(False, "--collect", help="Show the collect flags instead"),
    debug: bool = typer.Option(False, "--debug"),
    base_dir: Path | None = BaseDirOption,
) -> None:
    """Print the compiler flags used for a namespace (inputs excluded)."""
    settings = load_settings(base_dir=base_dir, debug=debug)
    locations = Locations.from_settings(settings)
    if collect:
        options = collect_options(namespace, locations)
    else:
        options = build_options(namespace, settings.debug, locations)
    rendered = render_flags(options)
    for index in range(0, len(rendered), 2):
        typer.echo(f"{rendered[index]} {rendered[index + 1]}")


@app.command("plan")
def plan(
    namespace: str = typer.Argument(..., help="Closure namespace"),
    task_name: str | None = typer.Option(None, "--task-name", "-t"),
    base_dir: Path | None = BaseDirOption,
) -> None:
    """Show the stages of a namespace's pipeline without running them."""
    settings = load_settings(base_dir=base_dir)
    registry = TaskRegistry()
    name = PipelineAssembler.from_settings(registry, settings).register(task_name, namespace)
    result = TaskRunner(registry, dry_run=True).run(name)

    console.print(f"[bold]{name}[/bold]")
    for position, execution in enumerate(result.executions, start=1):
        console.print(f"  {position}. [cyan]{execution.task_name}[/cyan]")


@app.command("clean")
def clean(base_dir: Path | None = BaseDirOption) -> None:
    """Remove the scratch directory and manifest left by an aborted run."""
    settings = load_settings(base_dir=base_dir)
    locations = Locations.from_settings(settings)
    cleanup = CleanupTaskFactory(base_dir=locations.base_dir)
    for location in (locations.scratch_dir, locations.manifest):
        try:
            removed = cleanup.clean(location)
        except BuildError as exc:
            output_error(exc)
            raise typer.Exit(code=1) from exc
        state = "removed" if removed else "[dim]absent[/dim]"
        console.print(f"{location.as_posix()}: {state}")
