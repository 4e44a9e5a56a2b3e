"""
closure-build - per-namespace Closure Compiler build pipelines.

For a Closure namespace, a pipeline first asks the compiler which files the
namespace needs (strict dependency mode, written to a manifest) and then
compiles exactly those files into ``<namespace>.min.js`` with a source map.

Example::

    from closure_build import TaskRegistry, TaskRunner, register_closure_build

    registry = TaskRegistry()
    name = register_closure_build(registry, "app.main")
    TaskRunner(registry).run(name).raise_for_status()
"""

__version__ = "0.1.0"

from closure_build.compiler import ClosureCompiler, CompilationResult, Compiler, OutputFile
from closure_build.locations import Locations
from closure_build.manifest import read_manifest
from closure_build.options import build_options, collect_options, render_flags
from closure_build.orchestration import RunResult, RunStatus, TaskRegistry, TaskRunner
from closure_build.pipeline import DEFAULT_TASK_NAME, PipelineAssembler, register_closure_build

__all__ = [
    "ClosureCompiler",
    "CompilationResult",
    "Compiler",
    "DEFAULT_TASK_NAME",
    "Locations",
    "OutputFile",
    "PipelineAssembler",
    "RunResult",
    "RunStatus",
    "TaskRegistry",
    "TaskRunner",
    "build_options",
    "collect_options",
    "read_manifest",
    "register_closure_build",
    "render_flags",
]
