"""Pipeline assembler: one composite build task per namespace.

``PipelineAssembler.register`` registers the four stages of a closure
build with a ``TaskRegistry`` and a series task that runs them in order::

    collect-files-for-<ns>      compiler writes the manifest
    cleanup-<scratch dir>-<n>   discarded output removed
    gcc-build-<ns>              manifest read, bundle + map written
    cleanup-<manifest>-<n>      manifest removed

Each stage starts only after the previous one finished, and the first
failure ends the run, so the build never starts without a fresh manifest
and neither intermediate is removed while a stage still needs it.

Example::

    from closure_build import PipelineAssembler, TaskRegistry, TaskRunner

    registry = TaskRegistry()
    assembler = PipelineAssembler.from_settings(registry, BuildSettings())
    name = assembler.register(None, "app.main")      # -> "closure-build"
    TaskRunner(registry).run(name).raise_for_status()

Tags:
    closure-build, pipeline, closure-compiler, tasks

Doc-Types:
    api-reference
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from closure_build.compiler import ClosureCompiler, Compiler
from closure_build.core.errors import InvalidNamespaceError
from closure_build.core.logging import get_logger
from closure_build.core.settings import BuildSettings
from closure_build.locations import Locations
from closure_build.orchestration.exceptions import DuplicateTaskError
from closure_build.orchestration.registry import TaskFn, TaskRegistry
from closure_build.sourcemap import SourceMapWriter
from closure_build.tasks.build import OptimizedBuilder
from closure_build.tasks.cleanup import CleanupTaskFactory
from closure_build.tasks.collect import DependencyCollector

logger = get_logger(__name__)

DEFAULT_TASK_NAME = "closure-build"


class PipelineAssembler:
    """Registers closure build pipelines with a task registry.

    Args:
        registry: Registry the tasks are registered with
        locations: Locations shared by every pipeline of this assembler
        compiler: Compiler used by the collect and build stages
        debug: Debug builds (``goog.DEBUG=true``, inputs logged)
        source_map_writer: Writer for the bundle and its map
    """

    def __init__(
        self,
        registry: TaskRegistry,
        locations: Locations,
        compiler: Compiler,
        debug: bool = False,
        source_map_writer: SourceMapWriter | None = None,
    ):
        self.registry = registry
        self.locations = locations
        self.collector = DependencyCollector(locations, compiler)
        self.builder = OptimizedBuilder(
            locations, compiler, debug=debug, source_map_writer=source_map_writer
        )
        self.cleanup = CleanupTaskFactory(base_dir=locations.base_dir)
        self._owned: set[str] = set()

    @classmethod
    def from_settings(
        cls,
        registry: TaskRegistry,
        settings: BuildSettings,
        compiler: Compiler | None = None,
    ) -> PipelineAssembler:
        compiler = compiler or ClosureCompiler(
            settings.compiler_command, timeout=settings.timeout_seconds
        )
        return cls(
            registry,
            Locations.from_settings(settings),
            compiler,
            debug=settings.debug,
        )

    def stages(self, namespace: str) -> list[tuple[str, TaskFn]]:
        """The stage tasks of one pipeline, in execution order."""
        return [
            self.collector.make_task(namespace),
            self._cleanup_stage(self.locations.scratch_dir),
            self.builder.make_task(namespace),
            self._cleanup_stage(self.locations.manifest),
        ]

    def _cleanup_stage(self, location: Path) -> tuple[str, TaskFn]:
        # counter values taken by other assemblers on this registry are skipped
        while True:
            name, fn = self.cleanup.make_task(location)
            if name not in self.registry:
                return name, fn

    def register(self, task_name: Any, namespace: Any) -> str:
        """
        Register the build pipeline for ``namespace``.

        Args:
            task_name: Name of the composite task; anything that is not a
                string falls back to ``"closure-build"``
            namespace: Closure namespace to build

        Returns:
            The name the composite task was registered under

        Raises:
            InvalidNamespaceError: ``namespace`` is not a string. Nothing is
                registered.
            DuplicateTaskError: ``task_name`` is already taken, or a stage
                name is held by a task this assembler did not register.
                Nothing is registered.
        """
        if not isinstance(namespace, str):
            raise InvalidNamespaceError(namespace)
        if not isinstance(task_name, str):
            task_name = DEFAULT_TASK_NAME
        if task_name in self.registry:
            raise DuplicateTaskError(task_name)

        stages = self.stages(namespace)
        for name, _ in stages:
            if name in self.registry and name not in self._owned:
                raise DuplicateTaskError(name)

        stage_names = []
        for name, fn in stages:
            # collect/build stages are the same task for the same namespace
            if name not in self.registry:
                self.registry.register(name, fn)
                self._owned.add(name)
            stage_names.append(name)

        self.registry.series(
            task_name, *stage_names, description=f"Closure build of {namespace}"
        )
        logger.info(
            "pipeline.registered",
            task=task_name,
            namespace=namespace,
            stages=stage_names,
        )
        return task_name


def register_closure_build(
    registry: TaskRegistry,
    namespace: Any,
    task_name: Any = None,
    settings: BuildSettings | None = None,
    compiler: Compiler | None = None,
) -> str:
    """Register one pipeline using settings from the environment."""
    assembler = PipelineAssembler.from_settings(
        registry, settings or BuildSettings(), compiler=compiler
    )
    return assembler.register(task_name, namespace)


__all__ = ["DEFAULT_TASK_NAME", "PipelineAssembler", "register_closure_build"]
