"""Dependency collection stage.

Runs the compiler in strict dependency mode over every candidate source
file and lets it write a manifest of the files the entry point actually
needs. The compiled output itself is discarded into the scratch directory.
"""

from __future__ import annotations

from functools import partial
from pathlib import Path

from closure_build.compiler import Compiler
from closure_build.core.errors import CompilerError, DependencyResolutionError, NoSourcesError
from closure_build.core.logging import LogContext, get_logger
from closure_build.locations import Locations
from closure_build.options import collect_options, render_flags
from closure_build.orchestration.registry import TaskFn

logger = get_logger(__name__)


def find_sources(base_dir: Path, patterns: list[str]) -> list[str]:
    """Files under ``base_dir`` matching any of ``patterns``.

    Paths are POSIX and relative to ``base_dir``, sorted per pattern and
    listed once even when several patterns match them.
    """
    seen: dict[str, None] = {}
    for pattern in patterns:
        for path in sorted(base_dir.glob(pattern)):
            if path.is_file():
                seen.setdefault(path.relative_to(base_dir).as_posix(), None)
    return list(seen)


class DependencyCollector:
    """Collects the file list of one namespace into the manifest."""

    def __init__(self, locations: Locations, compiler: Compiler):
        self.locations = locations
        self.compiler = compiler

    @staticmethod
    def task_name(namespace: str) -> str:
        return f"collect-files-for-{namespace}"

    def make_task(self, namespace: str) -> tuple[str, TaskFn]:
        return self.task_name(namespace), partial(self.collect, namespace)

    def flags(self, namespace: str, candidates: list[str]) -> list[str]:
        flags = render_flags(collect_options(namespace, self.locations))
        for path in candidates:
            flags.extend(["--js", path])
        return flags

    def collect(self, namespace: str) -> Path:
        """Write the manifest for ``namespace`` and return its path.

        Raises:
            NoSourcesError: The source globs match nothing.
            DependencyResolutionError: The compiler rejected the entry point
                or its dependency graph.
        """
        locations = self.locations
        manifest = locations.resolve(locations.manifest)

        with LogContext(namespace=namespace):
            # a manifest left by an earlier run must not outlive a failed collection
            manifest.unlink(missing_ok=True)

            candidates = find_sources(locations.base_dir, locations.source_globs)
            if not candidates:
                raise NoSourcesError(locations.source_globs, str(locations.base_dir))

            logger.info("collect.start", candidates=len(candidates))
            try:
                result = self.compiler.compile(
                    self.flags(namespace, candidates),
                    cwd=locations.base_dir,
                )
            except CompilerError as exc:
                raise DependencyResolutionError.from_compiler_error(exc, namespace) from exc

            scratch = locations.resolve(locations.scratch_dir)
            scratch.mkdir(parents=True, exist_ok=True)
            for output in result.files:
                (scratch / Path(output.name).name).write_text(output.content, encoding="utf-8")

            if not manifest.exists():
                logger.warning("collect.no_manifest", manifest=str(manifest))
            logger.info("collect.completed", manifest=str(manifest))
        return manifest


__all__ = ["DependencyCollector", "find_sources"]
