"""Optimized build stage.

Compiles exactly the files listed in the manifest. The compiler is told
which files to read instead of being asked to resolve dependencies again
over the whole tree, which keeps its memory use down.
"""

from __future__ import annotations

from functools import partial
from pathlib import Path

from closure_build.compiler import Compiler
from closure_build.core.errors import CompilationError, CompilerError, EmptyOutputError
from closure_build.core.logging import LogContext, get_logger
from closure_build.locations import Locations
from closure_build.manifest import read_manifest
from closure_build.options import build_options, output_name, render_flags
from closure_build.orchestration.registry import TaskFn
from closure_build.sourcemap import SourceMapWriter

logger = get_logger(__name__)


class OptimizedBuilder:
    """Builds ``<namespace>.min.js`` and its source map into the build directory.

    Args:
        locations: Where the manifest is read and the bundle written
        compiler: Compiler to invoke
        debug: Define ``goog.DEBUG=true`` and log every input file
        source_map_writer: Writer for bundle + map (root ``/`` by default)
    """

    def __init__(
        self,
        locations: Locations,
        compiler: Compiler,
        debug: bool = False,
        source_map_writer: SourceMapWriter | None = None,
    ):
        self.locations = locations
        self.compiler = compiler
        self.debug = debug
        self.source_map_writer = source_map_writer or SourceMapWriter(root="/")

    @staticmethod
    def task_name(namespace: str) -> str:
        return f"gcc-build-{namespace}"

    def make_task(self, namespace: str) -> tuple[str, TaskFn]:
        return self.task_name(namespace), partial(self.build, namespace)

    def flags(self, namespace: str, files: list[str]) -> list[str]:
        flags = render_flags(build_options(namespace, self.debug, self.locations))
        for path in files:
            if self.debug:
                logger.info("build.input", path=path)
            flags.extend(["--js", path])
        return flags

    def build(self, namespace: str) -> list[Path]:
        """Compile ``namespace`` from the manifest and return the written files.

        Raises:
            ManifestNotFoundError: No manifest to read.
            EmptyManifestError: The manifest lists no files.
            CompilationError: The compiler failed; nothing is written.
            EmptyOutputError: The compiler succeeded without a bundle.
        """
        locations = self.locations
        with LogContext(namespace=namespace):
            files = read_manifest(locations.resolve(locations.manifest))
            flags = self.flags(namespace, files)

            logger.info("build.start", inputs=len(files), debug=self.debug)
            try:
                result = self.compiler.compile(flags, cwd=locations.base_dir, source_map=True)
            except CompilerError as exc:
                raise CompilationError.from_compiler_error(exc, namespace) from exc

            name = output_name(namespace)
            output = result.output(name)
            if output is None or not output.content.strip():
                raise EmptyOutputError(name).with_context(namespace=namespace)

            written = self.source_map_writer.write(output, locations.resolve(locations.build_dir))
            logger.info("build.completed", files=[str(path) for path in written])
        return written


__all__ = ["OptimizedBuilder"]
