"""Locations used by a closure build.

A ``Locations`` value is built once (usually from ``BuildSettings``) and
handed to every component. Relative entries are relative to ``base_dir``,
which is also the working directory of every compiler invocation.

Two pipelines that share a ``Locations`` share the same manifest and
scratch directory; run them one after the other, or give each its own
``Locations`` (``with_intermediates``) when running them concurrently.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING

from closure_build.core.errors import InvalidGlobError

if TYPE_CHECKING:
    from closure_build.core.settings import BuildSettings


@dataclass(frozen=True)
class Locations:
    """
    The locations a pipeline reads from and writes to.

    Attributes:
        base_dir: Root of the project; compiler working directory
        build_dir: Where bundles and source maps are written
        manifest: File the collector asks the compiler to write
        source_glob: Glob for the application sources
        library_glob: Glob for the Closure Library sources
        scratch_dir: Receives the collector's discarded output
        discard_file: Name of the collector's discarded output
        flag_file: Compiler flag file referenced by the build
    """

    base_dir: Path = Path("./")
    build_dir: Path = Path("./build/")
    manifest: Path = Path("nsfiles.txt")
    source_glob: str = "js/**/*.js"
    library_glob: str = "node_modules/google-closure-library/**/*.js"
    scratch_dir: Path = Path(".tmp/")
    discard_file: str = "notused.js"
    flag_file: Path = Path("options/compile.ini")

    def __post_init__(self):
        for name in ("base_dir", "build_dir", "manifest", "scratch_dir", "flag_file"):
            object.__setattr__(self, name, Path(getattr(self, name)))
        for pattern in (self.source_glob, self.library_glob):
            if Path(pattern).is_absolute():
                raise InvalidGlobError(pattern)

    @classmethod
    def from_settings(cls, settings: BuildSettings) -> Locations:
        return cls(
            base_dir=settings.base_dir,
            build_dir=settings.build_dir,
            manifest=settings.manifest,
            source_glob=settings.source_glob,
            library_glob=settings.library_glob,
            scratch_dir=settings.scratch_dir,
            discard_file=settings.discard_file,
            flag_file=settings.flag_file,
        )

    @property
    def source_globs(self) -> list[str]:
        return [self.source_glob, self.library_glob]

    def resolve(self, path: Path | str) -> Path:
        """Resolve ``path`` against ``base_dir`` unless it is absolute."""
        path = Path(path)
        if path.is_absolute():
            return path
        return self.base_dir / path

    def with_intermediates(self, manifest: Path | str, scratch_dir: Path | str) -> Locations:
        """Copy with a private manifest and scratch directory."""
        return replace(self, manifest=Path(manifest), scratch_dir=Path(scratch_dir))


__all__ = ["Locations"]
