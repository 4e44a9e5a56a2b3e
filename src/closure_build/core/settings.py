"""Environment-driven settings for closure-build.

``BuildSettings`` holds everything a pipeline needs that is not a namespace:
where the compiler lives, how verbose to be, and the locations of sources,
outputs and the two intermediate artifacts (scratch directory and manifest).

Manifesto:
    Configuration should be explicit, validated, and environment-driven.

    - **Pydantic validation:** Type-checked at startup
    - **Environment-driven:** ``CLOSURE_BUILD_*`` variables and ``.env``
    - **Sensible defaults:** The standard Closure project layout works as-is

Examples:
    >>> from closure_build.core.settings import BuildSettings
    >>> settings = BuildSettings(debug=True, compiler="java -jar compiler.jar")
    >>> settings.compiler_command
    ['java', '-jar', 'compiler.jar']

Tags:
    settings, configuration, pydantic, environment, closure-build

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

import shlex
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from closure_build.core.errors import InvalidGlobError


class BuildSettings(BaseSettings):
    """Settings shared by every pipeline in a process.

    Fields
    ──────
    debug            : Define goog.DEBUG=true and log every build input
    log_level        : Structlog log level
    json_logs        : JSON log output (None = auto-detect from tty)
    compiler         : Compiler command line (split with shlex)
    timeout_seconds  : Per-invocation compiler timeout (None = no limit)
    base_dir ...     : Locations, see ``closure_build.locations.Locations``
    """

    model_config = SettingsConfigDict(
        env_prefix="CLOSURE_BUILD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    debug: bool = False
    log_level: str = "INFO"
    json_logs: bool | None = None

    # ── Compiler ─────────────────────────────────────────────────
    compiler: str = "google-closure-compiler"
    timeout_seconds: float | None = Field(default=None, gt=0)

    # ── Locations ────────────────────────────────────────────────
    base_dir: Path = Path("./")
    build_dir: Path = Path("./build/")
    manifest: Path = Path("nsfiles.txt")
    source_glob: str = "js/**/*.js"
    library_glob: str = "node_modules/google-closure-library/**/*.js"
    scratch_dir: Path = Path(".tmp/")
    discard_file: str = "notused.js"
    flag_file: Path = Path("options/compile.ini")

    @field_validator("source_glob", "library_glob")
    @classmethod
    def validate_relative_glob(cls, v: str) -> str:
        """Globs are matched under base_dir and cannot be absolute."""
        if Path(v).is_absolute():
            raise InvalidGlobError(v)
        return v

    @property
    def compiler_command(self) -> list[str]:
        """The compiler command as an argv prefix."""
        return shlex.split(self.compiler)


__all__ = ["BuildSettings"]
