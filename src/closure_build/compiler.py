"""Compiler boundary.

The pipeline never looks inside the compiler: it hands over a flag list and
gets back the files the compiler produced, or a ``CompilerError``.

``ClosureCompiler`` runs the Closure Compiler as a subprocess. Outputs are
staged in a temporary directory and read back into memory, so nothing
reaches the project's output directories unless the compiler exits
cleanly. Files the compiler writes on its own account through relative
flags (the dependency manifest) land relative to ``cwd``.

Example::

    compiler = ClosureCompiler(["google-closure-compiler"], timeout=300)
    result = compiler.compile(
        ["--entry_point", "goog:app.main", "--js_output_file", "app.main.min.js",
         "--js", "js/main.js"],
        cwd=Path("."),
        source_map=True,
    )
    bundle = result.output("app.main.min.js")
"""

from __future__ import annotations

import json
import shlex
import subprocess
import tempfile
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from closure_build.core.errors import CompilerError
from closure_build.core.logging import get_logger

logger = get_logger(__name__)

OUTPUT_FLAG = "--js_output_file"


@dataclass
class OutputFile:
    """A file produced by the compiler, held in memory."""

    name: str
    content: str
    source_map: dict[str, Any] | None = None

    @property
    def map_name(self) -> str:
        return f"{self.name}.map"


@dataclass
class CompilationResult:
    """What a successful compiler run produced."""

    files: list[OutputFile] = field(default_factory=list)
    stderr: str = ""

    def output(self, name: str) -> OutputFile | None:
        for output in self.files:
            if output.name == name:
                return output
        return None


@runtime_checkable
class Compiler(Protocol):
    """Anything that turns a flag list into output files."""

    def compile(
        self,
        flags: Sequence[str],
        *,
        cwd: Path,
        source_map: bool = False,
    ) -> CompilationResult:
        """Run one compilation. Raises ``CompilerError`` on failure."""
        ...


def flag_value(flags: Sequence[str], flag: str) -> str | None:
    """Return the value that follows the last ``flag`` in ``flags``."""
    value = None
    for index, item in enumerate(flags[:-1]):
        if item == flag:
            value = flags[index + 1]
    return value


def flag_values(flags: Sequence[str], flag: str) -> list[str]:
    """Return every value given for a repeatable flag such as ``--js``."""
    return [flags[i + 1] for i, item in enumerate(flags[:-1]) if item == flag]


class ClosureCompiler:
    """Runs the Closure Compiler command line.

    Args:
        command: argv prefix, e.g. ``["google-closure-compiler"]`` or
            ``["java", "-jar", "closure-compiler.jar"]``
        timeout: Seconds before the compiler is killed (None = no limit)
    """

    def __init__(self, command: Sequence[str] | None = None, timeout: float | None = None):
        self.command = list(command or ["google-closure-compiler"])
        self.timeout = timeout

    def compile(
        self,
        flags: Sequence[str],
        *,
        cwd: Path,
        source_map: bool = False,
    ) -> CompilationResult:
        flags = list(flags)
        output_name = flag_value(flags, OUTPUT_FLAG)

        with tempfile.TemporaryDirectory(prefix="closure-build-") as staging:
            staged_output = None
            if output_name is not None:
                staged_output = Path(staging) / Path(output_name).name
                flags = self._redirect_output(flags, staged_output)
                if source_map:
                    flags += [
                        "--create_source_map", f"{staged_output}.map",
                        "--source_map_format", "V3",
                    ]

            completed = self._run(flags, cwd)

            files = []
            if staged_output is not None and staged_output.exists():
                files.append(
                    OutputFile(
                        name=output_name,
                        content=staged_output.read_text(encoding="utf-8"),
                        source_map=self._read_map(Path(f"{staged_output}.map")),
                    )
                )

        if completed.stderr.strip():
            logger.warning("compiler.diagnostics", output=completed.stderr.strip())
        return CompilationResult(files=files, stderr=completed.stderr)

    def _run(self, flags: list[str], cwd: Path) -> subprocess.CompletedProcess[str]:
        cmd = [*self.command, *flags]
        printable = " ".join(shlex.quote(part) for part in cmd)
        logger.debug("compiler.exec", cmd=printable, cwd=str(cwd))
        try:
            completed = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as exc:
            raise CompilerError(
                f"Compiler not found: {self.command[0]}", cause=exc
            ).with_context(command=printable)
        except subprocess.TimeoutExpired as exc:
            raise CompilerError(
                f"Compiler timed out after {self.timeout}s", cause=exc
            ).with_context(command=printable)

        if completed.returncode != 0:
            raise CompilerError(
                f"Compiler failed (exit {completed.returncode})",
                exit_code=completed.returncode,
                stderr=completed.stderr,
            ).with_context(command=printable)
        return completed

    @staticmethod
    def _redirect_output(flags: list[str], target: Path) -> list[str]:
        redirected = list(flags)
        for index, item in enumerate(redirected[:-1]):
            if item == OUTPUT_FLAG:
                redirected[index + 1] = str(target)
        return redirected

    @staticmethod
    def _read_map(path: Path) -> dict[str, Any] | None:
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))


__all__ = [
    "ClosureCompiler",
    "CompilationResult",
    "Compiler",
    "OutputFile",
    "flag_value",
    "flag_values",
]
