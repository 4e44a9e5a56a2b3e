"""
Shared pytest fixtures and configuration for closure-build tests.

This module provides:
- A temporary Closure project tree (sources, library, flag file)
- ``Locations`` rooted at that tree
- ``RecordingCompiler``, an in-process compiler double that records every
  invocation and writes a manifest the way the real compiler does
- The path of the fake compiler executable used by subprocess tests
"""

import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest

# Ensure closure_build package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from closure_build.compiler import CompilationResult, OutputFile, flag_value, flag_values
from closure_build.core.errors import CompilerError
from closure_build.locations import Locations
from closure_build.orchestration import TaskRegistry

FIXTURES = Path(__file__).parent / "fixtures"


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests that spawn the fake compiler as integration tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if "integration" not in markers:
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Compiler double
# =============================================================================


class RecordingCompiler:
    """
    In-process stand-in for the Closure Compiler.

    Attributes:
        calls: One dict per ``compile()`` call (flags, cwd, source_map)
        manifest_files: Paths written to the manifest; ``None`` writes every
            ``--js`` input
        bundle: Content of the compiled output
        error: Raised from ``compile()`` when set
        write_manifest: Whether a requested manifest is written at all
    """

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.manifest_files: list[str] | None = None
        self.bundle = "var a=1;"
        self.error: CompilerError | None = None
        self.write_manifest = True

    def compile(
        self,
        flags: Sequence[str],
        *,
        cwd: Path,
        source_map: bool = False,
    ) -> CompilationResult:
        flags = list(flags)
        self.calls.append({"flags": flags, "cwd": Path(cwd), "source_map": source_map})
        if self.error is not None:
            raise self.error

        inputs = flag_values(flags, "--js")
        manifest = flag_value(flags, "--output_manifest")
        if manifest is not None and self.write_manifest:
            listed = inputs if self.manifest_files is None else self.manifest_files
            (Path(cwd) / manifest).write_text("".join(f"{p}\n" for p in listed), encoding="utf-8")

        files = []
        output = flag_value(flags, "--js_output_file")
        if output is not None:
            source = None
            if source_map:
                source = {"version": 3, "file": output, "sources": inputs, "names": [], "mappings": "AAAA"}
            files.append(OutputFile(name=output, content=self.bundle, source_map=source))
        return CompilationResult(files=files)

    @property
    def last_flags(self) -> list[str]:
        return self.calls[-1]["flags"]


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A small Closure project: two app files, one library file, a flag file."""
    files = {
        "js/main.js": "goog.provide('app.main');\ngoog.require('app.util');\n",
        "js/util.js": "goog.provide('app.util');\n",
        "node_modules/google-closure-library/closure/goog/base.js": "var goog = goog || {};\n",
        "options/compile.ini": "--language_out=ECMASCRIPT_2017\n",
    }
    for relative, content in files.items():
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return tmp_path


@pytest.fixture
def locations(project: Path) -> Locations:
    return Locations(base_dir=project)


@pytest.fixture
def compiler() -> RecordingCompiler:
    return RecordingCompiler()


@pytest.fixture
def registry() -> TaskRegistry:
    return TaskRegistry()


@pytest.fixture
def fake_compiler_command() -> list[str]:
    """argv prefix that runs the fake Closure Compiler script."""
    return [sys.executable, str(FIXTURES / "fake_closure_compiler.py")]
