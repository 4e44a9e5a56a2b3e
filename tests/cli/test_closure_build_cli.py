"""
Tests for the closure-build command line.
"""

from __future__ import annotations

import json
import shlex
import sys

import pytest
import structlog
from typer.testing import CliRunner

from closure_build import __version__
from closure_build.cli.app import app
from closure_build.core.logging import configure_logging

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_env(monkeypatch, project):
    """Run every command from the project root with log output discarded."""
    structlog.configure(logger_factory=structlog.ReturnLoggerFactory())
    monkeypatch.setattr("closure_build.cli.utils.configure_logging", lambda **kwargs: None)
    for key in ("CLOSURE_BUILD_DEBUG", "CLOSURE_BUILD_COMPILER", "CLOSURE_BUILD_BASE_DIR"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(project)
    yield
    structlog.reset_defaults()


class TestRootApp:
    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "build" in result.output

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"closure-build {__version__}" in result.output


class TestFlagsCommand:
    def test_build_flags(self):
        result = runner.invoke(app, ["flags", "app.main"])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert "--entry_point goog:app.main" in lines
        assert "--js_output_file app.main.min.js" in lines
        assert "--define goog.DEBUG=false" in lines
        assert "--compilation_level ADVANCED" in lines

    def test_debug_flags(self):
        result = runner.invoke(app, ["flags", "app.main", "--debug"])
        assert "--define goog.DEBUG=true" in result.output.splitlines()

    def test_collect_flags(self):
        result = runner.invoke(app, ["flags", "app.main", "--collect"])
        lines = result.output.splitlines()
        assert "--output_manifest nsfiles.txt" in lines
        assert "--dependency_mode STRICT" in lines
        assert not any(line.startswith("--compilation_level") for line in lines)


class TestPlanCommand:
    def test_lists_stages_in_order(self):
        result = runner.invoke(app, ["plan", "app.main"])
        assert result.exit_code == 0
        output = result.output
        positions = [
            output.index("collect-files-for-app.main"),
            output.index("cleanup-.tmp-"),
            output.index("gcc-build-app.main"),
            output.index("cleanup-nsfiles.txt-"),
        ]
        assert positions == sorted(positions)
        assert "closure-build" in output

    def test_plan_runs_nothing(self, project):
        runner.invoke(app, ["plan", "app.main"])
        assert not (project / "build").exists()


class TestCleanCommand:
    def test_removes_leftovers(self, project):
        (project / ".tmp").mkdir()
        (project / ".tmp" / "notused.js").write_text("")
        (project / "nsfiles.txt").write_text("js/main.js\n")

        result = runner.invoke(app, ["clean"])

        assert result.exit_code == 0
        assert "removed" in result.output
        assert not (project / ".tmp").exists()
        assert not (project / "nsfiles.txt").exists()

    def test_nothing_to_remove(self):
        result = runner.invoke(app, ["clean"])
        assert result.exit_code == 0
        assert "absent" in result.output


@pytest.mark.integration
class TestBuildCommand:
    def test_build(self, project, fake_compiler_command):
        result = runner.invoke(
            app,
            ["build", "app.main", "--compiler", shlex.join(fake_compiler_command), "--json"],
        )

        assert result.exit_code == 0, result.output
        assert (project / "build" / "app.main.min.js").exists()
        assert (project / "build" / "app.main.min.js.map").exists()
        assert not (project / "nsfiles.txt").exists()
        assert '"status": "completed"' in result.output

    def test_several_namespaces(self, project, fake_compiler_command):
        (project / "js" / "other.js").write_text("goog.provide('app.other');\n")
        result = runner.invoke(
            app,
            [
                "build", "app.main", "app.other",
                "--task-name", "site",
                "--compiler", shlex.join(fake_compiler_command),
            ],
        )

        assert result.exit_code == 0, result.output
        assert (project / "build" / "app.main.min.js").exists()
        assert (project / "build" / "app.other.min.js").exists()

    def test_compiler_failure_exits_non_zero(self, project):
        failing = shlex.join([sys.executable, "-c", "import sys; sys.exit(3)"])
        result = runner.invoke(app, ["build", "app.main", "--compiler", failing])

        assert result.exit_code == 1
        assert "Error" in result.output
        assert not (project / "build").exists()

    def test_json_output_parses(self, fake_compiler_command):
        result = runner.invoke(
            app,
            ["build", "app.main", "--compiler", shlex.join(fake_compiler_command), "--json"],
        )
        data = json.loads(result.output)
        assert data["task_name"] == "closure-build"
        assert len(data["executions"]) == 4


class TestWithLogging:
    """Commands run with ``configure_logging`` in effect."""

    @pytest.fixture(autouse=True)
    def real_logging(self, monkeypatch):
        configure = structlog.configure

        def configure_uncached(**kwargs):
            # cached loggers would keep writing to this test's closed stream
            configure(**{**kwargs, "cache_logger_on_first_use": False})

        monkeypatch.setattr(structlog, "configure", configure_uncached)
        monkeypatch.setattr("closure_build.cli.utils.configure_logging", configure_logging)

    @pytest.mark.integration
    def test_build(self, project, fake_compiler_command):
        result = runner.invoke(
            app, ["build", "app.main", "--compiler", shlex.join(fake_compiler_command)]
        )

        assert result.exit_code == 0, result.output
        assert "pipeline.registered" in result.output
        assert (project / "build" / "app.main.min.js").exists()

    def test_plan(self):
        result = runner.invoke(app, ["plan", "app.main"])
        assert result.exit_code == 0, result.output
        assert "gcc-build-app.main" in result.output

    def test_clean(self, project):
        (project / "nsfiles.txt").write_text("js/main.js\n")
        result = runner.invoke(app, ["clean"])
        assert result.exit_code == 0, result.output
        assert "cleanup.removed" in result.output
        assert not (project / "nsfiles.txt").exists()

    def test_absolute_glob_reported(self, monkeypatch):
        monkeypatch.setenv("CLOSURE_BUILD_SOURCE_GLOB", "/srv/app/js/**/*.js")
        result = runner.invoke(app, ["plan", "app.main"])
        assert result.exit_code == 1
        assert "Source glob" in result.output
