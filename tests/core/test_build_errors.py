"""Tests for ``closure_build.core.errors``."""

import pytest

from closure_build.core.errors import (
    BuildError,
    CleanupError,
    CompilationError,
    CompilerError,
    ConfigError,
    DependencyResolutionError,
    EmptyManifestError,
    EmptyOutputError,
    ErrorCategory,
    ErrorContext,
    InvalidGlobError,
    InvalidNamespaceError,
    ManifestNotFoundError,
    NoSourcesError,
    SourceError,
    StorageError,
)


class TestErrorContext:
    def test_to_dict_skips_none(self):
        ctx = ErrorContext(namespace="app.main", exit_code=0)
        assert ctx.to_dict() == {"namespace": "app.main", "exit_code": 0}

    def test_metadata_merged(self):
        ctx = ErrorContext(task="gcc-build-app.main")
        ctx.metadata["inputs"] = 3
        assert ctx.to_dict() == {"task": "gcc-build-app.main", "inputs": 3}


class TestBuildError:
    def test_defaults(self):
        error = BuildError("boom")
        assert error.category == ErrorCategory.INTERNAL
        assert error.message == "boom"
        assert error.cause is None
        assert str(error) == "boom"

    def test_with_context(self):
        error = BuildError("boom").with_context(namespace="app.main", attempt=1)
        assert error.context.namespace == "app.main"
        assert error.context.metadata == {"attempt": 1}

    def test_metadata_key_is_not_overwritten(self):
        error = BuildError("boom").with_context(metadata="x")
        assert error.context.metadata == {"metadata": "x"}

    def test_cause_chained(self):
        cause = OSError("disk")
        error = BuildError("boom", cause=cause)
        assert error.__cause__ is cause
        assert error.to_dict()["cause"] == "disk"

    def test_to_dict(self):
        error = ConfigError("bad").with_context(task="t")
        assert error.to_dict() == {
            "error_type": "ConfigError",
            "message": "bad",
            "category": "CONFIG",
            "context": {"task": "t"},
        }

    def test_repr(self):
        assert repr(SourceError("x")) == "SourceError('x', category=SOURCE)"


class TestFamilies:
    def test_invalid_namespace(self):
        error = InvalidNamespaceError(123)
        assert isinstance(error, ConfigError)
        assert isinstance(error, TypeError)
        assert error.namespace == 123
        assert "int" in str(error)

    def test_invalid_glob(self):
        error = InvalidGlobError("/abs/**/*.js")
        assert isinstance(error, ConfigError)
        assert error.pattern == "/abs/**/*.js"
        assert "/abs/**/*.js" in str(error)

    def test_manifest_errors(self):
        error = ManifestNotFoundError("nsfiles.txt")
        assert error.category == ErrorCategory.SOURCE
        assert error.context.path == "nsfiles.txt"
        assert isinstance(EmptyManifestError("nsfiles.txt"), SourceError)

    def test_no_sources(self):
        error = NoSourcesError(["js/**/*.js"], ".")
        assert error.patterns == ["js/**/*.js"]
        assert "js/**/*.js" in str(error)

    def test_compiler_error(self):
        error = CompilerError("exit 1", exit_code=1, stderr="ERROR - x")
        assert error.context.exit_code == 1
        assert error.to_dict()["stderr"] == "ERROR - x"

    @pytest.mark.parametrize("cls", [DependencyResolutionError, CompilationError])
    def test_from_compiler_error(self, cls):
        original = CompilerError("exit 3", exit_code=3, stderr="bad")
        error = cls.from_compiler_error(original, "app.main")
        assert isinstance(error, cls)
        assert error.exit_code == 3
        assert error.stderr == "bad"
        assert error.cause is original
        assert error.context.namespace == "app.main"
        assert "app.main" in error.message

    def test_empty_output(self):
        error = EmptyOutputError("app.main.min.js")
        assert error.output_name == "app.main.min.js"
        assert isinstance(error, CompilerError)

    def test_cleanup_error(self):
        cause = PermissionError("denied")
        error = CleanupError(".tmp", cause=cause)
        assert isinstance(error, StorageError)
        assert error.category == ErrorCategory.STORAGE
        assert error.context.path == ".tmp"
        assert error.__cause__ is cause
