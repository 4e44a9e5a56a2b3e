"""
Structured error types for closure-build.

Every failure the build pipeline can surface is a ``BuildError`` subclass
carrying a category, structured context (namespace, task, paths) and an
optional chained cause. The host task runner reports the first failing
stage's error unchanged, so the error itself has to say what went wrong.

Manifesto:
    - **Typed Error Hierarchy:** One family per failure mode of the pipeline
    - **No Retries:** Nothing here is retryable; callers re-run the pipeline
    - **Rich Context:** Errors carry namespace/task/path for logging
    - **Error Chaining:** Compiler and OS errors are kept as ``cause``

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                         BuildError                              │
        │              (category, context, cause)                         │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                 │
        │  ConfigError          SourceError          CompilerError        │
        │  (CONFIG)             (SOURCE)             (COMPILER)           │
        │     │                    │                    │                 │
        │  InvalidNamespace     ManifestError        DependencyResolution │
        │  InvalidGlob            ManifestNotFound   CompilationError     │
        │                         EmptyManifest      EmptyOutputError     │
        │                       NoSourcesError                            │
        │                                                                 │
        │  StorageError         OrchestrationError                        │
        │  (STORAGE)            (ORCHESTRATION)                           │
        │     │                    │                                      │
        │  CleanupError         TaskError (orchestration.exceptions)      │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    >>> error = CompilationError("exit 1").with_context(namespace="app.main")
    >>> error.context.namespace
    'app.main'
    >>> error.to_dict()["category"]
    'COMPILER'

Tags:
    error-handling, exception-hierarchy, error-context, closure-build

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and reporting."""

    CONFIG = "CONFIG"                # Bad invocation, invalid settings
    SOURCE = "SOURCE"                # Missing inputs, unreadable manifest
    COMPILER = "COMPILER"            # Compiler exited non-zero or timed out
    STORAGE = "STORAGE"              # File system errors
    ORCHESTRATION = "ORCHESTRATION"  # Task registry / runner errors
    INTERNAL = "INTERNAL"            # Bugs, unexpected state


@dataclass
class ErrorContext:
    """
    Structured metadata context for errors.

    Attributes:
        namespace: Closure namespace the pipeline was building
        task: Task identifier of the stage that failed
        path: File system path involved in the failure
        command: Compiler command line, if a subprocess was involved
        exit_code: Compiler exit code
        metadata: Additional key-value pairs
    """

    namespace: str | None = None
    task: str | None = None
    path: str | None = None
    command: str | None = None
    exit_code: int | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["namespace", "task", "path", "command", "exit_code"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class BuildError(Exception):
    """
    Base exception for all closure-build errors.

    Subclasses set ``default_category`` so callers can route on the
    category without matching on concrete classes.

    Examples:
        >>> error = BuildError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>

        >>> try:
        ...     raise OSError("disk full")
        ... except OSError as e:
        ...     error = BuildError("Write failed", cause=e)
        >>> error.cause
        OSError('disk full')
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> BuildError:
        """
        Add context to this error (fluent API).

        Usage:
            raise CompilationError("Failed").with_context(
                namespace="app.main",
                task="gcc-build-app.main",
            )
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(BuildError):
    """Configuration or invocation error. The call site must be fixed."""

    default_category = ErrorCategory.CONFIG


class InvalidNamespaceError(ConfigError, TypeError):
    """A pipeline was requested without a string namespace."""

    def __init__(self, namespace: Any, message: str | None = None):
        self.namespace = namespace
        super().__init__(
            message or "Cannot create closure build task without a namespace"
            f" (got {type(namespace).__name__})"
        )


class InvalidGlobError(ConfigError):
    """A source glob is absolute; globs are relative to ``base_dir``."""

    def __init__(self, pattern: str):
        self.pattern = pattern
        super().__init__(
            f"Source glob must be relative to the base directory: {pattern}"
        )


# =============================================================================
# SOURCE ERRORS
# =============================================================================


class SourceError(BuildError):
    """Error with the inputs of a stage."""

    default_category = ErrorCategory.SOURCE


class NoSourcesError(SourceError):
    """The source globs matched no files."""

    def __init__(self, patterns: list[str], base_dir: str):
        self.patterns = patterns
        self.base_dir = base_dir
        super().__init__(
            f"No source files match {', '.join(patterns)} under {base_dir}"
        )


class ManifestError(SourceError):
    """The dependency manifest cannot be used."""

    def __init__(self, message: str, *, path: str | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.path = path
        if path is not None:
            self.context.path = path


class ManifestNotFoundError(ManifestError):
    """The manifest was not written, or was removed before the build read it."""

    def __init__(self, path: str, cause: BaseException | None = None):
        super().__init__(f"Manifest not found: {path}", path=path, cause=cause)


class EmptyManifestError(ManifestError):
    """The manifest lists no files."""

    def __init__(self, path: str):
        super().__init__(f"Manifest lists no input files: {path}", path=path)


# =============================================================================
# COMPILER ERRORS
# =============================================================================


class CompilerError(BuildError):
    """
    The compiler could not be run or exited with an error.

    Attributes:
        exit_code: Process exit code, ``None`` if the process never ran
        stderr: Captured diagnostic output of the compiler
    """

    default_category = ErrorCategory.COMPILER

    def __init__(
        self,
        message: str,
        *,
        exit_code: int | None = None,
        stderr: str = "",
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.exit_code = exit_code
        self.stderr = stderr
        if exit_code is not None:
            self.context.exit_code = exit_code

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.stderr:
            result["stderr"] = self.stderr
        return result


class DependencyResolutionError(CompilerError):
    """Strict dependency resolution failed for the entry point."""

    @classmethod
    def from_compiler_error(cls, error: CompilerError, namespace: str) -> DependencyResolutionError:
        return cls(
            f"Dependency collection failed for {namespace}: {error.message}",
            exit_code=error.exit_code,
            stderr=error.stderr,
            cause=error,
        ).with_context(namespace=namespace)


class CompilationError(CompilerError):
    """The optimizing build of a namespace failed."""

    @classmethod
    def from_compiler_error(cls, error: CompilerError, namespace: str) -> CompilationError:
        return cls(
            f"Compilation failed for {namespace}: {error.message}",
            exit_code=error.exit_code,
            stderr=error.stderr,
            cause=error,
        ).with_context(namespace=namespace)


class EmptyOutputError(CompilerError):
    """The compiler reported success but produced no bundle."""

    def __init__(self, name: str):
        self.output_name = name
        super().__init__(f"Compiler produced no output for {name}")


# =============================================================================
# STORAGE / ORCHESTRATION ERRORS
# =============================================================================


class StorageError(BuildError):
    """File system error."""

    default_category = ErrorCategory.STORAGE


class CleanupError(StorageError):
    """A path could not be removed."""

    def __init__(self, path: str, cause: BaseException | None = None):
        self.path = path
        super().__init__(f"Cannot remove {path}: {cause}", cause=cause)
        self.context.path = path


class OrchestrationError(BuildError):
    """Task registry or runner error."""

    default_category = ErrorCategory.ORCHESTRATION


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "BuildError",
    # Config
    "ConfigError",
    "InvalidNamespaceError",
    "InvalidGlobError",
    # Source
    "SourceError",
    "NoSourcesError",
    "ManifestError",
    "ManifestNotFoundError",
    "EmptyManifestError",
    # Compiler
    "CompilerError",
    "DependencyResolutionError",
    "CompilationError",
    "EmptyOutputError",
    # Storage / orchestration
    "StorageError",
    "CleanupError",
    "OrchestrationError",
]
