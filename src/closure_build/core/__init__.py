"""closure-build core -- errors, logging and settings shared by every module.

Architecture::

    errors.py      Structured error hierarchy (BuildError and families)
    logging.py     structlog configuration and context helpers
    settings.py    BuildSettings (pydantic-settings, CLOSURE_BUILD_ prefix)
"""

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
    ManifestError,
    ManifestNotFoundError,
    NoSourcesError,
    OrchestrationError,
    SourceError,
    StorageError,
)
from closure_build.core.logging import LogContext, configure_logging, get_logger
from closure_build.core.settings import BuildSettings

__all__ = [
    "BuildError",
    "BuildSettings",
    "CleanupError",
    "CompilationError",
    "CompilerError",
    "ConfigError",
    "DependencyResolutionError",
    "EmptyManifestError",
    "EmptyOutputError",
    "ErrorCategory",
    "ErrorContext",
    "InvalidGlobError",
    "InvalidNamespaceError",
    "LogContext",
    "ManifestError",
    "ManifestNotFoundError",
    "NoSourcesError",
    "OrchestrationError",
    "SourceError",
    "StorageError",
    "configure_logging",
    "get_logger",
]
