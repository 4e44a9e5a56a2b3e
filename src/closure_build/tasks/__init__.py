"""The stages of a closure build: collect, build, and cleanup."""

from closure_build.tasks.build import OptimizedBuilder
from closure_build.tasks.cleanup import CleanupTaskFactory, Counter, remove_path
from closure_build.tasks.collect import DependencyCollector, find_sources

__all__ = [
    "CleanupTaskFactory",
    "Counter",
    "DependencyCollector",
    "OptimizedBuilder",
    "find_sources",
    "remove_path",
]
