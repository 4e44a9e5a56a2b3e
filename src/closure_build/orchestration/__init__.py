"""Task orchestration: a registry of named tasks and a sequential runner.

Example::

    from closure_build.orchestration import TaskRegistry, TaskRunner

    registry = TaskRegistry()
    registry.register("hello", lambda: print("hello"))
    registry.series("all", "hello")
    TaskRunner(registry).run("all")
"""

from closure_build.orchestration.exceptions import (
    DuplicateTaskError,
    TaskError,
    TaskNotFoundError,
)
from closure_build.orchestration.registry import RegisteredTask, TaskFn, TaskRegistry
from closure_build.orchestration.runner import RunResult, RunStatus, TaskExecution, TaskRunner

__all__ = [
    "DuplicateTaskError",
    "RegisteredTask",
    "RunResult",
    "RunStatus",
    "TaskError",
    "TaskExecution",
    "TaskFn",
    "TaskNotFoundError",
    "TaskRegistry",
    "TaskRunner",
]
