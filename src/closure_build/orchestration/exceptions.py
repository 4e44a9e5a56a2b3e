"""Orchestration exceptions.

All orchestration exceptions inherit from
``closure_build.core.errors.OrchestrationError`` so that callers can catch
the entire family with a single ``except`` clause.

Hierarchy::

    OrchestrationError  (from closure_build.core.errors)
      └── TaskError                 ── base for registry/runner errors
            ├── DuplicateTaskError    ── task name already registered
            └── TaskNotFoundError     ── task name not registered
"""

from closure_build.core.errors import OrchestrationError


class TaskError(OrchestrationError):
    """Base exception for task registry and runner errors."""

    pass


class DuplicateTaskError(TaskError):
    """Raised when a task name is registered twice."""

    def __init__(self, task_name: str):
        self.task_name = task_name
        super().__init__(f"Task already registered: {task_name}")


class TaskNotFoundError(TaskError):
    """Raised when a task name is not registered."""

    def __init__(self, task_name: str, available: list[str] | None = None):
        self.task_name = task_name
        listing = ", ".join(sorted(available)) if available else "(none)"
        super().__init__(f"Task '{task_name}' not found. Available: {listing}")
