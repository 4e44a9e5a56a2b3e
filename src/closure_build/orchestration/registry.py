"""Task Registry: named tasks and sequential series.

A ``TaskRegistry`` is the host scheduler's catalogue: stage tasks are
registered under generated names, and a series task names other tasks to
run strictly one after the other. The registry is an ordinary object owned
by whoever assembles pipelines; there is no process-wide registry.

Usage::

    from closure_build.orchestration.registry import TaskRegistry

    registry = TaskRegistry()
    registry.register("collect", collect_fn)
    registry.register("build", build_fn)
    registry.series("closure-build", "collect", "build")

    registry.get("closure-build")()    # runs collect, then build

Tags:
    closure-build, orchestration, registry, tasks

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from closure_build.core.logging import get_logger
from closure_build.orchestration.exceptions import DuplicateTaskError, TaskNotFoundError

logger = get_logger(__name__)

TaskFn = Callable[[], Any]


@dataclass(frozen=True)
class RegisteredTask:
    """
    A task known to the registry.

    Attributes:
        name: Unique task name
        fn: Callable run for a leaf task (None for a series)
        stages: Names of the tasks a series runs, in order
        description: Human-readable description
    """

    name: str
    fn: TaskFn | None = None
    stages: tuple[str, ...] = ()
    description: str = ""

    @property
    def is_series(self) -> bool:
        return self.fn is None


class TaskRegistry:
    """Instance-scoped registry of named tasks."""

    def __init__(self) -> None:
        self._tasks: dict[str, RegisteredTask] = {}

    def register(self, name: str, fn: TaskFn, description: str = "") -> str:
        """
        Register a leaf task.

        Returns:
            The registered name

        Raises:
            DuplicateTaskError: If ``name`` is already registered
            TypeError: If ``fn`` is not callable
        """
        if not callable(fn):
            raise TypeError(f"Task '{name}' must be callable, got {type(fn).__name__}")
        self._add(RegisteredTask(name=name, fn=fn, description=description))
        return name

    def series(self, name: str, *task_names: str, description: str = "") -> str:
        """
        Register a task that runs ``task_names`` in order.

        Every named task must already be registered.

        Raises:
            DuplicateTaskError: If ``name`` is already registered
            TaskNotFoundError: If a stage is not registered
        """
        for task_name in task_names:
            if task_name not in self._tasks:
                raise TaskNotFoundError(task_name, self.names())
        self._add(RegisteredTask(name=name, stages=tuple(task_names), description=description))
        return name

    def get(self, name: str) -> Callable[[], None]:
        """Return a callable that runs the task (and, for a series, every stage)."""
        task = self.lookup(name)
        if not task.is_series:
            return task.fn

        def run_series() -> None:
            for stage in self.expand(name):
                stage.fn()

        return run_series

    def lookup(self, name: str) -> RegisteredTask:
        if name not in self._tasks:
            raise TaskNotFoundError(name, self.names())
        return self._tasks[name]

    def expand(self, name: str) -> list[RegisteredTask]:
        """Flatten a task into the leaf tasks it runs, in execution order."""
        task = self.lookup(name)
        if not task.is_series:
            return [task]
        leaves: list[RegisteredTask] = []
        for stage in task.stages:
            leaves.extend(self.expand(stage))
        return leaves

    def exists(self, name: str) -> bool:
        return name in self._tasks

    def names(self) -> list[str]:
        return sorted(self._tasks)

    def clear(self) -> None:
        """Forget every task. Primarily for testing."""
        self._tasks.clear()
        logger.debug("task_registry_cleared")

    def __contains__(self, name: object) -> bool:
        return name in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    def _add(self, task: RegisteredTask) -> None:
        if task.name in self._tasks:
            raise DuplicateTaskError(task.name)
        self._tasks[task.name] = task
        logger.debug(
            "task_registered",
            name=task.name,
            stages=list(task.stages) or None,
        )


__all__ = ["RegisteredTask", "TaskFn", "TaskRegistry"]
