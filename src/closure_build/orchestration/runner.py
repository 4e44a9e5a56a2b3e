"""Task Runner: executes registered tasks stage by stage.

The ``TaskRunner`` flattens a task into its leaf stages and runs them in
order. A stage starts only after the previous one returned; the first
stage that raises ends the run, and its exception is kept on the result
exactly as raised. Nothing is retried.

Pipelines for different namespaces may be run side by side with
``run_many``. Pipelines built from the same ``Locations`` share a
manifest and scratch directory, so concurrent runs are only safe when each
pipeline was given its own intermediates.

Example::

    runner = TaskRunner(registry)
    result = runner.run("closure-build")

    if result.status == RunStatus.COMPLETED:
        print(f"Success! Ran {len(result.completed_tasks)} stages")
    else:
        print(f"Failed at {result.error_step}: {result.error}")
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from closure_build.core.logging import LogContext, get_logger
from closure_build.orchestration.registry import TaskRegistry

logger = get_logger(__name__)


class RunStatus(str, Enum):
    """Overall status of a run."""

    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class TaskExecution:
    """Result of executing a single stage."""

    task_name: str
    status: str  # "completed", "failed", "planned"
    started_at: datetime | None = None
    completed_at: datetime | None = None
    result: Any = None
    error: str | None = None
    exception: BaseException | None = None

    @property
    def duration_seconds(self) -> float | None:
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logging/output."""
        return {
            "task_name": self.task_name,
            "status": self.status,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
            "error": self.error,
        }


@dataclass
class RunResult:
    """Result of running a task."""

    task_name: str
    run_id: str
    status: RunStatus
    started_at: datetime
    completed_at: datetime | None = None
    executions: list[TaskExecution] = field(default_factory=list)
    error_step: str | None = None
    error: str | None = None
    exception: BaseException | None = None

    @property
    def duration_seconds(self) -> float | None:
        if self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    @property
    def completed_tasks(self) -> list[str]:
        return [e.task_name for e in self.executions if e.status == "completed"]

    @property
    def failed_tasks(self) -> list[str]:
        return [e.task_name for e in self.executions if e.status == "failed"]

    @property
    def ok(self) -> bool:
        return self.status == RunStatus.COMPLETED

    def raise_for_status(self) -> None:
        """Re-raise the failing stage's exception, if any."""
        if self.exception is not None:
            raise self.exception

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logging/output."""
        return {
            "task_name": self.task_name,
            "run_id": self.run_id,
            "status": self.status.value,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
            "completed_tasks": self.completed_tasks,
            "failed_tasks": self.failed_tasks,
            "error_step": self.error_step,
            "error": self.error,
            "executions": [e.to_dict() for e in self.executions],
        }


class TaskRunner:
    """Runs registered tasks sequentially, stopping at the first failure."""

    def __init__(self, registry: TaskRegistry, dry_run: bool = False) -> None:
        """
        Args:
            registry: Registry the task names are looked up in
            dry_run: If ``True``, stages are listed but not executed
        """
        self._registry = registry
        self._dry_run = dry_run

    @property
    def registry(self) -> TaskRegistry:
        return self._registry

    def run(self, name: str) -> RunResult:
        """
        Run task ``name``.

        Raises:
            TaskNotFoundError: If ``name`` (or one of its stages) is unknown.
                Stage failures do not raise; they are reported on the result.
        """
        stages = self._registry.expand(name)
        result = RunResult(
            task_name=name,
            run_id=str(uuid.uuid4()),
            status=RunStatus.RUNNING,
            started_at=datetime.now(UTC),
        )

        logger.info(
            "run.start",
            task=name,
            run_id=result.run_id,
            stages=[stage.name for stage in stages],
            dry_run=self._dry_run,
        )

        for stage in stages:
            if self._dry_run:
                result.executions.append(TaskExecution(task_name=stage.name, status="planned"))
                continue

            execution = TaskExecution(
                task_name=stage.name,
                status="completed",
                started_at=datetime.now(UTC),
            )
            with LogContext(task=stage.name):
                logger.debug("task.start")
                try:
                    execution.result = stage.fn()
                except Exception as exc:
                    execution.status = "failed"
                    execution.error = str(exc)
                    execution.exception = exc
                    logger.error(
                        "task.failed",
                        error=str(exc),
                        error_type=type(exc).__name__,
                    )
                else:
                    logger.debug("task.completed")
            execution.completed_at = datetime.now(UTC)
            result.executions.append(execution)

            if execution.status == "failed":
                result.status = RunStatus.FAILED
                result.error_step = stage.name
                result.error = execution.error
                result.exception = execution.exception
                break

        if result.status == RunStatus.RUNNING:
            result.status = RunStatus.COMPLETED
        result.completed_at = datetime.now(UTC)

        logger.info(
            "run.finished",
            task=name,
            run_id=result.run_id,
            status=result.status.value,
            error_step=result.error_step,
            duration_seconds=result.duration_seconds,
        )
        return result

    def run_many(self, names: Sequence[str], max_concurrency: int = 1) -> list[RunResult]:
        """Run several tasks, returning results in the order given.

        With ``max_concurrency`` above one, tasks run on a thread pool.
        """
        if max_concurrency <= 1 or len(names) <= 1:
            return [self.run(name) for name in names]

        logger.warning(
            "run.concurrent",
            tasks=list(names),
            max_concurrency=max_concurrency,
            note="pipelines must not share a manifest or scratch directory",
        )
        with ThreadPoolExecutor(max_workers=max_concurrency) as pool:
            return list(pool.map(self.run, names))


__all__ = ["RunResult", "RunStatus", "TaskExecution", "TaskRunner"]
