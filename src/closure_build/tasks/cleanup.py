"""Cleanup tasks for the pipeline's intermediate artifacts."""

from __future__ import annotations

import shutil
import threading
from functools import partial
from pathlib import Path

from closure_build.core.errors import CleanupError
from closure_build.core.logging import get_logger
from closure_build.orchestration.registry import TaskFn

logger = get_logger(__name__)


class Counter:
    """Monotonic counter."""

    def __init__(self, start: int = 0):
        self._value = start
        self._lock = threading.Lock()

    @property
    def value(self) -> int:
        return self._value

    def next(self) -> int:
        with self._lock:
            self._value += 1
            return self._value


def remove_path(path: Path) -> bool:
    """Delete a file or a directory tree.

    Returns ``False`` if there was nothing to delete.

    Raises:
        CleanupError: The path exists but cannot be removed.
    """
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except FileNotFoundError:
        return False
    except OSError as exc:
        raise CleanupError(str(path), cause=exc) from exc
    return True


class CleanupTaskFactory:
    """Makes deletion tasks with names that never repeat.

    Every task is named ``cleanup-<location>-<n>`` with ``n`` taken from a
    counter owned by the factory, so the same location can be cleaned up by
    any number of pipelines registered with one registry.

    Args:
        base_dir: Directory relative locations are resolved against
    """

    def __init__(self, base_dir: Path | str | None = None):
        self.base_dir = Path(base_dir) if base_dir is not None else None
        self.counter = Counter()

    def task_name(self, location: Path | str) -> str:
        return f"cleanup-{Path(location).as_posix()}-{self.counter.next()}"

    def make_task(self, location: Path | str) -> tuple[str, TaskFn]:
        return self.task_name(location), partial(self.clean, location)

    def resolve(self, location: Path | str) -> Path:
        path = Path(location)
        if self.base_dir is not None and not path.is_absolute():
            return self.base_dir / path
        return path

    def clean(self, location: Path | str) -> bool:
        path = self.resolve(location)
        removed = remove_path(path)
        if removed:
            logger.info("cleanup.removed", path=str(path))
        else:
            logger.debug("cleanup.absent", path=str(path))
        return removed


__all__ = ["CleanupTaskFactory", "Counter", "remove_path"]
