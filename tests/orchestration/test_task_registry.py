"""Tests for ``closure_build.orchestration.registry``."""

import pytest

from closure_build.core.errors import OrchestrationError
from closure_build.orchestration import (
    DuplicateTaskError,
    TaskError,
    TaskNotFoundError,
    TaskRegistry,
)


class TestRegister:
    def test_register_returns_name(self, registry):
        assert registry.register("a", lambda: None) == "a"
        assert "a" in registry
        assert registry.exists("a")
        assert len(registry) == 1

    def test_duplicate(self, registry):
        registry.register("a", lambda: None)
        with pytest.raises(DuplicateTaskError) as exc_info:
            registry.register("a", lambda: None)
        assert exc_info.value.task_name == "a"

    def test_not_callable(self, registry):
        with pytest.raises(TypeError):
            registry.register("a", "not callable")  # type: ignore[arg-type]

    def test_names_sorted(self, registry):
        registry.register("b", lambda: None)
        registry.register("a", lambda: None)
        assert registry.names() == ["a", "b"]

    def test_clear(self, registry):
        registry.register("a", lambda: None)
        registry.clear()
        assert len(registry) == 0

    def test_registries_are_independent(self):
        first, second = TaskRegistry(), TaskRegistry()
        first.register("a", lambda: None)
        assert "a" not in second


class TestSeries:
    def test_runs_in_order(self, registry):
        calls = []
        registry.register("a", lambda: calls.append("a"))
        registry.register("b", lambda: calls.append("b"))
        registry.series("all", "b", "a")
        registry.get("all")()
        assert calls == ["b", "a"]

    def test_unknown_stage(self, registry):
        registry.register("a", lambda: None)
        with pytest.raises(TaskNotFoundError) as exc_info:
            registry.series("all", "a", "missing")
        assert exc_info.value.task_name == "missing"
        assert "all" not in registry

    def test_stops_at_first_exception(self, registry):
        calls = []

        def boom():
            raise RuntimeError("boom")

        registry.register("a", boom)
        registry.register("b", lambda: calls.append("b"))
        registry.series("all", "a", "b")
        with pytest.raises(RuntimeError, match="boom"):
            registry.get("all")()
        assert calls == []

    def test_nested_series_expand(self, registry):
        registry.register("a", lambda: None)
        registry.register("b", lambda: None)
        registry.series("inner", "a", "b")
        registry.register("c", lambda: None)
        registry.series("outer", "inner", "c")
        assert [task.name for task in registry.expand("outer")] == ["a", "b", "c"]

    def test_lookup(self, registry):
        registry.register("a", lambda: None)
        registry.series("all", "a", description="everything")
        task = registry.lookup("all")
        assert task.is_series
        assert task.stages == ("a",)
        assert task.description == "everything"
        assert not registry.lookup("a").is_series


class TestErrors:
    def test_unknown_task(self, registry):
        registry.register("known", lambda: None)
        with pytest.raises(TaskNotFoundError, match="Available: known"):
            registry.get("unknown")

    def test_hierarchy(self):
        assert issubclass(DuplicateTaskError, TaskError)
        assert issubclass(TaskNotFoundError, TaskError)
        assert issubclass(TaskError, OrchestrationError)

    def test_not_found_without_tasks(self):
        assert "(none)" in str(TaskNotFoundError("x"))
