from __future__ import annotations

from datetime import date

import pytest

from todolist.domain.entities import Task
from todolist.domain.enums import Priority


def test_new_task_defaults() -> None:
    task = Task("Buy milk", Priority.MEDIUM, date(2026, 1, 2))

    assert task.done is False
    assert task.creation_date == date.today()
    assert task.due_date == date(2026, 1, 2)


def test_priority_is_required() -> None:
    with pytest.raises(ValueError):
        Task("Buy milk", None)  # type: ignore[arg-type]

    task = Task("Buy milk", Priority.LOW)
    with pytest.raises(ValueError):
        task.priority = None  # type: ignore[assignment]
    assert task.priority is Priority.LOW


def test_creation_date_is_read_only() -> None:
    task = Task("Buy milk", Priority.LOW, creation_date=date(2025, 5, 1))

    with pytest.raises(AttributeError):
        task.creation_date = date(2026, 1, 1)
    assert task.creation_date == date(2025, 5, 1)


def test_tasks_compare_by_identity() -> None:
    first = Task("Same", Priority.HIGH, date(2026, 1, 1), creation_date=date(2026, 1, 1))
    second = Task("Same", Priority.HIGH, date(2026, 1, 1), creation_date=date(2026, 1, 1))

    assert first != second
    assert first == first


def test_field_changes_notify_subscribers() -> None:
    task = Task("Buy milk", Priority.LOW)
    changes: list[str] = []
    task.subscribe(lambda changed, name: changes.append(name))

    task.description = "Buy oat milk"
    task.done = True
    task.done = True
    task.priority = Priority.HIGH
    task.due_date = date(2026, 3, 1)

    assert changes == ["description", "done", "priority", "due_date"]


def test_unsubscribed_listener_is_not_called() -> None:
    task = Task("Buy milk", Priority.LOW)
    changes: list[str] = []

    def listener(changed: Task, name: str) -> None:
        changes.append(name)

    task.subscribe(listener)
    task.unsubscribe(listener)
    task.unsubscribe(listener)
    task.done = True

    assert changes == []
