from __future__ import annotations

from datetime import date

from todolist.domain.entities import Task
from todolist.domain.enums import Priority
from todolist.services.task_store import StoreEvent, StoreEventKind, TaskStore


def _record(store: TaskStore) -> list[StoreEvent]:
    events: list[StoreEvent] = []
    store.subscribe(events.append)
    return events


def test_add_then_remove_restores_contents() -> None:
    store = TaskStore()
    existing = store.add("Existing", Priority.LOW, None)
    before = store.tasks

    task = store.add("Buy milk", Priority.MEDIUM, date(2026, 1, 2))
    assert store.tasks == (existing, task)

    assert store.remove(task) is True
    assert store.tasks == before


def test_add_keeps_insertion_order() -> None:
    store = TaskStore()
    first = store.add("First", Priority.LOW, None)
    second = store.add("Second", Priority.HIGH, None)
    third = store.add_task(Task("Third", Priority.MEDIUM))

    assert list(store) == [first, second, third]
    assert len(store) == 3


def test_remove_targets_instance_not_equal_fields() -> None:
    store = TaskStore()
    first = store.add("Same", Priority.HIGH, date(2026, 1, 1))
    second = store.add("Same", Priority.HIGH, date(2026, 1, 1))

    store.remove(second)

    assert store.tasks == (first,)
    assert first in store
    assert second not in store


def test_remove_missing_task_is_noop() -> None:
    store = TaskStore()
    store.add("Keep", Priority.LOW, None)
    events = _record(store)

    assert store.remove(Task("Stranger", Priority.LOW)) is False
    assert len(store) == 1
    assert events == []


def test_update_sets_all_fields_in_place() -> None:
    store = TaskStore()
    task = store.add("Draft", Priority.LOW, None)
    created = task.creation_date

    result = store.update(task, "Final", Priority.HIGH, date(2026, 2, 1), True)

    assert result is task
    assert (task.description, task.priority, task.due_date, task.done) == (
        "Final",
        Priority.HIGH,
        date(2026, 2, 1),
        True,
    )
    assert task.creation_date == created


def test_store_publishes_membership_and_field_changes() -> None:
    store = TaskStore()
    events = _record(store)

    task = store.add("Buy milk", Priority.MEDIUM, None)
    task.done = True
    store.remove(task)
    task.done = False

    assert [(event.kind, event.field) for event in events] == [
        (StoreEventKind.ADDED, None),
        (StoreEventKind.CHANGED, "done"),
        (StoreEventKind.REMOVED, None),
    ]
    assert all(event.task is task for event in events)


def test_remove_completed() -> None:
    store = TaskStore()
    open_task = store.add("Open", Priority.LOW, None)
    done_one = store.add("Done 1", Priority.LOW, None)
    done_two = store.add("Done 2", Priority.HIGH, None)
    done_one.done = True
    done_two.done = True

    removed = store.remove_completed()

    assert removed == [done_one, done_two]
    assert store.tasks == (open_task,)


def test_replace_all_swaps_contents_and_detaches_old_tasks() -> None:
    store = TaskStore()
    old = store.add("Old", Priority.LOW, None)
    events = _record(store)
    new = Task("New", Priority.HIGH)

    store.replace_all([new])
    old.done = True

    assert store.tasks == (new,)
    assert [event.kind for event in events] == [StoreEventKind.RESET]


def test_adding_same_instance_twice_keeps_one_entry() -> None:
    store = TaskStore()
    task = store.add_task(Task("Once", Priority.LOW))
    events = _record(store)

    assert store.add_task(task) is task
    task.done = True

    assert store.tasks == (task,)
    assert [event.kind for event in events] == [StoreEventKind.CHANGED]

    store.replace_all([task, task])
    assert store.tasks == (task,)
