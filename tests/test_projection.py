from __future__ import annotations

from datetime import date, timedelta

from todolist.domain.enums import FilterMode, Priority
from todolist.services.projection import SORT_KEYS, TaskProjection
from todolist.services.task_store import TaskStore


def test_buy_milk_scenario() -> None:
    store = TaskStore()
    projection = TaskProjection(store)

    task = store.add("Buy milk", Priority.MEDIUM, date.today() + timedelta(days=1))
    assert projection.summary.total_visible == 1
    assert projection.summary.pending_count == 1

    task.done = True
    assert projection.summary.pending_count == 0
    assert projection.summary.total_visible == 1

    projection.set_filter(FilterMode.ACTIVE)
    assert projection.summary.total_visible == 0
    assert projection.items == ()


def test_filters_do_not_mutate_store() -> None:
    store = TaskStore()
    active = store.add("Active", Priority.LOW, None)
    finished = store.add("Finished", Priority.LOW, None)
    finished.done = True
    projection = TaskProjection(store)

    projection.set_filter(FilterMode.COMPLETED)
    assert projection.items == (finished,)

    projection.set_filter(FilterMode.ACTIVE)
    assert projection.items == (active,)

    projection.set_filter(FilterMode.ALL)
    assert projection.items == (active, finished)
    assert store.tasks == (active, finished)


def test_setting_same_filter_twice_is_idempotent() -> None:
    store = TaskStore()
    store.add("One", Priority.LOW, None)
    store.add("Two", Priority.HIGH, None).done = True
    projection = TaskProjection(store)

    projection.set_filter(FilterMode.ACTIVE)
    once = projection.items
    projection.set_filter(FilterMode.ACTIVE)

    assert projection.items == once


def test_projection_follows_store_changes() -> None:
    store = TaskStore()
    projection = TaskProjection(store, mode=FilterMode.ACTIVE)
    task = store.add("Write report", Priority.HIGH, None)
    assert projection.items == (task,)

    task.done = True
    assert projection.items == ()

    task.done = False
    assert projection.items == (task,)

    store.remove(task)
    assert projection.items == ()


def test_sort_applies_after_filter_and_tracks_key_changes() -> None:
    store = TaskStore()
    today = date(2026, 1, 10)
    late = store.add("Late", Priority.LOW, today + timedelta(days=9))
    undated = store.add("Undated", Priority.LOW, None)
    soon = store.add("Soon", Priority.LOW, today + timedelta(days=1))
    projection = TaskProjection(store)

    projection.set_sort(SORT_KEYS["due_date"])
    assert projection.items == (soon, late, undated)

    late.due_date = today
    assert projection.items == (late, soon, undated)

    projection.set_sort(None)
    assert projection.items == (late, undated, soon)


def test_priority_sort_puts_high_first() -> None:
    store = TaskStore()
    low = store.add("Low", Priority.LOW, None)
    high = store.add("High", Priority.HIGH, None)
    medium = store.add("Medium", Priority.MEDIUM, None)
    projection = TaskProjection(store)

    projection.set_sort(SORT_KEYS["priority"])
    assert projection.items == (high, medium, low)

    projection.set_sort(SORT_KEYS["priority"], reverse=True)
    assert projection.items == (low, medium, high)


def test_subscribers_are_notified_and_close_detaches() -> None:
    store = TaskStore()
    projection = TaskProjection(store)
    calls: list[int] = []
    projection.subscribe(lambda: calls.append(1))

    task = store.add("Ping", Priority.LOW, None)
    projection.set_filter(FilterMode.COMPLETED)
    projection.set_filter(FilterMode.COMPLETED)
    assert len(calls) == 2

    projection.close()
    task.done = True
    assert len(calls) == 2
