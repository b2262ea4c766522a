from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Callable

from todolist.domain.entities import Task
from todolist.domain.enums import FilterMode, Priority
from todolist.domain.filters import TaskFilters

from .task_store import StoreEvent, TaskStore

SortKey = Callable[[Task], Any]

PRIORITY_RANK = {
    Priority.HIGH: 0,
    Priority.MEDIUM: 1,
    Priority.LOW: 2,
}


def _by_due_date(task: Task) -> tuple[bool, date]:
    return (task.due_date is None, task.due_date or date.max)


def _by_priority(task: Task) -> int:
    return PRIORITY_RANK[task.priority]


def _by_description(task: Task) -> str:
    return task.description.casefold()


def _by_creation_date(task: Task) -> date:
    return task.creation_date


SORT_KEYS: dict[str, SortKey] = {
    "due_date": _by_due_date,
    "priority": _by_priority,
    "description": _by_description,
    "creation_date": _by_creation_date,
}


@dataclass(frozen=True)
class ProjectionSummary:
    pending_count: int
    total_visible: int


class TaskProjection:
    """Filtered, then sorted, read-only view over a ``TaskStore``.

    Store events only mark the cached view dirty; it is rebuilt on the next
    read. Subscribers are told as soon as the view may have changed.
    """

    def __init__(self, store: TaskStore, mode: FilterMode = FilterMode.ALL) -> None:
        self._store = store
        self._filters = TaskFilters(mode=FilterMode(mode))
        self._sort_key: SortKey | None = None
        self._reverse = False
        self._items: tuple[Task, ...] = ()
        self._summary = ProjectionSummary(pending_count=0, total_visible=0)
        self._dirty = True
        self._listeners: list[Callable[[], None]] = []
        self._store.subscribe(self._on_store_event)

    @property
    def mode(self) -> FilterMode:
        return self._filters.mode

    @property
    def items(self) -> tuple[Task, ...]:
        self._refresh()
        return self._items

    @property
    def summary(self) -> ProjectionSummary:
        self._refresh()
        return self._summary

    def __len__(self) -> int:
        return len(self.items)

    def subscribe(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Callable[[], None]) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def set_filter(self, mode: FilterMode) -> None:
        mode = FilterMode(mode)
        if mode == self._filters.mode:
            return
        self._filters = TaskFilters(mode=mode)
        self._invalidate()

    def set_sort(self, key: SortKey | None = None, reverse: bool = False) -> None:
        self._sort_key = key
        self._reverse = reverse
        self._invalidate()

    def close(self) -> None:
        self._store.unsubscribe(self._on_store_event)
        self._listeners.clear()

    def _on_store_event(self, event: StoreEvent) -> None:
        self._invalidate()

    def _invalidate(self) -> None:
        self._dirty = True
        for listener in list(self._listeners):
            listener()

    def _refresh(self) -> None:
        if not self._dirty:
            return
        visible = [task for task in self._store if self._filters.matches(task)]
        if self._sort_key is not None:
            visible.sort(key=self._sort_key, reverse=self._reverse)
        self._items = tuple(visible)
        self._summary = ProjectionSummary(
            pending_count=sum(1 for task in visible if not task.done),
            total_visible=len(visible),
        )
        self._dirty = False
