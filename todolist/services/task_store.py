from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from typing import Callable, Iterable, Iterator, Optional

from todolist.domain.entities import Task
from todolist.domain.enums import Priority

logger = logging.getLogger(__name__)


class StoreEventKind(StrEnum):
    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"
    RESET = "reset"


@dataclass(frozen=True)
class StoreEvent:
    kind: StoreEventKind
    task: Task | None = None
    field: str | None = None


StoreListener = Callable[[StoreEvent], None]


class TaskStore:
    """Ordered, observable collection of tasks.

    The store is a plain container: it does not validate input beyond what
    ``Task`` itself enforces. Every membership change and every field change
    on a contained task is published to subscribers as a ``StoreEvent``.
    Each task instance is held at most once.
    """

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._tasks: list[Task] = []
        self._listeners: list[StoreListener] = []
        for task in tasks:
            self._attach(task)

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(tuple(self._tasks))

    def __contains__(self, task: object) -> bool:
        return self._index_of(task) is not None

    def subscribe(self, listener: StoreListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: StoreListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def add(self, description: str, priority: Priority, due_date: Optional[date]) -> Task:
        return self.add_task(Task(description=description, priority=priority, due_date=due_date))

    def add_task(self, task: Task) -> Task:
        if self._attach(task):
            self._emit(StoreEvent(StoreEventKind.ADDED, task))
        return task

    def remove(self, task: Task) -> bool:
        index = self._index_of(task)
        if index is None:
            return False
        self._detach(index)
        self._emit(StoreEvent(StoreEventKind.REMOVED, task))
        return True

    def remove_completed(self) -> list[Task]:
        removed = [task for task in self._tasks if task.done]
        for task in removed:
            self.remove(task)
        if removed:
            logger.info("Removed %s completed tasks", len(removed))
        return removed

    def update(
        self,
        task: Task,
        description: str,
        priority: Priority,
        due_date: Optional[date],
        done: bool,
    ) -> Task:
        task.description = description
        task.priority = priority
        task.due_date = due_date
        task.done = done
        return task

    def replace_all(self, tasks: Iterable[Task]) -> None:
        while self._tasks:
            self._detach(len(self._tasks) - 1)
        for task in tasks:
            self._attach(task)
        self._emit(StoreEvent(StoreEventKind.RESET))

    def _attach(self, task: Task) -> bool:
        if task in self:
            logger.debug("Task %r is already in the store", task.description)
            return False
        self._tasks.append(task)
        task.subscribe(self._on_task_changed)
        return True

    def _detach(self, index: int) -> Task:
        task = self._tasks.pop(index)
        task.unsubscribe(self._on_task_changed)
        return task

    def _index_of(self, task: object) -> int | None:
        for index, candidate in enumerate(self._tasks):
            if candidate is task:
                return index
        return None

    def _on_task_changed(self, task: Task, field_name: str) -> None:
        self._emit(StoreEvent(StoreEventKind.CHANGED, task, field_name))

    def _emit(self, event: StoreEvent) -> None:
        for listener in list(self._listeners):
            listener(event)
