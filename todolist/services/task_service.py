from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from todolist.domain.classifier import TaskTags, classify
from todolist.domain.entities import Task
from todolist.domain.enums import FilterMode, Priority
from todolist.domain.errors import PersistenceError, ValidationError
from todolist.infra.storage import LoadResult, TaskFileStorage

from .projection import SORT_KEYS, ProjectionSummary, SortKey, TaskProjection
from .task_store import TaskStore

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(self, store: TaskStore, storage: TaskFileStorage) -> None:
        self._store = store
        self._storage = storage
        self._projection = TaskProjection(store)
        self._load_failed = False

    @property
    def store(self) -> TaskStore:
        return self._store

    @property
    def projection(self) -> TaskProjection:
        return self._projection

    def add_task(
        self,
        description: str | None,
        priority: Priority | None,
        due_date: Optional[date],
    ) -> Task:
        description = self._validate(description, priority)
        if due_date is None:
            raise ValidationError("Please select a due date.")
        return self._store.add(description, priority, due_date)

    def edit_task(
        self,
        task: Task,
        description: str | None,
        priority: Priority | None,
        due_date: Optional[date],
        done: bool | None = None,
    ) -> Task:
        description = self._validate(description, priority)
        return self._store.update(
            task,
            description,
            priority,
            due_date,
            task.done if done is None else done,
        )

    def toggle_done(self, task: Task) -> Task:
        task.done = not task.done
        return task

    def remove_task(self, task: Task) -> bool:
        return self._store.remove(task)

    def remove_completed(self) -> int:
        return len(self._store.remove_completed())

    def set_filter(self, mode: FilterMode | str) -> None:
        self._projection.set_filter(FilterMode(mode))

    def set_sort(self, key: str | SortKey | None = None, reverse: bool = False) -> None:
        if isinstance(key, str):
            try:
                key = SORT_KEYS[key]
            except KeyError:
                raise ValueError(f"unknown sort key {key!r}") from None
        self._projection.set_sort(key, reverse)

    def visible_tasks(self) -> tuple[Task, ...]:
        return self._projection.items

    def summary(self) -> ProjectionSummary:
        return self._projection.summary

    def classify(self, task: Task, today: date | None = None) -> TaskTags:
        return classify(task, today)

    def load(self) -> LoadResult:
        try:
            result = self._storage.load()
        except PersistenceError:
            self._load_failed = True
            raise
        self._store.replace_all(result.tasks)
        self._load_failed = False
        return result

    def save(self) -> int:
        count = self._storage.save(self._store.tasks)
        self._load_failed = False
        return count

    def save_quietly(self) -> bool:
        """Save unless the last load failed, so an unread file is never overwritten."""
        if self._load_failed:
            logger.warning("Skipping save: the task file could not be loaded")
            return False
        try:
            self.save()
        except PersistenceError:
            logger.exception("Tasks were not saved")
            return False
        return True

    @staticmethod
    def _validate(description: str | None, priority: Priority | None) -> str:
        if description is None or not description.strip():
            raise ValidationError("Task description cannot be empty.")
        if "\n" in description or "\r" in description:
            raise ValidationError("Task description must fit on one line.")
        if not isinstance(priority, Priority):
            raise ValidationError("Please select a priority.")
        return description.strip()
