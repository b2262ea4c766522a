from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Optional

from .enums import Priority

TaskListener = Callable[["Task", str], None]

MUTABLE_FIELDS = frozenset({"description", "priority", "due_date", "done"})

_MISSING = object()


@dataclass(eq=False)
class Task:
    """A single to-do record.

    Tasks compare by identity: two tasks with the same field values are
    still different records. Changes to the mutable fields are pushed to
    subscribers as ``listener(task, field_name)``.
    """

    description: str
    priority: Priority
    due_date: Optional[date] = None
    done: bool = False
    creation_date: date = field(default_factory=date.today)
    _listeners: list[TaskListener] = field(default_factory=list, init=False, repr=False)

    def __setattr__(self, name: str, value) -> None:
        if name == "creation_date" and "creation_date" in self.__dict__:
            raise AttributeError("creation_date is read-only")
        if name == "priority" and not isinstance(value, Priority):
            raise ValueError(f"priority must be a Priority, got {value!r}")

        previous = self.__dict__.get(name, _MISSING)
        object.__setattr__(self, name, value)

        if name in MUTABLE_FIELDS and previous is not _MISSING and previous != value:
            for listener in list(self.__dict__.get("_listeners", ())):
                listener(self, name)

    def subscribe(self, listener: TaskListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: TaskListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass
