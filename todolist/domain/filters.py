from __future__ import annotations

from dataclasses import dataclass

from .entities import Task
from .enums import FilterMode


@dataclass(frozen=True)
class TaskFilters:
    mode: FilterMode = FilterMode.ALL

    def matches(self, task: Task) -> bool:
        if self.mode == FilterMode.ACTIVE:
            return not task.done
        if self.mode == FilterMode.COMPLETED:
            return task.done
        return True
