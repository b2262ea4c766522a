from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from .entities import Task
from .enums import Priority

DUE_SOON_DAYS = 3


@dataclass(frozen=True)
class TaskTags:
    completed: bool
    priority_tier: Priority
    overdue: bool
    due_soon: bool

    def style_classes(self) -> list[str]:
        classes = [f"priority-{self.priority_tier.value.lower()}"]
        if self.completed:
            classes.append("completed")
        if self.overdue:
            classes.append("overdue")
        if self.due_soon:
            classes.append("due-soon")
        return classes


def classify(task: Task, today: date | None = None) -> TaskTags:
    """Derive the display tags of ``task`` as of ``today``.

    Due-date tags only apply to unfinished tasks that have a due date.
    A task due today counts as due soon, never as overdue.
    """
    today = today or date.today()
    completed = bool(task.done)
    overdue = False
    due_soon = False

    if not completed and task.due_date is not None:
        overdue = task.due_date < today
        if not overdue:
            due_soon = task.due_date <= today + timedelta(days=DUE_SOON_DAYS)

    return TaskTags(
        completed=completed,
        priority_tier=task.priority,
        overdue=overdue,
        due_soon=due_soon,
    )
