from __future__ import annotations

import csv
from datetime import date

from todolist.domain.entities import Task
from todolist.domain.enums import Priority
from todolist.domain.errors import MalformedRecordError

FIELD_COUNT = 5

BOOL_TEXT = {"true": True, "false": False}


def encode_task(task: Task) -> str:
    """Render one task as ``"description",done,PRIORITY,due,created``."""
    description = '"' + task.description.replace('"', '""') + '"'
    return ",".join(
        [
            description,
            "true" if task.done else "false",
            task.priority.value,
            task.due_date.isoformat() if task.due_date else "",
            task.creation_date.isoformat(),
        ]
    )


def decode_line(line: str) -> Task:
    """Parse one persisted line back into a new ``Task``.

    The description must be quoted and the creation date present. The
    stored creation date is validated but not restored: the decoded task
    is stamped with today's date.
    """
    if not line.startswith('"'):
        raise MalformedRecordError("description must be quoted")
    fields = split_fields(line)
    if len(fields) != FIELD_COUNT:
        raise MalformedRecordError(f"expected {FIELD_COUNT} fields, got {len(fields)}")

    description, done_text, priority_text, due_text, created_text = fields
    done = _parse_bool(done_text.strip())
    priority = _parse_priority(priority_text.strip())
    due_date = _parse_date(due_text.strip(), "due date")
    if _parse_date(created_text.strip(), "creation date") is None:
        raise MalformedRecordError("missing creation date")

    task = Task(description=description, priority=priority, due_date=due_date)
    task.done = done
    return task


def split_fields(line: str) -> list[str]:
    line = line.rstrip("\r\n")
    if not line:
        return []
    try:
        return next(csv.reader([line]), [])
    except csv.Error as exc:
        raise MalformedRecordError(str(exc)) from exc


def _parse_bool(value: str) -> bool:
    try:
        return BOOL_TEXT[value]
    except KeyError:
        raise MalformedRecordError(f"invalid done flag {value!r}") from None


def _parse_priority(value: str) -> Priority:
    try:
        return Priority[value]
    except KeyError:
        raise MalformedRecordError(f"unknown priority {value!r}") from None


def _parse_date(value: str, label: str) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise MalformedRecordError(f"invalid {label} {value!r}") from None
