from __future__ import annotations


class TodoError(Exception):
    """Base class for errors raised by the task tracker core."""


class ValidationError(TodoError, ValueError):
    """User input rejected before it reaches the store."""


class PersistenceError(TodoError):
    """The task file could not be read or written."""


class MalformedRecordError(TodoError, ValueError):
    """A persisted line could not be decoded into a task."""
