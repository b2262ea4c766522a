from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from todolist.config import DATA_FILE
from todolist.domain.entities import Task
from todolist.domain.errors import MalformedRecordError, PersistenceError

from .codec import decode_line, encode_task

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LineDiagnostic:
    line_number: int
    line: str
    reason: str


@dataclass
class LoadResult:
    tasks: list[Task] = field(default_factory=list)
    diagnostics: list[LineDiagnostic] = field(default_factory=list)

    @property
    def loaded(self) -> int:
        return len(self.tasks)

    @property
    def skipped(self) -> int:
        return len(self.diagnostics)


class TaskFileStorage:
    """Reads and writes the task file, one encoded task per line."""

    def __init__(self, path: str | Path = DATA_FILE) -> None:
        self.path = Path(path)

    def save(self, tasks: Iterable[Task]) -> int:
        count = 0
        try:
            with open(self.path, "w", encoding="utf-8", newline="") as handle:
                for task in tasks:
                    handle.write(encode_task(task))
                    handle.write("\n")
                    count += 1
        except OSError as exc:
            logger.error("Could not save tasks to %s: %s", self.path, exc)
            raise PersistenceError(f"Could not save tasks to {self.path}: {exc}") from exc
        logger.info("Saved %s tasks to %s", count, self.path)
        return count

    def load(self) -> LoadResult:
        result = LoadResult()
        if not self.path.exists():
            logger.info("No task file at %s, starting empty", self.path)
            return result

        try:
            with open(self.path, "rb") as handle:
                for line_number, raw in enumerate(handle, start=1):
                    self._load_line(result, line_number, raw)
        except OSError as exc:
            logger.error("Could not load tasks from %s: %s", self.path, exc)
            raise PersistenceError(f"Could not load tasks from {self.path}: {exc}") from exc

        logger.info(
            "Loaded %s tasks from %s (%s skipped)", result.loaded, self.path, result.skipped
        )
        return result

    def _load_line(self, result: LoadResult, line_number: int, raw: bytes) -> None:
        try:
            line = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            text = raw.decode("utf-8", errors="replace").rstrip("\r\n")
            self._skip(result, line_number, text, f"invalid UTF-8: {exc.reason}")
            return

        if not line.strip():
            return
        try:
            result.tasks.append(decode_line(line))
        except MalformedRecordError as exc:
            self._skip(result, line_number, line.rstrip("\r\n"), str(exc))

    def _skip(self, result: LoadResult, line_number: int, text: str, reason: str) -> None:
        logger.warning("Skipping malformed line %s in %s: %s", line_number, self.path, reason)
        result.diagnostics.append(LineDiagnostic(line_number, text, reason))
