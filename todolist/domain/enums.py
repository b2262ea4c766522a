from __future__ import annotations

from enum import StrEnum


class Priority(StrEnum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class FilterMode(StrEnum):
    ALL = "All"
    ACTIVE = "Active"
    COMPLETED = "Completed"
