"""Task metadata and lifecycle states."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class TaskStatus(str, Enum):
    """Current status of a task."""

    PENDING = "pending"
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"


def _now() -> datetime:
    return datetime.now().astimezone()


@dataclass
class Task:
    """Metadata about an asynchronous task's lifecycle and result."""

    id: str
    type: str
    status: TaskStatus = TaskStatus.PENDING
    created_at: datetime = field(default_factory=_now)
    duration: str = ""
    result: str = ""

    @classmethod
    def create(cls, id: str, task_type: str) -> Task:
        """Return a new pending task stamped with the current time."""
        return cls(id=id, type=task_type, status=TaskStatus.PENDING, created_at=_now())

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready mapping; empty duration and result are omitted."""
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "status": TaskStatus(self.status).value,
            "created_at": self.created_at.isoformat(),
        }
        if self.duration:
            data["duration"] = self.duration
        if self.result:
            data["result"] = self.result
        return data