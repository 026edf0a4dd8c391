"""Registration of the built-in task types."""

from __future__ import annotations

import random
import time

from .manager import TaskManager
from .tasks import DEFAULT_TASK_TYPE, DefaultTaskFactory

_MINUTE = 60.0


def new_default_task_factory(rng: random.Random | None = None) -> DefaultTaskFactory:
    """Return a factory for the default task type with a 3 to 5 minute delay."""
    if rng is None:
        rng = random.Random(time.time_ns())
    delay = (3 + rng.randrange(3)) * _MINUTE
    return DefaultTaskFactory(rng=rng, delay=delay)


def register_task_factories(manager: TaskManager) -> None:
    """Register every available task factory with the manager."""
    manager.register_factory(DEFAULT_TASK_TYPE, new_default_task_factory())