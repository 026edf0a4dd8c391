"""Executable task kinds and the factories that build them."""

from __future__ import annotations

import random
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Protocol

from .model import Task

DEFAULT_TASK_TYPE = "default"

_SUCCESS_THRESHOLD = 60


class _IntSource(Protocol):
    def randrange(self, stop: int) -> int: ...


class TaskExecutionError(Exception):
    """Raised when a task's work fails."""


class ExecutableTask(ABC):
    """A unit of work that can be run; it raises on failure."""

    @abstractmethod
    def run(self) -> None:
        """Execute the task logic."""


class Factory(ABC):
    """Builds executable tasks of one type."""

    @abstractmethod
    def new(self, task: Task) -> ExecutableTask:
        """Create an executable task for the given metadata."""


class DefaultTask(ExecutableTask):
    """Simulated work: a fixed delay followed by a random failure chance."""

    def __init__(
        self,
        meta: Task,
        rng: _IntSource,
        delay: float,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.meta = meta
        self.rng = rng
        self.delay = delay
        self._sleep = sleep

    def run(self) -> None:
        """Sleep for the delay, then fail in about 40% of cases."""
        self._sleep(self.delay)
        if self.rng.randrange(100) >= _SUCCESS_THRESHOLD:
            raise TaskExecutionError("simulated task failure")


@dataclass
class DefaultTaskFactory(Factory):
    """Creates DefaultTask instances sharing one RNG and delay."""

    rng: _IntSource = random.Random()
    delay: float = 0.0
    sleep: Callable[[float], None] = time.sleep

    def new(self, task: Task) -> ExecutableTask:
        return DefaultTask(task, self.rng, self.delay, self.sleep)