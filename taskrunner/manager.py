"""Task manager: creation, per-type sequential execution, lookup and deletion."""

from __future__ import annotations

import json
import secrets
import threading
import time
from collections import Counter, deque
from contextlib import contextmanager
from typing import Iterator

from .model import Task, TaskStatus
from .tasks import ExecutableTask, Factory

TASK_QUEUE_BUFFER_SIZE = 100
TASK_DURATION_UPDATE_INTERVAL = 0.5


class TaskError(Exception):
    """Base class for task manager errors."""

    reason = "task error"

    def __init__(self, context: str = "") -> None:
        super().__init__(f"{context}: {self.reason}" if context else self.reason)


class TaskNotFoundError(TaskError):
    reason = "task not found"


class TaskInProgressError(TaskError):
    reason = "task in progress"


class TaskAlreadyExistsError(TaskError):
    reason = "task already exists"


class TaskQueueLimitReachedError(TaskError):
    reason = "task queue limit reached"


class TaskUnknownTypeError(TaskError):
    reason = "task unknown type"


def _quote(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def format_duration(seconds: float) -> str:
    """Render a duration truncated to whole seconds, e.g. ``1h2m3s``."""
    total = int(seconds)
    sign = "-" if total < 0 else ""
    hours, rest = divmod(abs(total), 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{sign}{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{sign}{minutes}m{secs}s"
    return f"{sign}{secs}s"


class TaskManager:
    """Queues tasks per type and runs each type's tasks one at a time."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._wakeup = threading.Condition(self._lock)
        self._tasks: dict[str, Task] = {}
        self._factories: dict[str, Factory] = {}
        self._queues: dict[str, deque[Task]] = {}
        self._active: Counter[str] = Counter()
        self._workers: list[threading.Thread] = []
        self._closed = False

    def __enter__(self) -> TaskManager:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def register_factory(self, task_type: str, factory: Factory) -> None:
        """Register a task type and start its worker; later registrations are ignored."""
        with self._lock:
            if task_type in self._factories:
                return
            self._factories[task_type] = factory
            self._queues[task_type] = deque()
            worker = threading.Thread(
                target=self._worker_loop,
                args=(task_type,),
                name=f"task-worker-{task_type}",
                daemon=True,
            )
            self._workers.append(worker)
        worker.start()

    def create_task(self, task_type: str) -> Task:
        """Queue a new task of a known type, unless that type's queue is full."""
        if not task_type:
            raise TaskUnknownTypeError("cannot create task")

        context = f"cannot create task with type {_quote(task_type)}"
        with self._lock:
            if task_type not in self._factories:
                raise TaskUnknownTypeError(context)
            if self._active[task_type] >= TASK_QUEUE_BUFFER_SIZE:
                raise TaskQueueLimitReachedError(context)

            task_id = secrets.token_hex(16)
            if task_id in self._tasks:
                raise TaskAlreadyExistsError(f"cannot create task with ID {_quote(task_id)}")

            task = Task.create(task_id, task_type)
            self._tasks[task.id] = task
            self._queues[task_type].append(task)
            self._active[task_type] += 1
            self._wakeup.notify_all()
        return task

    def get_task(self, id: str) -> Task:
        """Return the task with the given ID."""
        with self._lock:
            task = self._tasks.get(id)
        if task is None:
            raise TaskNotFoundError(f"cannot find task with ID {_quote(id)}")
        return task

    def delete_task(self, id: str) -> None:
        """Remove a task that is not currently running."""
        context = f"cannot delete task with ID {_quote(id)}"
        with self._lock:
            task = self._tasks.get(id)
            if task is None:
                raise TaskNotFoundError(context)
            if task.status == TaskStatus.RUNNING:
                raise TaskInProgressError(context)
            del self._tasks[id]
            self._remove_from_queue(task)

    def close(self) -> None:
        """Stop the workers once their current task, if any, has finished."""
        with self._lock:
            self._closed = True
            self._wakeup.notify_all()
            workers = list(self._workers)
        for worker in workers:
            if worker is not threading.current_thread():
                worker.join()

    def _remove_from_queue(self, task: Task) -> None:
        queue = self._queues.get(task.type)
        if queue is None:
            return
        queued = next((item for item in queue if item.id == task.id), None)
        if queued is not None:
            queue.remove(queued)
            self._active[task.type] -= 1

    def _worker_loop(self, task_type: str) -> None:
        while True:
            with self._wakeup:
                queue = self._queues[task_type]
                while not queue and not self._closed:
                    self._wakeup.wait()
                if self._closed:
                    return
                task = queue.popleft()
                factory = self._factories[task_type]
                task.status = TaskStatus.RUNNING

            self._run_executable_task(task, factory.new(task))

            with self._lock:
                self._active[task.type] -= 1

    def _run_executable_task(self, task: Task, executable: ExecutableTask) -> None:
        error: Exception | None = None
        with self._track_duration(task, time.monotonic()):
            try:
                executable.run()
            except Exception as exc:
                error = exc
        self._finalize_task(task, error)

    @contextmanager
    def _track_duration(self, task: Task, start: float) -> Iterator[None]:
        stop = threading.Event()

        def tick() -> None:
            while not stop.wait(TASK_DURATION_UPDATE_INTERVAL):
                self._update_duration(task, start)

        ticker = threading.Thread(target=tick, daemon=True)
        ticker.start()
        try:
            yield
        finally:
            stop.set()
            ticker.join()
            self._update_duration(task, start)

    def _update_duration(self, task: Task, start: float) -> None:
        with self._lock:
            task.duration = format_duration(time.monotonic() - start)

    def _finalize_task(self, task: Task, error: Exception | None) -> None:
        with self._lock:
            if error is not None:
                task.status = TaskStatus.FAILED
                task.result = f"Task execution failed: {error}"
            else:
                task.status = TaskStatus.DONE
                task.result = "Task completed successfully"