import pytest

from taskrunner.model import Task
from taskrunner.tasks import (
    DEFAULT_TASK_TYPE,
    DefaultTask,
    DefaultTaskFactory,
    ExecutableTask,
    Factory,
    TaskExecutionError,
)


class _FixedRng:
    def __init__(self, value):
        self.value = value
        self.calls = []

    def randrange(self, stop):
        self.calls.append(stop)
        return self.value


class _SleepRecorder:
    def __init__(self):
        self.delays = []

    def __call__(self, seconds):
        self.delays.append(seconds)


def test_default_task_type_is_carried_into_task_metadata():
    factory = DefaultTaskFactory(rng=_FixedRng(0), delay=0.0, sleep=_SleepRecorder())
    built = factory.new(Task.create("id", DEFAULT_TASK_TYPE))
    assert built.meta.to_dict()["type"] == "default"


def test_default_task_succeeds_below_threshold():
    sleep = _SleepRecorder()
    rng = _FixedRng(59)
    task = DefaultTask(Task.create("id", DEFAULT_TASK_TYPE), rng, 1.5, sleep)
    assert task.run() is None
    assert sleep.delays == [1.5]
    assert rng.calls == [100]


@pytest.mark.parametrize("value", [60, 99])
def test_default_task_fails_at_or_above_threshold(value):
    sleep = _SleepRecorder()
    task = DefaultTask(Task.create("id", DEFAULT_TASK_TYPE), _FixedRng(value), 0.0, sleep)
    with pytest.raises(TaskExecutionError, match="simulated task failure"):
        task.run()
    assert sleep.delays == [0.0]


def test_factory_builds_task_with_its_configuration():
    rng = _FixedRng(0)
    sleep = _SleepRecorder()
    factory = DefaultTaskFactory(rng=rng, delay=2.0, sleep=sleep)
    meta = Task.create("id", DEFAULT_TASK_TYPE)
    built = factory.new(meta)
    assert isinstance(built, DefaultTask)
    assert built.meta is meta
    assert built.rng is rng
    assert built.delay == 2.0
    built.run()
    assert sleep.delays == [2.0]


def test_abstract_interfaces_cannot_be_instantiated():
    with pytest.raises(TypeError):
        ExecutableTask()
    with pytest.raises(TypeError):
        Factory()