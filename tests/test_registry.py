import random

import pytest

from taskrunner.manager import TaskManager, TaskUnknownTypeError
from taskrunner.model import Task, TaskStatus
from taskrunner.registry import new_default_task_factory, register_task_factories
from taskrunner.tasks import DEFAULT_TASK_TYPE, DefaultTask

ALLOWED_DELAYS = {180.0, 240.0, 300.0}


def test_factory_keeps_given_rng_and_picks_allowed_delay():
    rng = random.Random(7)
    factory = new_default_task_factory(rng)
    assert factory.rng is rng
    assert factory.delay in ALLOWED_DELAYS


def test_factory_without_rng_picks_allowed_delay():
    factory = new_default_task_factory()
    assert factory.delay in ALLOWED_DELAYS


@pytest.mark.parametrize("seed", [0, 1, 42, 1234])
def test_same_seed_gives_same_delay(seed):
    first = new_default_task_factory(random.Random(seed))
    second = new_default_task_factory(random.Random(seed))
    assert first.delay == second.delay


def test_delays_cover_whole_minutes_across_seeds():
    delays = {new_default_task_factory(random.Random(seed)).delay for seed in range(200)}
    assert delays == ALLOWED_DELAYS


def test_factory_builds_default_task_for_metadata():
    factory = new_default_task_factory(random.Random(3))
    meta = Task.create("abc", DEFAULT_TASK_TYPE)
    executable = factory.new(meta)
    assert isinstance(executable, DefaultTask)
    assert executable.meta is meta
    assert executable.delay == factory.delay


def test_register_task_factories_enables_default_type():
    manager = TaskManager()
    register_task_factories(manager)
    task = manager.create_task(DEFAULT_TASK_TYPE)
    assert task.type == DEFAULT_TASK_TYPE
    assert manager.get_task(task.id) is task
    assert task.status in (TaskStatus.PENDING, TaskStatus.RUNNING)


def test_register_task_factories_leaves_other_types_unknown():
    manager = TaskManager()
    register_task_factories(manager)
    with pytest.raises(TaskUnknownTypeError):
        manager.create_task("other")
    manager.close()