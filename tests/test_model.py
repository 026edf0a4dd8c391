import json
from datetime import datetime

import pytest

from taskrunner.model import Task, TaskStatus


def test_create_sets_pending_status_and_identity():
    task = Task.create("abc", "default")
    assert task.id == "abc"
    assert task.type == "default"
    assert task.status is TaskStatus.PENDING
    assert task.duration == ""
    assert task.result == ""


def test_create_timestamp_is_aware_and_recent():
    before = datetime.now().astimezone()
    task = Task.create("abc", "default")
    after = datetime.now().astimezone()
    assert task.created_at.tzinfo is not None
    assert before <= task.created_at <= after


@pytest.mark.parametrize(
    "status, wire",
    [
        (TaskStatus.PENDING, "pending"),
        (TaskStatus.RUNNING, "running"),
        (TaskStatus.DONE, "done"),
        (TaskStatus.FAILED, "failed"),
    ],
)
def test_status_serialises_to_wire_name(status, wire):
    task = Task.create("abc", "default")
    task.status = status
    assert task.to_dict()["status"] == wire
    assert TaskStatus(wire) is status


def test_to_dict_omits_empty_optional_fields():
    task = Task.create("abc", "default")
    data = task.to_dict()
    assert set(data) == {"id", "type", "status", "created_at"}
    assert data["status"] == "pending"


def test_to_dict_includes_duration_and_result_when_set():
    task = Task.create("abc", "default")
    task.status = TaskStatus.DONE
    task.duration = "0s"
    task.result = "Task completed successfully"
    data = task.to_dict()
    assert data["status"] == "done"
    assert data["duration"] == "0s"
    assert data["result"] == "Task completed successfully"


def test_to_dict_is_json_serialisable_and_round_trips_timestamp():
    task = Task.create("abc", "default")
    decoded = json.loads(json.dumps(task.to_dict()))
    assert decoded["id"] == "abc"
    assert datetime.fromisoformat(decoded["created_at"]) == task.created_at