# taskrunner

A small HTTP service that accepts tasks, queues them by type and runs them in
the background. Tasks of the same type run one after another, in the order
they were created. Each type holds at most 100 tasks that are waiting or
running. When that limit is reached, new tasks of that type are refused.

The package uses only the standard library.

## Installation

```
pip install .
```

## Running the server

```
taskrunner
taskrunner --host 127.0.0.1 --port 9000
```

By default the server listens on port 8080 on all interfaces. It logs when it
starts and when it stops. It shuts down gracefully on Ctrl+C or SIGTERM. The
command exits with status 1 if it cannot bind the address.

## HTTP API

| Method   | Path              | Description                       |
|----------|-------------------|-----------------------------------|
| `POST`   | `/tasks?type=...` | Create a task of the given type   |
| `GET`    | `/tasks/{id}`     | Show a task's status and result   |
| `DELETE` | `/tasks/{id}`     | Delete a task that is not running |

The only built-in type is `default`. Each of its tasks waits for a fixed delay
and then succeeds about 60% of the time. Otherwise it fails with
`simulated task failure`. The delay is 3, 4 or 5 minutes. It is chosen at
random once, when the server starts.

A task is returned as JSON:

```json
{
  "id": "3f2a9c0d4b5e6f718293a4b5c6d7e8f9",
  "type": "default",
  "status": "running",
  "created_at": "2024-01-01T12:00:00.000000+00:00",
  "duration": "1m12s"
}
```

- `status` is one of `pending`, `running`, `done` or `failed`.
- `duration` is given in whole seconds, such as `45s`, `1m12s` or `1h0m3s`. It is updated about every half second while the task runs.
- `result` appears once the task has finished. It is either `Task completed successfully` or `Task execution failed: <reason>`.

### Status codes

- `201` for a created task, `200` for a fetched task, `204` for a deleted one
- `400` for a missing or unknown task type
- `404` for an unknown task id, or for any path outside `/tasks`
- `409` when deleting a running task
- `429` when the queue for that type is full
- `405` for any other method on a task path

Error responses are plain text with the error message.

Example:

```
curl -X POST 'http://localhost:8080/tasks?type=default'
curl http://localhost:8080/tasks/<id>
curl -X DELETE http://localhost:8080/tasks/<id>
```

## Using the library

- `taskrunner.manager.TaskManager` queues and runs the tasks.
- `taskrunner.api` provides `TaskHandler` and `TaskRouter`. A `TaskRouter` is a WSGI application. Its `dispatch(method, path, query)` method returns a `Response` directly.
- `taskrunner.server.build_server(manager, host, port)` returns a ready `wsgiref` server.

You can add your own task types. Pass `TaskManager.register_factory` a
`Factory` whose `new(task)` returns an `ExecutableTask`. That object's `run()`
method does the work and raises an exception if the work fails.

```python
from taskrunner.manager import TaskManager
from taskrunner.tasks import ExecutableTask, Factory


class Echo(ExecutableTask):
    def run(self):
        print("working")


class EchoFactory(Factory):
    def new(self, task):
        return Echo()


with TaskManager() as manager:
    manager.register_factory("echo", EchoFactory())
    task = manager.create_task("echo")
    print(manager.get_task(task.id).to_dict())
```

Errors from the manager are subclasses of `TaskError`:

- `TaskNotFoundError`
- `TaskInProgressError`
- `TaskAlreadyExistsError`
- `TaskQueueLimitReachedError`
- `TaskUnknownTypeError`

`TaskManager.close()`, which is also called when the `with` block ends, stops
the workers. It first waits for any task that is running to finish. Tasks that
are still queued are left pending.

## Limitations

- Tasks are held in memory only. They are lost when the process stops.
- There is no endpoint to list tasks.
- A pending task cannot be cancelled except by deleting it.

## Development

```
pip install -e '.[test]'
pytest
```