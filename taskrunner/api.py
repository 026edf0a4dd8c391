"""HTTP handling for the task endpoints: responses, handlers and routing."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Callable, Iterable
from urllib.parse import parse_qs

from .manager import (
    TaskAlreadyExistsError,
    TaskError,
    TaskInProgressError,
    TaskManager,
    TaskNotFoundError,
    TaskQueueLimitReachedError,
    TaskUnknownTypeError,
)

ERR_INTERNAL_SERVER = "internal server error"
ERR_METHOD_NOT_ALLOWED = "method not allowed"
ERR_PAGE_NOT_FOUND = "404 page not found"

_TASKS_PATH = "/tasks"
_TASK_PREFIX = "/tasks/"

_JSON_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


@dataclass
class Response:
    """An HTTP response: status code, headers and body."""

    status: int
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: bytes = b""


def _encode_json(data: Any) -> bytes:
    payload = data.to_dict() if hasattr(data, "to_dict") else data
    text = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    text = "".join(_JSON_ESCAPES.get(char, char) for char in text)
    return (text + "\n").encode("utf-8")


def respond_json(status: int, data: Any) -> Response:
    """Return a JSON response with the given status code and data."""
    return Response(
        status=status,
        headers=[("Content-Type", "application/json")],
        body=_encode_json(data),
    )


def respond_no_content(status: int) -> Response:
    """Return a response with the given status code and no body."""
    return Response(status=status)


def respond_error(status: int, message: str) -> Response:
    """Return a plain-text error response."""
    return Response(
        status=status,
        headers=[
            ("Content-Type", "text/plain; charset=utf-8"),
            ("X-Content-Type-Options", "nosniff"),
        ],
        body=(message + "\n").encode("utf-8"),
    )


def _error_response(error: TaskError, statuses: dict[type[TaskError], HTTPStatus]) -> Response:
    for kind, status in statuses.items():
        if isinstance(error, kind):
            return respond_error(status, str(error))
    return respond_error(HTTPStatus.INTERNAL_SERVER_ERROR, ERR_INTERNAL_SERVER)


def _task_id(path: str) -> str:
    return path[len(_TASK_PREFIX):] if path.startswith(_TASK_PREFIX) else path


class TaskHandler:
    """Handles requests for task management operations."""

    def __init__(self, manager: TaskManager) -> None:
        self.manager = manager

    def create(self, query: str) -> Response:
        """Handle ``POST /tasks?type=...`` by queueing a new task."""
        task_type = parse_qs(query, keep_blank_values=True).get("type", [""])[0]
        try:
            task = self.manager.create_task(task_type)
        except TaskError as error:
            return _error_response(
                error,
                {
                    TaskUnknownTypeError: HTTPStatus.BAD_REQUEST,
                    TaskAlreadyExistsError: HTTPStatus.CONFLICT,
                    TaskQueueLimitReachedError: HTTPStatus.TOO_MANY_REQUESTS,
                },
            )
        return respond_json(HTTPStatus.CREATED, task)

    def get(self, path: str) -> Response:
        """Handle ``GET /tasks/{id}`` by returning the task's details."""
        try:
            task = self.manager.get_task(_task_id(path))
        except TaskError as error:
            return _error_response(error, {TaskNotFoundError: HTTPStatus.NOT_FOUND})
        return respond_json(HTTPStatus.OK, task)

    def delete(self, path: str) -> Response:
        """Handle ``DELETE /tasks/{id}`` by removing a task that is not running."""
        try:
            self.manager.delete_task(_task_id(path))
        except TaskError as error:
            return _error_response(
                error,
                {
                    TaskNotFoundError: HTTPStatus.NOT_FOUND,
                    TaskInProgressError: HTTPStatus.CONFLICT,
                },
            )
        return respond_no_content(HTTPStatus.NO_CONTENT)


class TaskRouter:
    """Routes task requests to the handler; also usable as a WSGI application."""

    def __init__(self, handler: TaskHandler) -> None:
        self.handler = handler

    def dispatch(self, method: str, path: str, query: str = "") -> Response:
        """Return the response for one request."""
        if path == _TASKS_PATH:
            if method == "POST":
                return self.handler.create(query)
            return respond_error(HTTPStatus.METHOD_NOT_ALLOWED, ERR_METHOD_NOT_ALLOWED)

        if path.startswith(_TASK_PREFIX):
            if method == "GET":
                return self.handler.get(path)
            if method == "DELETE":
                return self.handler.delete(path)
            return respond_error(HTTPStatus.METHOD_NOT_ALLOWED, ERR_METHOD_NOT_ALLOWED)

        return respond_error(HTTPStatus.NOT_FOUND, ERR_PAGE_NOT_FOUND)

    def __call__(
        self,
        environ: dict[str, Any],
        start_response: Callable[[str, list[tuple[str, str]]], Any],
    ) -> Iterable[bytes]:
        raw_path = environ.get("PATH_INFO", "") or "/"
        path = raw_path.encode("latin-1").decode("utf-8", "replace")
        response = self.dispatch(
            environ.get("REQUEST_METHOD", "GET"),
            path,
            environ.get("QUERY_STRING", ""),
        )
        headers = list(response.headers)
        if response.body:
            headers.append(("Content-Length", str(len(response.body))))
        status = HTTPStatus(response.status)
        start_response(f"{status.value} {status.phrase}", headers)
        return [response.body]


def init_task_router(task_handler: TaskHandler) -> TaskRouter:
    """Return the router serving the task endpoints."""
    return TaskRouter(task_handler)